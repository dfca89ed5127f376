"""Answer payloads.

An answer carries exactly one value: free text, a scale number or a reference
to a selected option. The three shapes are kept as separate frozen types so a
payload can never hold two values at once.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Text:
    value: str


@dataclass(frozen=True)
class Number:
    value: int


@dataclass(frozen=True)
class OptionRef:
    option_id: int


AnswerPayload = Text | Number | OptionRef
