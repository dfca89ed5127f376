"""Answer validation per question kind.

Each check takes a question and the raw submitted value and returns an
:class:`AnswerCheck`. Nothing here raises on bad input; the caller decides
whether a rejected answer aborts the submission.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from molecula.surveys.payloads import AnswerPayload, Number, OptionRef, Text
from molecula.surveys.schema import SCALE_MAX, SCALE_MIN, QuestionSpec

REQUIRED = "An answer is required."
NOT_AN_OPTION = "Selected option does not belong to this question."
OUT_OF_RANGE = f"Rating must be a whole number from {SCALE_MIN} to {SCALE_MAX}."


@dataclass(frozen=True)
class AnswerCheck:
    present: bool
    payloads: tuple[AnswerPayload, ...] = ()
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


ABSENT = AnswerCheck(present=False)


def is_blank(raw: object) -> bool:
    if raw is None:
        return True
    if isinstance(raw, str):
        return not raw.strip()
    return False


def as_values(raw: object) -> list[object]:
    """Normalize a raw multi-value submission to its non-blank members."""
    if raw is None:
        return []
    if isinstance(raw, (list, tuple, set, frozenset)):
        items: Iterable[object] = raw
    else:
        items = [raw]
    return [item for item in items if not is_blank(item)]


def coerce_scale(raw: object) -> int | None:
    """Return ``raw`` as a rating in range, or None when it is not one."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, float):
        if not raw.is_integer():
            return None
        value = int(raw)
    elif isinstance(raw, str):
        try:
            value = int(raw.strip())
        except ValueError:
            return None
    else:
        return None
    if SCALE_MIN <= value <= SCALE_MAX:
        return value
    return None


def coerce_option_id(raw: object) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            return None
    return None


def _absent(question: QuestionSpec) -> AnswerCheck:
    if question.required:
        return AnswerCheck(present=False, error=REQUIRED)
    return ABSENT


def check_text(question: QuestionSpec, raw: object) -> AnswerCheck:
    text = "" if raw is None else str(raw).strip()
    if not text:
        return _absent(question)
    return AnswerCheck(present=True, payloads=(Text(text),))


def check_scale(question: QuestionSpec, raw: object) -> AnswerCheck:
    if is_blank(raw):
        return _absent(question)
    value = coerce_scale(raw)
    if value is None:
        return AnswerCheck(present=True, error=OUT_OF_RANGE)
    return AnswerCheck(present=True, payloads=(Number(value),))


def check_single(question: QuestionSpec, raw: object) -> AnswerCheck:
    if is_blank(raw):
        return _absent(question)
    option_id = coerce_option_id(raw)
    if option_id is None or option_id not in question.option_ids:
        return AnswerCheck(present=True, error=NOT_AN_OPTION)
    return AnswerCheck(present=True, payloads=(OptionRef(option_id),))


def check_multi(question: QuestionSpec, raw: object) -> AnswerCheck:
    values = as_values(raw)
    if not values:
        return _absent(question)
    allowed = question.option_ids
    selected: list[int] = []
    for value in values:
        option_id = coerce_option_id(value)
        if option_id is None or option_id not in allowed:
            return AnswerCheck(present=True, error=NOT_AN_OPTION)
        if option_id not in selected:
            selected.append(option_id)
    return AnswerCheck(
        present=True, payloads=tuple(OptionRef(option_id) for option_id in selected)
    )
