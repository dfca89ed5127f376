from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


class QuestionKind(StrEnum):
    TEXT = "text"
    SINGLE = "single"
    MULTI = "multi"
    SCALE = "scale"


SCALE_MIN = 1
SCALE_MAX = 5


@dataclass(frozen=True)
class OptionSpec:
    id: int
    text: str
    position: int


@dataclass(frozen=True)
class QuestionSpec:
    """A stored question as seen by the engine.

    ``position`` is 0-based. ``next_question_order`` is the 1-based position
    to jump to when this question is answered; ``None`` or ``0`` means the
    survey continues with the next question.
    """

    id: int
    position: int
    text: str
    kind: str
    required: bool = False
    next_question_order: int | None = None
    options: tuple[OptionSpec, ...] = ()

    @property
    def option_ids(self) -> frozenset[int]:
        return frozenset(option.id for option in self.options)


@dataclass(frozen=True)
class SurveySpec:
    id: int
    owner_id: int
    title: str
    description: str = ""
    deadline: datetime | None = None
    is_anonymous: bool = False

    @property
    def has_deadline(self) -> bool:
        return self.deadline is not None

    def is_closed(self, now: datetime) -> bool:
        return self.deadline is not None and self.deadline <= now


@dataclass
class QuestionDraft:
    """A question submitted for a survey that has not been created yet."""

    text: str
    kind: str
    required: bool = False
    next_question_order: int | None = None
    options: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "QuestionDraft":
        raw_options = data.get("options") or []
        if not isinstance(raw_options, list):
            raise TypeError("options must be a list")
        required = data.get("required", False)
        if not isinstance(required, bool):
            raise ValueError("required must be true or false")
        return cls(
            text=str(data.get("text") or "").strip(),
            kind=str(data.get("kind") or ""),
            required=required,
            next_question_order=_branch_target(data.get("next_question_order")),
            options=[
                text for text in (str(item or "").strip() for item in raw_options) if text
            ],
        )


def _branch_target(raw: object) -> int | None:
    """Read a 1-based jump target. Only whole numbers are accepted."""
    if raw is None or raw == "":
        return None
    if isinstance(raw, bool):
        raise ValueError("next_question_order must be a whole number")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            raise ValueError("next_question_order must be a whole number") from None
    raise ValueError("next_question_order must be a whole number")
