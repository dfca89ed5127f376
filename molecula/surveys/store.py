from collections.abc import Sequence
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from molecula.surveys.payloads import AnswerPayload
from molecula.surveys.schema import OptionSpec, QuestionSpec, SurveySpec


@dataclass(frozen=True)
class ScaleStats:
    average: float | None
    count: int
    per_value_counts: dict[int, int] = field(default_factory=dict)


@dataclass(frozen=True)
class TextSample:
    text: str
    respondent: str | None
    submitted_at: datetime


@dataclass(frozen=True)
class ResponseRecord:
    id: int
    respondent: str
    submitted_at: datetime


@dataclass(frozen=True)
class AnswerRecord:
    response_id: int
    question_id: int
    payload: AnswerPayload


class SurveyStore(Protocol):
    """Persistence operations the response engine depends on."""

    def atomic(self) -> AbstractContextManager[None]:
        """Run the enclosed block in one transaction; roll back on any exception."""
        ...

    def get_survey(self, survey_id: int) -> SurveySpec: ...

    def create_response(self, survey_id: int, respondent_id: int) -> int:
        """Create the response row and return its id.

        Raises DuplicateSubmission when the respondent already responded.
        """
        ...

    def insert_answer(
        self, response_id: int, question_id: int, payload: AnswerPayload
    ) -> None: ...

    def list_questions(self, survey_id: int) -> Sequence[QuestionSpec]: ...

    def list_options(self, question_id: int) -> Sequence[OptionSpec]: ...

    def count_answers_by_option(self, question_id: int) -> dict[int, int]: ...

    def scale_stats(self, question_id: int) -> ScaleStats: ...

    def recent_text_answers(self, question_id: int, limit: int) -> Sequence[TextSample]: ...

    def list_responses(self, survey_id: int) -> Sequence[ResponseRecord]: ...

    def list_answers(self, survey_id: int) -> Sequence[AnswerRecord]: ...
