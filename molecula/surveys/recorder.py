"""Recording of one respondent's submission.

A submission is all-or-nothing. The response row and every answer row are
written inside a single store transaction, so a duplicate, a closed survey or
a rejected answer leaves nothing behind and the respondent may try again after
fixing a rejected answer.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from molecula.surveys.branching import BranchingEvaluator
from molecula.surveys.errors import (
    DuplicateSubmission,
    SurveyClosed,
    SurveyError,
    ValidationFailure,
)
from molecula.surveys.kinds import validate_answer
from molecula.surveys.payloads import AnswerPayload
from molecula.surveys.schema import QuestionSpec
from molecula.surveys.store import SurveyStore

logger = logging.getLogger(__name__)


class RecorderState(StrEnum):
    STARTED = "started"
    VALIDATING = "validating"
    REJECTED = "rejected"
    RECORDING = "recording"
    COMPLETE = "complete"


@dataclass(frozen=True)
class SubmissionOutcome:
    state: RecorderState
    response_id: int | None = None
    error: SurveyError | None = None
    skipped: frozenset[int] = frozenset()

    @property
    def ok(self) -> bool:
        return self.state is RecorderState.COMPLETE

    @property
    def is_duplicate(self) -> bool:
        return isinstance(self.error, DuplicateSubmission)


class ResponseRecorder:
    def __init__(self, store: SurveyStore, clock: Callable[[], datetime]) -> None:
        self.store = store
        self.clock = clock
        self.state = RecorderState.STARTED

    def record(
        self,
        survey_id: int,
        respondent_id: int,
        answers: Mapping[int, object],
    ) -> SubmissionOutcome:
        """Record ``answers`` (question id to raw value) for one respondent.

        Duplicate, closed and validation conditions come back as a rejected
        outcome. StoreFailure propagates.
        """
        self.state = RecorderState.STARTED
        survey = self.store.get_survey(survey_id)
        if survey.is_closed(self.clock()):
            return self._reject(SurveyClosed(survey_id))

        try:
            with self.store.atomic():
                response_id = self.store.create_response(survey_id, respondent_id)
                questions = list(self.store.list_questions(survey_id))
                self.state = RecorderState.VALIDATING
                rows, skipped = self._collect(questions, answers)
                self.state = RecorderState.RECORDING
                for question_id, payload in rows:
                    self.store.insert_answer(response_id, question_id, payload)
        except (DuplicateSubmission, ValidationFailure) as exc:
            return self._reject(exc)

        self.state = RecorderState.COMPLETE
        logger.info(
            "Recorded response %s for survey %s (%d answers, %d skipped)",
            response_id,
            survey_id,
            len(rows),
            len(skipped),
        )
        return SubmissionOutcome(
            state=self.state,
            response_id=response_id,
            skipped=frozenset(questions[index].id for index in skipped),
        )

    def _collect(
        self, questions: list[QuestionSpec], answers: Mapping[int, object]
    ) -> tuple[list[tuple[int, AnswerPayload]], frozenset[int]]:
        branching = BranchingEvaluator(len(questions))
        rows: list[tuple[int, AnswerPayload]] = []
        for index, question in enumerate(questions):
            if branching.is_skipped(index):
                continue
            check = validate_answer(question, answers.get(question.id))
            if check.error is not None:
                raise ValidationFailure(question.id, question.position, check.error)
            rows.extend((question.id, payload) for payload in check.payloads)
            branching.observe(index, check.present, question.next_question_order)
        return rows, branching.skipped

    def _reject(self, error: SurveyError) -> SubmissionOutcome:
        self.state = RecorderState.REJECTED
        logger.info("Submission rejected: %s", error)
        return SubmissionOutcome(state=self.state, error=error)
