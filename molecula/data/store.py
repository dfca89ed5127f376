import functools
import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import ParamSpec, TypeVar

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Avg, Count, Prefetch

from molecula.data.models import Answer, Option, Question, Response, Survey
from molecula.surveys.errors import DuplicateSubmission, StoreFailure, SurveyNotFound
from molecula.surveys.payloads import AnswerPayload
from molecula.surveys.schema import OptionSpec, QuestionSpec, SurveySpec
from molecula.surveys.store import AnswerRecord, ResponseRecord, ScaleStats, TextSample

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def _store_call(func: Callable[P, R]) -> Callable[P, R]:
    """Turn database errors raised by ``func`` into StoreFailure."""

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return func(*args, **kwargs)
        except DatabaseError as exc:
            logger.error("Store call %s failed", func.__name__, exc_info=True)
            raise StoreFailure(f"{func.__name__} failed") from exc

    return wrapper


def option_spec(option: Option) -> OptionSpec:
    return OptionSpec(
        id=option.pk,
        text=option.text,  # pyright: ignore[reportUnknownMemberType, reportArgumentType]
        position=option.position,  # pyright: ignore[reportUnknownMemberType, reportArgumentType]
    )


def question_spec(question: Question) -> QuestionSpec:
    """Build the engine view of a question. Options must be prefetched."""
    return QuestionSpec(
        id=question.pk,
        position=question.position,  # pyright: ignore[reportUnknownMemberType, reportArgumentType]
        text=question.text,  # pyright: ignore[reportUnknownMemberType, reportArgumentType]
        kind=question.kind,  # pyright: ignore[reportUnknownMemberType, reportArgumentType]
        required=question.required,  # pyright: ignore[reportUnknownMemberType, reportArgumentType]
        next_question_order=question.next_question_order,  # pyright: ignore[reportUnknownMemberType, reportArgumentType]
        options=tuple(option_spec(o) for o in question.options.all()),  # pyright: ignore[reportUnknownMemberType, reportAttributeAccessIssue, reportUnknownArgumentType, reportUnknownVariableType]
    )


def survey_spec(survey: Survey) -> SurveySpec:
    return SurveySpec(
        id=survey.pk,
        owner_id=survey.owner_id,  # pyright: ignore[reportUnknownMemberType, reportAttributeAccessIssue]
        title=survey.title,  # pyright: ignore[reportUnknownMemberType, reportArgumentType]
        description=survey.description,  # pyright: ignore[reportUnknownMemberType, reportArgumentType]
        deadline=survey.deadline,  # pyright: ignore[reportUnknownMemberType, reportArgumentType]
        is_anonymous=survey.is_anonymous,  # pyright: ignore[reportUnknownMemberType, reportArgumentType]
    )


class DjangoSurveyStore:
    """SurveyStore backed by the Django ORM and the default database."""

    @contextmanager
    def atomic(self) -> Iterator[None]:
        try:
            with transaction.atomic():
                yield
        except DatabaseError as exc:
            logger.error("Transaction failed", exc_info=True)
            raise StoreFailure("transaction failed") from exc

    @_store_call
    def get_survey(self, survey_id: int) -> SurveySpec:
        try:
            survey = Survey.objects.get(pk=survey_id)
        except Survey.DoesNotExist:
            raise SurveyNotFound(survey_id) from None
        return survey_spec(survey)

    @_store_call
    def create_response(self, survey_id: int, respondent_id: int) -> int:
        try:
            # Savepoint so a lost race leaves the outer transaction usable.
            with transaction.atomic():
                response = Response.objects.create(
                    survey_id=survey_id, respondent_id=respondent_id
                )
        except IntegrityError:
            # Only the one-response rule makes this a duplicate.
            if Response.objects.filter(
                survey_id=survey_id, respondent_id=respondent_id
            ).exists():
                raise DuplicateSubmission(survey_id, respondent_id) from None
            raise
        return response.pk

    @_store_call
    def insert_answer(
        self, response_id: int, question_id: int, payload: AnswerPayload
    ) -> None:
        Answer.objects.create(
            response_id=response_id,
            question_id=question_id,
            **Answer.fields_for(payload),
        )

    @_store_call
    def list_questions(self, survey_id: int) -> list[QuestionSpec]:
        questions = (
            Question.objects.filter(survey_id=survey_id)
            .prefetch_related(Prefetch("options", queryset=Option.objects.order_by("position")))
            .order_by("position")
        )
        return [question_spec(q) for q in questions]

    @_store_call
    def list_options(self, question_id: int) -> list[OptionSpec]:
        return [
            option_spec(o)
            for o in Option.objects.filter(question_id=question_id).order_by("position")
        ]

    @_store_call
    def count_answers_by_option(self, question_id: int) -> dict[int, int]:
        rows = (
            Answer.objects.filter(question_id=question_id, option__isnull=False)
            .values("option_id")
            .annotate(total=Count("id"))
            .order_by()
        )
        return {row["option_id"]: row["total"] for row in rows}

    @_store_call
    def scale_stats(self, question_id: int) -> ScaleStats:
        answers = Answer.objects.filter(question_id=question_id, number_value__isnull=False)
        summary = answers.aggregate(average=Avg("number_value"), count=Count("id"))
        per_value = answers.values("number_value").annotate(total=Count("id")).order_by()
        return ScaleStats(
            average=summary["average"],
            count=summary["count"],
            per_value_counts={row["number_value"]: row["total"] for row in per_value},
        )

    @_store_call
    def recent_text_answers(self, question_id: int, limit: int) -> list[TextSample]:
        answers = (
            Answer.objects.filter(question_id=question_id, text_value__isnull=False)
            .select_related("response__respondent")
            .order_by("-response__submitted_at", "-pk")[:limit]
        )
        return [
            TextSample(
                text=a.text_value,  # pyright: ignore[reportUnknownMemberType, reportArgumentType]
                respondent=a.response.respondent.display_name,  # pyright: ignore[reportUnknownMemberType, reportAttributeAccessIssue]
                submitted_at=a.response.submitted_at,  # pyright: ignore[reportUnknownMemberType, reportAttributeAccessIssue]
            )
            for a in answers
        ]

    @_store_call
    def list_responses(self, survey_id: int) -> list[ResponseRecord]:
        responses = (
            Response.objects.filter(survey_id=survey_id)
            .select_related("respondent")
            .order_by("submitted_at", "pk")
        )
        return [
            ResponseRecord(
                id=r.pk,
                respondent=r.respondent.display_name,  # pyright: ignore[reportUnknownMemberType, reportUnknownArgumentType]
                submitted_at=r.submitted_at,  # pyright: ignore[reportUnknownMemberType, reportArgumentType]
            )
            for r in responses
        ]

    @_store_call
    def list_answers(self, survey_id: int) -> list[AnswerRecord]:
        answers = Answer.objects.filter(response__survey_id=survey_id).order_by("pk")
        return [
            AnswerRecord(
                response_id=a.response_id,  # pyright: ignore[reportUnknownMemberType, reportAttributeAccessIssue]
                question_id=a.question_id,  # pyright: ignore[reportUnknownMemberType, reportAttributeAccessIssue]
                payload=a.payload,
            )
            for a in answers
        ]
