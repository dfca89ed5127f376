import logging
from collections.abc import Sequence
from datetime import datetime

from django.db import transaction
from django.utils import timezone

from molecula.data.models import Option, Question, Survey
from molecula.data.models.user import User
from molecula.surveys.branching import check_branch_target
from molecula.surveys.errors import SurveyDefinitionError
from molecula.surveys.kinds import strategy_for
from molecula.surveys.schema import QuestionDraft

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 140
OPTION_MAX_LENGTH = 255


def validate_question_drafts(questions: Sequence[QuestionDraft]) -> None:
    """Check question definitions and branch targets before anything is stored."""
    if not questions:
        raise SurveyDefinitionError("A survey needs at least one question.")
    total = len(questions)
    for index, draft in enumerate(questions):
        if not draft.text:
            raise SurveyDefinitionError(f"Question {index + 1} has no text.")
        strategy_for(draft.kind).check_definition(draft)
        check_branch_target(index, draft.next_question_order, total)


def create_survey(
    owner: User,
    title: str,
    questions: Sequence[QuestionDraft],
    description: str = "",
    deadline: datetime | None = None,
    is_anonymous: bool = False,
) -> Survey:
    """Create a survey together with its questions and options.

    The survey is immutable once created. Raises SurveyDefinitionError (a
    ValueError) for an invalid definition, MalformedBranchingRule for a branch
    target that is not strictly forward and within the survey.
    """
    title = title.strip()
    if not title:
        raise SurveyDefinitionError("A survey needs a title.")
    if len(title) > TITLE_MAX_LENGTH:
        raise SurveyDefinitionError(
            f"Title must be at most {TITLE_MAX_LENGTH} characters."
        )
    if deadline is not None and deadline <= timezone.now():
        raise SurveyDefinitionError("The deadline must be in the future.")
    validate_question_drafts(questions)

    with transaction.atomic():
        survey: Survey = Survey.objects.create(
            owner=owner,
            title=title,
            description=description.strip(),
            deadline=deadline,
            is_anonymous=is_anonymous,
        )
        for position, draft in enumerate(questions):
            question: Question = Question.objects.create(
                survey=survey,
                position=position,
                text=draft.text,
                kind=draft.kind,
                required=draft.required,
                next_question_order=draft.next_question_order or None,
            )
            Option.objects.bulk_create(
                Option(question=question, text=text[:OPTION_MAX_LENGTH], position=i)
                for i, text in enumerate(draft.options)
            )
    logger.info(
        "Survey %s created by %s with %d questions", survey.pk, owner.pk, len(questions)
    )
    return survey


def delete_survey(survey: Survey) -> None:
    """Delete a survey with its questions, responses and answers (via CASCADE)."""
    survey_id = survey.pk
    survey.delete()
    logger.info("Survey %s deleted", survey_id)
