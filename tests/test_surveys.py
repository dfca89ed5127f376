# pyright: reportUnknownMemberType=false, reportUnknownArgumentType=false
from datetime import timedelta

import pytest
from django.db import IntegrityError
from django.http import Http404
from django.utils import timezone

from molecula.actions.surveys import create_survey, delete_survey, validate_question_drafts
from molecula.data.models import Answer, Option, Question, Response, Survey
from molecula.readers.surveys import (
    get_open_surveys,
    get_survey_for_owner,
    get_survey_questions,
    get_user_surveys,
    has_responded,
)
from molecula.surveys.errors import MalformedBranchingRule, SurveyDefinitionError
from molecula.surveys.schema import QuestionDraft
from tests.factories import (
    AnswerFactory,
    OptionFactory,
    QuestionFactory,
    ResponseFactory,
    SurveyFactory,
    UserFactory,
)

pytestmark = pytest.mark.django_db


def _drafts() -> list[QuestionDraft]:
    return [
        QuestionDraft("Do you code?", "single", required=True, next_question_order=3, options=["Yes", "No"]),
        QuestionDraft("Why not?", "text", required=True),
        QuestionDraft("Rate us", "scale"),
    ]


# --- Model tests ---


class TestSurveyModel:
    def test_defaults(self) -> None:
        survey = SurveyFactory(title="Lunch")
        assert str(survey) == "Lunch"
        assert survey.deadline is None
        assert survey.is_anonymous is False

    def test_cascade_delete_owner(self) -> None:
        owner = UserFactory()
        SurveyFactory(owner=owner)
        owner.delete()
        assert Survey.objects.count() == 0


class TestQuestionModel:
    def test_position_unique_per_survey(self) -> None:
        survey = SurveyFactory()
        QuestionFactory(survey=survey, position=0)
        with pytest.raises(IntegrityError):
            QuestionFactory(survey=survey, position=0)

    def test_kinds(self) -> None:
        assert Question.Kind.TEXT == "text"
        assert Question.Kind.SINGLE == "single"
        assert Question.Kind.MULTI == "multi"
        assert Question.Kind.SCALE == "scale"

    def test_options_ordered_by_position(self) -> None:
        question = QuestionFactory(kind=Question.Kind.SINGLE)
        second = OptionFactory(question=question, position=1, text="B")
        first = OptionFactory(question=question, position=0, text="A")
        assert list(question.options.all()) == [first, second]


class TestResponseModel:
    def test_one_response_per_respondent(self) -> None:
        response = ResponseFactory()
        with pytest.raises(IntegrityError):
            ResponseFactory(survey=response.survey, respondent=response.respondent)

    def test_same_respondent_other_survey(self) -> None:
        response = ResponseFactory()
        other = ResponseFactory(respondent=response.respondent)
        assert other.survey != response.survey


class TestAnswerModel:
    def test_text_payload(self) -> None:
        answer = AnswerFactory(text_value="hi")
        assert answer.payload.value == "hi"  # type: ignore[union-attr]

    def test_requires_exactly_one_value(self) -> None:
        with pytest.raises(IntegrityError):
            AnswerFactory(text_value="hi", number_value=3)

    def test_requires_a_value(self) -> None:
        with pytest.raises(IntegrityError):
            AnswerFactory(text_value=None)


# --- Action tests ---


class TestCreateSurvey:
    def test_creates_questions_and_options_in_order(self) -> None:
        owner = UserFactory()
        survey = create_survey(owner, "  Dev survey ", _drafts(), description="About us")
        assert survey.title == "Dev survey"
        assert survey.owner == owner
        questions = list(get_survey_questions(survey))
        assert [q.position for q in questions] == [0, 1, 2]
        assert [q.kind for q in questions] == ["single", "text", "scale"]
        assert questions[0].next_question_order == 3
        assert [o.text for o in questions[0].options.all()] == ["Yes", "No"]
        assert questions[1].options.count() == 0

    def test_zero_branch_target_is_stored_as_none(self) -> None:
        survey = create_survey(
            UserFactory(), "S", [QuestionDraft("Q", "text", next_question_order=0)]
        )
        assert survey.questions.get().next_question_order is None

    def test_deadline_and_anonymity(self) -> None:
        deadline = timezone.now() + timedelta(days=3)
        survey = create_survey(
            UserFactory(), "S", _drafts(), deadline=deadline, is_anonymous=True
        )
        assert survey.deadline == deadline
        assert survey.is_anonymous is True

    def test_rejects_past_deadline(self) -> None:
        with pytest.raises(SurveyDefinitionError, match="future"):
            create_survey(
                UserFactory(), "S", _drafts(), deadline=timezone.now() - timedelta(hours=1)
            )

    @pytest.mark.parametrize("title", ["", "   ", "x" * 141])
    def test_rejects_bad_titles(self, title: str) -> None:
        with pytest.raises(SurveyDefinitionError):
            create_survey(UserFactory(), title, _drafts())
        assert Survey.objects.count() == 0

    def test_rejects_backward_branch(self) -> None:
        drafts = _drafts()
        drafts[2].next_question_order = 1
        with pytest.raises(MalformedBranchingRule):
            create_survey(UserFactory(), "S", drafts)
        assert Survey.objects.count() == 0

    def test_rejects_branch_past_last_question(self) -> None:
        drafts = _drafts()
        drafts[0].next_question_order = 4
        with pytest.raises(MalformedBranchingRule):
            create_survey(UserFactory(), "S", drafts)

    def test_rejects_choice_without_enough_options(self) -> None:
        with pytest.raises(SurveyDefinitionError):
            create_survey(
                UserFactory(), "S", [QuestionDraft("Pick", "multi", options=["One"])]
            )
        assert Question.objects.count() == 0

    def test_rejects_empty_survey(self) -> None:
        with pytest.raises(ValueError, match="at least one question"):
            validate_question_drafts([])

    def test_rejects_question_without_text(self) -> None:
        with pytest.raises(SurveyDefinitionError, match="no text"):
            validate_question_drafts([QuestionDraft("", "text")])


class TestDeleteSurvey:
    def test_cascades_everything(self) -> None:
        survey = create_survey(UserFactory(), "S", _drafts())
        question = survey.questions.first()
        response = ResponseFactory(survey=survey)
        AnswerFactory(response=response, question=question, text_value=None, option=question.options.first())
        delete_survey(survey)
        assert Survey.objects.count() == 0
        assert Question.objects.count() == 0
        assert Option.objects.count() == 0
        assert Response.objects.count() == 0
        assert Answer.objects.count() == 0


# --- Reader tests ---


class TestSurveyReaders:
    def test_open_surveys_exclude_closed(self) -> None:
        open_survey = SurveyFactory(title="Open")
        SurveyFactory(title="Closed", deadline=timezone.now() - timedelta(days=1))
        later = SurveyFactory(title="Later", deadline=timezone.now() + timedelta(days=1))
        assert list(get_open_surveys()) == [later, open_survey]

    def test_search_by_title_description_and_id(self) -> None:
        pets = SurveyFactory(title="Pets", description="cats and dogs")
        SurveyFactory(title="Food")
        assert list(get_open_surveys("pet")) == [pets]
        assert list(get_open_surveys("DOGS")) == [pets]
        assert list(get_open_surveys(str(pets.pk))) == [pets]

    def test_non_ascii_digits_are_plain_text(self) -> None:
        SurveyFactory(title="Pets")
        assert list(get_open_surveys("\u00b2")) == []

    def test_user_surveys_count_responses(self) -> None:
        owner = UserFactory()
        survey = SurveyFactory(owner=owner)
        SurveyFactory()
        ResponseFactory(survey=survey)
        surveys = list(get_user_surveys(owner))
        assert surveys == [survey]
        assert surveys[0].response_count == 1

    def test_get_survey_for_owner(self) -> None:
        survey = SurveyFactory()
        assert get_survey_for_owner(survey.pk, survey.owner) == survey
        with pytest.raises(Http404):
            get_survey_for_owner(survey.pk, UserFactory())

    def test_has_responded(self) -> None:
        response = ResponseFactory()
        assert has_responded(response.survey, response.respondent)
        assert not has_responded(response.survey, UserFactory())


class TestUserDisplayName:
    def test_falls_back_to_username(self) -> None:
        user = UserFactory(username="casey")
        assert user.display_name == "casey"
        assert str(user) == "casey"

    def test_prefers_full_name(self) -> None:
        user = UserFactory(username="casey", first_name="Casey", last_name="Jones")
        assert user.display_name == "Casey Jones"
