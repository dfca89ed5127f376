import json
from typing import Any

from django.contrib.auth.decorators import login_required
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.http import require_GET, require_POST

from molecula.actions.responses import submit_response
from molecula.actions.surveys import create_survey, delete_survey
from molecula.data.models import Question, Survey
from molecula.interfaces.http.forms import SurveyForm
from molecula.readers.results import export_survey_csv, get_survey_results
from molecula.readers.surveys import (
    get_open_surveys,
    get_survey_by_pk,
    get_survey_for_owner,
    get_survey_questions,
    get_user_surveys,
    has_responded,
)
from molecula.readers.users import get_user_by_slug
from molecula.surveys.errors import (
    DuplicateSubmission,
    SurveyClosed,
    ValidationFailure,
)
from molecula.surveys.schema import QuestionDraft

ANSWER_FIELD_PREFIX = "question_"

REJECTION_STATUS = {
    DuplicateSubmission: 409,
    SurveyClosed: 410,
    ValidationFailure: 422,
}


def _survey_summary(survey: Survey) -> dict[str, Any]:
    return {
        "id": survey.pk,
        "title": survey.title,  # pyright: ignore[reportUnknownMemberType]
        "owner": survey.owner.display_name,  # pyright: ignore[reportUnknownMemberType, reportUnknownArgumentType]
        "deadline": survey.deadline,  # pyright: ignore[reportUnknownMemberType]
        "is_anonymous": survey.is_anonymous,  # pyright: ignore[reportUnknownMemberType]
        "response_count": getattr(survey, "response_count", None),
    }


def _question_payload(question: Question) -> dict[str, Any]:
    return {
        "id": question.pk,
        "field": f"{ANSWER_FIELD_PREFIX}{question.pk}",
        "position": question.position,  # pyright: ignore[reportUnknownMemberType]
        "text": question.text,  # pyright: ignore[reportUnknownMemberType]
        "kind": question.kind,  # pyright: ignore[reportUnknownMemberType]
        "required": question.required,  # pyright: ignore[reportUnknownMemberType]
        "next_question_order": question.next_question_order,  # pyright: ignore[reportUnknownMemberType]
        "options": [
            {"id": o.pk, "text": o.text}  # pyright: ignore[reportUnknownMemberType]
            for o in question.options.all()  # pyright: ignore[reportUnknownMemberType, reportAttributeAccessIssue, reportUnknownVariableType]
        ],
    }


def _collect_answers(
    request: HttpRequest, questions: list[Question]
) -> dict[int, object]:
    """Read ``question_<id>`` form fields. Multi-choice questions take every value."""
    answers: dict[int, object] = {}
    for question in questions:
        field = f"{ANSWER_FIELD_PREFIX}{question.pk}"
        if field not in request.POST:
            continue
        if question.kind == Question.Kind.MULTI:  # pyright: ignore[reportUnknownMemberType]
            answers[question.pk] = request.POST.getlist(field)
        else:
            answers[question.pk] = request.POST.get(field)
    return answers


@require_GET
def survey_list_view(request: HttpRequest) -> HttpResponse:
    """Surveys still open for responses, optionally filtered by ``q``."""
    surveys = get_open_surveys(request.GET.get("q", ""))
    return JsonResponse({"surveys": [_survey_summary(s) for s in surveys]})


@login_required
@require_POST
def create_survey_view(request: HttpRequest) -> HttpResponse:
    """Create a survey from a JSON body with header fields and a question list."""
    try:
        payload = json.loads(request.body or b"{}")
    except ValueError:
        return JsonResponse({"error": "Request body must be JSON."}, status=400)
    if not isinstance(payload, dict):
        return JsonResponse({"error": "Request body must be a JSON object."}, status=400)

    form = SurveyForm(data=payload)
    if not form.is_valid():
        return JsonResponse({"errors": form.errors.get_json_data()}, status=400)

    raw_questions = payload.get("questions") or []
    if not isinstance(raw_questions, list) or not all(
        isinstance(item, dict) for item in raw_questions
    ):
        return JsonResponse({"error": "questions must be a list of objects."}, status=400)

    try:
        drafts = [QuestionDraft.from_dict(item) for item in raw_questions]
        survey = create_survey(
            owner=request.user,  # pyright: ignore[reportArgumentType]
            title=form.cleaned_data["title"],
            description=form.cleaned_data["description"],
            deadline=form.cleaned_data["deadline"],
            is_anonymous=form.cleaned_data["is_anonymous"],
            questions=drafts,
        )
    except (ValueError, TypeError) as e:
        return JsonResponse({"error": str(e)}, status=400)

    return JsonResponse({"id": survey.pk}, status=201)


@require_GET
def survey_detail_view(request: HttpRequest, survey_id: int) -> HttpResponse:
    """A survey with its ordered questions and options."""
    survey = get_survey_by_pk(survey_id)
    questions = get_survey_questions(survey)
    data = _survey_summary(survey)
    data["description"] = survey.description  # pyright: ignore[reportUnknownMemberType]
    data["questions"] = [_question_payload(q) for q in questions]
    if request.user.is_authenticated:
        data["has_responded"] = has_responded(survey, request.user)  # pyright: ignore[reportArgumentType]
    return JsonResponse(data)


@login_required
@require_POST
def respond_view(request: HttpRequest, survey_id: int) -> HttpResponse:
    """Submit the signed-in user's single response to a survey."""
    survey = get_survey_by_pk(survey_id)
    questions = list(get_survey_questions(survey))
    answers = _collect_answers(request, questions)

    outcome = submit_response(survey, request.user, answers)  # pyright: ignore[reportArgumentType]
    if outcome.ok:
        return JsonResponse(
            {"response_id": outcome.response_id, "skipped": sorted(outcome.skipped)},
            status=201,
        )

    error = outcome.error
    body: dict[str, Any] = {"error": str(error), "state": outcome.state.value}
    if isinstance(error, ValidationFailure):
        body["question_id"] = error.question_id
        body["reason"] = error.reason
    return JsonResponse(body, status=REJECTION_STATUS.get(type(error), 400))


@require_GET
def survey_results_view(request: HttpRequest, survey_id: int) -> HttpResponse:
    survey = get_survey_by_pk(survey_id)
    return JsonResponse(
        {"survey": _survey_summary(survey), "questions": get_survey_results(survey)}
    )


@login_required
@require_GET
def export_csv_view(request: HttpRequest, survey_id: int) -> HttpResponse:
    """Download every response as CSV. Only the owner may export."""
    survey = get_survey_for_owner(survey_id, request.user)  # pyright: ignore[reportArgumentType]
    response = HttpResponse(export_survey_csv(survey), content_type="text/csv; charset=utf-8")
    response["Content-Disposition"] = f'attachment; filename="survey-{survey.pk}.csv"'
    return response


@login_required
@require_POST
def delete_survey_view(request: HttpRequest, survey_id: int) -> HttpResponse:
    survey = get_survey_for_owner(survey_id, request.user)  # pyright: ignore[reportArgumentType]
    delete_survey(survey)
    return HttpResponse(status=204)


@login_required
@require_GET
def dashboard_view(request: HttpRequest, user_slug: str) -> HttpResponse:
    """The signed-in user's own surveys."""
    profile_user = get_user_by_slug(user_slug)
    if profile_user.pk != request.user.pk:
        return JsonResponse({"error": "Forbidden."}, status=403)

    surveys = get_user_surveys(profile_user)
    return JsonResponse({"surveys": [_survey_summary(s) for s in surveys]})
