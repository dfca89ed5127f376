from django.db.models import Count, Prefetch, Q, QuerySet
from django.shortcuts import get_object_or_404
from django.utils import timezone

from molecula.data.models import Option, Question, Response, Survey
from molecula.data.models.user import User

SEARCH_MAX_LENGTH = 80
LISTING_LIMIT = 120


def get_survey_by_pk(survey_pk: int) -> Survey:
    """Retrieve a survey by PK with its owner pre-loaded."""
    return get_object_or_404(Survey.objects.select_related("owner"), pk=survey_pk)


def get_survey_for_owner(survey_pk: int, owner: User) -> Survey:
    """Get a survey by PK, verifying ownership. 404 if not found or not owned."""
    return get_object_or_404(
        Survey.objects.select_related("owner"),
        pk=survey_pk,
        owner=owner,
    )


def get_open_surveys(query: str = "") -> QuerySet[Survey]:
    """Surveys still accepting responses, newest first, optionally searched.

    The search term matches the title or description (case-insensitive) or the
    survey id exactly.
    """
    surveys = (
        Survey.objects.filter(Q(deadline__isnull=True) | Q(deadline__gt=timezone.now()))
        .select_related("owner")
        .annotate(response_count=Count("responses"))
    )
    query = query.strip()[:SEARCH_MAX_LENGTH]
    if query:
        match = Q(title__icontains=query) | Q(description__icontains=query)
        if query.isascii() and query.isdigit():
            match |= Q(pk=int(query))
        surveys = surveys.filter(match)
    return surveys.order_by("-created_at", "-pk")[:LISTING_LIMIT]


def get_user_surveys(owner: User) -> QuerySet[Survey]:
    """Return all surveys owned by a user with their response counts."""
    return (
        Survey.objects.filter(owner=owner)
        .annotate(response_count=Count("responses"))
        .order_by("-created_at", "-pk")
    )


def get_survey_questions(survey: Survey) -> QuerySet[Question]:
    """Return a survey's questions in order with options prefetched in order."""
    return (
        Question.objects.filter(survey=survey)
        .prefetch_related(Prefetch("options", queryset=Option.objects.order_by("position")))
        .order_by("position")
    )


def has_responded(survey: Survey, user: User) -> bool:
    return Response.objects.filter(survey=survey, respondent=user).exists()
