from typing import Any

from django.conf import settings

from molecula.data.models import Survey
from molecula.data.store import DjangoSurveyStore
from molecula.surveys.aggregation import Aggregator


def _aggregator() -> Aggregator:
    return Aggregator(
        DjangoSurveyStore(),
        text_sample_limit=settings.MOLECULA_TEXT_SAMPLE_LIMIT,
        anonymous_label=settings.MOLECULA_ANONYMOUS_LABEL,
    )


def get_survey_results(survey: Survey) -> list[dict[str, Any]]:
    """Per-question statistics for a survey, in question order."""
    return _aggregator().summarize(survey.pk)


def export_survey_csv(survey: Survey) -> str:
    """All responses of a survey as CSV text, one row per response."""
    return _aggregator().export_csv(survey.pk)
