from collections.abc import Mapping

from django.utils import timezone

from molecula.data.models import Survey
from molecula.data.models.user import User
from molecula.data.store import DjangoSurveyStore
from molecula.surveys.recorder import ResponseRecorder, SubmissionOutcome


def submit_response(
    survey: Survey, respondent: User, answers: Mapping[int, object]
) -> SubmissionOutcome:
    """Record one respondent's answers (question id to raw value) atomically."""
    recorder = ResponseRecorder(DjangoSurveyStore(), clock=timezone.now)
    return recorder.record(survey.pk, respondent.pk, answers)
