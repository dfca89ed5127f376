from django import forms

from molecula.data.models import Survey


class SurveyForm(forms.ModelForm):  # type: ignore[type-arg]
    """Survey header fields. Questions are validated by the create action."""

    class Meta:
        model = Survey
        fields = ("title", "description", "deadline", "is_anonymous")
