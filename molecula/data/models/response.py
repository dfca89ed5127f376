from django.conf import settings
from django.db import models


class Response(models.Model):
    survey = models.ForeignKey(  # pyright: ignore[reportUnknownVariableType]
        "data.Survey",
        on_delete=models.CASCADE,
        related_name="responses",
    )
    respondent = models.ForeignKey(  # pyright: ignore[reportUnknownVariableType]
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="survey_responses",
    )
    submitted_at = models.DateTimeField(auto_now_add=True)  # pyright: ignore[reportUnknownVariableType]

    class Meta:
        db_table = "responses"
        ordering = ["submitted_at", "pk"]
        constraints = [
            models.UniqueConstraint(
                fields=["survey", "respondent"],
                name="unique_response_per_respondent",
            ),
        ]

    def __str__(self) -> str:
        return f"Response({self.survey_id}, {self.respondent})"  # pyright: ignore[reportUnknownMemberType, reportAttributeAccessIssue]
