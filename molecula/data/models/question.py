from django.db import models

from molecula.surveys.schema import QuestionKind


class Question(models.Model):
    class Kind(models.TextChoices):
        TEXT = QuestionKind.TEXT.value, "Free text"
        SINGLE = QuestionKind.SINGLE.value, "Single choice"
        MULTI = QuestionKind.MULTI.value, "Multiple choice"
        SCALE = QuestionKind.SCALE.value, "Scale (1-5)"

    survey = models.ForeignKey(  # pyright: ignore[reportUnknownVariableType]
        "data.Survey",
        on_delete=models.CASCADE,
        related_name="questions",
    )
    position = models.PositiveIntegerField()  # pyright: ignore[reportUnknownVariableType]
    text = models.TextField()  # pyright: ignore[reportUnknownVariableType]
    kind = models.CharField(  # pyright: ignore[reportUnknownVariableType]
        max_length=20,
        choices=Kind,
    )
    required = models.BooleanField(default=False)  # pyright: ignore[reportUnknownVariableType]
    next_question_order = models.PositiveIntegerField(null=True, blank=True)  # pyright: ignore[reportUnknownVariableType]

    class Meta:
        db_table = "questions"
        ordering = ["position"]
        constraints = [
            models.UniqueConstraint(
                fields=["survey", "position"],
                name="unique_question_position_per_survey",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.survey_id}#{self.position + 1}: {self.text}"  # pyright: ignore[reportUnknownMemberType, reportAttributeAccessIssue]
