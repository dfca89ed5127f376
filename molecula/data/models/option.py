from django.db import models


class Option(models.Model):
    question = models.ForeignKey(  # pyright: ignore[reportUnknownVariableType]
        "data.Question",
        on_delete=models.CASCADE,
        related_name="options",
    )
    text = models.CharField(max_length=255)  # pyright: ignore[reportUnknownVariableType]
    position = models.PositiveIntegerField()  # pyright: ignore[reportUnknownVariableType]

    class Meta:
        db_table = "options"
        ordering = ["position"]
        constraints = [
            models.UniqueConstraint(
                fields=["question", "position"],
                name="unique_option_position_per_question",
            ),
        ]

    def __str__(self) -> str:
        return str(self.text)  # pyright: ignore[reportUnknownMemberType, reportUnknownArgumentType]
