from django.db import models
from django.db.models import Q

from molecula.surveys.payloads import AnswerPayload, Number, OptionRef, Text


class Answer(models.Model):
    """One stored value for a (response, question) pair.

    Exactly one of ``text_value``, ``number_value`` and ``option`` is set.
    Use :attr:`payload` and :meth:`fields_for` to move between the columns and
    the payload types.
    """

    response = models.ForeignKey(  # pyright: ignore[reportUnknownVariableType]
        "data.Response",
        on_delete=models.CASCADE,
        related_name="answers",
    )
    question = models.ForeignKey(  # pyright: ignore[reportUnknownVariableType]
        "data.Question",
        on_delete=models.CASCADE,
        related_name="answers",
    )
    text_value = models.TextField(null=True, blank=True)  # pyright: ignore[reportUnknownVariableType]
    number_value = models.PositiveSmallIntegerField(null=True, blank=True)  # pyright: ignore[reportUnknownVariableType]
    option = models.ForeignKey(  # pyright: ignore[reportUnknownVariableType]
        "data.Option",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="answers",
    )

    class Meta:
        db_table = "answers"
        ordering = ["pk"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(text_value__isnull=False, number_value__isnull=True, option__isnull=True)
                    | Q(text_value__isnull=True, number_value__isnull=False, option__isnull=True)
                    | Q(text_value__isnull=True, number_value__isnull=True, option__isnull=False)
                ),
                name="answer_has_exactly_one_value",
            ),
        ]

    def __str__(self) -> str:
        return f"Answer({self.response_id}, {self.question_id}, {self.payload})"  # pyright: ignore[reportUnknownMemberType, reportAttributeAccessIssue]

    @property
    def payload(self) -> AnswerPayload:
        if self.option_id is not None:  # pyright: ignore[reportUnknownMemberType, reportAttributeAccessIssue]
            return OptionRef(self.option_id)  # pyright: ignore[reportUnknownMemberType, reportAttributeAccessIssue]
        if self.number_value is not None:  # pyright: ignore[reportUnknownMemberType]
            return Number(self.number_value)  # pyright: ignore[reportUnknownMemberType, reportArgumentType]
        return Text(self.text_value or "")  # pyright: ignore[reportUnknownMemberType]

    @staticmethod
    def fields_for(payload: AnswerPayload) -> dict[str, object]:
        match payload:
            case Text(value=value):
                return {"text_value": value}
            case Number(value=value):
                return {"number_value": value}
            case OptionRef(option_id=option_id):
                return {"option_id": option_id}
            case _:
                raise TypeError(f"Unknown answer payload: {payload!r}")
