from django.conf import settings
from django.db import models


class Survey(models.Model):
    owner = models.ForeignKey(  # pyright: ignore[reportUnknownVariableType]
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="surveys",
    )
    title = models.CharField(max_length=140)  # pyright: ignore[reportUnknownVariableType]
    description = models.TextField(blank=True, default="")  # pyright: ignore[reportUnknownVariableType]
    deadline = models.DateTimeField(null=True, blank=True)  # pyright: ignore[reportUnknownVariableType]
    is_anonymous = models.BooleanField(default=False)  # pyright: ignore[reportUnknownVariableType]
    created_at = models.DateTimeField(auto_now_add=True)  # pyright: ignore[reportUnknownVariableType]

    class Meta:
        db_table = "surveys"
        ordering = ["-created_at", "-pk"]

    def __str__(self) -> str:
        return str(self.title)  # pyright: ignore[reportUnknownMemberType, reportUnknownArgumentType]

