from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Survey owner or respondent. Logs in by email, addressed by slug in URLs."""

    email = models.EmailField(unique=True)  # pyright: ignore[reportUnknownVariableType]
    slug = models.SlugField(unique=True, max_length=150)  # pyright: ignore[reportUnknownVariableType]

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    class Meta:
        db_table = "users"

    def __str__(self) -> str:
        return self.display_name

    @property
    def display_name(self) -> str:
        """Full name when set, otherwise the username. Used in results and exports."""
        full_name: str = self.get_full_name()  # pyright: ignore[reportUnknownMemberType]
        return full_name or str(self.username)  # pyright: ignore[reportUnknownMemberType, reportUnknownArgumentType]
