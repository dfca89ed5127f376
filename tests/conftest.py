from collections.abc import Callable

import django
import pytest
from django.conf import settings
from django.test import Client

# Ensure Django is set up before tests run
if not settings.configured:
    django.setup()

LoginClient = Callable[..., Client]


@pytest.fixture
def login(db: None) -> LoginClient:
    """Return a function giving a client signed in as ``user`` (a new user if omitted)."""
    from tests.factories import UserFactory

    def _login(user: object | None = None) -> Client:
        client = Client()
        client.force_login(user or UserFactory())  # pyright: ignore[reportArgumentType]
        return client

    return _login
