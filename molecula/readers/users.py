from django.shortcuts import get_object_or_404

from molecula.data.models import User


def get_user_by_slug(slug: str) -> User:
    """Retrieve a user by slug."""
    return get_object_or_404(User, slug=slug)
