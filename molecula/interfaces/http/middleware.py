import logging
from collections.abc import Callable

from django.http import HttpRequest, HttpResponse, JsonResponse

from molecula.surveys.errors import StoreFailure

logger = logging.getLogger(__name__)


class StoreFailureMiddleware:
    """Answer store failures with a generic 503 instead of a traceback."""

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        return self.get_response(request)

    def process_exception(
        self, request: HttpRequest, exception: Exception
    ) -> HttpResponse | None:
        if not isinstance(exception, StoreFailure):
            return None
        logger.error("Store failure on %s %s", request.method, request.path, exc_info=exception)
        return JsonResponse(
            {"error": "The operation could not be completed. Please try again later."},
            status=503,
        )
