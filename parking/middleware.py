import logging

from django.http import Http404, JsonResponse

from services.exceptions import ParkingError

logger = logging.getLogger(__name__)


class ExceptionHandlingMiddleware:
    """Middleware to turn exceptions raised by views into JSON errors.

    - Http404 is left to Django's 404 handler.
    - Engine errors become a response with their own status code.
    - Other exceptions become a 500.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if isinstance(exception, Http404):
            return None
        if isinstance(exception, ParkingError):
            logger.warning(
                f"{type(exception).__name__} on {request.path}: {exception.message}"
            )
            return JsonResponse(
                {"error": type(exception).__name__, "message": exception.message},
                status=exception.status_code,
            )
        logger.error(
            f"500 Server Error: {request.path}",
            exc_info=(type(exception), exception, exception.__traceback__),
        )
        return JsonResponse(
            {
                "error": "ServerError",
                "message": "Something went wrong. Please try again later.",
            },
            status=500,
        )
