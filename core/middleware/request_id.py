import logging
import uuid
from threading import local

from django.utils.deprecation import MiddlewareMixin

_thread_locals = local()

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(MiddlewareMixin):
    """
    Tags every request with a UUID so log lines from one checkout can be
    correlated. An incoming X-Request-ID header is reused when present.
    """

    def process_request(self, request):
        incoming = (request.headers.get(REQUEST_ID_HEADER) or "").strip()
        request_id = incoming[:64] if incoming else str(uuid.uuid4())
        request.request_id = request_id
        _thread_locals.request_id = request_id
        return None

    def process_response(self, request, response):
        if hasattr(request, "request_id"):
            response[REQUEST_ID_HEADER] = request.request_id
        _clear()
        return response

    def process_exception(self, request, exception):
        _clear()
        return None


def _clear():
    if hasattr(_thread_locals, "request_id"):
        delattr(_thread_locals, "request_id")


def get_request_id():
    """Current request id, or None outside a request."""
    return getattr(_thread_locals, "request_id", None)


class RequestIDFilter(logging.Filter):
    """Adds ``request_id`` to every log record."""

    def filter(self, record):
        record.request_id = get_request_id() or "no-request-id"
        return True
