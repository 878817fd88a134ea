"""JSON request/response helpers shared by the API views."""

import json

from django.http import JsonResponse

from .forms import MAX_INTEGER

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate, max-age=0",
    "Pragma": "no-cache",
    "Expires": "0",
}


class InvalidPayload(ValueError):
    """Raised when a request body is not a JSON object."""


def parse_json_body(request):
    """Decode the request body into a dict.

    Raises:
        InvalidPayload: If the body is not valid JSON or not an object.
    """
    try:
        data = json.loads(request.body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidPayload("Invalid JSON") from e
    if not isinstance(data, dict):
        raise InvalidPayload("JSON body must be an object")
    return data


def json_error(message, status=400, **extra):
    """Build the standard error response."""
    return JsonResponse({"error": message, **extra}, status=status)


def form_errors(form, message="Invalid data"):
    """Turn bound form errors into a 400 response."""
    details = {field: [str(e) for e in errors] for field, errors in form.errors.items()}
    return json_error(message, status=400, details=details)


def no_cache(response):
    """Mark a response as never cacheable."""
    for header, value in NO_CACHE_HEADERS.items():
        response[header] = value
    return response


def parse_positive_int(value):
    """Parse a positive integer id or quantity, returning None when invalid.

    Booleans and fractional numbers are rejected rather than truncated,
    and values beyond the integer column range are refused.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if 0 < number <= MAX_INTEGER else None
