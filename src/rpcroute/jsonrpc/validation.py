"""JSON-RPC 2.0 request envelope validation."""
import math
from typing import Any

from .models import JSON_RPC_VERSION, VERSION_FIELD

REQUIRED_KEYS = (VERSION_FIELD, "method")


def is_valid_id(value: Any) -> bool:
    """Check an ``id`` value: a string, a number, or null."""
    # bool is an int subclass but is not a JSON number
    if isinstance(value, bool):
        return False
    if isinstance(value, float) and not math.isfinite(value):
        return False
    return value is None or isinstance(value, (str, int, float))


def validate_request(request: Any) -> bool:
    """Check a decoded JSON value against the JSON-RPC 2.0 request shape.

    Never raises; anything that is not a well-formed request is False.
    """
    if not isinstance(request, dict):
        return False

    if any(not isinstance(key, str) for key in request):
        return False

    for key in REQUIRED_KEYS:
        if key not in request:
            return False

    version = request[VERSION_FIELD]
    if not isinstance(version, str) or version != JSON_RPC_VERSION:
        return False

    if not isinstance(request["method"], str):
        return False

    if "params" in request and not isinstance(request["params"], (list, dict)):
        return False

    if "id" in request and not is_valid_id(request["id"]):
        return False

    return True
