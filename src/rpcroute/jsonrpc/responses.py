"""JSON-RPC 2.0 response construction."""
from typing import Any, Optional

from .errors import RPCError
from .models import JSONRPCRequest, JSONRPCResponse, RequestId
from .validation import is_valid_id


def request_id(request: Any) -> RequestId:
    """The ``id`` to echo for a request, or None when it cannot be read."""
    if isinstance(request, JSONRPCRequest):
        return request.id
    if isinstance(request, dict) and is_valid_id(request.get("id")):
        return request.get("id")
    return None


def success_response(request: JSONRPCRequest, result: Any) -> Optional[JSONRPCResponse]:
    """Build a success response, or None for a notification.

    The server must not reply to a notification, including one that is
    part of a batch.
    """
    if request.is_notification:
        return None
    return JSONRPCResponse(id=request.id, result=result)


def error_response(error: RPCError, request: Any = None) -> JSONRPCResponse:
    """Build an error response.

    ``request`` may be a validated request, the raw decoded item, or None
    when the failure happened before any request could be read.
    """
    return JSONRPCResponse(id=request_id(request), error=error.to_model())
