"""JSON-RPC 2.0 request processing core."""
from .errors import ErrorCode, ErrorKind, RPCError
from .models import JSONRPCRequest, JSONRPCResponse, JSONRPCError
from .handler import Handler, MethodTable, SystemHandler, private
from .router import Router, Route
from .dispatcher import Dispatcher
from .responses import success_response, error_response
from .pipeline import Pipeline
from .validation import validate_request

__all__ = [
    "ErrorCode",
    "ErrorKind",
    "RPCError",
    "JSONRPCRequest",
    "JSONRPCResponse",
    "JSONRPCError",
    "Handler",
    "MethodTable",
    "SystemHandler",
    "private",
    "Router",
    "Route",
    "Dispatcher",
    "success_response",
    "error_response",
    "Pipeline",
    "validate_request",
]
