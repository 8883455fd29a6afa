"""JSON-RPC 2.0 error taxonomy."""
import traceback
from enum import Enum
from typing import Any, Optional

from .models import JSONRPCError


class ErrorCode:
    """JSON-RPC 2.0 standard error codes and the server-defined application code."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603

    # Server error range is -32000 to -32099
    APPLICATION_ERROR = -32000


class ErrorKind(Enum):
    """Every failure the server reports maps to exactly one of these."""

    PARSE_ERROR = (ErrorCode.PARSE_ERROR, "Parse error")
    INVALID_REQUEST = (ErrorCode.INVALID_REQUEST, "Invalid Request")
    METHOD_NOT_FOUND = (ErrorCode.METHOD_NOT_FOUND, "Method not found")
    INVALID_PARAMS = (ErrorCode.INVALID_PARAMS, "Invalid params")
    INTERNAL_ERROR = (ErrorCode.INTERNAL_ERROR, "Internal error")
    APPLICATION_ERROR = (ErrorCode.APPLICATION_ERROR, "Server error")

    @property
    def code(self) -> int:
        return self.value[0]

    @property
    def default_message(self) -> str:
        return self.value[1]


class RPCError(Exception):
    """An error that is reported to the caller as a JSON-RPC error object.

    Handlers may raise it directly to answer with a specific kind; the
    dispatcher propagates it unchanged.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: Optional[str] = None,
        data: Optional[Any] = None,
    ):
        self.kind = kind
        self.message = message or kind.default_message
        self.data = data
        super().__init__(self.message)

    @property
    def code(self) -> int:
        return self.kind.code

    @classmethod
    def parse_error(cls) -> "RPCError":
        return cls(ErrorKind.PARSE_ERROR)

    @classmethod
    def invalid_request(cls) -> "RPCError":
        return cls(ErrorKind.INVALID_REQUEST)

    @classmethod
    def method_not_found(cls, method: str, show_errors: bool = False) -> "RPCError":
        return cls(ErrorKind.METHOD_NOT_FOUND, data=method if show_errors else None)

    @classmethod
    def invalid_params(cls, error: Optional[BaseException] = None, show_errors: bool = False) -> "RPCError":
        data = str(error) if error is not None and show_errors else None
        return cls(ErrorKind.INVALID_PARAMS, data=data)

    @classmethod
    def internal_error(cls, error: Optional[BaseException] = None, show_errors: bool = False) -> "RPCError":
        data = describe_exception(error) if error is not None and show_errors else None
        return cls(ErrorKind.INTERNAL_ERROR, data=data)

    @classmethod
    def application_error(cls, error: BaseException, show_errors: bool = False) -> "RPCError":
        """Wrap an arbitrary handler failure.

        The failure's description is only attached when ``show_errors``
        is enabled, so internals are not leaked to external callers.
        """
        data = describe_exception(error) if show_errors else None
        return cls(ErrorKind.APPLICATION_ERROR, data=data)

    def to_model(self) -> JSONRPCError:
        return JSONRPCError(code=self.code, message=self.message, data=self.data)

    def __repr__(self) -> str:
        return f"RPCError({self.kind.name}, code={self.code}, message={self.message!r})"


def describe_exception(error: BaseException) -> dict:
    """Package an exception as error ``data``."""
    return {
        "type": type(error).__name__,
        "message": str(error),
        "backtrace": traceback.format_exception(type(error), error, error.__traceback__),
    }
