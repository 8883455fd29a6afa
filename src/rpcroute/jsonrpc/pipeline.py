"""Processing of raw JSON-RPC payloads, single and batch."""
import asyncio
import json
import logging
import math
from typing import Any, List, Optional, Union

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from .dispatcher import Dispatcher
from .errors import RPCError
from .handler import Handler
from .models import JSONRPCRequest, JSONRPCResponse
from .responses import error_response, success_response
from .router import Router
from .validation import validate_request

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

Reply = Optional[Union[JSONRPCResponse, List[JSONRPCResponse]]]


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _parse_float(text: str) -> float:
    value = float(text)
    # Literals such as 1e400 overflow to infinity
    if not math.isfinite(value):
        raise ValueError(f"{text} is out of range")
    return value


class Pipeline:
    """Turns one raw request payload into the bytes to send back, if any.

    ``process`` never raises: every failure is reported as a JSON-RPC
    error response. Nothing is written to shared state while processing,
    so one pipeline can serve concurrent payloads.
    """

    def __init__(
        self,
        router_or_handler: Union[Router, Handler],
        show_errors: bool = False,
        batch_concurrency: bool = False,
    ):
        self.router = Router.from_target(router_or_handler)
        self.show_errors = show_errors
        self.batch_concurrency = batch_concurrency
        self.dispatcher = Dispatcher(self.router, show_errors=show_errors)

    async def process(self, content: Union[bytes, str]) -> Optional[bytes]:
        """Process a payload.

        Returns:
            The serialized response or batch response, or None when there
            is nothing to send (notifications only).
        """
        with tracer.start_as_current_span("jsonrpc.request") as span:
            span.set_attribute("rpc.system", "jsonrpc")
            try:
                reply = await self.handle(content)
            except Exception as e:
                logger.error(f"Unexpected error processing request: {e}", exc_info=True)
                self._record_error(e)
                reply = error_response(RPCError.internal_error(e, self.show_errors))

            logger.debug(f"Response: {reply!r}")
            return self.serialize(reply)

    async def handle(self, content: Union[bytes, str]) -> Reply:
        """Decode a payload and build its response objects."""
        try:
            payload = self.decode(content)
        except RPCError as e:
            self._record_error(e)
            return error_response(e)

        logger.debug(f"Request: {payload!r}")

        if isinstance(payload, list):
            if not payload:
                error = RPCError.invalid_request()
                self._record_error(error)
                return error_response(error)
            trace.get_current_span().set_attribute("rpc.jsonrpc.batch_size", len(payload))
            responses = await self._handle_batch(payload)
            return [response for response in responses if response is not None] or None

        if isinstance(payload, dict):
            self._tag_request(payload)
            return await self.handle_request(payload)

        error = RPCError.invalid_request()
        self._record_error(error)
        return error_response(error)

    async def handle_request(self, item: Any) -> Optional[JSONRPCResponse]:
        """Validate, dispatch and answer a single request object."""
        if not validate_request(item):
            error = RPCError.invalid_request()
            self._record_error(error)
            return error_response(error, item)

        is_notification = "id" not in item
        try:
            request = JSONRPCRequest.model_validate(item)
            result = await self.dispatcher.dispatch(request.method, request.params)
        except RPCError as e:
            self._record_error(e)
            return None if is_notification else error_response(e, item)
        except Exception as e:
            logger.error(f"Unexpected error handling {item.get('method')}: {e}", exc_info=True)
            self._record_error(e)
            if is_notification:
                return None
            return error_response(RPCError.internal_error(e, self.show_errors), item)

        return success_response(request, result)

    async def _handle_batch(self, items: List[Any]) -> List[Optional[JSONRPCResponse]]:
        if self.batch_concurrency:
            return list(await asyncio.gather(*(self.handle_request(item) for item in items)))
        return [await self.handle_request(item) for item in items]

    @staticmethod
    def decode(content: Union[bytes, str]) -> Any:
        """Parse raw payload text.

        Raises:
            RPCError: PARSE_ERROR for anything that is not valid UTF-8 JSON
        """
        try:
            if isinstance(content, (bytes, bytearray)):
                content = content.decode("utf-8")
            return json.loads(content, parse_constant=_reject_constant, parse_float=_parse_float)
        except (UnicodeDecodeError, ValueError, RecursionError) as e:
            logger.debug(f"Parse error: {e}")
            raise RPCError.parse_error() from e

    def serialize(self, reply: Reply) -> Optional[bytes]:
        if reply is None:
            return None

        if isinstance(reply, list):
            data: Any = [response.to_dict() for response in reply]
        else:
            data = reply.to_dict()

        try:
            return _dumps(data)
        except (TypeError, ValueError):
            pass

        # Some result could not be encoded; answer that item with an error
        if isinstance(reply, list):
            return _dumps([self._encodable(response) for response in reply])
        return _dumps(self._encodable(reply))

    def _encodable(self, response: JSONRPCResponse) -> dict:
        data = response.to_dict()
        try:
            _dumps(data)
        except (TypeError, ValueError) as e:
            logger.error(f"Cannot serialize response for id {response.id!r}: {e}")
            self._record_error(e)
            error = RPCError.internal_error(e, self.show_errors)
            data = JSONRPCResponse(id=response.id, error=error.to_model()).to_dict()
            try:
                _dumps(data)
            except (TypeError, ValueError):
                # The id itself cannot be encoded
                data = JSONRPCResponse(id=None, error=error.to_model()).to_dict()
        return data

    @staticmethod
    def _tag_request(payload: dict) -> None:
        span = trace.get_current_span()
        method = payload.get("method")
        if isinstance(method, str):
            span.set_attribute("rpc.method", method)
        request_id = payload.get("id")
        if isinstance(request_id, (str, int, float)) and not isinstance(request_id, bool):
            span.set_attribute("rpc.jsonrpc.request_id", str(request_id))

    @staticmethod
    def _record_error(error: BaseException) -> None:
        span = trace.get_current_span()
        span.record_exception(error)
        span.set_status(Status(StatusCode.ERROR, str(error)))


def _dumps(data: Any) -> bytes:
    return json.dumps(data, separators=(",", ":"), allow_nan=False).encode("utf-8")
