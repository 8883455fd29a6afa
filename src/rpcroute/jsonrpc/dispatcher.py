"""Invocation of routed JSON-RPC methods."""
import inspect
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from pydantic import ValidationError

from .errors import RPCError
from .router import Router

logger = logging.getLogger(__name__)

Params = Optional[Union[List[Any], Dict[str, Any]]]


class Dispatcher:
    """Resolves a method through the router and calls it with the request params."""

    def __init__(self, router: Router, show_errors: bool = False):
        self.router = router
        self.show_errors = show_errors

    def lookup(self, method: str) -> Callable:
        """Return the callable for a namespaced method name.

        Raises:
            RPCError: METHOD_NOT_FOUND if no handler exposes the method
        """
        route = self.router.resolve(method)
        if route is None or route.method not in route.handler.exposed_methods():
            raise RPCError.method_not_found(method, self.show_errors)

        func = route.handler.get_method(route.method)
        if not callable(func):
            raise RPCError.method_not_found(method, self.show_errors)
        return func

    async def dispatch(self, method: str, params: Params = None) -> Any:
        """Call a method and return its result.

        A mapping is passed as one argument, a sequence is spread into
        positional arguments, and absent params mean no arguments.

        Raises:
            RPCError: on any failure, already classified
        """
        func = self.lookup(method)
        args = call_arguments(params)
        self._check_arguments(method, func, args)

        try:
            result = func(*args)
            if inspect.isawaitable(result):
                result = await result
        except RPCError:
            raise
        except ValidationError as e:
            if not raised_for_arguments(e, func):
                logger.error(f"Error handling {method}: {e}", exc_info=True)
                raise RPCError.application_error(e, self.show_errors) from e
            logger.warning(f"Invalid params for {method}: {e}")
            raise RPCError.invalid_params(e, self.show_errors) from e
        except Exception as e:
            logger.error(f"Error handling {method}: {e}", exc_info=True)
            raise RPCError.application_error(e, self.show_errors) from e

        return result

    def _check_arguments(self, method: str, func: Callable, args: Tuple[Any, ...]) -> None:
        try:
            signature = inspect.signature(func)
        except (TypeError, ValueError):
            # Some builtins have no introspectable signature
            return

        try:
            signature.bind(*args)
        except TypeError as e:
            logger.warning(f"Invalid params for {method}: {e}")
            raise RPCError.invalid_params(e, self.show_errors) from e


def call_arguments(params: Params) -> Tuple[Any, ...]:
    if params is None:
        return ()
    if isinstance(params, dict):
        return (params,)
    return tuple(params)


def raised_for_arguments(error: ValidationError, func: Callable) -> bool:
    """Whether a ValidationError comes from ``validate_call`` checking this callable's arguments.

    ``validate_call`` titles its errors with the function's qualified name;
    errors from models built inside the handler carry the model's name.
    """
    qualname = getattr(func, "__qualname__", None)
    return qualname is not None and error.title == qualname
