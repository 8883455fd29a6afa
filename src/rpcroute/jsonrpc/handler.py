"""Handler objects whose methods are callable over JSON-RPC."""
import logging
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple

if TYPE_CHECKING:
    from .router import Router

logger = logging.getLogger(__name__)


def private(func: Callable) -> Callable:
    """Keep a public handler method out of the exposed method set."""
    func.__rpc_private__ = True
    return func


class Handler:
    """Base class for JSON-RPC handlers.

    Every public method defined on a subclass (or its mixins) is exposed
    under its own name, unless it is decorated with ``@private``. The
    exposed set is computed once, when the subclass is created.

    Example:
        class Calculator(Handler):
            def add(self, a, b):
                return a + b
    """

    _exposed_methods: Tuple[str, ...] = ()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        base_classes = set(Handler.__mro__)
        exposed: Dict[str, None] = {}

        for klass in reversed(cls.__mro__):
            if klass in base_classes:
                continue
            for name, attr in vars(klass).items():
                if name.startswith("_") or name in vars(Handler):
                    continue
                if isinstance(attr, (staticmethod, classmethod)):
                    attr = attr.__func__
                # Overrides in subclasses win, including ones that hide a method
                if not callable(attr) or getattr(attr, "__rpc_private__", False):
                    exposed.pop(name, None)
                    continue
                exposed[name] = None

        cls._exposed_methods = tuple(exposed)

    def exposed_methods(self) -> Tuple[str, ...]:
        """Names of the methods callable over JSON-RPC, in definition order."""
        return self._exposed_methods

    def get_method(self, name: str) -> Optional[Callable]:
        """Return the callable for an exposed method name, or None."""
        if name not in self.exposed_methods():
            return None
        method = getattr(self, name, None)
        return method if callable(method) else None


class MethodTable(Handler):
    """Handler built from individually registered callables.

    Example:
        table = MethodTable()

        @table.register_method("ping")
        async def ping():
            return "pong"
    """

    def __init__(self, methods: Optional[Dict[str, Callable]] = None):
        self.methods: Dict[str, Callable] = {}
        for method_name, handler in (methods or {}).items():
            self.register_method(method_name, handler)

    def register_method(self, method_name: str, handler: Optional[Callable] = None):
        """Register a JSON-RPC method handler.

        Args:
            method_name: Name of the method, without any namespace prefix
            handler: Sync or async callable; when omitted, returns a decorator
        """
        if handler is None:
            def decorator(func: Callable) -> Callable:
                self.register_method(method_name, func)
                return func
            return decorator

        if not callable(handler):
            raise TypeError(f"Handler for {method_name!r} is not callable")
        self.methods[method_name] = handler
        logger.info(f"Registered JSON-RPC method: {method_name}")
        return handler

    def exposed_methods(self) -> Tuple[str, ...]:
        return tuple(self.methods)

    def get_method(self, name: str) -> Optional[Callable]:
        return self.methods.get(name)


class SystemHandler(Handler):
    """Built-in introspection handler mounted at the ``system`` namespace."""

    def __init__(self, router: "Router"):
        self._router = router

    def listMethods(self) -> List[str]:
        return self._router.list_methods()

    def isAlive(self) -> bool:
        return True
