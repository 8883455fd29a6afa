"""Namespace-aware routing of method names to handlers."""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from .handler import Handler, SystemHandler

logger = logging.getLogger(__name__)

NAMESPACE_DELIMITER = "."
SYSTEM_NAMESPACE = "system"


@dataclass
class RouteNode:
    """One namespace in the routing tree."""

    handler: Optional[Handler] = None
    children: Dict[str, "RouteNode"] = field(default_factory=dict)

    def copy(self) -> "RouteNode":
        return RouteNode(
            handler=self.handler,
            children={name: child.copy() for name, child in self.children.items()},
        )


@dataclass(frozen=True)
class Route:
    """Result of resolving a method name."""

    handler: Handler
    namespace: str
    method: str


class Router:
    """Maps dotted method names to handlers through a tree of namespaces.

    The empty path is the root (default) handler, used when no registered
    namespace prefixes the method name. The ``system`` namespace is
    reserved for the built-in introspection handler.

    The tree is built during configuration and only read afterwards, so
    concurrent requests can share one router.
    """

    def __init__(self):
        self._root = RouteNode()
        self._root.children[SYSTEM_NAMESPACE] = RouteNode(handler=SystemHandler(self))

    @classmethod
    def from_target(cls, router_or_handler: Union["Router", Handler]) -> "Router":
        """Use a router as is, or mount a bare handler as the root handler."""
        if isinstance(router_or_handler, Router):
            return router_or_handler
        router = cls()
        router.root(router_or_handler)
        return router

    def root(self, handler: Handler) -> "Router":
        """Register the default handler."""
        return self.register("", handler)

    def register(self, path: str, target: Union["Router", Handler]) -> "Router":
        """Bind a handler, or graft another router's tree, at a namespace path.

        Registering a handler replaces the handler already bound at that
        exact path; deeper namespaces are kept. Grafting a router replaces
        the whole subtree.
        """
        segments = self._split_path(path)
        if segments and segments[0] == SYSTEM_NAMESPACE:
            raise ValueError(f"Namespace '{SYSTEM_NAMESPACE}' is reserved")

        if isinstance(target, Router):
            grafted = target._root.copy()
            grafted.children.pop(SYSTEM_NAMESPACE, None)
            new_node = grafted
        elif isinstance(target, Handler):
            new_node = None
        else:
            raise TypeError(
                f"Expected a Router or Handler, got {type(target).__name__}"
            )

        parent = self._root
        for segment in segments[:-1]:
            parent = parent.children.setdefault(segment, RouteNode())

        if not segments:
            node = self._root
            if new_node is not None:
                node.handler = new_node.handler
                node.children = {SYSTEM_NAMESPACE: node.children[SYSTEM_NAMESPACE]}
                node.children.update(new_node.children)
            else:
                node.handler = target
        elif new_node is not None:
            parent.children[segments[-1]] = new_node
        else:
            parent.children.setdefault(segments[-1], RouteNode()).handler = target

        logger.info(f"Registered {type(target).__name__} at namespace '{path}'")
        return self

    def resolve(self, method: str) -> Optional[Route]:
        """Find the handler for a method name.

        Walks the namespace segments of ``method`` (every segment but the
        last), keeping the deepest node that has a handler. Falls back to
        the root handler when no namespace matches.
        """
        segments = method.split(NAMESPACE_DELIMITER)
        node = self._root
        handler = node.handler
        depth = 0

        for index, segment in enumerate(segments[:-1], start=1):
            node = node.children.get(segment)
            if node is None:
                break
            if node.handler is not None:
                handler = node.handler
                depth = index

        if handler is None:
            return None

        return Route(
            handler=handler,
            namespace=NAMESPACE_DELIMITER.join(segments[:depth]),
            method=NAMESPACE_DELIMITER.join(segments[depth:]),
        )

    def handler_for_method(self, method: str) -> Optional[Handler]:
        route = self.resolve(method)
        return route.handler if route else None

    def strip_namespace(self, method: str) -> str:
        """Remove the namespace prefix that ``resolve`` matches."""
        route = self.resolve(method)
        return route.method if route else method

    def list_methods(self) -> List[str]:
        """Fully qualified names of every exposed method in the tree."""
        names: List[str] = []
        self._collect_methods(self._root, [], names)
        return names

    def _collect_methods(self, node: RouteNode, prefix: List[str], names: List[str]) -> None:
        if node.handler is not None:
            for method in node.handler.exposed_methods():
                names.append(NAMESPACE_DELIMITER.join(prefix + [method]))
        for name, child in node.children.items():
            self._collect_methods(child, prefix + [name], names)

    @staticmethod
    def _split_path(path: str) -> List[str]:
        if not path:
            return []
        segments = path.split(NAMESPACE_DELIMITER)
        if any(not segment for segment in segments):
            raise ValueError(f"Invalid namespace path: {path!r}")
        return segments
