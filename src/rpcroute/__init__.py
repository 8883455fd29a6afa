"""rpcroute: a namespace-routed JSON-RPC 2.0 server."""
from .config import ServerSettings
from .jsonrpc import ErrorCode, Handler, MethodTable, Pipeline, Router, RPCError, private
from .server import SERVICE_VERSION, Server, create_app

__version__ = SERVICE_VERSION

__all__ = [
    "ServerSettings",
    "ErrorCode",
    "Handler",
    "MethodTable",
    "Pipeline",
    "Router",
    "RPCError",
    "private",
    "Server",
    "create_app",
]
