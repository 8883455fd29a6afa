"""FastAPI HTTP transport for the JSON-RPC pipeline."""
import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional, Union

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import Response

from .config import ServerSettings
from .jsonrpc.handler import Handler
from .jsonrpc.models import JSON_RPC_VERSION
from .jsonrpc.pipeline import Pipeline
from .jsonrpc.router import Router

logger = logging.getLogger(__name__)

SERVICE_NAME = "rpcroute"
SERVICE_VERSION = "1.0.0"


def create_app(
    router_or_handler: Union[Router, Handler],
    settings: Optional[ServerSettings] = None,
) -> FastAPI:
    """Build the HTTP app serving JSON-RPC over POST.

    Only POST requests reach the pipeline; other methods on the RPC
    paths are answered with 405 by FastAPI.
    """
    settings = settings or ServerSettings()
    pipeline = Pipeline(
        router_or_handler,
        show_errors=settings.show_errors,
        batch_concurrency=settings.batch_concurrency,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting JSON-RPC server...")
        logger.info(f"Registered {len(pipeline.router.list_methods())} JSON-RPC methods")
        yield
        logger.info("Shutting down JSON-RPC server...")

    app = FastAPI(
        title="rpcroute",
        description="JSON-RPC 2.0 server with namespace routing",
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )
    app.state.pipeline = pipeline
    app.state.settings = settings

    @app.post("/")
    @app.post("/rpc")
    @app.post("/jsonrpc")
    async def jsonrpc_endpoint(request: Request):
        """JSON-RPC 2.0 endpoint; the raw body may be a single request or a batch."""
        body = await request.body()
        content = await pipeline.process(body)

        # Nothing to send back for notifications
        if content is None:
            return Response(status_code=204)

        return Response(content=content, media_type="application/json")

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "protocol_version": JSON_RPC_VERSION,
        }

    return app


class Server:
    """A JSON-RPC server for a router or a single handler.

    Example:
        Server(Calculator()).start()
    """

    def __init__(
        self,
        router_or_handler: Union[Router, Handler],
        settings: Optional[ServerSettings] = None,
    ):
        self.settings = settings or ServerSettings.from_env()
        self.router = Router.from_target(router_or_handler)
        self.app = create_app(self.router, self.settings)
        self.pipeline: Pipeline = self.app.state.pipeline

    @classmethod
    def with_routes(
        cls,
        draw: Callable[[Router], None],
        settings: Optional[ServerSettings] = None,
    ) -> "Server":
        """Create a server whose routes are registered by ``draw``.

        Example:
            def routes(router):
                router.root(Greeter())
                router.register("math", Calculator())

            Server.with_routes(routes).start()
        """
        router = Router()
        draw(router)
        return cls(router, settings)

    async def process(self, content: Union[bytes, str]) -> Optional[bytes]:
        """Process a raw payload without going through HTTP."""
        return await self.pipeline.process(content)

    def start(self) -> None:
        """Serve until interrupted."""
        logging.basicConfig(level=self.settings.log_level)
        logger.info(f"Listening on {self.settings.host}:{self.settings.port}")
        uvicorn.run(
            self.app,
            host=self.settings.host,
            port=self.settings.port,
            log_level=self.settings.log_level.lower(),
        )
