"""Shared fixtures for the JSON-RPC tests."""
import json

import pytest

from rpcroute.jsonrpc.errors import ErrorKind, RPCError
from rpcroute.jsonrpc.handler import Handler, MethodTable, private
from rpcroute.jsonrpc.pipeline import Pipeline
from rpcroute.jsonrpc.router import Router


class Calculator(Handler):
    """Handler used across the tests."""

    def add(self, a, b):
        return a + b

    def subtract(self, minuend, subtrahend):
        return minuend - subtrahend

    def echo(self, params):
        return params

    def noop(self):
        return None

    async def slow_double(self, value):
        return value * 2

    def fail(self):
        raise RuntimeError("boom")

    def reject(self):
        raise RPCError(ErrorKind.INVALID_PARAMS, "value out of range")

    @private
    def secret(self):
        return "hidden"

    def _helper(self):
        return "internal"


class Greeter(Handler):
    def hello(self, name):
        return f"Hello, {name}!"


@pytest.fixture
def calculator():
    return Calculator()


@pytest.fixture
def router(calculator):
    """Router with a root handler and nested namespaces."""
    router = Router()
    router.root(Greeter())
    router.register("math", calculator)

    table = MethodTable()
    table.register_method("ping", lambda: "pong")
    router.register("util.net", table)
    return router


@pytest.fixture
def pipeline(router):
    return Pipeline(router)


@pytest.fixture
def call(pipeline):
    """Process a payload and decode the JSON reply (None if nothing was sent)."""
    async def _call(payload, raw=False):
        content = payload if raw else json.dumps(payload)
        reply = await pipeline.process(content)
        return None if reply is None else json.loads(reply)
    return _call
