"""Unit tests for handler method exposure."""
import pytest

from rpcroute.jsonrpc.handler import Handler, MethodTable, SystemHandler, private
from rpcroute.jsonrpc.router import Router

from conftest import Calculator


class TestHandlerExposure:
    """Test which methods a Handler subclass exposes."""

    def test_public_methods_in_definition_order(self, calculator):
        assert calculator.exposed_methods() == (
            "add", "subtract", "echo", "noop", "slow_double", "fail", "reject",
        )

    def test_private_and_underscore_methods_hidden(self, calculator):
        assert "secret" not in calculator.exposed_methods()
        assert "_helper" not in calculator.exposed_methods()
        assert calculator.get_method("secret") is None
        assert calculator.get_method("_helper") is None

    def test_base_class_methods_hidden(self, calculator):
        assert "exposed_methods" not in calculator.exposed_methods()
        assert "get_method" not in calculator.exposed_methods()

    def test_get_method_returns_bound_method(self, calculator):
        assert calculator.get_method("add")(2, 3) == 5

    def test_subclass_inherits_and_hides(self):
        class Restricted(Calculator):
            @private
            def fail(self):
                return "quiet"

            def multiply(self, a, b):
                return a * b

        methods = Restricted().exposed_methods()
        assert "add" in methods
        assert "multiply" in methods
        assert "fail" not in methods

    def test_mixin_methods_exposed(self):
        class Mixin:
            def shared(self):
                return "shared"

        class Combined(Mixin, Handler):
            pass

        assert Combined().exposed_methods() == ("shared",)

    def test_attributes_and_properties_not_exposed(self):
        class WithState(Handler):
            limit = 10

            @property
            def name(self):
                return "x"

            def run(self):
                return self.limit

        assert WithState().exposed_methods() == ("run",)

    def test_static_methods_exposed(self):
        class Tools(Handler):
            @staticmethod
            def version():
                return "1.0"

        tools = Tools()
        assert tools.exposed_methods() == ("version",)
        assert tools.get_method("version")() == "1.0"


class TestMethodTable:
    """Test function-style handlers."""

    def test_register_method(self):
        table = MethodTable()
        table.register_method("ping", lambda: "pong")
        assert table.exposed_methods() == ("ping",)
        assert table.get_method("ping")() == "pong"

    def test_register_as_decorator(self):
        table = MethodTable()

        @table.register_method("double")
        async def double(value):
            return value * 2

        assert table.get_method("double") is double

    def test_constructor_methods(self):
        table = MethodTable({"a": len, "b": str})
        assert table.exposed_methods() == ("a", "b")

    def test_unknown_method(self):
        assert MethodTable().get_method("missing") is None

    def test_rejects_non_callable(self):
        with pytest.raises(TypeError):
            MethodTable().register_method("x", 42)


class TestSystemHandler:
    """Test the built-in introspection handler."""

    def test_exposed_methods(self):
        assert SystemHandler(Router()).exposed_methods() == ("listMethods", "isAlive")

    def test_is_alive(self):
        assert SystemHandler(Router()).isAlive() is True

    def test_list_methods_reflects_router(self, calculator):
        router = Router()
        system = SystemHandler(router)
        router.register("math", calculator)
        assert "math.add" in system.listMethods()
