from oasgen.builder.recursion import AdditionalSchemaRegistry, DeclaringContext, GenerationPass, RecursionGuard
from oasgen.model.types import NamedType, ParameterizedType


class TestRecursionGuard:
    def test_add_reports_new_signatures(self):
        guard = RecursionGuard()
        assert guard.add("Node_children_Node") is True
        assert guard.add("Node_children_Node") is False
        assert "Node_children_Node" in guard
        assert len(guard) == 1


class TestAdditionalSchemaRegistry:
    def test_insert_if_absent(self, catalog):
        registry = AdditionalSchemaRegistry()
        user = catalog.describe(NamedType("app.dto.User"))
        address = catalog.describe(NamedType("app.dto.Address"))

        assert registry.add("X_RecursiveUser", user) is True
        assert registry.add("X_RecursiveUser", address) is False
        assert registry.get("X_RecursiveUser") is user

    def test_drain_returns_only_new_entries(self, catalog):
        registry = AdditionalSchemaRegistry()
        user = catalog.describe(NamedType("app.dto.User"))
        address = catalog.describe(NamedType("app.dto.Address"))

        registry.add("a", user)
        assert registry.drain() == [("a", user)]
        assert registry.drain() == []

        registry.add("b", address)
        registry.add("a", address)
        assert registry.drain() == [("b", address)]
        assert registry.keys() == ["a", "b"]


def test_passes_do_not_share_state():
    first, second = GenerationPass(), GenerationPass()
    first.guard.add("sig")
    assert "sig" not in second.guard
    assert first.registry is not second.registry


def test_declaring_context_naming(catalog):
    declaring = catalog.describe(NamedType("app.dto.Child"))
    inner = catalog.describe(ParameterizedType("app.dto.Box", (NamedType("app.dto.User"),)))
    context = DeclaringContext(declaring, "parent")
    assert context.signature(inner) == "Child_parent_Box_User"
    assert context.forced_key(inner) == "Child_RecursiveBox_User"
