"""Tests for dependency ordering of custom types."""

import pytest

from gql_cppgen.core.dependencies import (
    dependency_names,
    is_generated_type,
    sort_custom_types_by_dependency_order,
)
from gql_cppgen.core.errors import (
    CircularDependencyError,
    MalformedSchemaError,
    MissingTypeReferenceError,
)
from gql_cppgen.core.ir import IRField, IRInputValue, IRType, IRTypeRef, TypeKind


def ref(kind: TypeKind, name: str) -> IRTypeRef:
    return IRTypeRef.named(kind, name)


def field(name: str, type_ref: IRTypeRef, args=()) -> IRField:
    return IRField(name=name, type=type_ref, args=args)


@pytest.fixture
def lettered_types():
    """Seven types exercising every kind of dependency edge."""
    a = IRType(kind=TypeKind.ENUM, name="A")
    # Has field of type A
    b = IRType(kind=TypeKind.OBJECT, name="B", fields=(field("a", ref(TypeKind.ENUM, "A")),))
    # Has field of type A and possible type B
    c = IRType(
        kind=TypeKind.INTERFACE,
        name="C",
        fields=(field("a", ref(TypeKind.ENUM, "A")),),
        possible_types=(ref(TypeKind.OBJECT, "B"),),
    )
    # Has field of type [C!]!
    d = IRType(
        kind=TypeKind.OBJECT,
        name="D",
        fields=(field("cs", IRTypeRef.non_null(IRTypeRef.list_of(IRTypeRef.non_null(ref(TypeKind.INTERFACE, "C"))))),),
    )
    # Union of A, B, C and D
    e = IRType(
        kind=TypeKind.UNION,
        name="E",
        possible_types=(
            ref(TypeKind.ENUM, "A"),
            ref(TypeKind.OBJECT, "B"),
            ref(TypeKind.INTERFACE, "C"),
            ref(TypeKind.OBJECT, "D"),
        ),
    )
    # Input object with an input value of type A
    f = IRType(
        kind=TypeKind.INPUT_OBJECT,
        name="F",
        input_fields=(IRInputValue(name="a", type=ref(TypeKind.ENUM, "A")),),
    )
    # Has field of type A with an argument of type F
    g = IRType(
        kind=TypeKind.OBJECT,
        name="G",
        fields=(field("a", ref(TypeKind.ENUM, "A"), args=(IRInputValue(name="f", type=ref(TypeKind.INPUT_OBJECT, "F")),)),),
    )
    return [a, b, c, d, e, f, g]


# =============================================================================
# Dependency edges
# =============================================================================


class TestDependencyNames:
    """Tests for dependency_names."""

    def test_fields_args_and_possible_types(self, lettered_types):
        by_name = {t.name: t for t in lettered_types}

        assert dependency_names(by_name["A"]) == []
        assert dependency_names(by_name["C"]) == ["A", "B"]
        assert dependency_names(by_name["D"]) == ["C"]
        assert dependency_names(by_name["E"]) == ["A", "B", "C", "D"]
        assert dependency_names(by_name["G"]) == ["A", "F"]

    def test_scalars_are_not_dependencies(self):
        ir_type = IRType(
            kind=TypeKind.OBJECT,
            name="User",
            fields=(field("id", IRTypeRef.non_null(ref(TypeKind.SCALAR, "ID"))),),
        )
        assert dependency_names(ir_type) == []

    def test_interfaces_are_not_dependencies(self):
        """An implemented interface does not make the object depend on it."""
        ir_type = IRType(
            kind=TypeKind.OBJECT,
            name="Droid",
            interfaces=(ref(TypeKind.INTERFACE, "Character"),),
        )
        assert dependency_names(ir_type) == []

    def test_repeated_dependency_listed_once(self):
        ir_type = IRType(
            kind=TypeKind.OBJECT,
            name="Pair",
            fields=(
                field("first", ref(TypeKind.OBJECT, "Item")),
                field("second", IRTypeRef.list_of(ref(TypeKind.OBJECT, "Item"))),
            ),
        )
        assert dependency_names(ir_type) == ["Item"]


class TestIsGeneratedType:
    """Tests for is_generated_type."""

    @pytest.mark.parametrize("kind", [TypeKind.SCALAR, TypeKind.LIST, TypeKind.NON_NULL])
    def test_non_custom_kinds(self, kind):
        assert not is_generated_type(IRType(kind=kind, name="X"))

    def test_meta_types(self):
        assert not is_generated_type(IRType(kind=TypeKind.OBJECT, name="__Schema"))

    def test_custom_types(self):
        assert is_generated_type(IRType(kind=TypeKind.UNION, name="SearchResult"))


# =============================================================================
# Sorting
# =============================================================================


class TestSortCustomTypes:
    """Tests for sort_custom_types_by_dependency_order."""

    def test_dependencies_before_dependents(self, lettered_types):
        sorted_types = sort_custom_types_by_dependency_order(reversed(lettered_types))
        position = {t.name: i for i, t in enumerate(sorted_types)}

        assert len(sorted_types) == len(lettered_types)
        for ir_type in lettered_types:
            for dependency in dependency_names(ir_type):
                assert position[dependency] < position[ir_type.name]

    def test_order_is_deterministic(self, lettered_types):
        """Each pass keeps input order among the types it emits."""
        sorted_types = sort_custom_types_by_dependency_order(reversed(lettered_types))

        assert [t.name for t in sorted_types] == ["A", "F", "B", "G", "C", "D", "E"]

    def test_independent_types_keep_input_order(self):
        types = [IRType(kind=TypeKind.ENUM, name=name) for name in ("Zeta", "Alpha", "Mu")]

        assert [t.name for t in sort_custom_types_by_dependency_order(types)] == ["Zeta", "Alpha", "Mu"]

    def test_filters_out_non_custom_types(self):
        types = [
            IRType(kind=TypeKind.SCALAR, name="Int"),
            IRType(kind=TypeKind.LIST, name=""),
            IRType(kind=TypeKind.NON_NULL, name=""),
        ]
        assert sort_custom_types_by_dependency_order(types) == []

    def test_filters_out_meta_types(self):
        types = [
            IRType(kind=TypeKind.OBJECT, name="__Type"),
            IRType(kind=TypeKind.ENUM, name="__TypeKind"),
            IRType(kind=TypeKind.ENUM, name="Episode"),
        ]
        assert [t.name for t in sort_custom_types_by_dependency_order(types)] == ["Episode"]

    def test_empty_input(self):
        assert sort_custom_types_by_dependency_order([]) == []

    def test_throws_on_circular_type_references(self):
        a = IRType(kind=TypeKind.OBJECT, name="A", fields=(field("b", ref(TypeKind.OBJECT, "B")),))
        b = IRType(kind=TypeKind.OBJECT, name="B", fields=(field("a", ref(TypeKind.OBJECT, "A")),))

        with pytest.raises(CircularDependencyError) as exc_info:
            sort_custom_types_by_dependency_order([a, b])
        assert sorted(exc_info.value.type_names) == ["A", "B"]
        assert "Circular dependencies in schema between: A, B" in str(exc_info.value)

    def test_cycle_reports_only_unresolved_types(self):
        leaf = IRType(kind=TypeKind.ENUM, name="Leaf")
        a = IRType(
            kind=TypeKind.OBJECT,
            name="A",
            fields=(field("b", ref(TypeKind.OBJECT, "B")), field("leaf", ref(TypeKind.ENUM, "Leaf"))),
        )
        b = IRType(kind=TypeKind.OBJECT, name="B", fields=(field("a", ref(TypeKind.OBJECT, "A")),))

        with pytest.raises(CircularDependencyError) as exc_info:
            sort_custom_types_by_dependency_order([leaf, a, b])
        assert exc_info.value.type_names == ["A", "B"]

    def test_self_reference_is_a_cycle(self):
        node = IRType(kind=TypeKind.OBJECT, name="Node", fields=(field("parent", ref(TypeKind.OBJECT, "Node")),))

        with pytest.raises(CircularDependencyError):
            sort_custom_types_by_dependency_order([node])

    def test_missing_type_reference(self):
        user = IRType(kind=TypeKind.OBJECT, name="User", fields=(field("role", ref(TypeKind.ENUM, "Role")),))

        with pytest.raises(MissingTypeReferenceError) as exc_info:
            sort_custom_types_by_dependency_order([user])
        assert exc_info.value.type_name == "Role"

    def test_duplicate_type_names(self):
        types = [IRType(kind=TypeKind.ENUM, name="Role"), IRType(kind=TypeKind.ENUM, name="Role")]

        with pytest.raises(MalformedSchemaError, match="Role"):
            sort_custom_types_by_dependency_order(types)

    def test_object_and_its_interface(self):
        """An object implementing an interface comes before the interface."""
        character = IRType(
            kind=TypeKind.INTERFACE,
            name="Character",
            possible_types=(ref(TypeKind.OBJECT, "Droid"),),
        )
        droid = IRType(
            kind=TypeKind.OBJECT,
            name="Droid",
            interfaces=(ref(TypeKind.INTERFACE, "Character"),),
        )

        sorted_types = sort_custom_types_by_dependency_order([character, droid])
        assert [t.name for t in sorted_types] == ["Droid", "Character"]
