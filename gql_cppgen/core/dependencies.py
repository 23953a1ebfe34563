"""Dependency ordering of custom schema types.

Generated declarations must appear after every declaration they mention,
so custom types are sorted topologically before any code is generated.
"""

import logging
from typing import Iterable

from .errors import CircularDependencyError, MalformedSchemaError, MissingTypeReferenceError
from .ir import IRType, IRTypeRef

logger = logging.getLogger(__name__)


def is_generated_type(ir_type: IRType) -> bool:
    """Check if a type gets its own declaration (custom and not a meta-type)."""
    return ir_type.kind.is_custom and not ir_type.is_meta


def dependency_names(ir_type: IRType) -> list[str]:
    """Return the names of the custom types ``ir_type`` depends on.

    Dependencies come from the underlying type of every field, field
    argument and input field, plus every possible type. Interfaces an
    object implements are not dependencies: the interface already depends
    on the object through its possible types.
    """
    names: list[str] = []

    def add(type_ref: IRTypeRef):
        if type_ref.kind.is_custom and type_ref.name and type_ref.name not in names:
            names.append(type_ref.name)

    for ir_field in ir_type.fields:
        add(ir_field.type.underlying_type())
        for arg in ir_field.args:
            add(arg.type.underlying_type())

    for input_field in ir_type.input_fields:
        add(input_field.type.underlying_type())

    for possible_type in ir_type.possible_types:
        add(possible_type)

    return names


def sort_custom_types_by_dependency_order(types: Iterable[IRType]) -> list[IRType]:
    """Sort custom types so that every type comes after its dependencies.

    Scalars, wrappers and meta-types are dropped. Each pass emits every
    type whose dependencies have all been emitted, keeping the input order
    within the pass, so the result is deterministic.

    Raises:
        CircularDependencyError: if the remaining types depend on each other
        MissingTypeReferenceError: if a dependency is not among ``types``
        MalformedSchemaError: if two custom types share a name
    """
    pending: dict[str, IRType] = {}
    for ir_type in types:
        if not is_generated_type(ir_type):
            continue
        if ir_type.name in pending:
            raise MalformedSchemaError(f"Type {ir_type.name} is declared more than once")
        pending[ir_type.name] = ir_type

    remaining_dependencies: dict[str, set[str]] = {}
    for name, ir_type in pending.items():
        dependencies = dependency_names(ir_type)
        for dependency in dependencies:
            if dependency not in pending:
                raise MissingTypeReferenceError(dependency)
        remaining_dependencies[name] = set(dependencies)

    sorted_types: list[IRType] = []
    passes = 0

    while pending:
        passes += 1
        ready = [name for name in pending if not remaining_dependencies[name]]
        if not ready:
            raise CircularDependencyError(list(pending))

        for name in ready:
            sorted_types.append(pending.pop(name))
        for name in pending:
            remaining_dependencies[name].difference_update(ready)

    logger.debug("Sorted %d custom types in %d passes", len(sorted_types), passes)
    return sorted_types
