"""Query builder for GraphQL operations.

Constructs the complete document for one root operation field: every
nested field is selected, interfaces and unions get a ``__typename``
discriminator plus one inline fragment per implementation, and every field
argument becomes a query variable with a name unique within the document.
"""

import logging
from dataclasses import dataclass, field
from typing import Mapping

from .errors import CircularDependencyError, MalformedSchemaError, MissingTypeReferenceError
from .ir import IRField, IRType, IRTypeRef, Operation, TypeKind
from .naming import TYPENAME_FIELD, capitalize, graphql_type_name, indent, uncapitalize

logger = logging.getLogger(__name__)

_LEAF_KINDS = (TypeKind.SCALAR, TypeKind.ENUM)
_SELECTABLE_KINDS = (TypeKind.OBJECT, TypeKind.INTERFACE, TypeKind.UNION)


@dataclass(frozen=True)
class QueryVariable:
    """A ``$variable`` declared by a document, with the type of its argument."""
    name: str
    type: IRTypeRef


@dataclass
class QueryDocument:
    """Text of a GraphQL document and the variables it declares, in order."""
    query: str
    variables: list[QueryVariable] = field(default_factory=list)


def append_name_to_variable_prefix(variable_prefix: str, name: str) -> str:
    """Extend a camelCase variable prefix, e.g. ``("object", "nestedField")`` -> ``objectNestedField``."""
    if not variable_prefix:
        return uncapitalize(name)
    return variable_prefix + capitalize(name)


class QueryBuilder:
    """Builds GraphQL documents for root operation fields."""

    def __init__(self, type_map: Mapping[str, IRType]):
        """Initialize with the type map used to resolve nested types."""
        self.type_map = type_map

    def build(self, ir_field: IRField, operation: Operation, indentation: int = 0) -> QueryDocument:
        """Build the document for one field of a root operation type.

        Args:
            ir_field: Field of the Query, Mutation or Subscription type
            operation: Operation the field belongs to
            indentation: Indentation level of the document's first line

        Returns:
            The document text and its variables

        Raises:
            MissingTypeReferenceError: if a nested type is not in the type map
            CircularDependencyError: if a type contains itself
        """
        variables: list[QueryVariable] = []
        selection_set = self._build_field(ir_field, "", variables, indentation + 1, ())

        lines = [f"{indent(indentation)}{operation.keyword} {capitalize(ir_field.name)}"]
        if variables:
            lines[0] += "("
            for variable in variables:
                lines.append(f"{indent(indentation + 1)}${variable.name}: {graphql_type_name(variable.type)}")
            lines.append(f"{indent(indentation)})")
        lines[-1] += " {"

        query = "\n".join(lines) + "\n" + selection_set + f"{indent(indentation)}}}\n"
        logger.debug(
            "Built %s document for %s with %d variables", operation.keyword, ir_field.name, len(variables)
        )
        return QueryDocument(query=query, variables=variables)

    def _lookup(self, type_name: str) -> IRType:
        try:
            return self.type_map[type_name]
        except KeyError:
            raise MissingTypeReferenceError(type_name) from None

    def _build_field(
        self,
        ir_field: IRField,
        variable_prefix: str,
        variables: list[QueryVariable],
        indentation: int,
        path: tuple[str, ...],
    ) -> str:
        """Select one field, with its arguments and nested selection set."""
        generated = indent(indentation) + ir_field.name

        if ir_field.args:
            generated += "(\n"
            for arg in ir_field.args:
                variable_name = append_name_to_variable_prefix(variable_prefix, arg.name)
                generated += f"{indent(indentation + 1)}{arg.name}: ${variable_name}\n"
                variables.append(QueryVariable(name=variable_name, type=arg.type))
            generated += indent(indentation) + ")"

        underlying = ir_field.type.underlying_type()
        if underlying.kind not in _LEAF_KINDS:
            if underlying.kind not in _SELECTABLE_KINDS or not underlying.name:
                raise MalformedSchemaError(
                    f"Field {ir_field.name} cannot return a {underlying.kind.value} type"
                )
            selection = self._build_fields(
                self._lookup(underlying.name),
                append_name_to_variable_prefix(variable_prefix, underlying.name),
                variables,
                (),
                indentation + 1,
                path,
            )
            generated += " {\n" + selection + indent(indentation) + "}"

        return generated + "\n"

    def _build_fields(
        self,
        ir_type: IRType,
        variable_prefix: str,
        variables: list[QueryVariable],
        ignored_fields: tuple[IRField, ...],
        indentation: int,
        path: tuple[str, ...],
    ) -> str:
        """Select every field of a type, skipping fields already selected by a parent."""
        if ir_type.name in path:
            raise CircularDependencyError([*path[path.index(ir_type.name):], ir_type.name])
        path = (*path, ir_type.name)

        parts = []
        if ir_type.possible_types:
            parts.append(f"{indent(indentation)}{TYPENAME_FIELD}\n")

        for ir_field in ir_type.fields:
            if ir_field not in ignored_fields:
                parts.append(self._build_field(
                    ir_field,
                    append_name_to_variable_prefix(variable_prefix, ir_field.name),
                    variables,
                    indentation,
                    path,
                ))

        for possible_type_name in ir_type.possible_type_names():
            fragment = self._build_fields(
                self._lookup(possible_type_name),
                append_name_to_variable_prefix(variable_prefix, possible_type_name),
                variables,
                ir_type.fields,
                indentation + 1,
                path,
            )
            # Implementations with nothing beyond the shared fields need no fragment
            if fragment:
                parts.append(f"{indent(indentation)}...on {possible_type_name} {{\n")
                parts.append(fragment)
                parts.append(f"{indent(indentation)}}}\n")

        return "".join(parts)
