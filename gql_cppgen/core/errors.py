"""Errors raised while ingesting a schema or generating code from it.

Every error here is fatal: generation stops at the point of detection and
no output is written.
"""

from typing import Any


class CodegenError(Exception):
    """Base class for all gql-cppgen failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class MalformedSchemaError(CodegenError):
    """The schema model is internally inconsistent or uses an unknown tag."""


class UnknownScalarError(MalformedSchemaError):
    """A scalar reference names something other than the built-in scalars."""

    def __init__(self, scalar_name: str):
        self.scalar_name = scalar_name
        super().__init__(f"Unsupported scalar type: {scalar_name}")


class CircularDependencyError(CodegenError):
    """The custom types reference each other in a cycle."""

    def __init__(self, type_names: list[str]):
        self.type_names = type_names
        super().__init__(
            "Circular dependencies in schema between: " + ", ".join(type_names)
        )


class MissingTypeReferenceError(CodegenError):
    """A type is referenced by name but is not declared in the schema."""

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(f"Type {type_name!r} is referenced but not declared in the schema")


class IntrospectionError(CodegenError):
    """The endpoint answered the introspection query with GraphQL errors."""

    def __init__(self, message: str, errors: list[dict[str, Any]]):
        self.errors = errors
        super().__init__(message)
