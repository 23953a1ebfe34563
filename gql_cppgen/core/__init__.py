"""Core modules for GraphQL code generation."""

from .auth import (
    Auth,
    BearerAuth,
    HeaderAuth,
    NoAuth,
    build_auth,
    parse_header_option,
)
from .dependencies import sort_custom_types_by_dependency_order
from .errors import (
    CircularDependencyError,
    CodegenError,
    IntrospectionError,
    MalformedSchemaError,
    MissingTypeReferenceError,
    UnknownScalarError,
)
from .generator import AlgebraicNamespace, CodeGenerator, GeneratorConfig
from .hooks import (
    AddHeaderHook,
    FilterTypesHook,
    HookRunner,
    PostGenerateHook,
    PreGenerateHook,
)
from .introspection import IntrospectionClient
from .ir import (
    IREnumValue,
    IRField,
    IRInputValue,
    IROperationType,
    IRSchema,
    IRType,
    IRTypeRef,
    Operation,
    TypeKind,
)
from .operations import OperationGenerator
from .parser import SchemaParser, schema_from_introspection, schema_from_sdl
from .query_builder import QueryBuilder, QueryDocument, QueryVariable

__all__ = [
    # Auth
    "Auth",
    "BearerAuth",
    "HeaderAuth",
    "NoAuth",
    "build_auth",
    "parse_header_option",
    # Errors
    "CodegenError",
    "MalformedSchemaError",
    "UnknownScalarError",
    "CircularDependencyError",
    "MissingTypeReferenceError",
    "IntrospectionError",
    # Hooks
    "PreGenerateHook",
    "PostGenerateHook",
    "AddHeaderHook",
    "FilterTypesHook",
    "HookRunner",
    # IR types
    "IREnumValue",
    "IRField",
    "IRInputValue",
    "IROperationType",
    "IRSchema",
    "IRType",
    "IRTypeRef",
    "Operation",
    "TypeKind",
    # Parser
    "SchemaParser",
    "schema_from_introspection",
    "schema_from_sdl",
    # Introspection
    "IntrospectionClient",
    # Dependency order
    "sort_custom_types_by_dependency_order",
    # Query Builder
    "QueryBuilder",
    "QueryDocument",
    "QueryVariable",
    # Generators
    "OperationGenerator",
    "AlgebraicNamespace",
    "CodeGenerator",
    "GeneratorConfig",
]
