"""Names and formatting shared by all C++ generators.

Maps GraphQL type references to C++ type names and to GraphQL wire syntax,
and holds the small string helpers (case conversion, indentation,
comments) the generators are built from.
"""

from enum import Enum
from typing import AbstractSet

from .errors import MalformedSchemaError, UnknownScalarError
from .ir import IRTypeRef, TypeKind

SPACES_PER_INDENT = 4
UNKNOWN_CASE_NAME = "Unknown"
CPP_JSON_TYPE_NAME = "Json"
CPP_ID_TYPE_NAME = "Id"
GRAPHQL_ERROR_TYPE_NAME = "GraphqlError"
TYPENAME_FIELD = "__typename"


class Scalar(Enum):
    """Built-in GraphQL scalars. Custom scalars are not supported."""
    INT = "Int"
    FLOAT = "Float"
    STRING = "String"
    BOOLEAN = "Boolean"
    ID = "ID"


CPP_SCALAR_NAMES = {
    Scalar.INT: "int32_t",
    Scalar.FLOAT: "double",
    Scalar.STRING: "std::string",
    Scalar.BOOLEAN: "bool",
    Scalar.ID: CPP_ID_TYPE_NAME,
}

# C++ keywords that cannot be used as member or parameter names
CPP_KEYWORDS = frozenset({
    "alignas", "alignof", "and", "and_eq", "asm", "auto", "bitand", "bitor",
    "bool", "break", "case", "catch", "char", "char16_t", "char32_t", "class",
    "compl", "const", "const_cast", "constexpr", "continue", "decltype",
    "default", "delete", "do", "double", "dynamic_cast", "else", "enum",
    "explicit", "export", "extern", "false", "float", "for", "friend", "goto",
    "if", "inline", "int", "long", "mutable", "namespace", "new", "noexcept",
    "not", "not_eq", "nullptr", "operator", "or", "or_eq", "private",
    "protected", "public", "register", "reinterpret_cast", "return", "short",
    "signed", "sizeof", "static", "static_assert", "static_cast", "struct",
    "switch", "template", "this", "thread_local", "throw", "true", "try",
    "typedef", "typeid", "typename", "union", "unsigned", "using", "virtual",
    "void", "volatile", "wchar_t", "while", "xor", "xor_eq",
})


def indent(indentation: int) -> str:
    return " " * (indentation * SPACES_PER_INDENT)


def generate_description(description: str | None, indentation: int) -> str:
    """Render a schema description as a C++ comment.

    Single-line text becomes a ``//`` comment, anything longer a block
    comment with each line indented. Empty descriptions render nothing.
    """
    if not description:
        return ""

    description = description.replace("\r", "")
    if "\n" not in description:
        return f"{indent(indentation)}// {description}\n"

    body = description.replace("*/", "* /").replace("\n", "\n" + indent(indentation))
    return f"{indent(indentation)}/*\n{indent(indentation)}{body}\n{indent(indentation)}*/\n"


def screaming_snake_case_to_pascal_case(snake: str) -> str:
    """Convert SCREAMING_SNAKE_CASE to PascalCase, e.g. ``CASE_ONE`` -> ``CaseOne``."""
    return "".join(word[:1].upper() + word[1:].lower() for word in snake.split("_"))


def capitalize(name: str) -> str:
    """Upper-case the first character only; unlike ``str.capitalize`` the rest is kept."""
    return name[:1].upper() + name[1:]


def uncapitalize(name: str) -> str:
    return name[:1].lower() + name[1:]


def safe_identifier(name: str, reserved: AbstractSet[str] = frozenset()) -> str:
    """Make a name usable as a C++ identifier.

    Keywords, and any name in ``reserved`` (locals or members the generated
    code already declares in the same scope), get an underscore suffix.
    """
    if name in CPP_KEYWORDS or name in reserved:
        return f"{name}_"
    return name


def scalar_type(name: str) -> Scalar:
    try:
        return Scalar(name)
    except ValueError:
        raise UnknownScalarError(name) from None


def cpp_scalar_name(scalar: Scalar) -> str:
    return CPP_SCALAR_NAMES[scalar]


def _require_name(type_ref: IRTypeRef) -> str:
    if not type_ref.name:
        raise MalformedSchemaError(f"{type_ref.kind.value} type reference is missing its name")
    return type_ref.name


def _require_of_type(type_ref: IRTypeRef) -> IRTypeRef:
    if type_ref.of_type is None:
        raise MalformedSchemaError(f"{type_ref.kind.value} type reference does not wrap a type")
    return type_ref.of_type


def cpp_type_name(type_ref: IRTypeRef, check_nullability: bool = True) -> str:
    """Map a type reference to the C++ type used to hold it.

    Every level is ``optional<...>`` unless wrapped in NonNull. NonNull
    removes exactly one level: a ``[Int]!`` is a plain vector whose elements
    are still optional.
    """
    if check_nullability and type_ref.kind != TypeKind.NON_NULL:
        return f"optional<{cpp_type_name(type_ref, check_nullability=False)}>"

    kind = type_ref.kind
    if kind.is_custom:
        return _require_name(type_ref)
    if kind == TypeKind.SCALAR:
        return cpp_scalar_name(scalar_type(_require_name(type_ref)))
    if kind == TypeKind.LIST:
        return f"std::vector<{cpp_type_name(_require_of_type(type_ref))}>"
    if kind == TypeKind.NON_NULL:
        return cpp_type_name(_require_of_type(type_ref), check_nullability=False)

    raise MalformedSchemaError(f"Invalid type kind: {kind!r}")


def graphql_type_name(type_ref: IRTypeRef) -> str:
    """Render a type reference in GraphQL syntax, e.g. ``[Name!]!``."""
    kind = type_ref.kind
    if kind == TypeKind.LIST:
        return f"[{graphql_type_name(_require_of_type(type_ref))}]"
    if kind == TypeKind.NON_NULL:
        return f"{graphql_type_name(_require_of_type(type_ref))}!"
    return _require_name(type_ref)
