"""C++ declarations for custom schema types.

Each generator returns a block of C++ source: the declaration of one type,
or the ``nlohmann::json`` (de)serialization functions that go with it.
Interfaces and unions become ``variant``s over their possible types plus a
synthesized ``Unknown<Name>`` case, so values of implementations added to
the schema later still deserialize.
"""

import logging
from typing import Callable

from .errors import MalformedSchemaError
from .ir import IRField, IRInputValue, IRType, TypeKind
from .naming import (
    CPP_JSON_TYPE_NAME,
    TYPENAME_FIELD,
    UNKNOWN_CASE_NAME,
    cpp_type_name,
    generate_description,
    indent,
    safe_identifier,
    screaming_snake_case_to_pascal_case,
)

logger = logging.getLogger(__name__)

# Variant member of every interface struct
INTERFACE_MEMBERS = frozenset({"implementation"})


def unknown_type_name(ir_type: IRType) -> str:
    """Name of the fallback case of an interface or union."""
    return UNKNOWN_CASE_NAME + ir_type.name


def enum_case_names(ir_type: IRType) -> list[str]:
    """C++ case names of an enum, in declaration order.

    Raises:
        MalformedSchemaError: if two values (or a value and ``Unknown``)
            map to the same case name
    """
    case_names: list[str] = []
    for value in ir_type.enum_values:
        case_name = screaming_snake_case_to_pascal_case(value.name)
        if case_name == UNKNOWN_CASE_NAME or case_name in case_names:
            raise MalformedSchemaError(
                f"Enum value {ir_type.name}.{value.name} collides with another case as {case_name}"
            )
        case_names.append(case_name)
    return case_names


def generate_enum(ir_type: IRType, indentation: int) -> str:
    parts = [
        generate_description(ir_type.description, indentation),
        f"{indent(indentation)}enum class {ir_type.name} {{\n",
    ]

    value_indentation = indentation + 1
    for value, case_name in zip(ir_type.enum_values, enum_case_names(ir_type)):
        parts.append(generate_description(value.description, value_indentation))
        parts.append(f"{indent(value_indentation)}{case_name},\n")

    parts.append(f"{indent(value_indentation)}{UNKNOWN_CASE_NAME} = -1\n")
    parts.append(f"{indent(indentation)}}};\n\n")
    return "".join(parts)


def generate_enum_serialization(ir_type: IRType, indentation: int) -> str:
    """Map each case to its wire name.

    ``Unknown`` comes first: nlohmann falls back to the first pair for
    values it does not recognize, in both directions.
    """
    value_indentation = indentation + 1
    parts = [
        f"{indent(indentation)}NLOHMANN_JSON_SERIALIZE_ENUM({ir_type.name}, {{\n",
        f"{indent(value_indentation)}{{{ir_type.name}::{UNKNOWN_CASE_NAME}, nullptr}},\n",
    ]
    for value, case_name in zip(ir_type.enum_values, enum_case_names(ir_type)):
        parts.append(f'{indent(value_indentation)}{{{ir_type.name}::{case_name}, "{value.name}"}},\n')
    parts.append(f"{indent(indentation)}}});\n\n")
    return "".join(parts)


def cpp_variant(possible_type_names: list[str], unknown_name: str) -> str:
    return "variant<" + ", ".join([*possible_type_names, unknown_name]) + ">"


def generate_member(member: IRField | IRInputValue, indentation: int) -> str:
    return (
        generate_description(member.description, indentation)
        + f"{indent(indentation)}{cpp_type_name(member.type)} {safe_identifier(member.name)};\n"
    )


def generate_struct(
    name: str,
    members: tuple[IRField, ...] | tuple[IRInputValue, ...],
    description: str | None,
    indentation: int,
) -> str:
    parts = [
        generate_description(description, indentation),
        f"{indent(indentation)}struct {name} {{\n",
    ]
    parts.extend(generate_member(member, indentation + 1) for member in members)
    parts.append(f"{indent(indentation)}}};\n\n")
    return "".join(parts)


def generate_deserialization_function_declaration(type_name: str, indentation: int) -> str:
    return (
        f"{indent(indentation)}inline void from_json("
        f"{CPP_JSON_TYPE_NAME} const & json, {type_name} & value) {{\n"
    )


def generate_field_deserialization(ir_field: IRField, indentation: int) -> str:
    """Read one field; only NonNull fields are required to be present."""
    member = safe_identifier(ir_field.name)
    if ir_field.type.is_non_null:
        return f'{indent(indentation)}json.at("{ir_field.name}").get_to(value.{member});\n'

    lines = [
        f"{indent(indentation)}{{",
        f'{indent(indentation + 1)}auto it = json.find("{ir_field.name}");',
        f"{indent(indentation + 1)}if (it != json.end()) {{",
        f"{indent(indentation + 2)}it->get_to(value.{member});",
        f"{indent(indentation + 1)}}} else {{",
        f"{indent(indentation + 2)}value.{member}.reset();",
        f"{indent(indentation + 1)}}}",
        f"{indent(indentation)}}}",
    ]
    return "\n".join(lines) + "\n"


def generate_fields_deserialization(type_name: str, fields: tuple[IRField, ...], indentation: int) -> str:
    parts = [generate_deserialization_function_declaration(type_name, indentation)]
    parts.extend(generate_field_deserialization(ir_field, indentation + 1) for ir_field in fields)
    parts.append(f"{indent(indentation)}}}\n\n")
    return "".join(parts)


def generate_field_serialization(
    wire_name: str, value_expression: str, json_name: str, indentation: int
) -> str:
    return f'{indent(indentation)}{json_name}["{wire_name}"] = {value_expression};\n'


def generate_variant_deserialization(ir_type: IRType, construct_unknown: str, indentation: int) -> str:
    """Pick the variant case from ``__typename``, first match in declaration order."""
    names = ir_type.possible_type_names()
    body = indentation + 1
    parts = [generate_deserialization_function_declaration(ir_type.name, indentation)]

    if names:
        parts.append(f'{indent(body)}std::string occupiedType = json.at("{TYPENAME_FIELD}");\n')
        branch = f"{indent(body)}if"
        for name in names:
            parts.append(f'{branch} (occupiedType == "{name}") {{\n')
            parts.append(f"{indent(body + 1)}value = {{json.get<{name}>()}};\n")
            branch = f"{indent(body)}}} else if"
        parts.append(f"{indent(body)}}} else {{\n")
        parts.append(f"{indent(body + 1)}value = {{{construct_unknown}}};\n")
        parts.append(f"{indent(body)}}}\n")
    else:
        parts.append(f"{indent(body)}value = {{{construct_unknown}}};\n")

    parts.append(f"{indent(indentation)}}}\n\n")
    return "".join(parts)


def generate_object(ir_type: IRType, indentation: int) -> str:
    return generate_struct(ir_type.name, ir_type.fields, ir_type.description, indentation)


def generate_object_deserialization(ir_type: IRType, indentation: int) -> str:
    return generate_fields_deserialization(ir_type.name, ir_type.fields, indentation)


def generate_input_object(ir_type: IRType, indentation: int) -> str:
    return generate_struct(ir_type.name, ir_type.input_fields, ir_type.description, indentation)


def generate_input_object_serialization(ir_type: IRType, indentation: int) -> str:
    """Write every set member; unset optional members are left out of the object."""
    body = indentation + 1
    parts = [
        f"{indent(indentation)}inline void to_json({CPP_JSON_TYPE_NAME} & json, {ir_type.name} const & value) {{\n",
        f"{indent(body)}json = {CPP_JSON_TYPE_NAME}::object();\n",
    ]
    for input_field in ir_type.input_fields:
        member = f"value.{safe_identifier(input_field.name)}"
        if input_field.type.is_non_null:
            parts.append(generate_field_serialization(input_field.name, member, "json", body))
        else:
            parts.append(f"{indent(body)}if ({member}) {{\n")
            parts.append(generate_field_serialization(input_field.name, member, "json", body + 1))
            parts.append(f"{indent(body)}}}\n")
    parts.append(f"{indent(indentation)}}}\n\n")
    return "".join(parts)


def generate_interface(ir_type: IRType, indentation: int) -> str:
    """Declare ``Unknown<Name>`` and the interface wrapping a variant of implementations.

    Interface fields become accessors that ``visit`` the active case, so
    interface values stay plain copyable values instead of base classes.
    """
    unknown_name = unknown_type_name(ir_type)
    field_indentation = indentation + 1

    unknown_implementation = generate_struct(unknown_name, ir_type.fields, None, indentation)

    parts = [
        generate_description(ir_type.description, indentation),
        f"{indent(indentation)}struct {ir_type.name} {{\n",
        f"{indent(field_indentation)}{cpp_variant(ir_type.possible_type_names(), unknown_name)} implementation;\n",
    ]
    for ir_field in ir_type.fields:
        member = safe_identifier(ir_field.name)
        accessor = safe_identifier(ir_field.name, INTERFACE_MEMBERS)
        return_type = f"{cpp_type_name(ir_field.type)} const &"
        parts.append("\n")
        parts.append(generate_description(ir_field.description, field_indentation))
        parts.append(f"{indent(field_indentation)}{return_type} {accessor}() const {{\n")
        parts.append(
            f"{indent(field_indentation + 1)}return visit([](auto const & implementation) -> {return_type} {{\n"
        )
        parts.append(f"{indent(field_indentation + 2)}return implementation.{member};\n")
        parts.append(f"{indent(field_indentation + 1)}}}, implementation);\n")
        parts.append(f"{indent(field_indentation)}}}\n")
    parts.append(f"{indent(indentation)}}};\n\n")

    return unknown_implementation + "".join(parts)


def generate_interface_deserialization(ir_type: IRType, indentation: int) -> str:
    unknown_name = unknown_type_name(ir_type)
    return generate_fields_deserialization(unknown_name, ir_type.fields, indentation) + (
        generate_variant_deserialization(ir_type, f"json.get<{unknown_name}>()", indentation)
    )


def generate_union(ir_type: IRType, indentation: int) -> str:
    """Declare an empty ``Unknown<Name>`` and alias the union to a variant.

    The fallback is a struct of its own so unions with the same members
    still alias distinct variant types.
    """
    unknown_name = unknown_type_name(ir_type)
    return (
        f"{indent(indentation)}struct {unknown_name} {{}};\n"
        + generate_description(ir_type.description, indentation)
        + f"{indent(indentation)}using {ir_type.name} = "
        + f"{cpp_variant(ir_type.possible_type_names(), unknown_name)};\n\n"
    )


def generate_union_deserialization(ir_type: IRType, indentation: int) -> str:
    unknown_name = unknown_type_name(ir_type)
    return (
        f"{indent(indentation)}inline void from_json({CPP_JSON_TYPE_NAME} const &, {unknown_name} &) {{}}\n\n"
        + generate_variant_deserialization(ir_type, f"{unknown_name}()", indentation)
    )


_DECLARATION_GENERATORS: dict[TypeKind, tuple[Callable[[IRType, int], str], ...]] = {
    TypeKind.OBJECT: (generate_object, generate_object_deserialization),
    TypeKind.INTERFACE: (generate_interface, generate_interface_deserialization),
    TypeKind.UNION: (generate_union, generate_union_deserialization),
    TypeKind.ENUM: (generate_enum, generate_enum_serialization),
    TypeKind.INPUT_OBJECT: (generate_input_object, generate_input_object_serialization),
}


def generate_declaration(ir_type: IRType, indentation: int) -> str:
    """Generate the declaration and (de)serialization block of one type.

    Scalars and wrappers have no declaration of their own and yield an
    empty string.
    """
    generators = _DECLARATION_GENERATORS.get(ir_type.kind, ())
    logger.debug("Generating %s %s", ir_type.kind.value, ir_type.name)
    return "".join(generate(ir_type, indentation) for generate in generators)
