"""Request/response helpers for root operation fields.

Every field of the Query, Mutation and Subscription types becomes a
``<Field>Field`` struct holding the operation kind, a ``request`` function
that serializes the variables next to the literal query text, and a
``response`` function that decodes the server's answer.
"""

import logging
from typing import Mapping

from .declarations import generate_field_serialization
from .errors import MalformedSchemaError
from .ir import IRField, IRType, IRTypeRef, Operation, TypeKind
from .naming import (
    CPP_JSON_TYPE_NAME,
    GRAPHQL_ERROR_TYPE_NAME,
    Scalar,
    capitalize,
    cpp_type_name,
    generate_description,
    indent,
    safe_identifier,
    scalar_type,
)
from .query_builder import QueryBuilder

logger = logging.getLogger(__name__)

_BY_VALUE_SCALARS = (Scalar.INT, Scalar.FLOAT, Scalar.BOOLEAN)

# Locals declared by every generated request function
REQUEST_LOCALS = frozenset({"query", "variables"})


def should_pass_by_reference(type_ref: IRTypeRef) -> bool:
    """Decide how ``request`` takes a variable: by ``const &`` or by value.

    Numbers, booleans and enums are passed by value; strings, IDs, lists
    and structured types by reference. Only NonNull is looked through, so
    the decision does not depend on nullability.
    """
    current = type_ref
    while current.kind == TypeKind.NON_NULL:
        if current.of_type is None:
            raise MalformedSchemaError("NON_NULL type reference does not wrap a type")
        current = current.of_type

    if current.kind == TypeKind.SCALAR:
        return scalar_type(current.name or "") not in _BY_VALUE_SCALARS
    return current.kind != TypeKind.ENUM


class OperationGenerator:
    """Generates operation namespaces for the root types of a schema."""

    def __init__(self, type_map: Mapping[str, IRType]):
        self.query_builder = QueryBuilder(type_map)

    def generate_request_function(self, ir_field: IRField, operation: Operation, indentation: int) -> str:
        function_indentation = indentation + 1
        document = self.query_builder.build(ir_field, operation, function_indentation + 1)

        params = []
        for variable in document.variables:
            type_name = cpp_type_name(variable.type)
            if should_pass_by_reference(variable.type):
                type_name += " const &"
            params.append(f"{type_name} {safe_identifier(variable.name, REQUEST_LOCALS)}")

        parts = [
            f"{indent(indentation)}static {CPP_JSON_TYPE_NAME} request({', '.join(params)}) {{\n",
            # Raw string literal keeps the document readable in the header
            f'{indent(function_indentation)}{CPP_JSON_TYPE_NAME} query = R"(\n',
            document.query,
            f'{indent(function_indentation)})";\n',
            f"{indent(function_indentation)}{CPP_JSON_TYPE_NAME} variables = {CPP_JSON_TYPE_NAME}::object();\n",
        ]
        for variable in document.variables:
            parts.append(generate_field_serialization(
                variable.name, safe_identifier(variable.name, REQUEST_LOCALS), "variables", function_indentation
            ))
        parts.append(
            f'{indent(function_indentation)}return {{{{"query", std::move(query)}}, '
            f'{{"variables", std::move(variables)}}}};\n'
        )
        parts.append(f"{indent(indentation)}}}\n\n")
        return "".join(parts)

    def generate_response_function(self, ir_field: IRField, indentation: int) -> str:
        """Decode a response: the error list if present, else the field from ``data``."""
        body = indentation + 1
        errors_type = f"std::vector<{GRAPHQL_ERROR_TYPE_NAME}>"

        parts = [
            f"{indent(indentation)}using ResponseData = {cpp_type_name(ir_field.type)};\n\n",
            f"{indent(indentation)}static GraphqlResponse<ResponseData> response("
            f"{CPP_JSON_TYPE_NAME} const & json) {{\n",
            f'{indent(body)}auto errors = json.find("errors");\n',
            f"{indent(body)}if (errors != json.end()) {{\n",
            f"{indent(body + 1)}{errors_type} errorsList = *errors;\n",
            f"{indent(body + 1)}return errorsList;\n",
            f"{indent(body)}}} else {{\n",
            f'{indent(body + 1)}auto const & data = json.at("data");\n',
        ]

        if ir_field.type.is_non_null:
            parts.append(f'{indent(body + 1)}return ResponseData(data.at("{ir_field.name}"));\n')
        else:
            parts.extend([
                f'{indent(body + 1)}auto it = data.find("{ir_field.name}");\n',
                f"{indent(body + 1)}if (it != data.end()) {{\n",
                f"{indent(body + 2)}return ResponseData(*it);\n",
                f"{indent(body + 1)}}} else {{\n",
                f"{indent(body + 2)}return ResponseData{{}};\n",
                f"{indent(body + 1)}}}\n",
            ])

        parts.append(f"{indent(body)}}}\n")
        parts.append(f"{indent(indentation)}}}\n\n")
        return "".join(parts)

    def generate_operation_type(self, ir_field: IRField, operation: Operation, indentation: int) -> str:
        member_indentation = indentation + 1
        return "".join([
            generate_description(ir_field.description, indentation),
            f"{indent(indentation)}struct {capitalize(ir_field.name)}Field {{\n\n",
            f"{indent(member_indentation)}static Operation constexpr operation = "
            f"Operation::{operation.case_name};\n\n",
            self.generate_request_function(ir_field, operation, member_indentation),
            self.generate_response_function(ir_field, member_indentation),
            f"{indent(indentation)}}};\n\n",
        ])

    def generate_operation_types(self, ir_type: IRType, operation: Operation, indentation: int) -> str:
        """Generate the namespace standing in for a root operation type."""
        logger.debug("Generating %d %s operations of %s", len(ir_type.fields), operation.keyword, ir_type.name)
        parts = [f"{indent(indentation)}namespace {ir_type.name} {{\n\n"]
        parts.extend(
            self.generate_operation_type(ir_field, operation, indentation + 1) for ir_field in ir_type.fields
        )
        parts.append(f"{indent(indentation)}}} // namespace {ir_type.name}\n\n")
        return "".join(parts)
