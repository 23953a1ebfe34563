"""GraphQL schema ingestion.

Builds an IRSchema from an introspection result (JSON) or from SDL source
(.graphql/.graphqls), which graphql-core turns into the same introspection
shape first.
"""

import json
import logging
import os
from typing import Any, Mapping

from graphql import GraphQLError, build_schema, introspection_from_schema
from pydantic import ValidationError

from .errors import MalformedSchemaError
from .ir import IRSchema

logger = logging.getLogger(__name__)

SDL_EXTENSIONS = (".graphql", ".graphqls")
INTROSPECTION_EXTENSIONS = (".json",)


def _unwrap_schema(payload: Mapping[str, Any]) -> Mapping[str, Any]:
    """Find the ``__schema`` object in a response, a data object, or return a bare schema."""
    if "data" in payload or "errors" in payload:
        data = payload.get("data")
        if not data:
            messages = "; ".join(
                e.get("message", str(e)) if isinstance(e, Mapping) else str(e)
                for e in payload.get("errors") or ()
            )
            raise MalformedSchemaError(
                f"Introspection result has no data: {messages}" if messages else "Introspection result has no data"
            )
        payload = data

    if not isinstance(payload, Mapping):
        raise MalformedSchemaError("Introspection result must be a JSON object")
    if "__schema" in payload:
        payload = payload["__schema"]
    elif "types" not in payload:
        raise MalformedSchemaError("Introspection result has no __schema object")

    if not isinstance(payload, Mapping):
        raise MalformedSchemaError("__schema must be a JSON object")
    return payload


def schema_from_introspection(payload: Mapping[str, Any]) -> IRSchema:
    """Decode an introspection result into the IR.

    Accepts a full response (``{"data": {"__schema": ...}}``), a
    ``{"__schema": ...}`` object or the bare schema object.

    Raises:
        MalformedSchemaError: if the result is not a valid schema
    """
    if not isinstance(payload, Mapping):
        raise MalformedSchemaError("Introspection result must be a JSON object")

    try:
        schema = IRSchema.model_validate(_unwrap_schema(payload))
    except ValidationError as e:
        logger.error("Invalid introspection schema: %s", e)
        raise MalformedSchemaError(f"Invalid introspection schema: {e}") from e

    # Surface duplicate declarations at ingestion rather than mid-generation
    schema.type_map()
    logger.debug("Decoded schema with %d types", len(schema.types))
    return schema


def schema_from_sdl(source: str) -> IRSchema:
    """Build the IR from SDL source.

    Raises:
        MalformedSchemaError: on SDL syntax errors or an unusable schema
    """
    try:
        graphql_schema = build_schema(source, assume_valid=True)
        introspection = introspection_from_schema(graphql_schema)
    except GraphQLError as e:
        logger.error("Invalid SDL: %s", e.message)
        raise MalformedSchemaError(f"Invalid SDL: {e.message}") from e
    return schema_from_introspection(introspection)


class SchemaParser:
    """Parses schema files into IR."""

    def __init__(self, schema_path: str):
        """Initialize a parser with a path to a schema file or directory.

        A ``.json`` file holds an introspection result. SDL can be a single
        ``.graphql``/``.graphqls`` file or a directory of them, which are
        concatenated in sorted path order.
        """
        self.schema_path = str(schema_path)

    def parse_all(self) -> IRSchema:
        """Parse all schema files and return the complete IR."""
        if os.path.isfile(self.schema_path):
            if self.schema_path.endswith(INTROSPECTION_EXTENSIONS):
                return self._parse_introspection_file(self.schema_path)
            if self.schema_path.endswith(SDL_EXTENSIONS):
                return schema_from_sdl(self._read(self.schema_path))
            raise MalformedSchemaError(f"Unsupported schema file: {self.schema_path}")

        schema_files = self._collect_schema_files()
        if not schema_files:
            raise MalformedSchemaError(f"No schema files found in {self.schema_path}")
        logger.debug("Reading %d SDL files from %s", len(schema_files), self.schema_path)
        return schema_from_sdl("\n".join(self._read(path) for path in schema_files))

    def _collect_schema_files(self) -> list[str]:
        """Collect all SDL files below the schema directory."""
        files = []
        for root, _, filenames in os.walk(self.schema_path):
            for filename in filenames:
                if filename.endswith(SDL_EXTENSIONS):
                    files.append(os.path.join(root, filename))
        return sorted(files)

    @staticmethod
    def _read(path: str) -> str:
        with open(path) as f:
            return f.read()

    def _parse_introspection_file(self, path: str) -> IRSchema:
        try:
            payload = json.loads(self._read(path))
        except json.JSONDecodeError as e:
            logger.error("Error parsing %s: %s", os.path.basename(path), e)
            raise MalformedSchemaError(f"{os.path.basename(path)} is not valid JSON: {e}") from e
        return schema_from_introspection(payload)
