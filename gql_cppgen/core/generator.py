"""Code generator for GraphQL schemas.

Produces a single C++ header from an ``IRSchema``: a fixed preamble
rendered from a Jinja2 template, then one declaration block per custom type
in dependency order, all inside the requested namespace.

Supports custom templates via the template_dir option:
    config = GeneratorConfig(namespace="api", template_dir="./my_templates")
    source = CodeGenerator(schema, config).generate()

Template lookup order:
1. User's template directory (if provided)
2. Package default templates
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Mapping

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PackageLoader, select_autoescape

from .declarations import generate_declaration
from .dependencies import sort_custom_types_by_dependency_order
from .hooks import HookRunner
from .ir import IRSchema, IRType, TypeKind
from .naming import CPP_ID_TYPE_NAME, CPP_JSON_TYPE_NAME, GRAPHQL_ERROR_TYPE_NAME
from .operations import OperationGenerator

logger = logging.getLogger(__name__)


class AlgebraicNamespace(str, Enum):
    """Library providing ``optional``, ``variant``, ``monostate`` and ``visit``."""
    STD = "std"
    ABSL = "absl"

    @property
    def optional_include(self) -> str:
        if self is AlgebraicNamespace.ABSL:
            return '"absl/types/optional.h"'
        return "<optional>"

    @property
    def variant_include(self) -> str:
        if self is AlgebraicNamespace.ABSL:
            return '"absl/types/variant.h"'
        return "<variant>"


ALGEBRAIC_NAMES = ("optional", "variant", "monostate", "visit")


@dataclass
class GeneratorConfig:
    """Options for one generation run."""
    namespace: str = "gql"
    algebraic_namespace: AlgebraicNamespace = AlgebraicNamespace.STD
    # Values above 1 generate type declarations on a thread pool
    max_workers: int = 1
    template_dir: str | None = None

    def __post_init__(self):
        if not self.namespace:
            raise ValueError("namespace must not be empty")
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.algebraic_namespace = AlgebraicNamespace(self.algebraic_namespace)


class CodeGenerator:
    """Generates a C++ header from GraphQL IR.

    Templates in ``config.template_dir`` take precedence over the built-in
    ones. Available templates to override:
        - header.hpp.j2: preamble and namespace around the declarations

    Example:
        generator = CodeGenerator(schema, GeneratorConfig(namespace="api"))
        generator.write("./include/api.hpp")
    """

    TEMPLATE_NAME = "header.hpp.j2"
    # Declarations sit one level inside the generated namespace
    TYPE_INDENTATION = 1

    def __init__(
        self,
        schema: IRSchema,
        config: GeneratorConfig | None = None,
        hooks: HookRunner | None = None,
    ):
        """Initialize the code generator.

        Args:
            schema: The intermediate representation of the GraphQL schema
            config: Generation options; defaults to ``GeneratorConfig()``
            hooks: Pre/post generation hooks to run around generation
        """
        self.schema = schema
        self.config = config or GeneratorConfig()
        self.hooks = hooks or HookRunner()

        # Build template loader - custom templates take precedence
        loaders = []
        if self.config.template_dir:
            template_path = Path(self.config.template_dir)
            if template_path.is_dir():
                loaders.append(FileSystemLoader(str(template_path)))
            else:
                logger.warning("Template directory %s does not exist, using built-in templates", template_path)
        loaders.append(PackageLoader("gql_cppgen", "templates"))

        self.env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(default_for_string=False, default=False),
            trim_blocks=True,
            keep_trailing_newline=True,
        )

    def generate(self, filename: str = "generated.hpp") -> str:
        """Generate the complete header source.

        Args:
            filename: Name passed to post-generation hooks

        Raises:
            CodegenError: on any schema problem; nothing is generated
        """
        schema = self.hooks.run_pre_hooks(self.schema)
        type_map = schema.type_map()
        sorted_types = sort_custom_types_by_dependency_order(schema.types)

        logger.info(
            "Generating %d custom types into namespace %s", len(sorted_types), self.config.namespace
        )
        declarations = self._generate_declarations(schema, type_map, sorted_types)

        algebraic_namespace = self.config.algebraic_namespace
        content = self.env.get_template(self.TEMPLATE_NAME).render(
            namespace=self.config.namespace,
            algebraic_namespace=algebraic_namespace.value,
            algebraic_names=ALGEBRAIC_NAMES,
            optional_include=algebraic_namespace.optional_include,
            variant_include=algebraic_namespace.variant_include,
            json_type=CPP_JSON_TYPE_NAME,
            id_type=CPP_ID_TYPE_NAME,
            error_type=GRAPHQL_ERROR_TYPE_NAME,
            declarations=declarations,
        )
        return self.hooks.run_post_hooks(filename, content)

    def write(self, output_path: str | Path) -> Path:
        """Generate the header and write it to ``output_path``.

        The file is only written once generation has fully succeeded.
        """
        path = Path(output_path)
        content = self.generate(path.name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        logger.info("Wrote %s", path)
        return path

    def _generate_declarations(
        self,
        schema: IRSchema,
        type_map: Mapping[str, IRType],
        sorted_types: list[IRType],
    ) -> list[str]:
        """Generate one block per type, in ``sorted_types`` order."""
        operations = OperationGenerator(type_map)

        def generate_block(ir_type: IRType) -> str:
            # Root operation types become namespaces of request/response helpers
            operation = schema.operation_for(ir_type.name) if ir_type.kind == TypeKind.OBJECT else None
            if operation is not None:
                return operations.generate_operation_types(ir_type, operation, self.TYPE_INDENTATION)
            return generate_declaration(ir_type, self.TYPE_INDENTATION)

        if self.config.max_workers > 1:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as pool:
                return list(pool.map(generate_block, sorted_types))
        return [generate_block(ir_type) for ir_type in sorted_types]
