"""Command-line interface for gql-cppgen."""

import asyncio
import json
import logging
import shutil
import tarfile
import tempfile
import zipfile
from pathlib import Path
from typing import Any

import click
import httpx

from .core.auth import Auth, build_auth, parse_header_option
from .core.errors import CodegenError
from .core.generator import AlgebraicNamespace, CodeGenerator, GeneratorConfig
from .core.hooks import AddHeaderHook, FilterTypesHook, HookRunner
from .core.introspection import IntrospectionClient
from .core.ir import IRSchema
from .core.parser import SchemaParser, schema_from_introspection

ARCHIVE_SUFFIXES = (".zip", ".tar.gz", ".tgz")


def extract_archive(archive_path: Path) -> str:
    """Extract archive to temp directory. Returns path to extracted content."""
    temp_dir = tempfile.mkdtemp()
    if archive_path.suffix == ".zip":
        with zipfile.ZipFile(archive_path, "r") as zip_ref:
            zip_ref.extractall(temp_dir)
    elif archive_path.name.endswith((".tar.gz", ".tgz")):
        with tarfile.open(archive_path, "r:gz") as tar_ref:
            try:
                tar_ref.extractall(temp_dir, filter="data")
            except tarfile.FilterError:
                shutil.rmtree(temp_dir)
                raise
    else:
        shutil.rmtree(temp_dir)
        raise ValueError(f"Unsupported archive format: {archive_path.suffix}")
    return temp_dir


def _configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _validate_headers(ctx, param, values: tuple[str, ...]) -> tuple[str, ...]:
    for value in values:
        try:
            parse_header_option(value)
        except ValueError as e:
            raise click.BadParameter(str(e)) from e
    return values


async def _fetch_introspection(endpoint: str, auth: Auth) -> dict[str, Any]:
    async with IntrospectionClient(endpoint, auth=auth) as client:
        return await client.fetch()


def _introspect(endpoint: str, token: str | None, headers: tuple[str, ...]) -> dict[str, Any]:
    """Run the introspection query, reporting failures as CLI errors."""
    try:
        return asyncio.run(_fetch_introspection(endpoint, build_auth(token, headers)))
    except httpx.HTTPError as e:
        raise click.ClickException(f"Could not fetch schema from {endpoint}: {e}") from e
    except CodegenError as e:
        raise click.ClickException(e.message) from e


def _parse_schema_path(schema_path: Path, verbose: bool) -> IRSchema:
    temp_dir = None
    try:
        # Handle archives
        actual_schema_path = schema_path
        if schema_path.is_file() and schema_path.name.lower().endswith(ARCHIVE_SUFFIXES):
            click.echo(f"Extracting archive {schema_path.name}...")
            try:
                temp_dir = extract_archive(schema_path)
            except tarfile.FilterError as e:
                raise click.ClickException(f"Refusing to extract {schema_path.name}: {e}") from e
            actual_schema_path = Path(temp_dir)
            if verbose:
                click.echo(f"  Extracted to: {temp_dir}")

        if verbose:
            click.echo(f"Schema: {actual_schema_path}")
        return SchemaParser(str(actual_schema_path)).parse_all()
    finally:
        # Clean up temp directory
        if temp_dir:
            shutil.rmtree(temp_dir)


@click.group(context_settings={"auto_envvar_prefix": "GQL_CPPGEN"})
@click.version_option(package_name="gql-cppgen")
def main():
    """GraphQL client code generator for C++.

    Generate a C++17 header of types, JSON (de)serializers and typed
    request/response helpers from a GraphQL schema.
    """
    pass


@main.command()
@click.option(
    "--schema",
    "-s",
    type=click.Path(exists=True),
    help="Introspection JSON, SDL file, SDL directory, or archive (.zip, .tar.gz, .tgz).",
)
@click.option(
    "--endpoint",
    "-e",
    help="GraphQL endpoint URL to introspect instead of reading a schema file.",
)
@click.option(
    "--output",
    "-o",
    required=True,
    type=click.Path(dir_okay=False),
    help="Output header file (e.g., api.hpp).",
)
@click.option(
    "--namespace",
    "-n",
    default="gql",
    show_default=True,
    help="C++ namespace wrapping the generated code.",
)
@click.option(
    "--algebraic",
    type=click.Choice([namespace.value for namespace in AlgebraicNamespace]),
    default=AlgebraicNamespace.STD.value,
    show_default=True,
    help="Library providing optional, variant, monostate and visit.",
)
@click.option(
    "--token",
    envvar="GQL_CPPGEN_TOKEN",
    help="Bearer token for --endpoint.",
)
@click.option(
    "--header",
    "-H",
    "headers",
    multiple=True,
    callback=_validate_headers,
    help="Extra request header for --endpoint, as 'Name: value'. Repeatable.",
)
@click.option(
    "--banner",
    help="Text added at the top of the generated header.",
)
@click.option(
    "--exclude-prefix",
    help="Skip custom types whose name starts with this prefix.",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Threads used to generate type declarations.",
)
@click.option(
    "--template-dir",
    type=click.Path(exists=True, file_okay=False),
    help="Directory of templates overriding the built-in ones.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
def generate(
    schema: str | None,
    endpoint: str | None,
    output: str,
    namespace: str,
    algebraic: str,
    token: str | None,
    headers: tuple[str, ...],
    banner: str | None,
    exclude_prefix: str | None,
    workers: int,
    template_dir: str | None,
    verbose: bool,
):
    """Generate a C++ header from a GraphQL schema.

    Examples:

        gql-cppgen generate --schema ./schema.json --output ./include/api.hpp

        gql-cppgen generate -s ./schema.graphqls -o api.hpp -n api --algebraic absl

        gql-cppgen generate -e https://example.com/graphql --token $TOKEN -o api.hpp
    """
    _configure_logging(verbose)
    if (schema is None) == (endpoint is None):
        raise click.UsageError("Pass exactly one of --schema or --endpoint.")

    output_path = Path(output).resolve()
    if verbose:
        click.echo(f"Output: {output_path}")

    hooks = HookRunner()
    if exclude_prefix:
        hooks.add_pre_hook(FilterTypesHook(exclude_prefix=exclude_prefix))
    if banner:
        hooks.add_post_hook(AddHeaderHook(banner))

    try:
        if endpoint is not None:
            click.echo(f"Introspecting {endpoint}...")
            ir = schema_from_introspection(_introspect(endpoint, token, headers))
        else:
            click.echo("Parsing schema...")
            ir = _parse_schema_path(Path(schema).resolve(), verbose)

        if verbose:
            custom_types = [t for t in ir.types if t.kind.is_custom and not t.is_meta]
            click.echo(f"  Types: {len(ir.types)}")
            click.echo(f"  Custom types: {len(custom_types)}")

        click.echo("Generating code...")
        config = GeneratorConfig(
            namespace=namespace,
            algebraic_namespace=AlgebraicNamespace(algebraic),
            max_workers=workers,
            template_dir=template_dir,
        )
        CodeGenerator(ir, config, hooks).write(output_path)
    except CodegenError as e:
        raise click.ClickException(e.message) from e

    click.echo(f"Done! Generated {output_path}")


@main.command()
@click.option(
    "--endpoint",
    "-e",
    required=True,
    help="GraphQL endpoint URL.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    help="File to save the introspection JSON to (default: stdout).",
)
@click.option(
    "--token",
    envvar="GQL_CPPGEN_TOKEN",
    help="Bearer token.",
)
@click.option(
    "--header",
    "-H",
    "headers",
    multiple=True,
    callback=_validate_headers,
    help="Extra request header, as 'Name: value'. Repeatable.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
def introspect(endpoint: str, output: str | None, token: str | None, headers: tuple[str, ...], verbose: bool):
    """Fetch a schema with the introspection query and save it as JSON.

    The saved file can be passed to `generate --schema` later.

    Examples:

        gql-cppgen introspect -e https://example.com/graphql -o schema.json
    """
    _configure_logging(verbose)
    result = _introspect(endpoint, token, headers)
    content = json.dumps(result, indent=2) + "\n"

    if output is None:
        click.echo(content, nl=False)
        return

    output_path = Path(output).resolve()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content)
    click.echo(f"Done! Saved introspection result to {output_path}", err=True)


if __name__ == "__main__":
    main()
