"""Hooks run around header generation.

A pre-generate hook gets the schema IR and returns the IR to generate from.
A post-generate hook gets the rendered header and returns the text that is
written. ``HookRunner`` chains both kinds in registration order.

The IR models are frozen, so a pre-generate hook returns a copy::

    class DropConnections:
        def pre_generate(self, ir):
            kept = tuple(t for t in ir.types if not t.name.endswith("Connection"))
            return ir.model_copy(update={"types": kept})
"""

import logging
from typing import Protocol, runtime_checkable

from .ir import IRSchema, IRType

logger = logging.getLogger(__name__)


@runtime_checkable
class PreGenerateHook(Protocol):
    def pre_generate(self, ir: IRSchema) -> IRSchema: ...


@runtime_checkable
class PostGenerateHook(Protocol):
    def post_generate(self, filename: str, content: str) -> str:
        """Transform the header text rendered for ``filename``."""
        ...


class AddHeaderHook:
    """Prepends a banner, such as a license notice, and a blank line."""

    def __init__(self, header: str):
        self.header = header

    def post_generate(self, _filename: str, content: str) -> str:
        banner = self.header.rstrip("\n")
        return f"{banner}\n\n{content}"


class FilterTypesHook:
    """Drops custom types whose names fail a prefix/suffix test.

    Scalars, ``__`` meta types and the root operation types always stay.
    Dropping a type that a kept type still references makes generation
    fail with ``MissingTypeReferenceError``.
    """

    def __init__(
        self,
        exclude_prefix: str | None = None,
        exclude_suffix: str | None = None,
        include_prefix: str | None = None,
        include_suffix: str | None = None,
    ):
        self.exclude_prefix = exclude_prefix
        self.exclude_suffix = exclude_suffix
        self.include_prefix = include_prefix
        self.include_suffix = include_suffix

    def matches(self, name: str) -> bool:
        if self.exclude_prefix and name.startswith(self.exclude_prefix):
            return False
        if self.exclude_suffix and name.endswith(self.exclude_suffix):
            return False
        if self.include_prefix and not name.startswith(self.include_prefix):
            return False
        return not self.include_suffix or name.endswith(self.include_suffix)

    @staticmethod
    def _always_kept(ir: IRSchema, ir_type: IRType) -> bool:
        return not ir_type.kind.is_custom or ir_type.is_meta or ir.operation_for(ir_type.name) is not None

    def pre_generate(self, ir: IRSchema) -> IRSchema:
        kept = tuple(t for t in ir.types if self._always_kept(ir, t) or self.matches(t.name))
        logger.debug("Filtered out %d types", len(ir.types) - len(kept))
        return ir.model_copy(update={"types": kept})


class HookRunner:
    """Ordered pre- and post-generate hooks for one ``CodeGenerator``."""

    def __init__(self):
        self.pre_hooks: list[PreGenerateHook] = []
        self.post_hooks: list[PostGenerateHook] = []

    def add_pre_hook(self, hook: PreGenerateHook):
        self.pre_hooks.append(hook)

    def add_post_hook(self, hook: PostGenerateHook):
        self.post_hooks.append(hook)

    def run_pre_hooks(self, ir: IRSchema) -> IRSchema:
        for hook in self.pre_hooks:
            ir = hook.pre_generate(ir)
        return ir

    def run_post_hooks(self, filename: str, content: str) -> str:
        for hook in self.post_hooks:
            content = hook.post_generate(filename, content)
        return content
