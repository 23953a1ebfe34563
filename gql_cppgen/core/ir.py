"""Intermediate Representation (IR) for GraphQL schemas.

The models mirror the ``__schema`` object of a GraphQL introspection
response key for key, so a decoded response validates straight into
``IRSchema``. All models are frozen and hold their collections as tuples:
the IR is built once and only read afterwards.
"""

from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .errors import MalformedSchemaError


class TypeKind(str, Enum):
    """Kind of a type or type reference, as named by introspection."""
    SCALAR = "SCALAR"
    OBJECT = "OBJECT"
    INTERFACE = "INTERFACE"
    UNION = "UNION"
    ENUM = "ENUM"
    INPUT_OBJECT = "INPUT_OBJECT"
    LIST = "LIST"
    NON_NULL = "NON_NULL"

    @property
    def is_custom(self) -> bool:
        """True for kinds that get their own generated declaration."""
        return self in CUSTOM_TYPE_KINDS

    @property
    def is_wrapper(self) -> bool:
        return self in (TypeKind.LIST, TypeKind.NON_NULL)


CUSTOM_TYPE_KINDS = frozenset({
    TypeKind.OBJECT,
    TypeKind.INTERFACE,
    TypeKind.UNION,
    TypeKind.ENUM,
    TypeKind.INPUT_OBJECT,
})


class Operation(str, Enum):
    """Root operation of a GraphQL document."""
    QUERY = "query"
    MUTATION = "mutation"
    SUBSCRIPTION = "subscription"

    @property
    def keyword(self) -> str:
        """Keyword that starts a document of this operation."""
        return self.value

    @property
    def case_name(self) -> str:
        """Case of the generated ``enum class Operation``."""
        return self.value.capitalize()


class _IRModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class IRTypeRef(_IRModel):
    """A type occurrence: a named type, or a List/NonNull wrapping another."""
    kind: TypeKind
    name: str | None = None
    # List and NonNull only
    of_type: "IRTypeRef | None" = Field(default=None, alias="ofType")

    @model_validator(mode="after")
    def _check_shape(self) -> "IRTypeRef":
        if self.kind.is_wrapper:
            if self.of_type is None:
                raise ValueError(f"{self.kind.value} type reference must wrap a type")
            if self.name is not None:
                raise ValueError(f"{self.kind.value} type reference cannot have a name")
        else:
            if not self.name:
                raise ValueError(f"{self.kind.value} type reference must have a name")
            if self.of_type is not None:
                raise ValueError(f"{self.kind.value} type reference cannot wrap a type")
        return self

    @classmethod
    def named(cls, kind: TypeKind, name: str) -> "IRTypeRef":
        return cls(kind=kind, name=name)

    @classmethod
    def non_null(cls, of_type: "IRTypeRef") -> "IRTypeRef":
        return cls(kind=TypeKind.NON_NULL, of_type=of_type)

    @classmethod
    def list_of(cls, of_type: "IRTypeRef") -> "IRTypeRef":
        return cls(kind=TypeKind.LIST, of_type=of_type)

    @property
    def is_non_null(self) -> bool:
        return self.kind == TypeKind.NON_NULL

    def underlying_type(self) -> "IRTypeRef":
        """Unwrap List and NonNull until the innermost named type is reached."""
        current = self
        while current.of_type is not None:
            current = current.of_type
        return current


class IRInputValue(_IRModel):
    """A field argument or an input object member."""
    name: str
    description: str | None = None
    type: IRTypeRef


class IRField(_IRModel):
    """A field of an object or interface."""
    name: str
    description: str | None = None
    type: IRTypeRef
    args: tuple[IRInputValue, ...] = ()

    @field_validator("args", mode="before")
    @classmethod
    def _null_is_empty(cls, value):
        return () if value is None else value


class IREnumValue(_IRModel):
    name: str
    description: str | None = None


# Kinds each optional payload applies to; everywhere else it must be empty.
_PAYLOAD_KINDS = {
    "fields": (TypeKind.OBJECT, TypeKind.INTERFACE),
    "input_fields": (TypeKind.INPUT_OBJECT,),
    "interfaces": (TypeKind.OBJECT, TypeKind.INTERFACE),
    "enum_values": (TypeKind.ENUM,),
    "possible_types": (TypeKind.INTERFACE, TypeKind.UNION),
}


class IRType(_IRModel):
    """Full declaration of one named schema type."""
    kind: TypeKind
    name: str
    description: str | None = None
    fields: tuple[IRField, ...] = ()
    input_fields: tuple[IRInputValue, ...] = Field(default=(), alias="inputFields")
    interfaces: tuple[IRTypeRef, ...] = ()
    enum_values: tuple[IREnumValue, ...] = Field(default=(), alias="enumValues")
    possible_types: tuple[IRTypeRef, ...] = Field(default=(), alias="possibleTypes")

    @field_validator(*_PAYLOAD_KINDS, mode="before")
    @classmethod
    def _null_payload_is_empty(cls, value):
        return () if value is None else value

    @model_validator(mode="after")
    def _check_payloads(self) -> "IRType":
        for payload, kinds in _PAYLOAD_KINDS.items():
            if getattr(self, payload) and self.kind not in kinds:
                raise ValueError(f"{self.kind.value} type {self.name} cannot have {payload}")
        return self

    @property
    def is_meta(self) -> bool:
        """Introspection meta-types (``__Type``, ``__Schema``...) start with two underscores."""
        return self.name.startswith("__")

    def possible_type_names(self) -> list[str]:
        """Names of the possible types, in declaration order.

        Raises:
            MalformedSchemaError: if a name is missing or listed twice
        """
        names: list[str] = []
        for possible_type in self.possible_types:
            if not possible_type.name:
                raise MalformedSchemaError(f"Possible type of {self.name} is missing its name")
            if possible_type.name in names:
                raise MalformedSchemaError(
                    f"Possible type {possible_type.name} is listed twice in {self.name}"
                )
            names.append(possible_type.name)
        return names


class IROperationType(_IRModel):
    name: str


class IRSchema(_IRModel):
    """Complete intermediate representation of a GraphQL schema."""
    query_type: IROperationType | None = Field(default=None, alias="queryType")
    mutation_type: IROperationType | None = Field(default=None, alias="mutationType")
    subscription_type: IROperationType | None = Field(default=None, alias="subscriptionType")
    types: tuple[IRType, ...] = ()

    def operation_for(self, type_name: str) -> Operation | None:
        """Return the operation whose root type is ``type_name``, if any."""
        roots = (
            (self.query_type, Operation.QUERY),
            (self.mutation_type, Operation.MUTATION),
            (self.subscription_type, Operation.SUBSCRIPTION),
        )
        for root, operation in roots:
            if root is not None and root.name == type_name:
                return operation
        return None

    def type_map(self) -> Mapping[str, IRType]:
        return build_type_map(self.types)


def build_type_map(types: Iterable[IRType]) -> Mapping[str, IRType]:
    """Build the read-only name to type lookup used throughout generation."""
    type_map: dict[str, IRType] = {}
    for ir_type in types:
        if ir_type.name in type_map:
            raise MalformedSchemaError(f"Type {ir_type.name} is declared more than once")
        type_map[ir_type.name] = ir_type
    return MappingProxyType(type_map)
