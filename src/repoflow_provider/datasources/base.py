"""Shared pieces of the data source readers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Protocol, TypeVar

from ..diagnostics import Diagnostics

T = TypeVar("T")
StateT = TypeVar("StateT", covariant=True)


class AttributeType(str, Enum):
    """Value type of a schema attribute."""

    STRING = "string"
    BOOL = "bool"
    INT64 = "int64"
    LIST_OF_STRING = "list(string)"


@dataclass(frozen=True)
class Attribute:
    """A data source attribute.

    Attributes:
        name: Attribute name in configuration and state.
        type: Value type.
        description: Markdown description shown to operators.
        required: Must be set in configuration.
        computed: Filled in by the read.
    """

    name: str
    type: AttributeType
    description: str
    required: bool = False
    computed: bool = False


@dataclass(frozen=True)
class Schema:
    """Attributes of a data source."""

    description: str
    attributes: tuple[Attribute, ...]

    def attribute(self, name: str) -> Attribute | None:
        for attr in self.attributes:
            if attr.name == name:
                return attr
        return None

    @property
    def required(self) -> list[str]:
        return [a.name for a in self.attributes if a.required]

    def validate_config(self, config: dict[str, Any]) -> Diagnostics:
        """Check a configuration against the schema.

        Every required attribute must be a non-empty string. Computed
        attributes are output only and may appear with a null value.
        """
        diagnostics = Diagnostics()

        for name in sorted(config):
            attr = self.attribute(name)
            if attr is None:
                diagnostics.add_error(
                    "Unsupported Argument",
                    f'An argument named "{name}" is not expected here.',
                )
            elif not attr.required and config[name] is not None:
                diagnostics.add_error(
                    "Invalid Configuration",
                    f'"{name}" is computed and cannot be set.',
                )

        for name in self.required:
            value = config.get(name)
            if value is None or value == "":
                diagnostics.add_error(
                    "Missing required argument",
                    f'The argument "{name}" is required, but no definition was found.',
                )
            elif not isinstance(value, str):
                diagnostics.add_error(
                    "Incorrect attribute value type",
                    f'"{name}" must be a string, got {type(value).__name__}.',
                )

        return diagnostics

    def to_dict(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "attributes": {
                a.name: {
                    "type": a.type.value,
                    "description": a.description,
                    "required": a.required,
                    "computed": a.computed,
                }
                for a in self.attributes
            },
        }


@dataclass
class ReadResponse(Generic[T]):
    """Result of a read.

    ``state`` is None when an error stopped the read before any state was
    produced.
    """

    state: T | None = None
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    @property
    def ok(self) -> bool:
        return self.state is not None and not self.diagnostics.has_error()


class Reader(Protocol[StateT]):
    """A data source: reads configuration in, returns state out."""

    type_name: str

    def schema(self) -> Schema: ...

    def read(self, config: dict[str, Any]) -> ReadResponse[StateT]: ...
