"""Resource addressing: what the operator asked for and what the server knows."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from .errors import ConfigurationError


class ResourceKind(Enum):
    FLEET_NODE = "fleet node"
    CLIENT = "client"
    SUBSCRIPTION = "subscription"
    WILDCARD = "all resources"


@dataclass(frozen=True)
class ResourceSpec:
    """Raw identifiers from the command line plus how to interpret them."""

    kind: ResourceKind
    identifiers: List[str] = field(default_factory=list)

    def __post_init__(self):
        if self.kind is ResourceKind.WILDCARD:
            object.__setattr__(self, "identifiers", [])
        elif not self.identifiers:
            raise ConfigurationError(f"{self.kind.value} resources require at least one identifier")

    @classmethod
    def wildcard(cls) -> "ResourceSpec":
        return cls(ResourceKind.WILDCARD)

    @classmethod
    def from_csv(cls, kind: ResourceKind, value: str) -> "ResourceSpec":
        return cls(kind, split_csv(value))

    def __str__(self) -> str:
        if self.kind is ResourceKind.WILDCARD:
            return self.kind.value
        return f"{self.kind.value}s: {', '.join(self.identifiers)}"


@dataclass(frozen=True)
class ResolvedResource:
    """A client or subscription confirmed (or assumed) to exist on the server."""

    kind: ResourceKind
    name: str

    @classmethod
    def client(cls, name: str) -> "ResolvedResource":
        return cls(ResourceKind.CLIENT, name)

    @classmethod
    def subscription(cls, name: str) -> "ResolvedResource":
        return cls(ResourceKind.SUBSCRIPTION, name)

    @property
    def wire(self) -> str:
        """Value of the `subscription` field in silence payloads."""
        if self.kind is ResourceKind.CLIENT:
            return f"client:{self.name}"
        return self.name

    def __str__(self) -> str:
        return self.wire


def split_csv(value: str) -> List[str]:
    """Split a comma separated flag value, dropping blanks."""
    return [item.strip() for item in value.split(",") if item.strip()]
