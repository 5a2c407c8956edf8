"""Basic value types of the language and the composite type descriptor."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class BasicType(enum.Enum):
    """Scalar kinds a value can have; ``ERROR`` marks a failed type check."""

    BOOL = "bool"
    CHAR = "char"
    INT = "int"
    FLOAT = "float"
    DOUBLE = "double"
    STRING = "string"
    VOID = "void"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Type:
    """A basic kind with optional array dimensions (empty means scalar)."""

    kind: BasicType = BasicType.ERROR
    dims: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "dims", tuple(self.dims))

    def is_scalar(self) -> bool:
        """Return True when the type has no array dimensions."""
        return not self.dims

    def __str__(self) -> str:
        return self.kind.value + "".join(f"[{dim}]" for dim in self.dims)