"""
Data models for token lookups.
"""

from dataclasses import dataclass, field
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class FieldResult(Generic[T]):
    """Outcome of a single remote read: a value, or absent with the reason."""
    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def present(self) -> bool:
        return self.value is not None

    @classmethod
    def ok(cls, value: T) -> "FieldResult[T]":
        return cls(value=value)

    @classmethod
    def absent(cls, error: Optional[str] = None) -> "FieldResult[T]":
        return cls(value=None, error=error)


@dataclass(frozen=True)
class TokenMetadata:
    """ERC-20 metadata read from a contract. Each field is independent."""
    name: FieldResult[str] = field(default_factory=FieldResult)
    symbol: FieldResult[str] = field(default_factory=FieldResult)
    decimals: FieldResult[int] = field(default_factory=FieldResult)

    @property
    def all_absent(self) -> bool:
        return not (self.name.present or self.symbol.present or self.decimals.present)


@dataclass(frozen=True)
class MessageHandle:
    """A chat message that can be edited in place."""
    chat_id: int
    message_id: int
