"""Closed enumerations with stable ordinals and symbolic names.

A ClosedEnum subclass declares its variants in the class body. Each
variant receives a zero-based ordinal in declaration order, scoped to
its own type, and is addressable by the name it was declared under.
The variant set is fixed once the class body finishes executing:

- subclassing a type that already has variants raises TypeError
- reassigning or deleting a variant raises AttributeError

Subclasses carrying extra per-variant data declare each variant as a
tuple and accept those values in ``__init__``::

    class Color(ClosedEnum):
        RED = ("#f00",)
        GREEN = ("#0f0",)

        def __init__(self, hex_code: str) -> None:
            self.hex_code = hex_code
"""
from __future__ import annotations

from enum import Enum
from typing import TypeVar

_E = TypeVar("_E", bound="ClosedEnum")


class ClosedEnum(Enum):
    """Base for finite, ordered sets of named singleton variants."""

    def __new__(cls, *args: object) -> ClosedEnum:  # noqa: ARG003
        obj = object.__new__(cls)
        obj._value_ = len(cls.__members__)
        return obj

    @property
    def ordinal(self) -> int:
        """Zero-based position of this variant in declaration order."""
        return int(self._value_)

    @property
    def symbolic_name(self) -> str:
        """Name this variant was declared under on its owning type."""
        return self.name

    def __str__(self) -> str:
        return self.name

    @classmethod
    def all_variants(cls: type[_E]) -> tuple[_E, ...]:
        """Return every variant in ordinal order."""
        return tuple(cls)

    @classmethod
    def from_symbolic_name(cls: type[_E], name: str) -> _E | None:
        """Look up a variant by declared name. Returns None if not found."""
        return cls.__members__.get(name)

    @classmethod
    def from_ordinal(cls: type[_E], ordinal: int) -> _E | None:
        """Look up a variant by ordinal. Returns None if out of range."""
        variants = cls.all_variants()
        if 0 <= ordinal < len(variants):
            return variants[ordinal]
        return None
