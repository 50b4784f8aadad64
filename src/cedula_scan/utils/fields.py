"""
Declarative fixed-position field extraction.

Each field is described by a :class:`FieldSpec` (offset, length, decoder) and
every layout is a plain tuple of specs, so a single field can be tested on its
own and a layout reads like the card format it describes.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any


def raw(value: str) -> str:
    return value


@dataclass(frozen=True)
class FieldSpec:
    """Position and decoder of a single field within a line."""

    name: str
    offset: int
    length: int | None = None  # None: up to the end of the line
    decoder: Callable[[str], Any] = raw

    @property
    def end(self) -> int | None:
        if self.length is None:
            return None
        return self.offset + self.length

    def slice(self, line: str) -> str:
        """Raw characters of this field; shorter than ``length`` if the line is short."""
        return line[self.offset : self.end]

    def extract(self, line: str) -> Any:
        return self.decoder(self.slice(line))


def slice_fields(line: str, specs: Iterable[FieldSpec]) -> dict[str, Any]:
    """
    Decode every field of a layout from one line.

    Args:
        line: Source line
        specs: Field layout

    Returns:
        Mapping of field name to decoded value
    """
    return {spec.name: spec.extract(line) for spec in specs}
