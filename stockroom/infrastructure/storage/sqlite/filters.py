"""
Structured WHERE-clause builder.

Each predicate compiles to a SQL fragment with ``?`` placeholders plus its
bound parameters. Column names are code constants and are checked against an
identifier pattern; user input only ever travels as a parameter.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")


def _column(name: str) -> str:
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid column name: {name!r}")
    return name


class Predicate:
    """A single WHERE condition. Inactive predicates are skipped."""

    @property
    def active(self) -> bool:
        return True

    def compile(self) -> tuple[str, list[Any]]:
        raise NotImplementedError


@dataclass(frozen=True)
class Eq(Predicate):
    """column = value; inactive when value is None."""

    column: str
    value: Any

    @property
    def active(self) -> bool:
        return self.value is not None

    def compile(self) -> tuple[str, list[Any]]:
        return f"{_column(self.column)} = ?", [self.value]


@dataclass(frozen=True)
class Gte(Predicate):
    """column >= value; inactive when value is None."""

    column: str
    value: Any

    @property
    def active(self) -> bool:
        return self.value is not None

    def compile(self) -> tuple[str, list[Any]]:
        return f"{_column(self.column)} >= ?", [self.value]


@dataclass(frozen=True)
class Lte(Predicate):
    """column <= value; inactive when value is None."""

    column: str
    value: Any

    @property
    def active(self) -> bool:
        return self.value is not None

    def compile(self) -> tuple[str, list[Any]]:
        return f"{_column(self.column)} <= ?", [self.value]


@dataclass(frozen=True)
class Search(Predicate):
    """Case-insensitive substring match over any of several columns."""

    columns: tuple[str, ...]
    term: str | None

    @property
    def active(self) -> bool:
        return bool(self.term and self.term.strip())

    def compile(self) -> tuple[str, list[Any]]:
        escaped = (
            self.term.strip()  # type: ignore[union-attr]
            .replace("\\", "\\\\")
            .replace("%", "\\%")
            .replace("_", "\\_")
        )
        pattern = f"%{escaped}%"
        parts = [f"{_column(c)} LIKE ? ESCAPE '\\'" for c in self.columns]
        return "(" + " OR ".join(parts) + ")", [pattern] * len(self.columns)


@dataclass(frozen=True)
class Raw(Predicate):
    """A fixed condition written in code, e.g. ``si.is_active = 1``."""

    sql: str
    params: tuple[Any, ...] = ()

    def compile(self) -> tuple[str, list[Any]]:
        return self.sql, list(self.params)


def build_where(predicates: Iterable[Predicate]) -> tuple[str, list[Any]]:
    """
    AND together the active predicates.

    Returns:
        ("WHERE ...", params), or ("", []) when nothing is active
    """
    fragments: list[str] = []
    params: list[Any] = []
    for predicate in predicates:
        if not predicate.active:
            continue
        sql, values = predicate.compile()
        fragments.append(sql)
        params.extend(values)

    if not fragments:
        return "", []
    return "WHERE " + " AND ".join(fragments), params
