"""Filter predicates for knowledge store queries.

Each predicate can be evaluated against an in-memory record with
``matches()`` or compiled to a parameterized SQLite WHERE clause with
``to_sql()``. Both paths must select the same records.

Usage:
    criteria = WithinRange("min_age_months", "max_age_months", 18) & Equals(
        "indication", "fever"
    )
    rules = store.find_dosage_rules("Acetaminophen", criteria)
"""

import re
import sqlite3
from enum import Enum
from typing import Any

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# SQLite lower() only folds ASCII; this one folds like str.lower()
SQL_LOWER = "py_lower"


def _py_lower(value):
    if value is None:
        return None
    return str(value).lower()


def register_sql_functions(conn: sqlite3.Connection) -> None:
    """Register the SQL functions that compiled filters call."""
    conn.create_function(SQL_LOWER, 1, _py_lower, deterministic=True)


def _check_field(name: str) -> str:
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid field name: {name!r}")
    return name


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


class Filter:
    """Base class for store predicates."""

    def matches(self, record: Any) -> bool:
        raise NotImplementedError

    def to_sql(self) -> tuple[str, list]:
        raise NotImplementedError

    def __and__(self, other: "Filter") -> "AllOf":
        return AllOf(self, other)


class Equals(Filter):
    """Field equals value exactly."""

    def __init__(self, field: str, value: Any):
        self.field = _check_field(field)
        self.value = value

    def matches(self, record: Any) -> bool:
        return _plain(getattr(record, self.field)) == _plain(self.value)

    def to_sql(self) -> tuple[str, list]:
        return f"{self.field} = ?", [_plain(self.value)]

    def __repr__(self):
        return f"Equals({self.field!r}, {self.value!r})"


class EqualsOrNull(Filter):
    """Field equals value, or is unset (applies to every value)."""

    def __init__(self, field: str, value: Any):
        self.field = _check_field(field)
        self.value = value

    def matches(self, record: Any) -> bool:
        current = getattr(record, self.field)
        return current is None or _plain(current) == _plain(self.value)

    def to_sql(self) -> tuple[str, list]:
        return f"({self.field} IS NULL OR {self.field} = ?)", [_plain(self.value)]

    def __repr__(self):
        return f"EqualsOrNull({self.field!r}, {self.value!r})"


class ContainsText(Filter):
    """Field contains text as a case-insensitive substring."""

    def __init__(self, field: str, text: str):
        self.field = _check_field(field)
        self.text = text

    def matches(self, record: Any) -> bool:
        current = getattr(record, self.field) or ""
        return self.text.lower() in current.lower()

    def to_sql(self) -> tuple[str, list]:
        # instr() avoids LIKE wildcard escaping for % and _
        return f"instr({SQL_LOWER}({self.field}), ?) > 0", [self.text.lower()]

    def __repr__(self):
        return f"ContainsText({self.field!r}, {self.text!r})"


class ContainsAnyTerm(Filter):
    """Field contains at least one of the terms (case-insensitive)."""

    def __init__(self, field: str, terms: list[str]):
        self.field = _check_field(field)
        self.terms = list(terms)

    def matches(self, record: Any) -> bool:
        current = (getattr(record, self.field) or "").lower()
        return any(term.lower() in current for term in self.terms)

    def to_sql(self) -> tuple[str, list]:
        if not self.terms:
            return "0 = 1", []
        clauses = [f"instr({SQL_LOWER}({self.field}), ?) > 0" for _ in self.terms]
        return "(" + " OR ".join(clauses) + ")", [term.lower() for term in self.terms]

    def __repr__(self):
        return f"ContainsAnyTerm({self.field!r}, {self.terms!r})"


class WithinRange(Filter):
    """Value lies within [min_field, max_field], inclusive.

    A NULL bound is open on that side.
    """

    def __init__(self, min_field: str, max_field: str, value: float):
        self.min_field = _check_field(min_field)
        self.max_field = _check_field(max_field)
        self.value = value

    def matches(self, record: Any) -> bool:
        low = getattr(record, self.min_field)
        high = getattr(record, self.max_field)
        if low is not None and low > self.value:
            return False
        if high is not None and high < self.value:
            return False
        return True

    def to_sql(self) -> tuple[str, list]:
        clause = (
            f"({self.min_field} IS NULL OR {self.min_field} <= ?)"
            f" AND ({self.max_field} IS NULL OR {self.max_field} >= ?)"
        )
        return clause, [self.value, self.value]

    def __repr__(self):
        return f"WithinRange({self.min_field!r}, {self.max_field!r}, {self.value!r})"


class AllOf(Filter):
    """Conjunction of predicates. An empty AllOf matches everything."""

    def __init__(self, *filters: Filter):
        flattened: list[Filter] = []
        for f in filters:
            if isinstance(f, AllOf):
                flattened.extend(f.filters)
            else:
                flattened.append(f)
        self.filters = flattened

    def matches(self, record: Any) -> bool:
        return all(f.matches(record) for f in self.filters)

    def to_sql(self) -> tuple[str, list]:
        if not self.filters:
            return "1 = 1", []

        clauses = []
        params: list = []
        for f in self.filters:
            clause, clause_params = f.to_sql()
            clauses.append(f"({clause})")
            params.extend(clause_params)
        return " AND ".join(clauses), params

    def __repr__(self):
        return f"AllOf({', '.join(repr(f) for f in self.filters)})"
