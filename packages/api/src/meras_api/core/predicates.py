# This project was developed with assistance from AI tools.
"""Declarative row filters.

A Predicate is one of five frozen variants::

    All | Eq(field, value) | In(field, values) | And(clauses) | Or(clauses)

``Or(())`` is the canonical match-nothing predicate (``NOTHING``), and
``In(field, ())`` matches nothing as well. Fields are dotted paths. A
segment naming a to-many relation means "any related row matches", a
segment naming a to-one relation means "the related row matches"; e.g.
``In("conversations.messages.whatsapp_account_id", ids)`` on a contact.

Predicates are evaluated in memory with :func:`matches` and compiled to a
SQLAlchemy WHERE clause with :func:`to_sqlalchemy`. Relation segments
compile to EXISTS subqueries, so a row satisfying several OR branches is
still returned once.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Union

from sqlalchemy import and_, false, or_, true
from sqlalchemy.sql.elements import ColumnElement


@dataclass(frozen=True)
class All:
    """Matches every row."""


@dataclass(frozen=True)
class Eq:
    field: str
    value: Any


@dataclass(frozen=True)
class In:
    field: str
    values: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, "values", tuple(sorted(set(self.values), key=str)))


@dataclass(frozen=True)
class And:
    clauses: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, "clauses", tuple(self.clauses))


@dataclass(frozen=True)
class Or:
    clauses: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, "clauses", tuple(self.clauses))


Predicate = Union[All, Eq, In, And, Or]

MATCH_ALL = All()
NOTHING = Or(())


# ---------------------------------------------------------------------------
# Construction helpers
# ---------------------------------------------------------------------------


def is_match_all(predicate: Predicate) -> bool:
    if isinstance(predicate, All):
        return True
    if isinstance(predicate, And):
        return all(is_match_all(c) for c in predicate.clauses)
    if isinstance(predicate, Or):
        return any(is_match_all(c) for c in predicate.clauses)
    return False


def is_match_nothing(predicate: Predicate) -> bool:
    if isinstance(predicate, In):
        return not predicate.values
    if isinstance(predicate, Or):
        return all(is_match_nothing(c) for c in predicate.clauses)
    if isinstance(predicate, And):
        return any(is_match_nothing(c) for c in predicate.clauses)
    return False


def any_of(*clauses: Predicate) -> Predicate:
    """Disjunction that flattens nested ORs and drops clauses that match nothing."""
    flat: list[Predicate] = []
    for clause in clauses:
        if isinstance(clause, Or):
            flat.extend(clause.clauses)
        else:
            flat.append(clause)

    kept = [c for c in flat if not is_match_nothing(c)]
    if any(is_match_all(c) for c in kept):
        return MATCH_ALL
    kept = list(dict.fromkeys(kept))
    if not kept:
        return NOTHING
    if len(kept) == 1:
        return kept[0]
    return Or(tuple(kept))


def all_of(*clauses: Predicate) -> Predicate:
    """Conjunction that flattens nested ANDs; any match-nothing clause absorbs the rest."""
    flat: list[Predicate] = []
    for clause in clauses:
        if isinstance(clause, And):
            flat.extend(clause.clauses)
        else:
            flat.append(clause)

    if any(is_match_nothing(c) for c in flat):
        return NOTHING
    kept = list(dict.fromkeys(c for c in flat if not is_match_all(c)))
    if not kept:
        return MATCH_ALL
    if len(kept) == 1:
        return kept[0]
    return And(tuple(kept))


# ---------------------------------------------------------------------------
# In-memory evaluation
# ---------------------------------------------------------------------------

_COLLECTIONS = (list, tuple, set, frozenset)


def _get(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _resolve(record: Any, path: str) -> list[Any]:
    """Follow a dotted path, fanning out over collections."""
    values = [record]
    for segment in path.split("."):
        next_values: list[Any] = []
        for value in values:
            if value is None:
                continue
            child = _get(value, segment)
            if isinstance(child, _COLLECTIONS):
                next_values.extend(child)
            else:
                next_values.append(child)
        values = next_values
    return values


def matches(predicate: Predicate, record: Any) -> bool:
    """Evaluate ``predicate`` against a mapping or attribute-bearing object."""
    if isinstance(predicate, All):
        return True
    if isinstance(predicate, Eq):
        return any(v == predicate.value for v in _resolve(record, predicate.field))
    if isinstance(predicate, In):
        allowed = set(predicate.values)
        return any(v is not None and v in allowed for v in _resolve(record, predicate.field))
    if isinstance(predicate, And):
        return all(matches(c, record) for c in predicate.clauses)
    if isinstance(predicate, Or):
        return any(matches(c, record) for c in predicate.clauses)
    raise TypeError(f"Unsupported predicate: {predicate!r}")


def filter_records(predicate: Predicate, records: Iterable[Any]) -> list[Any]:
    return [r for r in records if matches(predicate, r)]


# ---------------------------------------------------------------------------
# SQLAlchemy compilation
# ---------------------------------------------------------------------------


def _path_clause(model: type, path: str, leaf) -> ColumnElement[bool]:
    head, _, rest = path.partition(".")
    attr = getattr(model, head, None)
    if attr is None:
        raise ValueError(f"{model.__name__} has no attribute {head!r}")
    if not rest:
        return leaf(attr)

    prop = attr.property
    target = prop.mapper.class_
    inner = _path_clause(target, rest, leaf)
    return attr.any(inner) if prop.uselist else attr.has(inner)


def to_sqlalchemy(predicate: Predicate, model: type) -> ColumnElement[bool]:
    """Compile ``predicate`` into a WHERE clause for ``model``."""
    if isinstance(predicate, All):
        return true()
    if isinstance(predicate, Eq):
        value = predicate.value
        if value is None:
            return _path_clause(model, predicate.field, lambda col: col.is_(None))
        return _path_clause(model, predicate.field, lambda col: col == value)
    if isinstance(predicate, In):
        if not predicate.values:
            return false()
        values = list(predicate.values)
        return _path_clause(model, predicate.field, lambda col: col.in_(values))
    if isinstance(predicate, And):
        if not predicate.clauses:
            return true()
        return and_(*(to_sqlalchemy(c, model) for c in predicate.clauses))
    if isinstance(predicate, Or):
        if not predicate.clauses:
            return false()
        return or_(*(to_sqlalchemy(c, model) for c in predicate.clauses))
    raise TypeError(f"Unsupported predicate: {predicate!r}")
