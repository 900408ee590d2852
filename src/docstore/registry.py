"""Derive pydantic validation schemas from SQLAlchemy table declarations.

A declarative model is the single definition of a table. The helpers here
project its columns into two pydantic models:

* an *insert* schema holding only the fields a client supplies when creating
  a row, and
* a *select* (full-row) schema covering every column as stored.

Both are built at import time and have no side effects.
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple, Type

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, create_model, model_validator
from pydantic.alias_generators import to_camel
from sqlalchemy import Column, DateTime, inspect

from .database import utcnow


def table_columns(model: Type[Any]) -> List[Tuple[str, Column]]:
    """Return ``(attribute name, column)`` pairs in declaration order."""
    mapper = inspect(model)
    return [(prop.key, prop.columns[0]) for prop in mapper.column_attrs]


def is_server_generated(column: Column) -> bool:
    """True for columns whose value the database assigns on insert."""
    if column.server_default is not None:
        return True
    return bool(
        column.primary_key
        and column.autoincrement in (True, "auto")
        and column.type.python_type is int
    )


def _field(key: str, annotation: Any, default: Any) -> Tuple[Any, Any]:
    alias = to_camel(key)
    if alias == key:
        return annotation, Field(default)
    return annotation, Field(
        default,
        validation_alias=AliasChoices(key, alias),
        serialization_alias=alias,
    )


def _reject_alias_conflicts(pairs: List[Tuple[str, str]]) -> Any:
    """Reject input naming one field by both its attribute name and its alias."""

    def check(cls, data: Any) -> Any:
        if isinstance(data, dict):
            for key, alias in pairs:
                if key in data and alias in data:
                    raise ValueError(f"supply either {key} or {alias}, not both")
        return data

    return model_validator(mode="before")(classmethod(check))


def _select_columns(
    model: Type[Any],
    pick: Optional[Iterable[str]],
    omit: Optional[Iterable[str]],
) -> List[Tuple[str, Column]]:
    if pick is not None and omit is not None:
        raise ValueError("pass either pick or omit, not both")
    columns = table_columns(model)
    known = {key for key, _ in columns}
    chosen = set(pick if pick is not None else omit or ())
    unknown = chosen - known
    if unknown:
        raise ValueError(
            f"{model.__name__} has no column(s): {', '.join(sorted(unknown))}"
        )
    if pick is not None:
        return [(key, col) for key, col in columns if key in chosen]
    return [(key, col) for key, col in columns if key not in chosen]


def create_insert_schema(
    model: Type[Any],
    *,
    pick: Optional[Iterable[str]] = None,
    omit: Optional[Iterable[str]] = None,
    name: Optional[str] = None,
    partial: bool = False,
) -> Type[BaseModel]:
    """Build the insert-time validator for ``model``.

    Parameters
    ----------
    model:
        Declarative model whose ``__table__`` describes the columns.
    pick, omit:
        Column attribute names to keep, or to drop. At most one may be given.
    name:
        Class name of the generated schema, ``Insert<Model>`` by default.
    partial:
        Make every field optional without a default value, for patch-style
        updates. Use ``model_dump(exclude_unset=True)`` to get the changes.

    Unknown fields are rejected and values are validated strictly against the
    column's Python type. Columns with a scalar default take that default when
    absent; nullable, server-generated and callable-default columns become
    optional and are filled in later by :func:`resolve_defaults` or the
    database.

    Snake_case fields are also accepted under their camelCase alias, e.g.
    ``mimeType`` for ``mime_type``. Input carrying both spellings of one field
    is rejected with a value error naming both.
    """
    fields: Dict[str, Any] = {}
    for key, column in _select_columns(model, pick, omit):
        annotation: Any = column.type.python_type
        default = column.default
        if partial:
            # an explicit null is still rejected for non-nullable columns
            if column.nullable:
                annotation = Optional[annotation]
            fields[key] = _field(key, annotation, None)
        elif default is not None and default.is_scalar:
            fields[key] = _field(key, annotation, default.arg)
        elif column.nullable or default is not None or is_server_generated(column):
            fields[key] = _field(key, Optional[annotation], None)
        else:
            fields[key] = _field(key, annotation, ...)

    aliases = [(key, to_camel(key)) for key in fields if to_camel(key) != key]
    return create_model(
        name or f"Insert{model.__name__}",
        __config__=ConfigDict(strict=True, extra="forbid"),
        __module__=model.__module__,
        __validators__={"check_alias_conflicts": _reject_alias_conflicts(aliases)},
        **fields,
    )


def create_select_schema(
    model: Type[Any], *, name: Optional[str] = None
) -> Type[BaseModel]:
    """Build the full-row type for ``model``, one field per column."""
    fields: Dict[str, Any] = {}
    for key, column in table_columns(model):
        annotation: Any = column.type.python_type
        if column.nullable:
            fields[key] = _field(key, Optional[annotation], None)
        else:
            fields[key] = _field(key, annotation, ...)

    return create_model(
        name or f"{model.__name__}Row",
        __config__=ConfigDict(from_attributes=True),
        __module__=model.__module__,
        **fields,
    )


def resolve_defaults(
    model: Type[Any], values: Dict[str, Any], now: Optional[datetime] = None
) -> Dict[str, Any]:
    """Return ``values`` with column defaults filled in for missing keys.

    Timestamp columns with a callable default all receive the same ``now``,
    so a row's creation and modification times start out equal. Sequences and
    server-side defaults are left for the database.
    """
    resolved = dict(values)
    now = now or utcnow()
    for key, column in table_columns(model):
        if resolved.get(key) is not None:
            continue
        default = column.default
        if default is None:
            continue
        if default.is_scalar:
            resolved[key] = default.arg
        elif default.is_callable:
            if isinstance(column.type, DateTime):
                resolved[key] = now
            else:
                resolved[key] = default.arg(None)
    return resolved
