"""Row record models validated at the data-ingestion boundary.

Host applications hand treedrop arbitrary row dicts. They are validated
once, here, into ``FlatRecord`` / ``TreeRecord`` so the rest of the package
can rely on ``id``, ``parent_id`` and ``children`` without probing.
Unknown fields are kept as pydantic extras and survive every transformation.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

DEFAULT_PARENT_KEY = "parentId"


class TreeDataError(ValueError):
    """Row data that cannot be turned into a tree."""


class FlatRecord(BaseModel):
    """A row with an id and an optional parent reference."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(min_length=1)
    parent_id: str | None = Field(default=None, alias=DEFAULT_PARENT_KEY)

    @field_validator("id", "parent_id", mode="before")
    @classmethod
    def _int_keys_to_str(cls, value: Any) -> Any:
        # Numeric keys are common in flat exports; ids compare as strings.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class TreeRecord(FlatRecord):
    """A row with nested children."""

    children: list[TreeRecord] = Field(default_factory=list)


def _describe(record: Any, index: int) -> str:
    if isinstance(record, Mapping) and "id" in record:
        return f"record {index} (id={record['id']!r})"
    return f"record {index}"


def validate_flat_records(
    records: Iterable[FlatRecord | Mapping[str, Any]],
    *,
    parent_key: str = DEFAULT_PARENT_KEY,
) -> list[FlatRecord]:
    """Validate flat rows, reading the parent id from ``parent_key``.

    Raises:
        TreeDataError: If a row is malformed or an id repeats.
    """
    validated: list[FlatRecord] = []
    seen: set[str] = set()
    for index, record in enumerate(records):
        if isinstance(record, FlatRecord):
            item = record
        else:
            raw = dict(record) if isinstance(record, Mapping) else record
            if isinstance(raw, dict) and parent_key not in (
                DEFAULT_PARENT_KEY,
                "parent_id",
            ):
                raw[DEFAULT_PARENT_KEY] = raw.get(parent_key)
            try:
                item = FlatRecord.model_validate(raw)
            except ValidationError as exc:
                msg = f"Invalid {_describe(record, index)}: {exc.errors()[0]['msg']}"
                raise TreeDataError(msg) from exc
        if item.id in seen:
            msg = f"Duplicate id {item.id!r} at record {index}"
            raise TreeDataError(msg)
        seen.add(item.id)
        validated.append(item)
    return validated


def _validate_node(raw: Any, index: int) -> tuple[TreeRecord, list[Any]]:
    """Validate one nested row without its children; return both."""
    if not isinstance(raw, Mapping):
        msg = f"Invalid record {index}: expected a mapping, got {type(raw).__name__}"
        raise TreeDataError(msg)
    fields = dict(raw)
    children = fields.pop("children", None) or []
    if not isinstance(children, list | tuple):
        msg = f"Invalid {_describe(raw, index)}: children must be a list"
        raise TreeDataError(msg)
    try:
        return TreeRecord.model_validate(fields), list(children)
    except ValidationError as exc:
        msg = f"Invalid {_describe(raw, index)}: {exc.errors()[0]['msg']}"
        raise TreeDataError(msg) from exc


def validate_tree_records(
    data: Iterable[TreeRecord | Mapping[str, Any]],
) -> list[TreeRecord]:
    """Validate nested rows. Already-validated records pass through as-is.

    Rows are validated one node at a time from an explicit stack, so the
    depth of the tree is not bounded by the interpreter's recursion limit.
    Error messages name the top-level record the bad row sits under.

    Raises:
        TreeDataError: If a row is malformed.
    """
    validated: list[TreeRecord] = []
    for index, record in enumerate(data):
        # (raw row, list the validated row is appended to)
        stack: list[tuple[Any, list[TreeRecord]]] = [(record, validated)]
        while stack:
            raw, into = stack.pop()
            if isinstance(raw, TreeRecord):
                into.append(raw)
                continue
            node, children = _validate_node(raw, index)
            into.append(node)
            stack.extend((child, node.children) for child in reversed(children))
    return validated


def copy_tree_records(roots: Iterable[TreeRecord]) -> list[TreeRecord]:
    """Deep-copy nested records iteratively; extras are copied per node."""
    copies: list[TreeRecord] = []
    stack = [(record, copies) for record in reversed(list(roots))]
    while stack:
        record, into = stack.pop()
        bare = record.model_copy(update={"children": []})
        node = bare.model_copy(deep=True)
        into.append(node)
        stack.extend((child, node.children) for child in reversed(record.children))
    return copies
