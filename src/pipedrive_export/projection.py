"""Field projection: restrict raw records to export fields and relabel them."""

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

logger = logging.getLogger(__name__)


def label_for(key: str, labels: Mapping[str, str]) -> str:
    """Display label for a raw field key; the key itself when no label exists."""
    label = labels.get(key)
    return label if label else key


def column_names(fields: Sequence[str], labels: Mapping[str, str]) -> list[str]:
    """
    Output column name for each field, in field order.
    A label already taken by an earlier field becomes "{label} ({key})".
    """
    names: list[str] = []
    for key in fields:
        name = label_for(key, labels)
        if name in names:
            name = f"{name} ({key})"
        names.append(name)
    return names


def project(
    fields: Sequence[str],
    labels: Mapping[str, str],
    record: Mapping[str, Any],
) -> dict[str, Any]:
    """
    Build a row with one column per field, in field order.
    Keys are relabelled through `labels`; fields absent from the record map to None.
    """
    names = column_names(fields, labels)
    return {name: record.get(key) for name, key in zip(names, fields)}


def project_all(
    fields: Sequence[str],
    labels: Mapping[str, str],
    records: Iterable[Mapping[str, Any]],
) -> list[dict[str, Any]]:
    """Project every record; colliding labels are reported once."""
    names = column_names(fields, labels)
    for name, key in zip(names, fields):
        if name != label_for(key, labels):
            logger.warning("Label of field %r is already used by another column; writing it as %r", key, name)
    return [{name: record.get(key) for name, key in zip(names, fields)} for record in records]


def build_label_table(field_records: Iterable[Mapping[str, Any]]) -> dict[str, str]:
    """Map each metadata record's `key` to its `name`. Later duplicates win."""
    labels: dict[str, str] = {}
    for field in field_records:
        key = field.get("key")
        name = field.get("name")
        if key and name:
            labels[str(key)] = str(name)
    return labels
