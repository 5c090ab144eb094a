"""Durable local cache holding one owner's whole dataset.

The cache is a single named slot: one JSON document with the five
collections, written in full on every change. Keys are camelCase and dates
are ISO strings, the same document shape the browser storage slot used.
"""

import json
import logging
import os
import tempfile
from dataclasses import fields
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any

from milkledger.domain.entities import AppData, Collection, COLLECTION_TYPES, Record

logger = logging.getLogger(__name__)

DEFAULT_SLOT = "m13-data"


def to_camel(name: str) -> str:
    """Convert a snake_case field name to camelCase (``m_fat_kg`` -> ``mFatKg``)."""
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _encode_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    return value


def _decode_value(field_type: type, value: Any) -> Any:
    if field_type is date:
        return date.fromisoformat(value)
    if field_type is float:
        return float(value)
    if field_type is str:
        return "" if value is None else str(value)
    if isinstance(field_type, type) and issubclass(field_type, Enum):
        return field_type(value)
    return value


def record_to_document(record: Record) -> dict[str, Any]:
    """Serialize a record to its camelCase cache form."""
    return {to_camel(f.name): _encode_value(getattr(record, f.name)) for f in fields(record)}


def record_from_document(record_type: type, document: dict[str, Any]) -> Record:
    """Deserialize a camelCase cache document into a record.

    Raises:
        KeyError: If a field is missing
        ValueError: If a field has an unusable value
    """
    values = {
        f.name: _decode_value(f.type, document[to_camel(f.name)]) for f in fields(record_type)
    }
    return record_type(**values)


def data_to_document(data: AppData) -> dict[str, list[dict[str, Any]]]:
    """Serialize the whole aggregate."""
    return {
        to_camel(collection.value): [record_to_document(r) for r in data.get(collection)]
        for collection in Collection
    }


def data_from_document(document: dict[str, Any]) -> AppData:
    """Deserialize the whole aggregate, skipping records that cannot be read."""
    data = AppData.empty()
    for collection in Collection:
        record_type = COLLECTION_TYPES[collection]
        records = []
        for raw in document.get(to_camel(collection.value)) or []:
            try:
                records.append(record_from_document(record_type, raw))
            except (KeyError, ValueError, TypeError) as exc:
                logger.warning("Skipping unreadable cached %s record: %s", collection.value, exc)
        data = data.with_collection(collection, records)
    return data


class LocalCache:
    """File-backed slot for the serialized AppData document."""

    def __init__(self, path: Path | str):
        """Initialize the cache.

        Args:
            path: Path of the JSON slot file (created on first write)
        """
        self.path = Path(path)

    def read(self) -> AppData:
        """Read the cached dataset.

        A missing slot reads as empty. A corrupt slot is logged and also
        reads as empty; it is overwritten by the next write.
        """
        if not self.path.exists():
            return AppData.empty()
        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Local cache %s is unreadable, starting empty: %s", self.path, exc)
            return AppData.empty()
        if not isinstance(document, dict):
            logger.warning("Local cache %s has unexpected shape, starting empty", self.path)
            return AppData.empty()
        return data_from_document(document)

    def write(self, data: AppData) -> None:
        """Replace the cached dataset atomically.

        Raises:
            OSError: If the slot cannot be written
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(data_to_document(data), indent=2)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def clear(self) -> None:
        """Remove the slot."""
        if self.path.exists():
            self.path.unlink()
