"""Host storage collaborators: record meta, term meta and named options."""

from __future__ import annotations

import copy
import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional, Union

from atomicwrites import atomic_write

logger = logging.getLogger(__name__)


class StorageBackend(ABC):
    """The persistence interface a host application provides."""

    @abstractmethod
    def get_record_meta(self, record_id: int, key: str, default: Any = None) -> Any:
        """
        Return the value stored on a record under ``key``.
        """

    @abstractmethod
    def set_record_meta(self, record_id: int, key: str, value: Any) -> None:
        """
        Store ``value`` on a record under ``key``.
        """

    @abstractmethod
    def delete_record_meta(self, record_id: int, key: str) -> bool:
        """
        Remove ``key`` from a record; returns whether anything was removed.
        """

    @abstractmethod
    def has_record_meta(self, record_id: int, key: str) -> bool:
        pass

    @abstractmethod
    def get_term_meta(self, term_id: int, key: str, default: Any = None) -> Any:
        pass

    @abstractmethod
    def set_term_meta(self, term_id: int, key: str, value: Any) -> None:
        pass

    @abstractmethod
    def delete_term_meta(self, term_id: int, key: str) -> bool:
        pass

    @abstractmethod
    def has_term_meta(self, term_id: int, key: str) -> bool:
        pass

    @abstractmethod
    def get_option(self, key: str, default: Any = None) -> Any:
        pass

    @abstractmethod
    def set_option(self, key: str, value: Any) -> None:
        pass

    @abstractmethod
    def delete_option(self, key: str) -> bool:
        pass

    @abstractmethod
    def has_option(self, key: str) -> bool:
        pass


class InMemoryStorage(StorageBackend):
    """Dictionary-backed storage, used by tests and one-off tooling."""

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        data = data or {}
        self.records: Dict[int, Dict[str, Any]] = {
            int(record_id): dict(values) for record_id, values in (data.get("records") or {}).items()
        }
        self.terms: Dict[int, Dict[str, Any]] = {
            int(term_id): dict(values) for term_id, values in (data.get("terms") or {}).items()
        }
        self.options: Dict[str, Any] = dict(data.get("options") or {})

    def _changed(self) -> None:
        """Called after every mutation."""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "records": {str(key): copy.deepcopy(values) for key, values in self.records.items()},
            "terms": {str(key): copy.deepcopy(values) for key, values in self.terms.items()},
            "options": copy.deepcopy(self.options),
        }

    @staticmethod
    def _get(bucket: Dict[Any, Dict[str, Any]], owner: int, key: str, default: Any) -> Any:
        return copy.deepcopy(bucket.get(int(owner), {}).get(key, default))

    def _set(self, bucket: Dict[Any, Dict[str, Any]], owner: int, key: str, value: Any) -> None:
        bucket.setdefault(int(owner), {})[key] = copy.deepcopy(value)
        self._changed()

    def _delete(self, bucket: Dict[Any, Dict[str, Any]], owner: int, key: str) -> bool:
        values = bucket.get(int(owner))
        if not values or key not in values:
            return False
        del values[key]
        self._changed()
        return True

    def get_record_meta(self, record_id: int, key: str, default: Any = None) -> Any:
        return self._get(self.records, record_id, key, default)

    def set_record_meta(self, record_id: int, key: str, value: Any) -> None:
        self._set(self.records, record_id, key, value)

    def delete_record_meta(self, record_id: int, key: str) -> bool:
        return self._delete(self.records, record_id, key)

    def has_record_meta(self, record_id: int, key: str) -> bool:
        return key in self.records.get(int(record_id), {})

    def get_term_meta(self, term_id: int, key: str, default: Any = None) -> Any:
        return self._get(self.terms, term_id, key, default)

    def set_term_meta(self, term_id: int, key: str, value: Any) -> None:
        self._set(self.terms, term_id, key, value)

    def delete_term_meta(self, term_id: int, key: str) -> bool:
        return self._delete(self.terms, term_id, key)

    def has_term_meta(self, term_id: int, key: str) -> bool:
        return key in self.terms.get(int(term_id), {})

    def get_option(self, key: str, default: Any = None) -> Any:
        return copy.deepcopy(self.options.get(key, default))

    def set_option(self, key: str, value: Any) -> None:
        self.options[key] = copy.deepcopy(value)
        self._changed()

    def delete_option(self, key: str) -> bool:
        if key not in self.options:
            return False
        del self.options[key]
        self._changed()
        return True

    def has_option(self, key: str) -> bool:
        return key in self.options


class JsonFileStorage(InMemoryStorage):
    """InMemoryStorage persisted to a JSON document after every change."""

    def __init__(self, path: Union[str, os.PathLike]):
        self.path = Path(path).expanduser()
        super().__init__(self._read())

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except json.JSONDecodeError as error:
            raise ValueError(f"Failed to read storage file '{self.path}': {error}") from error
        if not isinstance(data, dict):
            raise ValueError(f"Storage file '{self.path}' must contain a JSON object")
        return data

    def _changed(self) -> None:
        self.flush()

    def flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with atomic_write(str(self.path), mode="w", overwrite=True, encoding="utf-8") as handle:
                json.dump(self.to_dict(), handle, indent=2, sort_keys=True)
                handle.write("\n")
        except OSError as e:
            logger.error(f"Failed to write storage file {self.path}: {e}")
            raise
