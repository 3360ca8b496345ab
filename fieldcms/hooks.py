"""Pre-save transform hooks.

A hook receives the submitted value before sanitizing and returns either a
(possibly transformed) value or ``SKIP`` to leave the field untouched.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class _Skip:
    _instance: Optional["_Skip"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SKIP"

    def __bool__(self) -> bool:
        return False


SKIP = _Skip()

FieldHook = Callable[[Any, Any], Any]
GlobalHook = Callable[[Any, str, str], Any]


class HookRegistry:
    def __init__(self):
        self._field_hooks: Dict[str, List[FieldHook]] = {}
        self._global_hooks: List[GlobalHook] = []

    def add(self, field_name: str, callback: FieldHook) -> None:
        """Register ``callback(value, context_id)`` for one field name."""
        if not callable(callback):
            raise TypeError(f"Hook for field {field_name} must be callable")
        self._field_hooks.setdefault(field_name, []).append(callback)

    def add_global(self, callback: GlobalHook) -> None:
        """Register ``callback(value, field_name, namespace)`` for every field."""
        if not callable(callback):
            raise TypeError("Global hook must be callable")
        self._global_hooks.append(callback)

    def remove(self, field_name: str, callback: Optional[FieldHook] = None) -> None:
        if callback is None:
            self._field_hooks.pop(field_name, None)
            return
        hooks = self._field_hooks.get(field_name, [])
        if callback in hooks:
            hooks.remove(callback)

    def remove_global(self, callback: GlobalHook) -> None:
        if callback in self._global_hooks:
            self._global_hooks.remove(callback)

    def clear(self) -> None:
        self._field_hooks.clear()
        self._global_hooks.clear()

    def has_hooks(self, field_name: str) -> bool:
        return bool(self._global_hooks or self._field_hooks.get(field_name))

    def apply(self, value: Any, field_name: str, namespace: str, context_id: Any) -> Any:
        """Run global hooks, then field hooks; stops at the first ``SKIP``."""
        for callback in self._global_hooks:
            value = callback(value, field_name, namespace)
            if value is SKIP:
                logger.debug(f"Global hook skipped {namespace}.{field_name}")
                return SKIP
        for callback in self._field_hooks.get(field_name, []):
            value = callback(value, context_id)
            if value is SKIP:
                logger.debug(f"Field hook skipped {namespace}.{field_name}")
                return SKIP
        return value
