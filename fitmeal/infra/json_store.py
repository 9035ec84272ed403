"""JSON-list persistence shared by every repository.

Each collection is one JSON file holding a list of dicts. Writes go through a
temp file in the same directory that is then moved over the target, and all
read-modify-write cycles hold the process-wide lock.
"""
import json
import logging
import os
import shutil
import tempfile
from contextlib import contextmanager
from threading import RLock
from typing import Any, Dict, Iterator, List

from fitmeal.infra import paths

logger = logging.getLogger(__name__)

_lock = RLock()


def _safe_load(name: str) -> List[Dict[str, Any]]:
    path = paths.data_file(name)
    if not path.exists():
        return []
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in {path}: {e}")
        return []
    if not isinstance(data, list):
        logger.warning(f"Expected a JSON list in {path}, found {type(data).__name__}")
        return []
    return data


def _atomic_write(name: str, items: List[Dict[str, Any]]) -> None:
    path = paths.data_file(name)
    os.makedirs(path.parent, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}_", suffix=".json")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp:
            json.dump(items, tmp, indent=2, ensure_ascii=False)
        shutil.move(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)


def load(name: str) -> List[Dict[str, Any]]:
    with _lock:
        return _safe_load(name)


def save(name: str, items: List[Dict[str, Any]]) -> None:
    with _lock:
        _atomic_write(name, items)


@contextmanager
def editing(name: str) -> Iterator[List[Dict[str, Any]]]:
    """Yield the collection for in-place changes; it is written back on clean exit."""
    with _lock:
        items = _safe_load(name)
        yield items
        _atomic_write(name, items)


@contextmanager
def locked() -> Iterator[None]:
    """Hold the store lock across several collections (all-or-nothing writes)."""
    with _lock:
        yield


__all__ = ['load', 'save', 'editing', 'locked']
