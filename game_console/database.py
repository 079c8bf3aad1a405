"""
database.py — Collection Store
===============================
Thread-safe key-value store grouped into collections.

Path verilmezse sadece bellekte tutar (testler, gelistirme). Path verilirse
her yazma sonrasi tum collection'lari tek bir JSON dosyasina yazar, acilista
geri yukler; boylece state process restart'tan sonra da yasar.

Records are plain JSON-compatible dicts. Callers get copies, never the stored
objects, so a record can only change through ``put``/``delete``.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Callable

logger = logging.getLogger(__name__)


class Database:
    def __init__(self, path: str | Path | None = None):
        self._lock = threading.Lock()
        self._path = Path(path) if path else None
        self._collections: dict[str, dict[str, dict]] = {}
        if self._path and self._path.exists():
            self._collections = json.loads(self._path.read_text(encoding="utf-8"))
            logger.info("Loaded %d collections from %s", len(self._collections), self._path)

    # ── Collection CRUD ──────────────────────────────

    def put(self, collection: str, id: str, data: dict) -> dict:
        """Kayit yaz. Ayni id varsa tamamen degistirir (merge yok)."""
        with self._lock:
            self._collections.setdefault(collection, {})[id] = copy.deepcopy(data)
            self._flush()
            return copy.deepcopy(data)

    def get(self, collection: str, id: str) -> dict | None:
        with self._lock:
            record = self._collections.get(collection, {}).get(id)
            return copy.deepcopy(record) if record is not None else None

    def delete(self, collection: str, id: str) -> bool:
        with self._lock:
            coll = self._collections.get(collection, {})
            if id not in coll:
                return False
            del coll[id]
            self._flush()
            return True

    def list(self, collection: str, filter_fn: Callable[[dict], Any] | None = None) -> list[dict]:
        """Collection'daki tum kayitlari listele. Opsiyonel filter."""
        with self._lock:
            records = [copy.deepcopy(r) for r in self._collections.get(collection, {}).values()]
        if filter_fn:
            records = [r for r in records if filter_fn(r)]
        return records

    def count(self, collection: str) -> int:
        with self._lock:
            return len(self._collections.get(collection, {}))

    # ── Persistence ──────────────────────────────────

    def _flush(self) -> None:
        # caller holds the lock
        if not self._path:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(self._collections, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp, self._path)


# ── Collection Isimleri (sabitler) ───────────────────

DEFINITIONS = "definitions"
CONFIGS = "configs"
RUNTIME = "runtime"
TRIGGERS = "triggers"
