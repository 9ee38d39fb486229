"""File-backed cache for the nation and sub-region aggregates.

One JSON document per dataset:

* ``states_gmv.json`` for the nation level
* ``cities_gmv_<state_slug>.json`` per state

Each document is ``{"synthetic": bool, "records": [...]}``. The fetch time
is the file's modification time rather than a field, so two refreshes of
identical warehouse data leave byte-identical files behind.
"""

from __future__ import annotations

import json
import os
import tempfile
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Literal

from loguru import logger

from app.services.geo_codes import slugify

DatasetKind = Literal["nation", "subregion"]

NATION_CACHE_FILE = "states_gmv.json"
SUBREGION_CACHE_PREFIX = "cities_gmv_"


@dataclass(frozen=True)
class CacheEntry:
    records: list[dict[str, Any]]
    synthetic: bool
    fetched_at: datetime

    @property
    def age_seconds(self) -> float:
        return max(0.0, time.time() - self.fetched_at.timestamp())


def cache_filename(kind: DatasetKind, region_key: str | None = None) -> str:
    """Return the file name for a cache key."""

    if kind == "nation":
        return NATION_CACHE_FILE
    if kind == "subregion":
        if not region_key or not region_key.strip():
            raise ValueError("subregion cache entries need a region key")
        return f"{SUBREGION_CACHE_PREFIX}{slugify(region_key)}.json"
    raise ValueError(f"unknown dataset kind: {kind!r}")


class MetricCacheStore:
    """Whole-document JSON cache keyed by (dataset kind, region)."""

    def __init__(self, cache_dir: Path | str, *, max_age_seconds: int = 0):
        self.cache_dir = Path(cache_dir)
        self.max_age_seconds = max_age_seconds

    def ensure_dir(self) -> None:
        """Create the cache directory. Errors propagate to the caller."""

        if not self.cache_dir.exists():
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            logger.bind(path=str(self.cache_dir)).info("cache_dir_created")

    def path_for(self, kind: DatasetKind, region_key: str | None = None) -> Path:
        return self.cache_dir / cache_filename(kind, region_key)

    def read(self, kind: DatasetKind, region_key: str | None = None) -> CacheEntry | None:
        """Return the cached entry, or ``None`` for absent, stale or unreadable files."""

        path = self.path_for(kind, region_key)
        try:
            stat = path.stat()
            payload = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            logger.bind(path=str(path), error=str(exc)).warning("cache_read_failed")
            return None

        entry = self._decode(payload, stat.st_mtime)
        if entry is None:
            logger.bind(path=str(path)).warning("cache_payload_malformed")
            return None
        if self.max_age_seconds and entry.age_seconds > self.max_age_seconds:
            logger.bind(path=str(path), age=round(entry.age_seconds)).info("cache_entry_stale")
            return None
        return entry

    def write(
        self,
        kind: DatasetKind,
        region_key: str | None,
        records: list[dict[str, Any]],
        *,
        synthetic: bool = False,
    ) -> Path:
        """Replace the document for this key. Raises ``OSError`` on failure."""

        self.ensure_dir()
        path = self.path_for(kind, region_key)
        body = json.dumps({"synthetic": synthetic, "records": records}, sort_keys=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.cache_dir, prefix=".tmp-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(body)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.bind(
            path=str(path), records=len(records), synthetic=synthetic
        ).info("cache_written")
        return path

    def clear(self) -> int:
        """Delete every cache document; returns how many were removed."""

        if not self.cache_dir.exists():
            return 0
        removed = 0
        for path in self.cache_dir.glob("*.json"):
            if path.name == NATION_CACHE_FILE or path.name.startswith(SUBREGION_CACHE_PREFIX):
                path.unlink(missing_ok=True)
                removed += 1
        return removed

    @staticmethod
    def _decode(payload: Any, mtime: float) -> CacheEntry | None:
        fetched_at = datetime.fromtimestamp(mtime, tz=timezone.utc)
        # Bare arrays are what older deployments wrote; they carry no
        # provenance, so they are treated as synthetic.
        if isinstance(payload, list):
            records, synthetic = payload, True
        elif isinstance(payload, dict) and isinstance(payload.get("records"), list):
            records, synthetic = payload["records"], bool(payload.get("synthetic", False))
        else:
            return None
        if not all(isinstance(item, dict) for item in records):
            return None
        return CacheEntry(records=records, synthetic=synthetic, fetched_at=fetched_at)
