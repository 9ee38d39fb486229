"""Script to clear the nation and sub-region map data cache."""

import sys
import pathlib

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from app.core.config import settings
from app.services.cache_store import MetricCacheStore


def clear_cache():
    """Delete every cached aggregate document."""
    store = MetricCacheStore(settings.DATA_CACHE_DIR)
    print(f"Clearing map data cache in {store.cache_dir} ...")
    count = store.clear()
    print(f"✅ Cleared {count} cache files")
    print("\n🎉 Cache cleared! The next request or refresh cycle will query the warehouse again.")


if __name__ == "__main__":
    clear_cache()
