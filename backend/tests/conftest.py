import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path

import httpx
import pytest

# Ensure required environment variables are present before settings import
os.environ.setdefault("SECRET_KEY", "test-secret")

# Add the backend directory so `app` package imports resolve during tests
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.append(str(BACKEND_DIR))

# Shared fakes live next to the tests
TESTS_DIR = Path(__file__).resolve().parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def make_settings(tmp_path):
    from app.core.config import Settings

    def factory(**overrides):
        static_dir = tmp_path / "public"
        static_dir.mkdir(exist_ok=True)
        (static_dir / "home.html").write_text("<html><body>home</body></html>", encoding="utf-8")
        (static_dir / "login.html").write_text("<html><body>login</body></html>", encoding="utf-8")
        values = {
            "SECRET_KEY": "test-secret",
            "ENV": "dev",
            "DATA_CACHE_DIR": tmp_path / "data_cache",
            "USERS_FILE": tmp_path / "db" / "users.json",
            "STATIC_DIR": static_dir,
            "SNOWFLAKE_ACCOUNT": None,
            "SNOWFLAKE_USER": None,
            "SNOWFLAKE_PASSWORD": None,
            "SNOWFLAKE_PRIVATE_KEY_PATH": None,
            "WAREHOUSE_QUERY_TIMEOUT_SEC": 5.0,
        }
        values.update(overrides)
        return Settings(**values)

    return factory


@pytest.fixture
def running_app(make_settings):
    """Start an app around a fake (or missing) warehouse connection."""

    from app.core.context import AppContext
    from app.main import create_app
    from app.services.mock_data import MockDataGenerator
    import random

    @asynccontextmanager
    async def start(connection=None, **overrides):
        settings = make_settings(**overrides)
        context = AppContext(
            settings,
            connection_factory=lambda _settings: connection,
            mock=MockDataGenerator(random.Random(42)),
        )
        await context.init(schedule_refresh=False)
        app = create_app(context)
        transport = httpx.ASGITransport(app=app)
        try:
            async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
                yield client, context
        finally:
            await context.shutdown()

    return start
