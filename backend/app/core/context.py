"""Process-wide services and their startup/shutdown lifecycle."""

from __future__ import annotations

import asyncio
import contextlib
from typing import Any, Callable

import anyio
from loguru import logger

from app.core.config import Settings
from app.services.cache_store import MetricCacheStore
from app.services.mock_data import MockDataGenerator
from app.services.orchestrator import DataOrchestrator
from app.services.user_store import UserStore
from app.services.warehouse import WarehouseGateway, connect_snowflake

ConnectionFactory = Callable[[Settings], Any]


class AppContext:
    """Owns the cache, gateway, orchestrator and user store for one app.

    ``init()`` must complete before requests are served; ``ready`` reports
    whether it has. ``shutdown()`` stops the refresh loop and closes the
    warehouse connection.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        connection_factory: ConnectionFactory | None = connect_snowflake,
        mock: MockDataGenerator | None = None,
    ):
        self.settings = settings
        self.cache = MetricCacheStore(
            settings.DATA_CACHE_DIR, max_age_seconds=settings.CACHE_MAX_AGE_SEC
        )
        self.gateway = WarehouseGateway(timeout=settings.WAREHOUSE_QUERY_TIMEOUT_SEC)
        self.orchestrator = DataOrchestrator(
            self.cache,
            self.gateway,
            mock,
            fanout_limit=settings.REFRESH_FANOUT_LIMIT,
        )
        self.users = UserStore(settings.USERS_FILE)
        self._connection_factory = connection_factory
        self._refresh_task: asyncio.Task | None = None
        self.ready = False

    async def _connect(self) -> Any:
        if self._connection_factory is None:
            return None
        try:
            return await anyio.to_thread.run_sync(self._connection_factory, self.settings)
        except Exception as exc:
            logger.bind(error=str(exc)).error("warehouse_connect_failed")
            return None

    async def init(self, *, schedule_refresh: bool = True) -> None:
        # Cache dir and credential store failures abort startup.
        self.cache.ensure_dir()
        await self.users.load(
            admin_username=self.settings.DEFAULT_ADMIN_USERNAME,
            admin_password=self.settings.DEFAULT_ADMIN_PASSWORD,
            admin_email=self.settings.DEFAULT_ADMIN_EMAIL,
        )

        connection = await self._connect()
        if connection is not None:
            self.gateway.attach(connection)

        if self.gateway.configured:
            logger.info("warehouse_connected")
            if schedule_refresh:
                self._refresh_task = asyncio.create_task(
                    self.orchestrator.run_schedule(self.settings.REFRESH_INTERVAL_SEC)
                )
        else:
            logger.warning("warehouse_unconfigured_serving_mock")
            await self.orchestrator.warm_synthetic()

        self.ready = True
        logger.bind(warehouse=self.gateway.configured).info("app_context_ready")

    async def shutdown(self) -> None:
        self.ready = False
        task, self._refresh_task = self._refresh_task, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self.gateway.close()
        logger.info("app_context_stopped")
