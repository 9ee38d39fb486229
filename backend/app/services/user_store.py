"""JSON-file credential store for the login gate.

Layout of the file: ``{"users": [{id, username, email, password, role,
createdAt}]}`` with bcrypt password hashes. A default admin account is
created when the file does not exist yet.
"""

from __future__ import annotations

import json
import os
import tempfile
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import anyio
from loguru import logger

from app.core.security import get_password_hash_async, verify_password_async


class UserAlreadyExistsError(Exception):
    pass


class UserStore:
    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._users: list[dict[str, Any]] = []
        self._lock: anyio.Lock | None = None

    async def load(
        self,
        *,
        admin_username: str,
        admin_password: str,
        admin_email: str,
    ) -> None:
        """Read the store, seeding it with the admin account if absent.

        I/O and decode errors propagate; the app must not start without it.
        """

        self._lock = anyio.Lock()
        if self.path.exists():
            data = json.loads(self.path.read_text(encoding="utf-8"))
            users = data.get("users") if isinstance(data, dict) else None
            if not isinstance(users, list):
                raise ValueError(f"{self.path}: expected an object with a 'users' list")
            self._users = [u for u in users if isinstance(u, dict) and u.get("username")]
            logger.bind(path=str(self.path), users=len(self._users)).info("user_store_loaded")
            return

        self._users = [
            self._record(
                admin_username,
                await get_password_hash_async(admin_password),
                email=admin_email,
                role="admin",
            )
        ]
        self._save()
        logger.bind(path=str(self.path), username=admin_username).info("user_store_seeded")

    @staticmethod
    def _record(username: str, hashed: str, *, email: str | None, role: str) -> dict[str, Any]:
        return {
            "id": uuid.uuid4().hex,
            "username": username,
            "email": email,
            "password": hashed,
            "role": role,
            "createdAt": datetime.now(timezone.utc).isoformat(),
        }

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        body = json.dumps({"users": self._users}, indent=2)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".users-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(body)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, username: str) -> dict[str, Any] | None:
        for user in self._users:
            if user.get("username") == username:
                return user
        return None

    async def authenticate(self, username: str, password: str) -> dict[str, Any] | None:
        user = self.get(username)
        if user is None or not user.get("password"):
            return None
        if not await verify_password_async(password, user["password"]):
            return None
        return user

    async def register(
        self,
        username: str,
        password: str,
        *,
        email: str | None = None,
        role: str = "user",
    ) -> dict[str, Any]:
        if self._lock is None:
            raise RuntimeError("user store not loaded")
        hashed = await get_password_hash_async(password)
        async with self._lock:
            if self.get(username) is not None:
                raise UserAlreadyExistsError(username)
            user = self._record(username, hashed, email=email, role=role)
            self._users.append(user)
            self._save()
        logger.bind(username=username, role=role).info("user_registered")
        return user
