"""Stand-ins for a Snowflake DB-API connection."""

from typing import Any, Callable

Handler = Callable[[str, dict[str, Any]], list[dict[str, Any]]]


class FakeCursor:
    def __init__(self, connection: "FakeConnection"):
        self.connection = connection
        self.description = None
        self._rows: list[tuple] = []

    def execute(self, sql: str, params: dict[str, Any] | None = None, timeout: float | None = None):
        params = dict(params or {})
        self.connection.calls.append((sql, params))
        self.connection.timeouts.append(timeout)
        rows = self.connection.handler(sql, params)
        columns: list[str] = []
        for row in rows:
            for key in row:
                if key not in columns:
                    columns.append(key)
        self.description = [(name, None, None, None, None, None, None) for name in columns]
        self._rows = [tuple(row.get(name) for name in columns) for row in rows]
        return self

    def fetchall(self):
        return list(self._rows)

    def close(self):
        pass


class FakeConnection:
    """Routes every statement through ``handler(sql, params)``.

    The handler returns rows as dicts (column name -> value) or raises to
    simulate a driver failure.
    """

    def __init__(self, handler: Handler | None = None):
        self.handler = handler or (lambda sql, params: [])
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.timeouts: list[float | None] = []
        self.closed = False

    def cursor(self):
        return FakeCursor(self)

    def close(self):
        self.closed = True


def is_states_query(sql: str) -> bool:
    return "GROUP BY STORE_STATE" in sql


def is_cities_query(sql: str) -> bool:
    return "STORE_DMA_NAME" in sql
