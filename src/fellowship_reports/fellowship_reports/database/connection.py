from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

import mysql.connector

GROUP_CONCAT_MAX_LEN = 1_048_576


@dataclass(frozen=True)
class DBConfig:
    host: str = "localhost"
    port: int = 3306
    user: str = "root"
    password: str = ""
    database: str = "fellowship_db"
    # Member and family names are free text; utf8 needs the 4-byte variant.
    charset: str = "utf8mb4"

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "DBConfig":
        return cls(
            host=str(raw.get("host", cls.host)),
            port=int(raw.get("port", cls.port)),
            user=str(raw.get("user", cls.user)),
            password=str(raw.get("password", cls.password)),
            database=str(raw.get("database", cls.database)),
            charset=str(raw.get("charset", cls.charset)),
        )

    def connect_kwargs(self, *, with_database: bool = True) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "charset": self.charset,
        }
        if with_database:
            kwargs["database"] = self.database
        return kwargs


class DatabaseConnection:
    """Process-wide factory for short-lived MySQL connections.

    Each repository call opens one connection through ``db_cursor`` and
    closes it again; report reads never hold a connection across requests.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None or cls._instance.config != config:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        conn = mysql.connector.connect(**self._config.connect_kwargs())
        # Tag/family/team lists come back through GROUP_CONCAT (1024 bytes by default).
        cur = conn.cursor()
        try:
            cur.execute("SET SESSION group_concat_max_len = %s", (GROUP_CONCAT_MAX_LEN,))
        finally:
            cur.close()
        return conn
