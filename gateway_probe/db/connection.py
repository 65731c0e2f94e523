"""PostgreSQL connection provider.

Architectural role:
    Supplies an open, pinged connection to the process entry point when
    `GATEWAY_USE_DATABASE` is enabled. The gateway client itself never touches
    the database.

Connection flow:
    1. Read `PG_HOST`, `PG_PORT`, `PG_USER`, `PG_PASS`, `PG_NAME`.
    2. Reject incomplete settings before attempting a connection.
    3. Connect with `sslmode=disable` and ping with `SELECT 1`.

Dependency note:
    `psycopg2` is imported lazily so the client works without the optional
    `db` extra installed.

Failure handling:
    - Missing variables -> `ConfigurationError` listing all five names.
    - Connect/ping failure -> `DatabaseError`; a half-open connection is closed.
"""

import logging
from typing import Any, Callable

from gateway_probe.config.gateway_config import (
    DATABASE_ENV_VARS,
    DatabaseSettings,
    load_database_settings,
)
from gateway_probe.core.errors import ConfigurationError, DatabaseError


logger = logging.getLogger(__name__)


def build_dsn(settings: DatabaseSettings) -> str:
    return (
        f"host={settings.host} port={settings.port} user={settings.user} "
        f"password={settings.password} dbname={settings.name} sslmode=disable"
    )


def _default_connect() -> Callable[[str], Any]:
    try:
        import psycopg2
    except ImportError as exc:
        raise DatabaseError(
            "psycopg2 is not installed; install gateway-probe[db] to enable the database"
        ) from exc
    return psycopg2.connect


def ping(connection: Any) -> None:
    cursor = connection.cursor()
    try:
        cursor.execute("SELECT 1")
        cursor.fetchone()
    finally:
        cursor.close()


def open_database(
    settings: DatabaseSettings | None = None,
    connect: Callable[[str], Any] | None = None,
) -> Any:
    """Open and ping a PostgreSQL connection.

    Args:
        settings: Connection parameters; read from the environment when omitted.
        connect: DB-API `connect(dsn)` callable; defaults to `psycopg2.connect`.

    Returns:
        Open DB-API connection. Callers own closing it.
    """
    settings = settings or load_database_settings()
    if not settings.is_complete():
        raise ConfigurationError(
            "missing one or more required environment variables "
            f"({', '.join(DATABASE_ENV_VARS)})"
        )

    connect = connect or _default_connect()
    try:
        connection = connect(build_dsn(settings))
    except Exception as exc:
        raise DatabaseError(f"error connecting to database: {exc}") from exc

    try:
        ping(connection)
    except Exception as exc:
        connection.close()
        raise DatabaseError(f"error pinging database: {exc}") from exc

    logger.info("Database connection established host=%s dbname=%s", settings.host, settings.name)
    return connection
