# config.py
# Settings come from the environment. Only the DSN is required.
import os

from errors import ConfigError

# Env var holding the database connection string (see db/connections.py for formats)
DSN_ENV_VAR = "SQL_DSN"

# HTTP bind address
HOST = os.getenv("SQL_GATEWAY_HOST", "0.0.0.0")
PORT_ENV_VAR = "SQL_GATEWAY_PORT"
DEFAULT_PORT = 8080

# Rows pulled from the cursor per fetchmany() call
FETCH_SIZE_ENV_VAR = "SQL_GATEWAY_FETCH_SIZE"
DEFAULT_FETCH_SIZE = 500

LOG_LEVEL = os.getenv("SQL_GATEWAY_LOG_LEVEL", "INFO")


def get_dsn() -> str:
    dsn = os.getenv(DSN_ENV_VAR)
    if not dsn:
        raise ConfigError(f"{DSN_ENV_VAR} environment variable not set")
    return dsn


def _get_positive_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def get_port() -> int:
    return _get_positive_int(PORT_ENV_VAR, DEFAULT_PORT)


def get_fetch_size() -> int:
    return _get_positive_int(FETCH_SIZE_ENV_VAR, DEFAULT_FETCH_SIZE)
