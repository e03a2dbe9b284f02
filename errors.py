# errors.py
# Error kinds surfaced by the gateway.


class ConfigError(Exception):
    """Process configuration is missing or unusable. Fatal at startup."""


class QueryExecutionError(Exception):
    """
    Any database-side failure while running a query.

    Callers only ever see this one kind. `stage` records where it happened
    (connect, dispatch, describe, decode, stream) for logs and diagnostics.
    """

    def __init__(self, stage: str, message: str):
        super().__init__(message)
        self.stage = stage
        self.message = message
