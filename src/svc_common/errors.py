"""Error taxonomy shared by the store, cache and HTTP layers.

  ValidationError: malformed write request        -> 400
  StoreError:      relational store failure       -> 500 (generic message)
  CacheError:      cache unavailable / bad payload -> never reaches a client
"""


class AppError(Exception):
    """Base application error, rendered as {"error": message}."""

    def __init__(self, message: str, http_status: int = 500) -> None:
        self.message = message
        self.http_status = http_status
        super().__init__(message)


class ValidationError(AppError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class StoreError(AppError):
    """Store failure. The cause is chained, logged, and never sent to clients."""

    def __init__(self, detail: str = "Store operation failed") -> None:
        self.detail = detail
        super().__init__("Internal Server Error", 500)

    def __str__(self) -> str:
        return self.detail


class CacheError(Exception):
    """Cache unavailable or cached payload unreadable. Absorbed by CacheAside."""
