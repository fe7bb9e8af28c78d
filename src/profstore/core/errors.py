"""
Exceptions raised by profstore.

Only unrecoverable conditions are exceptions. Misses and backend failures
are reported as None / False / empty results by the storage layer.
"""


class ProfstoreError(Exception):
    """Base class for all profstore errors."""


class ConfigurationError(ProfstoreError):
    """
    The store is configured in a way the backend can never satisfy.

    Raised for oversized keys: cache servers reject them outright, and the
    key is derived deterministically from the token, so retrying is useless.
    """

    def __init__(self, message: str, key: str | None = None, length: int | None = None):
        super().__init__(message)
        self.key = key
        self.length = length


class UnknownBackendError(ConfigurationError):
    """No backend is registered for the DSN scheme."""


class CyclicDataError(ProfstoreError):
    """Stored parent/child links loop back on themselves."""

    def __init__(self, token: str, path: list[str] | None = None):
        self.token = token
        self.path = path or []
        chain = " -> ".join([*self.path, token])
        super().__init__(f"Cyclic profile data detected at token {token!r} ({chain})")
