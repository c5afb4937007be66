"""Error kinds raised by the spreadsheet sync.

Invalid sheet rows are counted, never raised. Everything here aborts the
current reconciliation pass; the caller decides whether to retry it.
"""

from typing import Optional


class SyncError(Exception):
    """Base error carrying the sheet kind and external key being processed."""

    def __init__(self, message: str, *, kind: Optional[str] = None, key: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.key = key

    def __str__(self) -> str:
        context = []
        if self.kind:
            context.append(f"kind={self.kind}")
        if self.key:
            context.append(f"key={self.key}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class ValidationError(SyncError):
    """Request-level input that cannot be synced at all (bad file, missing tab)."""


class ConflictError(SyncError):
    """A natural key was inserted twice; the source or a concurrent run is at fault."""


class NotFoundError(SyncError):
    """A record the row depends on does not exist and was not created in this pass."""


class TransientStoreError(SyncError):
    """Connectivity loss or deadline expiry; the whole pass is safe to retry."""


__all__ = [
    "ConflictError",
    "NotFoundError",
    "SyncError",
    "TransientStoreError",
    "ValidationError",
]
