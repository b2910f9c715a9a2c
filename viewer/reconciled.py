"""Two-slot holder for optimistically edited values.

``local`` is what the operator sees and edits; it changes synchronously.
``remote`` is the last value the service confirmed (fetched or accepted on
push). A failed push never rolls ``local`` back; it only records the error,
so divergence is observable rather than hidden.
"""

from typing import Generic, Optional, TypeVar

from core.exceptions import RemoteServiceError

T = TypeVar("T")


class ReconciledValue(Generic[T]):
    """Local/remote pair for one editable value."""

    def __init__(self, initial: T) -> None:
        self.local: T = initial
        self.remote: Optional[T] = None
        self.last_error: Optional[RemoteServiceError] = None

    @property
    def diverged(self) -> bool:
        """True when the local value differs from the last confirmed one."""
        return self.remote is None or self.local != self.remote

    def edit(self, value: T) -> None:
        self.local = value

    def confirm(self, value: T) -> None:
        """Record ``value`` as accepted by (or fetched from) the service."""
        self.remote = value
        self.last_error = None

    def loaded(self, value: T) -> None:
        """Adopt a freshly fetched value into both slots."""
        self.local = value
        self.confirm(value)

    def failed(self, error: RemoteServiceError) -> None:
        self.last_error = error

    def __repr__(self) -> str:
        return f"ReconciledValue(local={self.local!r}, remote={self.remote!r})"
