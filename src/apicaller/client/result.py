"""Success-or-failure container returned by :meth:`Dispatcher.execute`."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from apicaller.exceptions import ApicallerError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of one dispatch: exactly one of ``value`` or ``error`` is meaningful.

    Example::

        result = await dispatcher.execute(request, User)
        if result.ok:
            print(result.value.name)
        else:
            print(f"failed: {result.error}")
    """

    value: Optional[T] = None
    error: Optional[ApicallerError] = None

    @classmethod
    def success(cls, value: T) -> Result[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: ApicallerError) -> Result[T]:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
