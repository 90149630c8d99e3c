"""Clock and id generator collaborators."""

from typing import Callable, Protocol, runtime_checkable

IdGenerator = Callable[[], str]


@runtime_checkable
class Clock(Protocol):
    """Source of millisecond timestamps."""

    def now_ms(self) -> int:
        """Current time in milliseconds."""
        ...
