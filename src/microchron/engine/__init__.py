"""Calendar engines: whole-second date/time arithmetic behind an interface."""

from microchron.engine._base import (
    CalendarDuration,
    CalendarEngine,
    EngineName,
    TimezoneLike,
)
from microchron.engine.gregorian import GregorianEngine

__all__ = [
    "CalendarDuration",
    "CalendarEngine",
    "EngineName",
    "GregorianEngine",
    "TimezoneLike",
    "default_engine",
    "get_engine",
]

_REGISTRY: dict[str, type[CalendarEngine]] = {
    EngineName.GREGORIAN: GregorianEngine,
}

default_engine: CalendarEngine = GregorianEngine()
"""Engine used when none is passed explicitly."""


def get_engine(name: str) -> CalendarEngine:
    """Get a calendar engine instance by name.

    Args:
        name: Engine name (e.g., "gregorian").

    Returns:
        A CalendarEngine instance.

    Raises:
        ValueError: If the engine name is unknown.
    """
    cls = _REGISTRY.get(name)
    if cls is None:
        raise ValueError(
            f"unknown calendar engine: {name!r}. "
            f"Available: {', '.join(sorted(_REGISTRY))}"
        )
    return cls()
