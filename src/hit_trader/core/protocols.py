"""Protocol definitions for dependency injection."""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable


@runtime_checkable
class RandomSource(Protocol):
    """Subset of ``random.Random`` the engine draws from.

    Any ``random.Random`` instance satisfies it; tests pass a subclass
    with scripted ``random()`` values to force specific branches.
    """

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        ...

    def uniform(self, a: float, b: float) -> float:
        ...

    def choice(self, seq: Sequence[Any]) -> Any:
        ...
