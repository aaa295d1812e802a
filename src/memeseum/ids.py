"""Meme id minting policies.

``clock`` mirrors an external step counter (like a block height): every
creation inside one step gets the same id, and the later meme replaces the
earlier one in the store. ``sequence`` is a strictly increasing counter that
never collides.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Protocol, runtime_checkable

ID_POLICIES = ("clock", "sequence")


@runtime_checkable
class IdentifierSource(Protocol):
    """Supplies a non-decreasing integer on demand."""

    def mint(self) -> int: ...


class ClockIdentifierSource:
    """Id = index of the current external time step."""

    def __init__(
        self,
        step_seconds: float = 1.0,
        clock: Callable[[], float] = time.time,
        floor: int = 0,
    ) -> None:
        """``floor`` is the highest id already issued, e.g. by a previous run."""
        if step_seconds <= 0:
            raise ValueError(f"step_seconds must be positive, got {step_seconds}")
        self._step = step_seconds
        self._clock = clock
        self._last = floor

    def mint(self) -> int:
        # Never go backwards, even if the wall clock does
        self._last = max(self._last, int(self._clock() // self._step))
        return self._last


class SequenceIdentifierSource:
    """Strictly increasing counter, one id per call."""

    def __init__(self, start: int = 1) -> None:
        self._next = start

    def mint(self) -> int:
        value = self._next
        self._next += 1
        return value


def build_identifier_source(
    policy: str, *, start: int = 1, clock_step: float = 1.0
) -> IdentifierSource:
    if policy == "clock":
        return ClockIdentifierSource(step_seconds=clock_step, floor=start - 1)
    elif policy == "sequence":
        return SequenceIdentifierSource(start=start)
    else:
        raise ValueError(f"Unknown id policy: {policy} (expected one of {ID_POLICIES})")
