"""
Pytest fixtures for HATETRIS tests.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest

from ..ai.selectors import AdversarialSelector
from ..game.board import Board
from ..game.pieces import HATETRIS_ROTATION_SYSTEM
from ..timeline import Scheduler, Timeline


class ManualHandle:
    """Pending step created by ManualScheduler."""

    def __init__(self, callback: Callable[[], None]) -> None:
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler(Scheduler):
    """
    Scheduler that only fires when told to.

    Stands in for real timers so replay playback can be stepped one move at
    a time.
    """

    def __init__(self) -> None:
        self.pending: list[ManualHandle] = []

    def schedule(self, delay: float, callback: Callable[[], None]) -> ManualHandle:
        handle = ManualHandle(callback)
        self.pending.append(handle)
        return handle

    @property
    def active(self) -> list[ManualHandle]:
        return [handle for handle in self.pending if not handle.cancelled]

    def run_pending(self) -> None:
        """Fire every step scheduled so far, but not the ones they schedule."""
        due, self.pending = self.pending, []
        for handle in due:
            if not handle.cancelled:
                handle.callback()


@pytest.fixture
def board() -> Board:
    """The classic 10 x 20 well with the bar at row 4."""
    return Board(HATETRIS_ROTATION_SYSTEM, width=10, depth=20, bar=4)


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def timeline(board: Board, scheduler: ManualScheduler) -> Timeline:
    """An unstarted timeline with the adversarial selector and manual timers."""
    return Timeline(
        board,
        AdversarialSelector(board),
        replay_timeout=0,
        scheduler=scheduler,
    )
