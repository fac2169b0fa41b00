"""
Timeline: the branching history of a game, plus undo, redo and replays.

The timeline keeps every WellState of the current game (``history``), the
move that produced each one (``replay``) and a cursor (``position``). Undo
only moves the cursor back; redo replays the logged move at the cursor. A
move that differs from the log at the cursor throws the old future away and
starts a new branch. Lists are replaced, never edited in place, so a history
handed out earlier never changes under its holder.

Replays are played back one move per ``replay_timeout`` seconds by a
scheduled step. At most one step is ever pending: starting a game, loading a
replay or undoing cancels it before touching anything else.
"""

from __future__ import annotations

import enum
import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from hatetris import replay_codec
from hatetris.ai.selectors import PieceSelector
from hatetris.errors import ConfigError
from hatetris.game.board import Board
from hatetris.game.tetris import CoreState, Move, WellState, get_next_state, is_game_over

logger = logging.getLogger(__name__)


class Mode(enum.Enum):
    """What the timeline is currently doing."""
    NOT_STARTED = "not_started"
    PLAYING = "playing"
    REPLAYING = "replaying"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class IgnoredInput:
    """
    An input that was rejected without changing anything.

    Not an error: undoing past the start, redoing past the end of the log
    and moving while no game is running are all reported this way.
    """
    operation: str
    reason: str

    def __str__(self) -> str:
        return f"Ignoring {self.operation} because {self.reason}"


class Scheduler(ABC):
    """Runs a callback once after a delay and hands back a cancellable handle."""

    @abstractmethod
    def schedule(self, delay: float, callback: Callable[[], None]) -> Any:
        """Schedule ``callback``; the returned handle must have ``cancel()``."""


class ThreadingScheduler(Scheduler):
    """Scheduler backed by daemon ``threading.Timer`` threads."""

    def schedule(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


class Timeline:
    """Game history with undo, redo and scheduled replay playback.

    Attributes:
        board: Well geometry and rules.
        selector: Chooses each new piece.
        replay_timeout: Seconds between replay playback steps.
        legacy_replays: Decode hex replays the way the published ones were
            recorded (see replay_codec).
        first_well_state: Empty well with the first piece, shared by every game.
        mode: Current Mode.
        position: Index of the current state in ``history``, -1 before the
            first game.
        history: WellStates of the current game.
        replay: Move log; ``replay[i]`` turned ``history[i]`` into
            ``history[i + 1]``.
        ignored: Every IgnoredInput reported so far.
    """

    def __init__(
        self,
        board: Board,
        selector: PieceSelector,
        replay_timeout: float = 0.05,
        scheduler: Scheduler | None = None,
        on_ignored: Callable[[IgnoredInput], None] | None = None,
        legacy_replays: bool = False,
    ) -> None:
        """Create an idle timeline.

        Args:
            board: Validated well geometry and rules.
            selector: Piece selector used for the first piece and every
                piece after a lock.
            replay_timeout: Delay between replay playback steps, in seconds.
            scheduler: Runs playback steps; defaults to ThreadingScheduler.
            on_ignored: Called with every IgnoredInput, after it is logged.
            legacy_replays: Read nibble 0 of hex replays as a single L.

        Raises:
            ConfigError: If the first piece does not fit in the empty well.
        """
        self.board = board
        self.selector = selector
        self.replay_timeout = replay_timeout
        self.scheduler = scheduler if scheduler is not None else ThreadingScheduler()
        self.on_ignored = on_ignored
        self.legacy_replays = legacy_replays

        first_well = board.empty_well()
        first_piece = board.spawn(selector.select_piece(first_well))
        if not board.is_valid_position(first_well, first_piece):
            raise ConfigError(
                f"Piece {first_piece.id} does not fit in an empty "
                f"{board.width} x {board.depth} well"
            )
        self.first_well_state = WellState(
            core=CoreState(well=first_well, score=0),
            piece=first_piece,
        )

        self.mode = Mode.NOT_STARTED
        self.position = -1
        self.history: list[WellState] = []
        self.replay: list[Move] = []
        self.ignored: list[IgnoredInput] = []

        self._lock = threading.RLock()
        self._pending_step: Any = None
        self._playback_generation = 0

    # ── Observables ──────────────────────────────────────────────────────

    @property
    def well_state(self) -> WellState | None:
        """The current WellState, or None before the first game."""
        if self.position < 0:
            return None
        return self.history[self.position]

    @property
    def score(self) -> int | None:
        """Score of the current state, or None before the first game."""
        state = self.well_state
        return None if state is None else state.core.score

    def replay_string(self) -> str | None:
        """Hex replay of the finished game, or None if there is nothing to show."""
        if self.mode is not Mode.GAME_OVER or not self.replay:
            return None
        return replay_codec.encode(self.replay)

    # ── Operations ───────────────────────────────────────────────────────

    def start(self) -> None:
        """Throw away any game or replay in progress and start a new game."""
        with self._lock:
            self._cancel_playback()
            self.history = [self.first_well_state]
            self.replay = []
            self.position = 0
            self.mode = Mode.PLAYING

    def load_replay(self, raw_text: str) -> None:
        """Decode a hex replay and start playing it back from a fresh well.

        An empty (or entirely unreadable) replay just starts a normal game.
        """
        self.load_moves(replay_codec.decode(raw_text, legacy=self.legacy_replays))

    def load_moves(self, moves: list[Move | str]) -> None:
        """Start playing back a sequence of moves from a fresh well."""
        moves = [Move(move) for move in moves]
        with self._lock:
            self._cancel_playback()
            self.history = [self.first_well_state]
            self.replay = moves
            self.position = 0
            if moves:
                self.mode = Mode.REPLAYING
                self._schedule_step()
            else:
                self.mode = Mode.PLAYING

    def move(self, move: Move | str) -> None:
        """Apply a player move; ignored unless a game or replay is running."""
        move = Move(move)
        with self._lock:
            if self.mode not in (Mode.PLAYING, Mode.REPLAYING):
                self._ignore(f"move {move.value}", f"mode is {self.mode.name}")
                return
            self._handle_move(move)

    def undo(self) -> None:
        """Step back one state. Stops any replay and hands control to the player."""
        with self._lock:
            self._cancel_playback()
            if self.position > 0:
                self.position -= 1
                self.mode = Mode.PLAYING
            else:
                self._ignore("undo", "start of history has been reached")

    def redo(self) -> None:
        """Replay the logged move at the cursor, if there is one."""
        with self._lock:
            if self.mode not in (Mode.PLAYING, Mode.REPLAYING):
                self._ignore("redo", f"mode is {self.mode.name}")
            elif self.position < len(self.replay):
                self._handle_move(self.replay[self.position])
            else:
                self._ignore("redo", "end of history has been reached")

    def fast_forward(self) -> None:
        """Play the rest of a loaded replay synchronously."""
        with self._lock:
            self._cancel_playback()
            while self.mode is Mode.REPLAYING and self.position < len(self.replay):
                self._handle_move(self.replay[self.position])

    # ── Internals ────────────────────────────────────────────────────────

    def _handle_move(self, move: Move) -> None:
        """Advance the cursor by one move, reusing or rewriting the future."""
        position = self.position
        next_position = position + 1

        if position < len(self.replay) and self.replay[position] == move:
            replay = self.replay
            history = self.history
        else:
            replay = self.replay[:position] + [move]
            history = self.history[:next_position]

        if next_position >= len(history):
            next_state = get_next_state(self.board, history[position], move)
            well = next_state.core.well
            if next_state.piece is None and not self.board.is_game_over(well):
                # no live piece? make a new one suited to the new well
                piece = self.board.spawn(self.selector.select_piece(well))
                if self.board.is_valid_position(well, piece):
                    next_state = WellState(core=next_state.core, piece=piece)
                else:
                    logger.info("Piece %d has nowhere to spawn", piece.id)
            history = history + [next_state]

        self.replay = replay
        self.history = history
        self.position = next_position

        if is_game_over(self.board, history[next_position]):
            self.mode = Mode.GAME_OVER
        elif self.mode is Mode.REPLAYING and next_position >= len(replay):
            self.mode = Mode.PLAYING

    def _ignore(self, operation: str, reason: str) -> None:
        event = IgnoredInput(operation=operation, reason=reason)
        self.ignored.append(event)
        logger.warning("%s", event)
        if self.on_ignored is not None:
            self.on_ignored(event)

    def _schedule_step(self) -> None:
        generation = self._playback_generation
        self._pending_step = self.scheduler.schedule(
            self.replay_timeout, lambda: self._replay_step(generation)
        )

    def _cancel_playback(self) -> None:
        # Bumping the generation also stops a step whose timer already fired
        # but is still waiting for the lock.
        self._playback_generation += 1
        if self._pending_step is not None:
            self._pending_step.cancel()
            self._pending_step = None

    def _replay_step(self, generation: int) -> None:
        with self._lock:
            if generation != self._playback_generation:
                return
            self._pending_step = None
            if self.mode is not Mode.REPLAYING:
                self._ignore("replay step", f"mode is {self.mode.name}")
                return
            self.redo()
            if self.mode is Mode.REPLAYING and self.position < len(self.replay):
                self._schedule_step()
