"""
Manual play, replay watching and headless replay checking.

Provides three modes:
  - play_manual: Human plays HATETRIS with keyboard controls.
  - watch_replay: A replay is played back in the window, one move per
    replay_timeout, and the player can take over at any time.
  - check_replay: A replay is played to the end without a window and the
    result is printed.

The windowed modes use the HatetrisRenderer. Replay playback steps are run
by a LoopScheduler that the game loop polls once per frame, so every
Timeline change happens on the pygame thread.
"""

from __future__ import annotations

import sys
import time
from collections.abc import Callable
from typing import TextIO

try:
    import pygame
except ImportError:
    pygame = None  # type: ignore[assignment]

from hatetris import replay_codec
from hatetris.config import GameConfig, build_timeline
from hatetris.game.tetris import Move
from hatetris.renderer import HatetrisRenderer
from hatetris.timeline import Mode, Scheduler, Timeline


# ── Keyboard mapping ──────────────────────────────────────────────────────
# Arrow keys move and rotate; Ctrl+Z / Ctrl+Y undo and redo, N starts over
KEY_MAP: dict[int, Move] = {}
if pygame is not None:
    KEY_MAP = {
        pygame.K_LEFT: Move.LEFT,
        pygame.K_RIGHT: Move.RIGHT,
        pygame.K_DOWN: Move.DOWN,
        pygame.K_UP: Move.UP,
    }


class LoopHandle:
    """A step waiting in a LoopScheduler."""

    def __init__(self, due_at: float, callback: Callable[[], None]) -> None:
        self.due_at = due_at
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class LoopScheduler(Scheduler):
    """
    Scheduler polled by a game loop instead of running its own threads.

    Args:
        clock: Returns the current time in seconds; defaults to
            time.monotonic.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self.clock = clock
        self.pending: list[LoopHandle] = []

    def schedule(self, delay: float, callback: Callable[[], None]) -> LoopHandle:
        handle = LoopHandle(self.clock() + delay, callback)
        self.pending.append(handle)
        return handle

    def run_due(self) -> int:
        """Fire every step whose time has come. Returns how many fired.

        Steps scheduled by those callbacks wait for the next call.
        """
        now = self.clock()
        live = [handle for handle in self.pending if not handle.cancelled]
        due = [handle for handle in live if handle.due_at <= now]
        self.pending = [handle for handle in live if handle.due_at > now]

        fired = 0
        for handle in due:
            if not handle.cancelled:
                handle.callback()
                fired += 1
        return fired


def handle_key(timeline: Timeline, key: int, mod: int = 0) -> bool:
    """Apply one key press to the timeline.

    Args:
        timeline: The timeline to drive.
        key: Pygame key code.
        mod: Pygame modifier bits held with the key.

    Returns:
        False if the key asks to quit, True otherwise.
    """
    if key == pygame.K_ESCAPE:
        return False
    if mod & pygame.KMOD_CTRL:
        if key == pygame.K_z:
            timeline.undo()
        elif key == pygame.K_y:
            timeline.redo()
        return True
    if key in KEY_MAP:
        timeline.move(KEY_MAP[key])
    elif key == pygame.K_n:
        timeline.start()
    return True


def _load(timeline: Timeline, replay: str | None, moves: list[Move] | None) -> None:
    if moves is not None:
        timeline.load_moves(moves)
    else:
        timeline.load_replay(replay or "")


def _print_summary(timeline: Timeline, out: TextIO) -> None:
    print(
        f"Mode: {timeline.mode.name} | Score: {timeline.score or 0} | Move: {timeline.position}",
        file=out,
    )
    played = timeline.replay[:max(timeline.position, 0)]
    if played:
        print(f"Moves: {replay_codec.format_moves(played)}", file=out)
    replay = timeline.replay_string()
    if replay:
        print(f"Replay: {replay}", file=out)


def _run_loop(
    timeline: Timeline,
    scheduler: LoopScheduler,
    renderer: HatetrisRenderer,
    fps: int,
) -> None:
    running = True
    reported = False

    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
                break
            elif event.type == pygame.KEYDOWN:
                if not handle_key(timeline, event.key, event.mod):
                    running = False
                    break

        if not running:
            break

        scheduler.run_due()
        renderer.render(fps)

        if timeline.mode is Mode.GAME_OVER:
            _draw_game_over_overlay(renderer)
            if not reported:
                _print_summary(timeline, sys.stdout)
                reported = True
        else:
            reported = False


def _draw_game_over_overlay(renderer: HatetrisRenderer) -> None:
    """Draw a semi-transparent game over overlay with restart instructions."""
    overlay = pygame.Surface(
        (renderer.board_pixel_width, renderer.board_pixel_height), pygame.SRCALPHA
    )
    overlay.fill((0, 0, 0, 150))
    renderer.screen.blit(overlay, (0, 0))

    font_large = pygame.font.SysFont("monospace", 36, bold=True)
    font_small = pygame.font.SysFont("monospace", 18)

    text_go = font_large.render("GAME OVER", True, (255, 50, 50))
    text_restart = font_small.render("N: new game", True, (255, 255, 255))
    text_undo = font_small.render("Ctrl+Z: undo", True, (200, 200, 200))

    cx = renderer.board_pixel_width // 2
    cy = renderer.board_pixel_height // 2

    renderer.screen.blit(text_go, (cx - text_go.get_width() // 2, cy - 40))
    renderer.screen.blit(text_restart, (cx - text_restart.get_width() // 2, cy + 10))
    renderer.screen.blit(text_undo, (cx - text_undo.get_width() // 2, cy + 40))

    pygame.display.flip()


def play_manual(config: GameConfig) -> Timeline:
    """Run the game in manual (human) play mode.

    The player uses keyboard controls:
      - Left/Right arrow: move piece
      - Down arrow: move down, locking the piece if it cannot go further
      - Up arrow: rotate
      - Ctrl+Z / Ctrl+Y: undo / redo
      - N: new game
      - Escape / close window: quit

    The replay of every finished game is printed to stdout.

    Args:
        config: Validated game configuration.

    Returns:
        The timeline, in whatever state the session left it.
    """
    if pygame is None:
        raise ImportError("pygame is required for play mode. Install it: pip install pygame")

    scheduler = LoopScheduler()
    timeline = build_timeline(config, scheduler)
    renderer = HatetrisRenderer(timeline, cell_size=config.cell_size)
    # Force renderer init before event loop (pygame must be initialized for event.get())
    renderer.render(config.fps)

    timeline.start()
    _run_loop(timeline, scheduler, renderer, config.fps)
    renderer.close()
    return timeline


def watch_replay(
    config: GameConfig,
    replay: str | None = None,
    moves: list[Move] | None = None,
) -> Timeline:
    """Play a replay back in the window.

    Pressing any move key or Ctrl+Z stops playback and hands the game to
    the player; the keys of play_manual apply throughout.

    Args:
        config: Validated game configuration; must match the one the replay
            was recorded with.
        replay: Hex replay text.
        moves: Moves to play instead of ``replay``.

    Returns:
        The timeline, in whatever state the session left it.
    """
    if pygame is None:
        raise ImportError("pygame is required for watch mode. Install it: pip install pygame")

    scheduler = LoopScheduler()
    timeline = build_timeline(config, scheduler)
    renderer = HatetrisRenderer(timeline, cell_size=config.cell_size)
    renderer.render(config.fps)

    _load(timeline, replay, moves)
    _run_loop(timeline, scheduler, renderer, config.fps)
    renderer.close()
    return timeline


def check_replay(
    config: GameConfig,
    replay: str | None = None,
    moves: list[Move] | None = None,
    out: TextIO | None = None,
) -> Timeline:
    """Play a replay to its end without a window and print the result.

    Args:
        config: Validated game configuration.
        replay: Hex replay text.
        moves: Moves to play instead of ``replay``.
        out: Where the result is printed (default sys.stdout).

    Returns:
        The timeline after playback.
    """
    out = out if out is not None else sys.stdout

    timeline = build_timeline(config, LoopScheduler())
    _load(timeline, replay, moves)
    timeline.fast_forward()

    _print_summary(timeline, out)
    if timeline.mode is not Mode.GAME_OVER:
        print(
            f"Replay ended after {len(timeline.replay)} moves without a game over.",
            file=out,
        )
    return timeline
