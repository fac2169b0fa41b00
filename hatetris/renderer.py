"""
Pygame renderer for a HATETRIS timeline.

Draws the well with its landed cells, the live piece, the bar line, and a
sidebar with mode / score / position information.
"""

from __future__ import annotations

try:
    import pygame
except ImportError:
    pygame = None  # type: ignore[assignment]

from hatetris.game.board import Board
from hatetris.game.pieces import Piece
from hatetris.timeline import Mode, Timeline


# ── Color constants ───────────────────────────────────────────────────────
BACKGROUND_COLOR = (30, 30, 30)
GRID_LINE_COLOR = (60, 60, 60)
BORDER_COLOR = (200, 200, 200)
BAR_COLOR = (220, 60, 60)
TEXT_COLOR = (255, 255, 255)
SIDEBAR_BG_COLOR = (20, 20, 20)
EMPTY_CELL_COLOR = (40, 40, 40)
LANDED_CELL_COLOR = (150, 150, 150)

# ── Piece ID -> RGB color of the live piece ───────────────────────────────
# S, Z, O, I, L, J, T
PIECE_COLORS: dict[int, tuple[int, int, int]] = {
    0: (0, 220, 0),
    1: (220, 0, 0),
    2: (220, 220, 0),
    3: (0, 220, 220),
    4: (220, 140, 0),
    5: (0, 80, 220),
    6: (160, 0, 220),
}

MODE_LABELS = {
    Mode.NOT_STARTED: "READY",
    Mode.PLAYING: "PLAYING",
    Mode.REPLAYING: "REPLAYING",
    Mode.GAME_OVER: "GAME OVER",
}


def live_cells(board: Board, piece: Piece | None) -> set[tuple[int, int]]:
    """Well cells covered by a live piece, as (column, row) pairs."""
    if piece is None:
        return set()
    orientation = board.rotation_system.rotations[piece.id][piece.o]
    x_actual = piece.x + orientation.x_min
    y_actual = piece.y + orientation.y_min
    return {
        (x_actual + col, y_actual + row)
        for row, mask in enumerate(orientation.rows)
        for col in range(orientation.x_dim)
        if mask & (1 << col)
    }


class HatetrisRenderer:
    """Pygame-based renderer for watching or playing a HATETRIS timeline.

    The window is divided into:
      - Left: the well, cell_size * width by cell_size * depth
      - Right: sidebar with mode, score and move count

    Attributes:
        timeline: The Timeline being rendered.
        board: The timeline's board.
        cell_size: Pixel size of each grid cell.
        board_pixel_width: Pixel width of the well area.
        board_pixel_height: Pixel height of the well area.
        sidebar_width: Pixel width of the sidebar.
        window_width: Total window width.
        window_height: Total window height.
        screen: Pygame display surface (created on first render).
    """

    SIDEBAR_WIDTH_CELLS: int = 7

    def __init__(self, timeline: Timeline, cell_size: int = 30) -> None:
        """Initialize the renderer.

        Does NOT create the Pygame window yet; that happens on the first
        call to render().

        Args:
            timeline: The Timeline whose current state is drawn.
            cell_size: Size of each grid cell in pixels.
        """
        if pygame is None:
            raise ImportError("pygame is required for rendering. Install it: pip install pygame")

        self.timeline = timeline
        self.board = timeline.board
        self.cell_size = cell_size

        self.board_pixel_width = cell_size * self.board.width
        self.board_pixel_height = cell_size * self.board.depth
        self.sidebar_width = cell_size * self.SIDEBAR_WIDTH_CELLS
        self.window_width = self.board_pixel_width + self.sidebar_width
        self.window_height = self.board_pixel_height

        self.screen: pygame.Surface | None = None
        self._clock: pygame.time.Clock | None = None
        self._font: pygame.font.Font | None = None
        self._initialized: bool = False

    def render(self, fps: int = 60) -> None:
        """Draw the timeline's current state to the screen.

        Initializes Pygame on the first call.

        Args:
            fps: Target frames per second for the display clock.
        """
        if not self._initialized:
            self._init_pygame()

        self.screen.fill(BACKGROUND_COLOR)
        self._draw_well()
        self._draw_bar()
        self._draw_sidebar()

        pygame.draw.rect(
            self.screen,
            BORDER_COLOR,
            (0, 0, self.board_pixel_width, self.board_pixel_height),
            2,
        )

        pygame.display.flip()
        self._clock.tick(fps)

    def _init_pygame(self) -> None:
        pygame.init()
        self.screen = pygame.display.set_mode((self.window_width, self.window_height))
        pygame.display.set_caption("HATETRIS")
        self._clock = pygame.time.Clock()
        self._font = pygame.font.SysFont("monospace", 20)
        self._small_font = pygame.font.SysFont("monospace", 14)
        self._initialized = True

    def _draw_cell(self, col: int, row: int, color: tuple[int, int, int]) -> None:
        x = col * self.cell_size
        y = row * self.cell_size
        pygame.draw.rect(self.screen, color, (x, y, self.cell_size, self.cell_size))
        if color != EMPTY_CELL_COLOR:
            # Slightly darker border for 3D effect
            darker = tuple(max(0, c - 40) for c in color)
            pygame.draw.rect(self.screen, darker, (x, y, self.cell_size, self.cell_size), 1)
        pygame.draw.rect(self.screen, GRID_LINE_COLOR, (x, y, self.cell_size, self.cell_size), 1)

    def _draw_well(self) -> None:
        """Draw landed cells and the live piece. Before the first game the well is empty."""
        state = self.timeline.well_state
        well = state.core.well if state is not None else self.board.empty_well()
        piece = state.piece if state is not None else None
        live = live_cells(self.board, piece)
        piece_color = PIECE_COLORS.get(piece.id, LANDED_CELL_COLOR) if piece is not None else None

        for row in range(self.board.depth):
            for col in range(self.board.width):
                if (col, row) in live:
                    self._draw_cell(col, row, piece_color)
                elif well[row] & (1 << col):
                    self._draw_cell(col, row, LANDED_CELL_COLOR)
                else:
                    self._draw_cell(col, row, EMPTY_CELL_COLOR)

    def _draw_bar(self) -> None:
        """Mark the top edge of the bar row; lines only clear below it."""
        y = self.board.bar * self.cell_size
        pygame.draw.line(self.screen, BAR_COLOR, (0, y), (self.board_pixel_width, y), 2)

    def _draw_sidebar(self) -> None:
        sidebar_x = self.board_pixel_width
        pygame.draw.rect(
            self.screen,
            SIDEBAR_BG_COLOR,
            (sidebar_x, 0, self.sidebar_width, self.window_height),
        )
        pygame.draw.line(
            self.screen,
            BORDER_COLOR,
            (sidebar_x, 0),
            (sidebar_x, self.window_height),
            2,
        )

        text_x = sidebar_x + 15
        text_y = 20

        self._draw_text("MODE", text_x, text_y)
        self._draw_text(MODE_LABELS[self.timeline.mode], text_x, text_y + 25)

        text_y += 65
        self._draw_text("SCORE", text_x, text_y)
        self._draw_text(str(self.timeline.score or 0), text_x, text_y + 25)

        text_y += 65
        self._draw_text("MOVE", text_x, text_y)
        position = max(self.timeline.position, 0)
        self._draw_text(f"{position}/{len(self.timeline.replay)}", text_x, text_y + 25)

        text_y += 80
        for line in ("Arrows: move", "Up: rotate", "Ctrl+Z: undo", "Ctrl+Y: redo", "N: new game", "Esc: quit"):
            surface = self._small_font.render(line, True, BORDER_COLOR)
            self.screen.blit(surface, (text_x, text_y))
            text_y += 20

    def _draw_text(self, text: str, x: int, y: int, color: tuple[int, int, int] = TEXT_COLOR) -> None:
        surface = self._font.render(text, True, color)
        self.screen.blit(surface, (x, y))

    def close(self) -> None:
        """Shut down Pygame and close the window."""
        if self._initialized:
            pygame.quit()
            self._initialized = False
