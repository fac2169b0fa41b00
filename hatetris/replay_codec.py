"""
Replay transport: move sequences to and from hex text.

Moves are packed two per nibble. The nibble for the pair (m1, m2) is
``4 * index(m1) + index(m2)`` over the order L, R, D, U, so the table reads
row-major:

        L  R  D  U
    L   0  1  2  3
    R   4  5  6  7
    D   8  9  A  B
    U   C  D  E  F

An unpaired trailing move is packed as if a D followed it. Hex text is the
nibbles as upper-case hex digits; every complete group of four digits is
followed by a space, so a replay whose length is a multiple of four ends in
one. Decoding drops every character that is not a hex digit, so a damaged
replay decodes to a shorter game instead of failing.

Legacy replays: the hex replays published for HATETRIS were checked against
a decoder that reads nibble 0 as a single L followed by a move that does
nothing. Those games only play back as recorded when nibble 0 is read that
way, so ``decode(..., legacy=True)`` expands it to one L.
"""

from __future__ import annotations

from collections.abc import Iterable

from hatetris.game.tetris import MOVES, Move

HEX_CHARS = "0123456789ABCDEF"
GROUP_SIZE = 4

_MOVE_INDEX: dict[Move, int] = {move: index for index, move in enumerate(MOVES)}


def pack_moves(moves: Iterable[Move]) -> list[int]:
    """Pack moves two per nibble, padding an odd sequence with a trailing D."""
    moves = [Move(move) for move in moves]
    if len(moves) % 2 == 1:
        moves.append(Move.DOWN)
    return [
        4 * _MOVE_INDEX[moves[i]] + _MOVE_INDEX[moves[i + 1]]
        for i in range(0, len(moves), 2)
    ]


def unpack_moves(nibbles: Iterable[int], legacy: bool = False) -> list[Move]:
    """Expand every nibble back into its two moves.

    With ``legacy`` set, nibble 0 expands to a single L (see module docs).
    """
    moves: list[Move] = []
    for nibble in nibbles:
        moves.append(MOVES[(nibble >> 2) & 3])
        if legacy and nibble == 0:
            continue
        moves.append(MOVES[nibble & 3])
    return moves


def encode(moves: Iterable[Move]) -> str:
    """Convert a sequence of moves into a hex replay string."""
    digits = "".join(HEX_CHARS[nibble] for nibble in pack_moves(moves))
    groups = [digits[i:i + GROUP_SIZE] for i in range(0, len(digits), GROUP_SIZE)]
    return "".join(group + " " if len(group) == GROUP_SIZE else group for group in groups)


def decode(text: str, legacy: bool = False) -> list[Move]:
    """Convert a hex replay string back into moves, ignoring anything else."""
    return unpack_moves(
        (HEX_CHARS.index(char) for char in text if char in HEX_CHARS),
        legacy=legacy,
    )


def parse_moves(text: str) -> list[Move]:
    """Read plain move symbols (``LRDU``), dropping any other character."""
    return [Move(char) for char in text.upper() if char in "LRDU"]


def format_moves(moves: Iterable[Move]) -> str:
    """Write moves as plain symbols."""
    return "".join(Move(move).value for move in moves)
