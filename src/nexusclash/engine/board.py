from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .actions import Direction

TileType = Literal["floor", "wall", "nexus", "hazard"]
HazardKind = Literal["fire", "smoke", "holy", "spikes"]

Cell = tuple[int, int]


@dataclass
class HazardState:
    kind: HazardKind
    expires_on_tick: int


@dataclass
class Tile:
    x: int
    y: int
    type: TileType = "floor"
    occupied_by: str | None = None
    hazard: HazardState | None = None
    blocks_los: bool = False
    blocks_movement: bool = False


@dataclass(frozen=True)
class Neighbor:
    x: int
    y: int
    dx: int
    dy: int


@dataclass
class Board:
    """Fixed-size grid. Tiles are mutable; the grid shape is not."""

    nexus: Cell
    tiles: list[list[Tile]]  # row-major: tiles[y][x]

    @property
    def width(self) -> int:
        return len(self.tiles[0]) if self.tiles else 0

    @property
    def height(self) -> int:
        return len(self.tiles)


def make_board(width: int = 12, height: int = 12, nexus: Cell = (4, 4)) -> Board:
    if not in_range(width, height, *nexus):
        raise ValueError(f"Nexus {nexus} lies outside a {width}x{height} board.")
    tiles = [
        [Tile(x=x, y=y, type="nexus" if (x, y) == nexus else "floor") for x in range(width)]
        for y in range(height)
    ]
    return Board(nexus=nexus, tiles=tiles)


def nexus_position(b: Board) -> Cell:
    return b.nexus


def in_range(width: int, height: int, x: int, y: int) -> bool:
    return 0 <= x < width and 0 <= y < height


def in_bounds(b: Board, x: int, y: int) -> bool:
    return in_range(b.width, b.height, x, y)


def get_tile(b: Board, x: int, y: int) -> Tile | None:
    """Tile at (x, y), or None when the coordinate is off the board."""
    if not in_bounds(b, x, y):
        return None
    return b.tiles[y][x]


def is_occupied(b: Board, x: int, y: int) -> bool:
    t = get_tile(b, x, y)
    return t is not None and t.occupied_by is not None


def is_walkable(b: Board, x: int, y: int) -> bool:
    t = get_tile(b, x, y)
    if t is None:
        return False
    if t.blocks_movement:
        return False
    if t.occupied_by is not None:
        return False
    return True


def neighbors4(x: int, y: int) -> list[Neighbor]:
    """Orthogonal neighbours in up, right, down, left order. May include off-board cells."""
    return [
        Neighbor(x, y - 1, 0, -1),
        Neighbor(x + 1, y, 1, 0),
        Neighbor(x, y + 1, 0, 1),
        Neighbor(x - 1, y, -1, 0),
    ]


def manhattan(a: Cell, b: Cell) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def _sign(v: int) -> int:
    return (v > 0) - (v < 0)


def los_orthogonal(b: Board, src: Cell, dst: Cell) -> bool:
    """Orthogonal line of sight between two cells.

    Diagonal pairs never have sight. Intermediate tiles are checked one at a
    time; leaving the board or crossing a LOS-blocking tile fails. The end
    cells themselves are not checked.
    """
    if src[0] != dst[0] and src[1] != dst[1]:
        return False
    dx = _sign(dst[0] - src[0])
    dy = _sign(dst[1] - src[1])
    x, y = src[0] + dx, src[1] + dy
    while (x, y) != dst:
        t = get_tile(b, x, y)
        if t is None or t.blocks_los:
            return False
        x += dx
        y += dy
    return True


def line_from_dir(b: Board, start: Cell, direction: Direction, max_steps: int) -> list[Cell]:
    """Cells along ``direction`` (start excluded), up to ``max_steps``.

    Stops only when the ray leaves the board. Movement- and LOS-blocking tiles
    do not stop it.
    """
    out: list[Cell] = []
    x, y = start
    for _ in range(max_steps):
        x += direction.dx
        y += direction.dy
        if not in_bounds(b, x, y):
            break
        out.append((x, y))
    return out


def place_actor(b: Board, actor_id: str, x: int, y: int) -> None:
    t = get_tile(b, x, y)
    if t is not None:
        t.occupied_by = actor_id


def vacate(b: Board, actor_id: str, x: int, y: int) -> None:
    """Clear the occupant at (x, y) only if it still names ``actor_id``."""
    t = get_tile(b, x, y)
    if t is not None and t.occupied_by == actor_id:
        t.occupied_by = None
