"""
Board - Fixed-size grid of typed squares.

The board is a pure data/query structure: it stores squares, knows which
edge each player attacks toward, and answers spatial questions. Move
legality lives in Game, not here.

Design principles:
- Square is a closed tagged union of frozen dataclasses
- Town and artifact coordinates are cached for fast win checks
- The cache must be rebuilt after any wholesale grid change
  (cache_special_squares); from_string and replace do it themselves
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field, replace as dc_replace
from enum import Enum
from typing import Iterator, Union

from .errors import OutOfBoundsError


class Direction(Enum):
    """The board edge a player attacks toward."""
    NORTH = "north"
    EAST = "east"
    SOUTH = "south"
    WEST = "west"

    def opposite(self) -> Direction:
        return {
            Direction.NORTH: Direction.SOUTH,
            Direction.SOUTH: Direction.NORTH,
            Direction.EAST: Direction.WEST,
            Direction.WEST: Direction.EAST,
        }[self]


class SquareValidity(Enum):
    """What the owner knows about the words running through a tile."""
    UNKNOWN = "unknown"
    VALID = "valid"
    INVALID = "invalid"
    PARTIAL = "partial"  # Part of both a valid and an invalid word


@dataclass(frozen=True, order=True)
class Coordinate:
    x: int
    y: int

    def neighbors_4(self) -> list[Coordinate]:
        """Orthogonal neighbours (north, east, south, west), not clipped to any board."""
        return [
            Coordinate(self.x, self.y - 1),
            Coordinate(self.x + 1, self.y),
            Coordinate(self.x, self.y + 1),
            Coordinate(self.x - 1, self.y),
        ]

    def distance(self, other: Coordinate) -> int:
        """Manhattan distance."""
        return abs(self.x - other.x) + abs(self.y - other.y)

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


# ============================================================================
# Squares
# ============================================================================

@dataclass(frozen=True)
class Water:
    foggy: bool = False


@dataclass(frozen=True)
class Land:
    foggy: bool = False


@dataclass(frozen=True)
class Town:
    player: int
    defeated: bool = False
    foggy: bool = False


@dataclass(frozen=True)
class Artifact:
    """A player's home square. Tiles are placed outward from it."""
    player: int
    defeated: bool = False
    foggy: bool = False


@dataclass(frozen=True)
class Occupied:
    player: int
    tile: str
    validity: SquareValidity = SquareValidity.UNKNOWN
    foggy: bool = False


@dataclass(frozen=True)
class Fog:
    """A square whose contents are hidden from the viewing player."""


Square = Union[Water, Land, Town, Artifact, Occupied, Fog]


# Two-character tokens used by from_string / __str__
_WATER_TOKEN = "~~"
_LAND_TOKEN = "__"
_FOG_TOKEN = "??"
_TOWN_MARK = "#"
_ARTIFACT_MARK = "@"


def _square_token(square: Square) -> str:
    if isinstance(square, Water):
        return _WATER_TOKEN
    if isinstance(square, Land):
        return _LAND_TOKEN
    if isinstance(square, Fog):
        return _FOG_TOKEN
    if isinstance(square, Town):
        return f"{_TOWN_MARK}{square.player}"
    if isinstance(square, Artifact):
        return f"{_ARTIFACT_MARK}{square.player}"
    return f"{square.tile.upper()}{square.player}"


def _parse_token(token: str) -> Square:
    if token == _WATER_TOKEN:
        return Water()
    if token == _LAND_TOKEN:
        return Land()
    if token == _FOG_TOKEN:
        return Fog()
    if len(token) != 2 or not token[1].isdigit():
        raise ValueError(f"Unrecognised square token: {token!r}")

    mark, player = token[0], int(token[1])
    if mark == _TOWN_MARK:
        return Town(player)
    if mark == _ARTIFACT_MARK:
        return Artifact(player)
    if mark.isalpha() or mark == "*":
        return Occupied(player, mark.upper())
    raise ValueError(f"Unrecognised square token: {token!r}")


# ============================================================================
# Board
# ============================================================================

@dataclass
class Board:
    """
    A grid of squares indexed as squares[y][x].

    orientations[p] is the direction player p attacks toward.
    """
    squares: list[list[Square]]
    orientations: list[Direction] = field(default_factory=list)

    # Cached special squares, rebuilt by cache_special_squares()
    _towns: list[Coordinate] = field(default_factory=list, repr=False, compare=False)
    _artifacts: list[Coordinate] = field(default_factory=list, repr=False, compare=False)

    def __post_init__(self):
        widths = {len(row) for row in self.squares}
        if len(widths) > 1:
            raise ValueError("Board rows must all have the same width")
        self.cache_special_squares()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def default(cls, width: int = 9, height: int = 9) -> Board:
        """
        The standard two-player board.

        Water surrounds a land interior. Each player has an artifact in
        the middle of their home edge and two towns just inside it.
        Player 0 starts at the bottom and attacks north.
        """
        if width < 5 or height < 5:
            raise ValueError("The default board needs at least 5x5 squares")

        squares: list[list[Square]] = [
            [Land() for _ in range(width)] for _ in range(height)
        ]
        for y in range(height):
            squares[y][0] = Water()
            squares[y][width - 1] = Water()
        for x in range(width):
            squares[0][x] = Water()
            squares[height - 1][x] = Water()

        middle = width // 2
        squares[height - 1][middle] = Artifact(0)
        squares[0][middle] = Artifact(1)
        for x in (1, width - 2):
            squares[height - 2][x] = Town(0)
            squares[1][x] = Town(1)

        return cls(squares=squares, orientations=[Direction.NORTH, Direction.SOUTH])

    @classmethod
    def from_string(cls, text: str, orientations: list[Direction] | None = None) -> Board:
        """
        Parse the two-character-per-square text format.

        ~~ water, __ land, ?? fog, #N town of player N,
        @N artifact of player N, and a letter followed by N for a
        tile owned by player N (e.g. "A0").
        """
        rows = [line.split() for line in text.strip("\n").splitlines() if line.strip()]
        squares = [[_parse_token(token) for token in row] for row in rows]
        return cls(squares=squares, orientations=list(orientations or []))

    def __str__(self) -> str:
        return "\n".join(
            " ".join(_square_token(square) for square in row)
            for row in self.squares
        )

    # ------------------------------------------------------------------
    # Basic queries
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        return len(self.squares[0]) if self.squares else 0

    @property
    def height(self) -> int:
        return len(self.squares)

    def in_bounds(self, coord: Coordinate) -> bool:
        return 0 <= coord.x < self.width and 0 <= coord.y < self.height

    def get(self, coord: Coordinate) -> Square:
        if not self.in_bounds(coord):
            raise OutOfBoundsError(f"{coord} is outside the {self.width}x{self.height} board")
        return self.squares[coord.y][coord.x]

    def coordinates(self) -> Iterator[Coordinate]:
        """Every coordinate, row by row."""
        for y in range(self.height):
            for x in range(self.width):
                yield Coordinate(x, y)

    def neighbors_4(self, coord: Coordinate) -> list[Coordinate]:
        """Orthogonal neighbours that lie on the board."""
        return [n for n in coord.neighbors_4() if self.in_bounds(n)]

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def set(self, coord: Coordinate, player: int, tile: str) -> None:
        """
        Place a tile. The caller is responsible for legality.
        """
        self.get(coord)
        self.squares[coord.y][coord.x] = Occupied(player, tile)

    def clear(self, coord: Coordinate) -> None:
        """Return a square to empty land."""
        self.get(coord)
        self.squares[coord.y][coord.x] = Land()

    def replace(self, coord: Coordinate, square: Square) -> None:
        """Write any square, keeping the special-square cache in sync."""
        previous = self.get(coord)
        self.squares[coord.y][coord.x] = square
        if isinstance(previous, (Town, Artifact)) or isinstance(square, (Town, Artifact)):
            self.cache_special_squares()

    def cache_special_squares(self) -> None:
        """Rebuild the town/artifact cache from the live grid."""
        self._towns = []
        self._artifacts = []
        for coord in self.coordinates():
            square = self.squares[coord.y][coord.x]
            if isinstance(square, Town):
                self._towns.append(coord)
            elif isinstance(square, Artifact):
                self._artifacts.append(coord)

    # ------------------------------------------------------------------
    # Special squares and orientation
    # ------------------------------------------------------------------

    def towns(self) -> Iterator[Coordinate]:
        return iter(list(self._towns))

    def artifacts(self) -> Iterator[Coordinate]:
        return iter(list(self._artifacts))

    def orientation_for(self, player: int) -> Direction:
        if player >= len(self.orientations):
            raise IndexError(f"No orientation recorded for player {player}")
        return self.orientations[player]

    def reciprocal_coordinate(self, coord: Coordinate) -> Coordinate:
        """The coordinate a square moves to when the board is turned around."""
        return Coordinate(self.width - 1 - coord.x, self.height - 1 - coord.y)

    def flipped(self) -> Board:
        """The board turned 180 degrees, with every orientation reversed."""
        squares = [list(reversed(row)) for row in reversed(self.squares)]
        return Board(
            squares=squares,
            orientations=[o.opposite() for o in self.orientations],
        )

    def for_player(self, player: int) -> Board:
        """
        The board as seen by a player, who always attacks north.

        Only north/south orientations are mirrored; east and west
        boards are returned as-is.
        """
        if self.orientation_for(player) == Direction.SOUTH:
            return self.flipped()
        return self

    # ------------------------------------------------------------------
    # Ownership queries
    # ------------------------------------------------------------------

    def squares_owned_by(self, player: int) -> list[Coordinate]:
        """Coordinates of a player's tiles, row by row."""
        return [
            coord for coord in self.coordinates()
            if isinstance(self.squares[coord.y][coord.x], Occupied)
            and self.squares[coord.y][coord.x].player == player
        ]

    def is_root_for(self, coord: Coordinate, player: int) -> bool:
        """Whether a square lets the player build next to it."""
        square = self.get(coord)
        if isinstance(square, Occupied):
            return square.player == player
        if isinstance(square, Artifact):
            return square.player == player and not square.defeated
        return False

    def can_place(self, coord: Coordinate, player: int) -> bool:
        """Empty land touching one of the player's tiles or their artifact."""
        if not self.in_bounds(coord) or not isinstance(self.get(coord), Land):
            return False
        return any(self.is_root_for(n, player) for n in self.neighbors_4(coord))

    def playable_squares(self, player: int) -> list[Coordinate]:
        """Every square the player could place on, row by row."""
        return [coord for coord in self.coordinates() if self.can_place(coord, player)]

    def runs_through(self, coord: Coordinate) -> tuple[list[Coordinate], list[Coordinate]]:
        """
        The horizontal and vertical runs of one owner's tiles through coord.

        Each run is ordered left-to-right or top-to-bottom and includes
        coord itself. Both are empty if coord holds no tile.
        """
        square = self.get(coord)
        if not isinstance(square, Occupied):
            return [], []
        owner = square.player

        def same_owner(c: Coordinate) -> bool:
            if not self.in_bounds(c):
                return False
            sq = self.get(c)
            return isinstance(sq, Occupied) and sq.player == owner

        def run(dx: int, dy: int) -> list[Coordinate]:
            start = coord
            while same_owner(Coordinate(start.x - dx, start.y - dy)):
                start = Coordinate(start.x - dx, start.y - dy)
            cells = []
            current = start
            while same_owner(current):
                cells.append(current)
                current = Coordinate(current.x + dx, current.y + dy)
            return cells

        return run(1, 0), run(0, 1)

    def word_at(self, cells: list[Coordinate]) -> str:
        return "".join(self.get(c).tile for c in cells)

    def connected_to_artifact(self, player: int) -> set[Coordinate]:
        """
        Tiles of a player reachable from one of their artifacts through
        their own tiles.
        """
        seen: set[Coordinate] = set()
        queue = deque(
            coord for coord in self._artifacts
            if self.get(coord).player == player
        )
        while queue:
            current = queue.popleft()
            for n in self.neighbors_4(current):
                if n in seen:
                    continue
                square = self.get(n)
                if isinstance(square, Occupied) and square.player == player:
                    seen.add(n)
                    queue.append(n)
        return seen

    # ------------------------------------------------------------------
    # Fog of war
    # ------------------------------------------------------------------

    def fog_of_war(self, player: int, radius: int) -> Board:
        """
        A redacted copy of the board for one player.

        Squares further than radius from everything the player owns keep
        their terrain but are marked foggy; tiles out there become Fog.
        Opponent tiles in view have their validity hidden.
        """
        sources = [
            coord for coord in self.coordinates()
            if getattr(self.squares[coord.y][coord.x], "player", None) == player
        ]

        redacted: list[list[Square]] = []
        for y, row in enumerate(self.squares):
            new_row: list[Square] = []
            for x, square in enumerate(row):
                coord = Coordinate(x, y)
                visible = any(coord.distance(s) <= radius for s in sources)
                if visible:
                    if isinstance(square, Occupied) and square.player != player:
                        square = dc_replace(square, validity=SquareValidity.UNKNOWN)
                    new_row.append(square)
                elif isinstance(square, (Occupied, Fog)):
                    new_row.append(Fog())
                else:
                    new_row.append(dc_replace(square, foggy=True))
            redacted.append(new_row)

        return Board(squares=redacted, orientations=list(self.orientations))
