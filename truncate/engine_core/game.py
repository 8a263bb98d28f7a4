"""
Game - The turn-based state machine.

The game is the single point of state mutation. All moves go through
play_turn(), which:
1. Validates the move (raising a MoveError before touching anything)
2. Applies it to the board and the mover's hand
3. Resolves any battles it triggers, in order
4. Checks for a winner, then hands the turn to the next player

Phases: SETUP (players being added) -> IN_PROGRESS -> OVER.
"""

from __future__ import annotations
import logging
import random
from copy import deepcopy
from dataclasses import replace as dc_replace
from typing import Callable

from .board import Artifact, Board, Coordinate, Occupied, SquareValidity
from .errors import (
    GameNotInProgressError,
    GameSetupError,
    InvalidPlacementError,
    InvalidSwapError,
    MoveError,
    NotYourTurnError,
    TileNotInHandError,
)
from .judge import INSTANT_WIN, Judge, WordDict
from .moves import Move, Place, Swap
from .reporting import (
    AttackerWins,
    BattleChange,
    BoardChange,
    BoardChangeKind,
    Change,
    HandChange,
)
from .rules import BoardOrientation, GameRules
from .state import GamePhase, Player, TileBag

log = logging.getLogger("truncate.game")

# A word on the board and the squares it occupies
PlacedWord = tuple[str, list[Coordinate]]


class Game:
    """
    Owns the board, the players and their hands.

    Usage:
        game = Game(seed=7)
        game.add_player("Ada")
        game.add_player("Bo")
        game.start()
        winner = game.play_turn(Place(0, "A", Coordinate(4, 7)), words, words)
    """

    def __init__(
        self,
        width: int = 9,
        height: int = 9,
        seed: int | None = None,
        rules: GameRules | None = None,
        judge: Judge | None = None,
        board: Board | None = None,
    ):
        self.board = board if board is not None else Board.default(width, height)
        self.rules = rules or GameRules.generation(2)
        self.judge = judge or Judge()
        self.seed = seed
        self.rng = random.Random(seed)
        self.bag = TileBag()

        self.players: list[Player] = []
        self.phase = GamePhase.SETUP
        self.next_player: int | None = None
        self.turn_count = 0
        self.winner: int | None = None

        self.recent_changes: list[Change] = []
        self.battle_history: list[BattleChange] = []

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def add_player(self, name: str) -> int:
        """Add a player and return their index."""
        if self.phase != GamePhase.SETUP:
            raise GameSetupError("Players can only be added before the game starts")
        index = len(self.players)
        self.players.append(Player(name=name, index=index))
        return index

    def start(self, first_player: int = 0) -> None:
        """Freeze the player list, deal hands and hand the turn to the first mover."""
        if self.phase != GamePhase.SETUP:
            raise GameSetupError("The game has already started")
        if len(self.players) < 2:
            raise GameSetupError("At least two players are needed")
        if len(self.board.orientations) < len(self.players):
            raise GameSetupError(
                f"The board has orientations for {len(self.board.orientations)} "
                f"players, not {len(self.players)}"
            )
        if not 0 <= first_player < len(self.players):
            raise GameSetupError(f"No player {first_player}")

        for player in self.players:
            player.hand = self.bag.draw_hand(self.rng, self.rules.hand_size)

        self.board.cache_special_squares()
        self.phase = GamePhase.IN_PROGRESS
        self.next_player = first_player
        log.debug("Game started with %s", ", ".join(p.name for p in self.players))

    # ------------------------------------------------------------------
    # Turns
    # ------------------------------------------------------------------

    def play_turn(
        self,
        move: Move,
        attacker_dictionary: WordDict | None = None,
        defender_dictionary: WordDict | None = None,
        rng: random.Random | None = None,
    ) -> int | None:
        """
        Execute one move and return the winner, if the move won the game.

        Raises a MoveError, leaving all state unchanged, if the move is
        illegal. Lost battles and invalid words are not errors.
        """
        self._validate(move)

        rng = rng if rng is not None else self.rng
        self.recent_changes = []
        self.players[move.player].turn_starts.append(self.turn_count)

        handler = self._get_handler(move)
        affected = handler(move, rng)

        self._resolve_battles(move.player, affected, attacker_dictionary, defender_dictionary)
        self._mark_validity(move.player, affected, attacker_dictionary)
        self.turn_count += 1

        winner = self._find_winner(move.player)
        if winner is not None:
            self.winner = winner
            self.phase = GamePhase.OVER
            self.next_player = None
            log.debug("Player %d wins on turn %d", winner, self.turn_count)
            return winner

        self.next_player = (move.player + 1) % len(self.players)
        return None

    def _validate(self, move: Move) -> None:
        """Raise the MoveError describing why a move is illegal, if it is."""
        if self.phase != GamePhase.IN_PROGRESS:
            raise GameNotInProgressError(f"The game is {self.phase.value}")

        if move.player != self.next_player:
            raise NotYourTurnError(
                f"It is player {self.next_player}'s turn, not player {move.player}'s"
            )

        if isinstance(move, Place):
            if move.tile not in self.players[move.player].hand:
                raise TileNotInHandError(
                    f"{move.tile} is not in player {move.player}'s hand"
                )
            square = self.board.get(move.position)
            if not self.board.can_place(move.position, move.player):
                raise InvalidPlacementError(
                    f"Cannot place on {move.position} ({type(square).__name__}); "
                    "tiles must go on empty land next to your own tiles or artifact"
                )
            return

        if isinstance(move, Swap):
            first, second = move.positions
            if first == second:
                raise InvalidSwapError("A swap needs two different squares")
            for position in move.positions:
                square = self.board.get(position)
                if not isinstance(square, Occupied) or square.player != move.player:
                    raise InvalidSwapError(f"{position} does not hold one of your tiles")
            return

        raise MoveError(f"Unknown move: {move!r}")

    def _get_handler(self, move: Move) -> Callable[[Move, random.Random], list[Coordinate]]:
        handlers = {
            Place: self._handle_place,
            Swap: self._handle_swap,
        }
        return handlers[type(move)]

    def _handle_place(self, move: Place, rng: random.Random) -> list[Coordinate]:
        hand = self.players[move.player].hand
        hand.remove(move.tile)
        drawn = self.bag.draw(rng)
        hand.add(drawn)

        self.board.set(move.position, move.player, move.tile)
        self.recent_changes.append(
            BoardChange(BoardChangeKind.ADDED, move.position, self.board.get(move.position))
        )
        self.recent_changes.append(
            HandChange(player=move.player, removed=[move.tile], added=[drawn])
        )
        return [move.position]

    def _handle_swap(self, move: Swap, rng: random.Random) -> list[Coordinate]:
        first, second = move.positions
        first_tile = self.board.get(first).tile
        second_tile = self.board.get(second).tile

        self.board.set(first, move.player, second_tile)
        self.board.set(second, move.player, first_tile)
        for position in move.positions:
            self.recent_changes.append(
                BoardChange(BoardChangeKind.SWAPPED, position, self.board.get(position))
            )
        return [first, second]

    # ------------------------------------------------------------------
    # Battles
    # ------------------------------------------------------------------

    def _resolve_battles(
        self,
        player: int,
        affected: list[Coordinate],
        attacker_dictionary: WordDict | None,
        defender_dictionary: WordDict | None,
    ) -> None:
        fought: set[tuple[tuple[Coordinate, ...], ...]] = set()

        for coord in affected:
            attackers = self.attacking_words(coord)
            defenders = self.defending_words(coord, player)
            if not attackers or not defenders:
                continue

            captured = [
                cells[0] for word, cells in defenders if word == INSTANT_WIN
            ]
            if captured:
                attackers = [(word + INSTANT_WIN, cells) for word, cells in attackers]

            key = tuple(tuple(cells) for _, cells in attackers + defenders)
            if key in fought:
                continue
            fought.add(key)

            report = self.judge.battle(
                [word for word, _ in attackers],
                [word for word, _ in defenders],
                self.rules.battle_rules,
                attacker_dictionary,
                defender_dictionary,
            )
            if report is None:
                continue

            report.battle_number = len(self.battle_history)
            change = BattleChange(report=report, turn=self.turn_count)
            self.recent_changes.append(change)
            self.battle_history.append(change)
            log.debug("Turn %d battle: %s", self.turn_count, report)

            if not isinstance(report.outcome, AttackerWins):
                continue

            for index in report.outcome.defeated:
                _, cells = defenders[index]
                for cell in cells:
                    if isinstance(self.board.get(cell), Occupied):
                        self.board.clear(cell)
                        self.recent_changes.append(
                            BoardChange(BoardChangeKind.REMOVED, cell, self.board.get(cell))
                        )

            for artifact_coord in captured:
                artifact = self.board.get(artifact_coord)
                self.board.replace(artifact_coord, dc_replace(artifact, defeated=True))
                self.recent_changes.append(
                    BoardChange(
                        BoardChangeKind.DEFEATED, artifact_coord, self.board.get(artifact_coord)
                    )
                )

            if self.rules.truncation:
                self._truncate(player)

    def attacking_words(self, coord: Coordinate) -> list[PlacedWord]:
        """
        The words through a tile: its horizontal and vertical runs,
        or the lone letter if it is part of neither.
        """
        if not isinstance(self.board.get(coord), Occupied):
            return []
        horizontal, vertical = self.board.runs_through(coord)
        runs = [run for run in (horizontal, vertical) if len(run) > 1] or [horizontal]
        return [(self.board.word_at(run), run) for run in runs]

    def defending_words(self, coord: Coordinate, player: int) -> list[PlacedWord]:
        """
        Opposing words touching a square, deduplicated.

        An opponent's artifact next to the square is listed as the
        instant-win marker.
        """
        words: list[PlacedWord] = []
        seen: set[tuple[Coordinate, ...]] = set()

        for neighbor in self.board.neighbors_4(coord):
            square = self.board.get(neighbor)
            if isinstance(square, Artifact):
                if square.player != player and not square.defeated:
                    words.append((INSTANT_WIN, [neighbor]))
                continue
            if not isinstance(square, Occupied) or square.player == player:
                continue
            for word, cells in self.attacking_words(neighbor):
                if tuple(cells) in seen:
                    continue
                seen.add(tuple(cells))
                words.append((word, cells))

        return words

    def _truncate(self, attacker: int) -> None:
        """Remove opponent tiles no longer connected to their artifact."""
        for player in self.players:
            if player.index == attacker:
                continue
            has_artifact = any(
                self.board.get(coord).player == player.index
                for coord in self.board.artifacts()
            )
            if not has_artifact:
                continue
            connected = self.board.connected_to_artifact(player.index)
            for coord in self.board.squares_owned_by(player.index):
                if coord not in connected:
                    self.board.clear(coord)
                    self.recent_changes.append(
                        BoardChange(BoardChangeKind.TRUNCATED, coord, self.board.get(coord))
                    )

    def _mark_validity(
        self,
        player: int,
        affected: list[Coordinate],
        dictionary: WordDict | None,
    ) -> None:
        """Record on the mover's tiles whether their words are valid."""
        verdicts: dict[Coordinate, set[bool]] = {}
        for coord in affected:
            square = self.board.get(coord)
            if not isinstance(square, Occupied) or square.player != player:
                continue
            for word, cells in self.attacking_words(coord):
                is_valid = self.judge.valid(word, dictionary) is not None
                for cell in cells:
                    verdicts.setdefault(cell, set()).add(is_valid)

        for cell, results in verdicts.items():
            if len(results) > 1:
                validity = SquareValidity.PARTIAL
            elif True in results:
                validity = SquareValidity.VALID
            else:
                validity = SquareValidity.INVALID
            self.board.replace(cell, dc_replace(self.board.get(cell), validity=validity))

    # ------------------------------------------------------------------
    # Victory
    # ------------------------------------------------------------------

    def _find_winner(self, mover: int) -> int | None:
        """A captured artifact wins for the mover; otherwise a breached town wins."""
        for coord in self.board.artifacts():
            artifact = self.board.get(coord)
            if artifact.defeated and artifact.player != mover:
                return mover

        winner = Judge.winner(self.board)
        if winner is None:
            return None

        for town_coord in self.board.towns():
            town = self.board.get(town_coord)
            if town.player == winner:
                continue
            breached = any(
                isinstance(self.board.get(n), Occupied) and self.board.get(n).player == winner
                for n in self.board.neighbors_4(town_coord)
            )
            if breached:
                self.board.replace(town_coord, dc_replace(town, defeated=True))
                self.recent_changes.append(
                    BoardChange(BoardChangeKind.DEFEATED, town_coord, self.board.get(town_coord))
                )
                break
        return winner

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def current_player(self) -> Player | None:
        if self.next_player is None:
            return None
        return self.players[self.next_player]

    def recent_battles(self) -> list[BattleChange]:
        """Battles still visible under the rules' battle delay."""
        oldest = self.turn_count - self.rules.battle_delay - 1
        return [change for change in self.battle_history if change.turn >= oldest]

    def board_for(self, player: int) -> Board:
        """The board as the rules present it to one player."""
        if self.rules.board_orientation == BoardOrientation.FACE_OPPONENT:
            return self.board.for_player(player)
        return self.board

    def clone(self) -> Game:
        """An independent copy. The judge is shared; it is never mutated by play."""
        return deepcopy(self, {id(self.judge): self.judge})
