"""
Truncate CLI - Command-line interface for the engine.

Usage:
    truncate judge WORD... --against WORD...   Judge a battle
    truncate duel --seed N --turns N           Play an NPC-vs-NPC game
    truncate serve                             Run the REST API

Dictionaries come from --dict, or from TRUNCATE_DICT_PATH when that is set.
"""

import argparse
import logging
import os
import sys

log = logging.getLogger("truncate")

TRUNCATE_DICT_PATH = os.getenv("TRUNCATE_DICT_PATH", None)
TRUNCATE_SEARCH_DEPTH = os.getenv("TRUNCATE_SEARCH_DEPTH", None)
TRUNCATE_SEARCH_CAP = os.getenv("TRUNCATE_SEARCH_CAP", None)


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Truncate - word battle engine",
        prog="truncate",
    )
    parser.add_argument("--debug", action="store_true", help="Log battles and search details")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Judge command
    judge_parser = subparsers.add_parser("judge", help="Judge a battle between words")
    judge_parser.add_argument("attackers", nargs="+", metavar="WORD", help="Attacking words")
    judge_parser.add_argument(
        "--against", nargs="+", required=True, metavar="WORD", help="Defending words"
    )
    judge_parser.add_argument("--dict", dest="dict_path", help="Word list file")
    judge_parser.add_argument("--words", help="Comma-separated words to use as the dictionary")
    judge_parser.add_argument("--generation", type=int, default=2, help="Rules generation (0-2)")

    # Duel command
    duel_parser = subparsers.add_parser("duel", help="Play an NPC-vs-NPC game")
    duel_parser.add_argument("--seed", type=int, default=None, help="Game seed")
    duel_parser.add_argument("--turns", type=int, default=200, help="Maximum turns")
    duel_parser.add_argument("--depth", type=int, default=None, help="Search depth in plies")
    duel_parser.add_argument("--cap", type=int, default=None, help="Search node budget")
    duel_parser.add_argument("--personality", default="balanced", help="NPC personality")
    duel_parser.add_argument("--dict", dest="dict_path", help="Word list file")
    duel_parser.add_argument("--generation", type=int, default=2, help="Rules generation (0-2)")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.add_argument("--dict", dest="dict_path", help="Word list file")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if args.command == "judge":
        return cmd_judge(args)
    elif args.command == "duel":
        return cmd_duel(args)
    elif args.command == "serve":
        return cmd_serve(args)
    else:
        parser.print_help()
        return 1


def _load_dictionary(dict_path):
    from .dictionary import DictionaryFormatError, load_word_dict

    path = dict_path or TRUNCATE_DICT_PATH
    if not path:
        return None
    try:
        return load_word_dict(path)
    except FileNotFoundError:
        print(f"Error: File not found: {path}")
        sys.exit(1)
    except DictionaryFormatError as e:
        print(f"Error: {path}: {e}")
        sys.exit(1)


def cmd_judge(args):
    """Judge a battle and print the report."""
    from .engine_core import GameRules, Judge, WordData

    if args.words:
        word_dict = {w.strip().lower(): WordData() for w in args.words.split(",") if w.strip()}
    else:
        word_dict = _load_dictionary(args.dict_path)
    if word_dict is None:
        print("Error: no dictionary; pass --dict, --words or set TRUNCATE_DICT_PATH")
        return 1

    rules = GameRules.generation(args.generation)
    report = Judge().battle(args.attackers, args.against, rules.battle_rules, word_dict)

    for label, words in (("Attackers", report.attackers), ("Defenders", report.defenders)):
        print(f"{label}:")
        for word in words:
            verdict = {True: "valid", False: "invalid", None: "not judged"}[word.valid]
            print(f"  {word.original_word:<12} {word.word:<12} {verdict}")
    print(report.outcome)
    return 0


def cmd_duel(args):
    """Play an NPC-vs-NPC game, logging each turn."""
    from .engine_core import GameRules
    from .session import GameLoop, SessionManager

    word_dict = _load_dictionary(args.dict_path)
    depth = args.depth or (int(TRUNCATE_SEARCH_DEPTH) if TRUNCATE_SEARCH_DEPTH else None)
    cap = args.cap or (int(TRUNCATE_SEARCH_CAP) if TRUNCATE_SEARCH_CAP else None)

    manager = SessionManager(word_dict=word_dict, max_depth=depth, evaluation_cap=cap)
    session = manager.create_session(
        human_players=[],
        npc_players=2,
        personality=args.personality,
        seed=args.seed,
        rules=GameRules.generation(args.generation),
    )
    game = session.game
    loop = GameLoop(session)

    while game.winner is None and game.turn_count < args.turns:
        result = loop.play_out(max_turns=game.turn_count + 1)
        for move in result.moves:
            log.info("Turn %d: %s", game.turn_count, move)
        for report in result.battles:
            log.info("  Battle: %s", report)
        if result.learned_words:
            log.info("  Learned: %s", ", ".join(result.learned_words))
        log.debug("\n%s", game.board)

    print(game.board)
    if game.winner is None:
        print(f"No winner after {game.turn_count} turns")
        return 1
    print(f"{game.players[game.winner].name} wins on turn {game.turn_count}")
    return 0


def cmd_serve(args):
    """Run the REST API with uvicorn."""
    if args.dict_path:
        os.environ["TRUNCATE_DICT_PATH"] = args.dict_path

    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn not installed. Install with: pip install truncate-engine[api]")
        return 1

    uvicorn.run("truncate.api.app:app", host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
