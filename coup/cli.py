"""
Coup CLI - Command-line interface for the engine.

Usage:
    coup simulate [-n GAMES] [--players N] [--seed S]   Bot-vs-bot statistics
    coup demo [--players N] [--seed S]                  Narrate one bot game
    coup serve [--host H] [--port P]                    Run the HTTP API
"""

import argparse
import json
import logging
import sys

from .config import get_settings

PLAYER_NAMES = ["Alice", "Bob", "Carol", "Dave", "Erin", "Frank"]


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Coup - Bluffing card game engine",
        prog="coup",
    )
    parser.add_argument("--log-level", help="Override COUP_LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Play many bot games and report results")
    simulate_parser.add_argument("-n", "--games", type=int, default=100, help="Number of games")
    simulate_parser.add_argument("--players", type=int, default=4, help="Players per game (2-6)")
    simulate_parser.add_argument("--seed", type=int, default=0, help="Seed of the first game")
    simulate_parser.add_argument("--max-turns", type=int, help="Turn limit per game")
    simulate_parser.add_argument("--json", action="store_true", help="Print the report as JSON")

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Narrate a single bot game")
    demo_parser.add_argument("--players", type=int, default=4, help="Players (2-6)")
    demo_parser.add_argument("--seed", type=int, help="Seed for the deal")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.add_argument("--reload", action="store_true")

    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=(args.log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "simulate":
        cmd_simulate(args, settings)
    elif args.command == "demo":
        cmd_demo(args, settings)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def _names(count: int) -> list[str]:
    if not 2 <= count <= len(PLAYER_NAMES):
        print(f"Error: --players must be between 2 and {len(PLAYER_NAMES)}")
        sys.exit(1)
    return PLAYER_NAMES[:count]


def cmd_simulate(args, settings):
    """Play bot games and print win rates."""
    from .simulation import run_simulations

    names = _names(args.players)
    max_turns = args.max_turns or settings.max_simulation_turns
    report = run_simulations(args.games, names, seed=args.seed, max_turns=max_turns)

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
        return

    print(f"Games played: {report.games}")
    print(f"Average turns: {report.average_turns:.1f}")
    print("\nWins:")
    for name, wins in sorted(report.wins.items(), key=lambda item: -item[1]):
        rate = wins / report.games if report.games else 0.0
        print(f"  {name:<8} {wins:>5}  ({rate:.0%})")
    if report.timeouts:
        print(f"\nTimed out: {report.timeouts}")
    if report.errors:
        print("\nErrors:")
        for error in report.errors:
            print(f"  - {error}")
        sys.exit(1)


def cmd_demo(args, settings):
    """Narrate a single game between bots."""
    from .simulation import simulate_game

    result = simulate_game(_names(args.players), seed=args.seed, max_turns=settings.max_simulation_turns)

    current_turn = None
    for entry in result.final_state.log:
        if entry.turn != current_turn:
            current_turn = entry.turn
            print(f"\n-- Turn {current_turn} --")
        print(f"  [{entry.type.value}] {entry.message}")

    print()
    if result.error:
        print(f"Error: {result.error}")
        sys.exit(1)
    if result.timed_out:
        print(f"No winner after {result.turns} turns")
    else:
        print(f"Winner: {result.winner_name} after {result.turns} turns (seed {result.final_state.seed})")


def cmd_serve(args):
    """Run the HTTP API with uvicorn."""
    try:
        import uvicorn
    except ImportError:
        print("uvicorn not installed. Install with: pip install uvicorn")
        sys.exit(1)

    uvicorn.run("coup.api.app:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
