"""
tilemerge CLI - Command-line interface for the engine.

Usage:
    tilemerge play [--size N] [--seed S]        Play in the terminal (w/a/s/d)
    tilemerge simulate [--games G] [--policy P] Play games with a move policy
    tilemerge serve [--host H] [--port P]       Run the API server
"""

import argparse
import sys

from .bots import POLICIES
from .engine_core import GRID_SIZE, Direction, UnsupportedGridSizeError, format_grid, max_tile

KEY_MAPPING = {
    "w": Direction.UP,
    "a": Direction.LEFT,
    "s": Direction.DOWN,
    "d": Direction.RIGHT,
}


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="tilemerge - Tile-Merging Puzzle Engine",
        prog="tilemerge",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    play_parser.add_argument("--size", type=int, default=GRID_SIZE, help="Grid size")
    play_parser.add_argument("--seed", type=int, default=None, help="Seed for tile spawns")
    play_parser.add_argument("--name", default="Player", help="Player name")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Play games with a move policy")
    simulate_parser.add_argument("--games", type=int, default=10, help="Number of games")
    simulate_parser.add_argument("--size", type=int, default=GRID_SIZE, help="Grid size")
    simulate_parser.add_argument("--seed", type=int, default=None, help="Base seed")
    simulate_parser.add_argument(
        "--policy", choices=sorted(POLICIES), default="random", help="Move policy"
    )

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port")
    serve_parser.add_argument("--reload", action="store_true", help="Auto-reload on changes")

    args = parser.parse_args(argv)

    if args.command == "play":
        cmd_play(args)
    elif args.command == "simulate":
        cmd_simulate(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_play(args):
    """Play interactively."""
    from .session import SessionManager, GameLoop

    manager = SessionManager(grid_size=args.size)
    try:
        session = manager.create_session(player_name=args.name, seed=args.seed)
    except UnsupportedGridSizeError as e:
        print(f"Error: {e}")
        sys.exit(1)
    loop = GameLoop(session, manager.score_book)

    print("Commands: w (up), a (left), s (down), d (right), n (new game), q (quit)")
    print(format_grid(session.grid, session.grid_size))

    while True:
        try:
            key = input("\nmove> ").strip().lower()
        except EOFError:
            break

        if key == "q":
            break
        if key == "n":
            loop.restart()
            print(format_grid(session.grid, session.grid_size))
            continue
        if key not in KEY_MAPPING:
            print("Invalid command! Use w/a/s/d to move, n for a new game, q to quit.")
            continue

        result = loop.play(KEY_MAPPING[key])
        if not result.success:
            for error in result.errors:
                print(error)
            continue
        if not result.moved:
            print("Nothing moved. Try another direction.")
            continue

        print(format_grid(session.grid, session.grid_size))
        print(f"Score: {result.score} (+{result.points})  Best: {result.best_score}")
        if result.game_over:
            print(f"\nGame Over! Final Score: {result.final_score}")
            print("Press n for a new game or q to quit.")

    print(f"Best score for {session.player_name}: {manager.score_book.best(session.player_name)}")


def cmd_simulate(args):
    """Play several games with a move policy and print a summary."""
    from .session import SessionManager, GameLoop

    manager = SessionManager(grid_size=args.size)
    policy = POLICIES[args.policy].create(seed=args.seed)

    for game in range(args.games):
        seed = None if args.seed is None else args.seed + game
        try:
            session = manager.create_session(player_name=policy.get_name(), seed=seed)
        except UnsupportedGridSizeError as e:
            print(f"Error: {e}")
            sys.exit(1)
        loop = GameLoop(session, manager.score_book)
        loop.play_policy(policy)
        print(
            f"Game {game + 1}: score={session.score} moves={session.move_count} "
            f"max_tile={max_tile(session.grid)}"
        )
        manager.end_session(session.session_id)

    stats = manager.score_book.stats(policy.get_name())
    print(
        f"\n{stats.games_played} games, best={stats.best_score}, "
        f"average={stats.average_score}"
    )


def cmd_serve(args):
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run("tilemerge.api.app:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
