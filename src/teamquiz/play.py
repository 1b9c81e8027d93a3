#!/usr/bin/env python
"""Simulate a team quiz on the console with stub teams.

Usage:
    teamquiz quizzes/sample.json                    # 4 stub teams, synthetic time
    teamquiz quizzes/sample.json --teams 6 --seed 42
    teamquiz quizzes/sample.json --realtime --tick 0.5 --cooldown 2 --question 5
"""

import argparse
import logging
import random
import sys
import time
from typing import Optional

# Enable Windows console colors
if sys.platform == "win32":
    import colorama
    colorama.init()

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from teamquiz.ai import StubTeam, create_stub_teams
from teamquiz.engine import Game, GameClock, GamePhase, Pool, Quiz
from teamquiz.errors import LoadError
from teamquiz.models import QuizSettings
from teamquiz.output import ConsoleTransport

logger = logging.getLogger(__name__)

COMMUNITY = "console"
CHANNEL = "main"

# Synthetic runs stop after this many ticks even if the quiz has not ended
MAX_SYNTHETIC_TICKS = 1_000_000


def build_settings(args: argparse.Namespace) -> QuizSettings:
    """Build settings from the timing flags that were given."""
    overrides = {
        name: getattr(args, name)
        for name in ("cooldown", "question", "vote", "wager", "results")
        if getattr(args, name) is not None
    }
    return QuizSettings(**overrides)


def play_turns(game: Game, quiz: Quiz, stubs: list[StubTeam]) -> None:
    """Let every stub act on the current phase."""
    with game.lock:
        if game.phase != GamePhase.QUIZ:
            return
        phase = quiz.phase
        number = quiz.question_number
        question = quiz.current_question
    for stub in stubs:
        stub.act(game, phase, number, question, quiz.settings)


def run_synthetic(pool: Pool, game: Game, quiz: Quiz, stubs: list[StubTeam], tick: float) -> None:
    """Advance time in fixed steps without sleeping."""
    for _ in range(MAX_SYNTHETIC_TICKS):
        if game.phase != GamePhase.QUIZ:
            return
        play_turns(game, quiz, stubs)
        pool.tick_all(tick)
    logger.warning("Quiz did not finish after %d ticks", MAX_SYNTHETIC_TICKS)


def run_realtime(pool: Pool, game: Game, quiz: Quiz, stubs: list[StubTeam], tick: float) -> None:
    """Drive the pool from a background clock and poll the stubs."""
    clock = GameClock(pool, interval=tick)
    clock.start()
    try:
        while game.phase == GamePhase.QUIZ:
            play_turns(game, quiz, stubs)
            time.sleep(tick / 2)
    finally:
        clock.stop()


def print_scores(console: Console, game: Game) -> None:
    table = Table(title="Final scores")
    table.add_column("#", justify="right")
    table.add_column("Team")
    table.add_column("Score", justify="right")
    for rank, team in enumerate(game.get_teams(), start=1):
        table.add_row(str(rank), team.display_name, str(team.score))
    console.print(table)


def run(args: argparse.Namespace, console: Optional[Console] = None) -> int:
    """Run one simulated quiz. Returns a process exit code."""
    console = console or Console()
    settings = build_settings(args)
    pool = Pool(ConsoleTransport(console), settings)
    game = pool.get_or_create(COMMUNITY, CHANNEL)

    stubs = create_stub_teams(args.teams, accuracy=args.accuracy, seed=args.seed)
    for stub in stubs:
        stub.join(game)

    try:
        quiz = game.begin(args.quiz)
    except LoadError as e:
        console.print(f"[red]Error:[/red] {e}", markup=True, highlight=False)
        return 1

    console.print(Panel(f"Quiz: {args.quiz}\nTeams: {args.teams}  Seed: {args.seed}", title="teamquiz"))

    if args.realtime:
        run_realtime(pool, game, quiz, stubs, args.tick)
    else:
        run_synthetic(pool, game, quiz, stubs, args.tick)

    print_scores(console, game)
    return 0


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="teamquiz - simulate a team trivia quiz",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("quiz", help="Path to a quiz definition (JSON)")
    parser.add_argument("--teams", type=int, default=4, help="Number of stub teams (default: 4)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible runs")
    parser.add_argument(
        "--accuracy",
        type=float,
        default=0.5,
        help="Probability that a stub team answers correctly (default: 0.5)",
    )
    parser.add_argument(
        "--tick",
        type=float,
        default=1.0,
        help="Seconds per tick (default: 1.0)",
    )
    parser.add_argument(
        "--realtime",
        action="store_true",
        help="Run on the wall clock instead of synthetic time",
    )
    for name in ("cooldown", "question", "vote", "wager", "results"):
        parser.add_argument(
            f"--{name}",
            type=float,
            default=None,
            metavar="SECONDS",
            help=f"Override the {name} phase duration",
        )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(name)s: %(message)s",
    )

    if args.teams < 1:
        print("Error: --teams must be a positive integer")
        return 1
    if args.tick <= 0:
        print("Error: --tick must be positive")
        return 1
    if not 0.0 <= args.accuracy <= 1.0:
        print("Error: --accuracy must be between 0 and 1")
        return 1

    if args.seed is None:
        args.seed = random.randint(1, 1000000)

    return run(args)


if __name__ == "__main__":
    exit(main())
