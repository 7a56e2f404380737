import sys
import asyncio
import argparse
from typing import List, Optional, Sequence

from loguru import logger
from rich import print
from rich.markup import escape
from rich.panel import Panel

from autowin.logging.setup import setup_logging
from autowin.clients.base_client import ConfigurationError
from autowin.calculation.win_probability import compute_win_probability
from autowin.models.alliance import Alliance
from autowin.models.enums import AllianceColor
from autowin.models.results import WinProbabilityResult
from autowin.utils.misc_utils import parse_team


def _team(value: str) -> int:
    try:
        return parse_team(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Auto-period win probability from Statbotics EPA and TBA match data."
    )
    parser.add_argument(
        "--red", nargs=3, type=_team, required=True, metavar="TEAM", help="Red alliance"
    )
    parser.add_argument(
        "--blue", nargs=3, type=_team, required=True, metavar="TEAM", help="Blue alliance"
    )
    parser.add_argument(
        "--event", default=None, help="TBA event key for event-level variance (e.g. 2024casj)"
    )
    parser.add_argument(
        "--log-level", default=None, help="Override LOG_LEVEL for this run"
    )
    return parser


def render_result(result: WinProbabilityResult, progress: Sequence[str]) -> Panel:
    p_red, p_blue = (
        (result.probability_a, result.probability_b)
        if result.color_a is AllianceColor.RED
        else (result.probability_b, result.probability_a)
    )
    total_red, total_blue = (
        (result.total_a, result.total_b)
        if result.color_a is AllianceColor.RED
        else (result.total_b, result.total_a)
    )
    body = "\n".join(
        [
            f"[red]RED  {p_red:6.1%}[/red]   auto EPA {total_red:.2f}",
            f"[blue]BLUE {p_blue:6.1%}[/blue]   auto EPA {total_blue:.2f}",
            "",
            f"season {result.season}  |  diff sd {result.match_sd:.2f}  |  z {result.z_score:+.3f}",
            "",
            *(escape(line) for line in progress),
        ]
    )
    return Panel(body, title="Auto win probability", expand=False)


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    red = Alliance(color=AllianceColor.RED, teams=args.red)
    blue = Alliance(color=AllianceColor.BLUE, teams=args.blue)
    logger.info(f"Computing auto win probability: {red.teams} vs {blue.teams}")

    progress: List[str] = []
    try:
        result = await compute_win_probability(red, blue, args.event, progress.append)
    except ConfigurationError as e:
        logger.critical(f"Configuration error: {e} - Check TBA_AUTH_KEY!")
        return 1

    if result is None:
        print(Panel(escape("\n".join(progress)), title="Insufficient data", expand=False))
        print("[bold red]Insufficient data to compute probability.[/bold red]")
        return 1

    print(render_result(result, progress))
    return 0


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("Execution interrupted by user (KeyboardInterrupt).")
        sys.exit(0)
    except Exception as e:
        logger.exception(f"Unhandled exception in main execution: {e}")
        sys.exit(1)
