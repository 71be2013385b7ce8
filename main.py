"""Main entry point for Tidecaster.

This module provides command-line options to run the game:
- Window mode (default): pygame window, one encounter tick per frame
- Server mode: FastAPI session API served by uvicorn
- Headless mode: scripted autoplay, faster than realtime, prints a report
"""

import argparse
import json
import logging

from backend.logging_config import configure_logging
from core.config.display import SEPARATOR_WIDTH
from core.qte.challenges import InputModality

logger = logging.getLogger(__name__)


def run_web_server() -> None:
    """Run the session API server."""
    import uvicorn

    from backend.main import app

    port = app.state.context.api_port
    logger.info("=" * SEPARATOR_WIDTH)
    logger.info("TIDECASTER - SESSION API")
    logger.info("=" * SEPARATOR_WIDTH)
    logger.info("API docs available at http://localhost:%d/docs", port)
    logger.info("Press Ctrl+C to stop the server")
    logger.info("=" * SEPARATOR_WIDTH)

    uvicorn.run(app, host="0.0.0.0", port=port)


def run_headless(duration: float, seed, modality: InputModality, reaction_ms: float, accuracy: float) -> dict:
    """Autoplay without a window and log the report.

    Args:
        duration: Simulated seconds of play
        seed: Optional random seed for deterministic behavior
        modality: Challenge type the scripted player answers
        reaction_ms: Scripted player's reaction time
        accuracy: Probability the scripted player answers correctly
    """
    from core.headless import run_headless as autoplay

    report = autoplay(
        duration_s=duration,
        seed=seed,
        reaction_ms=reaction_ms,
        accuracy=accuracy,
        modality=modality,
    )
    summary = report.to_dict()
    logger.info("=" * SEPARATOR_WIDTH)
    logger.info("HEADLESS RUN COMPLETE")
    logger.info("=" * SEPARATOR_WIDTH)
    for key, value in summary.items():
        logger.info("  %s: %s", key, value)
    return summary


def run_window(modality: InputModality, seed) -> None:
    """Open the pygame window."""
    from fishing_game import main as play

    play(modality=modality, seed=seed)


def main():
    """Parse command-line arguments and run the appropriate mode."""
    parser = argparse.ArgumentParser(
        description="Tidecaster fishing game",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Play in a window (default)
  python main.py

  # Practise tap-target challenges with the mouse
  python main.py --touch

  # Run the session API
  python main.py --server

  # Five simulated minutes of autoplay, reproducible
  python main.py --headless --duration 300 --seed 42
        """,
    )

    parser.add_argument("--server", action="store_true", help="Run the FastAPI session server")
    parser.add_argument(
        "--headless", action="store_true", help="Run scripted autoplay with no window and print a report"
    )
    parser.add_argument(
        "--touch", action="store_true", help="Use tap-target QTE challenges instead of key presses"
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Random seed for deterministic behavior (optional)"
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=120.0,
        help="Simulated seconds of play in headless mode (default: 120)",
    )
    parser.add_argument(
        "--reaction-ms",
        type=float,
        default=250.0,
        help="Scripted player's reaction time in headless mode (default: 250)",
    )
    parser.add_argument(
        "--accuracy",
        type=float,
        default=0.9,
        help="Scripted player's accuracy in headless mode (default: 0.9)",
    )
    parser.add_argument(
        "--export-stats",
        type=str,
        default=None,
        metavar="FILENAME",
        help="Write the headless report to a JSON file",
    )
    parser.add_argument("--log-level", type=str, default=None, help="Override FISHING_LOG_LEVEL")

    args = parser.parse_args()
    configure_logging(level=args.log_level, include_uvicorn=args.server)

    modality = InputModality.TOUCH if args.touch else InputModality.KEYBOARD

    if args.server:
        run_web_server()
    elif args.headless:
        summary = run_headless(args.duration, args.seed, modality, args.reaction_ms, args.accuracy)
        if args.export_stats:
            with open(args.export_stats, "w") as f:
                json.dump(summary, f, indent=2)
            logger.info("Report saved to: %s", args.export_stats)
    else:
        run_window(modality, args.seed)


if __name__ == "__main__":
    main()
