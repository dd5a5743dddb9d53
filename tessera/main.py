"""Tessera - Wave Function Collapse grid solver."""

import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from tqdm import tqdm

from . import __version__
from .config import TesseraConfig, load_config
from .logging_config import setup_logging
from .generation import GenerationController
from .generation.wfc import ContradictionPolicy, SolverState


def run_headless(config: TesseraConfig, console: Console) -> int:
    """Solve one generation without the TUI and print the result.

    Args:
        config: Session configuration
        console: Rich console to print to

    Returns:
        Exit code (0 when every cell resolved, 1 when stuck)
    """
    from .observe.tui.widgets import render_grid

    controller = GenerationController(
        config.width,
        config.height,
        seed=config.seed,
        policy=config.policy,
    )

    with tqdm(total=config.total_cells, desc="  Collapsing", unit="cells", leave=False) as pbar:
        last_progress = 0
        while True:
            state = controller.tick(steps=config.steps_per_tick)

            delta = controller.step_count - last_progress
            if delta > 0:
                pbar.update(delta)
                last_progress = controller.step_count

            if state in (SolverState.COMPLETE, SolverState.STUCK):
                break

    console.print(render_grid(controller.cells(), config.width, config.height))
    console.print()

    violations = controller.grid.violations(controller.rules)
    console.print(
        f"Steps: {controller.step_count}  "
        f"Resolved: {controller.grid.resolved_count}/{config.total_cells}  "
        f"Adjacency violations: {len(violations)}  "
        f"State: {state.name}"
    )
    return 0 if state == SolverState.COMPLETE else 1


async def run_tui_mode(config: TesseraConfig) -> int:
    """Run the TUI viewer.

    Args:
        config: Session configuration

    Returns:
        Exit code
    """
    from .observe.tui import run_tui

    controller = GenerationController(
        config.width,
        config.height,
        seed=config.seed,
        policy=config.policy,
    )
    await run_tui(
        controller,
        tick_interval=config.tick_interval,
        steps_per_tick=config.steps_per_tick,
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for Tessera."""
    # Load environment variables first
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Tessera - Wave Function Collapse grid solver",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tessera                         # Watch a 32x32 grid collapse (r resets)
  tessera --run --seed 7          # Solve once and print the grid
  tessera --width 16 --height 8   # Smaller grid
  tessera --strict --run          # Report contradictions instead of healing
        """,
    )
    parser.add_argument("--width", type=int, help="Grid width in cells (default: 32)")
    parser.add_argument("--height", type=int, help="Grid height in cells (default: 32)")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible runs")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Leave emptied domains empty instead of resetting them",
    )
    parser.add_argument(
        "--steps-per-tick",
        type=int,
        metavar="N",
        help="Solver steps per tick (default: 1)",
    )
    parser.add_argument(
        "--interval",
        type=float,
        metavar="SECONDS",
        help="Seconds between TUI ticks (default: 0.02)",
    )
    parser.add_argument("--data", help="Data directory for logs (default: data/)")
    parser.add_argument(
        "--run",
        action="store_true",
        help="Solve one generation headless and print it",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging to console",
    )

    args = parser.parse_args(argv)
    console = Console()

    try:
        config = load_config(
            width=args.width,
            height=args.height,
            seed=args.seed,
            policy=ContradictionPolicy.STRICT_FAIL if args.strict else None,
            steps_per_tick=args.steps_per_tick,
            tick_interval=args.interval,
            data_dir=args.data,
        )
    except ValidationError as e:
        console.print(f"Invalid configuration:\n{e}", markup=False)
        return 2

    # Setup logging
    console_level = logging.DEBUG if args.debug else logging.WARNING
    log_path = setup_logging(config.data_dir, console_level=console_level)

    if args.run:
        console.print(f"Tessera v{__version__}")
        console.print(f"Grid: {config.width}x{config.height}  Policy: {config.policy.value}")
        console.print(f"Log file: {log_path}")
        console.print()
        return run_headless(config, console)

    # Default: TUI mode
    return asyncio.run(run_tui_mode(config))


if __name__ == "__main__":
    sys.exit(main())
