"""Command-line interface for the terminal Game of Life."""

import argparse
import os
import signal
import sys
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional

import numpy as np

from ..core.grid import Dimensions
from ..core.game import DEFAULT_LIVE_PROBABILITY, GameOfLife
from .terminal import RENDER_MODES, RenderError, TerminalRenderer


FIXED_DIMENSIONS = Dimensions(rows=25, cols=80)
SIZE_MODES = ("detected", "fixed")
TICK_INTERVAL = 0.1


class StartupError(Exception):
    """The simulation could not start (e.g. no terminal size available)."""


class LoopState(Enum):
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass
class SimulationConfig:
    """Configuration for a terminal simulation run."""

    live_probability: float = DEFAULT_LIVE_PROBABILITY
    size_mode: str = "detected"
    render_mode: str = "diff"
    color: bool = False
    border: bool = False
    interval: float = TICK_INTERVAL
    startup_delay: float = 2.0
    seed: Optional[int] = None


def detect_dimensions(size_mode: str = "detected") -> Dimensions:
    """Resolve the grid size for a run.

    Args:
        size_mode: "fixed" for the 80x25 constant, "detected" to ask the terminal

    Returns:
        Grid dimensions

    Raises:
        StartupError: If the terminal size cannot be obtained
    """
    if size_mode == "fixed":
        return FIXED_DIMENSIONS

    try:
        size = os.get_terminal_size()
    except OSError as e:
        raise StartupError(f"Failed to get terminal size: {e}") from e

    if size.lines <= 0 or size.columns <= 0:
        raise StartupError(f"Failed to get terminal size: got {size.columns}x{size.lines}")

    return Dimensions(rows=size.lines, cols=size.columns)


def install_interrupt_handler(stop_event: threading.Event) -> Dict[int, object]:
    """Route SIGINT (and SIGTERM where available) to the stop flag.

    The handler only sets the event; the tick loop notices it on its next poll.

    Returns:
        Previously installed handlers, keyed by signal number
    """

    def _handle_interrupt(signum, frame):
        stop_event.set()

    signals = [signal.SIGINT]
    if hasattr(signal, "SIGTERM"):
        signals.append(signal.SIGTERM)

    previous = {}
    for signum in signals:
        previous[signum] = signal.signal(signum, _handle_interrupt)
    return previous


def restore_interrupt_handlers(previous: Dict[int, object]) -> None:
    """Reinstall handlers returned by install_interrupt_handler."""
    for signum, handler in previous.items():
        signal.signal(signum, handler)


class TerminalGameOfLife:
    """Drives the render/advance/sleep tick loop on a terminal."""

    def __init__(
        self,
        config: SimulationConfig,
        renderer: Optional[TerminalRenderer] = None,
        stop_event: Optional[threading.Event] = None,
        sleep: Callable[[float], None] = time.sleep,
        dimensions: Optional[Dimensions] = None,
    ) -> None:
        """Set up the game and renderer.

        Args:
            config: Simulation configuration
            renderer: Renderer to draw with (an ANSI renderer on stdout if omitted)
            stop_event: Flag that ends the loop once set
            sleep: Delay function used between ticks
            dimensions: Grid size (resolved from config.size_mode if omitted)

        Raises:
            StartupError: If the grid size cannot be resolved
        """
        self.config = config
        self.renderer = renderer or TerminalRenderer(render_mode=config.render_mode, color=config.color)
        self.stop_event = stop_event or threading.Event()
        self._sleep = sleep
        self.state = LoopState.STOPPED

        if dimensions is None:
            dimensions = detect_dimensions(config.size_mode)

        rng = np.random.default_rng(config.seed)
        self.game = GameOfLife.random(dimensions, config.live_probability, border=config.border, rng=rng)
        self._last_frame = None

    def start(self) -> None:
        """Paint the first frame in full and enter the running state."""
        self.renderer.clear()
        self.renderer.hide_cursor()
        self.renderer.paint_full(self.game.grid)
        self._last_frame = self.game.grid
        self.state = LoopState.RUNNING

    def tick(self) -> None:
        """Run one tick: render, advance, sleep."""
        self.renderer.paint(self.game.grid, self._last_frame)
        self._last_frame = self.game.grid
        self.game.step()
        self._sleep(self.config.interval)

    def stop(self) -> None:
        """Clear the screen and enter the terminal stopped state."""
        self.renderer.clear()
        self.renderer.show_cursor()
        self.state = LoopState.STOPPED
        print("Exiting...")

    def run(self, max_ticks: Optional[int] = None) -> int:
        """Run until the stop flag is set.

        Render errors propagate immediately without clearing the screen.

        Args:
            max_ticks: Stop after this many ticks (unbounded if None)

        Returns:
            Number of ticks completed
        """
        self.start()
        ticks = 0
        try:
            while not self.stop_event.is_set():
                if max_ticks is not None and ticks >= max_ticks:
                    break
                self.tick()
                ticks += 1
        except KeyboardInterrupt:
            self.stop_event.set()

        self.stop()
        return ticks


def parse_probability(value: Optional[str]) -> float:
    """Turn the optional probability argument into a number.

    Missing or unparsable values fall back to the default with a printed notice.
    Out-of-range numbers are accepted as-is.

    Args:
        value: Raw command-line value, or None if not given

    Returns:
        Initial live-cell probability
    """
    if value is None:
        print(f"Default initial grid probability: {DEFAULT_LIVE_PROBABILITY}")
        print("To change the initial grid probability, pass it as an argument to the program.")
        print("Example: lifeterm 0.5")
        return DEFAULT_LIVE_PROBABILITY

    try:
        probability = float(value)
    except ValueError:
        print(f"Invalid grid probability '{value}', using default {DEFAULT_LIVE_PROBABILITY}")
        print("Example: lifeterm 0.5")
        return DEFAULT_LIVE_PROBABILITY

    print(f"Initial grid probability: {probability}")
    return probability


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Run Conway's Game of Life in the terminal until interrupted (Ctrl-C)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Fill the terminal with a 20% random population
  lifeterm

  # Denser start, colored cells
  lifeterm 0.4 --color

  # Fixed 80x25 board surrounded by a live wall
  lifeterm --size fixed --border

  # Repaint the whole screen every tick
  lifeterm --render full
        """,
    )

    parser.add_argument(
        "probability",
        nargs="?",
        default=None,
        help=f"Initial live cell probability (default: {DEFAULT_LIVE_PROBABILITY})",
    )

    parser.add_argument(
        "-s",
        "--size",
        choices=SIZE_MODES,
        default="detected",
        help="Use the terminal size or a fixed 80x25 board (default: detected)",
    )

    parser.add_argument(
        "-r",
        "--render",
        choices=RENDER_MODES,
        default="diff",
        help="Redraw changed cells only or the full screen each tick (default: diff)",
    )

    parser.add_argument(
        "-c",
        "--color",
        action="store_true",
        help="Color live and dead cells",
    )

    parser.add_argument(
        "-b",
        "--border",
        action="store_true",
        help="Surround the board with a fixed wall of live cells",
    )

    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for a reproducible starting grid",
    )

    return parser


def config_from_args(args: argparse.Namespace) -> SimulationConfig:
    return SimulationConfig(
        live_probability=parse_probability(args.probability),
        size_mode=args.size,
        render_mode=args.render,
        color=args.color,
        border=args.border,
        seed=args.seed,
    )


def validate_config(config: SimulationConfig) -> bool:
    """Validate a simulation configuration.

    Returns:
        True if the configuration is usable
    """
    errors: List[str] = []

    if config.size_mode not in SIZE_MODES:
        errors.append(f"Size mode must be one of: {', '.join(SIZE_MODES)}")

    if config.render_mode not in RENDER_MODES:
        errors.append(f"Render mode must be one of: {', '.join(RENDER_MODES)}")

    if config.interval < 0:
        errors.append("Tick interval must be non-negative")

    if config.startup_delay < 0:
        errors.append("Startup delay must be non-negative")

    if errors:
        print("Error: Invalid arguments:")
        for error in errors:
            print(f"  - {error}")
        return False

    return True


def main() -> int:
    """Main entry point for CLI interface.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_parser()
    args = parser.parse_args()

    config = config_from_args(args)
    if not validate_config(config):
        return 1

    stop_event = threading.Event()

    try:
        app = TerminalGameOfLife(config, stop_event=stop_event)
    except StartupError as e:
        print(f"Error: {e}")
        return 1

    time.sleep(config.startup_delay)

    previous_handlers = install_interrupt_handler(stop_event)
    try:
        app.run()
    except RenderError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        restore_interrupt_handlers(previous_handlers)

    return 0


if __name__ == "__main__":
    sys.exit(main())
