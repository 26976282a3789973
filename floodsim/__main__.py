"""Headless flood rescue run.

Usage:
    python -m floodsim --lat 13.0827 --lon 80.2707 --agents 3 --density 12
    python -m floodsim --lat 13.0827 --lon 80.2707 --fast --snapshot map.png --plot timeline.png
"""

import argparse
import logging
import sys

from rich.logging import RichHandler
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from floodsim import config as defaults
from floodsim.config import SimulationConfig
from floodsim.errors import ConfigError
from floodsim.geo import GeoPoint
from floodsim.render import SnapshotMapSink
from floodsim.simulator import (
    CommandDispatcher,
    ConsoleGuidanceSink,
    ConsoleSummarySink,
    EventLog,
    EventRouter,
    FanOutReportSink,
    JsonLinesReportSink,
    ManualScheduler,
    MemoryReportSink,
    SimulationClock,
    ThreadScheduler,
    analyze_rescue_timeline,
    summary_panel,
)
from floodsim.simulator.sinks import CONSOLE
from floodsim.unit import Meter, Millisecond

logger = logging.getLogger("floodsim")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="floodsim", description="Flood rescue drone swarm simulation")
    parser.add_argument("--lat", type=float, help="flood center latitude (degrees)")
    parser.add_argument("--lon", type=float, help="flood center longitude (degrees)")
    parser.add_argument("--radius", type=float, default=float(defaults.FLOOD_RADIUS), help="flood radius (m)")
    parser.add_argument("--agents", type=int, default=defaults.AGENT_COUNT, help="number of drones")
    parser.add_argument("--density", type=int, default=defaults.DETECTION_DENSITY, help="victim count hint")
    parser.add_argument(
        "--trigger-range", type=float, default=float(defaults.TRIGGER_RANGE), help="rescue trigger range (m)"
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=defaults.TICK_INTERVAL.to(Millisecond),
        help="tick interval (ms)",
    )
    parser.add_argument("--seed", type=int, default=None, help="random seed")
    parser.add_argument("--max-ticks", type=int, default=10_000, help="give up after this many ticks")
    parser.add_argument("--exclusive", action="store_true", help="never let two drones chase the same victim")
    parser.add_argument("--fast", action="store_true", help="tick back to back instead of in real time")
    parser.add_argument("--no-guidance", action="store_true", help="do not print guidance messages")
    parser.add_argument("--events-out", help="append rescue events as JSON lines to this file")
    parser.add_argument("--snapshot", help="save a map image of the final state")
    parser.add_argument("--plot", help="save a rescue timeline plot")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="-v for events, -vv for debug")
    return parser


def setup_logging(verbosity: int) -> None:
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbosity, logging.DEBUG)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=CONSOLE, rich_tracebacks=True, show_path=False)],
    )


def config_from_args(args: argparse.Namespace) -> SimulationConfig:
    center = None
    if args.lat is not None and args.lon is not None:
        center = GeoPoint.from_deg(args.lat, args.lon)
    return SimulationConfig(
        flood_center=center,
        flood_radius=Meter(args.radius),
        agent_count=args.agents,
        detection_density=args.density,
        trigger_range=Meter(args.trigger_range),
        tick_interval=Millisecond(args.interval),
        seed=args.seed,
    ).validate()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = config_from_args(args)
    except ConfigError as e:
        CONSOLE.print(f"[bold red]Invalid configuration[/bold red]: {e}")
        return 2

    memory = MemoryReportSink()
    report_sink = FanOutReportSink(memory, JsonLinesReportSink(args.events_out)) if args.events_out else memory
    event_log = EventLog()
    map_sink = SnapshotMapSink()
    dispatcher = CommandDispatcher(
        map_sink=map_sink,
        guidance=None if args.no_guidance else ConsoleGuidanceSink(CONSOLE),
        event_log=event_log,
        router=EventRouter(report_sink, event_log),
        summary_sink=ConsoleSummarySink(CONSOLE),
    )
    scheduler = ManualScheduler() if args.fast else ThreadScheduler()
    clock = SimulationClock(config, dispatcher, scheduler, exclusive_allocation=args.exclusive)

    if not clock.launch():
        CONSOLE.print("[bold red]Launch refused[/bold red]: pass --lat and --lon to choose a flood center")
        return 2

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(bar_width=40),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=CONSOLE,
            auto_refresh=True,
        ) as progress:
            state = clock.state
            t = progress.add_task("[green]Rescuing victims...", total=state.total_detected)
            while not clock.finished and state.tick < args.max_ticks:
                if args.fast:
                    scheduler.advance()
                else:
                    clock.wait(timeout=0.1)
                state = clock.state
                progress.update(
                    t,
                    completed=state.total_rescued,
                    description=f"[green]Tick {state.tick} • Simulation Time: {state.elapsed}",
                )
    except KeyboardInterrupt:
        CONSOLE.print("[yellow]Interrupted[/yellow]")
        clock.reset()
        return 130
    finally:
        clock.pause()

    summary = clock.summary()
    if not clock.finished:
        logger.warning("Stopped after %d ticks with %d victims remaining", summary.ticks, clock.state.remaining)
        CONSOLE.print(summary_panel(summary))

    if args.snapshot:
        path = map_sink.save(args.snapshot)
        CONSOLE.print(f"Map snapshot saved to {path}")
    if args.plot:
        analyze_rescue_timeline(memory.payloads, config.tick_interval, plot_path=args.plot)

    return 0 if clock.finished else 1


if __name__ == "__main__":
    sys.exit(main())
