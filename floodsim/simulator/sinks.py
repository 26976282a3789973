"""Boundary sinks and the dispatcher that feeds them.

The simulation core never reads anything back from a sink. Each sink is a
small protocol so that a map widget, a speech engine or a web backend can be
plugged in; the implementations here cover headless runs and tests.

Sinks:
    MapSink: Agent, victim, region and flood-boundary rendering.
    GuidanceSink: Fire-and-forget text notifications (audio guidance).
    EventLogSink: Timestamped human-readable event lines.
    ReportSink: Serialised rescue events.
    SummarySink: Final run summary.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from datetime import datetime, timezone
import json
import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from floodsim.config import EVENT_LOG_CAPACITY
from floodsim.geo import GeoPoint
from floodsim.unit import Length

from .commands import (
    ClearMap,
    Command,
    LogLine,
    Notify,
    RenderAgent,
    RenderFlood,
    RenderRegion,
    RenderVictim,
    ReportSummary,
    RouteRescue,
)
from .events import EventRouter
from .state import RunSummary

CONSOLE = Console()
logger = logging.getLogger(__name__)
event_logger = logging.getLogger("floodsim.events")


@runtime_checkable
class MapSink(Protocol):
    def upsert_agent(self, agent: RenderAgent) -> None: ...
    def upsert_victim(self, victim: RenderVictim) -> None: ...
    def upsert_region(self, region: RenderRegion) -> None: ...
    def show_flood(self, center: GeoPoint, radius: Length) -> None: ...
    def clear(self) -> None: ...


@runtime_checkable
class GuidanceSink(Protocol):
    def notify(self, message: str) -> None: ...


@runtime_checkable
class EventLogSink(Protocol):
    def append(self, line: str) -> None: ...


@runtime_checkable
class ReportSink(Protocol):
    def report(self, payload: dict) -> None: ...


@runtime_checkable
class SummarySink(Protocol):
    def summarize(self, summary: RunSummary) -> None: ...


class NullMapSink:
    """Map sink that discards every update."""

    def upsert_agent(self, agent: RenderAgent) -> None:
        pass

    def upsert_victim(self, victim: RenderVictim) -> None:
        pass

    def upsert_region(self, region: RenderRegion) -> None:
        pass

    def show_flood(self, center: GeoPoint, radius: Length) -> None:
        pass

    def clear(self) -> None:
        pass


class EventLog:
    """Bounded in-memory event log, oldest entry first.

    Every line is also written to the ``floodsim.events`` logger at INFO
    level so that it shows up wherever logging is configured.

    Args:
        capacity (int): Number of lines retained; older lines are dropped.
    """

    def __init__(self, capacity: int = EVENT_LOG_CAPACITY):
        self._entries: deque[tuple[datetime, str]] = deque(maxlen=capacity)

    def append(self, line: str) -> None:
        self._entries.append((datetime.now(timezone.utc), line))
        event_logger.info(line)

    def entries(self) -> list[tuple[datetime, str]]:
        return list(self._entries)

    def lines(self) -> list[str]:
        return [line for _, line in self._entries]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class ConsoleGuidanceSink:
    """Prints guidance messages to a rich console."""

    def __init__(self, console: Console | None = None):
        self.console = console or CONSOLE

    def notify(self, message: str) -> None:
        self.console.print(f"[bold cyan]Guidance[/bold cyan]: {message}")


class MemoryReportSink:
    def __init__(self):
        self.payloads: list[dict] = []

    def report(self, payload: dict) -> None:
        self.payloads.append(payload)

    def clear(self) -> None:
        self.payloads.clear()


class FanOutReportSink:
    """Forwards each payload to several report sinks in order."""

    def __init__(self, *sinks: ReportSink):
        self.sinks = list(sinks)

    def report(self, payload: dict) -> None:
        for sink in self.sinks:
            sink.report(payload)


class JsonLinesReportSink:
    """Appends each payload as one JSON line to ``path``."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def report(self, payload: dict) -> None:
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(payload) + "\n")


class MemorySummarySink:
    """Keeps every summary delivered since the last clear."""

    def __init__(self):
        self.summaries: list[RunSummary] = []

    @property
    def last(self) -> RunSummary | None:
        return self.summaries[-1] if self.summaries else None

    def summarize(self, summary: RunSummary) -> None:
        self.summaries.append(summary)

    def clear(self) -> None:
        self.summaries.clear()


class ConsoleSummarySink:
    """Renders the final summary as a rich table and keeps the last one."""

    def __init__(self, console: Console | None = None):
        self.console = console or CONSOLE
        self.last: RunSummary | None = None

    def summarize(self, summary: RunSummary) -> None:
        self.last = summary
        self.console.print(summary_panel(summary))


def summary_panel(summary: RunSummary) -> Panel:
    t = Table.grid(padding=(0, 2))
    t.add_row("[b]Victims Detected[/b]: ", str(summary.total_detected))
    t.add_row("[b]Victims Rescued[/b]: ", str(summary.total_rescued))
    t.add_row("[b]Ticks[/b]: ", str(summary.ticks))
    t.add_row("[b]Simulated Time[/b]: ", str(summary.elapsed))
    t.add_section()
    for agent_id, count in sorted(summary.rescued_by_agent.items()):
        t.add_row(f"[b]Drone D{agent_id}[/b]: ", str(count))
    return Panel(t, title="Rescue Summary", padding=(1, 2))


class CommandDispatcher:
    """Applies tick commands to the configured sinks.

    Guidance failures are logged and otherwise ignored; failures of any other
    sink propagate.

    Report and summary sinks that are not supplied default to in-memory
    sinks owned by the dispatcher. Those are cleared on every
    :class:`ClearMap`, which the clock emits when a run is launched or reset.
    """

    def __init__(
        self,
        map_sink: MapSink | None = None,
        guidance: GuidanceSink | None = None,
        event_log: EventLogSink | None = None,
        router: EventRouter | None = None,
        summary_sink: SummarySink | None = None,
    ):
        self.map_sink = map_sink or NullMapSink()
        self.guidance = guidance
        self.event_log = event_log if event_log is not None else EventLog()
        self._owned: list[MemoryReportSink | MemorySummarySink] = []
        if router is None:
            report = MemoryReportSink()
            self._owned.append(report)
            router = EventRouter(report, self.event_log)
        self.router = router
        if summary_sink is None:
            summary_sink = MemorySummarySink()
            self._owned.append(summary_sink)
        self.summary_sink = summary_sink

    def dispatch(self, commands: Iterable[Command]) -> None:
        for command in commands:
            self._apply(command)

    def _apply(self, command: Command) -> None:
        match command:
            case RenderAgent():
                self.map_sink.upsert_agent(command)
            case RenderVictim():
                self.map_sink.upsert_victim(command)
            case RenderRegion():
                self.map_sink.upsert_region(command)
            case RenderFlood(center=center, radius=radius):
                self.map_sink.show_flood(center, radius)
            case ClearMap():
                self.map_sink.clear()
                for sink in self._owned:
                    sink.clear()
            case LogLine(text=text):
                self.event_log.append(text)
            case Notify(message=message):
                self._notify(message)
            case RouteRescue(event=event):
                self.router.forward(event)
            case ReportSummary(summary=summary):
                self.summary_sink.summarize(summary)
            case _:
                raise TypeError(f"Unknown command {command!r}")

    def _notify(self, message: str) -> None:
        if self.guidance is None:
            return
        try:
            self.guidance.notify(message)
        except Exception as e:
            logger.warning("Guidance sink failed, message dropped: %s", e)
