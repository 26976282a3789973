from .analyze import analyze_rescue_timeline, rescue_events_frame
from .clock import (
    ManualScheduler,
    Scheduler,
    SimulationClock,
    ThreadScheduler,
    TickOutcome,
    build_launch_state,
    step,
)
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
from .events import EventRouter, RescueEvent, build_rescue_event
from .motion import advance_agents, resolve_rescues
from .sinks import (
    CommandDispatcher,
    ConsoleGuidanceSink,
    ConsoleSummarySink,
    EventLog,
    EventLogSink,
    FanOutReportSink,
    GuidanceSink,
    JsonLinesReportSink,
    MapSink,
    MemoryReportSink,
    MemorySummarySink,
    NullMapSink,
    ReportSink,
    SummarySink,
    summary_panel,
)
from .state import RunSummary, SimulationState

__all__ = [
    "SimulationClock",
    "Scheduler",
    "ThreadScheduler",
    "ManualScheduler",
    "TickOutcome",
    "build_launch_state",
    "step",
    "SimulationState",
    "RunSummary",
    "advance_agents",
    "resolve_rescues",
    "RescueEvent",
    "EventRouter",
    "build_rescue_event",
    "Command",
    "RenderAgent",
    "RenderVictim",
    "RenderRegion",
    "RenderFlood",
    "ClearMap",
    "LogLine",
    "Notify",
    "RouteRescue",
    "ReportSummary",
    "MapSink",
    "GuidanceSink",
    "EventLogSink",
    "ReportSink",
    "SummarySink",
    "NullMapSink",
    "EventLog",
    "ConsoleGuidanceSink",
    "MemoryReportSink",
    "MemorySummarySink",
    "FanOutReportSink",
    "JsonLinesReportSink",
    "ConsoleSummarySink",
    "CommandDispatcher",
    "summary_panel",
    "analyze_rescue_timeline",
    "rescue_events_frame",
]
