"""Tick scheduling and the simulation clock.

The tick itself is :func:`step`, a function from the current state to a new
state plus the commands to dispatch. :class:`SimulationClock` owns the
current state, runs :func:`step` on a :class:`Scheduler` and commits each
outcome atomically: if a reset or relaunch happened while the tick was being
computed, the outcome is dropped.

Tick Sequence:
    1. Allocation: keep live targets, (re)assign the rest.
    2. Motion: pursuing agents step towards targets, idle agents drift.
    3. Rescue: every agent within trigger range completes its rescue.
    4. Termination: all detected victims rescued → finished, clock stops.

Example:
    >>> from floodsim.config import SimulationConfig
    >>> from floodsim.geo import GeoPoint
    >>> from floodsim.simulator import ManualScheduler, SimulationClock
    >>> cfg = SimulationConfig(flood_center=GeoPoint.from_deg(13.08, 80.27), seed=7)
    >>> scheduler = ManualScheduler()
    >>> clock = SimulationClock(cfg, scheduler=scheduler)
    >>> clock.launch()
    True
    >>> scheduler.advance(5)
    5
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
import threading
import time

import numpy as np

from floodsim.config import TEAM_NAMES, SimulationConfig
from floodsim.coordination import allocate_targets, partition_regions
from floodsim.errors import PreconditionError
from floodsim.mission import generate_victims
from floodsim.unit import Time
from floodsim.vehicles import place_agents

from .commands import (
    ClearMap,
    Command,
    LogLine,
    RenderAgent,
    RenderFlood,
    RenderRegion,
    RenderVictim,
    ReportSummary,
)
from .events import RescueEvent
from .motion import advance_agents, resolve_rescues
from .sinks import CommandDispatcher
from .state import RunSummary, SimulationState

logger = logging.getLogger(__name__)

Task = Callable[[], object]


class Scheduler(ABC):
    """Runs a task periodically until stopped."""

    @abstractmethod
    def start(self, task: Task, period: Time) -> None:
        """Begin running ``task`` every ``period``. No-op while running."""

    @abstractmethod
    def stop(self) -> None:
        """Do not run the task again. No-op while stopped."""

    @property
    @abstractmethod
    def running(self) -> bool: ...


class ThreadScheduler(Scheduler):
    """Fixed-period scheduler backed by a single daemon thread.

    One task body runs at a time. A task that overruns its period delays the
    next run rather than overlapping it. An exception raised by the task is
    logged and stops the schedule.
    """

    def __init__(self, name: str = "FloodSimClock"):
        self.name = name
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()

    @property
    def running(self) -> bool:
        return (
            self._thread is not None
            and self._thread.is_alive()
            and not self._stop_event.is_set()
        )

    def start(self, task: Task, period: Time) -> None:
        if self.running:
            return
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._loop,
            args=(task, float(period), self._stop_event),
            name=self.name,
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread.is_alive() and thread is not threading.current_thread():
            thread.join(timeout=5.0)
        self._thread = None

    @staticmethod
    def _loop(task: Task, period: float, stop_event: threading.Event) -> None:
        next_at = time.monotonic()
        while not stop_event.is_set():
            try:
                task()
            except Exception:
                logger.exception("Tick failed; stopping the clock")
                stop_event.set()
                break
            next_at += period
            delay = next_at - time.monotonic()
            if delay < 0:
                next_at = time.monotonic()
                delay = 0.0
            stop_event.wait(delay)


class ManualScheduler(Scheduler):
    """Scheduler that only runs the task when :meth:`advance` is called."""

    def __init__(self):
        self._task: Task | None = None
        self.period: Time | None = None

    @property
    def running(self) -> bool:
        return self._task is not None

    def start(self, task: Task, period: Time) -> None:
        if self.running:
            return
        self._task = task
        self.period = period

    def stop(self) -> None:
        self._task = None

    def advance(self, n: int = 1) -> int:
        """Run the task up to ``n`` times, stopping early if it stops the schedule.

        Returns:
            int: Number of task runs performed.
        """
        done = 0
        while done < n and self._task is not None:
            self._task()
            done += 1
        return done


@dataclass(frozen=True)
class TickOutcome:
    """Result of one tick: the new state and the effects it requests."""

    state: SimulationState
    commands: list[Command] = field(default_factory=list)
    events: list[RescueEvent] = field(default_factory=list)


def build_launch_state(
    config: SimulationConfig,
    rng: np.random.Generator,
) -> tuple[SimulationState, list[Command]]:
    """Create a fresh run: detect victims, place the swarm and partition the area.

    Raises:
        PreconditionError: If no flood center has been chosen.
    """
    center = config.flood_center
    if center is None:
        raise PreconditionError("Select a flood center before launching")

    victims, records = generate_victims(center, config.flood_radius, config.detection_density, rng)
    agents = place_agents(
        center,
        config.flood_radius,
        config.agent_count,
        config.launch_ring_ratio,
        config.agent_speed,
        TEAM_NAMES,
    )
    partition = partition_regions(agents, center, config.flood_radius, config.extent_margin)
    state = SimulationState(
        config=config,
        agents=agents,
        victims=victims,
        extent=partition.extent,
        partition_ok=partition.ok,
    )

    commands: list[Command] = [ClearMap(), RenderFlood(center, config.flood_radius)]
    commands += [LogLine(record.describe()) for record in records]
    commands += [RenderVictim(v.id, v.position, v.rescued) for v in victims]
    commands += [RenderRegion(a.id, a.team, a.region) for a in agents]
    commands += [LogLine(line) for line in partition.describe(agents)]
    commands += [RenderAgent.of(a) for a in agents]
    commands.append(
        LogLine(f"Launched {len(agents)} drones over {len(victims)} detected victims around {center}")
    )
    return state, commands


def step(
    state: SimulationState,
    now: datetime,
    rng: np.random.Generator,
    exclusive: bool = False,
) -> TickOutcome:
    """Execute one tick on a copy of ``state``.

    ``state`` itself is never modified. A finished state is returned as is
    with no commands.
    """
    if state.finished:
        return TickOutcome(state)

    working = state.copy()
    working.tick += 1
    commands: list[Command] = []

    for allocation in allocate_targets(working, exclusive=exclusive):
        commands.append(LogLine(allocation.describe()))
    commands += advance_agents(working, rng)
    events, rescue_commands = resolve_rescues(working, now)
    commands += rescue_commands

    if working.all_rescued:
        working.finished = True
        summary = RunSummary.from_state(working)
        commands.append(
            LogLine(f"All {summary.total_rescued} victims rescued after {working.tick} ticks ({summary.elapsed})")
        )
        commands.append(ReportSummary(summary))

    return TickOutcome(working, commands, events)


class SimulationClock:
    """Owns the run state and drives ticks on a scheduler.

    Commands:
        launch: Build a new run from the configuration and start ticking.
        start: Resume ticking a launched, unfinished run (idempotent).
        pause: Stop ticking (idempotent).
        reset: Tear the run down unconditionally (idempotent).

    Args:
        config (SimulationConfig): Validated on construction and on every
            change.
        dispatcher (CommandDispatcher | None): Sinks for tick effects.
        scheduler (Scheduler | None): Defaults to a :class:`ThreadScheduler`.
        exclusive_allocation (bool): Reserve victims during allocation so no
            two agents chase the same one.
        now (Callable[[], datetime] | None): Wall-clock source for event
            timestamps.
    """

    def __init__(
        self,
        config: SimulationConfig,
        dispatcher: CommandDispatcher | None = None,
        scheduler: Scheduler | None = None,
        *,
        exclusive_allocation: bool = False,
        now: Callable[[], datetime] | None = None,
    ):
        self.config = config.validate()
        self.dispatcher = dispatcher or CommandDispatcher()
        self.scheduler = scheduler or ThreadScheduler()
        self.exclusive_allocation = exclusive_allocation
        self._now = now or (lambda: datetime.now(timezone.utc))
        self._lock = threading.RLock()
        self._state: SimulationState | None = None
        self._generation = 0
        self._rng = np.random.default_rng(config.seed)
        self._finished = threading.Event()

    @property
    def state(self) -> SimulationState | None:
        with self._lock:
            return self._state

    @property
    def running(self) -> bool:
        return self.scheduler.running

    @property
    def finished(self) -> bool:
        return self._finished.is_set()

    def configure(self, **changes) -> SimulationConfig:
        """Replace configuration values for the next launch.

        Raises:
            ConfigError: If a new value is out of range.
        """
        self.config = self.config.with_overrides(**changes)
        return self.config

    def launch(self) -> bool:
        """Start a new run, replacing any previous one.

        Returns:
            bool: ``False`` if the launch was refused (no flood center); the
            current run is then left untouched.
        """
        rng = np.random.default_rng(self.config.seed)
        try:
            state, commands = build_launch_state(self.config, rng)
        except PreconditionError as e:
            logger.error("Launch refused: %s", e)
            with self._lock:
                self.dispatcher.dispatch([LogLine(f"Launch refused: {e}")])
            return False

        self.scheduler.stop()
        with self._lock:
            self._generation += 1
            self._rng = rng
            self._state = state
            self._finished.clear()
            self.dispatcher.dispatch(commands)

        logger.info(
            "Launched run with %d agents and %d victims (partition %s)",
            len(state.agents),
            state.total_detected,
            "ok" if state.partition_ok else "unavailable",
        )
        self.start()
        return True

    def start(self) -> bool:
        """Resume ticking. Returns ``False`` when there is nothing to run."""
        with self._lock:
            if self._state is None or self._state.finished:
                return False
        self.scheduler.start(self.tick, self.config.tick_interval)
        return True

    def pause(self) -> None:
        self.scheduler.stop()

    def reset(self) -> None:
        """Stop ticking and discard agents, victims and regions."""
        self.scheduler.stop()
        with self._lock:
            had_run = self._state is not None
            self._generation += 1
            self._state = None
            self._finished.clear()
            commands: list[Command] = [ClearMap()]
            if had_run:
                commands.append(LogLine("Simulation reset"))
            self.dispatcher.dispatch(commands)

    def tick(self) -> TickOutcome | None:
        """Run one tick and commit it.

        Returns:
            TickOutcome | None: The committed outcome, or ``None`` when there
            was nothing to do or the run changed while the tick was computed.
        """
        with self._lock:
            state, generation = self._state, self._generation
        if state is None or state.finished:
            return None

        outcome = step(state, self._now(), self._rng, exclusive=self.exclusive_allocation)

        with self._lock:
            if generation != self._generation or self._state is not state:
                logger.debug("Discarding tick %d: run was reset or relaunched", outcome.state.tick)
                return None
            self._state = outcome.state
            self.dispatcher.dispatch(outcome.commands)

        if outcome.state.finished:
            self.scheduler.stop()
            self._finished.set()
        return outcome

    def run(self, max_ticks: int | None = None) -> RunSummary | None:
        """Tick synchronously until the run finishes or ``max_ticks`` ticks ran."""
        ticks = 0
        while not self.finished and (max_ticks is None or ticks < max_ticks):
            if self.tick() is None:
                break
            ticks += 1
        return self.summary()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the run finishes. Returns ``False`` on timeout."""
        return self._finished.wait(timeout)

    def summary(self) -> RunSummary | None:
        """Summary of the current run so far, ``None`` when nothing is launched."""
        with self._lock:
            if self._state is None:
                return None
            return RunSummary.from_state(self._state)
