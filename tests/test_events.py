"""
Tests for rescue events, routing and the boundary sinks.
"""

from datetime import datetime, timezone
import json
import os
import tempfile
import unittest

from floodsim.geo import GeoPoint
from floodsim.mission import Victim
from floodsim.render import SnapshotMapSink
from floodsim.simulator import (
    ClearMap,
    CommandDispatcher,
    EventLog,
    EventRouter,
    FanOutReportSink,
    JsonLinesReportSink,
    LogLine,
    MapSink,
    MemoryReportSink,
    Notify,
    RenderAgent,
    RenderFlood,
    RenderVictim,
    RouteRescue,
    build_rescue_event,
)
from floodsim.unit import Degree, Meter
from floodsim.vehicles import Agent

CENTER = GeoPoint.from_deg(13.0827, 80.2707)
NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def make_event(tick=3):
    agent = Agent(2, "Charlie", CENTER, Meter(15))
    victim = Victim(id=7, position=CENTER.forward(Degree(45), Meter(12)))
    return build_rescue_event(agent, victim, Meter(12), NOW, tick)


class FailingGuidance:
    def notify(self, message):
        raise RuntimeError("speaker unplugged")


class TestRescueEvent(unittest.TestCase):
    """Test the event record."""

    def test_to_dict_fields(self):
        """Test serialisation happens with a fixed field set."""
        payload = make_event().to_dict()
        self.assertEqual(
            set(payload),
            {"agent_id", "team", "victim_id", "victim_lat", "victim_lon", "distance_m", "timestamp", "tick"},
        )
        self.assertEqual(payload["agent_id"], 2)
        self.assertEqual(payload["team"], "Charlie")
        self.assertEqual(payload["victim_id"], 7)
        self.assertEqual(payload["distance_m"], 12.0)
        self.assertEqual(payload["timestamp"], "2024-01-01T12:00:00+00:00")
        self.assertEqual(payload["tick"], 3)
        json.dumps(payload)

    def test_event_is_immutable(self):
        """Test the event cannot be modified."""
        event = make_event()
        with self.assertRaises(AttributeError):
            event.tick = 4


class TestEventRouter(unittest.TestCase):
    """Test forwarding to the report sink."""

    def test_forward_once(self):
        """Test one forward delivers one payload and one log line."""
        report = MemoryReportSink()
        log = EventLog()
        router = EventRouter(report, log)
        router.forward(make_event())
        self.assertEqual(len(report.payloads), 1)
        self.assertEqual(router.forwarded, 1)
        self.assertEqual(len(log), 1)
        self.assertIn("V7", log.lines()[0])

    def test_json_lines_sink(self):
        """Test payloads are appended as JSON lines."""
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "events.jsonl")
            memory = MemoryReportSink()
            router = EventRouter(FanOutReportSink(memory, JsonLinesReportSink(path)))
            router.forward(make_event(tick=1))
            router.forward(make_event(tick=2))
            with open(path, encoding="utf-8") as f:
                rows = [json.loads(line) for line in f]
        self.assertEqual([r["tick"] for r in rows], [1, 2])
        self.assertEqual(rows, memory.payloads)


class TestEventLog(unittest.TestCase):
    """Test the bounded event log."""

    def test_capacity_drops_oldest(self):
        """Test only the newest lines are kept."""
        log = EventLog(capacity=3)
        for i in range(5):
            log.append(f"line {i}")
        self.assertEqual(log.lines(), ["line 2", "line 3", "line 4"])
        self.assertTrue(all(ts.tzinfo is not None for ts, _ in log.entries()))

    def test_lines_go_to_logger(self):
        """Test each line is mirrored to the events logger."""
        log = EventLog()
        with self.assertLogs("floodsim.events", level="INFO") as captured:
            log.append("Agent D0 allocated V1")
        self.assertIn("Agent D0 allocated V1", captured.output[0])


class TestCommandDispatcher(unittest.TestCase):
    """Test effect dispatch."""

    def test_guidance_failure_is_swallowed(self):
        """Test a broken guidance sink does not stop the dispatch."""
        log = EventLog()
        dispatcher = CommandDispatcher(guidance=FailingGuidance(), event_log=log)
        with self.assertLogs("floodsim.simulator.sinks", level="WARNING"):
            dispatcher.dispatch([Notify("victim rescued"), LogLine("after")])
        self.assertEqual(log.lines(), ["after"])

    def test_route_rescue_reaches_router(self):
        """Test rescue commands are forwarded through the router."""
        report = MemoryReportSink()
        dispatcher = CommandDispatcher(router=EventRouter(report))
        dispatcher.dispatch([RouteRescue(make_event())])
        self.assertEqual(len(report.payloads), 1)

    def test_unknown_command_rejected(self):
        """Test dispatching a foreign object raises."""
        with self.assertRaises(TypeError):
            CommandDispatcher().dispatch(["not a command"])

    def test_map_commands(self):
        """Test render commands update the map sink."""
        sink = SnapshotMapSink()
        self.assertIsInstance(sink, MapSink)
        dispatcher = CommandDispatcher(map_sink=sink)
        agent = Agent(0, "Alpha", CENTER, Meter(15))
        dispatcher.dispatch(
            [
                RenderFlood(CENTER, Meter(800)),
                RenderAgent.of(agent),
                RenderVictim(0, CENTER, False),
                RenderVictim(0, CENTER, True),
            ]
        )
        self.assertEqual(len(sink.agents), 1)
        self.assertTrue(sink.victims[0].rescued)
        self.assertEqual(len(sink.flood_boundary()), 73)
        dispatcher.dispatch([ClearMap()])
        self.assertEqual(sink.agents, {})
        self.assertIsNone(sink.flood)


if __name__ == '__main__':
    unittest.main()
