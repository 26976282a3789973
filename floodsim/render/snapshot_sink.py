"""Map sink that records the latest map state and renders it with matplotlib.

Coordinates are plotted as plain longitude/latitude; the flood boundary is
drawn as the geodesic circle sampled every few degrees of bearing.
"""

from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt

from floodsim.geo import GeoPoint
from floodsim.simulator.commands import RenderAgent, RenderRegion, RenderVictim
from floodsim.unit import Degree, Length

TEAM_COLORS = {"Alpha": "tab:blue", "Bravo": "tab:orange", "Charlie": "tab:purple"}
BOUNDARY_SAMPLES = 72


class SnapshotMapSink:
    """Keeps one marker per agent and victim and one outline per region.

    Example:
        >>> sink = SnapshotMapSink()
        >>> clock = SimulationClock(cfg, CommandDispatcher(map_sink=sink))
        >>> clock.launch()
        True
        >>> sink.save("launch.png")
    """

    def __init__(self):
        self.agents: dict[int, RenderAgent] = {}
        self.victims: dict[int, RenderVictim] = {}
        self.regions: dict[int, RenderRegion] = {}
        self.flood: tuple[GeoPoint, Length] | None = None

    def upsert_agent(self, agent: RenderAgent) -> None:
        self.agents[agent.agent_id] = agent

    def upsert_victim(self, victim: RenderVictim) -> None:
        self.victims[victim.victim_id] = victim

    def upsert_region(self, region: RenderRegion) -> None:
        self.regions[region.agent_id] = region

    def show_flood(self, center: GeoPoint, radius: Length) -> None:
        self.flood = (center, radius)

    def clear(self) -> None:
        self.agents.clear()
        self.victims.clear()
        self.regions.clear()
        self.flood = None

    def flood_boundary(self) -> list[tuple[float, float]]:
        if self.flood is None:
            return []
        center, radius = self.flood
        ring = [
            center.forward(Degree(360.0 * i / BOUNDARY_SAMPLES), radius).as_lonlat()
            for i in range(BOUNDARY_SAMPLES)
        ]
        return ring + ring[:1]

    def save(self, path: str | Path, title: str = "Flood Rescue Swarm") -> Path:
        """Render the current map to an image file and return its path."""
        path = Path(path)
        fig, ax = plt.subplots(figsize=(8, 8))

        boundary = self.flood_boundary()
        if boundary:
            xs, ys = zip(*boundary)
            ax.fill(xs, ys, color="tab:cyan", alpha=0.15, label="Flood area")
            ax.plot(xs, ys, color="tab:cyan", linewidth=1.5)

        for region in self.regions.values():
            if region.polygon is None:
                continue
            xs, ys = region.polygon.exterior.xy
            ax.plot(xs, ys, color=TEAM_COLORS.get(region.team, "gray"), linestyle="--", linewidth=1)

        waiting = [v.position.as_lonlat() for v in self.victims.values() if not v.rescued]
        rescued = [v.position.as_lonlat() for v in self.victims.values() if v.rescued]
        if waiting:
            ax.scatter(*zip(*waiting), marker="x", color="tab:red", label="Awaiting rescue")
        if rescued:
            ax.scatter(*zip(*rescued), marker="o", color="tab:green", label="Rescued")

        for agent in self.agents.values():
            lon, lat = agent.position.as_lonlat()
            ax.scatter([lon], [lat], marker="^", s=80, color=TEAM_COLORS.get(agent.team, "black"))
            ax.annotate(f"D{agent.agent_id} ({agent.rescued_count})", (lon, lat), fontsize=8)

        ax.set_xlabel("Longitude (°)")
        ax.set_ylabel("Latitude (°)")
        ax.set_title(title)
        ax.set_aspect("equal", adjustable="datalim")
        ax.grid(True, alpha=0.3)
        if ax.get_legend_handles_labels()[0]:
            ax.legend(loc="upper right")
        fig.tight_layout()
        fig.savefig(path)
        plt.close(fig)
        return path
