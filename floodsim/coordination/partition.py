"""Region partitioning of the flood area among agents.

The working extent is a box around the flood disc; it is split into one
Voronoi cell per distinct agent seed. Cells are matched back to agents by
taking, for each cell, the seed nearest to the cell's centroid: a Voronoi
cell is convex, so its centroid lies inside it and is closest to its own
seed. When several agents share a seed only one of them gets a region.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
import logging

from scipy.spatial import cKDTree
from shapely.geometry import Polygon

from floodsim.geo import GeoPoint, bounding_extent, project, voronoi
from floodsim.unit import Length
from floodsim.vehicles import Agent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PartitionResult:
    """Outcome of a partition run.

    Attributes:
        ok (bool): ``False`` when the diagram could not be computed and every
            agent was left without a region.
        extent (Polygon): Working extent that was partitioned.
        regions (dict[int, Polygon]): Region per agent id.
    """

    ok: bool
    extent: Polygon
    regions: dict[int, Polygon] = field(default_factory=dict)

    def describe(self, agents: Sequence[Agent]) -> list[str]:
        if not self.ok:
            return ["Region partition unavailable; all agents search the whole flood area"]
        lines = []
        for agent in agents:
            region = self.regions.get(agent.id)
            if region is None:
                lines.append(f"Agent D{agent.id} ({agent.team}) has no region; searching globally")
            else:
                lines.append(
                    f"Agent D{agent.id} ({agent.team}) assigned region with "
                    f"{len(region.exterior.coords) - 1} vertices"
                )
        return lines


def partition_regions(
    agents: Sequence[Agent],
    center: GeoPoint,
    radius: Length,
    margin: float,
) -> PartitionResult:
    """Assign each agent the Voronoi cell of its seed within the working extent.

    Every agent's ``region`` is overwritten. On failure (fewer than two
    distinct seeds, degenerate diagram) all regions are set to ``None`` so the
    allocator falls back to searching every victim, and a warning is logged.

    Args:
        agents (Sequence[Agent]): Agents in id order.
        center (GeoPoint): Flood center.
        radius (Length): Flood radius.
        margin (float): Extent half-size as a multiple of ``radius``.

    Returns:
        PartitionResult: The extent and the per-agent regions.
    """
    extent = bounding_extent(center, radius, margin)
    seeds = [agent.seed for agent in agents]
    cells = voronoi(seeds, extent)
    if cells is None:
        logger.warning(
            "Voronoi partition failed for %d seed(s); falling back to unrestricted regions",
            len(seeds),
        )
        for agent in agents:
            agent.region = None
        return PartitionResult(ok=False, extent=extent)

    tree = cKDTree(project(seeds, center))
    centroids = project([(cell.centroid.x, cell.centroid.y) for cell in cells], center)
    _, nearest = tree.query(centroids)
    owners = [agents[int(seed_index)].id for seed_index in nearest]
    if len(set(owners)) != len(owners):
        logger.warning("Voronoi cells could not be matched to agents; falling back to unrestricted regions")
        for agent in agents:
            agent.region = None
        return PartitionResult(ok=False, extent=extent)

    regions: dict[int, Polygon] = dict(zip(owners, cells))
    for agent in agents:
        agent.region = regions.get(agent.id)

    logger.debug("Partitioned extent into %d regions for %d agents", len(regions), len(agents))
    return PartitionResult(ok=True, extent=extent, regions=regions)
