"""Area partitioning and target allocation for the swarm.

Components:
    partition_regions: One Voronoi region per agent seed, run at launch.
    PartitionResult: Extent and regions produced by a partition run.
    allocate_targets: Sticky nearest-to-seed allocation, run every tick.
    Allocation, AllocationScope: Record of a target change.
"""

from .allocation import (
    Allocation,
    AllocationScope,
    allocate_targets,
    candidate_victims,
    nearest_to_seed,
)
from .partition import PartitionResult, partition_regions

__all__ = [
    "Allocation",
    "AllocationScope",
    "PartitionResult",
    "allocate_targets",
    "candidate_victims",
    "nearest_to_seed",
    "partition_regions",
]
