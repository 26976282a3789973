from .snapshot_sink import SnapshotMapSink

__all__ = ["SnapshotMapSink"]
