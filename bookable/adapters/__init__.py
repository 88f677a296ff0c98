"""
Adapters layer - Data sources feeding availability snapshots.
"""

from .snapshot_loader import JsonSnapshotSource

__all__ = ["JsonSnapshotSource"]
