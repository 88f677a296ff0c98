"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability_finder import AvailabilityFinderService, SnapshotSourceProtocol

__all__ = ["AvailabilityFinderService", "SnapshotSourceProtocol"]
