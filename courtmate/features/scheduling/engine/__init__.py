"""
Pure scheduling engine: availability index, slot intersection and ranking.
"""

from .availability_index import AvailabilityIndex, RejectedSlot, index_by_day
from .confidence_ranker import DEFAULT_WEIGHTS, rank, score
from .slot_intersector import intersect, intersect_range

__all__ = [
    "AvailabilityIndex",
    "DEFAULT_WEIGHTS",
    "RejectedSlot",
    "index_by_day",
    "intersect",
    "intersect_range",
    "rank",
    "score",
]
