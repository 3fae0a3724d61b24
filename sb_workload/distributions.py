"""Per-contract storage slot count distributions."""

from __future__ import annotations

import logging
import math
import random

logger = logging.getLogger(__name__)

POWER_LAW_ALPHA = 1.5


def _uniform(rng: random.Random, count: int, min_slots: int, max_slots: int) -> list[int]:
    span = max_slots - min_slots + 1
    return [min_slots + rng.randrange(span) for _ in range(count)]


def _power_law(rng: random.Random, count: int, min_slots: int, max_slots: int) -> list[int]:
    counts = []
    for _ in range(count):
        u = rng.random()
        slots = min_slots / math.pow(1 - u, 1 / POWER_LAW_ALPHA)
        slots = min(slots, float(max_slots))
        counts.append(max(min_slots, int(slots)))
    return counts


def _exponential(rng: random.Random, count: int, min_slots: int, max_slots: int) -> list[int]:
    mean = max_slots // 4
    counts = []
    for _ in range(count):
        u = rng.random()
        if mean <= 0:
            # Unbounded rate: every draw collapses onto the lower bound.
            counts.append(min_slots)
            continue
        rate = math.log(2) / mean
        slots = -math.log(1 - u) / rate
        counts.append(int(max(float(min_slots), min(slots, float(max_slots)))))
    return counts


_DISTRIBUTIONS = {
    "uniform": _uniform,
    "power-law": _power_law,
    "exponential": _exponential,
}


def slot_counts(
    rng: random.Random,
    count: int,
    min_slots: int,
    max_slots: int,
    distribution: str,
) -> list[int]:
    """Draw one storage slot count per contract, each within [min, max].

    Exactly one uniform draw is consumed per contract. Unknown selectors
    fall back to the uniform distribution.
    """
    sampler = _DISTRIBUTIONS.get(distribution)
    if sampler is None:
        logger.warning(
            "Unknown slot distribution %r, falling back to uniform", distribution
        )
        sampler = _uniform
    return sampler(rng, count, min_slots, max_slots)
