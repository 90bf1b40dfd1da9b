"""
core.rng
Deterministic RNG helpers that do NOT rely on Python's built-in hash().

Same (base_seed + inputs) => same event rolls across platforms & runs,
which keeps headless simulations and tests reproducible.
"""

from __future__ import annotations

import hashlib
import json
import random
from typing import Any, Sequence, TypeVar

T = TypeVar("T")


def stable_int_seed(*parts: Any, salt: str = "evergrow") -> int:
    """Return a stable 32-bit integer seed derived from arbitrary inputs.

    SHA-256 over a canonical JSON representation of `parts`; `default=str`
    covers non-JSON types. Output is 0..2**32-1.
    """
    payload = json.dumps(parts, sort_keys=True, ensure_ascii=False, separators=(",", ":"), default=str)
    h = hashlib.sha256((salt + "|" + payload).encode("utf-8")).digest()
    return int.from_bytes(h[:4], "big", signed=False)


def rng_from(*parts: Any, base_seed: int) -> random.Random:
    """Create a Random instance from (base_seed + parts)."""
    seed = stable_int_seed(base_seed, *parts)
    return random.Random(seed)


def weighted_pick(rng: random.Random, items: Sequence[T], weights: Sequence[float]) -> T:
    if not items:
        raise ValueError("weighted_pick needs at least one item")
    if any(w < 0 for w in weights) or sum(weights) <= 0:
        raise ValueError("weights must be >= 0 with a positive total")
    return rng.choices(list(items), weights=list(weights), k=1)[0]
