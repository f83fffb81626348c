"""
Centroid initialization strategies.

Both strategies are deterministic: the fixed strategy copies points at a
known index list, the random strategy samples without replacement from a
generator seeded explicitly for a single call.
"""

import numbers
from enum import Enum
from typing import Optional, Sequence, Union

import numpy as np

from .errors import InvalidConfiguration

# Reference index list used to reproduce published results.
DEFAULT_INIT_INDICES = (0, 70, 149, 35, 105, 17, 50, 85)

DEFAULT_RANDOM_STATE = 0


class InitStrategy(Enum):
    """How the initial centroids are chosen."""

    FIXED = 'fixed'
    RANDOM = 'random'

    @classmethod
    def parse(cls, value: Union[str, 'InitStrategy']) -> 'InitStrategy':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidConfiguration(
                f"Unknown initialization method: {value!r} "
                f"(expected one of {[s.value for s in cls]})"
            ) from None


def check_fixed_indices(indices: Sequence[int], n_clusters: int, size: int) -> np.ndarray:
    """
    Validate a fixed index list and return the first ``n_clusters`` entries.

    Args:
        indices: Candidate point indices, one per cluster
        n_clusters: Number of clusters
        size: Number of points in the point set

    Returns:
        Integer array of length ``n_clusters``
    """
    indices = np.asarray(list(indices))
    if indices.ndim != 1 or (indices.size and indices.dtype.kind not in 'iu'):
        raise InvalidConfiguration("init_indices must be a flat sequence of integers")
    if len(indices) < n_clusters:
        raise InvalidConfiguration(
            f"init_indices has {len(indices)} entries but {n_clusters} clusters were requested"
        )
    selected = indices[:n_clusters].astype(np.int64)
    if np.any(selected < 0):
        raise InvalidConfiguration(f"init_indices must be non-negative: {selected.tolist()}")
    out_of_range = selected[selected >= size]
    if out_of_range.size:
        raise InvalidConfiguration(
            f"init_indices {out_of_range.tolist()} out of range for {size} points"
        )
    if len(np.unique(selected)) != n_clusters:
        raise InvalidConfiguration(f"init_indices must be distinct: {selected.tolist()}")
    return selected


def check_random_state(random_state) -> Optional[Union[int, np.random.Generator]]:
    """Accept ``None``, a ``numpy.random.Generator`` or a non-negative integer seed."""
    if random_state is None or isinstance(random_state, np.random.Generator):
        return random_state
    if isinstance(random_state, (bool, np.bool_)) or not isinstance(random_state, numbers.Integral):
        raise InvalidConfiguration(
            f"random_state must be None, an integer or a numpy Generator, got {random_state!r}"
        )
    if random_state < 0:
        raise InvalidConfiguration(f"random_state must be non-negative, got {random_state}")
    return int(random_state)


def random_indices(
    n_clusters: int,
    size: int,
    random_state: Optional[Union[int, np.random.Generator]] = None
) -> np.ndarray:
    """
    Draw ``n_clusters`` distinct point indices uniformly at random.

    The generator only lives for this call unless one is passed in, so no
    random state is shared between engines.
    """
    if isinstance(random_state, np.random.Generator):
        rng = random_state
    else:
        rng = np.random.default_rng(DEFAULT_RANDOM_STATE if random_state is None else random_state)
    return rng.choice(size, n_clusters, replace=False).astype(np.int64)


def init_centroids(points: np.ndarray, indices: np.ndarray, out: np.ndarray) -> np.ndarray:
    """Copy the points at ``indices`` into the centroid buffer ``out``."""
    out[...] = points[indices]
    return out
