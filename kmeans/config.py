"""
Configuration for benchmark runs of the k-means engine.
"""

from dataclasses import dataclass
from typing import List

import numpy as np

from .errors import InvalidConfiguration
from .init import InitStrategy


@dataclass
class RunConfig:
    """Configuration for a single benchmark run."""
    # Dataset configuration
    size: int = 150
    dimensions: int = 2
    dtype: str = 'float32'
    data_seed: int = 42
    cluster_std: float = 1.0

    # Clustering parameters
    clusters: int = 8
    iterations: int = 10
    init: str = 'fixed'
    init_indices: List[int] = None  # DEFAULT_INIT_INDICES
    seed: int = 0

    verbose: bool = False

    def __post_init__(self):
        """Validate values that can be checked without data."""
        for name in ('size', 'dimensions', 'clusters'):
            if getattr(self, name) < 1:
                raise InvalidConfiguration(f"{name} must be >= 1, got {getattr(self, name)}")
        if self.iterations < 0:
            raise InvalidConfiguration(f"iterations must be >= 0, got {self.iterations}")
        if self.clusters > self.size:
            raise InvalidConfiguration(
                f"clusters ({self.clusters}) exceeds the number of points ({self.size})"
            )
        try:
            kind = np.dtype(self.dtype).kind
        except TypeError:
            raise InvalidConfiguration(f"Unknown dtype: {self.dtype!r}") from None
        if kind not in 'iuf':
            raise InvalidConfiguration(f"Unsupported coordinate dtype: {self.dtype}")
        self.init = InitStrategy.parse(self.init).value

    @classmethod
    def from_args(cls, args) -> 'RunConfig':
        """Build a config from an argparse namespace."""
        return cls(
            size=args.size,
            dimensions=args.dimensions,
            dtype=args.dtype,
            data_seed=args.data_seed,
            cluster_std=args.cluster_std,
            clusters=args.clusters,
            iterations=args.iterations,
            init=args.init,
            init_indices=args.init_indices,
            seed=args.seed,
            verbose=args.verbose,
        )
