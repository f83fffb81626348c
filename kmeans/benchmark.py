#!/usr/bin/env python3
"""
Benchmark driver: cluster a synthetic blob data set and report
centroids, SSE before/after refinement and runtime.

Defaults reproduce the reference scenario (150 points, 2 dims,
8 clusters, 10 iterations, fixed initialization).
"""

import argparse
import sys
from typing import Dict, Optional

import numpy as np
from sklearn.datasets import make_blobs

from .config import RunConfig
from .errors import InvalidConfiguration
from .kmeans import KMeans


def create_dataset(config: RunConfig) -> np.ndarray:
    """Create a flat point buffer of ``size * dimensions`` values in ``config.dtype``."""
    X, _ = make_blobs(
        n_samples=config.size,
        n_features=config.dimensions,
        centers=config.clusters,
        cluster_std=config.cluster_std,
        random_state=config.data_seed,
    )
    dtype = np.dtype(config.dtype)
    if dtype.kind in 'iu':
        # Shift to non-negative and scale so integer coordinates keep the blob structure
        X = np.rint((X - X.min()) * 10)
    return np.ascontiguousarray(X.astype(dtype)).ravel()


def run_benchmark(config: RunConfig, points: Optional[np.ndarray] = None, file=None) -> Dict:
    """
    Run the engine once with ``config`` and print a report.

    Args:
        config: Benchmark configuration
        points: Flat point buffer; generated from ``config`` when omitted
        file: Stream for the report (defaults to stdout)

    Returns:
        Dictionary with initial/final SSE, runtime and centroids
    """
    out = file if file is not None else sys.stdout
    if points is None:
        points = create_dataset(config)

    engine = KMeans(
        points,
        size=config.size,
        dimensions=config.dimensions,
        n_clusters=config.clusters,
        init=config.init,
        init_indices=config.init_indices,
        random_state=config.seed,
        verbose=config.verbose,
    )

    initial_sse = engine.run(0).get_sse()
    engine.run(config.iterations)
    final_sse = engine.get_sse()

    print("🎯 Lloyd K-means Benchmark", file=out)
    print("=" * 60, file=out)
    print(f"Points: {config.size} x {config.dimensions} ({config.dtype}), "
          f"clusters: {config.clusters}, iterations: {config.iterations}, init: {config.init}",
          file=out)
    engine.print_centroids(file=out)
    print(f"Initial SSE: {initial_sse}", file=out)
    print(f"Final SSE:   {final_sse}", file=out)
    print(f"Runtime:     {engine.get_runtime():.1f} us", file=out)

    return {
        'initial_sse': initial_sse,
        'final_sse': final_sse,
        'runtime_us': engine.get_runtime(),
        'centroids': engine.dump_centroids(),
        'counts_history': [counts.tolist() for counts in engine.counts_history_],
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Lloyd K-means benchmark on synthetic blobs")

    # Dataset options
    parser.add_argument('--size', type=int, default=150,
                        help='Number of points (default: 150)')
    parser.add_argument('--dimensions', type=int, default=2,
                        help='Coordinates per point (default: 2)')
    parser.add_argument('--dtype', default='float32',
                        help='Coordinate dtype, e.g. float32, float64, int32, uint16 (default: float32)')
    parser.add_argument('--data-seed', type=int, default=42,
                        help='Seed for the synthetic data set (default: 42)')
    parser.add_argument('--cluster-std', type=float, default=1.0,
                        help='Standard deviation of the synthetic blobs (default: 1.0)')

    # Clustering options
    parser.add_argument('--clusters', type=int, default=8,
                        help='Number of clusters (default: 8)')
    parser.add_argument('--iterations', type=int, default=10,
                        help='Number of Lloyd iterations (default: 10)')
    parser.add_argument('--init', choices=['fixed', 'random'], default='fixed',
                        help='Centroid initialization method (default: fixed)')
    parser.add_argument('--init-indices', type=int, nargs='+', default=None,
                        help='Point indices for fixed initialization')
    parser.add_argument('--seed', type=int, default=0,
                        help='Seed for random initialization (default: 0)')
    parser.add_argument('--verbose', action='store_true',
                        help='Print progress information')
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = RunConfig.from_args(args)
        run_benchmark(config)
    except InvalidConfiguration as e:
        parser.error(str(e))
    return 0


if __name__ == '__main__':
    sys.exit(main())
