"""
Lloyd's k-means clustering over a flat point buffer.
Runs a fixed number of refinement iterations and reports SSE and runtime.
"""

import numbers
import sys
import time
from typing import List, Optional, Sequence, Union

import numpy as np

from .distance import accumulator_dtype, pairwise_squared_distances
from .errors import InvalidConfiguration, NotRunError
from .init import (
    DEFAULT_INIT_INDICES,
    InitStrategy,
    check_fixed_indices,
    check_random_state,
    init_centroids,
    random_indices,
)


def _check_count(name: str, value, minimum: int = 1) -> int:
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Integral):
        raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")
    value = int(value)
    if value < minimum:
        raise InvalidConfiguration(f"{name} must be >= {minimum}, got {value}")
    return value


class KMeans:
    """
    Lloyd's k-means over a caller-owned buffer of ``size * dimensions`` values.

    The engine keeps a read-only view of the point buffer; it never copies or
    modifies the caller's data when the buffer is already a contiguous numpy
    array. The buffer must stay alive and unchanged for the duration of every
    :meth:`run`.

    Features:
    - Deterministic initialization (fixed index list or seeded sampling)
    - Exactly ``iterations`` assignment/update passes, no early stopping
    - Wide accumulator type for distances and sums
    - Empty clusters keep their previous centroid
    - SSE and runtime reporting
    """

    def __init__(
        self,
        points,
        size: int,
        dimensions: int,
        n_clusters: int,
        init: Union[str, InitStrategy] = InitStrategy.FIXED,
        init_indices: Optional[Sequence[int]] = None,
        random_state: Optional[Union[int, np.random.Generator]] = None,
        accum_dtype=None,
        chunk_size: int = 4096,
        verbose: bool = False
    ):
        """
        Bind the engine to a point buffer and allocate its working buffers.

        Args:
            points: Flat buffer of ``size * dimensions`` coordinates (a
                ``(size, dimensions)`` array is accepted as well)
            size: Number of points
            dimensions: Coordinates per point
            n_clusters: Number of clusters
            init: Initialization method ('fixed' or 'random')
            init_indices: Point indices for 'fixed' initialization.
                Defaults to ``DEFAULT_INIT_INDICES``.
            random_state: Seed or ``numpy.random.Generator`` for 'random'
                initialization. Defaults to a fixed seed.
            accum_dtype: Type for distances and accumulated sums. Defaults to
                the wide type paired with the point dtype.
            chunk_size: Points per vectorized block in distance passes
            verbose: Whether to print progress information

        Raises:
            InvalidConfiguration: if any parameter is inconsistent
        """
        self.size = _check_count('size', size)
        self.dimensions = _check_count('dimensions', dimensions)
        self.n_clusters = _check_count('n_clusters', n_clusters)
        self.chunk_size = _check_count('chunk_size', chunk_size)
        if self.n_clusters > self.size:
            raise InvalidConfiguration(
                f"n_clusters ({self.n_clusters}) exceeds the number of points ({self.size})"
            )

        self._points = self._bind_points(points)

        if accum_dtype is None:
            self._accum_dtype = accumulator_dtype(self._points.dtype)
        else:
            self._accum_dtype = self._check_accum_dtype(accum_dtype)

        self.init = InitStrategy.parse(init)
        self.random_state = random_state
        self._fixed_indices = None
        if self.init is InitStrategy.FIXED:
            indices = DEFAULT_INIT_INDICES if init_indices is None else init_indices
            self._fixed_indices = check_fixed_indices(indices, self.n_clusters, self.size)
        else:
            if init_indices is not None:
                raise InvalidConfiguration("init_indices is only used with 'fixed' initialization")
            self.random_state = check_random_state(random_state)
        self.verbose = verbose

        # Working buffers, allocated once per engine
        self._centroids = np.zeros((self.n_clusters, self.dimensions), dtype=self._points.dtype)
        self._accumulators = np.zeros((self.n_clusters, self.dimensions), dtype=self._accum_dtype)
        self._counts = np.zeros(self.n_clusters, dtype=np.int64)

        # Results
        self.labels_ = None
        self.init_indices_ = None
        self.counts_history_: List[np.ndarray] = []
        self.n_iter_ = None
        self._duration_us = None

    def _bind_points(self, points) -> np.ndarray:
        """Return a read-only ``(size, dimensions)`` view of the point buffer."""
        if points is None:
            raise InvalidConfiguration("Point buffer must not be None")
        buffer = np.asarray(points)
        if buffer.size == 0:
            raise InvalidConfiguration("Point buffer is empty")
        if buffer.dtype.kind not in 'iuf':
            raise InvalidConfiguration(f"Unsupported coordinate dtype: {buffer.dtype}")
        expected = self.size * self.dimensions
        if buffer.size != expected:
            raise InvalidConfiguration(
                f"Point buffer holds {buffer.size} values, expected "
                f"{self.size} x {self.dimensions} = {expected}"
            )
        if buffer.ndim != 1 and buffer.shape != (self.size, self.dimensions):
            raise InvalidConfiguration(
                f"Point buffer must be flat or shaped ({self.size}, {self.dimensions}), "
                f"got {buffer.shape}"
            )
        view = buffer.reshape(self.size, self.dimensions).view()
        view.flags.writeable = False
        return view

    def _check_accum_dtype(self, accum_dtype) -> np.dtype:
        """Accept an accumulator type at least as wide as the coordinates and of a compatible kind."""
        try:
            accum = np.dtype(accum_dtype)
        except TypeError:
            raise InvalidConfiguration(f"Unknown accumulator dtype: {accum_dtype!r}") from None
        coords = self._points.dtype
        if accum.kind not in 'iuf':
            raise InvalidConfiguration(f"Unsupported accumulator dtype: {accum}")
        if coords.kind == 'f' and accum.kind != 'f':
            raise InvalidConfiguration(f"Accumulator {accum} would truncate {coords} coordinates")
        if coords.kind == 'i' and accum.kind == 'u':
            raise InvalidConfiguration(f"Accumulator {accum} cannot hold signed {coords} coordinates")
        if accum.itemsize < coords.itemsize:
            raise InvalidConfiguration(f"Accumulator {accum} is narrower than {coords} coordinates")
        return accum

    def _initial_indices(self) -> np.ndarray:
        if self.init is InitStrategy.FIXED:
            return self._fixed_indices
        return random_indices(self.n_clusters, self.size, self.random_state)

    def _assignment(self) -> np.ndarray:
        """Label every point with its nearest centroid and accumulate its coordinates."""
        labels = np.empty(self.size, dtype=np.intp)
        for start in range(0, self.size, self.chunk_size):
            block = self._points[start:start + self.chunk_size]
            distances = pairwise_squared_distances(block, self._centroids, self._accum_dtype)
            # argmin returns the first minimum, so ties go to the lowest cluster index
            block_labels = np.argmin(distances, axis=1)
            # Unbuffered, applied in point order
            np.add.at(self._accumulators, block_labels, block.astype(self._accum_dtype))
            labels[start:start + len(block)] = block_labels
        self._counts += np.bincount(labels, minlength=self.n_clusters)
        return labels

    def _update(self) -> None:
        """Move every non-empty cluster's centroid to the mean of its points."""
        assigned = self._counts > 0
        sums = self._accumulators[assigned]
        counts = self._counts[assigned].astype(self._accum_dtype)[:, np.newaxis]
        if self._accum_dtype.kind == 'f':
            means = sums / counts
        elif self._accum_dtype.kind == 'u':
            means = sums // counts
        else:
            # Integer mean truncated toward zero
            means = np.sign(sums) * (np.abs(sums) // counts)
        self._centroids[assigned] = means.astype(self._centroids.dtype)

    def run(self, iterations: int) -> 'KMeans':
        """
        Initialize the centroids and run ``iterations`` Lloyd iterations.

        Calling ``run`` again starts over from a fresh initialization.

        Args:
            iterations: Number of assignment/update passes (0 only initializes)

        Returns:
            self
        """
        iterations = _check_count('iterations', iterations, minimum=0)

        indices = self._initial_indices()
        init_centroids(self._points, indices, self._centroids)
        self.init_indices_ = np.array(indices, copy=True)
        self._accumulators.fill(0)
        self._counts.fill(0)
        self.counts_history_ = []
        self.labels_ = None

        if self.verbose:
            print(f"Running K-means with {self.n_clusters} clusters on {self.size} points "
                  f"({self.dimensions} dims) for {iterations} iterations...")

        start_time = time.perf_counter()
        for iteration in range(iterations):
            self._accumulators.fill(0)
            self._counts.fill(0)
            self.labels_ = self._assignment()
            self._update()
            self.counts_history_.append(self._counts.copy())

            if self.verbose and (iteration + 1) % 10 == 0:
                print(f"Iteration {iteration + 1}, empty clusters: {int(np.sum(self._counts == 0))}")
        end_time = time.perf_counter()

        self._duration_us = (end_time - start_time) * 1e6
        self.n_iter_ = iterations

        if self.verbose:
            print(f"Completed in {self._duration_us:.0f} us")

        return self

    def _check_run(self) -> None:
        if self.n_iter_ is None:
            raise NotRunError("Model must be run before results are available")

    def get_sse(self):
        """
        Sum of squared distances from every point to its nearest current centroid.

        Recomputed from scratch on every call; engine state is not modified.

        Returns:
            SSE as a scalar of the accumulator type
        """
        self._check_run()
        sse = self._accum_dtype.type(0)
        for start in range(0, self.size, self.chunk_size):
            block = self._points[start:start + self.chunk_size]
            distances = pairwise_squared_distances(block, self._centroids, self._accum_dtype)
            sse = sse + np.min(distances, axis=1).sum(dtype=self._accum_dtype)
        return sse

    get_quality = get_sse

    @property
    def inertia_(self):
        return self.get_sse()

    def get_runtime(self) -> float:
        """Elapsed microseconds of the last run's iteration loop (initialization excluded)."""
        self._check_run()
        return self._duration_us

    @property
    def cluster_centers_(self) -> np.ndarray:
        self._check_run()
        return self._centroids.copy()

    @property
    def assignment_counts_(self) -> np.ndarray:
        """Points per cluster in the last iteration (all zero after ``run(0)``)."""
        self._check_run()
        return self._counts.copy()

    def dump_centroids(self) -> List[List]:
        """Centroid coordinates as nested lists, cluster order then dimension order."""
        self._check_run()
        return self._centroids.tolist()

    def format_centroids(self) -> str:
        lines = ["Centroids:"]
        for c, centroid in enumerate(self.dump_centroids()):
            lines.append(f"centroid[{c}]: " + "".join(f" {value}" for value in centroid))
        return "\n".join(lines)

    def print_centroids(self, file=None) -> None:
        print(self.format_centroids(), file=file if file is not None else sys.stdout)

    def predict(self, X) -> np.ndarray:
        """
        Predict cluster labels for new data.

        Args:
            X: Flat buffer with ``dimensions`` values per point, or an array
                of shape (n_samples, dimensions). Values are cast to the
                coordinate dtype.

        Returns:
            Cluster labels
        """
        self._check_run()
        X = np.asarray(X)
        if X.ndim == 1:
            if X.size % self.dimensions:
                raise ValueError(
                    f"Flat input of {X.size} values is not a multiple of {self.dimensions} dimensions"
                )
            X = X.reshape(-1, self.dimensions)
        elif X.ndim != 2 or X.shape[1] != self.dimensions:
            raise ValueError(f"Expected shape (n_samples, {self.dimensions}), got {X.shape}")
        X = X.astype(self._centroids.dtype, copy=False)

        labels = np.empty(len(X), dtype=np.intp)
        for start in range(0, len(X), self.chunk_size):
            block = X[start:start + self.chunk_size]
            distances = pairwise_squared_distances(block, self._centroids, self._accum_dtype)
            labels[start:start + len(block)] = np.argmin(distances, axis=1)
        return labels

    def get_cluster_info(self) -> dict:
        """Get information about the clustering results."""
        self._check_run()

        if self.n_iter_ > 0:
            cluster_sizes = self._counts.copy()
        else:
            cluster_sizes = np.bincount(self.predict(self._points), minlength=self.n_clusters)

        return {
            'n_clusters': self.n_clusters,
            'sse': self.get_sse(),
            'n_iterations': self.n_iter_,
            'runtime_us': self._duration_us,
            'cluster_sizes': dict(enumerate(cluster_sizes.tolist())),
            'avg_cluster_size': np.mean(cluster_sizes),
            'std_cluster_size': np.std(cluster_sizes),
            'min_cluster_size': np.min(cluster_sizes),
            'max_cluster_size': np.max(cluster_sizes),
            'empty_clusters': int(np.sum(cluster_sizes == 0))
        }
