"""
Squared Euclidean distance and the coordinate/accumulator type pairing.

Coordinates are stored in the point buffer's own dtype. Distances, sums of
squared errors and per-cluster accumulators use a wider dtype so that
squaring and summation do not overflow or lose precision.
"""

from typing import Optional

import numpy as np

from .errors import InvalidConfiguration


def accumulator_dtype(dtype) -> np.dtype:
    """Return the wide dtype used for distances and sums over ``dtype`` coordinates.

    Args:
        dtype: Coordinate dtype of the point buffer

    Returns:
        ``uint64`` for unsigned integers, ``int64`` for signed integers,
        ``float64`` for floats up to double precision and ``longdouble``
        for extended precision.
    """
    dtype = np.dtype(dtype)
    if dtype.kind == 'u':
        return np.dtype(np.uint64)
    if dtype.kind == 'i':
        return np.dtype(np.int64)
    if dtype.kind == 'f':
        if dtype.itemsize > np.dtype(np.float64).itemsize:
            return np.dtype(np.longdouble)
        return np.dtype(np.float64)
    raise InvalidConfiguration(f"Unsupported coordinate dtype: {dtype}")


def _difference(a: np.ndarray, b: np.ndarray, accum: np.dtype) -> np.ndarray:
    # Unsigned coordinates: larger minus smaller, so the subtraction never wraps.
    if a.dtype.kind == 'u' or b.dtype.kind == 'u':
        diff = np.maximum(a, b) - np.minimum(a, b)
    else:
        diff = a.astype(accum, copy=False) - b.astype(accum, copy=False)
    return diff.astype(accum, copy=False)


def squared_euclidean(a, b, accum_dtype: Optional[np.dtype] = None):
    """
    Squared Euclidean distance between two coordinate vectors.

    Args:
        a: First vector of shape (dimensions,)
        b: Second vector of shape (dimensions,)
        accum_dtype: Type the result is accumulated in. Defaults to the
            wide type paired with ``a``'s dtype.

    Returns:
        Scalar of type ``accum_dtype``
    """
    a = np.asarray(a)
    b = np.asarray(b)
    if a.shape != b.shape:
        raise ValueError(f"Shape mismatch: {a.shape} vs {b.shape}")
    accum = np.dtype(accum_dtype) if accum_dtype is not None else accumulator_dtype(a.dtype)
    diff = _difference(a, b, accum)
    return np.sum(diff * diff, dtype=accum)


def pairwise_squared_distances(
    points: np.ndarray,
    centroids: np.ndarray,
    accum_dtype: Optional[np.dtype] = None
) -> np.ndarray:
    """
    Squared distances from every point to every centroid.

    Args:
        points: Array of shape (n_points, dimensions)
        centroids: Array of shape (n_centroids, dimensions)
        accum_dtype: Type the distances are computed in

    Returns:
        Array of shape (n_points, n_centroids)
    """
    accum = np.dtype(accum_dtype) if accum_dtype is not None else accumulator_dtype(points.dtype)
    # Broadcasting: (n_points, 1, d) against (1, n_centroids, d)
    diff = _difference(points[:, np.newaxis, :], centroids[np.newaxis, :, :], accum)
    return np.sum(diff * diff, axis=2, dtype=accum)
