"""
Lloyd's k-means clustering over flat point buffers.
"""

from .distance import accumulator_dtype, pairwise_squared_distances, squared_euclidean
from .errors import InvalidConfiguration, NotRunError
from .init import DEFAULT_INIT_INDICES, InitStrategy
from .kmeans import KMeans
from .version import __version__

__all__ = [
    "KMeans",
    "InitStrategy",
    "DEFAULT_INIT_INDICES",
    "InvalidConfiguration",
    "NotRunError",
    "squared_euclidean",
    "pairwise_squared_distances",
    "accumulator_dtype",
]
