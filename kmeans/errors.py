"""
Exceptions raised by the k-means engine.
"""


class InvalidConfiguration(ValueError):
    """Raised when the engine is constructed or run with inconsistent parameters."""


class NotRunError(ValueError):
    """Raised when results are requested before :meth:`KMeans.run` was called."""
