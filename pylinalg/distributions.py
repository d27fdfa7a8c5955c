"""
Distribution adapters.

ScipyDistribution turns any frozen scipy.stats distribution into a
Distribution usable by builder.random_matrix / builder.random_vector.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from pylinalg.core.exceptions import ValidationError
from pylinalg.core.validation import check_not_none


class ScipyDistribution:
    """
    Draws scalars from a frozen scipy.stats distribution.

    Args:
        distribution: Frozen distribution, e.g. scipy.stats.norm(0, 1)
        rng: numpy Generator, integer seed, or None for fresh entropy

    Example:
        >>> from scipy import stats
        >>> normal = ScipyDistribution(stats.norm(loc=0, scale=1), rng=42)
        >>> m = builder.random_matrix(3, 3, normal)
    """

    def __init__(self, distribution: Any, rng: np.random.Generator | int | None = None):
        check_not_none(distribution, "distribution")
        if not hasattr(distribution, "rvs"):
            raise ValidationError(
                f"distribution: expected a frozen scipy.stats distribution, "
                f"got {type(distribution).__name__}"
            )
        self.distribution = distribution
        self.rng = rng if isinstance(rng, np.random.Generator) else np.random.default_rng(rng)

    def sample(self) -> Any:
        return self.distribution.rvs(random_state=self.rng)

    def samples(self, size: int) -> np.ndarray:
        """size draws as a 1-D array."""
        return np.asarray(self.distribution.rvs(size=size, random_state=self.rng))

    def __repr__(self) -> str:
        dist = self.distribution
        name = getattr(getattr(dist, "dist", None), "name", type(dist).__name__)
        return f"ScipyDistribution({name})"
