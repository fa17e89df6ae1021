"""
General stable distribution sampled with the Chambers-Mallows-Stuck method.

Each sample consumes exactly one uniform angle and one unit exponential
draw. Stability values within ALPHA_ONE_TOLERANCE of 1 use the limiting
form of the transform, which avoids the removable singularity at alpha = 1.
"""

import math
import numpy as np
from typing import List, NamedTuple

from .distributions import Distribution, ConfigurationError, _params_pattern, _check_finite


ALPHA_ONE_TOLERANCE = 0.001

HALF_PI = math.pi / 2
# Keeps cos(u) away from zero at the lower end of the angle range
ANGLE_LOW = -HALF_PI + 3 * float(np.finfo(np.float64).eps)
ANGLE_HIGH = HALF_PI


class StableParams(NamedTuple):
    """Constants derived once from (location, scale, alpha, beta)."""

    location: float
    scale: float
    alpha: float
    beta: float
    near_one: bool
    xi: float = 0.0
    alpha_inv: float = 0.0
    alpha2: float = 0.0


def _general_params(location: float, scale: float, alpha: float, beta: float) -> StableParams:
    zeta = -beta * math.tan(math.pi * alpha / 2)
    return StableParams(
        location=location,
        scale=scale * (zeta * zeta + 1) ** (1 / (2 * alpha)),
        alpha=alpha,
        beta=beta,
        near_one=False,
        xi=math.atan(-zeta) / alpha,
        alpha_inv=1 / alpha,
        alpha2=(1 - alpha) / alpha,
    )


def _near_one_params(location: float, scale: float, alpha: float, beta: float) -> StableParams:
    return StableParams(
        location=location + (2 / math.pi) * beta * scale * math.log(scale),
        scale=scale * (2 / math.pi),
        alpha=alpha,
        beta=beta,
        near_one=True,
    )


class Stable(Distribution):
    """Stable distribution: stable(location,scale,alpha,beta)"""

    name = "stable"
    validation_pattern = _params_pattern("stable", 4)

    def __init__(self, location: float = 0.0, scale: float = 1.0, alpha: float = 2.0, beta: float = 0.0):
        _check_finite(self.name, location=location, scale=scale, alpha=alpha, beta=beta)
        if scale <= 0:
            raise ConfigurationError(f"stable: scale must be positive, got {scale}")
        if not 0 < alpha <= 2:
            raise ConfigurationError(f"stable: alpha must lie in (0, 2], got {alpha}")
        if not -1 <= beta <= 1:
            raise ConfigurationError(f"stable: beta must lie in [-1, 1], got {beta}")

        self.location = float(location)
        self.scale = float(scale)
        self.alpha = float(alpha)
        self.beta = float(beta)

        if abs(self.alpha - 1.0) <= ALPHA_ONE_TOLERANCE:
            self.params = _near_one_params(self.location, self.scale, self.alpha, self.beta)
        else:
            self.params = _general_params(self.location, self.scale, self.alpha, self.beta)

    def sample(self, rng: np.random.Generator) -> float:
        u = float(rng.uniform(ANGLE_LOW, ANGLE_HIGH))
        w = float(rng.standard_exponential())
        return self.transform(u, w)

    def transform(self, u: float, w: float) -> float:
        """
        Map one uniform angle and one exponential variate to a stable sample.

        Args:
            u: Angle in [-pi/2 + 3*eps, pi/2)
            w: Unit-rate exponential variate

        Returns:
            The stable sample
        """
        p = self.params
        u = np.float64(u)
        w = np.float64(w)
        with np.errstate(all="ignore"):
            if p.near_one:
                shifted = HALF_PI + p.beta * u
                result = p.location + p.scale * (
                    shifted * np.tan(u)
                    - p.beta * np.log((HALF_PI * w * np.cos(u)) / shifted)
                )
            else:
                angle = p.alpha * (u + p.xi)
                result = (
                    p.location
                    + p.scale
                    * np.sin(angle)
                    / np.power(np.cos(u), p.alpha_inv)
                    * np.power(np.cos(u - angle) / w, p.alpha2)
                )
        return float(result)

    def to_string(self) -> str:
        return f"stable({self.location!r},{self.scale!r},{self.alpha!r},{self.beta!r})"

    @classmethod
    def parse(cls, params: List[str]) -> "Stable":
        location, scale, alpha, beta = map(float, params)
        return cls(location, scale, alpha, beta)
