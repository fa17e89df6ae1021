"""
Distribution definitions for sample generation.

Every distribution family exposes the same single capability, drawing one
real-valued sample from a numpy random generator, so the generation loop
never needs to know which family it is driving.
"""

import math
import re
import numpy as np
from abc import ABC, abstractmethod
from typing import Dict, List, Sequence, Type


NUMBER_PATTERN = r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?"


def _params_pattern(name: str, count: int) -> str:
    """Regex for ``name(a,b,...)`` with exactly ``count`` numeric arguments."""
    args = r"\s*,\s*".join([NUMBER_PATTERN] * count)
    return rf"^{re.escape(name)}\(\s*{args}\s*\)$"


def _list_pattern(name: str) -> str:
    """Regex for ``name(a,b,...)`` with one or more numeric arguments."""
    return rf"^{re.escape(name)}\(\s*{NUMBER_PATTERN}(?:\s*,\s*{NUMBER_PATTERN})*\s*\)$"


class ConfigurationError(ValueError):
    """Raised when a distribution or generator is built from invalid parameters."""


class Distribution(ABC):
    """
    Abstract base class for all distribution families.

    Subclasses register themselves under their ``name`` so they can be
    built from strings like ``"normal(0,1)"``. Instances validate their
    parameters on construction and are never mutated afterwards.
    """

    _registry: Dict[str, Type["Distribution"]] = {}
    name: str
    validation_pattern: str

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._registry[cls.name] = cls

    @abstractmethod
    def sample(self, rng: np.random.Generator) -> float:
        """
        Draw one sample.

        Args:
            rng: Random generator; advanced by a family-specific number of draws

        Returns:
            The sample as a float
        """
        pass

    @abstractmethod
    def to_string(self) -> str:
        """Convert distribution back to string representation."""
        pass

    @classmethod
    @abstractmethod
    def parse(cls, params: List[str]) -> "Distribution":
        """Build the distribution from its positional parameter strings."""
        pass

    @classmethod
    def names(cls) -> List[str]:
        return sorted(cls._registry)

    @classmethod
    def from_string(cls, spec_str: str) -> "Distribution":
        """
        Factory method to create a distribution from a string.

        Args:
            spec_str: String like "uniform(0,1)" or "stable(0,1,1.5,0)"

        Returns:
            Distribution instance
        """
        spec_str = spec_str.strip()
        cls.validate(spec_str)
        name = spec_str[:spec_str.index("(")]
        params_str = spec_str[len(name):].strip("()")
        params = [p.strip() for p in params_str.split(",")]
        return cls._registry[name].parse(params)

    @classmethod
    def validate(cls, spec_str: str) -> bool:
        """Validate distribution string format."""
        if not spec_str:
            raise ConfigurationError("Distribution string cannot be empty")

        name = spec_str.split("(", 1)[0].strip()
        if name not in cls._registry:
            raise ConfigurationError(f"Unknown distribution: {name}")

        pattern = cls._registry[name].validation_pattern
        if not re.match(pattern, spec_str):
            raise ConfigurationError(f"Invalid distribution format: {spec_str}")

        return True

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.to_string()}>"


def _check_finite(family: str, **values: float) -> None:
    for key, value in values.items():
        if not math.isfinite(value):
            raise ConfigurationError(f"{family}: {key} must be finite, got {value}")


class Uniform(Distribution):
    """Uniform distribution on [min, max), or [min, max] when inclusive."""

    name = "uniform"
    validation_pattern = rf"^uniform\(\s*{NUMBER_PATTERN}\s*,\s*{NUMBER_PATTERN}(?:\s*,\s*inclusive)?\s*\)$"

    # 53 bits is the full mantissa of a double
    _INCLUSIVE_STEPS = 2 ** 53

    def __init__(self, min: float, max: float, inclusive: bool = False):
        _check_finite(self.name, min=min, max=max)
        if not math.isfinite(max - min):
            raise ConfigurationError(f"uniform: range from {min} to {max} is too wide to sample")
        if inclusive:
            if max < min:
                raise ConfigurationError(f"uniform: max ({max}) must be >= min ({min})")
        elif max <= min:
            raise ConfigurationError(f"uniform: max ({max}) must be > min ({min})")
        self.min = float(min)
        self.max = float(max)
        self.inclusive = inclusive

    def sample(self, rng: np.random.Generator) -> float:
        if self.inclusive:
            k = rng.integers(0, self._INCLUSIVE_STEPS, endpoint=True)
            return self.min + (self.max - self.min) * (int(k) / self._INCLUSIVE_STEPS)
        x = float(rng.uniform(self.min, self.max))
        # uniform() can round up to max for some spans; keep the bound exclusive
        return x if x < self.max else self.min

    def to_string(self) -> str:
        suffix = ",inclusive" if self.inclusive else ""
        return f"uniform({self.min!r},{self.max!r}{suffix})"

    @classmethod
    def parse(cls, params: List[str]) -> "Uniform":
        min_value, max_value = map(float, params[:2])
        return cls(min_value, max_value, inclusive=len(params) == 3)


class Normal(Distribution):
    """Normal distribution: normal(mean,stddev)"""

    name = "normal"
    validation_pattern = _params_pattern("normal", 2)

    def __init__(self, mean: float, stddev: float):
        _check_finite(self.name, mean=mean, stddev=stddev)
        if stddev <= 0:
            raise ConfigurationError(f"normal: stddev must be positive, got {stddev}")
        self.mean = float(mean)
        self.stddev = float(stddev)

    def sample(self, rng: np.random.Generator) -> float:
        return float(rng.normal(self.mean, self.stddev))

    def to_string(self) -> str:
        return f"normal({self.mean!r},{self.stddev!r})"

    @classmethod
    def parse(cls, params: List[str]) -> "Normal":
        mean, stddev = map(float, params)
        return cls(mean, stddev)


class Cauchy(Distribution):
    """Cauchy distribution: cauchy(median,scale)"""

    name = "cauchy"
    validation_pattern = _params_pattern("cauchy", 2)

    def __init__(self, median: float, scale: float):
        _check_finite(self.name, median=median, scale=scale)
        if scale <= 0:
            raise ConfigurationError(f"cauchy: scale must be positive, got {scale}")
        self.median = float(median)
        self.scale = float(scale)

    def sample(self, rng: np.random.Generator) -> float:
        return self.median + self.scale * float(rng.standard_cauchy())

    def to_string(self) -> str:
        return f"cauchy({self.median!r},{self.scale!r})"

    @classmethod
    def parse(cls, params: List[str]) -> "Cauchy":
        median, scale = map(float, params)
        return cls(median, scale)


class Triangular(Distribution):
    """Triangular distribution: triangular(min,max,mode)"""

    name = "triangular"
    validation_pattern = _params_pattern("triangular", 3)

    def __init__(self, min: float, max: float, mode: float):
        _check_finite(self.name, min=min, max=max, mode=mode)
        if not min < max:
            raise ConfigurationError(f"triangular: max ({max}) must be > min ({min})")
        if not min <= mode <= max:
            raise ConfigurationError(f"triangular: mode ({mode}) must lie in [{min}, {max}]")
        self.min = float(min)
        self.max = float(max)
        self.mode = float(mode)

    def sample(self, rng: np.random.Generator) -> float:
        return float(rng.triangular(self.min, self.mode, self.max))

    def to_string(self) -> str:
        return f"triangular({self.min!r},{self.max!r},{self.mode!r})"

    @classmethod
    def parse(cls, params: List[str]) -> "Triangular":
        min_value, max_value, mode = map(float, params)
        return cls(min_value, max_value, mode)


class StudentT(Distribution):
    """Student's t distribution: student-t(freedom)"""

    name = "student-t"
    validation_pattern = _params_pattern("student-t", 1)

    def __init__(self, freedom: float):
        _check_finite(self.name, freedom=freedom)
        if not freedom > 0:
            raise ConfigurationError(f"student-t: degrees of freedom must be positive, got {freedom}")
        self.freedom = float(freedom)

    def sample(self, rng: np.random.Generator) -> float:
        return float(rng.standard_t(self.freedom))

    def to_string(self) -> str:
        return f"student-t({self.freedom!r})"

    @classmethod
    def parse(cls, params: List[str]) -> "StudentT":
        (freedom,) = map(float, params)
        return cls(freedom)


class Empirical(Distribution):
    """
    Empirical distribution built from observed data points.

    Samples invert the piecewise-linear empirical CDF of the sorted data,
    so values between neighbouring points can be produced, not only the
    points themselves. A single point is a point mass.
    """

    name = "empirical"
    validation_pattern = _list_pattern("empirical")

    def __init__(self, data: Sequence[float]):
        if len(data) == 0:
            raise ConfigurationError("empirical: at least one data point is required")
        points = np.sort(np.asarray(data, dtype=np.float64))
        if not np.all(np.isfinite(points)):
            raise ConfigurationError("empirical: data points must be finite")
        points.setflags(write=False)
        self.data = points

    def sample(self, rng: np.random.Generator) -> float:
        return float(np.quantile(self.data, rng.random()))

    def to_string(self) -> str:
        return "empirical(" + ",".join(repr(float(x)) for x in self.data) + ")"

    @classmethod
    def parse(cls, params: List[str]) -> "Empirical":
        return cls([float(p) for p in params])


class Categorical(Distribution):
    """
    Weighted choice among categories 0..n-1.

    Weights need not sum to one; the chosen index is returned as a float.
    """

    name = "categorical"
    validation_pattern = _list_pattern("categorical")

    def __init__(self, weights: Sequence[float]):
        if len(weights) == 0:
            raise ConfigurationError("categorical: at least one weight is required")
        raw = np.asarray(weights, dtype=np.float64)
        if not np.all(np.isfinite(raw)) or np.any(raw < 0):
            raise ConfigurationError("categorical: weights must be finite and non-negative")
        peak = raw.max()
        if peak <= 0:
            raise ConfigurationError("categorical: weights must not all be zero")
        self.weights = tuple(float(w) for w in raw)
        # Scale by the largest weight first so the sum cannot overflow
        scaled = raw / peak
        self._probabilities = scaled / scaled.sum()

    def sample(self, rng: np.random.Generator) -> float:
        return float(rng.choice(len(self._probabilities), p=self._probabilities))

    def to_string(self) -> str:
        return "categorical(" + ",".join(repr(w) for w in self.weights) + ")"

    @classmethod
    def parse(cls, params: List[str]) -> "Categorical":
        return cls([float(p) for p in params])
