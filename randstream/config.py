"""
Generator configuration.

A configuration can be built directly, from a dictionary, or from a JSON
file whose keys mirror ``GeneratorConfig.to_dict()``.
"""

import json
from typing import Any, Dict, Optional, Union

from .distributions import Distribution, ConfigurationError
from .encoding import Encoder, get_format
from .sampler import SampleProcessor, SampleStream, make_rng


FIELDS = (
    "distribution",
    "precision",
    "binary_format",
    "seed",
    "count",
    "exponentiate",
    "discard_below",
    "discard_above",
    "cumulative",
)


class GeneratorConfig:
    """Configuration for one generation run."""

    def __init__(self,
                 distribution: Union[Distribution, str],
                 precision: int = 10,
                 binary_format: Optional[str] = None,
                 seed: Optional[int] = None,
                 count: Optional[int] = None,
                 exponentiate: bool = False,
                 discard_below: Optional[float] = None,
                 discard_above: Optional[float] = None,
                 cumulative: bool = False):
        if isinstance(distribution, str):
            distribution = Distribution.from_string(distribution)
        self.distribution = distribution
        self.precision = precision
        self.binary_format = binary_format
        self.seed = seed
        self.count = count
        self.exponentiate = exponentiate
        self.discard_below = discard_below
        self.discard_above = discard_above
        self.cumulative = cumulative
        self.validate()

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "GeneratorConfig":
        """Create configuration from dictionary."""
        unknown = set(config_dict) - set(FIELDS)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        if "distribution" not in config_dict:
            raise ConfigurationError("Configuration must name a distribution")
        return cls(**config_dict)

    @classmethod
    def from_file(cls, config_path: str) -> "GeneratorConfig":
        """Load configuration from JSON file."""
        with open(config_path, 'r') as f:
            try:
                config_dict = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Invalid configuration file {config_path}: {e}") from e
        if not isinstance(config_dict, dict):
            raise ConfigurationError(f"Configuration file {config_path} must hold a JSON object")
        return cls.from_dict(config_dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "distribution": self.distribution.to_string(),
            "precision": self.precision,
            "binary_format": self.binary_format,
            "seed": self.seed,
            "count": self.count,
            "exponentiate": self.exponentiate,
            "discard_below": self.discard_below,
            "discard_above": self.discard_above,
            "cumulative": self.cumulative,
        }

    def validate(self) -> bool:
        """Check generator-level settings; distribution parameters are checked on construction."""
        if not isinstance(self.distribution, Distribution):
            raise ConfigurationError(f"Not a distribution: {self.distribution!r}")
        if not isinstance(self.precision, int) or self.precision < 0:
            raise ConfigurationError(f"Precision must be a non-negative integer, got {self.precision!r}")
        if self.binary_format is not None:
            get_format(self.binary_format)
        if self.seed is not None and (not isinstance(self.seed, int) or self.seed < 0):
            raise ConfigurationError(f"Seed must be a non-negative integer, got {self.seed!r}")
        if self.count is not None and (not isinstance(self.count, int) or self.count < 0):
            raise ConfigurationError(f"Count must be a non-negative integer, got {self.count!r}")
        for key in ("discard_below", "discard_above"):
            value = getattr(self, key)
            if value is not None and (isinstance(value, bool) or not isinstance(value, (int, float))):
                raise ConfigurationError(f"{key} must be a number, got {value!r}")
        for key in ("exponentiate", "cumulative"):
            if not isinstance(getattr(self, key), bool):
                raise ConfigurationError(f"{key} must be true or false, got {getattr(self, key)!r}")
        return True

    def build_stream(self) -> SampleStream:
        """Wire generator, processor and distribution into a sample stream."""
        processor = SampleProcessor(
            exponentiate=self.exponentiate,
            discard_below=self.discard_below,
            discard_above=self.discard_above,
            cumulative=self.cumulative,
        )
        return SampleStream(self.distribution, make_rng(self.seed), processor, self.count)

    def build_encoder(self) -> Encoder:
        return Encoder(self.precision, self.binary_format)
