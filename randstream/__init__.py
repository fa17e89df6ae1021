"""
Random sample stream generator.

This package draws independent samples from a selectable distribution
family, post-processes them (exponentiation, discard bounds, random walk)
and encodes them as text lines or fixed-width binary values.
"""

from .distributions import (
    ConfigurationError,
    Distribution,
    Uniform,
    Normal,
    Cauchy,
    Triangular,
    StudentT,
    Empirical,
    Categorical,
)
from .stable import Stable, StableParams
from .sampler import SampleProcessor, SampleStream, make_rng, fresh_seed
from .encoding import BINARY_FORMATS, BinaryFormat, Encoder, encode_binary, encode_text
from .writer import SampleWriter, write_samples
from .config import GeneratorConfig

__all__ = [
    'ConfigurationError',
    'Distribution',
    'Uniform',
    'Normal',
    'Cauchy',
    'Triangular',
    'StudentT',
    'Empirical',
    'Categorical',
    'Stable',
    'StableParams',
    'SampleProcessor',
    'SampleStream',
    'make_rng',
    'fresh_seed',
    'BINARY_FORMATS',
    'BinaryFormat',
    'Encoder',
    'encode_binary',
    'encode_text',
    'SampleWriter',
    'write_samples',
    'GeneratorConfig',
]
