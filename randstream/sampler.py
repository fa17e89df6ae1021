"""
Sample generation loop.

Combines a distribution with a random generator and the post-processing
steps (exponentiation, discard bounds, cumulative accumulation) into an
iterator of values ready for encoding.
"""

import math
import warnings
import numpy as np
from typing import Iterator, Optional

from .distributions import Distribution, ConfigurationError


def fresh_seed() -> int:
    """Draw a 64-bit seed from OS entropy so an unseeded run can be replayed."""
    entropy = np.random.SeedSequence().generate_state(2, dtype=np.uint32)
    return (int(entropy[0]) << 32) | int(entropy[1])


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """
    Create the random generator that drives a run.

    Args:
        seed: Fixed seed for a reproducible stream; None seeds from OS entropy

    Returns:
        PCG64-backed numpy Generator
    """
    if seed is not None and seed < 0:
        raise ConfigurationError(f"Seed must be non-negative, got {seed}")
    return np.random.Generator(np.random.PCG64(seed))


class SampleProcessor:
    """
    Post-processes raw draws before they are emitted.

    Steps run in a fixed order: optional e**x, lower bound discard, upper
    bound discard, then cumulative accumulation.
    """

    def __init__(self,
                 exponentiate: bool = False,
                 discard_below: Optional[float] = None,
                 discard_above: Optional[float] = None,
                 cumulative: bool = False):
        self.exponentiate = exponentiate
        self.discard_below = discard_below
        self.discard_above = discard_above
        self.cumulative = cumulative
        self.accumulator = 0.0

        if (discard_below is not None and discard_above is not None
                and discard_below > discard_above):
            # Every draw is discarded, so a stream over this processor never emits
            warnings.warn(
                f"discard_below ({discard_below}) is greater than discard_above "
                f"({discard_above}); no sample can pass the filters",
                RuntimeWarning,
            )

    def process(self, x: float) -> Optional[float]:
        """
        Apply the post-processing steps to one raw draw.

        Args:
            x: Raw sample from the distribution

        Returns:
            Value to emit, or None when the sample is discarded
        """
        if self.exponentiate:
            try:
                x = math.exp(x)
            except OverflowError:
                x = math.inf

        if self.discard_below is not None and x < self.discard_below:
            return None
        if self.discard_above is not None and x > self.discard_above:
            return None

        if self.cumulative:
            self.accumulator += x
            return self.accumulator

        self.accumulator = 0.0
        return x


class SampleStream:
    """
    Iterator of processed samples.

    Discarded draws are redrawn and do not count toward ``count``. With
    ``count=None`` the stream never ends.
    """

    def __init__(self,
                 distribution: Distribution,
                 rng: np.random.Generator,
                 processor: Optional[SampleProcessor] = None,
                 count: Optional[int] = None):
        if count is not None and count < 0:
            raise ConfigurationError(f"Sample count must be non-negative, got {count}")
        self.distribution = distribution
        self.rng = rng
        self.processor = processor if processor is not None else SampleProcessor()
        self.count = count
        self.emitted = 0

    def __iter__(self) -> Iterator[float]:
        return self

    def __next__(self) -> float:
        if self.count is not None and self.emitted >= self.count:
            raise StopIteration
        value = self.draw()
        self.emitted += 1
        return value

    def draw(self) -> float:
        """Draw until a sample survives the processor's filters."""
        while True:
            value = self.processor.process(self.distribution.sample(self.rng))
            if value is not None:
                return value

