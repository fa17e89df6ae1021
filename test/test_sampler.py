"""
Tests for the post-processor and the sample stream.
"""

import itertools
import math

import numpy as np
import pytest

from randstream.distributions import ConfigurationError, Normal, Uniform
from randstream.sampler import SampleProcessor, SampleStream, fresh_seed, make_rng


class TestRandomSource:
    """Test generator construction."""

    def test_same_seed_same_stream(self):
        a = make_rng(99)
        b = make_rng(99)

        assert a.random(10).tolist() == b.random(10).tolist()

    def test_rejects_negative_seed(self):
        with pytest.raises(ConfigurationError):
            make_rng(-1)

    def test_fresh_seed_is_64_bit(self):
        seeds = {fresh_seed() for _ in range(5)}

        assert all(0 <= s < 2 ** 64 for s in seeds)
        assert len(seeds) > 1


class TestSampleProcessor:
    """Test the post-processing steps and their order."""

    def test_passthrough(self):
        p = SampleProcessor()

        assert p.process(-3.25) == -3.25

    def test_exponentiate(self):
        p = SampleProcessor(exponentiate=True)

        assert p.process(0.0) == 1.0
        assert p.process(1.0) == pytest.approx(math.e)

    def test_exponentiate_overflow_is_infinite(self):
        p = SampleProcessor(exponentiate=True)

        assert p.process(1000.0) == math.inf

    def test_bounds_apply_after_exponentiation(self):
        p = SampleProcessor(exponentiate=True, discard_below=1.0)

        assert p.process(-0.5) is None
        assert p.process(0.5) == pytest.approx(math.exp(0.5))

    def test_discard_bounds_are_inclusive_of_limits(self):
        p = SampleProcessor(discard_below=0.0, discard_above=10.0)

        assert p.process(0.0) == 0.0
        assert p.process(10.0) == 10.0
        assert p.process(-0.001) is None
        assert p.process(10.001) is None

    def test_cumulative_accumulates(self):
        p = SampleProcessor(cumulative=True)

        assert p.process(1.5) == 1.5
        assert p.process(2.0) == 3.5
        assert p.process(-4.0) == -0.5
        assert p.accumulator == -0.5

    def test_discarded_samples_do_not_accumulate(self):
        p = SampleProcessor(discard_above=5.0, cumulative=True)

        p.process(2.0)
        assert p.process(50.0) is None
        assert p.accumulator == 2.0

    def test_accumulator_reset_without_cumulative(self):
        p = SampleProcessor()
        p.accumulator = 12.0

        p.process(1.0)

        assert p.accumulator == 0.0

    def test_inverted_bounds_warn(self):
        with pytest.warns(RuntimeWarning):
            SampleProcessor(discard_below=5.0, discard_above=1.0)


class TestSampleStream:
    """Test the generation loop."""

    def test_count_bounds_the_stream(self, rng):
        stream = SampleStream(Normal(0.0, 1.0), rng, count=25)

        assert len(list(stream)) == 25
        assert stream.emitted == 25

    def test_zero_count_is_empty(self, rng):
        assert list(SampleStream(Normal(0.0, 1.0), rng, count=0)) == []

    def test_rejects_negative_count(self, rng):
        with pytest.raises(ConfigurationError):
            SampleStream(Normal(0.0, 1.0), rng, count=-1)

    def test_unbounded_stream(self, rng):
        stream = SampleStream(Normal(0.0, 1.0), rng)

        assert len(list(itertools.islice(stream, 1000))) == 1000

    def test_discard_filters_hold(self, rng):
        processor = SampleProcessor(discard_below=0.0, discard_above=10.0)
        samples = list(SampleStream(Normal(5.0, 1.0), rng, processor, count=5000))

        assert all(0.0 <= x <= 10.0 for x in samples)

    def test_discards_do_not_count(self, rng):
        processor = SampleProcessor(discard_below=5.0)
        samples = list(SampleStream(Normal(5.0, 1.0), rng, processor, count=2000))

        assert len(samples) == 2000
        assert min(samples) >= 5.0

    def test_cumulative_is_running_sum(self):
        d = Uniform(-1.0, 1.0)
        raw_rng = make_rng(7)
        raw = [d.sample(raw_rng) for _ in range(200)]

        processor = SampleProcessor(cumulative=True)
        walk = list(SampleStream(d, make_rng(7), processor, count=200))

        assert walk == list(itertools.accumulate(raw))

    def test_cumulative_sums_post_filter_samples(self):
        d = Normal(0.0, 1.0)
        raw_rng = make_rng(11)
        kept = []
        while len(kept) < 100:
            x = math.exp(d.sample(raw_rng))
            if x <= 2.0:
                kept.append(x)

        processor = SampleProcessor(exponentiate=True, discard_above=2.0, cumulative=True)
        walk = list(SampleStream(d, make_rng(11), processor, count=100))

        assert walk == list(itertools.accumulate(kept))

    def test_determinism(self):
        first = list(SampleStream(Normal(1.0, 3.0), make_rng(42), count=100))
        second = list(SampleStream(Normal(1.0, 3.0), make_rng(42), count=100))

        assert first == second

    def test_exponentiated_normal_is_lognormal(self, rng):
        processor = SampleProcessor(exponentiate=True)
        samples = np.array(list(SampleStream(Normal(0.0, 0.5), rng, processor, count=20000)))

        assert samples.min() > 0.0
        assert np.mean(np.log(samples)) == pytest.approx(0.0, abs=0.02)
