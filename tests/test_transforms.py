"""
Unit tests for buffer transforms

Tests fade envelope, sliding low-pass filter, resampling, delay,
renormalize, gain/clip and silence trimming.
"""

import pytest
import sys
import numpy as np
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from explodomatica.sample_buffer import allocate, from_array
from explodomatica.transforms import (
    fade_out,
    sliding_low_pass,
    sliding_low_pass_in_place,
    change_speed,
    change_speed_in_place,
    delay_shift,
    renormalize,
    amplify_and_clip,
    trim_trailing_silence,
)


def reference_low_pass(samples, alpha1, alpha2):
    """Straightforward loop version of the sliding filter."""
    n = len(samples)
    out = np.empty(n)
    out[0] = samples[0]
    for i in range(1, n):
        alpha = (i / n) * (alpha2 - alpha1) + alpha1
        alpha = alpha * alpha
        out[i] = out[i - 1] + alpha * (samples[i] - out[i - 1])
    return out


class TestFadeOut:
    """Tests for the linear fade."""

    def test_linear_ramp(self):
        buffer = from_array(np.ones(6))
        fade_out(buffer, 4)

        assert np.allclose(buffer.samples, [1.0, 0.75, 0.5, 0.25, 1.0, 1.0])

    def test_first_sample_unchanged(self, rng):
        samples = rng.uniform(-1, 1, 500)
        buffer = from_array(samples)
        fade_out(buffer, 500)

        assert buffer.samples[0] == samples[0]

    def test_last_faded_sample_shrinks_with_length(self):
        """The sample at n-1 is scaled by 1/n."""
        for n in (10, 100, 1000):
            buffer = from_array(np.ones(n))
            fade_out(buffer, n)
            assert buffer.samples[n - 1] == pytest.approx(1.0 / n)

    def test_repeated_fades_compound(self):
        """Applying twice squares the ramp."""
        buffer = from_array(np.ones(4))
        fade_out(buffer, 4)
        fade_out(buffer, 4)

        assert np.allclose(buffer.samples, [1.0, 0.5625, 0.25, 0.0625])

    def test_fade_longer_than_buffer(self):
        """Only logical samples are touched."""
        buffer = from_array(np.ones(3))
        fade_out(buffer, 6)
        assert np.allclose(buffer.samples, [1.0, 5 / 6, 4 / 6])

    def test_zero_length_is_noop(self):
        buffer = from_array(np.ones(3))
        fade_out(buffer, 0)
        assert np.all(buffer.samples == 1.0)


class TestSlidingLowPass:
    """Tests for the sliding one-pole filter."""

    def test_constant_matches_reference(self, rng):
        samples = rng.uniform(-1, 1, 300)
        result = sliding_low_pass(from_array(samples), 0.5, 0.5)

        assert np.allclose(result.samples, reference_low_pass(samples, 0.5, 0.5))

    def test_sweep_matches_reference(self, rng):
        samples = rng.uniform(-1, 1, 300)
        result = sliding_low_pass(from_array(samples), 0.5, 0.2)

        assert np.allclose(result.samples, reference_low_pass(samples, 0.5, 0.2))

    def test_rising_sweep_matches_reference(self, rng):
        samples = rng.uniform(-1, 1, 300)
        result = sliding_low_pass(from_array(samples), 0.25, 1.0)

        assert np.allclose(result.samples, reference_low_pass(samples, 0.25, 1.0))

    def test_first_sample_passes_through(self, rng):
        samples = rng.uniform(-1, 1, 50)
        result = sliding_low_pass(from_array(samples), 0.3, 0.1)
        assert result.samples[0] == samples[0]

    def test_input_not_modified(self, rng):
        samples = rng.uniform(-1, 1, 50)
        buffer = from_array(samples)
        sliding_low_pass(buffer, 0.3, 0.1)
        assert np.array_equal(buffer.samples, samples)

    def test_alpha_one_is_identity(self, rng):
        samples = rng.uniform(-1, 1, 50)
        result = sliding_low_pass(from_array(samples), 1.0, 1.0)
        assert np.allclose(result.samples, samples)

    def test_reduces_high_frequencies(self, rng):
        """Filtered noise has less sample-to-sample variation."""
        samples = rng.uniform(-1, 1, 5000)
        result = sliding_low_pass(from_array(samples), 0.3, 0.3)

        assert np.std(np.diff(result.samples)) < np.std(np.diff(samples)) * 0.5

    def test_single_sample(self):
        result = sliding_low_pass(from_array(np.array([0.4])), 0.5, 0.2)
        assert list(result.samples) == [0.4]

    def test_empty(self):
        assert len(sliding_low_pass(allocate(0), 0.5, 0.5)) == 0

    def test_in_place(self, rng):
        samples = rng.uniform(-1, 1, 100)
        buffer = from_array(samples)
        sliding_low_pass_in_place(buffer, 0.5, 0.2)

        assert not buffer.released
        assert np.allclose(buffer.samples, reference_low_pass(samples, 0.5, 0.2))


class TestChangeSpeed:
    """Tests for linear-interpolation resampling."""

    def test_output_length(self):
        buffer = from_array(np.zeros(100))

        assert len(change_speed(buffer, 2.0)) == 50
        assert len(change_speed(buffer, 0.25)) == 400
        assert len(change_speed(buffer, 3.0)) == 33

    def test_first_sample_kept(self, rng):
        samples = rng.uniform(-1, 1, 100)
        assert change_speed(from_array(samples), 0.5).samples[0] == samples[0]

    def test_interpolates_ramp(self):
        """A linear ramp stays linear when slowed down."""
        n = 100
        ramp = np.arange(n, dtype=float)
        result = change_speed(from_array(ramp), 0.5)

        positions = np.arange(2 * n) / (2 * n) * n
        # Interior samples sit exactly on the ramp
        assert np.allclose(result.samples[:-2], positions[:-2])

    def test_boundary_sample_is_last_source_sample(self):
        """The upper neighbour is clamped instead of reading past the end."""
        samples = np.array([0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 1.0])
        result = change_speed(from_array(samples), 0.5)

        assert len(result) == 20
        assert result.samples[-1] == samples[-1]

    def test_round_trip_length(self):
        """Speeding up then slowing down recovers the length within rounding."""
        n = 1001
        buffer = from_array(np.zeros(n))
        for factor in (0.25, 0.5, 2.0, 3.0, 7.0):
            there = change_speed(buffer, factor)
            back = change_speed(there, 1.0 / factor)
            assert abs(len(back) - n) <= max(1, int(np.ceil(factor)))

    def test_unit_factor_preserves_content(self, rng):
        samples = rng.uniform(-1, 1, 64)
        result = change_speed(from_array(samples), 1.0)

        assert len(result) == 64
        assert np.allclose(result.samples, samples)

    def test_input_not_modified(self, rng):
        samples = rng.uniform(-1, 1, 64)
        buffer = from_array(samples)
        change_speed(buffer, 2.0)
        assert np.array_equal(buffer.samples, samples)

    def test_non_positive_factor_rejected(self):
        buffer = from_array(np.zeros(10))
        with pytest.raises(ValueError):
            change_speed(buffer, 0.0)
        with pytest.raises(ValueError):
            change_speed(buffer, -1.0)

    def test_empty_input(self):
        assert len(change_speed(allocate(0), 0.5)) == 0

    def test_huge_factor_gives_empty(self):
        assert len(change_speed(from_array(np.ones(3)), 100.0)) == 0

    def test_in_place(self):
        buffer = from_array(np.zeros(100))
        change_speed_in_place(buffer, 4.0)
        assert len(buffer) == 25


class TestDelayShift:
    """Tests for the forward delay."""

    def test_shifts_forward(self):
        samples = np.arange(1, 11, dtype=float)
        buffer = from_array(samples)
        delay_shift(buffer, 3)

        # Destination i takes source i - 3 when that index is positive
        expected = [0.0, 0.0, 0.0, 0.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0]
        assert list(buffer.samples) == expected

    def test_length_unchanged(self):
        buffer = from_array(np.ones(10))
        delay_shift(buffer, 4)
        assert len(buffer) == 10

    def test_zero_delay_silences_first_sample(self):
        samples = np.arange(1, 6, dtype=float)
        buffer = from_array(samples)
        delay_shift(buffer, 0)
        assert list(buffer.samples) == [0.0, 2.0, 3.0, 4.0, 5.0]

    def test_delay_past_end_silences(self):
        buffer = from_array(np.ones(5))
        delay_shift(buffer, 5)
        assert np.all(buffer.samples == 0.0)

        buffer = from_array(np.ones(5))
        delay_shift(buffer, 50)
        assert np.all(buffer.samples == 0.0)

    def test_only_logical_samples_touched(self):
        buffer = from_array(np.ones(8))
        buffer.nsamples = 4
        delay_shift(buffer, 1)
        assert np.all(buffer.data[4:] == 1.0)

    def test_negative_delay_rejected(self):
        with pytest.raises(ValueError):
            delay_shift(from_array(np.ones(5)), -1)


class TestRenormalize:
    """Tests for peak renormalization."""

    def test_peak_under_full_scale(self, rng):
        for scale in (0.001, 0.5, 3.0, 1000.0):
            buffer = from_array(rng.uniform(-1, 1, 1000) * scale)
            renormalize(buffer)

            peak = np.max(np.abs(buffer.samples))
            assert peak == pytest.approx(1.0 / 1.001)
            assert peak < 1.0

    def test_shape_preserved(self):
        buffer = from_array(np.array([0.5, -0.25, 0.125]))
        renormalize(buffer)
        assert np.allclose(buffer.samples, np.array([1.0, -0.5, 0.25]) / 1.001)

    def test_silent_buffer_unchanged(self):
        buffer = from_array(np.zeros(100))
        renormalize(buffer)
        assert np.all(buffer.samples == 0.0)
        assert not np.any(np.isnan(buffer.samples))

    def test_empty_buffer(self):
        buffer = allocate(0)
        renormalize(buffer)
        assert len(buffer) == 0


class TestAmplifyAndClip:
    """Tests for gain with hard clipping."""

    def test_output_bounded(self, rng):
        for gain in (0.0, 0.5, 1.0, 10.0, -25.0):
            buffer = from_array(rng.uniform(-3, 3, 1000))
            amplify_and_clip(buffer, gain)
            assert np.all(buffer.samples >= -1.0)
            assert np.all(buffer.samples <= 1.0)

    def test_gain_applied(self):
        buffer = from_array(np.array([0.1, -0.2, 0.4]))
        amplify_and_clip(buffer, 2.0)
        assert np.allclose(buffer.samples, [0.2, -0.4, 0.8])

    def test_clips(self):
        buffer = from_array(np.array([0.9, -0.9]))
        amplify_and_clip(buffer, 2.0)
        assert list(buffer.samples) == [1.0, -1.0]


class TestTrimTrailingSilence:
    """Tests for trailing silence removal."""

    def test_trims_silent_suffix(self):
        samples = np.array([0.5, 0.2, 0.0, 1e-6, 0.3, 1e-6, 0.0, 0.0])
        buffer = from_array(samples)
        trim_trailing_silence(buffer)

        # Quiet samples before the last loud one stay
        assert len(buffer) == 5
        assert buffer.capacity == 8

    def test_idempotent(self, rng):
        samples = np.concatenate([rng.uniform(-1, 1, 100), np.zeros(50)])
        buffer = from_array(samples)
        trim_trailing_silence(buffer)
        once = len(buffer)
        trim_trailing_silence(buffer)

        assert len(buffer) == once == 100

    def test_loud_last_sample_keeps_everything(self):
        samples = np.array([0.0, 0.0, 0.0, 0.5])
        buffer = from_array(samples)
        trim_trailing_silence(buffer)
        assert len(buffer) == 4

    def test_all_silent(self):
        buffer = from_array(np.full(10, 1e-7))
        trim_trailing_silence(buffer)
        assert len(buffer) == 0

    def test_threshold(self):
        buffer = from_array(np.array([0.5, 1e-5, 9e-6]))
        trim_trailing_silence(buffer)
        assert len(buffer) == 2
