"""
Buffer transforms - envelope, filtering, resampling, delay and gain.

Functions that return a new buffer leave their input untouched; the
``*_in_place`` variants hand the result back to the caller's buffer through
``SampleBuffer.adopt``. The remaining transforms mutate the buffer's logical
samples directly. No transform reads or writes past ``nsamples``.
"""

import numba
import numpy as np
from scipy import signal

from .sample_buffer import SampleBuffer, allocate, from_array
from .utils import INTERPOLATION_EPSILON, NORMALIZE_HEADROOM, SILENCE_THRESHOLD


# =============================================================================
# ENVELOPE
# =============================================================================

def fade_out(buffer: SampleBuffer, nsamples: int) -> None:
    """
    Linearly ramp the first ``nsamples`` samples from 1.0 down to 0.0.

    Sample ``i`` is scaled by ``1 - i/nsamples``; later samples are left
    alone. Calling it k times gives a k-th power ramp, which is how layers
    get progressively steeper decays.
    """
    if nsamples <= 0:
        return
    count = min(nsamples, buffer.nsamples)
    factor = 1.0 - np.arange(count) / nsamples
    buffer.data[:count] *= factor


# =============================================================================
# FILTERING
# =============================================================================

@numba.njit
def _sliding_low_pass_kernel(samples, alpha1, alpha2):
    n = len(samples)
    out = np.empty(n, dtype=np.float64)
    out[0] = samples[0]
    for i in range(1, n):
        alpha = (i / n) * (alpha2 - alpha1) + alpha1
        alpha = alpha * alpha
        out[i] = out[i - 1] + alpha * (samples[i] - out[i - 1])
    return out


def _constant_low_pass(samples: np.ndarray, alpha: float) -> np.ndarray:
    """One-pole low-pass with a fixed coefficient, seeded with the first sample."""
    coeff = alpha * alpha
    out = np.empty(len(samples))
    out[0] = samples[0]
    if len(samples) > 1:
        # y[i] = coeff * x[i] + (1 - coeff) * y[i-1], with y[0] = x[0]
        out[1:], _ = signal.lfilter(
            [coeff], [1.0, coeff - 1.0], samples[1:],
            zi=[(1.0 - coeff) * samples[0]]
        )
    return out


def sliding_low_pass(buffer: SampleBuffer, alpha1: float, alpha2: float) -> SampleBuffer:
    """
    One-pole low-pass whose coefficient sweeps across the buffer.

    The coefficient moves linearly from ``alpha1`` to ``alpha2`` and is
    squared before use, so the cutoff falls (or rises) over the sound.

    Args:
        buffer: Input buffer (not modified)
        alpha1: Coefficient at the start of the buffer
        alpha2: Coefficient at the end of the buffer

    Returns:
        New filtered buffer of the same length
    """
    samples = buffer.samples
    if len(samples) == 0:
        return allocate(0)

    if alpha1 == alpha2:
        filtered = _constant_low_pass(samples, alpha1)
    else:
        filtered = _sliding_low_pass_kernel(
            np.ascontiguousarray(samples), float(alpha1), float(alpha2)
        )
    return from_array(filtered)


def sliding_low_pass_in_place(buffer: SampleBuffer, alpha1: float, alpha2: float) -> None:
    """Filter ``buffer`` and make it own the filtered result."""
    buffer.adopt(sliding_low_pass(buffer, alpha1, alpha2))


# =============================================================================
# RESAMPLING
# =============================================================================

def _interpolate(x, x1, y1, x2, y2):
    """y on the line through (x1, y1) and (x2, y2) at x; averages coincident points."""
    dx = x2 - x1
    coincident = np.abs(dx) < INTERPOLATION_EPSILON
    safe_dx = np.where(coincident, 1.0, dx)
    return np.where(coincident, (y1 + y2) / 2.0, (x - x1) * (y2 - y1) / safe_dx + y1)


def change_speed(buffer: SampleBuffer, factor: float) -> SampleBuffer:
    """
    Resample by linear interpolation.

    The output has ``round(nsamples / factor)`` samples: factors above 1
    shorten (raise pitch), factors below 1 lengthen (lower pitch). The upper
    interpolation neighbour is clamped to the last source sample, so the
    final output samples never read past the input.

    Raises:
        ValueError: If factor is not positive
    """
    if factor <= 0:
        raise ValueError(f"Speed factor must be positive, got {factor}")

    n_in = buffer.nsamples
    n_out = int(round(n_in / factor))
    out = allocate(n_out)
    if n_out == 0:
        return out

    source = buffer.samples
    out.data[0] = source[0]
    if n_out > 1:
        position = np.arange(1, n_out) / n_out * n_in
        sp1 = np.minimum(position.astype(np.int64), n_in - 1)
        sp2 = np.minimum(sp1 + 1, n_in - 1)
        out.data[1:n_out] = _interpolate(
            position,
            sp1.astype(np.float64), source[sp1],
            sp2.astype(np.float64), source[sp2],
        )
    out.nsamples = n_out
    return out


def change_speed_in_place(buffer: SampleBuffer, factor: float) -> None:
    """Resample ``buffer`` and make it own the resampled result."""
    buffer.adopt(change_speed(buffer, factor))


# =============================================================================
# DELAY / GAIN
# =============================================================================

def delay_shift(buffer: SampleBuffer, delay_samples: int) -> None:
    """
    Shift content forward by ``delay_samples`` without changing the length.

    Each destination ``i`` takes the sample at ``i - delay_samples``; when
    that source index is not positive the destination becomes silence.
    Content pushed past the end is dropped.

    Raises:
        ValueError: If delay_samples is negative
    """
    delay = int(delay_samples)
    if delay < 0:
        raise ValueError(f"Delay must be non-negative, got {delay}")

    n = buffer.nsamples
    data = buffer.data
    if delay >= n:
        data[:n] = 0.0
        return
    data[delay + 1:n] = data[1:n - delay].copy()
    data[:delay + 1] = 0.0


def renormalize(buffer: SampleBuffer) -> None:
    """
    Scale so the peak sits just under full scale.

    Divides by ``1.001 * peak``. An all-silent buffer is left unchanged.
    """
    samples = buffer.samples
    if len(samples) == 0:
        return
    peak = np.max(np.abs(samples))
    if peak == 0.0:
        return
    samples /= NORMALIZE_HEADROOM * peak


def amplify_and_clip(buffer: SampleBuffer, gain: float) -> None:
    """Multiply by ``gain`` then hard-clip to [-1, 1]."""
    samples = buffer.samples
    samples *= gain
    np.clip(samples, -1.0, 1.0, out=samples)


def trim_trailing_silence(buffer: SampleBuffer) -> None:
    """
    Drop the trailing run of near-silent samples.

    Only the contiguous suffix below the silence threshold is removed,
    scanning back from the end; quiet samples before the last loud one
    stay. Storage is not reallocated.
    """
    loud = np.flatnonzero(np.abs(buffer.samples) >= SILENCE_THRESHOLD)
    buffer.nsamples = int(loud[-1]) + 1 if len(loud) else 0
