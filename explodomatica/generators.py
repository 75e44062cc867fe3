"""Buffer generators: white noise and sine tone."""

import numpy as np

from .sample_buffer import SampleBuffer, allocate
from .utils import SAMPLE_RATE


def generate_noise(nsamples: int, rng: np.random.Generator) -> SampleBuffer:
    """
    Generate white noise.

    Args:
        nsamples: Number of samples
        rng: Random stream for this run

    Returns:
        Buffer of independent uniform samples in [-1, 1]
    """
    buffer = allocate(nsamples)
    buffer.data[:] = rng.uniform(-1.0, 1.0, nsamples)
    buffer.nsamples = nsamples
    return buffer


def generate_tone(nsamples: int, frequency: float) -> SampleBuffer:
    """
    Generate a sine tone at amplitude 0.5.

    The phase is accumulated by repeated addition and never wrapped to
    2*pi, so very long tones pick up floating-point drift.
    """
    buffer = allocate(nsamples)
    if nsamples == 0:
        return buffer

    delta = frequency * 2.0 * np.pi / SAMPLE_RATE
    theta = np.empty(nsamples)
    theta[0] = 0.0
    # cumsum adds sequentially, matching a running phase accumulator
    theta[1:] = np.cumsum(np.full(nsamples - 1, delta))

    buffer.data[:] = np.sin(theta) * 0.5
    buffer.nsamples = nsamples
    return buffer
