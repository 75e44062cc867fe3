"""
Utility functions and constants for the explosion generator.

Provides:
- Audio format constants (44.1 kHz mono, 16-bit)
- Duration to frame-count conversion
- Random stream construction for reproducible synthesis
"""

import time
from typing import Optional

import numpy as np


# =============================================================================
# AUDIO CONSTANTS
# =============================================================================

SAMPLE_RATE = 44100  # Hz - every buffer in the pipeline uses this rate
BIT_DEPTH = 16       # bits
CHANNELS = 1         # Mono

# Samples quieter than this are treated as silence when trimming tails
SILENCE_THRESHOLD = 1e-5

# Renormalize divides by (headroom * peak) so the peak stays under full scale
NORMALIZE_HEADROOM = 1.001

# Interpolation points closer than this are treated as coincident
INTERPOLATION_EPSILON = 0.01 / SAMPLE_RATE


# =============================================================================
# TIMING / CONVERSION FUNCTIONS
# =============================================================================

def seconds_to_frames(seconds: float) -> int:
    """Convert a duration in seconds to a sample count at SAMPLE_RATE."""
    return int(round(seconds * SAMPLE_RATE))


def frames_to_seconds(frames: int) -> float:
    """Convert a sample count back to seconds."""
    return frames / SAMPLE_RATE


# =============================================================================
# RANDOMNESS
# =============================================================================

def resolve_seed(seed: Optional[int] = None) -> int:
    """
    Return a concrete seed.

    Uses wall-clock time when no seed is given so every run differs,
    while still letting the caller log and replay the chosen value.
    """
    if seed is None:
        return time.time_ns() % (2 ** 32)
    return int(seed)


def make_rng(seed: Optional[int] = None, stream: int = 0) -> np.random.Generator:
    """
    Create a random stream from a seed.

    Stream 0 is the one threaded through a synthesis run. Other stream
    numbers give independent generators derived from the same seed.
    """
    if stream:
        return np.random.default_rng([resolve_seed(seed), stream])
    return np.random.default_rng(resolve_seed(seed))
