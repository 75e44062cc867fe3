"""
Explosion synthesis - layered noise explosions and pre-explosion bursts.

An explosion is a stack of noise layers. Layer 0 is the low rumble: full
length, gentle fade, filtered hardest. Each higher layer is sped up more,
fades more steeply and is filtered less, adding brighter debris on top.

Pre-explosions are half-length explosions scattered over a short window
and muffled, giving the "ka-" before the "BOOM".
"""

import logging
from typing import List, Optional

import numpy as np

from .compositor import accumulate
from .generators import generate_noise
from .params import ExplosionParameters
from .sample_buffer import SampleBuffer, allocate, release
from .transforms import (
    change_speed_in_place,
    delay_shift,
    fade_out,
    renormalize,
    sliding_low_pass_in_place,
)
from .utils import seconds_to_frames

logger = logging.getLogger(__name__)

MAX_FADE_PASSES = 3


def synthesize_layer(
    duration: float,
    index: int,
    layer_count: int,
    rng: np.random.Generator
) -> SampleBuffer:
    """
    Build one noise layer of an explosion.

    Args:
        duration: Explosion duration in seconds
        index: Layer index, 0 is the lowest layer
        layer_count: Total number of layers
        rng: Random stream

    Returns:
        Shaped, renormalized layer
    """
    layer = generate_noise(seconds_to_frames(duration), rng)

    if index > 0:
        change_speed_in_place(layer, 2 * index)

    for _ in range(min(index + 1, MAX_FADE_PASSES)):
        fade_out(layer, layer.nsamples)

    alpha1 = (index + 1) / layer_count
    alpha2 = index / layer_count
    for _ in range(max(layer_count - index, 1)):
        sliding_low_pass_in_place(layer, alpha1, alpha2)
        renormalize(layer)

    return layer


def synthesize_explosion(
    duration: float,
    layer_count: int,
    rng: np.random.Generator
) -> SampleBuffer:
    """
    Synthesize a multi-layer explosion.

    Args:
        duration: Duration of the lowest layer in seconds
        layer_count: Number of noise layers (>= 1)
        rng: Random stream

    Returns:
        Renormalized sum of all layers

    Raises:
        ValueError: If layer_count is less than 1
    """
    if layer_count < 1:
        raise ValueError(f"layer_count must be at least 1, got {layer_count}")

    logger.debug("Synthesizing %.2fs explosion with %d layers", duration, layer_count)

    layers: List[SampleBuffer] = [
        synthesize_layer(duration, i, layer_count, rng) for i in range(layer_count)
    ]

    explosion = layers[0]
    for layer in layers[1:]:
        accumulate(explosion, layer)
        release(layer)
    renormalize(explosion)
    return explosion


def synthesize_pre_explosions(
    params: ExplosionParameters,
    rng: np.random.Generator
) -> Optional[SampleBuffer]:
    """
    Synthesize the burst of small explosions leading into the main one.

    Returns:
        Muffled pre-explosion buffer, or None when no pre-explosions
        are requested
    """
    if params.preexplosions == 0:
        return None

    logger.info("Synthesizing %d pre-explosion(s)", params.preexplosions)

    nsamples = seconds_to_frames(params.duration)
    max_offset = seconds_to_frames(params.preexplosion_delay)

    burst = allocate(nsamples)
    burst.nsamples = nsamples
    for _ in range(params.preexplosions):
        explosion = synthesize_explosion(params.duration / 2, params.layer_count, rng)
        offset = int(rng.integers(0, max_offset, endpoint=True))
        delay_shift(explosion, offset)
        accumulate(burst, explosion)
        renormalize(burst)
        release(explosion)

    factor = params.preexplosion_low_pass_factor
    for _ in range(params.preexplosion_lp_iterations):
        sliding_low_pass_in_place(burst, factor, factor)
    renormalize(burst)
    return burst
