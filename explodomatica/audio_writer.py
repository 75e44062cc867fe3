"""
WAV output - the boundary between synthesis and the filesystem.

Writes standard uncompressed 16-bit PCM WAV files at 44.1 kHz. Failures
are logged and reported through the return value instead of raised, so the
caller decides how to surface them.
"""

import logging
from pathlib import Path
from typing import Union

import numpy as np
import soundfile as sf

from .sample_buffer import SampleBuffer
from .utils import BIT_DEPTH, CHANNELS, SAMPLE_RATE

logger = logging.getLogger(__name__)

PCM_SUBTYPES = {
    16: "PCM_16",
    24: "PCM_24",
}


def write_wav(
    buffer: SampleBuffer,
    output_path: Union[str, Path],
    channels: int = CHANNELS,
    sample_rate: int = SAMPLE_RATE,
    bit_depth: int = BIT_DEPTH
) -> bool:
    """
    Write a buffer to a PCM WAV file, overwriting any existing file.

    Args:
        buffer: Finished buffer
        output_path: Target file path
        channels: Output channel count; the mono signal is copied to each
        sample_rate: Sample rate written to the header
        bit_depth: PCM bit depth (16 or 24)

    Returns:
        True on success, False if the file could not be written
    """
    audio = np.clip(buffer.samples, -1.0, 1.0)
    if channels > 1:
        audio = np.tile(audio[:, np.newaxis], (1, channels))

    try:
        sf.write(
            str(output_path),
            audio,
            sample_rate,
            subtype=PCM_SUBTYPES[bit_depth],
            format="WAV",
        )
    except (RuntimeError, OSError) as e:
        logger.error("Cannot open '%s': %s", output_path, e)
        return False

    logger.info(
        "Saved %d samples (%.2fs) to '%s'",
        len(audio), len(audio) / sample_rate, output_path
    )
    return True
