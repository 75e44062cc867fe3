"""
Explodomatica

Procedural explosion sound effect generator: layered noise explosions,
pre-explosion bursts and a synthetic reverb tail, rendered offline to a
mono 16-bit WAV file.
"""

__version__ = "0.2.0"

from .sample_buffer import (
    SampleBuffer,
    AllocationError,
    BufferReleasedError,
    allocate,
    release,
    copy_buffer,
    from_array,
)
from .generators import generate_noise, generate_tone
from .transforms import (
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
from .compositor import add, accumulate
from .explosion import synthesize_explosion, synthesize_pre_explosions
from .reverb import ReflectionReverb, ReverbConfig, ReflectionConfig, synthesize_reverb
from .params import ExplosionParameters, DEFAULT_PARAMETERS, MUTATION_RANGES
from .config_loader import ConfigLoader, ConfigLoadError, get_config_loader
from .audio_writer import write_wav
from .pipeline import ExplosionPipeline, run, generate_explosion_file
from .utils import SAMPLE_RATE, seconds_to_frames, make_rng

__all__ = [
    # Buffers
    "SampleBuffer",
    "AllocationError",
    "BufferReleasedError",
    "allocate",
    "release",
    "copy_buffer",
    "from_array",
    # Generators
    "generate_noise",
    "generate_tone",
    # Transforms
    "fade_out",
    "sliding_low_pass",
    "sliding_low_pass_in_place",
    "change_speed",
    "change_speed_in_place",
    "delay_shift",
    "renormalize",
    "amplify_and_clip",
    "trim_trailing_silence",
    # Compositor
    "add",
    "accumulate",
    # Synthesis
    "synthesize_explosion",
    "synthesize_pre_explosions",
    "ReflectionReverb",
    "ReverbConfig",
    "ReflectionConfig",
    "synthesize_reverb",
    # Configuration
    "ExplosionParameters",
    "DEFAULT_PARAMETERS",
    "MUTATION_RANGES",
    "ConfigLoader",
    "ConfigLoadError",
    "get_config_loader",
    # Output
    "write_wav",
    "ExplosionPipeline",
    "run",
    "generate_explosion_file",
    # Utils
    "SAMPLE_RATE",
    "seconds_to_frames",
    "make_rng",
]
