"""
Pytest fixtures for explodomatica tests.
"""
import pytest
import sys
from pathlib import Path
import tempfile
import shutil

import numpy as np

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from explodomatica.params import ExplosionParameters


@pytest.fixture
def sample_rate():
    """Standard sample rate for tests."""
    return 44100


@pytest.fixture
def rng():
    """Seeded random stream."""
    return np.random.default_rng(1234)


@pytest.fixture
def temp_dir():
    """Create temporary directory for test outputs."""
    tmp = tempfile.mkdtemp()
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def small_params():
    """Short explosion that synthesizes quickly."""
    return ExplosionParameters(
        duration=0.1,
        layer_count=3,
        preexplosions=1,
        preexplosion_delay=0.02,
        preexplosion_low_pass_factor=0.5,
        final_speed_factor=0.5,
        early_reflections=2,
        late_reflections=3,
    )


@pytest.fixture
def preset_dir():
    """Directory of the bundled presets."""
    return PROJECT_ROOT / 'explodomatica' / 'presets'
