"""
Configuration loader for explosion presets and parameter files.

Loads YAML files into validated ExplosionParameters, with caching of the
bundled presets.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import logging

import yaml
from pydantic import ValidationError

from .params import ExplosionParameters

logger = logging.getLogger(__name__)


class ConfigLoadError(Exception):
    """Raised when configuration loading fails."""
    pass


class ConfigLoader:
    """
    Loads explosion parameters from YAML presets with caching.

    Attributes:
        preset_dir: Directory holding ``<name>.yaml`` preset files
    """

    def __init__(self, preset_dir: Optional[Union[str, Path]] = None):
        """
        Initialize the configuration loader.

        Args:
            preset_dir: Directory of preset files.
                        Defaults to the presets bundled with this package.
        """
        if preset_dir is None:
            self.preset_dir = Path(__file__).parent / "presets"
        else:
            self.preset_dir = Path(preset_dir)

        self._cache: Dict[str, ExplosionParameters] = {}

    def _load_yaml(self, path: Path) -> Dict[str, Any]:
        """
        Load a YAML file and return its contents.

        Raises:
            ConfigLoadError: If the file cannot be loaded or parsed
        """
        if not path.exists():
            raise ConfigLoadError(f"Configuration file not found: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigLoadError(f"Failed to parse YAML file {path}: {e}") from e
        except OSError as e:
            raise ConfigLoadError(f"Failed to load configuration file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigLoadError(f"Expected a mapping of parameters in {path}")
        return data

    def _to_parameters(self, data: Dict[str, Any], source: Path) -> ExplosionParameters:
        # Presets may carry a description next to the parameters
        values = {k: v for k, v in data.items() if k != "description"}
        try:
            return ExplosionParameters(**values)
        except ValidationError as e:
            raise ConfigLoadError(f"Invalid explosion parameters in {source}: {e}") from e

    def load_parameters_file(self, path: Union[str, Path]) -> ExplosionParameters:
        """
        Load explosion parameters from an arbitrary YAML file.

        Missing fields take their defaults.

        Raises:
            ConfigLoadError: If the file is missing, malformed or invalid
        """
        path = Path(path)
        params = self._to_parameters(self._load_yaml(path), path)
        logger.debug("Loaded explosion parameters from %s", path)
        return params

    def load_preset(self, name: str) -> ExplosionParameters:
        """
        Load a named preset.

        Args:
            name: Preset name (file stem under preset_dir)

        Raises:
            ConfigLoadError: If the preset cannot be loaded
        """
        if name in self._cache:
            return self._cache[name]

        path = self.preset_dir / f"{name}.yaml"
        if not path.exists():
            raise ConfigLoadError(
                f"Unknown preset: {name}. Available: {self.get_available_presets()}"
            )

        params = self._to_parameters(self._load_yaml(path), path)
        self._cache[name] = params
        logger.debug("Loaded preset %s from %s", name, path)
        return params

    def get_preset_description(self, name: str) -> str:
        """Return the preset's description, or an empty string."""
        path = self.preset_dir / f"{name}.yaml"
        return str(self._load_yaml(path).get("description", ""))

    def get_available_presets(self) -> List[str]:
        """List the names of all presets in preset_dir."""
        if not self.preset_dir.exists():
            return []
        return sorted(path.stem for path in self.preset_dir.glob("*.yaml"))

    def has_preset(self, name: str) -> bool:
        return (self.preset_dir / f"{name}.yaml").exists()

    def reload(self) -> None:
        """Clear the preset cache so files are re-read on next access."""
        self._cache.clear()
        logger.info("Preset cache cleared")


# Module-level singleton for convenience
_default_loader: Optional[ConfigLoader] = None


def get_config_loader(preset_dir: Optional[Union[str, Path]] = None) -> ConfigLoader:
    """
    Get the default ConfigLoader instance.

    Creates a singleton on first call. Passing a preset_dir returns a new
    loader for that directory instead.
    """
    global _default_loader

    if preset_dir is not None:
        return ConfigLoader(preset_dir)

    if _default_loader is None:
        _default_loader = ConfigLoader()

    return _default_loader
