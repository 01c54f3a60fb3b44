from dataclasses import dataclass, asdict, field, fields
from typing import Dict, Any, Optional, List
from functools import reduce
from pathlib import Path
import yaml

from .symbols import ALPHABETS


@dataclass
class ServiceConfig:
    """Configuration of the tokenizer service.

    Loaded from YAML. A config can list parent configs under `inherits`;
    parents are applied in order, then the local values, then overrides.
    """

    # Network
    host: str = "127.0.0.1"
    port: int = 8090

    # Vocabularies
    vocab_dir: str = "."
    vocab_extension: str = ".tiktoken"
    alphabet: str = "codepoint"
    preload: List[str] = field(default_factory=list)

    # Remote fetch
    enable_download: bool = False
    download_timeout: float = 30.0
    download_retries: int = 2

    @classmethod
    def from_file(cls, config_path: str, overrides: Optional[Dict[str, Any]] = None) -> 'ServiceConfig':
        """Load config with inheritance support
        - apply each inherited config in order
        - later configs override earlier configs
        - local config overrides inherited configs
        - apply overrides last
        """
        config = cls._load_config_dict_with_inheritance(config_path)

        if overrides:
            config = cls._merge_config_dicts(config, overrides)

        return cls.from_dict(config)

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'ServiceConfig':
        known = {f.name for f in fields(cls)}
        unknown = set(config) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        return cls(**config)

    def __post_init__(self):
        if self.alphabet not in ALPHABETS:
            raise ValueError(f"alphabet must be one of {ALPHABETS}, got {self.alphabet!r}")
        if not isinstance(self.port, int) or not 0 < self.port < 65536:
            raise ValueError(f"port must be in 1..65535, got {self.port!r}")
        if self.download_retries < 0:
            raise ValueError("download_retries must be >= 0")
        if self.download_timeout <= 0:
            raise ValueError("download_timeout must be > 0")
        if isinstance(self.preload, str):
            self.preload = [self.preload]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def _merge_config_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Shallow merge, override wins"""
        result = base.copy()
        result.update(override)
        return result

    @staticmethod
    def _load_config_dict_with_inheritance(config_path: str) -> Dict[str, Any]:
        """Load config as dict with inheritance support (helper function)"""
        try:
            with open(config_path) as f:
                config = yaml.safe_load(f)
        except FileNotFoundError:
            raise FileNotFoundError(f"Config file not found: {config_path}")
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {config_path}: {e}")

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ValueError(f"Config file {config_path} must contain a mapping")

        if 'inherits' not in config:
            return config

        # parent paths are relative to the inheriting file
        config_dir = Path(config_path).parent
        inherited_configs = [ServiceConfig._load_config_dict_with_inheritance(str(config_dir / path))
                             for path in config['inherits']]

        local_config = config.copy()
        local_config.pop('inherits', None)

        merged_config = reduce(ServiceConfig._merge_config_dicts, inherited_configs + [local_config], {})

        return merged_config
