"""
Run settings for the character Markov generator, optionally read from YAML.
"""

import codecs
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional, Union

import yaml

from markov_model import InvalidConfigurationError

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

logger = logging.getLogger(__name__)


def _known_encoding(name: str) -> bool:
    try:
        codecs.lookup(name)
    except LookupError:
        return False
    return True


@dataclass
class Config:
    # Model
    window_length: int = 3
    seed: Optional[int] = None

    # Generation
    length: int = 200

    # Corpus
    encoding: str = "utf-8"

    # Monitoring
    log_level: str = "INFO"
    progress: bool = False

    def validate(self) -> "Config":
        """Check every field against SCHEMA, raising on the first bad one."""
        for key, (type_, check) in SCHEMA.items():
            value = getattr(self, key)
            # bool is an int subclass, but True is not a window length
            wrong_bool = isinstance(value, bool) and type_ is not bool
            if wrong_bool or not isinstance(value, type_):
                raise InvalidConfigurationError(
                    f"Wrong type for {key}: got {type(value).__name__}")
            if not check(value):
                raise InvalidConfigurationError(f"Invalid value for {key}: {value!r}")
        return self

    def merged(self, **overrides) -> "Config":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes).validate()


SCHEMA = {
    'window_length': (int, lambda x: x > 0),
    'seed': ((int, type(None)), lambda x: True),
    'length': (int, lambda x: x >= 0),
    'encoding': (str, _known_encoding),
    'log_level': (str, lambda x: x.upper() in LOG_LEVELS),
    'progress': (bool, lambda x: True),
}


def load_config(path: Union[str, Path]) -> Config:
    """Read a YAML mapping of Config fields; missing keys keep their defaults."""
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise InvalidConfigurationError(f"Config file {path} must contain a mapping")

    known = {f.name for f in fields(Config)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise InvalidConfigurationError(f"Unknown config keys: {', '.join(unknown)}")

    config = Config(**data).validate()
    logger.debug("Loaded config from %s: %s", path, config)
    return config
