"""Configuration constants and parser settings for MIDI timeline decoding."""

import codecs
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from .exceptions import ConfigError

# Chunk identifiers
HEADER_CHUNK_ID = b"MThd"
TRACK_CHUNK_ID = b"MTrk"
HEADER_PAYLOAD_SIZE = 6

# Track defaults
DEFAULT_TRACK_NAME = "no name"
DEFAULT_TIME_SIGNATURE = (4, 4)

# 500000 microseconds per quarter note = 120 BPM
DEFAULT_TEMPO = 500000

# Empty note range sentinel (min > max when a track has no notes)
NO_NOTES_MIN = 127
NO_NOTES_MAX = 0

# latin-1 maps every byte, so text meta events always decode
DEFAULT_TEXT_ENCODING = "latin-1"


@dataclass
class ParserConfig:
    """
    Settings that change how a file is decoded.

    Attributes:
        strict_chunk_ids: Fail on a chunk id other than MThd/MTrk. When False,
            the chunk is decoded anyway and an UnrecognizedChunkId anomaly is
            reported.
        default_track_name: Name given to tracks without a TrackName event
        text_encoding: Codec for text-like meta event payloads
    """
    strict_chunk_ids: bool = True
    default_track_name: str = DEFAULT_TRACK_NAME
    text_encoding: str = DEFAULT_TEXT_ENCODING

    def __post_init__(self):
        self._validate()

    def _validate(self) -> None:
        if not isinstance(self.strict_chunk_ids, bool):
            raise ConfigError(f"strict_chunk_ids must be a bool, got {self.strict_chunk_ids!r}")
        if not isinstance(self.default_track_name, str):
            raise ConfigError(f"default_track_name must be a string, got {self.default_track_name!r}")
        try:
            codecs.lookup(self.text_encoding)
        except (LookupError, TypeError):
            raise ConfigError(f"Unknown text encoding: {self.text_encoding!r}")


def config_from_dict(data: Dict[str, Any]) -> ParserConfig:
    """
    Build a ParserConfig from a plain mapping.

    Args:
        data: Mapping of ParserConfig field names to values

    Returns:
        Validated ParserConfig

    Raises:
        ConfigError: Unknown keys or invalid values
    """
    known = {f.name for f in fields(ParserConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
    return ParserConfig(**data)


def load_config(config_path: Union[str, Path]) -> ParserConfig:
    """
    Load parser settings from a YAML file.

    An empty file yields the defaults.

    Args:
        config_path: Path to YAML config file

    Returns:
        Validated ParserConfig

    Raises:
        FileNotFoundError: Config file not found
        yaml.YAMLError: Invalid YAML format
        ConfigError: Top level is not a mapping, or keys/values are invalid
    """
    with open(config_path, 'r') as f:
        data = yaml.safe_load(f)

    if data is None:
        return ParserConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")

    return config_from_dict(data)


DEFAULT_CONFIG = ParserConfig()
