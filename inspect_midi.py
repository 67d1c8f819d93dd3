#!/usr/bin/env python3
"""
Decode a MIDI file and print a summary of its tracks.

Usage:
    python inspect_midi.py <midi_file> [config.yaml]

Example:
    python inspect_midi.py library/song.mid
    python inspect_midi.py library/song.mid lenient.yaml  # e.g. strict_chunk_ids: false
"""

import logging
import sys

import yaml

from midi_timeline import ConfigError, MidiParseError, ParserConfig, load_config, parse_midi_file
from midi_timeline.summary import print_file_summary


def main(argv) -> int:
    if len(argv) < 2:
        print("Usage: python inspect_midi.py <midi_file> [config.yaml]")
        print("\nExample:")
        print("  python inspect_midi.py library/song.mid")
        print("  python inspect_midi.py library/song.mid lenient.yaml")
        return 1

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    midi_path = argv[1]

    config = ParserConfig()
    if len(argv) >= 3:
        try:
            config = load_config(argv[2])
        except (OSError, yaml.YAMLError, ConfigError) as e:
            print(f"Error loading config: {e}")
            return 1

    print(f"=== MIDI File: {midi_path} ===\n")

    try:
        midi = parse_midi_file(midi_path, config=config)
    except FileNotFoundError:
        print(f"File not found: {midi_path}")
        return 1
    except MidiParseError as e:
        print(f"Failed to decode MIDI file: {e}")
        return 1

    print_file_summary(midi)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
