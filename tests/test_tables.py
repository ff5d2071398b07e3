from pathlib import Path
import sys

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from beatnik.tables import (  # noqa: E402
    DRUM_ALIASES,
    DRUM_NOTES,
    DURATIONS,
    VELOCITIES,
    lookup_drum,
    lookup_duration,
    lookup_velocity,
)
from beatnik.track import Velocity  # noqa: E402


def test_numeric_drums_map_to_themselves() -> None:
    for i in range(1, 256):
        assert DRUM_NOTES[str(i)] == i
    assert "0" not in DRUM_NOTES
    assert "256" not in DRUM_NOTES


def test_aliases_are_valid_identifiers() -> None:
    for alias, note in DRUM_ALIASES.items():
        assert alias.isalnum() and alias == alias.upper()
        assert DRUM_NOTES[alias] == note
        assert 35 <= note <= 81  # General MIDI percussion range


def test_velocity_table_levels() -> None:
    assert [VELOCITIES[s] for s in ("-----", "----", "---", "--", "-", "", "+", "++")] == [
        16, 32, 48, 64, 80, 96, 112, 127,
    ]
    assert VELOCITIES[""] is Velocity.F
    assert 0 not in VELOCITIES.values()


def test_duration_table() -> None:
    assert dict(DURATIONS) == {
        "~~": 384, "~": 192, "": 96, ".": 48, "..": 24, "...": 12, "....": 6, ".....": 3,
        "~~>": 256, "~>": 128, ">": 64, ".>": 32, "..>": 16, "...>": 8, "....>": 4, ".....>": 2,
    }


def test_tables_are_read_only() -> None:
    with pytest.raises(TypeError):
        DURATIONS["......"] = 1  # type: ignore[index]
    with pytest.raises(TypeError):
        DRUM_NOTES["ZZ"] = 1  # type: ignore[index]


def test_lookups() -> None:
    assert lookup_drum("SD") == 38
    assert lookup_velocity("+") is Velocity.FF
    assert lookup_duration("~>") == 128
    with pytest.raises(ValueError, match="bad drum number"):
        lookup_drum("sd")
    with pytest.raises(ValueError, match="bad velocity"):
        lookup_velocity("+++")
    with pytest.raises(ValueError, match="bad duration"):
        lookup_duration("......")
