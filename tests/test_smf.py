"""Tests for the Standard MIDI File encoder."""

import io
import logging
from pathlib import Path
import sys

import mido
import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from beatnik.build_spec import compile_text  # noqa: E402
from beatnik.parser import parse_track  # noqa: E402
from beatnik.smf import (  # noqa: E402
    encode_chunk,
    encode_header_chunk,
    encode_hit,
    encode_meta_chunk,
    encode_note_chunk,
    encode_track,
    tempo_for_bpm,
)
from beatnik.track import Hit, Track, Velocity  # noqa: E402


def _read(data: bytes) -> mido.MidiFile:
    return mido.MidiFile(file=io.BytesIO(data))


# ── raw byte layout ──────────────────────────────────────────────────


class TestChunks:
    def test_header_chunk(self):
        assert encode_header_chunk() == bytes.fromhex(
            "4D546864"  # MThd
            "00000006"  # length
            "0001"  # format 1
            "0002"  # two tracks
            "0060"  # 96 ticks per quarter
        )

    def test_encode_chunk_prefixes_big_endian_length(self):
        assert encode_chunk(b"MTrk", b"\x01" * 300) == b"MTrk\x00\x00\x01\x2C" + b"\x01" * 300

    def test_meta_chunk_120_bpm(self):
        assert encode_meta_chunk(120) == bytes.fromhex(
            "4D54726B 00000013"
            "00 FF 58 04 04 02 18 08"  # 4/4
            "00 FF 51 03 07 A1 20"  # 500000 us per beat
            "00 FF 2F 00"
        )

    def test_empty_note_chunk(self):
        assert encode_note_chunk([]) == bytes.fromhex("4D54726B 00000004 00 FF 2F 00")


class TestTempo:
    @pytest.mark.parametrize(
        "bpm,tempo",
        [(120, 500_000), (60, 1_000_000), (100, 600_000), (7, 8_571_429), (500, 120_000), (4, 15_000_000)],
    )
    def test_tempo_for_bpm(self, bpm, tempo):
        assert tempo_for_bpm(bpm) == tempo

    @pytest.mark.parametrize("bpm", [1, 2, 3])
    def test_very_slow_tempo_clamped_to_three_bytes(self, bpm):
        assert tempo_for_bpm(bpm) == 0xFFFFFF

    @pytest.mark.parametrize("bpm", [0, -1])
    def test_unset_tempo_rejected(self, bpm):
        with pytest.raises(ValueError, match="tempo must be set"):
            tempo_for_bpm(bpm)

    def test_encode_track_requires_tempo(self):
        with pytest.raises(ValueError):
            encode_track(Track(hits=[Hit.from_notes(96, Velocity.F, 36)]))


class TestHitEvents:
    def test_single_note(self):
        hit = Hit.from_notes(96, Velocity.F, 36)
        assert encode_hit(hit) == bytes.fromhex(
            "00 99 24 60"  # note on, vel 96
            "60 89 24 40"  # 96 ticks later, note off, vel 64
        )

    def test_chord_offs_share_one_delta(self):
        hit = Hit(notes={36: Velocity.FF, 42: Velocity.P}, ticks=48)
        assert encode_hit(hit) == bytes.fromhex(
            "00 99 24 70"
            "00 99 2A 30"
            "30 89 24 40"
            "00 89 2A 40"
        )

    def test_long_hit_uses_multibyte_delta(self):
        hit = Hit.from_notes(384, Velocity.PPP, 49)
        assert encode_hit(hit) == bytes.fromhex("00 99 31 10 83 00 89 31 40")

    def test_release_velocity_is_fixed(self):
        for velocity in Velocity:
            blob = encode_hit(Hit.from_notes(96, velocity, 38))
            assert blob[3] == int(velocity)
            assert blob[-1] == 64

    def test_instrument_above_data_byte_range_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="beatnik.smf"):
            blob = encode_hit(Hit.from_notes(96, Velocity.F, 200))
        assert "instrument 200 does not fit a MIDI data byte" in caplog.text
        assert blob[:4] == bytes([0x00, 0x99, 200, 96])

    def test_general_midi_instrument_does_not_warn(self, caplog):
        with caplog.at_level(logging.WARNING, logger="beatnik.smf"):
            encode_hit(Hit.from_notes(96, Velocity.F, 127))
        assert caplog.records == []


class TestEncodeTrack:
    def test_bpm_120_single_hit_exact_bytes(self):
        track = Track(hits=[Hit.from_notes(96, Velocity.F, 36)], bpm=120)
        assert encode_track(track) == bytes.fromhex(
            "4D546864 00000006 0001 0002 0060"
            "4D54726B 00000013"
            "00FF5804 04021808"
            "00FF5103 07A120"
            "00FF2F00"
            "4D54726B 0000000C"
            "00992460 60892440"
            "00FF2F00"
        )

    def test_encoding_does_not_mutate_track(self):
        track = parse_track("bpm:90 K,CH CH.")
        before = [(dict(h.notes), h.ticks) for h in track.hits]
        encode_track(track)
        assert [(dict(h.notes), h.ticks) for h in track.hits] == before
        assert track.bpm == 90


# ── cross-check with mido ────────────────────────────────────────────


class TestMidoReadback:
    TEXT = """
        bpm:100
        K,CH CH S,CH (S..) CH ~   # grace snare, long last hat
    """

    def test_file_structure(self):
        mid = _read(compile_text(self.TEXT))
        assert mid.type == 1
        assert mid.ticks_per_beat == 96
        assert len(mid.tracks) == 2

    def test_meta_track(self):
        mid = _read(compile_text(self.TEXT))
        meta = [msg for msg in mid.tracks[0]]
        assert [m.type for m in meta] == ["time_signature", "set_tempo", "end_of_track"]
        assert meta[0].numerator == 4 and meta[0].denominator == 4
        assert meta[1].tempo == mido.bpm2tempo(100)
        assert all(m.time == 0 for m in meta)

    def test_note_track_events(self):
        mid = _read(compile_text(self.TEXT))
        events = list(mid.tracks[1])
        ons = [m for m in events if m.type == "note_on"]
        offs = [m for m in events if m.type == "note_off"]

        assert [m.note for m in ons] == [36, 42, 42, 38, 42, 38, 42]
        assert all(m.channel == 9 for m in ons + offs)
        assert all(m.velocity == 64 for m in offs)
        assert len(offs) == len(ons)
        assert events[-1].type == "end_of_track"
        # 96 + 96 + 72 + 24 + 288
        assert sum(m.time for m in events) == 576

    def test_note_lengths(self):
        mid = _read(compile_text(self.TEXT))
        tick = 0
        started = {}
        lengths = []
        for msg in mid.tracks[1]:
            tick += msg.time
            if msg.type == "note_on":
                started[msg.note] = tick
            elif msg.type == "note_off":
                lengths.append((msg.note, tick - started.pop(msg.note)))
        assert lengths == [(36, 96), (42, 96), (42, 96), (38, 72), (42, 72), (38, 24), (42, 288)]

    def test_default_tempo_applied(self):
        mid = _read(compile_text("36"))
        tempo = next(m for m in mid.tracks[0] if m.type == "set_tempo")
        assert tempo.tempo == 500_000

    def test_explicit_default_bpm(self):
        mid = _read(compile_text("36", default_bpm=60))
        tempo = next(m for m in mid.tracks[0] if m.type == "set_tempo")
        assert tempo.tempo == 1_000_000

    def test_directive_beats_default_bpm(self):
        mid = _read(compile_text("bpm:150 36", default_bpm=60))
        tempo = next(m for m in mid.tracks[0] if m.type == "set_tempo")
        assert tempo.tempo == 400_000
