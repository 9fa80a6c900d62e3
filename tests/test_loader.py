"""Tests for chart JSON loading."""

import io
import json
from pathlib import Path

import pytest

from malody_chart import (
    DEFAULT_REGISTRY,
    CommandEntry,
    FieldTypeMismatch,
    InvalidDenominator,
    KeyChart,
    KeyNote,
    MissingField,
    ModeNotImplemented,
    ModeRegistry,
    SongMetadata,
    UnsupportedMode,
    build_bag,
    load,
    parse,
)

TESTDATA_DIR = Path(__file__).parent.parent / "testdata"


@pytest.fixture
def key_chart_json() -> dict:
    """Load the 4K sample chart."""
    with open(TESTDATA_DIR / "key_4k.json", encoding="utf-8") as f:
        return json.load(f)


def minimal_document(**meta_overrides: object) -> dict:
    meta = {
        "$ver": 0,
        "creator": "me",
        "background": "bg.png",
        "version": "4K Easy",
        "preview": 0,
        "id": 1,
        "mode": 0,
        "time": 0,
        "song": {"id": 2, "artist": "A", "title": "T"},
        "mode_ext": {"column": 4, "bar_begin": 2},
    }
    meta.update(meta_overrides)
    return {
        "meta": meta,
        "time": [{"beat": [0, 0, 1], "bpm": 120}],
        "effect": [],
        "note": [{"beat": [0, 0, 1], "column": 2}],
    }


class TestBuildBag:
    """Remapping chart JSON into the construction bag."""

    def test_meta_remapped(self) -> None:
        """Chart JSON names become bag names."""
        bag = build_bag(minimal_document())
        assert bag["meta"]["version"] == 0
        assert bag["meta"]["name"] == "4K Easy"
        assert bag["meta"]["bg"] == "bg.png"
        assert bag["meta"]["chart_id"] == 1
        assert bag["meta"]["set_id"] == 2
        assert bag["meta"]["song"] == {"artist": "A", "title": "T"}

    def test_arrays_passed_through(self) -> None:
        """Entry arrays are not touched by the remap."""
        document = minimal_document()
        bag = build_bag(document)
        assert bag["timing"] == document["time"]
        assert bag["object"] == document["note"]
        assert bag["effect"] == []
        assert bag["extra"] == {"column": 4, "bar_begin": 2}
        assert bag["passthrough"] is None

    def test_missing_arrays_default_to_empty(self) -> None:
        """Absent arrays become empty lists."""
        bag = build_bag({"meta": {"mode": 0}})
        assert bag["timing"] == []
        assert bag["effect"] == []
        assert bag["object"] == []

    def test_alias_song_names(self, key_chart_json: dict) -> None:
        """artistorg and titleorg feed the unicode names."""
        song = build_bag(key_chart_json)["meta"]["song"]
        assert song["artist_unicode"] == "アーティスト"
        assert song["title_unicode"] == "タイトル"

    def test_explicit_unicode_names_win(self) -> None:
        """artist_unicode overrides artistorg when both are present."""
        document = minimal_document(song={"id": 2, "artistorg": "old", "artist_unicode": "new"})
        assert build_bag(document)["meta"]["song"]["artist_unicode"] == "new"


class TestParseMinimal:
    """Parsing a minimal key chart."""

    def test_minimal_key_chart(self) -> None:
        """One timing point, no effects, one note."""
        chart = parse(minimal_document())
        assert isinstance(chart, KeyChart)
        assert len(chart.objects) == 1
        assert isinstance(chart.objects[0], KeyNote)
        assert chart.objects[0].column == 2
        assert chart.effects == ()
        assert chart.columns == 4
        assert chart.bar_begin == 2
        assert chart.extension_data() == {"column": 4, "bar_begin": 2}

    def test_unknown_fields_ignored(self) -> None:
        """Extra keys anywhere are tolerated."""
        document = minimal_document(future_field=True)
        document["note"][0]["style"] = 9
        document["unknown_top_level"] = {}
        chart = parse(document)
        assert chart.objects[0].to_dict() == {"beat": [0, 0, 1], "column": 2}


class TestParseSample:
    """Parsing the 4K sample chart."""

    def test_metadata(self, key_chart_json: dict) -> None:
        """Metadata and song information are read."""
        chart = parse(key_chart_json)
        assert chart.creator == "Tester"
        assert chart.name == "4K Normal"
        assert chart.preview == 31000
        assert chart.set_id == 678
        assert chart.chart_id == 12345
        assert chart.song == SongMetadata(
            artist="Artist",
            title="Title",
            artist_unicode="アーティスト",
            title_unicode="タイトル",
        )

    def test_sorted_collections(self, key_chart_json: dict) -> None:
        """Entries come out in time order."""
        chart = parse(key_chart_json)
        assert [t.bpm for t in chart.timings] == [120, 180]
        assert [e.payload["scroll"] for e in chart.effects] == [0.5, 2.0]
        assert [o.time.as_tuple() for o in chart.objects] == [
            (0, 0, 1),
            (0, 0, 1),
            (1, 2, 4),
            (2, 0, 1),
        ]

    def test_commands_and_notes(self, key_chart_json: dict) -> None:
        """The sample has one command and three notes, one of them a hold."""
        chart = parse(key_chart_json)
        commands = [o for o in chart.objects if type(o) is CommandEntry]
        assert len(commands) == 1
        assert commands[0].sound == "song.ogg"
        assert commands[0].offset == 211
        assert len(chart.notes) == 3
        assert [n.is_hold for n in chart.notes] == [False, False, True]

    def test_passthrough(self, key_chart_json: dict) -> None:
        """The extra block is preserved verbatim."""
        chart = parse(key_chart_json)
        assert chart.passthrough == key_chart_json["extra"]


class TestParseErrors:
    """Error reporting."""

    def test_integer_field_as_text(self) -> None:
        """A text preview names the field and both types."""
        with pytest.raises(FieldTypeMismatch, match=r"preview \(given str\), expected int"):
            parse(minimal_document(preview="0"))

    def test_missing_field(self) -> None:
        """A missing creator is reported by its bag name."""
        document = minimal_document()
        del document["meta"]["creator"]
        with pytest.raises(MissingField, match="creator"):
            parse(document)

    def test_missing_song_id(self) -> None:
        """Without a song id there is no set id."""
        with pytest.raises(MissingField, match="set_id"):
            parse(minimal_document(song={"title": "T"}))

    @pytest.mark.parametrize("mode", [1, 2, 9, -1, "0", None])
    def test_unsupported_mode(self, mode: object) -> None:
        """Identifiers without a name are unsupported."""
        with pytest.raises(UnsupportedMode) as excinfo:
            parse(minimal_document(mode=mode))
        assert excinfo.value.mode_id == mode

    def test_missing_mode(self) -> None:
        """A document without a mode is unsupported."""
        document = minimal_document()
        del document["meta"]["mode"]
        with pytest.raises(UnsupportedMode):
            parse(document)

    @pytest.mark.parametrize("mode", [3, 4, 5, 6, 7, 8])
    def test_mode_not_implemented(self, mode: int) -> None:
        """Named modes without types are not implemented."""
        with pytest.raises(ModeNotImplemented) as excinfo:
            parse(minimal_document(mode=mode))
        assert excinfo.value.mode_id == mode
        assert excinfo.value.name == DEFAULT_REGISTRY.name_for(mode)

    def test_custom_registry(self) -> None:
        """A registry without namespaces implements nothing."""
        with pytest.raises(ModeNotImplemented):
            parse(minimal_document(), registry=ModeRegistry.from_enum())

    def test_bad_note_beat(self) -> None:
        """A zero denominator in a note fails the whole parse."""
        document = minimal_document()
        document["note"].append({"beat": [1, 0, 0], "column": 1})
        with pytest.raises(InvalidDenominator):
            parse(document)


class TestLoad:
    """Accepted input shapes."""

    def test_text_stream(self) -> None:
        """A text stream is read and parsed."""
        stream = io.StringIO(json.dumps(minimal_document()))
        assert isinstance(load(stream), KeyChart)

    def test_binary_stream(self) -> None:
        """A binary stream is read and parsed."""
        stream = io.BytesIO(json.dumps(minimal_document()).encode("utf-8"))
        assert isinstance(load(stream), KeyChart)

    def test_text(self) -> None:
        """A JSON string is parsed."""
        assert isinstance(load(json.dumps(minimal_document())), KeyChart)

    def test_bytes(self) -> None:
        """A JSON bytes blob is parsed."""
        assert isinstance(load(json.dumps(minimal_document()).encode("utf-8")), KeyChart)

    def test_mapping(self) -> None:
        """An already parsed object is used directly."""
        assert isinstance(load(minimal_document()), KeyChart)

    def test_file(self) -> None:
        """An open chart file loads."""
        with open(TESTDATA_DIR / "key_4k.json", encoding="utf-8") as f:
            chart = load(f)
        assert chart.columns == 4

    def test_all_shapes_agree(self) -> None:
        """Every input shape yields the same document."""
        document = minimal_document()
        text = json.dumps(document)
        assert load(text) == load(io.StringIO(text)) == load(document)

    def test_invalid_json(self) -> None:
        """Malformed text raises a decode error."""
        with pytest.raises(json.JSONDecodeError):
            load("{not json")

    def test_unsupported_input(self) -> None:
        """Other input types are rejected."""
        with pytest.raises(TypeError, match="Cannot load chart"):
            load(42)  # type: ignore[arg-type]


class TestRoundTrip:
    """to_dict output parses back to an equal document."""

    def test_minimal_round_trip(self) -> None:
        """The minimal chart survives a round trip."""
        chart = parse(minimal_document())
        assert parse(chart.to_dict()) == chart

    def test_sample_round_trip(self, key_chart_json: dict) -> None:
        """The sample chart survives a round trip, including JSON encoding."""
        chart = parse(key_chart_json)
        again = load(json.dumps(chart.to_dict()))
        assert again == chart
        assert again.to_dict() == chart.to_dict()

    def test_round_trip_output_shape(self, key_chart_json: dict) -> None:
        """Output keeps the top-level chart layout."""
        data = parse(key_chart_json).to_dict()
        assert set(data) == {"meta", "time", "effect", "note", "extra"}
        assert data["meta"]["song"]["artist_unicode"] == "アーティスト"
        assert data["meta"]["mode_ext"] == {"column": 4, "bar_begin": 1}
        assert {"beat": [2, 0, 1], "column": 3, "endbeat": [3, 1, 2]} in data["note"]
        assert {
            "beat": [0, 0, 1],
            "sound": "song.ogg",
            "offset": 211,
            "vol": 100,
            "type": 1,
        } in data["note"]
