"""Tests for mode identifiers and the mode registry."""

from itertools import combinations

import pytest

from malody_chart import DEFAULT_REGISTRY, KeyChart, Mode, ModeNamespace, ModeRegistry
from malody_chart.key import KeyEffect, KeyNote

ALL_NAMES = ("key", "catch", "pad", "taiko", "ring", "slide", "live")


class TestModeTable:
    """The fixed identifier table."""

    def test_identifiers(self) -> None:
        """Identifiers match the game's values, leaving 1 and 2 unused."""
        assert dict(DEFAULT_REGISTRY.modes) == {
            "key": 0,
            "catch": 3,
            "pad": 4,
            "taiko": 5,
            "ring": 6,
            "slide": 7,
            "live": 8,
        }

    def test_names(self) -> None:
        """Names are listed in identifier order."""
        assert DEFAULT_REGISTRY.names == ALL_NAMES

    @pytest.mark.parametrize("mode_id", [1, 2, 9, -1])
    def test_unregistered_identifiers(self, mode_id: int) -> None:
        """Reserved and unknown identifiers have no name."""
        assert DEFAULT_REGISTRY.name_for(mode_id) is None

    def test_name_for(self) -> None:
        """Identifiers resolve to names."""
        assert DEFAULT_REGISTRY.name_for(0) == "key"
        assert DEFAULT_REGISTRY.name_for(Mode.LIVE) == "live"
        assert DEFAULT_REGISTRY.name_for("0") is None
        assert DEFAULT_REGISTRY.name_for(False) is None

    def test_registry_is_read_only(self) -> None:
        """The lookup tables cannot be mutated."""
        with pytest.raises(TypeError):
            DEFAULT_REGISTRY.modes["extra"] = 9  # type: ignore[index]


class TestBits:
    """Mode bit fields."""

    @pytest.mark.parametrize("name", ALL_NAMES)
    def test_every_name_has_a_bit(self, name: str) -> None:
        """No registered name resolves to None."""
        assert DEFAULT_REGISTRY.bit_for(name) is not None

    def test_bit_for_name_and_id(self) -> None:
        """Names and identifiers give the same bit."""
        assert DEFAULT_REGISTRY.bit_for("pad") == 1 << 4
        assert DEFAULT_REGISTRY.bit_for(4) == 1 << 4
        assert DEFAULT_REGISTRY.bit_for(Mode.KEY) == 1

    @pytest.mark.parametrize("value", ["Key", "unknown", 1, 2, 42, -3, True])
    def test_bit_for_unregistered(self, value: object) -> None:
        """Unregistered names and identifiers give None."""
        assert DEFAULT_REGISTRY.bit_for(value) is None  # type: ignore[arg-type]

    def test_combined_bits_empty(self) -> None:
        """No input gives None."""
        assert DEFAULT_REGISTRY.combined_bits() is None

    def test_combined_bits_unresolvable(self) -> None:
        """Entirely unresolvable input gives None."""
        assert DEFAULT_REGISTRY.combined_bits("nope", 2) is None

    def test_combined_bits_skips_unknown(self) -> None:
        """Unknown values are skipped among valid ones."""
        assert DEFAULT_REGISTRY.combined_bits("key", "nope") == 1

    def test_combined_bits_mixed_input(self) -> None:
        """Names and identifiers can be mixed."""
        assert DEFAULT_REGISTRY.combined_bits("key", 3, Mode.SLIDE) == 1 | 8 | 128

    def test_combined_bits_duplicates(self) -> None:
        """Repeated modes are ORed, not added."""
        assert DEFAULT_REGISTRY.combined_bits("key", 0, "key") == 1

    def test_modes_from_all_bits(self) -> None:
        """A value with every bit set lists every mode."""
        assert DEFAULT_REGISTRY.modes_from_bits(-1) == frozenset(ALL_NAMES)

    def test_modes_from_zero(self) -> None:
        """No bits means no modes."""
        assert DEFAULT_REGISTRY.modes_from_bits(0) == frozenset()

    @pytest.mark.parametrize("size", range(1, len(ALL_NAMES) + 1))
    def test_round_trip(self, size: int) -> None:
        """Bits built from names decode back to the same names."""
        for names in combinations(ALL_NAMES, size):
            bits = DEFAULT_REGISTRY.combined_bits(*names)
            assert bits is not None
            assert DEFAULT_REGISTRY.modes_from_bits(bits) == frozenset(names)


class TestNamespaces:
    """Implemented mode types."""

    def test_key_namespace(self) -> None:
        """Key mode is implemented with its own entry types."""
        namespace = DEFAULT_REGISTRY.namespace_for(Mode.KEY)
        assert namespace == ModeNamespace(chart=KeyChart, effect=KeyEffect, note=KeyNote)
        assert namespace.mode == 0

    @pytest.mark.parametrize("mode", [m for m in Mode if m is not Mode.KEY])
    def test_other_modes_unimplemented(self, mode: Mode) -> None:
        """Registered modes other than key have no namespace yet."""
        assert DEFAULT_REGISTRY.name_for(mode) is not None
        assert DEFAULT_REGISTRY.namespace_for(mode) is None

    def test_with_namespace_returns_new_registry(self) -> None:
        """Adding a namespace leaves the original registry untouched."""
        bare = ModeRegistry.from_enum()
        extended = bare.with_namespace(ModeNamespace.of(KeyChart))
        assert bare.namespace_for(0) is None
        assert extended.namespace_for(0) is not None
        assert dict(extended.modes) == dict(bare.modes)
