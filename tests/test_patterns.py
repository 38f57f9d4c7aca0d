import pytest
from pydantic import ValidationError

from music_factory.models.analysis import Section
from music_factory.services.patterns import (
    CORE_TYPE_PATTERNS,
    DEFAULT_CORE_TYPE,
    get_core_type_pattern,
    is_core_type,
    list_core_types,
)

EXPECTED = ["yorushika", "illit", "yoasobi", "aimyon", "gurenka", "byoushin"]


class TestCoreTypePatterns:
    def test_list_core_types(self):
        assert list_core_types() == EXPECTED

    @pytest.mark.parametrize("name", EXPECTED)
    def test_pattern_is_consistent(self, name):
        """Typical tempo sits inside the range and every preset has a structure."""
        pattern = CORE_TYPE_PATTERNS[name]
        assert pattern.name == name
        assert pattern.tempo_range.min <= pattern.tempo_range.typical <= pattern.tempo_range.max
        assert pattern.default_sections[0] == Section.INTRO
        assert pattern.default_sections[-1] == Section.OUTRO
        assert 1 <= len(pattern.genre_tags) <= 4

    def test_get_known(self):
        assert get_core_type_pattern("yoasobi").key_mode == "minor"

    @pytest.mark.parametrize("core_type", [None, "", "unknown"])
    def test_get_unknown_falls_back(self, core_type):
        assert get_core_type_pattern(core_type).name == DEFAULT_CORE_TYPE

    def test_is_core_type(self):
        assert is_core_type("illit")
        assert not is_core_type("ILLIT")
        assert not is_core_type(None)

    def test_patterns_immutable(self):
        pattern = CORE_TYPE_PATTERNS["yorushika"]
        with pytest.raises(ValidationError):
            pattern.name = "other"
        with pytest.raises(TypeError):
            CORE_TYPE_PATTERNS["new"] = pattern
