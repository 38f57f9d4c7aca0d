import pytest

from music_factory.services.translations import (
    CHORD_FEEL_IDIOMS,
    DYNAMICS_IDIOMS,
    MUSIC_TERMS,
    PHRASE_OVERRIDES,
    contains_japanese,
    translate_array,
    translate_chord_feel,
    translate_concept_keywords,
    translate_dynamics,
    translate_to_english,
)


class TestContainsJapanese:
    def test_ascii_text(self):
        """Plain English has no Japanese characters."""
        assert not contains_japanese("acoustic guitar, 95 BPM")

    @pytest.mark.parametrize("text", ["ひらがな", "カタカナ", "漢字", "mixed 夏 text"])
    def test_scripts(self, text):
        """Hiragana, katakana and kanji are all detected."""
        assert contains_japanese(text)


class TestTranslateToEnglish:
    def test_identity_without_japanese(self):
        """Text without Japanese comes back untouched, spacing included."""
        text = "  Lively yet  urgent  "
        assert translate_to_english(text) == text

    def test_phrase_override_wins(self):
        """Idiomatic phrases use the override instead of word-by-word output."""
        assert translate_to_english("軽快なのに切迫感がある") == "lively yet urgent"
        assert translate_to_english("  光と影 ") == "light and shadow"

    def test_single_term(self):
        assert translate_to_english("ピアノ") == "piano"

    def test_longest_match_first(self):
        """Compound terms are not split into their substrings."""
        assert translate_to_english("アコースティックギター") == "acoustic guitar"
        assert translate_to_english("大サビ") == "final chorus"

    def test_particle_cleanup(self):
        """の becomes 'of' and whitespace is collapsed."""
        assert translate_to_english("夏の光") == "summer of light"

    def test_list_separator(self):
        assert translate_to_english("ピアノ、ギター") == "piano, guitar"

    def test_full_width_parentheses(self):
        assert translate_to_english("（ピアノ）") == "(piano)"

    def test_sentence_end(self):
        assert translate_to_english("ピアノ。") == "piano."

    def test_unknown_words_pass_through(self):
        """Words missing from the tables are kept as-is."""
        assert translate_to_english("猫") == "猫"

    def test_known_words_leave_no_japanese(self):
        """Input made only of known terms translates completely."""
        assert not contains_japanese(translate_to_english("ピアノ、ストリングス、ドラム"))

    @pytest.mark.parametrize(
        "text",
        [
            "夏の光",
            "ピアノ、ギター",
            "命の瀬戸際にいる人への呼びかけ",
            "一人称視点",
            "猫とピアノ",
            "already English",
            "",
        ],
    )
    def test_idempotent(self, text):
        """Translating twice gives the same result as translating once."""
        once = translate_to_english(text)
        assert translate_to_english(once) == once

    def test_tables_map_to_english(self):
        """Every table value is already English, so output is stable."""
        for table in (MUSIC_TERMS, PHRASE_OVERRIDES, CHORD_FEEL_IDIOMS, DYNAMICS_IDIOMS):
            for value in table.values():
                assert not contains_japanese(value)

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            MUSIC_TERMS["ピアノ"] = "keys"


class TestWrappers:
    def test_translate_array(self):
        assert translate_array(["ピアノ", "bass"]) == ["piano", "bass"]
        assert translate_array(None) == []

    def test_chord_feel_idiom(self):
        assert translate_chord_feel("上昇感を作る") == "Creating ascending tension"

    def test_chord_feel_falls_back(self):
        assert translate_chord_feel("stable, gentle") == "stable, gentle"
        assert translate_chord_feel("緊張") == "tension"

    def test_dynamics_idiom(self):
        assert translate_dynamics("サビで爆発させるが、解決はしない") == (
            "Explosive choruses without resolution"
        )
        assert translate_dynamics("restrained") == "restrained"

    def test_concept_keywords_use_imagery(self):
        assert translate_concept_keywords(["嘘", "仮面", "plain"]) == [
            "deception",
            "mask behind the smile",
            "plain",
        ]
