import logging

import pytest

from music_factory.services.style_generator import (
    COMPACT_MAX_CHARS,
    STYLE_MAX_CHARS,
    generate_compact_style,
    generate_style,
    get_style_char_count,
    get_tempo_description,
    is_style_within_limit,
    truncate_at_separator,
)
from music_factory.services.translations import contains_japanese


class TestTempoDescription:
    @pytest.mark.parametrize(
        "bpm, expected",
        [
            (40, "Very slow tempo"),
            (59, "Very slow tempo"),
            (60, "Slow, relaxed tempo"),
            (95, "Moderate tempo"),
            (100, "Medium, groovy tempo"),
            (130, "Upbeat tempo"),
            (150, "Fast, driving tempo"),
            (160, "Very fast, aggressive tempo"),
            (300, "Very fast, aggressive tempo"),
        ],
    )
    def test_buckets(self, bpm, expected):
        assert get_tempo_description(bpm) == expected


class TestGenerateStyle:
    def test_minimal_analysis(self, analysis):
        """A bare analysis renders the fixed blocks with defaults filled in."""
        style = generate_style(analysis)
        assert style.startswith("Genre:\nIndie Pop\n\n")
        assert "Tempo:\nModerate tempo (95 BPM)." in style
        assert "Harmony:\nMajor key." in style
        assert "Aim for about 3 minutes." in style
        assert "Intro → Verse 1 → Pre-Chorus → Chorus" in style
        assert "English lyrics." in style
        assert "Arrangement:" not in style

    def test_block_order(self, rich_analysis):
        style = generate_style(rich_analysis)
        labels = [
            "Genre:", "Style:", "Tempo:", "Harmony:", "Length / Structure:",
            "Arrangement:", "Vocals:", "Lyrics:",
        ]
        positions = [style.index(label) for label in labels]
        assert positions == sorted(positions)

    def test_rich_analysis_is_english(self, rich_analysis):
        """Japanese input fields are translated before rendering."""
        style = generate_style(rich_analysis)
        assert not contains_japanese(style)
        assert "Explosive choruses without resolution Japanese song." in style
        assert "Acoustic guitar centered." in style
        assert "Verse: stable, gentle (I - V - vi - IV)." in style
        assert "Chorus should be catchy and repeatable." in style
        assert "Avoid direct emotion words; use imagery instead." in style
        assert "First person perspective." in style

    def test_within_limit(self, rich_analysis):
        assert len(generate_style(rich_analysis)) <= STYLE_MAX_CHARS

    def test_overlong_style_truncated(self, make_analysis, caplog):
        """Oversized input is cut on a token boundary and marked with an ellipsis."""
        analysis = make_analysis(
            arrangement={
                "genre_tags": ["Indie Pop"],
                "instruments": [f"instrument number {i}" for i in range(80)],
            }
        )
        with caplog.at_level(logging.WARNING):
            style = generate_style(analysis)
        assert len(style) <= STYLE_MAX_CHARS
        assert style.endswith("...")
        assert "truncating" in caplog.text

        full = generate_style(analysis, max_chars=100_000)
        head = style[: -len("...")]
        assert full.startswith(head)
        assert full[len(head)] in " \n,.;"
        last_token = head.split()[-1]
        assert last_token in full.replace(",", " ").split()

    def test_custom_limit(self, rich_analysis):
        style = generate_style(rich_analysis, max_chars=120)
        assert len(style) <= 120
        assert style.endswith("...")


class TestTruncateAtSeparator:
    def test_short_text_untouched(self):
        assert truncate_at_separator("short text", 50) == "short text"

    def test_cuts_on_space(self):
        assert truncate_at_separator("alpha beta gamma delta", 14) == "alpha beta..."

    def test_strips_trailing_punctuation(self):
        assert truncate_at_separator("alpha, beta, gamma, delta", 16) == "alpha, beta..."

    def test_hard_cut_without_separator(self):
        assert truncate_at_separator("abcdefghijklmnop", 10) == "abcdefg..."

    def test_never_exceeds_limit(self):
        text = "word " * 400
        for limit in (5, 17, 100, 999):
            assert len(truncate_at_separator(text, limit)) <= limit


class TestCompactStyle:
    def test_rich_analysis(self, rich_analysis):
        compact = generate_compact_style(rich_analysis)
        assert compact == (
            "J-Rock, Alternative Pop, nostalgic, acoustic guitar, airy female vocals, "
            "quiet verses, explosive choruses"
        )
        assert len(compact) <= COMPACT_MAX_CHARS

    def test_minimal_analysis(self, analysis):
        assert generate_compact_style(analysis) == "Indie Pop, steady verse-chorus flow"

    def test_overlong_only_warns(self, make_analysis, caplog):
        """Compact output over the target is logged but not shortened."""
        long_tag = "x" * 250
        analysis = make_analysis(arrangement={"genre_tags": [long_tag]})
        with caplog.at_level(logging.WARNING):
            compact = generate_compact_style(analysis)
        assert long_tag in compact
        assert "Compact style" in caplog.text


class TestCharCount:
    def test_count_and_limit(self):
        assert get_style_char_count("abc") == 3
        assert is_style_within_limit("a" * 1000)
        assert not is_style_within_limit("a" * 1001)
