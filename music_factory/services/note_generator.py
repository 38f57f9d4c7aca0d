"""Blog-style article draft (note.com) about a song analysis."""

from __future__ import annotations

from music_factory.models.analysis import Analysis
from music_factory.services.sections import format_section_chain

NOT_SET = "-"
FOOTER = "*この記事はAI分析ツールを使用して作成されました。*"


def _value(value: object) -> str:
    if value is None or value == "" or value == []:
        return NOT_SET
    return str(value)


def _kv(key: str, value: object) -> str:
    return f"- **{key}**: {_value(value)}"


def build_note_content(analysis: Analysis, slug: str) -> str:
    song = analysis.source_song
    structure = analysis.music_structure
    arrangement = analysis.arrangement
    lyrics = analysis.lyrics_design
    style = analysis.core_type or "オリジナル"

    tags = ["AI音楽", "Suno", "作曲"]
    if analysis.core_type:
        tags.append(analysis.core_type)

    lines = [
        "---",
        f'title: "「{song.title}」風の曲を作る"',
        f"slug: {slug}",
        f"tags: [{', '.join(tags)}]",
        "---",
        "",
        f"# 「{song.title}」風の曲を作る",
        "",
        f"{song.artist or '作者不明'}の「{song.title}」を参考に、",
        f"{style}スタイルで曲を作成してみました。",
        "",
        "## 構成",
        "",
        _kv("曲の長さ", structure.target_length),
        _kv("テンポ", f"{structure.tempo_bpm:g} BPM"),
        _kv("キー", structure.key_mode),
        _kv("エネルギーカーブ", structure.energy_curve),
        "",
        "### セクション構成",
        "",
        "```",
        format_section_chain(structure.sections),
        "```",
        "",
        "## アレンジ",
        "",
        _kv("ジャンル", ", ".join(arrangement.genre_tags)),
        _kv("中心楽器", arrangement.center),
        _kv("リズム", arrangement.rhythm),
        _kv("ベース", arrangement.bass),
        _kv("ダイナミクス", arrangement.dynamics),
    ]
    if arrangement.instruments:
        lines.append(_kv("楽器", ", ".join(arrangement.instruments)))
    if arrangement.ear_candy:
        lines.append(_kv("イヤーキャンディ", arrangement.ear_candy))
    lines.append("")

    density = arrangement.density
    if density is not None:
        lines += [
            "### 音の密度",
            "",
            f"- Verse: {_value(density.verse)}",
            f"- Chorus: {_value(density.chorus)}",
            f"- Final: {_value(density.final)}",
            "",
        ]

    chords = analysis.chord_progression
    if chords is not None:
        lines += ["## コード進行", "", "(Roman numerals表記の推定値)", ""]
        for label, chord in (
            ("Verse", chords.verse),
            ("Pre-Chorus", chords.prechorus),
            ("Chorus", chords.chorus),
            ("Bridge", chords.bridge),
        ):
            if chord is not None and chord.pattern:
                feel = f" ({chord.feel})" if chord.feel else ""
                lines.append(f"- **{label}**: {chord.pattern}{feel}")
        lines.append("")

    lines += [
        "## 歌詞デザイン",
        "",
        _kv("言語", lyrics.language),
        _kv("視点", lyrics.perspective),
        _kv("情景描写", lyrics.scenery),
        _kv("感情表現", lyrics.emotion_expression),
        _kv("言語密度", lyrics.word_density or "medium"),
        "",
    ]

    if lyrics.theme:
        lines += ["### テーマ", "", *(f"- {theme}" for theme in lyrics.theme), ""]

    if analysis.concept_keywords:
        lines += [
            "## コンセプトキーワード",
            "",
            " ".join(f"`{keyword}`" for keyword in analysis.concept_keywords),
            "",
        ]

    lines += ["---", "", FOOTER, ""]
    return "\n".join(lines)
