import pytest

from music_factory.models.analysis import Analysis
from music_factory.services.storage import DataStore


def analysis_data(**overrides) -> dict:
    """Minimal valid analysis as plain data; top-level keys can be overridden."""
    data = {
        "source_song": {"title": "Test Song", "artist": "Test Artist"},
        "music_structure": {
            "target_length": "3min",
            "tempo_bpm": 95,
            "key_mode": "major",
            "sections": ["Intro"],
        },
        "arrangement": {"genre_tags": ["Indie Pop"]},
        "lyrics_design": {"language": "en"},
    }
    data.update(overrides)
    return data


def build_analysis(**overrides) -> Analysis:
    return Analysis.model_validate(analysis_data(**overrides))


@pytest.fixture
def analysis() -> Analysis:
    return build_analysis()


@pytest.fixture
def rich_analysis() -> Analysis:
    return build_analysis(
        core_type="yorushika",
        music_structure={
            "target_length": "3min",
            "tempo_bpm": 95,
            "key_mode": "major",
            "energy_curve": "wave",
            "sections": ["Intro", "Verse1", "PreChorus", "Chorus", "Outro"],
        },
        chord_progression={
            "notation": "roman_numerals",
            "verse": {"feel": "stable, gentle", "pattern": "I - V - vi - IV"},
            "chorus": {"feel": "restrained lift", "pattern": "I - V - IV - I"},
        },
        arrangement={
            "genre_tags": ["J-Rock", "Alternative Pop"],
            "mood": ["nostalgic"],
            "center": "アコースティックギター",
            "rhythm": "light",
            "bass": "minimal",
            "density": {"verse": "low", "chorus": "medium", "final": "high"},
            "dynamics": "サビで爆発させるが、解決はしない",
        },
        lyrics_design={
            "language": "ja",
            "perspective": "一人称",
            "scenery": "rich",
            "emotion_expression": "indirect",
            "word_density": "medium",
            "theme": ["夏", "記憶"],
            "chorus_hook_rule": {
                "repeat_short_phrase": True,
                "avoid_direct_emotion_words": True,
            },
            "vocal_style": {
                "gender": "female",
                "range": "mid",
                "character": ["airy"],
                "techniques": ["falsetto"],
            },
        },
        concept_keywords=["光と影", "孤独"],
    )


@pytest.fixture
def store(tmp_path) -> DataStore:
    return DataStore(tmp_path)


@pytest.fixture
def make_analysis():
    """Factory for analyses with overridden top-level fields."""
    return build_analysis


ANALYSIS_MARKDOWN = """---
title: 夜に駆ける
artist: YOASOBI
analyzed_at: 2024-01-15
---

# 夜に駆ける 分析

## 曲の本質

- 軽快なのに切迫感がある
- 命の瀬戸際にいる人への呼びかけ

## Music Structure

- **Target Length**: ~4:20
- **Energy Curve**: build
- **Tempo**: 130 BPM

1. Intro
2. Verse 1 (Aメロ)
3. Pre-Chorus
4. Chorus
5. Verse 2
6. Pre-Chorus
7. Chorus
8. Instrumental (間奏)
9. Bridge
10. Final Chorus
11. Outro

## Harmony / Chord Progression

- **Key**: E♭ minor (短調)

### Verse

- **パターン**: i - VI - III - VII
- **雰囲気**: 不安定なマイナーループ、期待と違和感を同時に作る

### Chorus

- **Pattern**: VI - VII - i
- **Feel**: 上昇する期待感と焦燥

## Arrangement

- **ジャンル**: J-Pop × Electropop
- **設計**: 軽快なのに切迫感がある
- ピアノが全体を牽引する

| パート | 楽器 | 役割 |
|--------|------|------|
| メイン | ピアノ | 疾走感 |
| ベース | シンセベース | 低音 |
| リズム | 打ち込みドラム | ビート |

### 密度設計

- Verse: 中密度
- Chorus: 高密度
- 大サビ: 最高密度

## Lyrics Design

- **言語**: 日本語
- **視点**: 一人称
- **主題**: 焦燥、切なさ
- **言語密度**: 高

## 概念キーワード

- 夜, 駆ける, 焦燥
"""


@pytest.fixture
def analysis_markdown() -> str:
    return ANALYSIS_MARKDOWN
