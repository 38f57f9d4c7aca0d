from music_factory.services.note_generator import FOOTER, NOT_SET, build_note_content


class TestBuildNoteContent:
    def test_frontmatter(self, rich_analysis):
        content = build_note_content(rich_analysis, "test_song")
        lines = content.splitlines()
        assert lines[0] == "---"
        assert lines[1] == 'title: "「Test Song」風の曲を作る"'
        assert "slug: test_song" in lines
        assert "tags: [AI音楽, Suno, 作曲, yorushika]" in lines

    def test_sections(self, rich_analysis):
        content = build_note_content(rich_analysis, "test_song")
        assert "Test Artistの「Test Song」を参考に、" in content
        assert "yorushikaスタイルで曲を作成してみました。" in content
        assert "- **テンポ**: 95 BPM" in content
        assert "Intro → Verse 1 → Pre-Chorus → Chorus\n→ Outro" in content
        assert "- **Verse**: I - V - vi - IV (stable, gentle)" in content
        assert "### テーマ" in content
        assert "`光と影` `孤独`" in content
        assert content.rstrip().endswith(FOOTER)

    def test_minimal_analysis(self, analysis):
        """Unset fields render as a dash and optional blocks are omitted."""
        content = build_note_content(analysis, "minimal")
        assert "オリジナルスタイル" in content
        assert f"- **中心楽器**: {NOT_SET}" in content
        assert "## コード進行" not in content
        assert "## コンセプトキーワード" not in content
        assert "tags: [AI音楽, Suno, 作曲]" in content
