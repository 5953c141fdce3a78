"""Tests for the request-scoped audio artifact."""

import logging
import shutil
from unittest.mock import patch

from clip_transcriber.core.audio import ScopedAudioFile, sanitize_source_id


class TestSanitizeSourceId:

    def test_plain_id_unchanged(self):
        assert sanitize_source_id("dQw4w9WgXcQ") == "dQw4w9WgXcQ"

    def test_path_characters_replaced(self):
        assert sanitize_source_id("../etc/passwd") == "___etc_passwd"

    def test_long_id_truncated(self):
        assert len(sanitize_source_id("x" * 500)) == 64

    def test_empty_falls_back(self):
        assert sanitize_source_id("") == "source"


class TestScopedAudioFile:

    def test_allocate_creates_private_directory(self, scratch_dir):
        audio = ScopedAudioFile.allocate("abc123", parent=scratch_dir)

        assert audio.directory.is_dir()
        assert audio.directory.parent == scratch_dir
        assert audio.path.parent == audio.directory
        assert audio.path.name.startswith("abc123_")
        assert audio.path.suffix == ".mp3"
        assert not audio.path.exists()
        audio.release()

    def test_same_source_never_collides(self, scratch_dir):
        first = ScopedAudioFile.allocate("abc123", parent=scratch_dir)
        second = ScopedAudioFile.allocate("abc123", parent=scratch_dir)
        assert first.directory != second.directory
        assert first.path != second.path
        first.release()
        second.release()

    def test_custom_suffix(self, scratch_dir):
        audio = ScopedAudioFile.allocate("abc123", suffix=".m4a", parent=scratch_dir)
        assert audio.path.suffix == ".m4a"
        audio.release()

    def test_is_materialized(self, scratch_dir):
        audio = ScopedAudioFile.allocate("abc123", parent=scratch_dir)
        assert not audio.is_materialized()
        audio.path.write_bytes(b"")
        assert not audio.is_materialized()
        audio.path.write_bytes(b"data")
        assert audio.is_materialized()
        audio.release()

    def test_release_removes_partial_files(self, scratch_dir):
        audio = ScopedAudioFile.allocate("abc123", parent=scratch_dir)
        audio.path.write_bytes(b"data")
        (audio.directory / "abc123.webm.part").write_bytes(b"partial")

        audio.release()

        assert audio.released
        assert list(scratch_dir.iterdir()) == []

    def test_release_is_idempotent(self, scratch_dir):
        audio = ScopedAudioFile.allocate("abc123", parent=scratch_dir)
        audio.release()
        audio.release()
        assert list(scratch_dir.iterdir()) == []

    def test_release_after_external_removal(self, scratch_dir):
        audio = ScopedAudioFile.allocate("abc123", parent=scratch_dir)
        shutil.rmtree(audio.directory)
        audio.release()
        assert audio.released

    def test_release_failure_is_logged(self, scratch_dir, caplog):
        audio = ScopedAudioFile.allocate("abc123", parent=scratch_dir)
        with patch("clip_transcriber.core.audio.shutil.rmtree", side_effect=OSError("busy")):
            with caplog.at_level(logging.WARNING, logger="clip_transcriber.core.audio"):
                audio.release()
        assert "Failed to clean up temp dir" in caplog.text
        shutil.rmtree(audio.directory)

    def test_context_manager_releases_on_error(self, scratch_dir):
        try:
            with ScopedAudioFile.allocate("abc123", parent=scratch_dir) as audio:
                audio.path.write_bytes(b"data")
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert list(scratch_dir.iterdir()) == []
