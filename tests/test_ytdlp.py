"""Tests for the yt-dlp extractor.

WHY: The extractor is the only code that spawns a process. Its command
line decides what gets downloaded, and its cancellation path decides
whether a timed-out request leaves a child process running.

HOW: Command construction is tested directly. Process behavior is
tested against tiny POSIX shell scripts standing in for yt-dlp: one that
writes the output file, one that fails with a message on stderr, and one
that sleeps until it is killed.

RULES:
- The real yt-dlp is never invoked
- Subprocess tests are skipped on Windows
"""

from __future__ import annotations

import asyncio
import os
import stat
import sys
from pathlib import Path

import pytest

from clip_transcriber.core.audio import ScopedAudioFile
from clip_transcriber.core.window import TimeWindow
from clip_transcriber.errors import ExtractionFailed
from clip_transcriber.extract.ytdlp import YtDlpExtractor

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="uses /bin/sh scripts")


def _write_script(path: Path, body: str) -> Path:
    path.write_text("#!/bin/sh\n" + body)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def audio(scratch_dir) -> ScopedAudioFile:
    scoped = ScopedAudioFile.allocate("abc123", parent=scratch_dir)
    yield scoped
    scoped.release()


# ---------------------------------------------------------------------------
# Command construction
# ---------------------------------------------------------------------------


class TestBuildCommand:

    def test_reference_command(self):
        extractor = YtDlpExtractor(binary="yt-dlp")
        cmd = extractor.build_command("/usr/bin/yt-dlp", "abc123", TimeWindow(10.0, 15.0), "/tmp/x/abc.mp3")

        assert cmd == [
            "/usr/bin/yt-dlp",
            "--no-playlist",
            "-x",
            "--audio-format", "mp3",
            "--postprocessor-args", "ffmpeg:-ss 10.00 -t 5.00",
            "-o", "/tmp/x/abc.mp3",
            "https://www.youtube.com/watch?v=abc123",
        ]

    def test_fractional_times_use_two_decimals(self):
        cmd = YtDlpExtractor().build_command("yt-dlp", "abc", TimeWindow(1.234, 3.5), "out.mp3")
        assert "ffmpeg:-ss 1.23 -t 2.27" in cmd

    def test_source_id_is_last_and_quoted(self):
        extractor = YtDlpExtractor()
        cmd = extractor.build_command("yt-dlp", "--exec rm", TimeWindow(0, 1), "out.mp3")
        assert cmd[-1] == "https://www.youtube.com/watch?v=--exec%20rm"

    def test_custom_url_template(self):
        extractor = YtDlpExtractor(url_template="https://example.test/v/{video_id}")
        assert extractor.source_url("a/b") == "https://example.test/v/a%2Fb"

    def test_audio_format_sets_suffix(self):
        extractor = YtDlpExtractor(audio_format="m4a")
        assert extractor.file_suffix == ".m4a"
        cmd = extractor.build_command("yt-dlp", "abc", TimeWindow(0, 1), "out.m4a")
        assert cmd[cmd.index("--audio-format") + 1] == "m4a"


# ---------------------------------------------------------------------------
# Process behavior
# ---------------------------------------------------------------------------


class TestExtract:

    def test_missing_binary(self, tmp_path, audio):
        extractor = YtDlpExtractor(binary=str(tmp_path / "no-such-yt-dlp"))
        with pytest.raises(ExtractionFailed, match="not available"):
            asyncio.run(extractor.extract("abc123", TimeWindow(0, 1), audio))

    @posix_only
    def test_success_writes_artifact(self, tmp_path, audio):
        script = _write_script(tmp_path / "yt-dlp", (
            'while [ $# -gt 0 ]; do\n'
            '  if [ "$1" = "-o" ]; then shift; out="$1"; fi\n'
            '  shift\n'
            'done\n'
            'printf "ID3 fake" > "$out"\n'
        ))
        extractor = YtDlpExtractor(binary=str(script))

        result = asyncio.run(extractor.extract("abc123", TimeWindow(10.0, 15.0), audio))

        assert result is audio
        assert audio.is_materialized()
        assert audio.path.read_bytes() == b"ID3 fake"

    @posix_only
    def test_nonzero_exit_carries_stderr(self, tmp_path, audio):
        script = _write_script(tmp_path / "yt-dlp", (
            'echo "ERROR: [youtube] abc123: Video unavailable" >&2\n'
            'exit 1\n'
        ))
        extractor = YtDlpExtractor(binary=str(script))

        with pytest.raises(ExtractionFailed) as exc_info:
            asyncio.run(extractor.extract("abc123", TimeWindow(10.0, 15.0), audio))

        assert exc_info.value.message == "yt-dlp failed with exit status 1"
        assert "Video unavailable" in exc_info.value.cause

    @posix_only
    def test_cancellation_kills_process(self, tmp_path, audio):
        pid_file = tmp_path / "pid"
        script = _write_script(tmp_path / "yt-dlp", (
            f'echo $$ > "{pid_file}"\n'
            'exec sleep 30\n'
        ))
        extractor = YtDlpExtractor(binary=str(script))

        async def _run():
            task = asyncio.ensure_future(extractor.extract("abc123", TimeWindow(0, 1), audio))
            for _ in range(200):
                if pid_file.exists() and pid_file.read_text().strip():
                    break
                await asyncio.sleep(0.01)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(_run())

        pid = int(pid_file.read_text().strip())
        with pytest.raises(ProcessLookupError):
            os.kill(pid, 0)

    @posix_only
    def test_wait_for_timeout_kills_process(self, tmp_path, audio):
        script = _write_script(tmp_path / "yt-dlp", "exec sleep 30\n")
        extractor = YtDlpExtractor(binary=str(script))

        async def _run():
            await asyncio.wait_for(
                extractor.extract("abc123", TimeWindow(0, 1), audio), timeout=0.2
            )

        with pytest.raises(asyncio.TimeoutError):
            asyncio.run(_run())
