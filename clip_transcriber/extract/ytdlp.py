"""yt-dlp audio extractor.

WHY: The service needs an audio clip of an arbitrary window of a remote
video. yt-dlp can download the audio track and hand it to ffmpeg with
seek/duration arguments, producing just the requested window as a single
file.

HOW: Builds a yt-dlp command line (extract audio, convert to the target
format, pass ``-ss <start> -t <duration>`` to the ffmpeg post-processor,
write to the scoped path) and runs it as an asyncio subprocess. If the
awaiting task is cancelled (request cancelled, or the pipeline's
extraction budget expired) the child process is killed and reaped before
the cancellation propagates.

RULES:
- The binary must be on PATH (or an absolute path); absence is ExtractionFailed
- Non-zero exit is ExtractionFailed with the stderr tail as cause
- Source ids are URL-quoted into SOURCE_URL_TEMPLATE, never passed as
  bare arguments (an id starting with "-" cannot become an option)
- Times are formatted with two decimals, matching ffmpeg's seek precision
  used by the service
"""

from __future__ import annotations

import asyncio
import logging
import shutil
from urllib.parse import quote

from clip_transcriber.config import AUDIO_FORMAT, SOURCE_URL_TEMPLATE, YT_DLP_BINARY
from clip_transcriber.core.audio import ScopedAudioFile
from clip_transcriber.core.interfaces import AudioExtractor
from clip_transcriber.core.window import TimeWindow
from clip_transcriber.errors import ExtractionFailed

logger = logging.getLogger(__name__)

_STDERR_TAIL_CHARS = 500


class YtDlpExtractor(AudioExtractor):
    """Extract a time window of a video's audio track with yt-dlp.

    Args:
        binary: yt-dlp executable name or path.
        audio_format: Target audio format (also the artifact extension).
        url_template: Source URL with a ``{video_id}`` placeholder.
    """

    def __init__(
        self,
        binary: str = YT_DLP_BINARY,
        audio_format: str = AUDIO_FORMAT,
        url_template: str = SOURCE_URL_TEMPLATE,
    ) -> None:
        self._binary = binary
        self._audio_format = audio_format
        self._url_template = url_template
        self.file_suffix = f".{audio_format}"

    def source_url(self, source_id: str) -> str:
        """Build the download URL for a source identifier."""
        return self._url_template.format(video_id=quote(source_id, safe=""))

    def build_command(
        self,
        binary: str,
        source_id: str,
        window: TimeWindow,
        output_path: str,
    ) -> list[str]:
        """Return the full yt-dlp argument vector for one extraction."""
        return [
            binary,
            "--no-playlist",
            "-x",
            "--audio-format", self._audio_format,
            "--postprocessor-args",
            f"ffmpeg:-ss {window.start:.2f} -t {window.duration:.2f}",
            "-o", output_path,
            self.source_url(source_id),
        ]

    async def extract(
        self,
        source_id: str,
        window: TimeWindow,
        audio: ScopedAudioFile,
    ) -> ScopedAudioFile:
        """Run yt-dlp and write the clip to audio.path.

        Raises:
            ExtractionFailed: If yt-dlp is missing, cannot start, or exits
                non-zero.
        """
        binary = shutil.which(self._binary)
        if binary is None:
            raise ExtractionFailed(
                "yt-dlp is not available",
                cause=f"{self._binary} not found on PATH",
            )

        cmd = self.build_command(binary, source_id, window, str(audio.path))
        logger.debug("Running %s", " ".join(cmd))

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise ExtractionFailed("Failed to start yt-dlp", cause=str(exc)) from exc

        try:
            _, stderr = await proc.communicate()
        except asyncio.CancelledError:
            await _terminate(proc)
            raise

        if proc.returncode != 0:
            tail = stderr.decode("utf-8", errors="replace").strip()[-_STDERR_TAIL_CHARS:]
            raise ExtractionFailed(
                f"yt-dlp failed with exit status {proc.returncode}",
                cause=tail or None,
            )

        logger.info("Extracted audio for %s to %s", source_id, audio.path.name)
        return audio


async def _terminate(proc: asyncio.subprocess.Process) -> None:
    """Kill a running child process and wait for it to exit."""
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
    await proc.wait()
    logger.warning("Killed yt-dlp (pid %s) after cancellation", proc.pid)
