"""Clip Transcriber: word-level timestamps for a window of a remote video.

WHY: Captioning and indexing pipelines need word timings for a specific
segment of a video, expressed in the video's own timeline. Speech-to-text
APIs only ever see the audio they are given, so their timestamps start
at zero.

HOW: Three-stage pipeline: extract (yt-dlp pulls just the requested
window of audio), transcribe (Whisper API returns clip-relative word
timings), rebase (every timestamp is shifted by the window start). Each
stage is independently testable; HTTP and CLI are thin shells around it.

RULES:
- The pipeline depends only on the AudioExtractor / Transcriber interfaces
- Temp audio is scoped to one request and always removed
- Results are all-or-nothing
"""

__version__ = "0.1.0"
