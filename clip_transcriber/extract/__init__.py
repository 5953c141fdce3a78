"""Audio extraction implementations.

All extractors subclass core.interfaces.AudioExtractor.
"""

from clip_transcriber.extract.ytdlp import YtDlpExtractor

__all__ = ["YtDlpExtractor"]
