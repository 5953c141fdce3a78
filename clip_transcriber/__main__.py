"""Package entry point for ``python -m clip_transcriber``.

Delegates to the CLI: ``python -m clip_transcriber serve`` runs the HTTP
API, ``python -m clip_transcriber transcribe VIDEO_ID START END`` runs one
transcription.
"""

import sys

from clip_transcriber.cli import main

if __name__ == "__main__":
    sys.exit(main())
