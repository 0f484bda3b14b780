"""Port: audio container/codec decoder."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from whisper_core.l1_entities.audio import DecodedAudio


class AudioDecoder(Protocol):
    """Decodes a file into interleaved float32 PCM at its native rate and channel count."""

    def decode(self, path: Path) -> DecodedAudio:
        """Raise SourceNotFoundError, UnsupportedFormatError or InsufficientMemoryError on failure."""
        ...
