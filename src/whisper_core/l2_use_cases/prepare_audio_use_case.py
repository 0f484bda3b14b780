"""Use case: turn an audio source into 16 kHz mono float32 model input."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from whisper_core.l1_entities.audio_constants import SAMPLE_RATE
from whisper_core.l1_entities.errors import InsufficientMemoryError, SourceNotFoundError, UnsupportedFormatError
from whisper_core.l2_use_cases.ports.audio_decoder import AudioDecoder

log = logging.getLogger('wcore.audio')


def resample_linear(samples: np.ndarray, from_rate: float, to_rate: float = SAMPLE_RATE) -> np.ndarray:
    """Linearly interpolate *samples* from *from_rate* to *to_rate*.

    Output length is ``floor(len / (from_rate / to_rate))``; any fractional
    trailing sample is dropped. For output index i the source position is
    ``i * ratio``; the lower neighbour is its floor and the upper neighbour is
    clamped to the last input sample.
    """
    if from_rate <= 0 or to_rate <= 0:
        raise ValueError(f'Sample rates must be positive, got {from_rate} -> {to_rate}')

    src = np.asarray(samples, dtype=np.float32)
    if from_rate == to_rate:
        return src.copy()

    n = len(src)
    ratio = from_rate / to_rate
    out_len = int(n / ratio)
    if out_len == 0:
        return np.array([], dtype=np.float32)

    pos = np.arange(out_len, dtype=np.float64) * ratio
    lower = np.minimum(np.floor(pos).astype(np.int64), n - 1)
    upper = np.minimum(lower + 1, n - 1)
    frac = (pos - lower).astype(np.float32)

    return src[lower] * (np.float32(1.0) - frac) + src[upper] * frac


def mix_to_mono(interleaved: np.ndarray, channels: int) -> np.ndarray:
    """Average interleaved ``[c0, c1, ..., c0, c1, ...]`` frames down to one channel."""
    if channels < 1:
        raise ValueError(f'Channel count must be >= 1, got {channels}')

    src = np.asarray(interleaved, dtype=np.float32)
    if channels == 1:
        return src.copy()

    frames = len(src) // channels
    framed = src[: frames * channels].reshape(frames, channels)
    return framed.sum(axis=1, dtype=np.float32) / np.float32(channels)


class PrepareAudioUseCase:
    """Decodes a source and normalizes it to what the model needs.

    Pure transform: the source is never written and every call returns a
    fresh buffer. Channels are mixed before resampling so interpolation never
    straddles two channels of an interleaved frame.
    """

    def __init__(self, decoder: AudioDecoder) -> None:
        self._decoder = decoder

    def execute(self, source: str | Path) -> np.ndarray:
        path = Path(source)
        if not path.is_file():
            raise SourceNotFoundError(f'Audio file not found: {path}')

        decoded = self._decoder.decode(path)
        if decoded.channels < 1 or decoded.sample_rate <= 0:
            raise UnsupportedFormatError(
                f'Cannot extract channel data from {path} (rate={decoded.sample_rate}, channels={decoded.channels})'
            )
        if decoded.frames == 0:
            raise UnsupportedFormatError(f'Audio file contains no samples: {path}')

        try:
            mono = mix_to_mono(decoded.samples, decoded.channels)
            audio = resample_linear(mono, decoded.sample_rate, SAMPLE_RATE)
        except MemoryError as exc:
            raise InsufficientMemoryError(f'Out of memory preparing {path}') from exc

        if len(audio) == 0:
            raise UnsupportedFormatError(f'Audio file is too short to resample: {path}')

        log.debug(
            'Prepared %s: %d Hz x %d ch → %d samples @ %d Hz',
            path,
            decoded.sample_rate,
            decoded.channels,
            len(audio),
            SAMPLE_RATE,
        )
        return audio
