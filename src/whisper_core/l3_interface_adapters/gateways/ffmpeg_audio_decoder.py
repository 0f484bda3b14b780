"""Gateway: audio decoder — reads any audio format via ffprobe/ffmpeg subprocesses."""

from __future__ import annotations

import json
import logging
import os
import shutil
import subprocess  # noqa: S404 -- intentional: shells out to ffmpeg with a fixed arg list, not shell=True
from pathlib import Path

import numpy as np

from whisper_core.l1_entities.audio import DecodedAudio
from whisper_core.l1_entities.errors import InsufficientMemoryError, SourceNotFoundError, UnsupportedFormatError

log = logging.getLogger('wcore.audio')

_FFMPEG_TIMEOUT = 300  # seconds
_FFPROBE_TIMEOUT = 30  # seconds


class FfmpegAudioDecoder:
    """Decodes to interleaved float32 at the source's own rate and channel count.

    Rate conversion and downmixing are left to the caller; ffmpeg only
    demuxes and decodes the first audio stream.
    """

    def decode(self, path: Path) -> DecodedAudio:
        if not path.is_file():
            raise SourceNotFoundError(f'Audio file not found: {path}')
        if not os.access(path, os.R_OK):
            raise SourceNotFoundError(f'Audio file cannot be opened: {path}')

        for tool in ('ffprobe', 'ffmpeg'):
            if shutil.which(tool) is None:
                raise UnsupportedFormatError(
                    f'{tool} is required to decode audio but was not found on PATH.\n'
                    '  macOS:  brew install ffmpeg\n  Debian: apt install ffmpeg'
                )

        sample_rate, channels = _stream_info(path)
        raw = _run(
            [
                'ffmpeg',
                '-i',
                str(path),
                '-map',
                '0:a:0',
                '-f',
                'f32le',
                '-acodec',
                'pcm_f32le',
                '-v',
                'quiet',
                'pipe:1',
            ],
            path,
            _FFMPEG_TIMEOUT,
        )
        if not raw:
            raise UnsupportedFormatError(f'ffmpeg produced no audio output for: {path}')

        try:
            samples = np.frombuffer(raw, dtype=np.float32).copy()
        except MemoryError as exc:
            raise InsufficientMemoryError(f'Cannot allocate {len(raw):,} bytes of audio for: {path}') from exc

        log.debug('Decoded %s: %d samples, %d Hz, %d ch', path, len(samples), sample_rate, channels)
        return DecodedAudio(samples=samples, sample_rate=sample_rate, channels=channels)


def _stream_info(path: Path) -> tuple[int, int]:
    """Return (sample_rate, channels) of the first audio stream."""
    out = _run(
        [
            'ffprobe',
            '-v',
            'error',
            '-select_streams',
            'a:0',
            '-show_entries',
            'stream=sample_rate,channels',
            '-of',
            'json',
            str(path),
        ],
        path,
        _FFPROBE_TIMEOUT,
    )
    try:
        streams = json.loads(out.decode('utf-8', errors='replace')).get('streams') or []
        stream = streams[0]
        return int(stream['sample_rate']), int(stream['channels'])
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        raise UnsupportedFormatError(f'No decodable audio stream in: {path}') from exc


def _run(cmd: list[str], path: Path, timeout: int) -> bytes:
    try:
        result = subprocess.run(cmd, capture_output=True, timeout=timeout)  # noqa: S603
    except subprocess.TimeoutExpired as exc:
        raise UnsupportedFormatError(f'{cmd[0]} timed out after {timeout}s processing: {path}') from exc
    except OSError as exc:
        raise UnsupportedFormatError(f'Failed to launch {cmd[0]}: {exc}') from exc

    if result.returncode != 0:
        stderr = result.stderr.decode('utf-8', errors='replace').strip()
        raise UnsupportedFormatError(f'{cmd[0]} exited with code {result.returncode} for: {path}\n{stderr}')
    return result.stdout
