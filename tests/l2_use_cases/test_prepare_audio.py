"""Tests for PrepareAudioUseCase and its resampling / downmix helpers."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from whisper_core.l1_entities.audio import DecodedAudio
from whisper_core.l1_entities.errors import InsufficientMemoryError, SourceNotFoundError, UnsupportedFormatError
from whisper_core.l2_use_cases.prepare_audio_use_case import PrepareAudioUseCase, mix_to_mono, resample_linear


class TestResampleLinear:
    def test_same_rate_is_identity_copy(self):
        src = np.linspace(-1, 1, 100, dtype=np.float32)
        out = resample_linear(src, 16000, 16000)
        np.testing.assert_array_equal(out, src)
        assert out is not src

    @pytest.mark.parametrize(
        ('rate', 'n', 'expected'),
        [(48000, 48000, 16000), (32000, 4801, 2400), (8000, 800, 1600)],
    )
    def test_output_length_is_floor_of_ratio(self, rate, n, expected):
        out = resample_linear(np.zeros(n, dtype=np.float32), rate, 16000)
        assert len(out) == expected

    def test_fractional_tail_dropped(self):
        # 7 samples at 32 kHz -> 3.5 samples at 16 kHz, floored to 3
        out = resample_linear(np.arange(7, dtype=np.float32), 32000, 16000)
        np.testing.assert_allclose(out, [0.0, 2.0, 4.0])

    def test_upsampling_interpolates_between_neighbours(self):
        out = resample_linear(np.array([0.0, 1.0], dtype=np.float32), 8000, 16000)
        # positions 0, 0.5, 1.0, 1.5; upper neighbour clamped at the last sample
        np.testing.assert_allclose(out, [0.0, 0.5, 1.0, 1.0])

    def test_non_integer_ratio(self):
        src = np.arange(300, dtype=np.float32)
        out = resample_linear(src, 24000, 16000)
        assert len(out) == 200
        ratio = 24000 / 16000
        np.testing.assert_allclose(out[:5], np.arange(5) * ratio, rtol=1e-5)

    def test_output_is_float32(self):
        out = resample_linear(np.zeros(100, dtype=np.float64), 48000, 16000)
        assert out.dtype == np.float32

    def test_too_short_yields_empty(self):
        assert len(resample_linear(np.zeros(2, dtype=np.float32), 48000, 16000)) == 0

    def test_rejects_non_positive_rate(self):
        with pytest.raises(ValueError, match='positive'):
            resample_linear(np.zeros(10, dtype=np.float32), 0, 16000)


class TestMixToMono:
    def test_averages_interleaved_frames(self):
        stereo = np.array([1.0, 0.0, 0.5, 0.5, -1.0, 1.0], dtype=np.float32)
        np.testing.assert_allclose(mix_to_mono(stereo, 2), [0.5, 0.5, 0.0])

    def test_mono_passthrough_copy(self):
        src = np.ones(4, dtype=np.float32)
        out = mix_to_mono(src, 1)
        np.testing.assert_array_equal(out, src)
        assert out is not src

    def test_six_channels(self):
        frame = np.arange(6, dtype=np.float32)
        out = mix_to_mono(np.tile(frame, 3), 6)
        np.testing.assert_allclose(out, [2.5, 2.5, 2.5])

    def test_partial_trailing_frame_ignored(self):
        out = mix_to_mono(np.ones(5, dtype=np.float32), 2)
        assert len(out) == 2

    def test_rejects_zero_channels(self):
        with pytest.raises(ValueError, match='Channel count'):
            mix_to_mono(np.zeros(4, dtype=np.float32), 0)


class TestPrepareAudioUseCase:
    def test_missing_source(self, fake_decoder, tmp_path: Path):
        uc = PrepareAudioUseCase(fake_decoder)
        with pytest.raises(SourceNotFoundError):
            uc.execute(tmp_path / 'missing.wav')
        assert fake_decoder.decode_calls == []

    def test_directory_is_not_a_source(self, fake_decoder, tmp_path: Path):
        with pytest.raises(SourceNotFoundError):
            PrepareAudioUseCase(fake_decoder).execute(tmp_path)

    def test_accepts_string_path(self, fake_decoder, audio_file: Path):
        out = PrepareAudioUseCase(fake_decoder).execute(str(audio_file))
        assert fake_decoder.decode_calls == [audio_file]
        assert len(out) == 16000 * 3

    def test_stereo_48k_becomes_16k_mono(self, fake_decoder, audio_file: Path):
        frames = 48000
        left = np.full(frames, 0.8, dtype=np.float32)
        right = np.full(frames, 0.2, dtype=np.float32)
        fake_decoder.decoded = DecodedAudio(
            samples=np.column_stack([left, right]).ravel(), sample_rate=48000, channels=2
        )

        out = PrepareAudioUseCase(fake_decoder).execute(audio_file)

        assert out.dtype == np.float32
        assert len(out) == 16000
        np.testing.assert_allclose(out, 0.5, atol=1e-6)

    def test_output_is_fresh_buffer(self, fake_decoder, audio_file: Path):
        out = PrepareAudioUseCase(fake_decoder).execute(audio_file)
        out[:] = 1.0
        assert not np.any(fake_decoder.decoded.samples)

    def test_empty_decode_is_unsupported(self, fake_decoder, audio_file: Path):
        fake_decoder.decoded = DecodedAudio(samples=np.array([], dtype=np.float32), sample_rate=16000, channels=1)
        with pytest.raises(UnsupportedFormatError, match='no samples'):
            PrepareAudioUseCase(fake_decoder).execute(audio_file)

    def test_zero_channels_is_unsupported(self, fake_decoder, audio_file: Path):
        fake_decoder.decoded = DecodedAudio(samples=np.zeros(10, dtype=np.float32), sample_rate=16000, channels=0)
        with pytest.raises(UnsupportedFormatError, match='channel data'):
            PrepareAudioUseCase(fake_decoder).execute(audio_file)

    def test_too_short_to_resample(self, fake_decoder, audio_file: Path):
        fake_decoder.decoded = DecodedAudio(samples=np.zeros(2, dtype=np.float32), sample_rate=48000, channels=1)
        with pytest.raises(UnsupportedFormatError, match='too short'):
            PrepareAudioUseCase(fake_decoder).execute(audio_file)

    def test_memory_error_mapped(self, fake_decoder, audio_file: Path, monkeypatch):
        def _boom(*_a, **_kw):
            raise MemoryError

        monkeypatch.setattr('whisper_core.l2_use_cases.prepare_audio_use_case.resample_linear', _boom)
        with pytest.raises(InsufficientMemoryError):
            PrepareAudioUseCase(fake_decoder).execute(audio_file)


class TestPrepareInvariants:
    def test_identity_at_target_rate(self, fake_decoder, audio_file: Path):
        src = np.sin(np.linspace(0, 100, 16000)).astype(np.float32)
        fake_decoder.decoded = DecodedAudio(samples=src, sample_rate=16000, channels=1)

        out = PrepareAudioUseCase(fake_decoder).execute(audio_file)

        np.testing.assert_allclose(out, src)

    def test_resampling_is_deterministic(self):
        rng = np.random.default_rng(7)
        src = rng.standard_normal(48000).astype(np.float32)
        a = resample_linear(src, 44100, 16000)
        b = resample_linear(src, 44100, 16000)
        assert a.tobytes() == b.tobytes()

    def test_opposite_channels_cancel(self, fake_decoder, audio_file: Path):
        stereo = np.tile(np.array([1.0, -1.0], dtype=np.float32), 16000)
        fake_decoder.decoded = DecodedAudio(samples=stereo, sample_rate=16000, channels=2)

        out = PrepareAudioUseCase(fake_decoder).execute(audio_file)

        assert len(out) == 16000
        assert not np.any(out)
