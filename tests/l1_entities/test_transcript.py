"""Tests for transcript, model-info and decoded-audio entities."""

from __future__ import annotations

import numpy as np
import pytest
from pydantic import ValidationError

from whisper_core.l1_entities.audio import DecodedAudio
from whisper_core.l1_entities.model_info import ModelInfo, SupportInfo
from whisper_core.l1_entities.transcript import Segment, TranscriptionResult, Word


class TestWord:
    def test_confidence_bounds(self):
        with pytest.raises(ValidationError):
            Word(word='hi', start_time=0.0, end_time=0.1, confidence=1.5)
        with pytest.raises(ValidationError):
            Word(word='hi', start_time=0.0, end_time=0.1, confidence=-0.1)


class TestTranscriptionResult:
    def test_serializes_with_camel_case_aliases(self):
        result = TranscriptionResult(
            text=' Hello.',
            segments=[
                Segment(
                    start_time=0.0,
                    end_time=1.5,
                    text=' Hello.',
                    words=[Word(word='Hello', start_time=0.0, end_time=0.5, confidence=0.9)],
                )
            ],
            language='en',
            processing_time=12.5,
        )
        dumped = result.model_dump(by_alias=True)
        assert dumped['processingTime'] == 12.5
        assert dumped['segments'][0]['startTime'] == 0.0
        assert dumped['segments'][0]['words'][0]['endTime'] == 0.5

    def test_words_absent_by_default(self):
        seg = Segment(start_time=0.0, end_time=1.0, text=' x')
        assert seg.words is None

    def test_defaults(self):
        result = TranscriptionResult(text='')
        assert result.segments == []
        assert result.language == ''
        assert result.processing_time == 0.0


class TestModelInfo:
    def test_unloaded_snapshot(self):
        info = ModelInfo()
        assert info.model_name == ''
        assert info.is_loaded is False
        assert info.model_size == 0
        assert info.supported_languages == []

    def test_camel_case_dump(self):
        dumped = ModelInfo(model_name='base', is_loaded=True, model_size=10).model_dump(by_alias=True)
        assert dumped['modelName'] == 'base'
        assert dumped['isLoaded'] is True
        assert dumped['modelSize'] == 10

    def test_support_info_alias(self):
        assert SupportInfo(supported=True).model_dump(by_alias=True) == {
            'supported': True,
            'accelerationSupported': False,
        }


class TestDecodedAudio:
    def test_frames_counts_interleaved_samples(self):
        audio = DecodedAudio(samples=np.zeros(10, dtype=np.float32), sample_rate=44100, channels=2)
        assert audio.frames == 5

    def test_frames_zero_for_bad_channel_count(self):
        audio = DecodedAudio(samples=np.zeros(10, dtype=np.float32), sample_rate=44100, channels=0)
        assert audio.frames == 0
