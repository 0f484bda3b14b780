"""Shared test fixtures and protocol-conforming fakes."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from whisper_core.l1_entities.audio import DecodedAudio
from whisper_core.l1_entities.engine_params import EngineParams
from whisper_core.l1_entities.errors import SourceNotFoundError
from whisper_core.l1_entities.transcript import TokenData
from whisper_core.l2_use_cases.model_session import ModelSession
from whisper_core.l2_use_cases.prepare_audio_use_case import PrepareAudioUseCase
from whisper_core.l2_use_cases.run_inference_use_case import RunInferenceUseCase
from whisper_core.l2_use_cases.transcribe_file_use_case import TranscribeFileUseCase

LANGUAGES = ['en', 'zh', 'de', 'es', 'ru']

# --- Protocol-conforming Fakes ---


class FakeContext:
    """Opaque handle handed out by FakeEngine."""

    def __init__(self, model_path: str) -> None:
        self.model_path = model_path


class FakeEngine:
    """Fake inference engine — implements InferenceEngine protocol.

    Segments are dicts: ``{'text', 't0', 't1', 'tokens': [TokenData, ...]}``.
    """

    def __init__(self) -> None:
        self.segments: list[dict] = []
        self._visible = 0
        self.detected_lang_id = 0
        self.status = 0
        self.full_error: Exception | None = None
        self.refuse_init = False
        self.accelerated = False

        self.live_contexts: set[int] = set()
        self.init_calls: list[tuple[str, bool]] = []
        self.free_calls: list[FakeContext] = []
        self.full_calls: list[tuple[FakeContext, EngineParams, np.ndarray]] = []

    # -- configuration helpers --

    def set_output(self, segments: list[dict], lang_id: int = 0) -> None:
        self.segments = segments
        self._visible = len(segments)
        self.detected_lang_id = lang_id

    # -- InferenceEngine --

    def init_context(self, model_path: str, use_acceleration: bool, device_index: int = 0) -> FakeContext | None:
        self.init_calls.append((model_path, use_acceleration))
        if self.refuse_init:
            return None
        ctx = FakeContext(model_path)
        self.live_contexts.add(id(ctx))
        return ctx

    def free_context(self, ctx: FakeContext) -> None:
        self.free_calls.append(ctx)
        self.live_contexts.discard(id(ctx))

    def full(self, ctx: FakeContext, params: EngineParams, samples: np.ndarray, on_new_segments=None) -> int:
        self.full_calls.append((ctx, params, samples))
        if self.full_error is not None:
            raise self.full_error
        if on_new_segments is not None:
            # segments become visible one at a time, as whisper_full emits them
            for i in range(len(self.segments)):
                self._visible = i + 1
                on_new_segments(1)
        self._visible = len(self.segments)
        return self.status

    def n_segments(self, ctx: FakeContext) -> int:
        return self._visible

    def segment_text(self, ctx: FakeContext, i_segment: int) -> str:
        return self.segments[i_segment]['text']

    def segment_t0(self, ctx: FakeContext, i_segment: int) -> int:
        return self.segments[i_segment]['t0']

    def segment_t1(self, ctx: FakeContext, i_segment: int) -> int:
        return self.segments[i_segment]['t1']

    def n_tokens(self, ctx: FakeContext, i_segment: int) -> int:
        return len(self.segments[i_segment].get('tokens', []))

    def token_data(self, ctx: FakeContext, i_segment: int, i_token: int) -> TokenData:
        return self.segments[i_segment]['tokens'][i_token]

    def lang_id(self, ctx: FakeContext) -> int:
        return self.detected_lang_id

    def lang_str(self, lang_id: int) -> str:
        if 0 <= lang_id < len(LANGUAGES):
            return LANGUAGES[lang_id]
        return ''

    def lang_max_id(self) -> int:
        return len(LANGUAGES) - 1

    def acceleration_available(self) -> bool:
        return self.accelerated


class FakeAudioDecoder:
    """Fake decoder — implements AudioDecoder protocol without ffmpeg."""

    def __init__(self, decoded: DecodedAudio | None = None) -> None:
        self.decoded = decoded or DecodedAudio(
            samples=np.zeros(16000 * 3, dtype=np.float32),
            sample_rate=16000,
            channels=1,
        )
        self.decode_calls: list[Path] = []

    def decode(self, path: Path) -> DecodedAudio:
        self.decode_calls.append(path)
        if not path.exists():
            raise SourceNotFoundError(f'Audio file not found: {path}')
        return self.decoded


class FakeModelLocator:
    """Fake locator — implements ModelLocator protocol from an in-memory map."""

    def __init__(self, storage_dir: Path, models: dict[str, Path] | None = None) -> None:
        self._storage_dir = storage_dir
        self.models = dict(models or {})

    @property
    def storage_dir(self) -> Path:
        return self._storage_dir

    def locate(self, model_name: str) -> Path | None:
        return self.models.get(model_name)


class FakeModelAcquirer:
    """Fake acquirer — writes a placeholder model file into dest_dir."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.acquire_calls: list[tuple[str, Path]] = []

    def acquire(self, model_name: str, dest_dir: Path) -> Path:
        self.acquire_calls.append((model_name, dest_dir))
        if self.error is not None:
            raise self.error
        dest_dir.mkdir(parents=True, exist_ok=True)
        path = dest_dir / f'ggml-{model_name}.bin'
        path.write_bytes(b'acquired')
        return path


# --- Standard Fixtures ---


@pytest.fixture
def model_file(tmp_path: Path) -> Path:
    p = tmp_path / 'bundle' / 'ggml-tiny.bin'
    p.parent.mkdir()
    p.write_bytes(b'\0' * 1024)
    return p


@pytest.fixture
def audio_file(tmp_path: Path) -> Path:
    p = tmp_path / 'speech.wav'
    p.write_bytes(b'RIFF')
    return p


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def fake_decoder() -> FakeAudioDecoder:
    return FakeAudioDecoder()


@pytest.fixture
def fake_locator(tmp_path: Path, model_file: Path) -> FakeModelLocator:
    return FakeModelLocator(tmp_path / 'storage', {'tiny': model_file})


@pytest.fixture
def fake_acquirer() -> FakeModelAcquirer:
    return FakeModelAcquirer()


@pytest.fixture
def session(fake_engine: FakeEngine, fake_locator: FakeModelLocator, fake_acquirer: FakeModelAcquirer) -> ModelSession:
    return ModelSession(fake_engine, fake_locator, fake_acquirer)


@pytest.fixture
def loaded_session(session: ModelSession) -> ModelSession:
    session.load('tiny')
    return session


@pytest.fixture
def transcribe_use_case(fake_decoder: FakeAudioDecoder) -> TranscribeFileUseCase:
    return TranscribeFileUseCase(prepare=PrepareAudioUseCase(fake_decoder), invoke=RunInferenceUseCase())
