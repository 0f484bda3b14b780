"""Gateway: whisper.cpp engine via pywhispercpp's C-API binding — implements InferenceEngine port."""

from __future__ import annotations

import contextlib
import logging
import os
import re
import struct
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import _pywhispercpp as pw
import numpy as np

from whisper_core.l1_entities.decoding_strategy import DecodingStrategy
from whisper_core.l1_entities.engine_params import EngineParams
from whisper_core.l1_entities.options import AUTO_LANGUAGE
from whisper_core.l1_entities.transcript import TokenData

log = logging.getLogger('wcore.engine')

GGML_MAGIC = 0x67676D6C  # 'ggml', first 4 bytes of a whisper.cpp model, little-endian

_C_STREAMS = (1, 2)
_ACCELERATORS = {'COREML', 'CUDA', 'METAL', 'VULKAN', 'OPENVINO', 'CANN', 'SYCL', 'HIP'}
_FLAG_RE = re.compile(r'([A-Za-z0-9_]+)\s*=\s*(\d+)')
_SECTION_RE = re.compile(r'([A-Za-z0-9_]+)\s*:')

# EngineParams fields copied onto whisper_full_params by name
_SCALAR_FIELDS = (
    'n_threads',
    'n_max_text_ctx',
    'translate',
    'token_timestamps',
    'suppress_non_speech_tokens',
    'print_progress',
    'print_realtime',
    'print_timestamps',
    'print_special',
)

# newer whisper.cpp builds renamed some whisper_full_params fields
_RENAMED_FIELDS = {'suppress_non_speech_tokens': 'suppress_nst'}


@contextlib.contextmanager
def _suppress_c_stdout() -> Iterator[None]:
    """Point file descriptors 1 and 2 at /dev/null for the duration of the block.

    whisper.cpp and the binding write diagnostics with C fprintf, which neither
    sys.stdout nor the logging setup can intercept.
    """
    devnull = os.open(os.devnull, os.O_WRONLY)
    saved: dict[int, int] = {}
    try:
        for fd in _C_STREAMS:
            saved[fd] = os.dup(fd)
            os.dup2(devnull, fd)
        yield
    finally:
        for fd, copy in saved.items():
            os.dup2(copy, fd)
            os.close(copy)
        os.close(devnull)


def is_ggml_file(path: str | Path) -> bool:
    """True if *path* starts with the ggml magic.

    whisper_init_from_file_with_params hands back a wrapper around NULL for a
    file it cannot parse, so anything else must be refused before init.
    """
    try:
        with open(path, 'rb') as fh:
            head = fh.read(4)
    except OSError:
        return False
    return len(head) == 4 and struct.unpack('<I', head)[0] == GGML_MAGIC


@contextlib.contextmanager
def _language_override(native: Any, language: str) -> Iterator[Any]:
    """Apply *language* to a reusable native parameter block for one call only."""
    previous = native.language
    native.language = language
    try:
        yield native
    finally:
        native.language = previous


def _to_str(raw: Any) -> str:
    # segment/token text comes back as bytes; whisper can split a UTF-8 sequence across tokens
    if isinstance(raw, bytes):
        return raw.decode('utf-8', errors='replace')
    return raw or ''


def parse_system_info(info: str) -> bool:
    """True if whisper's system-info line reports any hardware accelerator.

    Handles both the flat ``COREML = 1 | CUDA = 0`` form and the per-backend
    ``Metal : EMBED_LIBRARY = 1 | CPU : NEON = 1`` form.
    """
    for key, value in _FLAG_RE.findall(info):
        if key.upper() in _ACCELERATORS and value != '0':
            return True
    return any(name.upper() in _ACCELERATORS for name in _SECTION_RE.findall(info))


class WhisperCppEngine:
    """pywhispercpp adapter. Handles C stdout suppression, parameter mapping and
    the per-strategy native parameter blocks."""

    def __init__(self) -> None:
        self._native_params: dict[DecodingStrategy, Any] = {}
        self._default_threads: dict[DecodingStrategy, int] = {}
        self._segment_listener: Callable[[int], None] | None = None

    def init_context(self, model_path: str, use_acceleration: bool, device_index: int = 0) -> Any | None:
        if not is_ggml_file(model_path):
            log.warning('Not a ggml model file: %s', model_path)
            return None
        with _suppress_c_stdout():
            cparams = pw.whisper_context_default_params()
            cparams.use_gpu = use_acceleration
            cparams.gpu_device = device_index
            return pw.whisper_init_from_file_with_params(model_path, cparams)

    def free_context(self, ctx: Any) -> None:
        with _suppress_c_stdout():
            pw.whisper_free(ctx)

    def full(
        self,
        ctx: Any,
        params: EngineParams,
        samples: np.ndarray,
        on_new_segments: Callable[[int], None] | None = None,
    ) -> int:
        native = self._native_for(params)
        language = params.language or AUTO_LANGUAGE
        self._segment_listener = on_new_segments
        try:
            # the binding's language setter complains on stderr, so it runs suppressed too
            with _suppress_c_stdout(), _language_override(native, language):
                return pw.whisper_full(ctx, native, samples, samples.size)
        finally:
            self._segment_listener = None

    def n_segments(self, ctx: Any) -> int:
        return pw.whisper_full_n_segments(ctx)

    def segment_text(self, ctx: Any, i_segment: int) -> str:
        return _to_str(pw.whisper_full_get_segment_text(ctx, i_segment))

    def segment_t0(self, ctx: Any, i_segment: int) -> int:
        return pw.whisper_full_get_segment_t0(ctx, i_segment)

    def segment_t1(self, ctx: Any, i_segment: int) -> int:
        return pw.whisper_full_get_segment_t1(ctx, i_segment)

    def n_tokens(self, ctx: Any, i_segment: int) -> int:
        return pw.whisper_full_n_tokens(ctx, i_segment)

    def token_data(self, ctx: Any, i_segment: int, i_token: int) -> TokenData:
        data = pw.whisper_full_get_token_data(ctx, i_segment, i_token)
        return TokenData(
            text=_to_str(pw.whisper_full_get_token_text(ctx, i_segment, i_token)),
            t0=data.t0,
            t1=data.t1,
            p=data.p,
        )

    def lang_id(self, ctx: Any) -> int:
        return pw.whisper_full_lang_id(ctx)

    def lang_str(self, lang_id: int) -> str:
        if lang_id < 0 or lang_id > pw.whisper_lang_max_id():
            return ''
        return _to_str(pw.whisper_lang_str(lang_id))

    def lang_max_id(self) -> int:
        return pw.whisper_lang_max_id()

    def acceleration_available(self) -> bool:
        return parse_system_info(_to_str(pw.whisper_print_system_info()))

    def _native_for(self, params: EngineParams) -> Any:
        native = self._native_params.get(params.strategy)
        if native is None:
            native = pw.whisper_full_default_params(_native_strategy(params.strategy))
            if not _attach_new_segment_callback(native, self._on_native_segment):
                log.warning('pywhispercpp build has no new-segment callback; progress will not be reported')
            self._native_params[params.strategy] = native
            self._default_threads[params.strategy] = native.n_threads

        for field in _SCALAR_FIELDS:
            value = getattr(params, field)
            if field == 'n_threads' and value <= 0:
                value = self._default_threads[params.strategy]
            setattr(native, _native_field(native, field), value)

        if params.strategy == DecodingStrategy.BEAM_SEARCH:
            native.beam_search = {'beam_size': params.beam_size, 'patience': params.beam_patience}
        else:
            native.greedy = {'best_of': params.greedy_best_of}
        return native

    def _on_native_segment(self, _ctx: Any, n_new: int, *_user_data: Any) -> None:
        listener = self._segment_listener
        if listener is None:
            return
        # called from inside whisper_full: an exception must not unwind through C
        try:
            listener(n_new)
        except Exception:
            log.exception('New-segment listener failed')


def _attach_new_segment_callback(native: Any, callback: Callable[..., None]) -> bool:
    # the binding calls back with (ctx, n_new, user_data)
    if hasattr(pw, 'assign_new_segment_callback'):
        pw.assign_new_segment_callback(native, callback)
        return True
    return False


def _native_field(native: Any, field: str) -> str:
    renamed = _RENAMED_FIELDS.get(field)
    if renamed is not None and not hasattr(native, field) and hasattr(native, renamed):
        return renamed
    return field


def _native_strategy(strategy: DecodingStrategy) -> Any:
    if strategy == DecodingStrategy.BEAM_SEARCH:
        return pw.whisper_sampling_strategy.WHISPER_SAMPLING_BEAM_SEARCH
    return pw.whisper_sampling_strategy.WHISPER_SAMPLING_GREEDY
