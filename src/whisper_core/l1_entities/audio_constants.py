"""Audio format constants shared across layers."""

SAMPLE_RATE = 16000  # whisper expects 16 kHz mono float32
