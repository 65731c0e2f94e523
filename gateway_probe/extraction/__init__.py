"""Response-text normalization for heterogeneous gateway payloads."""

from gateway_probe.extraction.text_extractor import classify_payload, extract_text

__all__ = ["classify_payload", "extract_text"]
