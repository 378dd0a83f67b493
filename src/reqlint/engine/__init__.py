"""Payload validation pipeline for reqlint."""

from reqlint.engine.pipeline import ValidationPipeline

__all__ = [
    "ValidationPipeline",
]
