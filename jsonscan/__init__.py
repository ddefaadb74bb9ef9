"""Streaming JSON scanning: strings, numbers, objects, skipping, capture and container decoders."""

__version__ = "0.1.0"