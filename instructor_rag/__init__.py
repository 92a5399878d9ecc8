"""Retrieval-augmented chat service for instructor reviews."""

__version__ = "1.0.0"
