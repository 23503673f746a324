"""LLM-backed product content service for e-commerce listings."""

__version__ = "0.1.0"
