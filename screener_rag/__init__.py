"""Retrieval-augmented chat service for financial screener queries."""

__version__ = "0.1.0"
