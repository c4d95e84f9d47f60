"""RESP2 values, encoder and decoder, logging connections and reference data models."""

__version__ = "0.1.0"

__all__ = [
    "connection",
    "decoder",
    "encoder",
    "formatter",
    "hints",
    "instrumented",
    "location",
    "rdb",
    "sorted_set",
    "value",
]