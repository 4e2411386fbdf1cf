"""JSON Schema (draft 2020-12) objects, JSON Pointers, schema inference and JSON value helpers."""

__version__ = "0.1.0"