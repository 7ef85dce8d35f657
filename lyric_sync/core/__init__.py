"""Core model, timestamp codec, author matching, and edit operations.

WHY: The core package holds the stable heart of the converter: the
Document dataclasses and everything that keeps them consistent. Parsers,
formatters, the CLI and the API all build on it.

HOW: ir.py defines the data structures, timestamps.py converts times,
authors.py reconciles singers, editing.py mutates a Document,
session.py gates imports, companions.py finds author list files.

RULES:
- IR dataclasses are the contract, change with care
- No format-specific output logic here
"""
