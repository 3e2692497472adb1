"""
shiftwatch: guard sleep reconstruction

File: src/shiftwatch/__init__.py

Purpose
- Package root. Defines public package-level metadata and import boundaries.

Overview
- Rebuilds each guard's sleep intervals from an unordered, timestamped shift
  log and answers which guard sleeps most (and when), and which guard is most
  reliably asleep on one particular minute.

Functional requirements
- Must not have side effects at import time (no config loading, no logging init).
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
