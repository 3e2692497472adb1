"""Integration tests for shiftwatch."""
