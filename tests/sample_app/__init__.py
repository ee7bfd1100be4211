"""Application classes used as wiring targets in tests."""
