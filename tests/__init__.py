"""Test package for Plandl.

Core tests exercise the selector, round state machine, persistence and the
catalog builder without a display. UI smoke tests run headlessly using
pygame's dummy video driver to avoid opening real windows. To run these
tests, execute ``pytest`` from the project root.
"""
