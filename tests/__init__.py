"""
Tests for the REINFORCE Agent
=============================

Run all tests:
    pytest tests/

Skip the slower training runs:
    pytest tests/ -m "not slow"
"""
