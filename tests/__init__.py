"""
Test suite for Mood Physics

Contains:
- tests/unit/          : Unit tests for individual modules
"""
