"""
Test suite for launchguard

Contains:
- tests/unit/          : Unit tests for individual modules and the admission pipeline
"""
