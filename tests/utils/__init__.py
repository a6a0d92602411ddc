"""
Test Utilities
==============

Shared generators, mocks and assertions for the test suite.
"""
