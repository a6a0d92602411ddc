"""
Test Suite
==========

Test suite matching the social_card/ package structure.

Test Categories:
- unit: Unit tests for individual components
- integration: Full pipeline tests with the network and browser mocked
"""
