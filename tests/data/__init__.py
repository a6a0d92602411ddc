"""
Test Data
=========

Captured responses and sample content files.
"""
