"""
Data Models
===========

Pydantic models for the layout tree, fonts and render artifacts.
"""
