"""
Configuration Management
=======================

Environment-based configuration using Pydantic Settings.

Components:
- settings: Rendering, font source and output settings
- logging: Structured logging configuration
"""
