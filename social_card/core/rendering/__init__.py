"""
Rendering Module
===============

Layout tree to PNG conversion.

Components:
- html_generator: Convert the layout tree and fonts into HTML markup
- png_generator: Browser automation for PNG rasterization
- orchestrator: Font validation and the tree → markup → PNG sequence
- templates: HTML template for the card document
"""
