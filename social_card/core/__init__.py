"""
Core Business Logic
==================

Core modules for turning a layout tree into a PNG social card.

Modules:
- fonts: Font sources and concurrent font resolution
- layout: Card content and the layout tree builder
- rendering: HTML generation, rasterization and orchestration
- output: Persistence of the final image
"""
