"""
Social Card Generator
=====================

Renders a single static social preview image (OGP card) from a declarative
tree of styled boxes, embedding fonts fetched from Google Fonts or read from
disk, and rasterizes it to PNG through a headless browser.

This package provides:
- Font resolution from remote stylesheets and local files
- A declarative layout tree builder for the card composition
- HTML generation and Playwright-based rasterization
- Atomic persistence of the final image
"""

__version__ = "1.0.0"
__author__ = "gitlogue maintainers"
