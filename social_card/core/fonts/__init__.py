"""
Fonts Module
============

Font sources (Google Fonts stylesheet, local file) and the resolver that
turns them into embeddable font data.
"""
