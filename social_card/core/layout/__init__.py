"""
Layout Module
=============

Static card content and the declarative layout tree builder.
"""
