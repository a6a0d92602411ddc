"""
Output Module
=============

Persistence of the rendered card image.
"""
