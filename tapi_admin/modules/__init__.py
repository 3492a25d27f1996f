"""
TAPI Admin Modules
==================

One module per console area: auth, products, team and blogs.
"""

__all__ = ['auth', 'blogs', 'products', 'team']
