"""
Products Module
===============

Product management for the admin console.
"""

from .schema import PRODUCT_SCHEMA
from .store import ProductStore

__all__ = ['PRODUCT_SCHEMA', 'ProductStore']
