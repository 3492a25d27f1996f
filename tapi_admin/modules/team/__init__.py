"""
Team Module
===========

Team member management for the admin console.
"""

from .schema import PERSON_SCHEMA
from .store import TeamStore

__all__ = ['PERSON_SCHEMA', 'TeamStore']
