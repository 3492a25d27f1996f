"""
Blogs Module
============

Blog management for the admin console, including the bridge to the
embedded content editor.
"""

from .editor import ContentEditorBridge, EditorExport, EditorSurface
from .schema import BLOG_SCHEMA
from .store import BlogFormSession, BlogStore

__all__ = [
    'BLOG_SCHEMA', 'BlogFormSession', 'BlogStore',
    'ContentEditorBridge', 'EditorExport', 'EditorSurface',
]
