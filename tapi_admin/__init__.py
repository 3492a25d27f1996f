"""
TAPI Admin - Client-side core of the TAPI admin console
========================================================

State and request handling behind the admin console:
- Admin signup/login with a persisted bearer token
- Product, team member and blog collections kept in sync with the server
- Validated, dirty-tracked form sessions submitted as multipart bodies
- A bridge to the embedded blog content editor

Usage:
    from tapi_admin import Console

    console = Console()
    await console.auth.login('admin@example.com', 'secret')
    await console.products.fetch_all()
"""

__version__ = '0.1.0'

from .console import Console
from .modules import auth, blogs, products, team

__all__ = ['Console', 'auth', 'blogs', 'products', 'team']
