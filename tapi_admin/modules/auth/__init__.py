"""
TAPI Admin Auth Module

Provides admin authentication for the console:
- Signup and login against the TAPI server
- Durable bearer token storage
- Logout (clears memory and storage)
"""

from .session import AuthSession
from .store import AuthStore, validate_login, validate_signup

__all__ = ['AuthSession', 'AuthStore', 'validate_login', 'validate_signup']
