"""
Auth Session
============

Holds the admin bearer token for the life of the console. The token is
hydrated from durable client storage at startup and written back on login;
logout clears both copies.
"""

import logging

from ...core.config import Config
from ...core.errors import Unauthenticated
from ...core.storage import TokenStorage

logger = logging.getLogger(__name__)


class AuthSession:

    def __init__(self, storage=None, key=None):
        self.storage = storage or TokenStorage()
        self.key = key or Config.TOKEN_KEY
        self.token = None
        self.hydrated = False

    def hydrate(self):
        """Load the persisted token, if any. Returns True when one was found."""
        self.token = self.storage.get(self.key) or None
        self.hydrated = True
        logger.debug("Auth session hydrated (token present: %s)", self.token is not None)
        return self.token is not None

    @property
    def is_authenticated(self):
        return bool(self.token)

    def store_token(self, token):
        if not token:
            raise ValueError("Refusing to store an empty token")
        self.token = token
        self.storage.set(self.key, token)

    def logout(self):
        self.token = None
        self.storage.remove(self.key)

    def bearer_headers(self):
        """Authorization header for protected calls; Unauthenticated when logged out"""
        if not self.token:
            raise Unauthenticated()
        return {'Authorization': f'Bearer {self.token}'}
