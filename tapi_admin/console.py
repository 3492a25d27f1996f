"""
Console
=======

Wires the console together: one auth session hydrated from client storage,
one shared API client, and a store per resource kind.
"""

from .core.api_client import ApiClient
from .core.logging_service import LoggingService
from .modules.auth import AuthSession, AuthStore
from .modules.blogs import BlogStore, ContentEditorBridge
from .modules.products import ProductStore
from .modules.team import TeamStore


class Console:

    def __init__(self, client=None, session=None, storage=None):
        self.client = client or ApiClient()
        self.session = session or AuthSession(storage=storage)
        self.session.hydrate()
        self.auth = AuthStore(self.session, self.client)
        self.products = ProductStore(self.session, self.client)
        self.team = TeamStore(self.session, self.client)
        self.blogs = BlogStore(self.session, self.client)
        self.editor = ContentEditorBridge()
        LoggingService.debug('console', 'Console started',
                             {'authenticated': self.session.is_authenticated})

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    @property
    def stores(self):
        return {store.kind: store for store in (self.products, self.team, self.blogs)}

    @property
    def is_authenticated(self):
        return self.session.is_authenticated

    async def refresh(self):
        """Fetch every collection, one after another"""
        for store in self.stores.values():
            await store.fetch_all()

    def open_product_form(self, product=None):
        return self.products.open_form(product)

    def open_person_form(self, person=None):
        return self.team.open_form(person)

    def open_blog_form(self, blog=None):
        return self.blogs.open_form(blog, bridge=self.editor)

    def logout(self):
        self.auth.logout()

    def close(self):
        self.client.close()
