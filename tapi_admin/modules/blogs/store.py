"""
Blog Store
==========

Admin blog collection: GET /blog, POST /blog/create, PUT /blog/edit/<id>
and DELETE /blog/delete/<id>.

Blog bodies are authored in the embedded content editor. The form session
asks the editor for its design and rendered markup at submit time and
sends both along with the regular fields.
"""

import json

from ...core.lifecycle import RequestLifecycle
from ...core.resource_store import ResourceStore, resource_id
from ...forms.session import FormSession
from .editor import ContentEditorBridge
from .schema import BLOG_SCHEMA


class BlogFormSession(FormSession):

    def __init__(self, store=None, resource=None, bridge=None, previews=None):
        # seed() needs the bridge, and FormSession.__init__ seeds
        self.bridge = bridge or ContentEditorBridge()
        super().__init__(BLOG_SCHEMA, store=store, resource=resource, previews=previews)

    def seed(self, resource=None):
        super().seed(resource)
        content = (resource or {}).get('blogContent') or {}
        design = content.get('design') if isinstance(content, dict) else None
        if design:
            self.bridge.load_design(design)
        else:
            self.bridge.clear()

    async def collect_extra_parts(self):
        export = await self.bridge.export_current()
        return [
            ('designData', json.dumps(export.design)),
            ('markup', export.markup),
        ]


class BlogStore(ResourceStore):

    kind = 'blogs'
    list_path = '/blog'
    create_path = '/blog/create'
    update_path = '/blog/edit/{id}'
    delete_path = '/blog/delete/{id}'

    def __init__(self, auth, client=None):
        super().__init__(auth, client)
        self.delete_state = RequestLifecycle(f"{self.kind}.delete")

    async def delete(self, rid):
        """Delete the blog ``rid`` and drop it from the collection"""
        rid = str(rid)
        return await self._run(
            self.delete_state, 'DELETE', self.delete_path.format(id=rid),
            context={'id': rid},
            apply=lambda _: self._remove(rid),
        )

    def acknowledge(self):
        super().acknowledge()
        if not self.delete_state.is_pending:
            self.delete_state.reset()

    def _remove(self, rid):
        before = len(self._items)
        self._items = [item for item in self._items if resource_id(item) != rid]
        if len(self._items) != before:
            self._changed()
        return rid

    def open_form(self, blog=None, bridge=None):
        """Blog form bound to an editor bridge; edit mode when blog is given"""
        return BlogFormSession(store=self, resource=blog, bridge=bridge)
