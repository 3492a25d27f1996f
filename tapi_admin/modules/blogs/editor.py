"""
Content Editor Bridge
=====================

Adapter between a blog form and the embedded rich-content editor. The
editor surface starts asynchronously and reports readiness later; its
export is callback based and may call back from any thread.

Two independent events have to meet before an existing design is shown:
the blog record has arrived (load_design) and the surface is ready
(mark_ready). Whichever comes second applies the design, exactly once.
"""

import asyncio
import logging
from collections import namedtuple

from ...core.config import Config
from ...core.errors import ExportTimeout, NotReady

logger = logging.getLogger(__name__)

EditorExport = namedtuple('EditorExport', ['design', 'markup'])

_NOTHING = object()


class EditorSurface:
    """
    What the bridge needs from an embedded editor.

    export_html(callback) must eventually call ``callback({'design': ..., 'html': ...})``,
    from any thread.
    """

    def load_design(self, design):
        raise NotImplementedError

    def export_html(self, callback):
        raise NotImplementedError


class ContentEditorBridge:

    def __init__(self, export_timeout=None):
        self.export_timeout = export_timeout if export_timeout is not None else Config.EDITOR_EXPORT_TIMEOUT
        self.surface = None
        self.loaded_design = None
        self._ready = False
        self._pending_design = _NOTHING
        self._waiters = []

    def __repr__(self):
        return f"<ContentEditorBridge ready={self.is_ready} pending={self.has_pending_design}>"

    # ===== Surface lifecycle =====

    def attach(self, surface):
        """
        Bind a surface. It is not ready until it calls mark_ready(), which
        also shows the current design again on the new surface.
        """
        self.surface = surface
        self._ready = False
        if self._pending_design is _NOTHING and self.loaded_design is not None:
            self._pending_design = self.loaded_design

    def mark_ready(self):
        """Called by the surface once it can load and export designs"""
        if self.surface is None:
            raise NotReady("No editor surface attached")
        self._ready = True
        logger.debug("Editor surface ready")
        self._apply_pending()
        for waiter in self._waiters:
            if not waiter.done():
                waiter.set_result(True)
        self._waiters = []

    def detach(self):
        self.surface = None
        self._ready = False
        self._pending_design = _NOTHING
        for waiter in self._waiters:
            if not waiter.done():
                waiter.set_exception(NotReady("Email editor closed"))
        self._waiters = []

    @property
    def is_ready(self):
        return self.surface is not None and self._ready

    @property
    def has_pending_design(self):
        return self._pending_design is not _NOTHING

    async def await_ready(self, timeout=None):
        """Wait for mark_ready(). Raises NotReady if it does not come in time."""
        if self.is_ready:
            return
        timeout = timeout if timeout is not None else Config.EDITOR_READY_TIMEOUT
        waiter = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        try:
            await asyncio.wait_for(waiter, timeout)
        except asyncio.TimeoutError:
            if waiter in self._waiters:
                self._waiters.remove(waiter)
            raise NotReady() from None

    # ===== Designs =====

    def load_design(self, design):
        """Show design in the editor now, or as soon as the surface is ready"""
        self._pending_design = design
        self._apply_pending()

    def clear(self):
        """Empty the editor, e.g. when a create form opens"""
        self.load_design({})

    def _apply_pending(self):
        if not self.is_ready or self._pending_design is _NOTHING:
            return
        design, self._pending_design = self._pending_design, _NOTHING
        self.surface.load_design(design)
        self.loaded_design = design

    async def export_current(self, timeout=None):
        """
        Export the current design and its rendered markup.

        Returns:
            EditorExport(design, markup)

        Raises:
            NotReady: no surface, or it has not reported ready
            ExportTimeout: the surface never called back
        """
        if not self.is_ready:
            raise NotReady()

        timeout = timeout if timeout is not None else self.export_timeout
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def resolve(data):
            # Only the first callback counts
            if not future.done():
                future.set_result(data)

        def deliver(data):
            if future.done():
                logger.debug("Ignoring repeated editor export callback")
                return
            try:
                loop.call_soon_threadsafe(resolve, data)
            except RuntimeError:
                logger.debug("Editor export arrived after its event loop closed")

        self.surface.export_html(deliver)

        try:
            data = await asyncio.wait_for(future, timeout)
        except asyncio.TimeoutError:
            raise ExportTimeout() from None

        data = data or {}
        return EditorExport(data.get('design') or {}, data.get('html') or '')
