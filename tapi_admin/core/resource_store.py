"""
Resource Store
==============

One store per resource kind (products, team members, blogs). A store owns
the in-memory collection plus one RequestLifecycle per operation slot
(fetch / create / update) and is the only thing that mutates either.

Collection rules (deliberately asymmetric, do not turn them into a merge):

- fetch_all() REPLACES the whole collection with the server's list, so
  local-only items never survive a fetch.
- create() APPENDS the canonical resource returned by the server.
- update() REPLACES the entry with the same identifier; when no local entry
  matches, the server's record is appended and ``last_update_missed`` is set.

Operations never raise transport failures. They are recorded on the slot's
lifecycle (``store.create_state.error`` etc.) and the coroutine returns None.
Starting an operation whose slot is already pending raises AlreadyPending.
"""

import asyncio
import logging

from .api_client import ApiClient
from .errors import ApiError, NetworkError, Unauthenticated
from .lifecycle import RequestLifecycle
from .logging_service import LoggingService

logger = logging.getLogger(__name__)


def resource_id(record):
    """Server-assigned identifier of a record (``_id``, falling back to ``id``)"""
    if not record:
        return None
    value = record.get('_id') or record.get('id')
    return str(value) if value is not None else None


class ResourceStore:
    """Generic fetch/create/update store. Subclasses set the kind and paths."""

    kind = 'resource'
    list_path = None
    create_path = None
    update_path = None  # format string with {id}

    def __init__(self, auth, client=None):
        self.auth = auth
        self.client = client or ApiClient()
        self.fetch_state = RequestLifecycle(f"{self.kind}.fetch")
        self.create_state = RequestLifecycle(f"{self.kind}.create")
        self.update_state = RequestLifecycle(f"{self.kind}.update")
        self.last_update_missed = False
        self._items = []
        self._subscribers = []

    # ===== Collection access =====

    @property
    def items(self):
        """Read-only snapshot of the collection"""
        return tuple(self._items)

    def __len__(self):
        return len(self._items)

    def get(self, rid):
        rid = str(rid)
        for item in self._items:
            if resource_id(item) == rid:
                return item
        return None

    def subscribe(self, callback):
        """callback(store) runs after every collection change. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _changed(self):
        for callback in list(self._subscribers):
            callback(self)

    # ===== Operations =====

    async def fetch_all(self):
        """Load the full list from the server, replacing the collection"""
        return await self._run(
            self.fetch_state, 'GET', self.list_path,
            apply=self._replace_all,
            apply_when_stale=False,
        )

    async def create(self, payload):
        """
        Create a resource from a MultipartPayload.

        The canonical record stays on ``create_state.result`` until
        acknowledge() is called by whoever closes the form.
        """
        return await self._run(
            self.create_state, 'POST', self.create_path,
            payload=payload,
            apply=self._append,
        )

    async def update(self, rid, payload):
        """Update the resource ``rid`` from a MultipartPayload"""
        rid = str(rid)
        return await self._run(
            self.update_state, 'PUT', self.update_path.format(id=rid),
            payload=payload,
            context={'id': rid},
            apply=lambda record: self._replace_one(rid, record),
        )

    def acknowledge(self):
        """
        Clear create/update results and errors once the UI has consumed them.

        Pending slots are left alone; a failed fetch is cleared too.
        """
        for state in (self.create_state, self.update_state):
            if not state.is_pending:
                state.reset()
        if self.fetch_state.failed:
            self.fetch_state.reset()
        self.last_update_missed = False

    async def _run(self, lifecycle, method, path, payload=None, context=None,
                   apply=None, apply_when_stale=True):
        lifecycle.start(context)
        generation = lifecycle.generation

        try:
            headers = self.auth.bearer_headers()
            files = payload.as_requests_files() if payload is not None else None
            data = await self.client.send(method, path, headers=headers, files=files, source=self.kind)
        except (Unauthenticated, ApiError) as e:
            LoggingService.warning(self.kind, f"{lifecycle.name} failed: {e.message}")
            self._settle(lifecycle, generation, error=e)
            return None
        except asyncio.CancelledError:
            LoggingService.warning(self.kind, f"{lifecycle.name} cancelled")
            self._settle(lifecycle, generation, error=NetworkError("Request cancelled"))
            raise
        except Exception as e:
            LoggingService.log_error_with_traceback(self.kind, e, {'operation': lifecycle.name})
            self._settle(lifecycle, generation, error=e)
            raise

        stale = lifecycle.generation != generation
        result = data
        if apply and (apply_when_stale or not stale):
            result = apply(data)
        self._settle(lifecycle, generation, result=result)
        return result

    @staticmethod
    def _settle(lifecycle, generation, result=None, error=None):
        if lifecycle.generation != generation or not lifecycle.is_pending:
            # Reset (and maybe restarted) while in flight; the outcome belongs to nobody
            logger.info("Dropping late outcome for %s", lifecycle.name)
            return
        if error is not None:
            lifecycle.fail(error)
        else:
            lifecycle.succeed(result)

    # ===== Collection mutations =====

    def _replace_all(self, records):
        self._items = list(records or [])
        self._changed()
        return self.items

    def _append(self, record):
        self._items.append(record)
        self._changed()
        return record

    def _replace_one(self, rid, record):
        for index, item in enumerate(self._items):
            if resource_id(item) == rid:
                self._items[index] = record
                self.last_update_missed = False
                break
        else:
            LoggingService.warning(self.kind, f"Updated {self.kind} {rid} not found locally, appending")
            self._items.append(record)
            self.last_update_missed = True
        self._changed()
        return record
