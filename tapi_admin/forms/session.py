"""
Form Session
============

Editable draft of one resource, bound to a FormSchema. Tracks whether the
draft differs from what it was seeded with, keeps per-field validation
errors current on every change, and hands the values to the resource
store on submit.

A session is created empty (create mode) or seeded from an existing
record (edit mode), and is closed on cancel or after a successful submit.
Closing releases every preview reference the session handed out.
"""

import logging

from ..core.errors import IndexOutOfRange, NotReady, ValidationError
from ..core.logging_service import LoggingService
from ..core.resource_store import resource_id
from .attachments import FileAttachment, PreviewRegistry
from .fields import CREATE, EDIT, FileField, FileListField, ListField, TextField
from .multipart import MultipartPayloadBuilder

logger = logging.getLogger(__name__)


class SessionClosed(RuntimeError):
    pass


class FormSession:

    def __init__(self, schema, store=None, resource=None, previews=None):
        self.schema = schema
        self.store = store
        self.builder = MultipartPayloadBuilder(schema)
        self.previews = previews if previews is not None else PreviewRegistry()
        self.closed = False
        self.resource = None
        self.field_errors = {}
        # Misuse of list helpers (bad row index); not a field validation failure
        self.list_errors = {}
        self.submit_error = None
        self._values = {}
        self._snapshot = {}
        self._preview_refs = {}
        self.seed(resource)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def __repr__(self):
        return f"<FormSession {self.schema.kind} {self.mode} dirty={self.is_dirty} valid={self.is_valid}>"

    # ===== Seeding =====

    def seed(self, resource=None):
        """
        Establish the initial snapshot. The session is clean afterwards,
        in edit mode too.
        """
        self._require_open()
        self._release_previews()
        self.resource = resource
        self._values = {field.name: field.initial(resource) for field in self.schema}
        self._snapshot = self._fingerprint()
        self.submit_error = None
        self.field_errors = {}
        self.list_errors = {}
        for field in self.schema:
            self._validate_field(field)

    @property
    def mode(self):
        return EDIT if self.resource is not None else CREATE

    @property
    def resource_id(self):
        return resource_id(self.resource)

    # ===== Derived state =====

    def _fingerprint(self):
        return {field.name: field.fingerprint(self._values[field.name]) for field in self.schema}

    @property
    def is_dirty(self):
        return self._fingerprint() != self._snapshot

    @property
    def is_valid(self):
        return not self.field_errors

    @property
    def can_submit(self):
        """Whether the submit button should be enabled"""
        if self.closed or not self.is_valid:
            return False
        if self.store is None:
            return False
        state = self.store.update_state if self.mode == EDIT else self.store.create_state
        return not state.is_pending

    def char_count(self, name):
        """(length, maximum, remaining) for a text field; display only"""
        field = self.schema.field(name)
        if not isinstance(field, TextField):
            raise TypeError(f"{name} is not a text field")
        return field.char_count(self._values[name])

    def get(self, name):
        self.schema.field(name)
        return self._values[name]

    @property
    def values(self):
        return dict(self._values)

    # ===== Editing =====

    def set_field(self, name, value):
        """Set one field and re-run only that field's validation"""
        self._require_open()
        field = self.schema.field(name)
        if isinstance(field, (FileField, FileListField)):
            # Previews of a replaced local file are no longer shown
            self._release_previews(name)
        self._values[name] = field.coerce(value)
        self._validate_field(field)

    def select_file(self, name, local_file):
        """
        Attach a newly picked file to a file field, replacing whatever was
        there. Returns the preview reference for display.
        """
        field = self.schema.field(name)
        if not isinstance(field, FileField):
            raise TypeError(f"{name} is not a single file field")
        self.set_field(name, FileAttachment.from_local(local_file))
        return self._add_preview(name, local_file)

    def select_files(self, name, local_files):
        """Replace the contents of a multi-file field. Returns preview references."""
        field = self.schema.field(name)
        if not isinstance(field, FileListField):
            raise TypeError(f"{name} is not a multi file field")
        self.set_field(name, [FileAttachment.from_local(f) for f in local_files])
        return [self._add_preview(name, f) for f in local_files]

    def previews_for(self, name):
        return list(self._preview_refs.get(name, []))

    def add_entry(self, name):
        self._require_open()
        index = self._list(name).add_entry()
        self.list_errors.pop(name, None)
        self._validate_field(self.schema.field(name))
        return index

    def remove_entry(self, name, index):
        """Remove a list row. A bad index is kept on list_errors and returns False."""
        return self._edit_list(name, lambda entries: entries.remove_entry(index))

    def set_entry_field(self, name, index, key, value):
        return self._edit_list(name, lambda entries: entries.set_entry_field(index, key, value))

    def _list(self, name):
        if not isinstance(self.schema.field(name), ListField):
            raise TypeError(f"{name} is not a list field")
        return self._values[name]

    def _edit_list(self, name, action):
        self._require_open()
        entries = self._list(name)
        field = self.schema.field(name)
        try:
            action(entries)
        except IndexOutOfRange as e:
            self.list_errors[name] = e.message
            return False
        self.list_errors.pop(name, None)
        self._validate_field(field)
        return True

    # ===== Validation =====

    def _validate_field(self, field):
        try:
            field.validate(self._values[field.name], self.mode)
        except ValidationError as e:
            self.field_errors[field.name] = e.message
        else:
            self.field_errors.pop(field.name, None)

    def validate(self):
        for field in self.schema:
            self._validate_field(field)
        return self.is_valid

    # ===== Submit / close =====

    async def collect_extra_parts(self):
        """Additional text parts gathered at submit time (none by default)"""
        return []

    async def submit(self):
        """
        Validate, build the multipart payload and create or update through
        the store.

        Returns:
            The canonical record on success, otherwise None with the reason
            on ``field_errors`` / ``submit_error``.
        """
        self._require_open()
        if self.store is None:
            raise RuntimeError(f"{self.schema.kind} form session has no store to submit to")

        self.submit_error = None
        if not self.validate():
            self.submit_error = 'Please fix the highlighted fields'
            return None

        try:
            extra_parts = await self.collect_extra_parts()
            payload = self.builder.build(self._values, self.mode, extra_parts)
        except ValidationError as e:
            self.field_errors[e.field or '__all__'] = e.message
            self.submit_error = e.message
            return None
        except NotReady as e:
            self.submit_error = e.message
            return None

        if self.mode == EDIT:
            state = self.store.update_state
            result = await self.store.update(self.resource_id, payload)
        else:
            state = self.store.create_state
            result = await self.store.create(payload)

        if not state.succeeded:
            self.submit_error = state.message or 'Failed to save'
            return None

        LoggingService.log_user_action(
            self.schema.kind, f"{self.mode} {self.schema.kind}",
            details={'id': resource_id(result) if isinstance(result, dict) else None}
        )
        self.close()
        return result

    def cancel(self):
        logger.debug("%s form cancelled (dirty: %s)", self.schema.kind, self.is_dirty)
        self.close()

    def close(self):
        """Release every preview reference and refuse further edits"""
        if self.closed:
            return
        self._release_previews()
        self.closed = True

    def _require_open(self):
        if self.closed:
            raise SessionClosed(f"{self.schema.kind} form session is closed")

    # ===== Previews =====

    def _add_preview(self, name, local_file):
        ref = self.previews.create(local_file)
        self._preview_refs.setdefault(name, []).append(ref)
        return ref

    def _release_previews(self, name=None):
        names = [name] if name else list(self._preview_refs)
        for key in names:
            for ref in self._preview_refs.pop(key, []):
                self.previews.revoke(ref)
