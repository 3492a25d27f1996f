"""
Form Fields
===========

Closed, declarative field schema used by form sessions. Each resource kind
declares its fields once (see modules/*/schema.py); the field type decides
how a value is seeded, validated, compared for dirty tracking and turned
into multipart parts.

Field types: TextField, ChoiceField, BooleanField, TagsField, FileField,
FileListField, ListField.
"""

import json
from collections import namedtuple

from ..core.errors import ValidationError
from .attachments import FileAttachment
from .dynamic_list import DynamicListField

CREATE = 'create'
EDIT = 'edit'

CharCount = namedtuple('CharCount', ['length', 'maximum', 'remaining'])


def parse_tags(text):
    """Split a comma separated tag string: "a, b ,c" -> ["a", "b", "c"]"""
    if not text:
        return []
    if isinstance(text, (list, tuple)):
        return [str(tag).strip() for tag in text if str(tag).strip()]
    return [tag.strip() for tag in text.split(',') if tag.strip()]


class Field:
    """Base field. ``source`` is the resource key it is seeded from."""

    def __init__(self, name, label=None, required=True, source=None, part_name=None):
        self.name = name
        self.label = label or name.replace('_', ' ').capitalize()
        self.required = required
        self.source = source or name
        self.part_name = part_name or name

    def __repr__(self):
        return f"<{type(self).__name__} {self.name}>"

    def blank(self):
        return ''

    def initial(self, resource):
        """Value for a new session, seeded from resource (or None in create mode)"""
        if resource is None:
            return self.blank()
        value = resource.get(self.source)
        return self.blank() if value is None else self.coerce(value)

    def coerce(self, value):
        return '' if value is None else str(value)

    def fingerprint(self, value):
        """Comparable form of a value, used for dirty tracking"""
        return value

    def validate(self, value, mode):
        """Raise ValidationError when the value breaks a rule"""

    def serialize(self, value):
        """List of (part_name, str | LocalFile) multipart parts"""
        return [(self.part_name, self.coerce(value))]


class TextField(Field):

    def __init__(self, name, min_length=None, max_length=None, **kwargs):
        super().__init__(name, **kwargs)
        self.min_length = min_length
        self.max_length = max_length

    def validate(self, value, mode):
        value = value or ''
        if not value.strip():
            if self.required:
                raise ValidationError(f"{self.label} is required", field=self.name)
            return
        if self.min_length is not None and len(value) < self.min_length:
            raise ValidationError(
                f"{self.label} must be at least {self.min_length} characters", field=self.name
            )
        if self.max_length is not None and len(value) > self.max_length:
            raise ValidationError(
                f"{self.label} must be at most {self.max_length} characters", field=self.name
            )

    def char_count(self, value):
        length = len(value or '')
        if self.max_length is None:
            return CharCount(length, None, None)
        return CharCount(length, self.max_length, self.max_length - length)


class ChoiceField(Field):

    def __init__(self, name, choices, **kwargs):
        super().__init__(name, **kwargs)
        # (value, label) pairs, or bare values
        self.choices = tuple(c if isinstance(c, tuple) else (c, c) for c in choices)

    @property
    def values(self):
        return [value for value, _ in self.choices]

    def validate(self, value, mode):
        if not value:
            if self.required:
                raise ValidationError(f"{self.label} is required", field=self.name)
            return
        if value not in self.values:
            raise ValidationError(f"{value!r} is not a valid {self.label.lower()}", field=self.name)


class BooleanField(Field):

    def __init__(self, name, default=False, **kwargs):
        kwargs.setdefault('required', False)
        super().__init__(name, **kwargs)
        self.default = default

    def blank(self):
        return self.default

    def coerce(self, value):
        if isinstance(value, str):
            return value.strip().lower() in ('true', '1', 'yes', 'on')
        return bool(value)

    def serialize(self, value):
        return [(self.part_name, 'true' if value else 'false')]


class TagsField(Field):
    """Free text "a, b, c" in the form, a JSON list on the wire. Optional."""

    def __init__(self, name, **kwargs):
        kwargs.setdefault('required', False)
        super().__init__(name, **kwargs)

    def coerce(self, value):
        if isinstance(value, (list, tuple)):
            return ', '.join(str(tag) for tag in value)
        return '' if value is None else str(value)

    def fingerprint(self, value):
        return tuple(parse_tags(value))

    def validate(self, value, mode):
        if self.required and not parse_tags(value):
            raise ValidationError(f"{self.label} needs at least one tag", field=self.name)

    def serialize(self, value):
        return [(self.part_name, json.dumps(parse_tags(value)))]


def _remote_url(value):
    """Stored assets come back either as a URL string or as {url: ...}"""
    if isinstance(value, dict):
        return value.get('url') or None
    return value or None


class FileField(Field):
    """
    One file. A part is emitted only for a new local file; a remote
    reference means "keep what the server has".
    """

    def __init__(self, name, required_on_create=False, required_message=None, **kwargs):
        kwargs.setdefault('required', False)
        super().__init__(name, **kwargs)
        self.required_on_create = required_on_create
        self.required_message = required_message or f"{self.label} is required"

    def blank(self):
        return None

    def coerce(self, value):
        if value is None or isinstance(value, FileAttachment):
            return value
        url = _remote_url(value)
        return FileAttachment.from_remote(url) if url else None

    def validate(self, value, mode):
        if value is not None and value.local is not None and not value.has_new_blob:
            raise ValidationError(f"{self.label}: the selected file is empty", field=self.name)
        has_file = value is not None and (value.has_new_blob or value.remote)
        if self.required and not has_file:
            raise ValidationError(self.required_message, field=self.name)
        if mode == CREATE and self.required_on_create and not (value is not None and value.has_new_blob):
            raise ValidationError(self.required_message, field=self.name)

    def serialize(self, value):
        if value is not None and value.has_new_blob:
            return [(self.part_name, value.local)]
        return []


class FileListField(Field):
    """Several files under one part name (e.g. a product's extra images)"""

    def __init__(self, name, **kwargs):
        kwargs.setdefault('required', False)
        super().__init__(name, **kwargs)

    def blank(self):
        return ()

    def coerce(self, value):
        if not value:
            return ()
        if isinstance(value, FileAttachment):
            return (value,)
        items = value if isinstance(value, (list, tuple)) else [value]
        attachments = []
        for item in items:
            if isinstance(item, FileAttachment):
                attachments.append(item)
            elif _remote_url(item):
                attachments.append(FileAttachment.from_remote(_remote_url(item)))
        return tuple(attachments)

    def validate(self, value, mode):
        for attachment in value or ():
            if attachment.local is not None and not attachment.has_new_blob:
                raise ValidationError(
                    f"{self.label}: {attachment.local.filename} is empty", field=self.name
                )
        if self.required and not value:
            raise ValidationError(f"{self.label} is required", field=self.name)

    def serialize(self, value):
        return [(self.part_name, a.local) for a in value or () if a.has_new_blob]


class ListField(Field):
    """Repeating sub-records, sent as a single JSON text part"""

    def __init__(self, name, keys=('point', 'description'), min_count=0, **kwargs):
        kwargs.setdefault('required', False)
        super().__init__(name, **kwargs)
        self.keys = tuple(keys)
        self.min_count = min_count

    def blank(self):
        return DynamicListField(self.keys)

    def initial(self, resource):
        entries = resource.get(self.source) if resource else None
        if isinstance(entries, str):
            try:
                entries = json.loads(entries)
            except ValueError:
                entries = [entries]
        if isinstance(entries, (str, dict)):
            entries = [entries]
        return DynamicListField(self.keys, entries or [])

    def coerce(self, value):
        if isinstance(value, DynamicListField):
            return value
        return DynamicListField(self.keys, value or [])

    def fingerprint(self, value):
        return value.fingerprint()

    def validate(self, value, mode):
        incomplete = value.incomplete_rows()
        if incomplete:
            rows = ', '.join(str(index + 1) for index in incomplete)
            raise ValidationError(
                f"{self.label}: entry {rows} is missing a {self.keys[0]}", field=self.name
            )
        if len(value.values()) < self.min_count:
            raise ValidationError(
                f"{self.label} needs at least {self.min_count} entr{'y' if self.min_count == 1 else 'ies'}",
                field=self.name,
            )

    def serialize(self, value):
        return [(self.part_name, json.dumps(value.values()))]


class FormSchema:
    """Ordered, closed set of fields for one resource kind"""

    def __init__(self, kind, fields):
        self.kind = kind
        self.fields = tuple(fields)
        self._by_name = {field.name: field for field in self.fields}
        if len(self._by_name) != len(self.fields):
            raise ValueError(f"Duplicate field names in {kind} schema")

    def __iter__(self):
        return iter(self.fields)

    def __contains__(self, name):
        return name in self._by_name

    def field(self, name):
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f"{self.kind} form has no field {name!r}") from None

    def extra_parts(self, values):
        """Parts derived from other fields; overridden per resource kind"""
        return []
