"""
TAPI Admin Forms
================

Schema-validated, dirty-tracked form sessions and the multipart payloads
they submit.
"""

from .attachments import FileAttachment, LocalFile, PreviewRegistry
from .dynamic_list import DynamicListField
from .fields import (
    CREATE, EDIT, BooleanField, ChoiceField, FileField, FileListField,
    FormSchema, ListField, TagsField, TextField, parse_tags,
)
from .multipart import MultipartPayload, MultipartPayloadBuilder
from .session import FormSession, SessionClosed

__all__ = [
    'CREATE', 'EDIT',
    'BooleanField', 'ChoiceField', 'FileField', 'FileListField', 'FormSchema',
    'ListField', 'TagsField', 'TextField', 'parse_tags',
    'DynamicListField', 'FileAttachment', 'LocalFile', 'PreviewRegistry',
    'MultipartPayload', 'MultipartPayloadBuilder',
    'FormSession', 'SessionClosed',
]
