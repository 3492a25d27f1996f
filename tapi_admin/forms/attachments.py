"""
Attachments
===========

File values held by form fields, and the preview references handed to the
UI while a locally selected file is on screen.
"""

import os
import uuid
from dataclasses import dataclass
from typing import Optional

CONTENT_TYPES = {
    'jpg': 'image/jpeg', 'jpeg': 'image/jpeg',
    'png': 'image/png', 'gif': 'image/gif', 'webp': 'image/webp',
}


def guess_content_type(filename):
    """Guess content type from extension"""
    ext = filename.rsplit('.', 1)[-1].lower() if '.' in filename else ''
    return CONTENT_TYPES.get(ext, 'application/octet-stream')


@dataclass(frozen=True)
class LocalFile:
    """A file the operator picked locally, pending upload"""

    filename: str
    content: bytes
    content_type: str = 'application/octet-stream'

    @classmethod
    def from_path(cls, path):
        with open(path, 'rb') as f:
            content = f.read()
        filename = os.path.basename(path)
        return cls(filename, content, guess_content_type(filename))

    @classmethod
    def from_bytes(cls, filename, content, content_type=None):
        return cls(filename, content, content_type or guess_content_type(filename))

    @property
    def size(self):
        return len(self.content)

    def __repr__(self):
        return f"LocalFile({self.filename!r}, {self.size} bytes)"


@dataclass(frozen=True)
class FileAttachment:
    """
    Exactly one of: a new local file, or a reference to an already stored
    remote asset. Selecting a new file replaces the attachment; the two are
    never merged.
    """

    local: Optional[LocalFile] = None
    remote: Optional[str] = None

    def __post_init__(self):
        if (self.local is None) == (self.remote is None):
            raise ValueError("A FileAttachment holds exactly one of a local file or a remote reference")

    @classmethod
    def from_local(cls, local_file):
        return cls(local=local_file)

    @classmethod
    def from_remote(cls, url):
        return cls(remote=url)

    @property
    def has_new_blob(self):
        return self.local is not None and self.local.size > 0


class PreviewRegistry:
    """
    Hands out opaque preview references for local files (the console's
    equivalent of object URLs). Owned by one form session; every reference
    is revoked when superseded or when the session ends.
    """

    scheme = 'preview'

    def __init__(self):
        self._previews = {}

    def __len__(self):
        return len(self._previews)

    def __contains__(self, ref):
        return ref in self._previews

    def create(self, local_file):
        ref = f"{self.scheme}://{uuid.uuid4().hex}/{local_file.filename}"
        self._previews[ref] = local_file
        return ref

    def resolve(self, ref):
        return self._previews.get(ref)

    def revoke(self, ref):
        """Release one reference. Returns True if it was live."""
        return self._previews.pop(ref, None) is not None

    def revoke_all(self):
        count = len(self._previews)
        self._previews.clear()
        return count
