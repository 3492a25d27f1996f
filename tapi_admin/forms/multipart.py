"""
Multipart Payloads
==================

Turns validated form values into the multipart/form-data body the TAPI
server expects: plain text parts for scalars, one JSON text part per list
field, and binary parts only for newly selected local files. A file field
holding just a remote reference contributes nothing, which the server
reads as "keep the stored asset".
"""

from .attachments import LocalFile


class MultipartPayload:
    """Text parts and binary parts, in insertion order"""

    def __init__(self):
        self.text_parts = []
        self.file_parts = []

    def __repr__(self):
        return (f"<MultipartPayload text={[name for name, _ in self.text_parts]} "
                f"files={[name for name, _ in self.file_parts]}>")

    def add_text(self, name, value):
        self.text_parts.append((name, '' if value is None else str(value)))

    def add_file(self, name, local_file):
        self.file_parts.append((name, local_file))

    def text(self, name):
        """First text value for a part name, or None"""
        for part_name, value in self.text_parts:
            if part_name == name:
                return value
        return None

    def files(self, name):
        return [local for part_name, local in self.file_parts if part_name == name]

    def as_requests_files(self):
        """
        Parts in requests' ``files=`` format. Text parts use a None filename
        so the body is always multipart/form-data, even with no binary parts.
        """
        parts = [(name, (None, value)) for name, value in self.text_parts]
        parts.extend(
            (name, (local.filename, local.content, local.content_type))
            for name, local in self.file_parts
        )
        return parts


class MultipartPayloadBuilder:

    def __init__(self, schema):
        self.schema = schema

    def build(self, values, mode, extra_parts=None):
        """
        Build a payload from form values.

        Args:
            values: {field name: value} from a form session
            mode: 'create' or 'edit'
            extra_parts: more (name, value) text parts, e.g. exported editor content

        Returns:
            MultipartPayload

        Raises:
            ValidationError: if a field fails validation; nothing is built
        """
        for field in self.schema:
            field.validate(values[field.name], mode)

        payload = MultipartPayload()
        parts = []
        for field in self.schema:
            parts.extend(field.serialize(values[field.name]))
        parts.extend(self.schema.extra_parts(values))
        parts.extend(extra_parts or [])

        for name, value in parts:
            if isinstance(value, LocalFile):
                payload.add_file(name, value)
            else:
                payload.add_text(name, value)
        return payload

