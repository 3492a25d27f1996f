"""
Dynamic List Field
==================

Ordered, user-editable repeating sub-records inside a form, e.g. the
``{point, description}`` benefit entries of a product. Order is preserved
across add/remove; removing an entry closes the gap.

Seeding with no entries yields a single blank entry so there is always a
row to type into. Removing the last row is allowed; re-seeding after that
is left to the caller.
"""

from ..core.errors import IndexOutOfRange


class DynamicListField:

    def __init__(self, keys, entries=None):
        if not keys:
            raise ValueError("A dynamic list needs at least one sub-field")
        self.keys = tuple(keys)
        self._entries = []
        self._snapshot = ()
        self.seed(entries)

    def __len__(self):
        return len(self._entries)

    def __repr__(self):
        return f"<DynamicListField {list(self.keys)} x{len(self._entries)}>"

    def blank(self):
        return {key: '' for key in self.keys}

    def is_blank(self, entry):
        return not any(str(entry.get(key) or '').strip() for key in self.keys)

    def _coerce(self, entry):
        if isinstance(entry, str):
            # Older records stored a bare string per entry
            row = self.blank()
            row[self.keys[0]] = entry
            return row
        return {key: '' if entry.get(key) is None else str(entry.get(key)) for key in self.keys}

    # ===== Seeding / dirty tracking =====

    def seed(self, entries=None):
        rows = [self._coerce(entry) for entry in (entries or [])]
        if not rows:
            rows = [self.blank()]
        self._entries = rows
        self._snapshot = self.fingerprint()

    def fingerprint(self):
        """Hashable, order-sensitive view of the current rows"""
        return tuple(tuple(row[key] for key in self.keys) for row in self._entries)

    @property
    def is_dirty(self):
        return self.fingerprint() != self._snapshot

    # ===== Editing =====

    @property
    def entries(self):
        """All rows, blank ones included, as copies"""
        return [dict(row) for row in self._entries]

    def add_entry(self):
        """Append a blank row. Returns its index."""
        self._entries.append(self.blank())
        return len(self._entries) - 1

    def remove_entry(self, index):
        self._check(index)
        return self._entries.pop(index)

    def set_entry_field(self, index, key, value):
        self._check(index)
        if key not in self.keys:
            raise KeyError(key)
        self._entries[index][key] = '' if value is None else str(value)

    def _check(self, index):
        if not 0 <= index < len(self._entries):
            raise IndexOutOfRange(index, len(self._entries))

    # ===== Output =====

    def values(self):
        """Rows worth sending: blank rows are dropped, order kept"""
        return [dict(row) for row in self._entries if not self.is_blank(row)]

    def incomplete_rows(self):
        """Indexes of rows that have content but no value for the first sub-field"""
        lead = self.keys[0]
        return [
            index for index, row in enumerate(self._entries)
            if not self.is_blank(row) and not row[lead].strip()
        ]
