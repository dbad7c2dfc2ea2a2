"""
Sparse vectors keyed by integer IDs (tag IDs or item IDs).

Two flavors are used:

- ``MutableSparseVector``: a dict-backed vector that grows while counts or
  weighted sums are accumulated.
- ``SparseVector``: the frozen form, compacted to sorted numpy key/value
  arrays that are marked read-only. It is produced once, by ``freeze()``.

Keys that are not stored are implicitly zero.
"""

import math

import numpy as np


class SparseVector:
    """Immutable sparse vector."""

    __slots__ = ("_keys", "_values", "_norm")

    def __init__(self, keys=(), values=()):
        keys = np.asarray(keys, dtype=np.int64)
        values = np.asarray(values, dtype=np.float64)
        if keys.shape != values.shape:
            raise ValueError("keys and values must have the same length")

        order = np.argsort(keys, kind="stable")
        keys = keys[order]
        values = values[order]
        if keys.size > 1 and np.any(np.diff(keys) == 0):
            raise ValueError("duplicate keys in sparse vector")

        keys.flags.writeable = False
        values.flags.writeable = False
        self._keys = keys
        self._values = values
        self._norm = float(np.sqrt(np.dot(values, values)))

    @classmethod
    def empty(cls):
        return cls()

    @property
    def keys(self):
        return self._keys

    @property
    def values(self):
        return self._values

    def __len__(self):
        return int(self._keys.size)

    def _position(self, key):
        pos = int(np.searchsorted(self._keys, key))
        if pos < self._keys.size and self._keys[pos] == key:
            return pos
        return None

    def __contains__(self, key):
        return self._position(key) is not None

    def get(self, key, default=0.0):
        pos = self._position(key)
        return default if pos is None else float(self._values[pos])

    def items(self):
        for key, value in zip(self._keys.tolist(), self._values.tolist()):
            yield key, value

    def to_dict(self):
        return dict(self.items())

    def norm(self):
        return self._norm

    def sum(self):
        return float(self._values.sum())

    def dot(self, other):
        """Dot product over the keys present in both vectors."""
        _, mine, theirs = np.intersect1d(
            self._keys, other._keys, assume_unique=True, return_indices=True
        )
        if mine.size == 0:
            return 0.0
        return float(np.dot(self._values[mine], other._values[theirs]))

    def __repr__(self):
        return f"SparseVector({self.to_dict()!r})"


class MutableSparseVector:
    """Growable sparse vector used during accumulation."""

    def __init__(self, entries=None):
        self._data = dict(entries) if entries is not None else {}

    def __len__(self):
        return len(self._data)

    def __contains__(self, key):
        return key in self._data

    def get(self, key, default=0.0):
        return self._data.get(key, default)

    def set(self, key, value):
        self._data[key] = float(value)

    def add(self, key, amount=1.0):
        self._data[key] = self._data.get(key, 0.0) + amount

    def add_vector(self, other, scale=1.0):
        """Add ``scale * other`` into this vector, key by key."""
        for key, value in other.items():
            self._data[key] = self._data.get(key, 0.0) + scale * value

    def multiply(self, other):
        """Element-wise product with ``other``; keys missing from ``other`` become 0."""
        for key in self._data:
            self._data[key] *= other.get(key, 0.0)

    def scale(self, factor):
        for key in self._data:
            self._data[key] *= factor

    def keys(self):
        return self._data.keys()

    def items(self):
        return self._data.items()

    def clear(self):
        self._data.clear()

    def norm(self):
        return math.sqrt(sum(v * v for v in self._data.values()))

    def normalize(self):
        # a zero-norm vector becomes the empty vector
        length = self.norm()
        if length == 0:
            self._data.clear()
        else:
            self.scale(1.0 / length)

    def discard_zeros(self):
        self._data = {k: v for k, v in self._data.items() if v != 0}

    def freeze(self):
        keys = np.fromiter(self._data.keys(), dtype=np.int64, count=len(self._data))
        values = np.fromiter(self._data.values(), dtype=np.float64, count=len(self._data))
        return SparseVector(keys, values)

    def __repr__(self):
        return f"MutableSparseVector({self._data!r})"


def cosine(u, v):
    """
    Cosine similarity of two frozen vectors.

    Returns 0.0 when either vector has zero (or undefined) norm.
    """
    u_norm = u.norm()
    v_norm = v.norm()
    if not (u_norm > 0 and v_norm > 0):
        return 0.0
    sim = u.dot(v) / (u_norm * v_norm)
    return max(-1.0, min(1.0, sim))
