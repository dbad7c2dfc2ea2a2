from types import MappingProxyType

import numpy as np
from scipy.sparse import csr_matrix

from features.sparse_vector import MutableSparseVector, SparseVector
from features.tag_features import (
    DataInconsistencyError,
    build_tag_id_map,
    count_document_frequency,
    term_frequencies,
    to_log_idf,
)
from utils.logger import log

__all__ = ["TFIDFModel", "DataInconsistencyError", "build_tfidf_model", "build_model"]

EMPTY_VECTOR = SparseVector.empty()


class TFIDFModel:
    """
    Immutable TF-IDF model: a tag vocabulary (tag -> ID) and one unit-length
    TF-IDF vector per item.

    The model is never modified after construction, so a single instance can
    be shared by any number of concurrent scoring calls.
    """

    def __init__(self, tag_ids, item_vectors):
        self._tag_ids = MappingProxyType(dict(tag_ids))
        self._tag_names = MappingProxyType({tag_id: tag for tag, tag_id in self._tag_ids.items()})
        self._item_vectors = MappingProxyType(dict(item_vectors))
        self._item_ids = tuple(self._item_vectors)
        self._matrix = self._build_matrix()

    def _build_matrix(self):
        vectors = [self._item_vectors[item] for item in self._item_ids]
        indptr = np.zeros(len(vectors) + 1, dtype=np.int64)
        indptr[1:] = np.cumsum([len(v) for v in vectors])
        if vectors:
            indices = np.concatenate([v.keys for v in vectors]) - 1
            data = np.concatenate([v.values for v in vectors])
        else:
            indices = np.zeros(0, dtype=np.int64)
            data = np.zeros(0, dtype=np.float64)
        matrix = csr_matrix((data, indices, indptr), shape=(len(vectors), self.n_tags))
        for arr in (matrix.data, matrix.indices, matrix.indptr):
            arr.flags.writeable = False
        return matrix

    @property
    def tag_ids(self):
        return self._tag_ids

    @property
    def item_ids(self):
        return self._item_ids

    @property
    def n_tags(self):
        return len(self._tag_ids)

    def __len__(self):
        return len(self._item_vectors)

    def __contains__(self, item):
        return item in self._item_vectors

    def get_item_vector(self, item):
        """Return the item's TF-IDF vector, or the empty vector for an unknown item."""
        return self._item_vectors.get(item, EMPTY_VECTOR)

    def tag_id(self, tag):
        return self._tag_ids.get(tag)

    def tag_name(self, tag_id):
        return self._tag_names.get(tag_id)

    def new_tag_vector(self):
        return MutableSparseVector()

    def tag_row(self, vector):
        """Lay a tag vector out as a 1 x n_tags CSR row matching ``to_matrix()``."""
        return csr_matrix(
            (np.array(vector.values), vector.keys - 1, [0, len(vector)]),
            shape=(1, self.n_tags),
        )

    def to_matrix(self):
        """
        Item vectors as a CSR matrix (one row per item, one column per tag).

        Returns a tuple ``(item_ids, matrix)``; row ``i`` belongs to
        ``item_ids[i]`` and column ``j`` to tag ID ``j + 1``. The matrix arrays
        are read-only.
        """
        return self._item_ids, self._matrix

    def describe(self, vector, top=None):
        """List ``(tag, weight)`` pairs of a tag vector, heaviest first."""
        entries = sorted(
            ((self.tag_name(tag_id), weight) for tag_id, weight in vector.items()),
            key=lambda entry: entry[1],
            reverse=True,
        )
        return entries[:top] if top is not None else entries


def build_tfidf_model(item_ids, tags_of, all_tags=None):
    """
    Build a TF-IDF model from tag assignments.

    Args:
        item_ids: the item catalog
        tags_of: callable returning the list of tags of an item (repeats count)
        all_tags: tag vocabulary; derived from the items' tags when omitted

    Raises:
        DataInconsistencyError: an item carries a tag outside ``all_tags``
    """
    item_ids = list(item_ids)
    item_tags = {item: list(tags_of(item) or []) for item in item_ids}
    if all_tags is None:
        all_tags = {tag for tags in item_tags.values() for tag in tags}
    tag_ids = build_tag_id_map(all_tags)

    # First pass: a TF vector per item, and the document frequencies.
    doc_freq = MutableSparseVector()
    item_vectors = {}
    for item, tags in item_tags.items():
        tf = term_frequencies(tags, tag_ids, item)
        count_document_frequency(doc_freq, tf)
        item_vectors[item] = tf

    to_log_idf(doc_freq, len(item_tags))

    # Second pass: apply IDF and normalize to unit length.
    model_data = {}
    untagged = 0
    for item, vector in item_vectors.items():
        vector.multiply(doc_freq)
        vector.discard_zeros()
        vector.normalize()
        if not len(vector):
            untagged += 1
        model_data[item] = vector.freeze()

    log(f"TF-IDF model built: {len(model_data)} items, {len(tag_ids)} tags, "
        f"{untagged} items with an empty vector.")
    return TFIDFModel(tag_ids, model_data)


def build_model(catalog, tag_source=None):
    """Build a model from an item catalog and an item-tag source (DAO objects)."""
    if tag_source is None:
        tag_source = catalog
    return build_tfidf_model(
        catalog.get_item_ids(),
        tag_source.get_item_tags,
        tag_source.get_tag_vocabulary(),
    )
