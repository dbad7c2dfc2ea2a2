import math
from features.sparse_vector import MutableSparseVector


class DataInconsistencyError(ValueError):
    """An item carries a tag that is missing from the tag vocabulary."""


def build_tag_id_map(tags):
    # IDs follow sorted tag order; only their consistency within one model matters
    return {tag: tag_id for tag_id, tag in enumerate(sorted(set(tags)), start=1)}


def term_frequencies(tags, tag_ids, item=None):
    tf = MutableSparseVector()
    for tag in tags:
        tag_id = tag_ids.get(tag)
        if tag_id is None:
            raise DataInconsistencyError(f"Tag {tag!r} of item {item!r} is not in the tag vocabulary")
        tf.add(tag_id, 1.0)
    return tf


def count_document_frequency(doc_freq, tf):
    # once per distinct tag on the item
    for tag_id in tf.keys():
        doc_freq.add(tag_id, 1.0)


def inverse_document_frequency(df, n_items):
    if df <= 0 or n_items <= 0:
        return 0.0
    return math.log(n_items / df)


def to_log_idf(doc_freq, n_items):
    """Turn a document frequency vector into a log-IDF vector, in place."""
    for tag_id, df in list(doc_freq.items()):
        doc_freq.set(tag_id, inverse_document_frequency(df, n_items))
    return doc_freq
