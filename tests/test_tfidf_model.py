import math

import numpy as np
import pytest

from features.sparse_vector import SparseVector, cosine
from models.tfidf_model import DataInconsistencyError, build_model, build_tfidf_model


def test_two_item_scenario(two_item_model):
    model = two_item_model
    b = model.tag_id("B")

    assert model.get_item_vector("item1").to_dict() == pytest.approx({b: 1.0})
    assert model.get_item_vector("item2").norm() == 0.0
    assert len(model.get_item_vector("item2")) == 0


def test_item_vectors_have_unit_or_zero_norm(catalog_model):
    for item in catalog_model.item_ids:
        norm = catalog_model.get_item_vector(item).norm()
        assert norm == 0.0 or norm == pytest.approx(1.0)


def test_untagged_item_has_zero_vector(catalog_model):
    assert "5" in catalog_model
    assert catalog_model.get_item_vector("5").norm() == 0.0


def test_repeated_tag_weighs_more(catalog_model):
    v = catalog_model.get_item_vector("1")
    horror = catalog_model.tag_id("horror")
    space = catalog_model.tag_id("space")
    # horror: tf 2, df 1; space: tf 1, df 2; five items
    expected = np.array([2 * math.log(5), math.log(5 / 2)])
    expected /= np.linalg.norm(expected)
    assert v.get(horror) == pytest.approx(expected[0])
    assert v.get(space) == pytest.approx(expected[1])


def test_tag_missing_from_vocabulary_fails_the_build():
    tags = {"i1": ["a", "b"]}
    with pytest.raises(DataInconsistencyError):
        build_tfidf_model(tags, tags.get, {"a"})


def test_vocabulary_derived_when_omitted():
    tags = {"i1": ["a", "b"], "i2": ["b"]}
    model = build_tfidf_model(tags, tags.get)
    assert set(model.tag_ids) == {"a", "b"}


def test_vocabulary_tag_on_no_item_is_inert():
    tags = {"i1": ["a"], "i2": ["b"]}
    model = build_tfidf_model(tags, tags.get, {"a", "b", "unused"})
    assert model.n_tags == 3
    for item in tags:
        assert model.tag_id("unused") not in model.get_item_vector(item)


def test_model_is_read_only(two_item_model):
    with pytest.raises(TypeError):
        two_item_model.tag_ids["C"] = 99
    with pytest.raises(AttributeError):
        two_item_model.get_item_vector("item1").norm = lambda: 2.0


def test_unknown_item_gets_empty_vector(two_item_model):
    assert "nope" not in two_item_model
    assert two_item_model.get_item_vector("nope").norm() == 0.0


def test_rebuild_keeps_similarity_relationships(tag_dao):
    first = build_model(tag_dao)
    second = build_model(tag_dao)
    query = {"space": 1.0, "crime": -0.5}

    def query_vector(model):
        work = model.new_tag_vector()
        for tag, weight in query.items():
            work.set(model.tag_id(tag), weight)
        return work.freeze()

    for item in tag_dao.get_item_ids():
        assert cosine(query_vector(first), first.get_item_vector(item)) == pytest.approx(
            cosine(query_vector(second), second.get_item_vector(item))
        )


def test_matrix_rows_match_item_vectors(catalog_model):
    item_ids, matrix = catalog_model.to_matrix()
    assert matrix.shape == (len(catalog_model), catalog_model.n_tags)
    for row, item in enumerate(item_ids):
        dense = matrix[row].toarray().ravel()
        for tag_id, weight in catalog_model.get_item_vector(item).items():
            assert dense[tag_id - 1] == pytest.approx(weight)
        assert np.linalg.norm(dense) == pytest.approx(catalog_model.get_item_vector(item).norm())


def test_tag_row_layout(catalog_model):
    vector = catalog_model.get_item_vector("3")
    row = catalog_model.tag_row(vector).toarray().ravel()
    assert row[catalog_model.tag_id("crime") - 1] == pytest.approx(vector.get(catalog_model.tag_id("crime")))
    assert row.sum() == pytest.approx(vector.sum())


def test_describe_lists_tags_heaviest_first(catalog_model):
    described = catalog_model.describe(catalog_model.get_item_vector("1"))
    assert [tag for tag, _ in described] == ["horror", "space"]
    assert catalog_model.describe(catalog_model.get_item_vector("1"), top=1)[0][0] == "horror"
    assert catalog_model.describe(SparseVector.empty()) == []


def test_empty_catalog():
    model = build_tfidf_model([], lambda item: [], set())
    item_ids, matrix = model.to_matrix()
    assert len(model) == 0
    assert item_ids == ()
    assert matrix.shape == (0, 0)


def test_item_matrix_is_read_only(catalog_model):
    _, matrix = catalog_model.to_matrix()
    for arr in (matrix.data, matrix.indices, matrix.indptr):
        with pytest.raises(ValueError):
            arr[:] = 0
