import pandas as pd
import pytest

from data.dao import ItemTagDAO, UserEventDAO
from models.tfidf_model import build_tfidf_model, build_model


@pytest.fixture
def two_item_model():
    tags = {"item1": ["A", "B"], "item2": ["A"]}
    return build_tfidf_model(tags, tags.get, {"A", "B"})


@pytest.fixture
def items_df():
    return pd.DataFrame({
        "itemid": ["1", "2", "3", "4", "5"],
        "title": ["Alien", "Aliens", "Heat", "Amelie", "Blank"],
    })


@pytest.fixture
def tags_df():
    rows = [
        ("1", "space"), ("1", "horror"), ("1", "horror"),
        ("2", "space"), ("2", "action"),
        ("3", "action"), ("3", "crime"),
        ("4", "romance"), ("4", "paris"),
    ]
    return pd.DataFrame(rows, columns=["itemid", "tag"])


@pytest.fixture
def ratings_df():
    rows = [
        ("u1", "1", 5.0), ("u1", "3", 2.0),
        ("u2", "4", 4.5), ("u2", "3", None),
        ("u3", "2", 0.0),
    ]
    return pd.DataFrame(rows, columns=["userId", "itemid", "rating"])


@pytest.fixture
def tag_dao(tags_df, items_df):
    return ItemTagDAO(tags_df, items_df)


@pytest.fixture
def event_dao(ratings_df):
    return UserEventDAO(ratings_df)


@pytest.fixture
def catalog_model(tag_dao):
    return build_model(tag_dao)


@pytest.fixture
def rich_event_dao(ratings_df):
    extra = pd.DataFrame(
        [("u4", "1", 5.0), ("u4", "4", 1.0)],
        columns=["userId", "itemid", "rating"],
    )
    return UserEventDAO(pd.concat([ratings_df, extra], ignore_index=True))
