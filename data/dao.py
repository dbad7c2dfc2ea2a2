"""
In-memory data access objects over pandas frames.

``ItemTagDAO`` serves the item catalog, item tags and tag vocabulary the model
builder consumes; ``UserEventDAO`` serves user ratings to the item scorer.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple

import pandas as pd

from config.setting import DATA_SOURCE, ITEMS_PATH, RATINGS_PATH, TAGS_PATH
from data.db import get_engine
from data.load_items import load_items
from data.load_ratings import load_ratings
from data.load_tags import load_item_tags
from utils.logger import log


@dataclass(frozen=True)
class Rating:
    item_id: str
    value: Optional[float]  # None: retracted rating


class ItemTagDAO:
    def __init__(self, tags_df: pd.DataFrame, items_df: Optional[pd.DataFrame] = None):
        tags_df = tags_df.dropna(subset=["itemid", "tag"])
        self._tags: Dict[str, List[str]] = (
            tags_df.groupby("itemid", sort=False)["tag"].apply(list).to_dict()
        )
        self._vocabulary = frozenset(tags_df["tag"])

        item_ids = set(self._tags)
        self._titles: Dict[str, str] = {}
        if items_df is not None:
            item_ids.update(items_df["itemid"])
            if "title" in items_df.columns:
                self._titles = dict(zip(items_df["itemid"], items_df["title"]))
        self._item_ids = frozenset(item_ids)

    def get_item_ids(self) -> Set[str]:
        return set(self._item_ids)

    def get_item_tags(self, item_id) -> List[str]:
        return list(self._tags.get(item_id, []))

    def get_tag_vocabulary(self) -> Set[str]:
        return set(self._vocabulary)

    def get_item_title(self, item_id) -> Optional[str]:
        return self._titles.get(item_id)

    @property
    def titles(self) -> Dict[str, str]:
        return dict(self._titles)


class UserEventDAO:
    def __init__(self, ratings_df: pd.DataFrame):
        self._frame = ratings_df[["userId", "itemid", "rating"]].reset_index(drop=True)
        self._ratings: Dict[str, List[Rating]] = {}
        for user, group in ratings_df.groupby("userId", sort=False):
            self._ratings[user] = [
                Rating(item, None if pd.isna(value) else float(value))
                for item, value in zip(group["itemid"], group["rating"])
            ]

    def get_ratings(self, user_id) -> List[Rating]:
        return list(self._ratings.get(user_id, []))

    def to_frame(self) -> pd.DataFrame:
        return self._frame.copy()


def load_sources(source=DATA_SOURCE) -> Tuple[ItemTagDAO, UserEventDAO]:
    """Load items, tags and ratings from the configured source ("csv" or "sql")."""
    if source == "sql":
        engine = get_engine()
        items = load_items(engine=engine)
        tags = load_item_tags(engine=engine)
        ratings = load_ratings(engine=engine)
    elif source == "csv":
        items = load_items(ITEMS_PATH)
        tags = load_item_tags(TAGS_PATH)
        ratings = load_ratings(RATINGS_PATH)
    else:
        raise ValueError(f"Unknown data source {source!r}, expected 'csv' or 'sql'")
    log(f"Loaded {len(items)} items, {len(tags)} tag assignments, {len(ratings)} ratings ({source}).")

    return ItemTagDAO(tags, items), UserEventDAO(ratings)
