import pandas as pd
from config.setting import DATA_SOURCE, TAGS_PATH
from data.columns import ITEM_ID_ALIASES, TAG_ALIASES, read_csv_frame
from data.db import get_engine

TAGS_QUERY = """
SELECT
    ct.content_id AS itemid,
    t."tagName" AS tag
FROM content_tag ct
JOIN tag t ON ct.tag_id = t.id
"""

def load_item_tags(path=None, engine=None):
    """Item-tag assignments, one row per assignment (an item may repeat a tag)."""
    if engine is None and path is None and DATA_SOURCE == "sql":
        engine = get_engine()

    if engine is not None:
        df = pd.read_sql(TAGS_QUERY, engine)
    else:
        df = read_csv_frame(path or TAGS_PATH, {"itemid": ITEM_ID_ALIASES, "tag": TAG_ALIASES})

    df = df.dropna(subset=["itemid", "tag"])
    df["itemid"] = df["itemid"].astype(str)
    df["tag"] = df["tag"].astype(str).str.strip()
    df = df[df["tag"].str.len() > 0]

    return df[["itemid", "tag"]].reset_index(drop=True)
