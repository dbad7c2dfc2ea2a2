import pandas as pd
from config.setting import DATA_SOURCE, ITEMS_PATH
from data.columns import ITEM_ID_ALIASES, TITLE_ALIASES, read_csv_frame
from data.db import get_engine

ITEMS_QUERY = """
SELECT
    c.id AS itemid,
    c.title
FROM content c
"""

def load_items(path=None, engine=None):
    if engine is None and path is None and DATA_SOURCE == "sql":
        engine = get_engine()

    if engine is not None:
        df = pd.read_sql(ITEMS_QUERY, engine)
    else:
        df = read_csv_frame(path or ITEMS_PATH, {"itemid": ITEM_ID_ALIASES, "title": TITLE_ALIASES})

    df = df.dropna(subset=["itemid"])
    df["itemid"] = df["itemid"].astype(str)
    df["title"] = df["title"].fillna("").astype(str)

    return df.drop_duplicates("itemid")[["itemid", "title"]]
