import pandas as pd
from config.setting import DATA_SOURCE, RATINGS_PATH
from data.columns import ITEM_ID_ALIASES, RATING_ALIASES, USER_ID_ALIASES, read_csv_frame
from data.db import get_engine

RATINGS_QUERY = """
SELECT
    r."userId",
    r."itemId" AS itemid,
    r.rating
FROM ratings r
"""

def load_ratings(path=None, engine=None):
    # a missing rating value marks a retracted rating and is kept as NaN
    if engine is None and path is None and DATA_SOURCE == "sql":
        engine = get_engine()

    if engine is not None:
        df = pd.read_sql(RATINGS_QUERY, engine)
    else:
        df = read_csv_frame(
            path or RATINGS_PATH,
            {"userId": USER_ID_ALIASES, "itemid": ITEM_ID_ALIASES, "rating": RATING_ALIASES},
        )

    df = df.dropna(subset=["userId", "itemid"])
    df["userId"] = df["userId"].astype(str)
    df["itemid"] = df["itemid"].astype(str)
    df["rating"] = pd.to_numeric(df["rating"], errors="coerce")

    return df[["userId", "itemid", "rating"]].reset_index(drop=True)
