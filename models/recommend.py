import numpy as np
import pandas as pd
from sklearn.metrics.pairwise import cosine_similarity
from config.setting import PROFILE_MODE, TOP_N
from models.cb_model import make_profile
from utils.logger import log

def recommend(
    user_id,
    model,
    rating_source,
    top_n=None,
    exclude_rated=True,
    titles=None,
    profile=PROFILE_MODE,
):
    """
    Rank the whole catalog for a user by cosine similarity with their profile.

    Args:
        top_n: number of items to return (default from config)
        exclude_rated: drop items the user has already rated
        titles: optional mapping item ID -> title, adds a "title" column
        profile: "weighted" or "threshold"

    Only items with a positive score are returned, best first.
    """
    if top_n is None:
        top_n = TOP_N

    columns = ["itemid", "score"] + (["title"] if titles is not None else [])
    ratings = rating_source.get_ratings(user_id)
    user_vector = make_profile(ratings, model, profile)

    item_ids, matrix = model.to_matrix()
    if user_vector.norm() == 0 or not item_ids:
        log(f"No usable profile for user {user_id}, nothing to recommend.")
        return pd.DataFrame(columns=columns)

    scores = cosine_similarity(matrix, model.tag_row(user_vector)).ravel()
    df = pd.DataFrame({"itemid": list(item_ids), "score": np.clip(scores, -1.0, 1.0)})

    if exclude_rated:
        seen = {r.item_id for r in ratings if r.value is not None}
        df = df[~df["itemid"].isin(seen)]
    df = df[df["score"] > 0]

    if titles is not None:
        df = df.assign(title=df["itemid"].map(titles).fillna(""))

    log(f"Ranked {len(df)} candidate items for user {user_id}.")
    return (
        df.sort_values(["score", "itemid"], ascending=[False, True])
        .head(top_n)
        .reset_index(drop=True)[columns]
    )
