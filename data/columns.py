import pandas as pd

ITEM_ID_ALIASES = ["itemid", "item_id", "itemId", "movieId", "movie_id", "contentid", "id", "item"]
USER_ID_ALIASES = ["userId", "user_id", "userid", "user"]
TITLE_ALIASES = ["title", "name"]
TAG_ALIASES = ["tag", "tagName", "tag_name"]
RATING_ALIASES = ["rating", "value", "score"]


def pick(colnames, candidates):
    s = {str(c).lower(): c for c in colnames}
    for c in candidates:
        if c in colnames: return c
        if c.lower() in s: return s[c.lower()]
    return None


def normalize_columns(df, wanted):
    """
    Rename columns to canonical names.

    ``wanted`` maps a canonical name to its aliases. Returns None when a
    canonical column has no match.
    """
    renames = {}
    for name, aliases in wanted.items():
        col = pick(df.columns, aliases)
        if col is None:
            return None
        renames[col] = name
    return df.rename(columns=renames)[list(wanted)]


def read_csv_frame(path, wanted):
    """Read a CSV with or without a header row into the canonical columns."""
    df = pd.read_csv(path)
    out = normalize_columns(df, wanted)
    if out is None:
        # headerless file, columns in canonical order
        df = pd.read_csv(path, header=None)
        if df.shape[1] < len(wanted):
            raise ValueError(f"{path}: expected {len(wanted)} columns, found {df.shape[1]}")
        out = df.iloc[:, :len(wanted)].copy()
        out.columns = list(wanted)
    return out
