from functools import lru_cache
from sqlalchemy import create_engine
from config.setting import DATABASE_URL


@lru_cache(maxsize=None)
def get_engine(url=DATABASE_URL):
    return create_engine(url)
