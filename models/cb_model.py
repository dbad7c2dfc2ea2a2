import logging
import math

from config.setting import LIKE_THRESHOLD, PROFILE_MODE
from features.sparse_vector import cosine
from utils.logger import log

PROFILES = ("weighted", "threshold")


def _rated(user_ratings):
    # (item, value) pairs; a None or NaN value is a retracted rating
    for rating in user_ratings:
        item, value = (rating.item_id, rating.value) if hasattr(rating, "item_id") else rating
        if value is None or math.isnan(value):
            continue
        yield item, float(value)


def make_weighted_user_vector(user_ratings, model):
    """
    Sum of the rated items' vectors, each weighted by (rating - user mean).

    The mean is taken over every rating of the user, while only ratings above
    zero are accumulated. A user without ratings gets the zero vector.
    """
    ratings = list(_rated(user_ratings))
    profile = model.new_tag_vector()
    if not ratings:
        return profile.freeze()

    mean_rating = sum(value for _, value in ratings) / len(ratings)
    for item, value in ratings:
        if value > 0:
            profile.add_vector(model.get_item_vector(item), value - mean_rating)
    return profile.freeze()


def make_user_vector(user_ratings, model, threshold=LIKE_THRESHOLD):
    """Unweighted sum of the vectors of items rated at or above ``threshold``."""
    profile = model.new_tag_vector()
    for item, value in _rated(user_ratings):
        if value >= threshold:
            profile.add_vector(model.get_item_vector(item))
    return profile.freeze()


def make_profile(user_ratings, model, profile=PROFILE_MODE):
    if profile == "weighted":
        return make_weighted_user_vector(user_ratings, model)
    if profile == "threshold":
        return make_user_vector(user_ratings, model)
    raise ValueError(f"Unknown profile kind {profile!r}, expected one of {PROFILES}")


def score_profile(user_vector, candidate_items, model):
    scores = {}
    for item in candidate_items:
        if item not in model:
            log(f"Item {item!r} is not in the model, scored 0.", logging.DEBUG)
            scores[item] = 0.0
            continue
        scores[item] = cosine(user_vector, model.get_item_vector(item))
    return scores


def score(user_ratings, candidate_items, model, profile=PROFILE_MODE):
    """
    Score candidate items for a user by cosine similarity with the user's profile.

    Args:
        user_ratings: iterable of ratings, ``(item_id, value)`` pairs or objects
            with ``item_id`` and ``value`` attributes
        candidate_items: item IDs to score; every one of them gets a score
        model: a built ``TFIDFModel``
        profile: "weighted" (mean-centered) or "threshold"

    Returns:
        dict mapping each candidate item ID to a score in [-1, 1]; items
        unknown to the model score 0.0
    """
    if candidate_items is None:
        raise ValueError("candidate_items must not be None")
    user_vector = make_profile(user_ratings, model, profile)
    return score_profile(user_vector, candidate_items, model)


def score_user(user_id, candidate_items, model, rating_source, profile=PROFILE_MODE):
    ratings = rating_source.get_ratings(user_id)
    if not ratings:
        log(f"No ratings for user {user_id}, scores default to 0.", logging.DEBUG)
    return score(ratings or [], candidate_items, model, profile)
