import argparse
import logging
from config.setting import DATA_SOURCE, PROFILE_MODE, TOP_N
from data.dao import load_sources
from models.cb_model import PROFILES, make_profile, score_user
from models.evaluation import evaluate_cb_model
from models.recommend import recommend
from models.tfidf_model import build_model
from utils.timer import Timer
from utils.logger import log


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Tag TF-IDF content-based recommender")
    ap.add_argument("--user", help="user to score or recommend for")
    ap.add_argument("--items", help="comma-separated item IDs to score; recommends from the catalog when omitted")
    ap.add_argument("--top-n", type=int, default=TOP_N)
    ap.add_argument("--profile", choices=PROFILES, default=PROFILE_MODE)
    ap.add_argument("--source", choices=["csv", "sql"], default=DATA_SOURCE)
    ap.add_argument("--explain", action="store_true", help="print the heaviest tags of the user profile")
    ap.add_argument("--evaluate", action="store_true", help="run the hold-out evaluation")
    return ap.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    with Timer("Load data"):
        tags, events = load_sources(args.source)

    with Timer("Build TF-IDF model"):
        model = build_model(tags)

    if args.evaluate:
        with Timer("Evaluation"):
            evaluate_cb_model(model, events.to_frame(), profile=args.profile)

    if not args.user:
        return

    if args.explain:
        profile = make_profile(events.get_ratings(args.user), model, args.profile)
        for tag, weight in model.describe(profile, top=args.top_n):
            print(f"{weight:+.4f}  {tag}")

    if args.items:
        items = [i.strip() for i in args.items.split(",") if i.strip()]
        scores = score_user(args.user, items, model, events, args.profile)
        for item in items:
            print(f"{item}: {scores[item]:.4f}")
    else:
        with Timer("Recommend"):
            rec = recommend(args.user, model, events, top_n=args.top_n, titles=tags.titles, profile=args.profile)
        print(rec.to_string(index=False))


if __name__ == "__main__":
    try:
        main()
    except Exception as e:
        log(f"Error in main.py: {e}", logging.ERROR)
        raise
