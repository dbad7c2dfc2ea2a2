import time
from datetime import datetime

import numpy as np
from sklearn.model_selection import train_test_split

from config.setting import EVAL_K, EVAL_TEST_SIZE, LIKE_THRESHOLD, PROFILE_MODE
from data.dao import UserEventDAO
from models.recommend import recommend
from utils.logger import log

def evaluate_ranking(user_id, recommendations, test_interactions, k=10, like_threshold=LIKE_THRESHOLD):
    """
    Evaluate ranking quality using Precision@K and Recall@K

    Relevant items are the user's test items rated at or above ``like_threshold``.
    """
    user_test = test_interactions[test_interactions['userId'] == user_id]
    actual_items = set(user_test[user_test['rating'] >= like_threshold]['itemid'].values)

    if not actual_items:
        return None

    recommended_items = set(recommendations.head(k)['itemid'].values)

    hits = len(actual_items & recommended_items)
    precision = hits / k if k > 0 else 0
    recall = hits / len(actual_items)
    f1 = 2 * (precision * recall) / (precision + recall) if (precision + recall) > 0 else 0

    return {
        'precision@k': precision,
        'recall@k': recall,
        'f1@k': f1,
        'hits': hits,
        'total_relevant': len(actual_items)
    }

def evaluate_cb_model(
    model,
    ratings_df,
    test_size=EVAL_TEST_SIZE,
    k=EVAL_K,
    like_threshold=LIKE_THRESHOLD,
    profile=PROFILE_MODE,
    random_state=42,
    model_name="TF-IDF content-based",
):
    """
    Hold-out evaluation of the content-based recommender.

    Ratings are split at random; profiles are built from the training part and
    the top-k recommendations are checked against the liked test items.
    """
    start_time = time.time()

    rated = ratings_df.dropna(subset=['rating'])
    train_df, test_df = train_test_split(rated, test_size=test_size, random_state=random_state)

    log(f"\n{'='*60}")
    log(f"Evaluating {model_name}")
    log(f"{'='*60}")
    log(f"Dataset Split:")
    log(f"  Total ratings: {len(rated)}")
    log(f"  Training samples: {len(train_df)} ({(1-test_size)*100:.1f}%)")
    log(f"  Test samples: {len(test_df)} ({test_size*100:.1f}%)")

    train_source = UserEventDAO(train_df)
    results = []
    test_users = test_df['userId'].unique()
    for user_id in test_users:
        recs = recommend(user_id, model, train_source, top_n=k, profile=profile)
        metrics = evaluate_ranking(user_id, recs, test_df, k, like_threshold)
        if metrics is not None:
            results.append(metrics)

    def mean_of(key):
        return float(np.mean([r[key] for r in results])) if results else 0.0

    summary = {
        'model_name': model_name,
        'profile': profile,
        'k': k,
        'precision@k': mean_of('precision@k'),
        'recall@k': mean_of('recall@k'),
        'f1@k': mean_of('f1@k'),
        'users_evaluated': len(results),
        'test_users': len(test_users),
        'train_size': len(train_df),
        'test_size': len(test_df),
        'execution_time': time.time() - start_time,
        'timestamp': datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    }

    log(f"\nRanking Metrics (k={k}):")
    log(f"  Users evaluated: {summary['users_evaluated']} / {summary['test_users']}")
    log(f"  Precision@{k}: {summary['precision@k']:.4f}")
    log(f"  Recall@{k}: {summary['recall@k']:.4f}")
    log(f"  F1@{k}: {summary['f1@k']:.4f}")
    log(f"\nExecution Time: {summary['execution_time']:.2f} seconds")
    log(f"{'='*60}\n")

    return summary
