import logging
from dataclasses import dataclass
from typing import List, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from fastapi import FastAPI, HTTPException, Query

from config.setting import MODEL_REFRESH_MINUTES, PROFILE_MODE, TOP_N
from data.dao import ItemTagDAO, UserEventDAO, load_sources
from models.cb_model import PROFILES, score_user
from models.recommend import recommend
from models.tfidf_model import TFIDFModel, build_model
from utils.logger import log
from utils.timer import Timer

app = FastAPI(title="Tag TF-IDF Recommendation API", version="1.0.0")
scheduler = BackgroundScheduler()


@dataclass(frozen=True)
class ServiceState:
    model: TFIDFModel
    tags: ItemTagDAO
    events: UserEventDAO


# Replaced as a whole once a rebuild has finished; requests keep the state they read
state: Optional[ServiceState] = None


def load_data(tags=None, events=None):
    """Load/reload sources and rebuild the TF-IDF model"""
    global state
    try:
        log("Loading data...")
        if tags is None or events is None:
            tags, events = load_sources()
        with Timer("Build TF-IDF model"):
            model = build_model(tags)
        state = ServiceState(model, tags, events)
        log("Data loaded successfully.")
    except Exception as e:
        log(f"Error loading data, keeping the previous model: {e}", logging.ERROR)
        raise


def current_state():
    current = state
    if current is None:
        raise HTTPException(status_code=503, detail="Model not loaded")
    return current


def check_profile(profile):
    if profile not in PROFILES:
        raise HTTPException(status_code=400, detail=f"profile must be one of {list(PROFILES)}")


@app.on_event("startup")
def startup_event():
    load_data()

    scheduler.add_job(load_data, 'interval', minutes=MODEL_REFRESH_MINUTES, id='model_refresh')
    scheduler.start()
    log(f"Scheduler started: model refresh every {MODEL_REFRESH_MINUTES} min")


@app.on_event("shutdown")
def shutdown_event():
    if scheduler.running:
        scheduler.shutdown()
        log("Scheduler stopped")


@app.get("/health")
def health_check():
    """Health check endpoint for monitoring"""
    current = state
    return {
        "status": "healthy",
        "service": "Tag TF-IDF Recommendation API",
        "model_loaded": current is not None,
        "items": len(current.model) if current else 0,
        "tags": current.model.n_tags if current else 0,
    }


@app.get("/score/{user_id}")
def get_scores(user_id: str, items: List[str] = Query(...), profile: str = PROFILE_MODE):
    current = current_state()
    check_profile(profile)

    try:
        scores = score_user(user_id, items, current.model, current.events, profile)
        return {"user_id": user_id, "scores": scores}
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        log(f"Error scoring items: {e}", logging.ERROR)
        raise HTTPException(status_code=500, detail="Internal server error")


@app.get("/recommend/{user_id}")
def get_recommendations(user_id: str, top_n: int = TOP_N, profile: str = PROFILE_MODE):
    current = current_state()
    check_profile(profile)
    if top_n < 1:
        raise HTTPException(status_code=400, detail="top_n must be positive")

    try:
        rec = recommend(
            user_id, current.model, current.events,
            top_n=top_n, titles=current.tags.titles, profile=profile,
        )
        return {"user_id": user_id, "recommendations": rec.to_dict(orient="records")}
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        log(f"Error generating recommendations: {e}", logging.ERROR)
        raise HTTPException(status_code=500, detail="Internal server error")


@app.get("/items/{item_id}/tags")
def get_item_tags(item_id: str, top: Optional[int] = None):
    current = current_state()
    if item_id not in current.model:
        raise HTTPException(status_code=404, detail="Item not found")

    vector = current.model.get_item_vector(item_id)
    return {
        "item_id": item_id,
        "title": current.tags.get_item_title(item_id),
        "tags": [{"tag": tag, "weight": weight} for tag, weight in current.model.describe(vector, top)],
    }


@app.post("/model/refresh")
def refresh_model():
    try:
        load_data()
    except Exception:
        raise HTTPException(status_code=500, detail="Model refresh failed")
    return health_check()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
