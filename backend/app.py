"""
Ingredient Safety Scanner FastAPI application.

Endpoints:
    GET  /                      Health check
    POST /analyze-ingredients   Free-text ingredient list -> per-ingredient safety + overall verdict
    GET  /ingredients/classify  Keyword function/use classification for one name (no lookup)
"""
from collections import OrderedDict
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import List, Optional
import logging
import uuid
from dotenv import load_dotenv
from pathlib import Path

# Load env vars
load_dotenv(Path(__file__).parent / ".env")

# Initialize App
app = FastAPI(title="Ingredient Safety Scanner API")

# Logger
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

from safety_core.config import log_config
from safety_core.classification.classifier import classify_function, classify_use
from safety_core.pipeline import AnalysisSuperseded, IngredientAnalyzer, InvalidIngredientInput

log_config()

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# One analyzer per session: a new submission supersedes that session's run in flight
_MAX_SESSIONS = 1000
_analyzers: "OrderedDict[str, IngredientAnalyzer]" = OrderedDict()


def get_analyzer(session_id: str) -> IngredientAnalyzer:
    analyzer = _analyzers.get(session_id)
    if analyzer is None:
        analyzer = IngredientAnalyzer()
        _analyzers[session_id] = analyzer
        while len(_analyzers) > _MAX_SESSIONS:
            _, evicted = _analyzers.popitem(last=False)
            evicted.cancel()
    else:
        _analyzers.move_to_end(session_id)
    return analyzer


# --- Request/Response Models ---
class AnalyzeRequest(BaseModel):
    ingredients: str
    session_id: Optional[str] = None


class IngredientOut(BaseModel):
    name: str
    function: str
    common_use: str
    ewg_score: int
    safety_level: str
    reason_for_concern: str


class AnalyzeResponse(BaseModel):
    session_id: str
    ingredients: List[IngredientOut]
    total: int
    high_concern_count: int
    moderate_concern_count: int
    low_concern_count: int
    average_score: float
    verdict: str


class ClassifyResponse(BaseModel):
    name: str
    function: str
    common_use: str


# --- Endpoints ---

@app.get("/")
def health_check():
    return {"status": "ok", "service": "Ingredient Safety Scanner"}


@app.post("/analyze-ingredients", response_model=AnalyzeResponse)
async def analyze_ingredients(request: AnalyzeRequest):
    """Analyze a pasted ingredient list. Lookup failures degrade to default scores, never errors."""
    session_id = request.session_id or str(uuid.uuid4())
    logger.info("Analyze request session_id=%s chars=%d", session_id, len(request.ingredients or ""))
    try:
        result = await get_analyzer(session_id).analyze(request.ingredients)
    except InvalidIngredientInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AnalysisSuperseded as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.error("Analysis failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
    return {"session_id": session_id, **result.to_dict()}


@app.get("/ingredients/classify", response_model=ClassifyResponse)
def classify_ingredient(name: str = Query(..., min_length=1)):
    return {
        "name": name,
        "function": classify_function(name).value,
        "common_use": classify_use(name).value,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app:app", host="0.0.0.0", port=8000, reload=True)
