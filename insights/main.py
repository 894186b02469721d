# fastapi application - rest api for record level model insights
# provides /insights endpoint returning loco insights for a feature vector

import logging
from contextlib import asynccontextmanager
from typing import Dict, List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from insights.config import settings
from insights.errors import MetadataError
from insights.explainer import LOCOExplainer, describe_insights, generate_reason
from insights.ranking import TopKStrategy
from insights.predictor import get_explainer, get_model_info

logger = logging.getLogger(__name__)

# pydantic models for request/response validation
class SparseVector(BaseModel):
    """sparse feature vector, positions not listed are zero"""
    size: int = Field(..., gt=0, description="vector length")
    indices: List[int] = Field(default_factory=list)
    values: List[float] = Field(default_factory=list)

class InsightsRequest(BaseModel):
    """request body for /insights endpoint"""
    vector: Optional[List[float]] = Field(None, description="dense feature vector")
    sparse: Optional[SparseVector] = Field(None, description="sparse feature vector")
    top_k: Optional[int] = Field(None, gt=0, description="override configured top k")
    strategy: Optional[str] = Field(None, description="'abs' or 'positive and negative'")

    class Config:
        json_schema_extra = {
            "example": {
                "vector": [0.0, 1.5, 0.0, 3.2],
                "top_k": 5,
                "strategy": "abs"
            }
        }

class InsightsResponse(BaseModel):
    """response from /insights endpoint"""
    insights: Dict[str, str] = Field(..., description="raw feature name -> score diffs")
    prediction: int = Field(..., description="predicted class index")
    scores: List[float] = Field(..., description="scores of the unmodified vector")
    reason: str = Field(..., description="human-readable summary")
    top_k: int
    strategy: str

class BatchRequest(BaseModel):
    """request body for /insights/batch endpoint"""
    vectors: List[List[float]] = Field(..., min_length=1)

class BatchResponse(BaseModel):
    insights: List[Dict[str, str]]

class HealthResponse(BaseModel):
    """response from /health endpoint"""
    status: str
    model_loaded: bool
    info: Dict

@asynccontextmanager
async def lifespan(app: FastAPI):
    """configure logging and load the model once at startup"""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    logger.info("🚀 starting record insights api...")
    try:
        info = get_model_info(get_explainer())
        logger.info("✅ explainer ready: %s", info)
    except FileNotFoundError as e:
        logger.warning("⚠️  model artifacts missing, /insights will fail: %s", e)
    yield
    logger.info("👋 shutting down...")

# create fastapi app
app = FastAPI(
    title="Record Insights API",
    description="Per-record LOCO feature attributions for model predictions",
    version="1.0.0",
    lifespan=lifespan
)

def _with_overrides(explainer: LOCOExplainer, top_k, strategy) -> LOCOExplainer:
    if top_k is None and strategy is None:
        return explainer
    return LOCOExplainer(
        explainer.scorer,
        explainer.metadata,
        top_k=explainer.top_k if top_k is None else top_k,
        strategy=explainer.strategy if strategy is None else strategy,
        formatter=explainer.formatter
    )

def _load_explainer() -> LOCOExplainer:
    # missing or broken artifacts are server errors
    try:
        return get_explainer()
    except Exception as e:
        logger.exception("explainer could not be loaded")
        raise HTTPException(status_code=500, detail=f"insights failed: {str(e)}")

@app.get("/", tags=["root"])
async def root():
    """api root - basic info"""
    return {
        "service": "Record Insights",
        "version": "1.0.0",
        "endpoints": {
            "insights": "/insights - explain one feature vector",
            "batch": "/insights/batch - explain many feature vectors",
            "health": "/health - health check",
            "docs": "/docs - api documentation"
        }
    }

@app.get("/health", response_model=HealthResponse, tags=["monitoring"])
def health_check():
    """
    health check endpoint
    verifies model and vector metadata can be loaded
    """
    try:
        info = get_model_info(get_explainer())
    except Exception as e:
        logger.warning("⚠️  health check failed: %s", e)
        return HealthResponse(status="degraded", model_loaded=False, info={"error": str(e)})

    return HealthResponse(status="healthy", model_loaded=True, info=info)

@app.post("/insights", response_model=InsightsResponse, tags=["insights"])
def record_insights(request: InsightsRequest):
    """
    explain one prediction

    - scores the vector once
    - zeroes every non-zero / text derived position and rescores
    - returns the top k score changes per raw feature
    """
    if (request.vector is None) == (request.sparse is None):
        raise HTTPException(status_code=422, detail="send exactly one of 'vector' or 'sparse'")

    vector = request.vector if request.vector is not None else request.sparse.model_dump()

    try:
        strategy = None if request.strategy is None else TopKStrategy.parse(request.strategy)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    explainer = _with_overrides(_load_explainer(), request.top_k, strategy)

    try:
        explanation = explainer.explain(vector)
        insights = explainer.render(explanation.attributions)
    except MetadataError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.exception("insights failed")
        raise HTTPException(status_code=500, detail=f"insights failed: {str(e)}")

    return InsightsResponse(
        insights=insights,
        prediction=explanation.prediction,
        scores=explanation.scores.tolist(),
        reason=generate_reason(describe_insights(insights, slot=explanation.slot)),
        top_k=explainer.top_k,
        strategy=explainer.strategy.value
    )

@app.post("/insights/batch", response_model=BatchResponse, tags=["insights"])
def batch_insights(request: BatchRequest):
    """explain many dense vectors, results keep the request order"""
    explainer = _load_explainer()

    try:
        return BatchResponse(insights=explainer.transform_batch(request.vectors))
    except MetadataError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.exception("batch insights failed")
        raise HTTPException(status_code=500, detail=f"insights failed: {str(e)}")

if __name__ == "__main__":
    # run with: python -m insights.main
    uvicorn.run(
        "insights.main:app",
        host=settings.api_host,
        port=settings.api_port
    )
