from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv
from pydantic import BaseModel, Field
import time
import uuid
from typing import Optional, Dict, List, Any
import os
from logging_config import get_logger, setup_logging, log_error, log_performance

# Load environment variables
load_dotenv()

setup_logging(
    level=os.getenv("LOG_LEVEL", "INFO"),
    json_format=os.getenv("LOG_JSON", "true").lower() == "true",
)

logger = get_logger(__name__)

from data_sources.error_handling import IndexImportError
from data_sources.external_index import ImportConfig, import_index_from_text
from data_sources.metric_definitions import DERIVED_METRIC_DEFINITIONS
from data_sources.models import AreaContext, ExternalIndex
from pillars.area_scoring import score_areas

##########################
# CONFIGURATION FLAGS
##########################
SCORING_MAX_WORKERS = int(os.getenv("SCORING_MAX_WORKERS", "4"))
MAX_IMPORT_BYTES = int(os.getenv("MAX_IMPORT_BYTES", str(5 * 1024 * 1024)))
CORS_ALLOW_ORIGINS = [
    origin.strip() for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if origin.strip()
]

VERSION = "1.0.0"

# Caller-side storage for imported indices; lives as long as the process
EXTERNAL_INDICES: Dict[str, ExternalIndex] = {}


class AreaRequest(BaseModel):
    area_id: Optional[str] = None
    name: Optional[str] = None
    area_km2: float = 0.0
    polygon: Optional[Dict[str, Any]] = None
    layers: Dict[str, Dict[str, float]] = Field(default_factory=dict)


class ScoreRequest(BaseModel):
    areas: List[AreaRequest]


class ImportRequest(BaseModel):
    text: str
    filename: str = "upload.csv"
    name: str
    value_column: str
    area_column: Optional[str] = None
    lat_column: Optional[str] = None
    lon_column: Optional[str] = None
    unit: str = ""
    description: Optional[str] = None
    detect_coordinates: bool = True


app = FastAPI(
    title="Urban Metrics API",
    description="Normalized, confidence-rated urban indices for drawn areas",
    version=VERSION
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
def root():
    """Service info."""
    return {
        "service": "Urban Metrics API",
        "status": "running",
        "version": VERSION,
        "metrics": [definition.id for definition in DERIVED_METRIC_DEFINITIONS],
        "endpoints": {
            "score": "POST /areas/score",
            "definitions": "/definitions",
            "import": "POST /indices/import",
            "indices": "/indices",
            "docs": "/docs"
        }
    }


@app.get("/health")
def health_check():
    return {
        "status": "healthy",
        "version": VERSION,
        "imported_indices": len(EXTERNAL_INDICES),
        "max_workers": SCORING_MAX_WORKERS,
    }


@app.get("/definitions")
def get_definitions():
    """Derived metric definitions: names, formulas, units and thresholds."""
    return {"definitions": [definition.to_dict() for definition in DERIVED_METRIC_DEFINITIONS]}


@app.post("/areas/score")
def score_areas_endpoint(request: ScoreRequest):
    """
    Score one or more areas.

    With exactly two areas the response also carries comparisons; insights
    are returned for one or two areas.
    """
    if not request.areas:
        raise HTTPException(status_code=400, detail="At least one area is required")

    request_id = uuid.uuid4().hex[:8]
    logger.info(f"🏙️  Scoring {len(request.areas)} area(s)", extra={"request_id": request_id})

    contexts = [AreaContext.from_dict(area.model_dump()) for area in request.areas]
    response = score_areas(contexts, max_workers=SCORING_MAX_WORKERS)
    response["request_id"] = request_id
    return response


@app.post("/indices/import")
def import_index_endpoint(request: ImportRequest):
    """Import a delimited text file as an external index."""
    request_id = uuid.uuid4().hex[:8]
    start_time = time.time()

    if len(request.text.encode("utf-8")) > MAX_IMPORT_BYTES:
        log_error(logger, "file_too_large", f"Upload {request.filename} exceeds {MAX_IMPORT_BYTES} bytes",
                  request_id=request_id)
        raise HTTPException(status_code=413, detail=f"File exceeds {MAX_IMPORT_BYTES} bytes")

    config = ImportConfig(
        name=request.name,
        value_column=request.value_column,
        area_column=request.area_column,
        lat_column=request.lat_column,
        lon_column=request.lon_column,
        unit=request.unit,
        description=request.description,
        detect_coordinates=request.detect_coordinates,
    )

    try:
        index = import_index_from_text(request.text, config, filename=request.filename)
    except IndexImportError as e:
        raise HTTPException(status_code=400, detail=e.to_dict())

    EXTERNAL_INDICES[index.id] = index
    log_performance(logger, "import_index", time.time() - start_time, request_id=request_id,
                    index_name=index.name)
    return index.to_dict()


@app.get("/indices")
def list_indices():
    return {"indices": [index.to_dict() for index in EXTERNAL_INDICES.values()]}


@app.delete("/indices/{index_id}")
def delete_index(index_id: str):
    index = EXTERNAL_INDICES.pop(index_id, None)
    if index is None:
        raise HTTPException(status_code=404, detail=f"Index {index_id} not found")
    logger.info(f"🗑️  Removed index {index.name!r}", extra={"index_name": index.name})
    return {"deleted": index_id}
