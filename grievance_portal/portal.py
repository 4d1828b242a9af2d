# Community Grievance Portal
# FastAPI + MongoDB intake form and reviewer dashboard

import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Optional
from contextlib import asynccontextmanager
from concurrent.futures import ThreadPoolExecutor
from urllib.parse import urlencode

import uvicorn
from fastapi import FastAPI, HTTPException, Depends, Query
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from fastapi.responses import HTMLResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from pymongo import MongoClient
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from grievance_portal.config import (
    BASE_DIR, GRIEVANCE_TABLE, MONGODB_DB, MONGODB_URL, SUBMIT_RATE_LIMIT,
)
from grievance_portal.dashboard import (
    DashboardState, FilterError, FilterState, display_location, display_name,
)
from grievance_portal.i18n import CATEGORY_TRANSLATIONS, TRANSLATIONS
from grievance_portal.models import (
    CATEGORY_LABELS, Category, DashboardResponse, GrievanceCreate, GrievanceRecord,
    Language, SubmissionResponse, SummaryResponse, Urgency,
)
from grievance_portal.seed.grievances import import_grievances
from grievance_portal.store import GrievanceStore, StoreWriteError
from grievance_portal.triage import ErrorKind, submit_grievance

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App & Globals
# ---------------------------------------------------------------------------
app = FastAPI(title="Community Grievance Portal")
limiter = Limiter(key_func=get_remote_address)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# ---------------------------------------------------------------------------
# Security Headers Middleware
# ---------------------------------------------------------------------------
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # The form page asks the browser for the device position
        response.headers["Permissions-Policy"] = "geolocation=(self), camera=(), microphone=()"
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "script-src 'self'; "
            "style-src 'self' 'unsafe-inline'; "
            "img-src 'self' data:; "
            "frame-ancestors 'none'"
        )
        return response

app.add_middleware(SecurityHeadersMiddleware)
store: Optional[GrievanceStore] = None
executor = ThreadPoolExecutor(max_workers=10)

templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))
app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")

# ---------------------------------------------------------------------------
# Startup / Shutdown
# ---------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup_db()
    yield
    if store:
        store.close()

app.router.lifespan_context = lifespan

async def startup_db():
    global store
    store = GrievanceStore(MongoClient(MONGODB_URL, tz_aware=True), MONGODB_DB)
    loop = asyncio.get_event_loop()
    await loop.run_in_executor(executor, store.create_indexes, GRIEVANCE_TABLE)
    logger.info("Database initialized: %s / %s", MONGODB_URL, MONGODB_DB)

# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------
async def get_store():
    return store

def get_filters(
    date_from: Optional[str] = None, date_to: Optional[str] = None,
    name: Optional[str] = Query(None, max_length=200),
    location: Optional[str] = Query(None, max_length=500),
    category: Optional[str] = None, urgency: Optional[str] = None,
    description: Optional[str] = Query(None, max_length=500),
) -> FilterState:
    try:
        return FilterState.from_params(date_from, date_to, name, location, category, urgency, description)
    except FilterError as e:
        raise HTTPException(status_code=400, detail=str(e))

async def load_dashboard(filters: FilterState, grievance_store) -> DashboardState:
    dashboard = DashboardState(filters=filters)
    await dashboard.refresh(grievance_store, GRIEVANCE_TABLE, executor)
    return dashboard

# ---------------------------------------------------------------------------
# GRIEVANCE ENDPOINTS
# ---------------------------------------------------------------------------
@app.post("/grievances", response_model=SubmissionResponse)
@limiter.limit(SUBMIT_RATE_LIMIT)
async def create_grievance(request: Request, data: GrievanceCreate,
                           grievance_store=Depends(get_store)):
    result = await submit_grievance(data, grievance_store, GRIEVANCE_TABLE, executor)
    if result.error == ErrorKind.VALIDATION:
        raise HTTPException(status_code=400, detail=result.message)
    if result.error == ErrorKind.STORE_WRITE:
        raise HTTPException(status_code=500, detail=result.message)
    if result.record is None:
        raise HTTPException(status_code=500, detail="Grievance stored without a record")
    return SubmissionResponse(id=result.grievance_id, message=result.message, grievance=result.record)

@app.get("/grievances", response_model=List[GrievanceRecord])
async def get_grievances(filters: FilterState = Depends(get_filters),
                         grievance_store=Depends(get_store)):
    dashboard = await load_dashboard(filters, grievance_store)
    if dashboard.load_error:
        raise HTTPException(status_code=500, detail="Error fetching grievances")
    return dashboard.filtered

@app.post("/grievances/samples")
async def load_sample_data(grievance_store=Depends(get_store)):
    loop = asyncio.get_event_loop()
    try:
        inserted = await loop.run_in_executor(executor, import_grievances, grievance_store, GRIEVANCE_TABLE)
    except StoreWriteError as e:
        logger.error("Error loading sample data: %s", e)
        raise HTTPException(status_code=500, detail="Error loading sample data")
    logger.info("Loaded %d sample grievances", len(inserted))
    return {"message": "Sample data loaded!", "inserted": len(inserted)}

# ---------------------------------------------------------------------------
# DASHBOARD ENDPOINTS
# ---------------------------------------------------------------------------
@app.get("/dashboard/summary", response_model=DashboardResponse)
async def get_dashboard_summary(filters: FilterState = Depends(get_filters),
                                grievance_store=Depends(get_store)):
    dashboard = await load_dashboard(filters, grievance_store)
    if dashboard.load_error:
        raise HTTPException(status_code=500, detail="Error fetching grievances")
    filtered = dashboard.filtered
    return DashboardResponse(
        filters=filters.to_params(),
        has_active_filters=dashboard.has_active_filters,
        summary=SummaryResponse(**dashboard.summary.as_dict()),
        grievances=filtered,
    )

# ---------------------------------------------------------------------------
# HEALTH
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return {"status": "healthy", "system": "Community Grievance Portal",
            "timestamp": datetime.now(timezone.utc)}

# ---------------------------------------------------------------------------
# PAGE ROUTES (serve Jinja2 templates)
# ---------------------------------------------------------------------------
def dashboard_url(filters: FilterState) -> str:
    params = filters.to_params()
    return "/dashboard?" + urlencode(params) if params else "/dashboard"

def format_date(value: datetime) -> str:
    return value.strftime("%b %d, %Y").replace(" 0", " ")

def truncate_text(text: str, max_length: int = 80) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."

templates.env.filters["format_date"] = format_date
templates.env.filters["truncate_text"] = truncate_text
templates.env.globals.update(display_location=display_location, display_name=display_name,
                             dashboard_url=dashboard_url, category_labels=CATEGORY_LABELS)

@app.get("/", response_class=HTMLResponse, include_in_schema=False)
async def form_page(request: Request, lang: Language = Language.ENGLISH):
    categories = [(c.value, f"{c.label} / {CATEGORY_TRANSLATIONS[c.value]}") for c in Category]
    return templates.TemplateResponse(request, "form.html", {
        "t": TRANSLATIONS[lang], "language": lang, "languages": list(Language),
        "categories": categories,
    })

@app.get("/dashboard", response_class=HTMLResponse, include_in_schema=False)
async def dashboard_page(request: Request, filters: FilterState = Depends(get_filters),
                         grievance_store=Depends(get_store)):
    dashboard = await load_dashboard(filters, grievance_store)
    return templates.TemplateResponse(request, "dashboard.html", {
        "dashboard": dashboard, "filters": filters, "summary": dashboard.summary,
        "grievances": dashboard.filtered, "urgencies": [Urgency.HIGH, Urgency.MEDIUM, Urgency.LOW],
        "categories": list(Category),
    })

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
