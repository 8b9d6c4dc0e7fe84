from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from config.settings import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
# quiet PDF rendering libraries
logging.getLogger("weasyprint").setLevel(logging.WARNING)
logging.getLogger("fontTools").setLevel(logging.WARNING)

# ✅ database / models
from database.db import Base, engine
import models  # noqa: F401  (registers every table on Base.metadata)

# ✅ middlewares
from middlewares.timing import TimingMiddleware
from middlewares.error_handler import add_error_handlers

# ✅ routers
from routers import (
    auth, users, colleges, semesters, subjects,
    assessment_templates, assessment_scores,
    analytics, exports,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
)

# ✅ CORS (cookie sessions need allow_credentials)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ✅ request latency header (X-Latency-Ms)
app.add_middleware(TimingMiddleware)

# ✅ global error handlers (consistent JSON error envelope)
add_error_handlers(app)

# ✅ /v1 prefixed routers
app.include_router(auth.router,                 prefix="/v1")
app.include_router(users.router,                prefix="/v1")
app.include_router(colleges.router,             prefix="/v1")
app.include_router(semesters.router,            prefix="/v1")
app.include_router(subjects.router,             prefix="/v1")
app.include_router(assessment_templates.router, prefix="/v1")
app.include_router(assessment_scores.router,    prefix="/v1")
app.include_router(analytics.router,            prefix="/v1")
app.include_router(exports.router,              prefix="/v1")


# ✅ health check
@app.get("/health")
def health_check():
    return {"status": "ok", "message": "API is running"}


@app.on_event("startup")
def _create_tables():
    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
        logger.info("database tables ensured")


# ✅ root
@app.get("/")
def root():
    return {"message": f"{settings.APP_TITLE} v{settings.APP_VERSION}"}
