# student_hub/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from student_hub.api.deps import get_ai_client, get_identity_provider
from student_hub.api.v1 import (
    achievements,
    analytics,
    approvals,
    auth,
    class_view,
    live,
    portfolio,
    profile,
    recommendations,
    reports,
    session,
    teammates,
)
from student_hub.config import settings
from student_hub.core.exceptions import register_exception_handlers
from student_hub.core.firebase import initialize_firebase

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle"""
    initialize_firebase()
    logger.info(f"{settings.APP_NAME} started ({settings.ENVIRONMENT})")
    yield
    # Only close clients that were actually created
    if get_ai_client.cache_info().currsize:
        await get_ai_client().aclose()
    if get_identity_provider.cache_info().currsize:
        await get_identity_provider().aclose()
    logger.info(f"{settings.APP_NAME} stopped")


app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    debug=settings.DEBUG,
    lifespan=lifespan
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include all routers
app.include_router(auth.router, prefix=settings.API_V1_PREFIX, tags=["Auth"])
app.include_router(session.router, prefix=settings.API_V1_PREFIX, tags=["Session"])
app.include_router(profile.router, prefix=settings.API_V1_PREFIX, tags=["Profile"])
app.include_router(achievements.router, prefix=settings.API_V1_PREFIX, tags=["Achievements"])
app.include_router(approvals.router, prefix=settings.API_V1_PREFIX, tags=["Approvals"])
app.include_router(class_view.router, prefix=settings.API_V1_PREFIX, tags=["Class View"])
app.include_router(reports.router, prefix=settings.API_V1_PREFIX, tags=["Reports"])
app.include_router(analytics.router, prefix=settings.API_V1_PREFIX, tags=["Analytics"])
app.include_router(recommendations.router, prefix=settings.API_V1_PREFIX, tags=["Recommendations"])
app.include_router(teammates.router, prefix=settings.API_V1_PREFIX, tags=["Teammates"])
app.include_router(portfolio.router, prefix=settings.API_V1_PREFIX, tags=["Portfolio"])
app.include_router(live.router, prefix=settings.API_V1_PREFIX, tags=["Live"])


@app.get("/health")
async def health_check():
    return {"status": "healthy", "app": settings.APP_NAME}
