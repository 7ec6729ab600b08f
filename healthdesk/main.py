import logging
from contextlib import asynccontextmanager

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    force=True
)
logging.getLogger("healthdesk.cache").setLevel(logging.INFO)

from fastapi import FastAPI, status
from starlette.middleware.base import BaseHTTPMiddleware
from healthdesk.config import get_data_mode
from healthdesk.routers.auth import auth_router
from healthdesk.routers.health import health_router
from healthdesk.routers.diet import diet_router
from healthdesk.routers.medications import medication_router
from healthdesk.routers.yoga import yoga_router
from healthdesk.routers.community import community_router, patient_router
from healthdesk.routers.profile import profile_router
from healthdesk.routers.admin import admin_router
from healthdesk.routers.tools import tools_router
from healthdesk.rate_limiter import rate_limit_middleware, load_rate_limit_script
from healthdesk.dependencies import auth_middleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load rate limit Lua script into Redis on startup."""
    logger.info(f"Starting HealthDesk API in {get_data_mode()} data mode")
    await load_rate_limit_script()
    yield


app = FastAPI(title="HealthDesk API", version="1.0.0", lifespan=lifespan)

# Last added runs first: auth must populate request.state before rate limiting.
app.add_middleware(BaseHTTPMiddleware, dispatch=rate_limit_middleware)
app.add_middleware(BaseHTTPMiddleware, dispatch=auth_middleware)

app.include_router(auth_router)
app.include_router(health_router)
app.include_router(diet_router)
app.include_router(medication_router)
app.include_router(yoga_router)
app.include_router(patient_router)
app.include_router(profile_router)
app.include_router(community_router)
app.include_router(admin_router)
app.include_router(tools_router)


@app.get("/", response_model=dict, status_code=status.HTTP_200_OK)
def root() -> dict:
    return {"message": "HealthDesk API is running", "docs": "/docs"}


@app.get("/health", response_model=dict, status_code=status.HTTP_200_OK)
def health_check() -> dict:
    return {"status": "healthy"}
