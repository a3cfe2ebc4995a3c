import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from visatrack import __version__
from visatrack.db import create_all
from visatrack.settings import API_DEBUG, API_HOST, API_PORT, settings

logging.basicConfig(
    level=logging.DEBUG if API_DEBUG else settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_all()
    logger.info("VisaTrack API ready")
    yield
    logger.info("VisaTrack API shutting down")


app = FastAPI(
    title="VisaTrack Malta API",
    version=__version__,
    description="Work-permit and visa compliance tracking for employers of third-country nationals.",
    lifespan=lifespan,
)

# --- CORS ----------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept", "X-User-Id"],
)

# --- Include Routers ----------------------------------------------------------
from .account import router as account_router  # noqa: E402
from .alerts import router as alerts_router  # noqa: E402
from .dashboard import router as dashboard_router  # noqa: E402
from .employees import router as employees_router  # noqa: E402
from .visas import router as visas_router  # noqa: E402

app.include_router(account_router)
app.include_router(employees_router)
app.include_router(visas_router)
app.include_router(alerts_router)
app.include_router(dashboard_router)


# ---------- health-check ----------
@app.get("/")
def root():
    return {"status": "ok", "msg": "VisaTrack API is alive"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host=API_HOST, port=API_PORT, reload=API_DEBUG)
