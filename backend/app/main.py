import logging
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings

# ─── Logging setup (file + console) ───
_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
_LOG_DIR.mkdir(exist_ok=True)

_log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

logging.basicConfig(
    level=_log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[
        logging.StreamHandler(),
        RotatingFileHandler(
            _LOG_DIR / "pitlane.log",
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        ),
    ],
)

# Quiet noisy libraries
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

from app import models  # noqa: F401  (registers tables on Base.metadata)
from app.database import Base, engine
from app.routers import bookings, flight_prices, itineraries, races
from app.services.itinerary_cache import ItineraryResultCache

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except Exception as e:
        logger.warning(f"Schema check skipped, database unavailable: {e}")

    app.state.itinerary_cache = ItineraryResultCache(
        ttl_seconds=settings.itinerary_cache_ttl, redis_url=settings.redis_url
    )
    if not (settings.amadeus_client_id and settings.amadeus_client_secret):
        logger.info("Amadeus credentials not set; flight prices will use placeholders")

    yield

    # Shutdown
    await app.state.itinerary_cache.close()
    await engine.dispose()


app = FastAPI(
    title="Pitlane",
    description="F1 race-weekend trip planner",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(races.router, prefix="/api/races", tags=["races"])
app.include_router(itineraries.router, prefix="/api/itineraries", tags=["itineraries"])
app.include_router(bookings.router, prefix="/api/bookings", tags=["bookings"])
app.include_router(flight_prices.router, prefix="/api/flight-prices", tags=["flight-prices"])


@app.get("/api/health")
async def health_check():
    return {"status": "ok", "service": "pitlane"}
