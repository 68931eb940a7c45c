from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from huepalette import __version__
from huepalette.api.v1 import router as v1_router
from huepalette.schemas import HealthResponse
from huepalette.utils.logging import get_logger

logger = get_logger()

app = FastAPI(
    title="Hue Palette",
    description="Background, primary, secondary and detail colors from images",
    version=__version__
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(v1_router)


@app.get("/healthz", response_model=HealthResponse)
async def healthz():
    return HealthResponse(ok=True, version=__version__)


logger.info("Hue Palette service initialised", extra={"version": __version__})
