from fastapi import FastAPI
import logging

import uvicorn

from playdate.api.deps import init_arcade
from playdate.api.routes import router
from playdate.config import load_settings

settings = load_settings()

app = FastAPI(title="playdate", version="0.1.0")
app.include_router(router)
# Configure logging
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@app.on_event("startup")
async def _startup() -> None:
    arcade = init_arcade(settings=settings)
    logger.info("playdate: session loaded (total %d)", arcade.session.state.score.total)


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "playdate", "version": "0.1.0"}


def run() -> None:
    uvicorn.run("playdate.main:app", host="0.0.0.0", port=8000)
