"""API routers."""

from arbiter.api.routes.adjudication import router as adjudication_router
from arbiter.api.routes.disputes import router as disputes_router
from arbiter.api.routes.health import router as health_router
from arbiter.api.routes.parties import router as parties_router
from arbiter.api.routes.transcription import router as transcription_router
from arbiter.api.routes.turns import router as turns_router

__all__: list[str] = [
    "adjudication_router",
    "disputes_router",
    "health_router",
    "parties_router",
    "transcription_router",
    "turns_router",
]
