from fastapi import FastAPI
from loguru import logger

from tiergoals.api.routes_dashboard import router as dashboard_router
from tiergoals.api.routes_goals import router as goals_router
from tiergoals.api.routes_health import router as health_router
from tiergoals.config import settings

app = FastAPI(title="tiergoals")

app.include_router(health_router)
app.include_router(goals_router)
app.include_router(dashboard_router)


@app.on_event("startup")
async def on_startup() -> None:
    if not settings.jwt_secret:
        logger.warning("JWT_SECRET is empty; authenticated routes will fail")
    logger.info("tiergoals api started")
