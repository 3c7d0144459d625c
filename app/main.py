# app/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import exc as sa_exc

from app.config import settings
from app.core.errors import register_exception_handlers
from app.database import Base, engine
from app.routers import auth, task, goal, time_block, daily_plan, weekly_plan, integration, dashboard

# Import models so create_all sees every table
from app.models import user, goal as goal_model, task as task_model, time_block as time_block_model  # noqa: F401
from app.models import plan, integration as integration_model  # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include Routers
for router in (
    auth.router,
    task.router,
    goal.router,
    time_block.router,
    daily_plan.router,
    weekly_plan.router,
    integration.router,
    dashboard.router,
):
    app.include_router(router, prefix="/api")

# Create DB Tables (for development — use Alembic in prod)
@app.on_event("startup")
async def startup_event():
    # ignore duplicate-object errors from previous partial runs
    async with engine.begin() as conn:
        try:
            await conn.run_sync(Base.metadata.create_all)
        except sa_exc.IntegrityError as e:
            msg = str(getattr(e, "orig", e))
            if "duplicate key value violates unique constraint" in msg or "already exists" in msg:
                logger.warning("Ignored duplicate DDL error during create_all: %s", msg)
            else:
                raise
    logger.info("%s %s started", settings.APP_NAME, settings.APP_VERSION)

@app.get("/")
def read_root():
    return {"name": settings.APP_NAME, "version": settings.APP_VERSION}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
