import asyncio
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lottery import config, db, worker
from lottery.errors import LotteryError
from lottery.routers import admin, health, player

app = FastAPI(title="Lucky Tile Draw API", version="0.1.0")
logger = logging.getLogger("lottery.api")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LotteryError)
async def _lottery_error_handler(request: Request, exc: LotteryError):
    logger.info("lottery_error path=%s code=%s extra=%s", request.url.path, exc.code, exc.extra)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.on_event("startup")
async def _startup():
    coordinator = db.init_state()
    # In tests the worker is driven directly.
    if config.APP_ENV != "test":
        app.state.worker_task = asyncio.create_task(worker.run_forever(coordinator))


@app.on_event("shutdown")
async def _shutdown():
    task = getattr(app.state, "worker_task", None)
    if task is not None:
        task.cancel()
        app.state.worker_task = None
    db.close_state()


app.include_router(health.router)
app.include_router(player.router)
app.include_router(admin.router)
