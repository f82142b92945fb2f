# main.py
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi_limiter import FastAPILimiter
from starlette.middleware.cors import CORSMiddleware
import routes
from config.cache import close_redis, get_redis, ping_redis
from config.settings import settings
from util.enums import Color, Environment
from util.functions import client_ip
from util.logger import init_logger

logger = logging.getLogger(__name__)


async def _limiter_identity(request: Request) -> str:
    # Rate-limit bucket per visitor, honouring X-Forwarded-For only behind a proxy.
    return client_ip(request, settings.TRUST_PROXY)


@asynccontextmanager
async def lifespan(fastApi: FastAPI):
    init_logger()
    print(f"{Color.GREEN}Initializing...{Color.RESET}")
    try:
        redis = await get_redis()
        await FastAPILimiter.init(redis, identifier=_limiter_identity)
    except Exception as e:
        logger.critical("app.start.failed err=%s", e)
        raise
    logger.info("app.start env=%s origin=%s", settings.APP_ENV, settings.ALLOWED_ORIGIN)
    print(f"{Color.BLUE}Server Started{Color.RESET}")

    try:
        yield
    finally:
        await close_redis()
        print(f"{Color.RED}Server Shutdown{Color.RESET}")


app: FastAPI = FastAPI(title="Portfolio CMS", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.ALLOWED_ORIGIN],
    allow_credentials=True,
    # Admin panel edits with PUT/DELETE; the public site only reads and posts.
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Authorization", "Content-Type", "Accept"],
)


@app.get("/healthz")
async def healthz():
    redis_ok = await ping_redis()
    return JSONResponse(
        status_code=200 if redis_ok else 503,
        content={"ok": redis_ok, "redis": redis_ok},
    )


@app.exception_handler(429)
async def ratelimit_handler(request: Request, exc):
    retry = str(settings.RATE_LIMIT_SECONDS)
    logger.info("ratelimit.hit path=%s", request.url.path)
    return JSONResponse(
        status_code=429,
        content={
            "ok": False,
            "error": "rate_limited",
            "message": f"Too many requests. Try again in {retry}s.",
        },
        headers={"Retry-After": retry},
    )


routes.register_routes(app)

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=settings.APP_ENV == Environment.DEV,
    )
