"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from src.user_manager.api.http.app_data import ApplicationDependencies
from src.user_manager.api.http.errors import error_response, register_error_handlers
from src.user_manager.api.http.routers.health import router as health_router
from src.user_manager.api.http.routers.users import router as users_router
from src.user_manager.api.utils.app_startup import configure_logging
from src.user_manager.core.services import DbSessionService, UserValidator
from src.user_manager.runtime.context import get_config

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup()
    try:
        yield
    finally:
        await shutdown()


app = FastAPI(title="User Manager", lifespan=lifespan)

cors = get_config().app.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Tag every log line of a request with its id and time the request."""
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    start = time.perf_counter()

    def elapsed_ms() -> float:
        return round((time.perf_counter() - start) * 1000, 1)

    with logger.contextualize(
        request_id=request_id, method=request.method, path=request.url.path
    ):
        logger.info("request.start")
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.bind(
                status_code=500, duration_ms=elapsed_ms(), error_type=type(exc).__name__
            ).exception("request.error")
            response = error_response("Internal Server Error", 500)
        else:
            logger.bind(
                status_code=response.status_code, duration_ms=elapsed_ms()
            ).info("request.end")

    response.headers["X-Request-ID"] = request_id
    return response


register_error_handlers(app)

app.include_router(health_router)
app.include_router(users_router)


async def startup() -> None:
    config = get_config()
    logger.info("Starting up application in {} environment", config.app.environment)

    database_service = DbSessionService(config)
    if config.database.create_tables:
        database_service.create_all()

    # Read once; the validator keeps this value for the life of the process
    user_validator = UserValidator(minimum_age=config.validation.minimum_age)
    logger.info("Minimum user age set to {}", user_validator.minimum_age)

    app.state.app_dependencies = ApplicationDependencies(
        database_service=database_service,
        user_validator=user_validator,
    )


async def shutdown() -> None:
    logger.info("Shutting down application")
    app_dependencies: ApplicationDependencies = app.state.app_dependencies
    app_dependencies.database_service.dispose()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=get_config().app.host,
        port=get_config().app.port,
        access_log=False,  # request logging middleware covers access logs
    )
