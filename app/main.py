# app/main.py
from contextlib import asynccontextmanager
import logging
import sys
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorClient
import uvicorn
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.database.mongo_assignment import MongoAssignmentRepository
from app.database.mongo_submission import MongoSubmissionRepository
from app.routers.v1 import health
from app.routers.v1 import assignment
from app.routers.v1 import student

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s :: %(message)s",
    stream=sys.stdout,
)

logger = logging.getLogger("assignment.api")


def _field_errors(exc: RequestValidationError) -> list[dict]:
    errors = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        msg = err.get("msg", "Invalid value")
        # pydantic antepone "Value error, " ai ValueError dei validator
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        errors.append({"field": ".".join(loc), "message": msg})
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": "Validation failed", "errors": _field_errors(exc)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unexpected_handler(request: Request, exc: Exception):
        logger.exception("Errore non gestito su %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"success": False, "message": "Server error"})


def create_app() -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = AsyncIOMotorClient(settings.mongo_uri, uuidRepresentation="standard", tz_aware=True)
        db = client[settings.mongo_db_name]

        assignment_repo = MongoAssignmentRepository(db)
        submission_repo = MongoSubmissionRepository(db)
        await assignment_repo.ensure_indexes()
        await submission_repo.ensure_indexes()
        app.state.assignment_repo = assignment_repo   # repo disponibili alle routes
        app.state.submission_repo = submission_repo

        try:
            yield
        finally:
            client.close()

    app = FastAPI(
        title="Classroom Assignment Service",
        description="Gestione di assignment e consegne tra teacher e studenti",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins, allow_credentials=True,
        allow_methods=["*"], allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health.router,     tags=["health"])
    app.include_router(assignment.router, tags=["assignments"])
    app.include_router(student.router,    tags=["student"])
    return app

app = create_app()


def run():
    uvicorn.run("app.main:app", host=settings.host, port=settings.port)
