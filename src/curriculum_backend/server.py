import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi import status

from curriculum_backend.api.auth import auth_router
from curriculum_backend.api.curriculum import curriculum_router
from curriculum_backend.database import get_db, get_engine
from curriculum_backend.model.base import Base
from curriculum_backend.permissions.role_setup import initialize_system_roles
from curriculum_backend.settings import settings

logger = logging.getLogger(__name__)


def startup_logic():

    Base.metadata.create_all(bind=get_engine())

    db = next(get_db())
    try:
        initialize_system_roles(db)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):

    if settings.DEBUG_MODE == "production":
        startup_logic()

    yield

app = FastAPI(lifespan=lifespan)

origins = [
    "*"
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.debug(f"Rejected request body on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": {"code": "ValidationError", "message": jsonable_encoder(exc.errors())}},
    )


app.include_router(
    curriculum_router,
    prefix="/curriculum",
    tags=["curriculum"]
)

app.include_router(
    auth_router,
    prefix="/auth",
    tags=["auth", "me"]
)


@app.head("/", status_code=204)
def get_status_head():
    return
