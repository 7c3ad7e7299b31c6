import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict

from moodscreen.api.routes_assessment import router as assessment_router
from moodscreen.api.routes_tools import router as tools_router
from moodscreen.core.config import settings
from moodscreen.db.store import SqlAssessmentStore, build_store
from moodscreen.services.scoring import DISCLAIMER_TEXT

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = app.state.store
    if isinstance(store, SqlAssessmentStore):
        await store.init()
    logger.info("%s started", settings.app_name)
    yield
    if isinstance(store, SqlAssessmentStore):
        await store.close()
    logger.info("%s stopped", settings.app_name)


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.state.store = build_store(settings.assessment_store, settings.database_url)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(assessment_router)
app.include_router(tools_router)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


class RootResponse(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    message: str
    disclaimer: str


@app.get("/", response_model=RootResponse)
async def root() -> RootResponse:
    # Request Example:
    # GET /
    #
    # Response Example:
    # 200
    # {"message":"MoodScreen API","disclaimer":"This result is for reference only and is not a medical diagnosis."}
    return RootResponse(message=settings.app_name, disclaimer=DISCLAIMER_TEXT)
