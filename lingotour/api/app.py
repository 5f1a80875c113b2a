"""
FastAPI application for the translation pipeline.

Admin endpoints for translating catalog entities, either in one shot or
as a live event stream.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, HTTPException, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel

from lingotour.config import get_settings, Settings
from lingotour.config_loader import load_config
from lingotour.core.registry import SchemaRegistry, get_registry
from lingotour.core.models import EntitySchema
from lingotour.i18n import (
    LocaleDispatcher,
    Translator,
    auto_translate_entity,
    describe_locales,
    encode_event,
    get_translator,
)
from lingotour.integrations.sentry import init_sentry, set_tag
from lingotour.storage import EntityNotFoundError, MetadataStorage, create_local_storage

logger = logging.getLogger(__name__)


# =============================================================================
# App State
# =============================================================================


class AppState:
    """Application state - initialized at startup."""

    storage: MetadataStorage
    translator: Translator


state = AppState()


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup app resources."""
    settings = get_settings()

    # Initialize error tracking (Sentry)
    if init_sentry():
        logger.info("Sentry error tracking enabled")

    # Entity schemas
    registry = get_registry()
    if not registry.list_entity_types():
        load_config(settings.schema_dir or None, registry)

    # Initialize storage
    state.storage = create_local_storage(settings.data_dir or None)

    # Initialize services
    state.translator = get_translator()

    logger.info(f"Lingotour API starting in {settings.environment} mode")

    yield

    logger.info("Lingotour API shutting down")


# =============================================================================
# App Setup
# =============================================================================


app = FastAPI(
    title="Lingotour API",
    description="Multi-locale translation of tour catalog content",
    version="0.1.0",
    lifespan=lifespan,
)


# CORS
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException):
    """Admin clients read ``error`` from every failed response."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
    )


# =============================================================================
# Dependencies
# =============================================================================


def get_storage() -> MetadataStorage:
    return state.storage


def get_entity_translator() -> Translator:
    return state.translator


def get_schema_registry() -> SchemaRegistry:
    return get_registry()


def get_app_settings() -> Settings:
    return get_settings()


# =============================================================================
# Request/Response Models
# =============================================================================


class TranslateEntityRequest(BaseModel):
    entity_type: str = ""
    id: str = ""


class TranslateEntityResponse(BaseModel):
    success: bool
    message: str
    translated_locales: list[str]


def _resolve_schema(request: TranslateEntityRequest, registry: SchemaRegistry) -> EntitySchema:
    if not request.entity_type or not registry.has(request.entity_type):
        raise HTTPException(
            status_code=400,
            detail=f"Invalid entity_type. Must be one of: {', '.join(registry.list_entity_types())}",
        )
    if not request.id:
        raise HTTPException(status_code=400, detail="Missing id")
    return registry.get(request.entity_type)


# =============================================================================
# Health Check
# =============================================================================


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "lingotour-api"}


@app.get("/locales")
async def list_locales():
    """List the target locales, in translation order."""
    return {"locales": describe_locales()}


# =============================================================================
# Translation
# =============================================================================


@app.post("/admin/translate", response_model=TranslateEntityResponse)
async def translate_entity(
    request: TranslateEntityRequest,
    storage: MetadataStorage = Depends(get_storage),
    translator: Translator = Depends(get_entity_translator),
    registry: SchemaRegistry = Depends(get_schema_registry),
):
    """
    Translate an entity into every locale with a single provider call.

    Translation failures degrade to an empty result rather than an error.
    """
    schema = _resolve_schema(request, registry)
    set_tag("entity_type", schema.entity_type)

    try:
        bundle = await auto_translate_entity(storage, schema, translator, request.id)
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail=f"{schema.entity_type} not found")

    translated = list(bundle)
    if translated:
        message = f"Translated into {len(translated)} locale(s)"
    else:
        message = "No translations produced"

    return TranslateEntityResponse(
        success=True,
        message=message,
        translated_locales=translated,
    )


@app.post("/admin/translate/stream")
async def translate_entity_stream(
    request: TranslateEntityRequest,
    http_request: Request,
    storage: MetadataStorage = Depends(get_storage),
    translator: Translator = Depends(get_entity_translator),
    registry: SchemaRegistry = Depends(get_schema_registry),
    settings: Settings = Depends(get_app_settings),
):
    """
    Translate an entity locale by locale, streaming each result.

    Response is text/event-stream; see lingotour.i18n.framing for the
    record format.
    """
    schema = _resolve_schema(request, registry)
    set_tag("entity_type", schema.entity_type)

    dispatcher = LocaleDispatcher(
        storage,
        translator,
        registry=registry,
        persist=settings.persist_stream_results,
    )

    async def body() -> AsyncIterator[bytes]:
        events = dispatcher.dispatch(
            schema.entity_type,
            request.id,
            should_stop=http_request.is_disconnected,
        )
        async for event in events:
            yield encode_event(event)

    return StreamingResponse(
        body(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
        },
    )
