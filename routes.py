"""FastAPI routes for providers and community workflows."""

import asyncio
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from community.cancellation import CancellationToken
from context import AppContext, get_context
from providers.base import GenerationInput, GenerationProvider
from providers.factory import check_all_providers

logger = logging.getLogger(__name__)
router = APIRouter()

DISCONNECT_POLL_INTERVAL = 0.5  # seconds


# ── Pydantic models ─────────────────────────────────────

class GenerateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    model: str
    prompt: str
    images: Optional[list[str]] = None
    parameters: Optional[dict[str, Any]] = None
    dynamic_inputs: Optional[dict[str, Any]] = Field(default=None, alias="dynamicInputs")


async def _cancel_on_disconnect(request: Request, token: CancellationToken) -> None:
    while not token.cancelled:
        if await request.is_disconnected():
            token.cancel("client disconnected")
            return
        await asyncio.sleep(DISCONNECT_POLL_INTERVAL)


def _provider_or_404(ctx: AppContext, provider_id: str) -> GenerationProvider:
    provider = ctx.registry.get(provider_id)
    if provider is None:
        raise HTTPException(404, f"Provider '{provider_id}' not found")
    return provider


# ── Health ──────────────────────────────────────────────

@router.get("/health")
async def health(ctx: AppContext = Depends(get_context)):
    return {"status": "ok", "providers": check_all_providers(ctx.registry)}


# ── Providers ───────────────────────────────────────────

@router.get("/providers")
async def list_providers(ctx: AppContext = Depends(get_context)):
    return [
        {"id": p.id, "name": p.name, "configured": p.is_configured()}
        for p in ctx.registry
    ]


@router.get("/providers/{provider_id}/models")
async def list_models(
    provider_id: str,
    search: Optional[str] = None,
    ctx: AppContext = Depends(get_context),
):
    provider = _provider_or_404(ctx, provider_id)
    if search:
        models = await provider.search_models(search)
    else:
        models = await provider.list_models()
    return [m.to_dict() for m in models]


@router.get("/providers/{provider_id}/models/{model_id:path}")
async def get_model(provider_id: str, model_id: str, ctx: AppContext = Depends(get_context)):
    provider = _provider_or_404(ctx, provider_id)
    model = await provider.get_model(model_id)
    if model is None:
        raise HTTPException(404, f"Model '{model_id}' not found")
    return model.to_dict()


@router.post("/providers/{provider_id}/generate")
async def generate(
    provider_id: str,
    body: GenerateRequest,
    ctx: AppContext = Depends(get_context),
):
    provider = _provider_or_404(ctx, provider_id)
    output = await provider.generate(
        GenerationInput(
            model=body.model,
            prompt=body.prompt,
            images=body.images,
            parameters=body.parameters,
            dynamic_inputs=body.dynamic_inputs,
        )
    )
    if not output.success:
        logger.warning("Generation via %s failed: %s", provider_id, output.error)
    return JSONResponse(output.to_dict(), status_code=200 if output.success else 400)


# ── Community workflows ─────────────────────────────────

@router.get("/community-workflows/{workflow_id}")
async def get_community_workflow(
    workflow_id: str,
    request: Request,
    ctx: AppContext = Depends(get_context),
):
    """Load a community workflow from the hosted service.

    The service stores workflows in object storage and hands out a presigned
    URL, which is then used to download the workflow itself.

    The fetch is abandoned as soon as the client disconnects.
    """
    token = CancellationToken()
    watcher = asyncio.create_task(_cancel_on_disconnect(request, token))
    try:
        result = await ctx.workflows.fetch(workflow_id, cancel_token=token)
    finally:
        watcher.cancel()
        await asyncio.gather(watcher, return_exceptions=True)
    return JSONResponse(result.to_dict(), status_code=result.http_status)
