"""
Model Catalog Endpoint
"""

from fastapi import APIRouter

from cloudcode_proxy.api.deps import MessagesServiceDep
from cloudcode_proxy.domain.model import ModelListResponse

router = APIRouter(tags=["Models"])


@router.get("/v1/models", response_model=ModelListResponse)
async def list_models(messages_service: MessagesServiceDep) -> dict:
    """List the models served through Cloud Code (OpenAI-compatible format)"""
    return messages_service.list_models()
