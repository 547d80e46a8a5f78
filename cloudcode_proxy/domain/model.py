"""
Model Catalog Domain Model

Defines the entries returned by /v1/models.
"""

from typing import Literal

from pydantic import BaseModel, Field


class ModelInfo(BaseModel):
    """Model exposed by the proxy"""

    id: str = Field(..., min_length=1, description="Model ID")
    name: str = Field(..., description="Display Name")
    description: str = Field("", description="Model Description")
    # Context window (tokens)
    context: int = Field(..., ge=1)
    # Output limit (tokens)
    output: int = Field(..., ge=1)


class ModelListEntry(BaseModel):
    """OpenAI-style model list entry"""

    id: str
    object: Literal["model"] = "model"
    created: int
    owned_by: str = "anthropic"
    description: str = ""


class ModelListResponse(BaseModel):
    """OpenAI-style model list"""

    object: Literal["list"] = "list"
    data: list[ModelListEntry]
