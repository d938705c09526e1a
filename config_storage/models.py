"""Pydantic models for API requests and responses."""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")


class ConfigStorageResponse(BaseModel):
    """Resolved configuration storage features."""
    db: Optional[str] = Field(default=None, description="Configuration storage database, if enabled")
    enabled: bool = Field(..., description="Whether configuration storage is configured and reachable")
    all_features: bool = Field(..., description="Whether every feature is available")
    features: Dict[str, bool] = Field(..., description="Map of feature name to availability")


class CreateTablesResponse(BaseModel):
    """Response model for creating missing configuration storage tables."""
    created: List[str] = Field(default_factory=list, description="Tables that were created")
    storage: ConfigStorageResponse = Field(..., description="Configuration storage after the change")


class DropResponse(BaseModel):
    """Response model for drop endpoints."""
    status: str = Field(default="dropped", description="Outcome of the drop")
    object_type: str = Field(..., description="database, table, column or user")
    name: str = Field(..., description="Qualified name of the dropped object")
