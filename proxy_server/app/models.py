"""
Data Models Module

Pydantic models for the JSON bodies the proxy produces itself. Bodies
relayed from Flutterwave are never parsed and have no model here.
"""

from typing import Optional

from pydantic import BaseModel, Field


# ============================================================================
# Health Check Models
# ============================================================================

class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(default="ok", description="Service health status")


# ============================================================================
# Error Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Error body returned for every failure the proxy generates itself."""
    error: str = Field(..., description="Human-readable error summary")
    message: Optional[str] = Field(None, description="Underlying error detail, if any")

    def to_content(self) -> dict:
        return self.model_dump(exclude_none=True)
