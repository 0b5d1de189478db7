# This project was developed with assistance from AI tools.
"""Error response envelope shared by every failure status."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Stable failure envelope: ``{"success": false, "error": "..."}``."""

    success: bool = False
    error: str = Field(description="Human-readable explanation of the failure.")
