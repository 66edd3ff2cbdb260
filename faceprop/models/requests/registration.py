"""
Registration request models.
"""

from pydantic import BaseModel, Field


class AddClassRequest(BaseModel):
    """Request to create a new registration class."""

    name: str = Field(..., description="Class name (trimmed, unique)")
