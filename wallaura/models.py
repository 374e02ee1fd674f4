"""
Client-facing response models.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

UNTITLED = "Untitled"


class NormalizedPhoto(BaseModel):
    """Photo in the stable shape the gallery UI renders."""
    id: Optional[str] = None
    title: str = UNTITLED
    src: Optional[str] = None
    author: Optional[str] = None
    download: Optional[str] = None


class PhotoResults(BaseModel):
    """Envelope for search and list responses."""
    results: List[NormalizedPhoto] = Field(default_factory=list)


class ErrorBody(BaseModel):
    """Error response body."""
    error: str
    detail: Optional[str] = None
