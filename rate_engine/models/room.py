"""Pydantic model for room records."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Room(BaseModel):
    """Room as stored in the rooms collection.

    Only ``id``, ``price`` and ``category`` matter to pricing and
    availability; display fields (images, amenities, ...) pass through.
    """

    id: str
    name: str = ""
    price: float = Field(ge=0, description="Base nightly rate")
    category: str = ""
    description: Optional[str] = None
    rating: Optional[float] = None
    amenities: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow", populate_by_name=True)
