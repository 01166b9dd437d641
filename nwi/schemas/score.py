# nwi/schemas/score.py
from pydantic import BaseModel
from typing import Optional

class AddressScore(BaseModel):
    """Score of the tract a searched address falls in."""
    geoid: int
    nwi: Optional[float] = None
    searched_address: str

    # Regional (CBSA) context
    regional_transit_usage_percentage: Optional[float] = None
    regional_transit_usage: Optional[float] = None
    regional_bike_ridership: Optional[int] = None

    format: str

class ScoreListing(BaseModel):
    """One entry of a paginated listing. `id` is the absolute position (index + offset)."""
    id: int
    geoid: int
    csa_name: str = ""
    cbsa_name: str = ""
    nwi: Optional[float] = None

    regional_transit_usage_percentage: Optional[float] = None
    regional_transit_usage: Optional[float] = None
    regional_bike_ridership: Optional[int] = None

    format: str
