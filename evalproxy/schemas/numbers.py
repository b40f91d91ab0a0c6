from typing import List, Union
from pydantic import BaseModel, Field


Number = Union[int, float]


class NumbersResponse(BaseModel):
    """Response model for the sliding-window numbers endpoint."""
    windowPrevState: List[Number] = Field(..., description="Window before this request")
    windowCurrState: List[Number] = Field(..., description="Window after merging the fetched numbers")
    numbers: List[Number] = Field(..., description="Numbers fetched upstream in this request")
    avg: float = Field(..., description="Mean of the current window, 2 decimals")


class ErrorResponse(BaseModel):
    error: str
