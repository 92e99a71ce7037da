from pydantic import BaseModel, StrictStr
from typing import Optional

class ShortenRequest(BaseModel):
    url: Optional[StrictStr] = None

class ShortenResponse(BaseModel):
    original_url: str
    short_url: int

class ErrorResponse(BaseModel):
    error: str
