from pydantic import BaseModel
from typing import Optional

class GenerateRequest(BaseModel):
    id: Optional[str] = None
    time: Optional[str] = None
    url: Optional[str] = None

class ErrorResponse(BaseModel):
    error: str
