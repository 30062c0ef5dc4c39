from pydantic import BaseModel, Field

class Location(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)

class ErrorResponse(BaseModel):
    success: bool = False
    message: str

class MessageResponse(BaseModel):
    success: bool = True
    message: str
