from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error_code: str
    message: str


class StatusResponse(BaseModel):
    url: str
    authenticated: bool
    token_age_seconds: float | None = None
