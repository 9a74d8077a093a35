from pydantic import BaseModel


class FieldErrorDetail(BaseModel):
    field: str | None = None
    message: str


class ErrorResponse(BaseModel):
    code: str
    message: str
    details: list[FieldErrorDetail] | None = None
