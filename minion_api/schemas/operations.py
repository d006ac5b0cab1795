from typing import Any

from pydantic import BaseModel


class ApiResponse(BaseModel):
    success: bool
    message: str
    data: Any = None
    error: str | None = None


class RestaurantResultOut(BaseModel):
    name: str
    success: bool
    updated: int
    message: str | None = None
    error: str | None = None


class OperationResultOut(BaseModel):
    operation: str
    processed_restaurants: int
    successful: int
    failed: int
    total_updated: int
    duration: str
    details: list[RestaurantResultOut]


class OperationResponse(ApiResponse):
    data: OperationResultOut | None = None
