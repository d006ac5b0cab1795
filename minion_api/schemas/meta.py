from datetime import datetime

from pydantic import BaseModel

from minion_api.schemas.operations import ApiResponse


class HealthOut(BaseModel):
    status: str
    timestamp: datetime
    version: str


class HealthResponse(ApiResponse):
    data: HealthOut


class ConfigOut(BaseModel):
    restaurant_source: str
    aws_region: str
    aws_secret_name: str
    extension_years: int
    max_workers: int


class ConfigResponse(ApiResponse):
    data: ConfigOut
