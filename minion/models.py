from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class Operation(str, Enum):
    EXTEND_KEYS = "extend-keys"
    REFRESH_MENUS = "refresh-menus"

    @property
    def item_label(self) -> str:
        return "API keys" if self is Operation.EXTEND_KEYS else "menus"


@dataclass(frozen=True)
class RestaurantConfig:
    name: str
    base_url: str
    login: str
    password: str = field(repr=False)
    enabled: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))


@dataclass(frozen=True)
class Session:
    base_url: str
    token: str = field(repr=False)

    def __post_init__(self) -> None:
        if not self.token:
            raise ValueError("Session token must not be empty")


@dataclass(frozen=True)
class ApiKeyRecord:
    id: str
    name: str
    is_active: bool
    expiration_date: str

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> ApiKeyRecord:
        return cls(
            id=str(payload["id"]),
            name=str(payload.get("name") or ""),
            is_active=bool(payload.get("isActive", False)),
            expiration_date=str(payload.get("expirationDate") or ""),
        )


@dataclass(frozen=True)
class ApiKeyDetail:
    """Full ``apiLoginInfo`` record as returned by the console.

    The remote save endpoint overwrites the whole record, so the decoded
    payload is kept as-is and only ``expirationDate`` is ever replaced.
    """

    payload: dict[str, Any]

    @property
    def id(self) -> str:
        return str(self.payload.get("id") or "")

    @property
    def name(self) -> str:
        return str(self.payload.get("name") or "")

    @property
    def is_active(self) -> bool:
        return bool(self.payload.get("isActive", False))

    @property
    def expiration_date(self) -> str:
        return str(self.payload.get("expirationDate") or "")

    def with_expiration_date(self, value: str) -> ApiKeyDetail:
        payload = copy.deepcopy(self.payload)
        payload["expirationDate"] = value
        return ApiKeyDetail(payload=payload)


@dataclass(frozen=True)
class ExternalMenu:
    id: int
    name: str
    description: str
    generating_status: int | None
    price_category_id: str | None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> ExternalMenu:
        return cls(
            id=int(payload["id"]),
            name=str(payload.get("name") or ""),
            description=str(payload.get("description") or ""),
            generating_status=payload.get("generatingStatus"),
            price_category_id=payload.get("priceCategoryId"),
        )


@dataclass(frozen=True)
class RestaurantOutcome:
    name: str
    success: bool
    updated_count: int = 0
    message: str | None = None
    error: str | None = None


@dataclass
class BatchSummary:
    operation: Operation
    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    total_updated: int = 0
    duration_seconds: float = 0.0
    started_at: datetime | None = None
    finished_at: datetime | None = None
    outcomes: list[RestaurantOutcome] = field(default_factory=list)

    @property
    def all_succeeded(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "operation": self.operation.value,
            "processed": self.processed,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "total_updated": self.total_updated,
            "duration_seconds": round(self.duration_seconds, 3),
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "outcomes": [
                {
                    "name": outcome.name,
                    "success": outcome.success,
                    "updated_count": outcome.updated_count,
                    "message": outcome.message,
                    "error": outcome.error,
                }
                for outcome in self.outcomes
            ],
        }
