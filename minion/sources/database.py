from __future__ import annotations

import logging
from collections.abc import Callable

from sqlalchemy import Boolean, Integer, String, create_engine, false, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column

from minion.errors import SourceError
from minion.models import RestaurantConfig
from minion.sources.base import RestaurantSource
from minion.sources.secrets import DatabaseCredentials

IIKO_POS_TYPE = "iiko"

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class RestaurantRecord(Base):
    __tablename__ = "restaurants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(256))
    pos_type: Mapped[str] = mapped_column(String(32), index=True)
    is_deleted: Mapped[bool | None] = mapped_column(Boolean, default=False)
    settings_is_deleted: Mapped[bool | None] = mapped_column(Boolean, default=False)
    iiko_login: Mapped[str] = mapped_column(String(256), default="")
    iiko_password: Mapped[str] = mapped_column(String(256), default="")
    custom_domain: Mapped[str | None] = mapped_column(String(256), default="")

    def to_config(self) -> RestaurantConfig | None:
        if self.pos_type != IIKO_POS_TYPE or not self.custom_domain:
            return None
        return RestaurantConfig(
            name=self.name,
            base_url=f"https://{self.custom_domain}",
            login=self.iiko_login,
            password=self.iiko_password,
            enabled=not self.is_deleted and not self.settings_is_deleted,
        )


def not_true(column):
    return or_(column.is_(None), column == false())


class DatabaseRestaurantSource(RestaurantSource):
    def __init__(
        self,
        database_url: str | None = None,
        credentials_loader: Callable[[], DatabaseCredentials] | None = None,
    ) -> None:
        if not database_url and credentials_loader is None:
            raise ValueError("Either database_url or credentials_loader is required")
        self.database_url = database_url
        self.credentials_loader = credentials_loader

    def resolve_url(self) -> str:
        if self.database_url:
            return self.database_url
        return self.credentials_loader().db_url

    def load(self) -> list[RestaurantConfig]:
        query = select(RestaurantRecord).where(
            RestaurantRecord.pos_type == IIKO_POS_TYPE,
            not_true(RestaurantRecord.is_deleted),
            not_true(RestaurantRecord.settings_is_deleted),
            RestaurantRecord.custom_domain.is_not(None),
            RestaurantRecord.custom_domain != "",
        ).order_by(RestaurantRecord.id)
        try:
            engine = create_engine(self.resolve_url())
        except (SQLAlchemyError, ValueError) as exc:
            raise SourceError(f"Invalid restaurant database URL: {exc}") from exc

        try:
            with Session(engine) as db:
                records = db.execute(query).scalars().all()
                restaurants = [config for config in (record.to_config() for record in records) if config is not None]
        except SQLAlchemyError as exc:
            raise SourceError(f"Cannot load restaurants from database: {exc}") from exc
        finally:
            engine.dispose()

        logger.info("Loaded %d iiko restaurants from database", len(restaurants))
        return restaurants
