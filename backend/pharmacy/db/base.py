"""Declarative base and engine factory for the SQL backend."""

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool


class Base(DeclarativeBase):
    pass


def _is_sqlite_memory(url: str) -> bool:
    return url.startswith("sqlite") and (url.endswith("://") or ":memory:" in url)


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    if _is_sqlite_memory(url):
        # One shared connection, otherwise every session sees an empty database
        return create_async_engine(
            url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    return create_async_engine(url, echo=echo, pool_pre_ping=True)
