import ssl
from typing import Any, Dict, Tuple
from urllib.parse import urlparse, parse_qs, urlencode, urlunparse

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase


def normalize_database_url(database_url: str) -> Tuple[str, Dict[str, Any]]:
    """Return an asyncpg-ready URL and the connect_args it needs.

    Hosted Postgres connection strings carry sslmode=require and
    channel_binding=require, which asyncpg rejects in the URL. They are
    stripped here and SSL is passed through connect_args instead.
    """
    parsed = urlparse(database_url)
    if not parsed.scheme.startswith("postgres"):
        return database_url, {}

    query_params = parse_qs(parsed.query)

    needs_ssl = query_params.pop("sslmode", [None])[0] == "require"
    query_params.pop("channel_binding", None)

    clean_query = urlencode(query_params, doseq=True)
    scheme = "postgresql+asyncpg" if parsed.scheme in ("postgres", "postgresql") else parsed.scheme
    url = urlunparse(parsed._replace(scheme=scheme, query=clean_query))

    connect_args = {"ssl": ssl.create_default_context()} if needs_ssl else {}
    return url, connect_args


def make_engine(database_url: str) -> AsyncEngine:
    url, connect_args = normalize_database_url(database_url)
    return create_async_engine(
        url, echo=False, pool_pre_ping=True, connect_args=connect_args
    )


class Base(DeclarativeBase):
    pass
