"""Application level helpers for assembling service dependencies."""
from __future__ import annotations

from dataclasses import dataclass

from .clients import IndexClient
from .config import AppConfig
from .core import PartyRegistry
from .search import QueryBuilder, ResultCache, SearchService


@dataclass(slots=True)
class ServiceResources:
    """Container bundling the objects needed to answer search requests."""

    service: SearchService
    index_client: IndexClient
    cache: ResultCache
    owns_client: bool = True

    async def aclose(self) -> None:
        if self.owns_client:
            await self.index_client.aclose()


def create_service(config: AppConfig, *, index_client: IndexClient | None = None) -> ServiceResources:
    owns_client = index_client is None
    client = index_client or IndexClient(
        config.index.base_url,
        config.index.index_name,
        api_key=config.index.api_key,
        timeout=config.index.timeout,
    )
    cache = ResultCache(max_entries=config.cache.max_entries)
    queries = QueryBuilder(
        time_zone=config.search.time_zone,
        terms_size=config.search.terms_size,
        presiding_officer=config.search.presiding_officer,
    )
    service = SearchService(
        client,
        cache=cache,
        queries=queries,
        parties=PartyRegistry(config.search.current_parties),
        export_page_size=config.search.export_page_size,
    )
    return ServiceResources(service=service, index_client=client, cache=cache, owns_client=owns_client)


__all__ = ["ServiceResources", "create_service"]
