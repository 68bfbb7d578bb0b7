import logging
from typing import List, Optional

from fastapi import Depends, FastAPI, Query, Request, Response
from fastapi.staticfiles import StaticFiles

from .cache import CatalogCache
from .models import CanonicalRecord, ColumnsResponse, HealthResponse
from .normalize import collect_additional_columns
from .rules import CACHE_CONTROL
from .settings import load_settings
from .sources import build_live_tiers

settings = load_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="handheld-catalog",
    description="Handheld device catalog ingested from spreadsheet sources",
    version="0.1.0",
)


def get_catalog_cache(request: Request) -> CatalogCache:
    cache = getattr(request.app.state, "catalog_cache", None)
    if cache is None:
        cache = CatalogCache(build_live_tiers(settings), ttl=settings.cache_ttl)
        request.app.state.catalog_cache = cache
    return cache


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.get("/api/handhelds", response_model=List[CanonicalRecord])
def list_handhelds(
    response: Response,
    refresh: bool = False,
    limit: Optional[int] = Query(default=None, ge=1),
    cache: CatalogCache = Depends(get_catalog_cache),
):
    lookup = cache.get(bypass=refresh, limit=limit)

    response.headers["Cache-Control"] = CACHE_CONTROL
    response.headers["X-Cache"] = lookup.status.value
    if limit is not None:
        response.headers["X-Total-Count"] = str(lookup.total)
        response.headers["X-Returned-Count"] = str(lookup.returned)
    return lookup.records


@app.get("/api/handhelds/columns", response_model=ColumnsResponse)
def list_additional_columns(cache: CatalogCache = Depends(get_catalog_cache)):
    lookup = cache.get()
    return {"columns": collect_additional_columns(lookup.records)}


settings.asset_dir.mkdir(parents=True, exist_ok=True)
app.mount(
    settings.asset_url_prefix,
    StaticFiles(directory=settings.asset_dir),
    name="handheld-images",
)
