"""
Runtime configuration read from CATALOG_* environment variables.

Only deployment-specific values live here; fixed ingestion constants are in
rules.py. Empty variables fall back to the defaults below.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .rules import CACHE_TTL_SECONDS

DEFAULT_SHEET_ID = "1RUNo61MCcR6FJbMU2fOkJ2OCXNWtY-4cQ1J6F-KcGdo"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CATALOG_", env_ignore_empty=True)

    archive_path: Path = Field(default=Path("data/handhelds.ods"))
    asset_dir: Path = Field(default=Path("public/handheld-images"))
    asset_url_prefix: str = "/handheld-images"
    sheet_id: str = DEFAULT_SHEET_ID
    remote_timeout: float = 10.0
    cache_ttl: float = float(CACHE_TTL_SECONDS)
    log_level: str = "INFO"

    def sheet_csv_url(self, cell_range: str) -> str:
        return (
            f"https://docs.google.com/spreadsheets/d/{self.sheet_id}"
            f"/gviz/tq?tqx=out:csv&range={cell_range}"
        )


def load_settings() -> Settings:
    return Settings()
