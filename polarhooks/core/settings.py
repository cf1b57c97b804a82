from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import os

import yaml


DEFAULT_SETTINGS_PATH = "config/settings.yaml"


@dataclass(frozen=True)
class Settings:
    env: str = "dev"
    webhook_secret: str = ""
    event_store_max_items: int = 500
    events_lookback_minutes: int = 60
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"


def load_settings(path: str | Path | None = None) -> Settings:
    p = Path(path or os.getenv("POLARHOOKS_SETTINGS") or DEFAULT_SETTINGS_PATH)

    data: Dict[str, Any] = {}
    if p.exists():
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}

    webhook_section = data.get("webhook", {}) or {}
    store_section = data.get("event_store", {}) or {}
    server_section = data.get("server", {}) or {}

    # Env overrides (secrets should not live in the YAML file).
    env_secret = os.getenv("POLARHOOKS_WEBHOOK_SECRET")
    env_max_items = os.getenv("POLARHOOKS_EVENT_STORE_MAX_ITEMS")
    env_port = os.getenv("POLARHOOKS_PORT")
    env_log_level = os.getenv("POLARHOOKS_LOG_LEVEL")

    return Settings(
        env=str(data.get("env", "dev")),
        webhook_secret=env_secret if env_secret is not None else str(webhook_section.get("secret") or ""),
        event_store_max_items=int(env_max_items or store_section.get("max_items", 500)),
        events_lookback_minutes=int(store_section.get("lookback_minutes", 60)),
        host=str(server_section.get("host", "0.0.0.0")),
        port=int(env_port or server_section.get("port", 8000)),
        log_level=str(env_log_level or data.get("log_level", "INFO")).upper(),
    )
