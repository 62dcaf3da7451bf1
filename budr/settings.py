from pathlib import Path
from typing import Optional
from pydantic import BaseModel
import tomllib
import os
import random


class BrowserCfg(BaseModel):
    headless: bool = True
    navigation_timeout_ms: int = 30_000
    selector_timeout_ms: int = 5_000
    overlay_timeout_ms: int = 3_000
    locale: str = "sv-SE"


class NetworkCfg(BaseModel):
    rotate_user_agents: bool = True
    use_proxies: bool = False
    proxy_file: str = "proxies.txt"
    retry_backoff_seconds: int = 2
    navigation_retries: int = 2


class Settings(BaseModel):
    browser: BrowserCfg = BrowserCfg()
    network: NetworkCfg = NetworkCfg()

    # ---- helpers -----------------------------------------------------
    _UA_POOL = [
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0 Safari/537.36",
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 13_5) AppleWebKit/605.1.15 "
        "(KHTML, like Gecko) Version/17.0 Safari/605.1.15",
    ]

    def random_user_agent(self) -> Optional[str]:
        if not self.network.rotate_user_agents:
            return None
        return random.choice(self._UA_POOL)

    def random_proxy(self) -> Optional[str]:
        if not self.network.use_proxies:
            return None
        lines = Path(self.network.proxy_file).read_text().splitlines()
        return random.choice(lines).strip()


def load_settings() -> Settings:
    cfg_path = Path(os.getenv("BUDR_CONFIG", "budr.toml"))
    raw = tomllib.loads(cfg_path.read_text()) if cfg_path.exists() else {}
    return Settings.model_validate(raw)
