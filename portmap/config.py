"""
config.py — Runtime settings for the port-forward manager.

Values come from the environment (a local .env is loaded first):
    PORTMAP_DATA_PATH   JSON blob holding the mapping list
    PORTMAP_HOST        bind address
    PORTMAP_PORT        bind port
    LOG_LEVEL           logging level name
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    data_path: str = "portmap_config.json"
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"


def load_settings() -> Settings:
    load_dotenv()
    defaults = Settings()
    return Settings(
        data_path=os.getenv("PORTMAP_DATA_PATH", defaults.data_path),
        host=os.getenv("PORTMAP_HOST", defaults.host),
        port=int(os.getenv("PORTMAP_PORT", defaults.port)),
        log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
    )
