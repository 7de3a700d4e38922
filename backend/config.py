"""
config.py
─────────
Environment-driven settings (a local .env file is read first) and logging
setup.
"""

import logging
import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    def __init__(self):
        self.db_path: str = os.getenv("INVENTORY_DB_PATH", "db.json")
        self.public_dir: str = os.getenv("INVENTORY_PUBLIC_DIR", "public")
        self.host: str = os.getenv("INVENTORY_HOST", "0.0.0.0")
        self.port: int = int(os.getenv("INVENTORY_PORT", "3000"))
        self.reload_policy: str = os.getenv("INVENTORY_RELOAD_POLICY", "always").lower()
        self.log_level: str = os.getenv("INVENTORY_LOG_LEVEL", "INFO").upper()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


settings = Settings()
