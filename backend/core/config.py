import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    def __init__(self):
        self.host: str = os.getenv("HOST", "0.0.0.0")
        self.port: int = int(os.getenv("PORT") or 3000)
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

        # Restore reserved stock when no driver can be assigned.
        # false keeps the legacy behaviour: a rejected order still consumes stock.
        self.compensate_on_driver_failure: bool = _env_bool("COMPENSATE_ON_DRIVER_FAILURE", "true")

        # Optional JSON file with {"inventory": [...], "drivers": [...]}
        self.seed_file: Optional[str] = os.getenv("SEED_FILE") or None

    @classmethod
    def from_env(cls) -> "Settings":
        """Build a fresh instance from the current environment (tests patch os.environ)."""
        return cls()


settings = Settings()
