import os
from typing import List, Optional

from dotenv import load_dotenv
from sqlalchemy.engine import URL

from core.errors import ConfigError

load_dotenv()

STOCK_MODES = ("flat", "normalized", "both")


def _env_bool(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")


class Settings:
    """Runtime settings read from the environment (and `.env`)."""

    def __init__(self):
        self.host: str = os.getenv("HOST", "0.0.0.0")
        self.port: int = _env_int("PORT", 8080)

        self.database_url: Optional[str] = os.getenv("DATABASE_URL") or None
        self.database_echo: bool = _env_bool("DATABASE_ECHO")
        self.db_host: Optional[str] = os.getenv("DB_HOST") or None
        self.db_port: int = _env_int("DB_PORT", 3306)
        self.db_user: Optional[str] = os.getenv("DB_USER") or None
        # an empty password is legitimate, an unset one is not
        self.db_pass: Optional[str] = os.getenv("DB_PASS")
        self.db_name: Optional[str] = os.getenv("DB_NAME") or None
        self.db_pool_size: int = _env_int("DB_POOL_SIZE", 10)
        self.db_pool_timeout: int = _env_int("DB_POOL_TIMEOUT", 10)

        self.stock_mode: str = os.getenv("STOCK_MODE", "flat").strip().lower()
        self.cors_origins: List[str] = [
            o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
        ]
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").strip().upper()

    @property
    def flat_enabled(self) -> bool:
        return self.stock_mode in ("flat", "both")

    @property
    def normalized_enabled(self) -> bool:
        return self.stock_mode in ("normalized", "both")

    @property
    def modes(self) -> List[str]:
        if self.stock_mode == "both":
            return ["flat", "normalized"]
        return [self.stock_mode]

    def validate(self) -> None:
        """Raise ConfigError naming every missing or invalid setting."""
        problems = []
        if self.stock_mode not in STOCK_MODES:
            problems.append(f"STOCK_MODE must be one of {', '.join(STOCK_MODES)}")
        if not self.database_url:
            missing = [
                name
                for name, value in (
                    ("DB_HOST", self.db_host),
                    ("DB_USER", self.db_user),
                    ("DB_PASS", self.db_pass),
                    ("DB_NAME", self.db_name),
                )
                if value is None
            ]
            if missing:
                problems.append(f"missing required settings: {', '.join(missing)}")
        if self.db_pool_size < 1:
            problems.append("DB_POOL_SIZE must be >= 1")
        if self.db_pool_timeout < 0:
            problems.append("DB_POOL_TIMEOUT must be >= 0")
        if problems:
            raise ConfigError("; ".join(problems))

    def sqlalchemy_url(self):
        if self.database_url:
            return self.database_url
        return URL.create(
            "mysql+aiomysql",
            username=self.db_user,
            password=self.db_pass,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
            query={"charset": "utf8mb4"},
        )


def get_settings() -> Settings:
    return Settings()
