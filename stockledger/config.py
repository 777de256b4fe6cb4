import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .domain import DEFAULT_USER

# Load environment variables from .env file
load_dotenv()

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


@dataclass(frozen=True)
class Settings:
    backend: str
    data_dir: Path
    database_url: str
    log_level: str
    cors_origins: list[str]
    default_user: str

    @property
    def products_file(self) -> Path:
        return self.data_dir / "productos.json"

    @property
    def movements_file(self) -> Path:
        return self.data_dir / "movements.json"


def _split_origins(raw: str | None) -> list[str]:
    if not raw:
        return ["http://localhost:3000", "http://127.0.0.1:3000"]
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def load_settings() -> Settings:
    """Read settings from the environment (and ``.env``)."""
    data_dir = Path(os.getenv("STOCKLEDGER_DATA_DIR", "data"))
    backend = os.getenv("STOCKLEDGER_BACKEND", "json").strip().lower()
    if backend not in {"json", "sql"}:
        raise RuntimeError(f"Unsupported STOCKLEDGER_BACKEND: {backend!r}")

    return Settings(
        backend=backend,
        data_dir=data_dir,
        database_url=os.getenv("DATABASE_URL") or f"sqlite:///{data_dir / 'stockledger.db'}",
        log_level=os.getenv("STOCKLEDGER_LOG_LEVEL", "INFO").upper(),
        cors_origins=_split_origins(os.getenv("STOCKLEDGER_CORS_ORIGINS")),
        default_user=os.getenv("STOCKLEDGER_DEFAULT_USER", "").strip() or DEFAULT_USER,
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)


settings = load_settings()
configure_logging(settings.log_level)
