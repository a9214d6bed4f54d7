import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load `.env` from the project root (if present) before reading any settings.
load_dotenv(dotenv_path=Path(__file__).resolve().parents[1] / ".env")

DEFAULT_MODEL_NAME = "gpt-4o"
OPENAI_API_URL = "https://api.openai.com/v1/responses"
DEFAULT_CORS_ORIGINS = ("http://localhost:5173", "http://localhost:5000")
DEFAULT_LOG_PATH = Path(__file__).resolve().parents[1] / "logs" / "requests.ndjson"


def _split_origins(raw: str) -> tuple[str, ...]:
    return tuple(origin.strip() for origin in raw.split(",") if origin.strip())


@dataclass(frozen=True)
class Settings:
    openai_api_key: str = ""
    model_name: str = DEFAULT_MODEL_NAME
    openai_api_url: str = OPENAI_API_URL
    openai_timeout_seconds: float = 30.0
    environment: str = "development"
    cors_origins: tuple[str, ...] = DEFAULT_CORS_ORIGINS
    rate_limit_window_seconds: float = 15 * 60
    rate_limit_max_requests: int = 50
    max_body_bytes: int = 10 * 1024
    log_path: Path = field(default=DEFAULT_LOG_PATH)
    port: int = 5000
    prompt_debug: bool = False

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @classmethod
    def from_env(cls) -> "Settings":
        cors_raw = os.getenv("CORS_ORIGINS", "")
        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            model_name=os.getenv("OPENAI_MODEL", DEFAULT_MODEL_NAME),
            openai_timeout_seconds=float(os.getenv("OPENAI_TIMEOUT_SECONDS", "30")),
            environment=os.getenv("ENVIRONMENT") or os.getenv("NODE_ENV") or "development",
            cors_origins=_split_origins(cors_raw) or DEFAULT_CORS_ORIGINS,
            rate_limit_window_seconds=float(os.getenv("RATE_LIMIT_WINDOW_SECONDS", str(15 * 60))),
            rate_limit_max_requests=int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "50")),
            max_body_bytes=int(os.getenv("MAX_BODY_BYTES", str(10 * 1024))),
            log_path=Path(os.getenv("REQUEST_LOG_PATH", str(DEFAULT_LOG_PATH))),
            port=int(os.getenv("PORT", "5000")),
            prompt_debug=os.getenv("PROMPT_DEBUG", "0") == "1",
        )
