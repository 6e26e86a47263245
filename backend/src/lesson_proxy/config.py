import logging
import os
import sys

from pydantic_settings import BaseSettings

from lesson_proxy.orchestrator.fanout import AggregationStrategy

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    gemini_api_key: str = ""
    port: int = 3000
    default_model: str = "google-gla:gemini-2.5-flash"
    temperature: float = 0.8
    max_output_tokens: int = 1500
    response_timeout_seconds: float = 60.0
    socket_timeout_seconds: int = 60
    error_detail_limit: int = 50
    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"

    # Form orchestrator side
    proxy_base_url: str = "http://localhost:3000"
    aggregation_strategy: AggregationStrategy = AggregationStrategy.ALL_OR_NOTHING
    client_timeout_seconds: float = 90.0

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()


def require_api_key(current: Settings | None = None) -> str:
    """Exit the process when the Gemini credential is missing.

    Only the server calls this; the form orchestrator never needs the key.
    """
    current = current or settings
    if not current.gemini_api_key:
        logger.critical(
            "FATAL ERROR: GEMINI_API_KEY is not set in environment variables."
        )
        print(
            "\n"
            "  GEMINI_API_KEY is not set.\n"
            "  Set it in .env or as an environment variable.\n"
            "  Get a key at https://aistudio.google.com/apikey\n",
            file=sys.stderr,
        )
        sys.exit(1)

    # Expose API key to environment so PydanticAI's google provider picks it up
    os.environ.setdefault("GEMINI_API_KEY", current.gemini_api_key)
    return current.gemini_api_key
