"""Runtime options, from an options file or environment variables."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field

from appcast.remote.models import DEFAULT_USER_AGENT, RemoteOptions
from appcast.remote.resolver import DEFAULT_DOH_ENDPOINT

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class ValidatorOptions(BaseModel):
    check_urls_timeout_ms: int = Field(default=10_000, gt=0)
    check_urls_concurrency: int = Field(default=5, ge=1)
    user_agent: str = DEFAULT_USER_AGENT
    doh_endpoint: str = DEFAULT_DOH_ENDPOINT
    dev_mode: bool = False

    def remote_options(self, timeout_ms: int | None = None) -> RemoteOptions:
        return RemoteOptions(
            timeout_ms=timeout_ms if timeout_ms is not None else self.check_urls_timeout_ms,
            concurrency=self.check_urls_concurrency,
            user_agent=self.user_agent,
        )


def load_options() -> ValidatorOptions:
    """Load options from /data/options.json or env fallback."""
    opts_path = os.environ.get("SPARKLE_VALIDATOR_OPTIONS_PATH", "/data/options.json")
    if Path(opts_path).exists():
        return ValidatorOptions.model_validate(json.loads(Path(opts_path).read_text()))
    return ValidatorOptions(
        check_urls_timeout_ms=int(os.environ.get("CHECK_URLS_TIMEOUT_MS", "10000")),
        check_urls_concurrency=int(os.environ.get("CHECK_URLS_CONCURRENCY", "5")),
        user_agent=os.environ.get("USER_AGENT", DEFAULT_USER_AGENT),
        doh_endpoint=os.environ.get("DOH_ENDPOINT", DEFAULT_DOH_ENDPOINT),
        dev_mode=bool(os.environ.get("SPARKLE_VALIDATOR_DEV_MODE")),
    )


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
