from __future__ import annotations

"""
Configuration loader for the proving service.

- Reads environment variables (optionally from `.env`) via pydantic-settings.
- Exposes a cached `get_settings()` accessor.

Environment variables:
    LOG_LEVEL                     (str, default "INFO")  Logging level
    LOG_FORMAT                    (str, default "json")  "json" or "console"
    HOST / PORT                   (default 0.0.0.0 / 8000)  Bind address for `serve`

Prover backend:
    PROVER_BACKEND                (str, optional)  "package.module:attr" of the proving backend
    CIRCUIT_DEGREE                (int, default 17)  Circuit size parameter k
    PROVING_KEY_PATH              (path, default ./proving_key)
    VERIFYING_KEY_PATH            (path, default ./verifying_key)

Transpiler:
    TRANSPILE_TRIM_HEAD           (int, default 16)  Wrapper lines dropped before the body
    TRANSPILE_TRIM_TAIL           (int, default 7)  Wrapper lines dropped after the body

CORS:
    CORS_ALLOW_ORIGINS            (csv|json list)  e.g. "http://localhost:3000,https://*.example.com"
    CORS_ALLOW_HEADERS            (csv|json list)
    CORS_ALLOW_METHODS            (csv|json list)
    CORS_ALLOW_CREDENTIALS        (bool, default True)
    CORS_MAX_AGE                  (int, default 600)

Notes
-----
- Lists accept comma-separated strings or JSON arrays.
- A "*" origin is rejected while credentials are allowed.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .transpiler.assembler import DEFAULT_TRIM_HEAD, DEFAULT_TRIM_TAIL

DEFAULT_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]
DEFAULT_METHODS = ["GET", "POST", "OPTIONS"]
DEFAULT_HEADERS = ["Authorization", "Content-Type", "X-Requested-With"]


def _parse_list(val: Optional[str | List[str]], *, default: List[str]) -> List[str]:
    if val is None:
        return list(default)
    if isinstance(val, list):
        return [str(x) for x in val]
    s = val.strip()
    if not s:
        return []
    if s.startswith("[") and s.endswith("]"):
        try:
            return [str(x) for x in json.loads(s)]
        except json.JSONDecodeError:
            pass
    return [x.strip() for x in s.split(",") if x.strip()]


class Settings(BaseSettings):
    # Core
    log_level: str = Field("INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    log_format: str = Field("json", description='"json" or "console"')
    host: str = Field("0.0.0.0", description="Bind address for the HTTP server")
    port: int = Field(8000, ge=1, le=65535, description="Port for the HTTP server")

    # Prover backend
    prover_backend: Optional[str] = Field(
        default=None, description='Import path of the proving backend ("pkg.module:attr")'
    )
    circuit_degree: int = Field(17, ge=1, le=28, description="Circuit size parameter k")
    proving_key_path: Path = Field(Path("./proving_key"))
    verifying_key_path: Path = Field(Path("./verifying_key"))

    # Transpiler
    transpile_trim_head: int = Field(DEFAULT_TRIM_HEAD, ge=0)
    transpile_trim_tail: int = Field(DEFAULT_TRIM_TAIL, ge=0)

    # CORS (kept as raw strings; parsed by the helpers below)
    cors_allow_origins: Optional[str] = None
    cors_allow_headers: Optional[str] = None
    cors_allow_methods: Optional[str] = None
    cors_allow_credentials: bool = True
    cors_max_age: int = Field(600, ge=0)

    model_config = SettingsConfigDict(
        env_prefix="", env_file=".env", case_sensitive=False, extra="ignore"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, v):
        return str(v).upper() if v is not None else "INFO"

    @field_validator("log_format", mode="before")
    @classmethod
    def _lower_format(cls, v):
        return str(v).lower() if v is not None else "json"

    @property
    def allow_origins(self) -> List[str]:
        return _parse_list(self.cors_allow_origins, default=DEFAULT_ORIGINS)

    @property
    def allow_methods(self) -> List[str]:
        return _parse_list(self.cors_allow_methods, default=DEFAULT_METHODS)

    @property
    def allow_headers(self) -> List[str]:
        return _parse_list(self.cors_allow_headers, default=DEFAULT_HEADERS)

    def to_cors_config(self):
        """Convert to the security.cors CORSConfig model."""
        from .security.cors import build_cors_config

        return build_cors_config(
            allow_origins=self.allow_origins,
            allow_methods=self.allow_methods,
            allow_headers=self.allow_headers,
            allow_credentials=self.cors_allow_credentials,
            max_age=self.cors_max_age,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()


__all__ = ["Settings", "get_settings"]
