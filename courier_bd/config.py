import os
from dataclasses import dataclass
from typing import Final, Mapping

from dotenv import load_dotenv

from .base import DEFAULT_TIMEOUT

PATHAO_DEFAULT_URL: Final = "https://courier-api.pathao.com/api/v1"
STEADFAST_DEFAULT_URL: Final = "https://portal.steadfast.com.bd/api/v1"
REDX_DEFAULT_URL: Final = "https://openapi.redx.com.bd/v1.0.0-beta"

TRUTHY: Final = ("1", "true", "yes", "on")


def load_environment(env: Mapping[str, str] | None = None) -> Mapping[str, str]:
    """Return `env`, or the process environment after reading `.env`"""
    if env is not None:
        return env
    load_dotenv()
    return os.environ


def _flag(env: Mapping[str, str], key: str) -> bool:
    return (env.get(key) or "").strip().lower() in TRUTHY


def http_timeout(env: Mapping[str, str]) -> float:
    value = env.get("COURIER_HTTP_TIMEOUT")
    return float(value) if value else DEFAULT_TIMEOUT


@dataclass(frozen=True)
class PathaoConfig:
    client_id: str
    client_secret: str
    username: str
    password: str
    base_url: str = PATHAO_DEFAULT_URL
    store_id: int = 1
    token_ttl: float | None = None
    live_geo: bool = False

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> "PathaoConfig | None":
        keys = ("PATHAO_CLIENT_ID", "PATHAO_CLIENT_SECRET", "PATHAO_USERNAME", "PATHAO_PASSWORD")
        if not all(env.get(key) for key in keys):
            return None

        ttl = env.get("PATHAO_TOKEN_TTL")
        return cls(
            client_id=env["PATHAO_CLIENT_ID"],
            client_secret=env["PATHAO_CLIENT_SECRET"],
            username=env["PATHAO_USERNAME"],
            password=env["PATHAO_PASSWORD"],
            base_url=env.get("PATHAO_API_URL") or PATHAO_DEFAULT_URL,
            store_id=int(env.get("PATHAO_STORE_ID") or 1),
            token_ttl=float(ttl) if ttl else None,
            live_geo=_flag(env, "PATHAO_LIVE_GEO"),
        )


@dataclass(frozen=True)
class SteadfastConfig:
    api_key: str
    secret_key: str
    base_url: str = STEADFAST_DEFAULT_URL

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> "SteadfastConfig | None":
        if not (env.get("STEADFAST_API_KEY") and env.get("STEADFAST_SECRET_KEY")):
            return None
        return cls(
            api_key=env["STEADFAST_API_KEY"],
            secret_key=env["STEADFAST_SECRET_KEY"],
            base_url=env.get("STEADFAST_API_URL") or STEADFAST_DEFAULT_URL,
        )


@dataclass(frozen=True)
class RedxConfig:
    api_key: str
    base_url: str = REDX_DEFAULT_URL
    live_geo: bool = False

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> "RedxConfig | None":
        if not env.get("REDX_API_KEY"):
            return None
        return cls(
            api_key=env["REDX_API_KEY"],
            base_url=env.get("REDX_API_URL") or REDX_DEFAULT_URL,
            live_geo=_flag(env, "REDX_LIVE_GEO"),
        )
