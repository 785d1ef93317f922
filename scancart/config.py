from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[1]  # .../scancart repo
load_dotenv(dotenv_path=ROOT_DIR / ".env")


def _get_env(*keys: str, default: str | None = None) -> str | None:
    for k in keys:
        v = os.getenv(k)
        if v is not None and str(v).strip() != "":
            return v.strip()
    return default


def _get_int(*keys: str, default: int | None = None) -> int | None:
    v = _get_env(*keys, default=None)
    if v is None:
        return default
    return int(v)


def _get_path(*keys: str, default: str) -> str:
    v = _get_env(*keys, default=default)
    return str(v)


@dataclass(frozen=True)
class Settings:
    razorpay_key_id: str
    razorpay_key_secret: str = field(repr=False)
    razorpay_api_url: str
    currency: str
    currency_suffix: str
    catalog_path: str | None
    static_dir: str
    host: str
    port: int
    log_level: str


settings = Settings(
    razorpay_key_id=_get_env("RAZORPAY_KEY_ID", default="") or "",
    razorpay_key_secret=_get_env("RAZORPAY_KEY_SECRET", "RAZORPAY_SECRET", default="") or "",
    razorpay_api_url=_get_env("RAZORPAY_API_URL", default="https://api.razorpay.com/v1") or "",
    currency=_get_env("CURRENCY", default="INR") or "INR",
    currency_suffix=_get_env("CURRENCY_SUFFIX", default="Rs") or "Rs",
    catalog_path=_get_env("CATALOG_PATH", default=None),
    static_dir=_get_path("STATIC_DIR", default=str(ROOT_DIR / "public")),
    host=_get_env("HOST", default="0.0.0.0") or "0.0.0.0",
    port=_get_int("PORT", default=4000) or 4000,
    log_level=(_get_env("LOG_LEVEL", default="INFO") or "INFO").upper(),
)

if not settings.razorpay_key_secret:
    raise RuntimeError("RAZORPAY_KEY_SECRET is empty. Set RAZORPAY_KEY_SECRET in .env")
