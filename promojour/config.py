"""Core application configuration & tunable distribution rules.

Everything that may change between deployments (credentials, Graph API
version, polling budget, alert thresholds, worker cadence) lives here as
module constants read from the environment. Services read these attributes
at call time (``config.SERVICE_ROLE_KEY``) rather than binding them at import
so tests can monkeypatch values.
"""
from __future__ import annotations

import os


class ConfigurationError(RuntimeError):
	"""Raised when a required credential or setting is missing."""


def _env_bool(name: str, default: bool = False) -> bool:
	raw = os.getenv(name)
	if raw is None or not raw.strip():
		return default
	return raw.strip().lower() in {"1", "true", "yes", "on"}


# ----------------------------- Logging / HTTP ----------------------------- #
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE: str | None = os.getenv("LOG_FILE", "logs/promojour.log") or None
CORS_ORIGINS: list[str] = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# ------------------------------ Authorization ----------------------------- #
# Bearer token required on every internal endpoint (cron trigger, manual
# publish, sync jobs). Callers must present it verbatim.
SERVICE_ROLE_KEY: str | None = os.getenv("SERVICE_ROLE_KEY") or None

# --------------------------- Meta Graph API ------------------------------- #
GRAPH_API_BASE_URL: str = os.getenv("GRAPH_API_BASE_URL", "https://graph.facebook.com/v18.0")
HTTP_TIMEOUT_SECONDS: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "30"))

INSTAGRAM_POLL_SETTINGS: dict[str, float | int] = {
	"interval_seconds": 2.0,   # wait between container status checks
	"max_attempts": 30,        # 30 * 2s = ~60s processing budget
}

# Public web app used to build the promotion link appended to captions.
PUBLIC_APP_BASE_URL: str = os.getenv("PUBLIC_APP_BASE_URL", "https://promojour.fr").rstrip("/")
CAPTION_LINK_LABEL: str = "🔗 Découvrez cette offre :"

# --------------------------- Google Merchant ------------------------------ #
GOOGLE_CLIENT_ID: str | None = os.getenv("GOOGLE_CLIENT_ID") or None
GOOGLE_CLIENT_SECRET: str | None = os.getenv("GOOGLE_CLIENT_SECRET") or None
GOOGLE_TOKEN_URL: str = "https://oauth2.googleapis.com/token"
GOOGLE_CONTENT_API_BASE_URL: str = "https://shoppingcontent.googleapis.com/content/v2.1"

MERCHANT_SETTINGS: dict[str, str | int] = {
	"token_refresh_margin_seconds": 300,  # refresh when expiring within 5 minutes
	"content_language": "fr",
	"target_country": "FR",
	"channel": "online",
	"currency": "EUR",
	"placeholder_image_url": "https://promojour.fr/placeholder.jpg",
	"default_brand": "PromoJour",
}

# ------------------------------ Brevo email ------------------------------- #
BREVO_API_KEY: str | None = os.getenv("BREVO_API_KEY") or None
BREVO_API_URL: str = "https://api.brevo.com/v3/smtp/email"

ALERT_SETTINGS: dict[str, str | int] = {
	"template_id": 53,
	"sender_name": "PromoJour",
	"sender_email": "noreply@promojour.com",
	"default_min_active": 3,
	"default_min_upcoming": 5,
}

# --------------------------- Distribution worker -------------------------- #
# Optional in-process trigger. The external cron calling the HTTP endpoint
# remains the primary scheduler, so this is off unless explicitly enabled.
DISTRIBUTION_WORKER: dict[str, float | bool] = {
	"enabled": _env_bool("ENABLE_DISTRIBUTION_WORKER", False),
	"interval_seconds": float(os.getenv("DISTRIBUTION_INTERVAL_SECONDS", "3600")),
	"shutdown_timeout_seconds": float(os.getenv("DISTRIBUTION_SHUTDOWN_TIMEOUT_SECONDS", "30")),
}

_seed_env = os.getenv("DISTRIBUTION_RANDOM_SEED")
DISTRIBUTION_RANDOM_SEED: int | None = int(_seed_env) if _seed_env and _seed_env.strip() else None


def require_setting(name: str) -> str:
	"""Return a configured string setting or raise ``ConfigurationError``."""
	value = globals().get(name)
	if not value:
		raise ConfigurationError(f"{name} not configured")
	return str(value)


__all__ = [
	"ConfigurationError",
	"require_setting",
	"LOG_LEVEL",
	"LOG_FILE",
	"CORS_ORIGINS",
	"SERVICE_ROLE_KEY",
	"GRAPH_API_BASE_URL",
	"HTTP_TIMEOUT_SECONDS",
	"INSTAGRAM_POLL_SETTINGS",
	"PUBLIC_APP_BASE_URL",
	"CAPTION_LINK_LABEL",
	"GOOGLE_CLIENT_ID",
	"GOOGLE_CLIENT_SECRET",
	"GOOGLE_TOKEN_URL",
	"GOOGLE_CONTENT_API_BASE_URL",
	"MERCHANT_SETTINGS",
	"BREVO_API_KEY",
	"BREVO_API_URL",
	"ALERT_SETTINGS",
	"DISTRIBUTION_WORKER",
	"DISTRIBUTION_RANDOM_SEED",
]
