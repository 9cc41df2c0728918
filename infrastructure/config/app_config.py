# infrastructure/config/app_config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv


# .envファイルを自動ロード（プロジェクトルートから）
_env_path = Path(__file__).parent.parent.parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path)

PROJECT_ROOT = Path(__file__).parent.parent.parent


def _flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


def _int(value: Optional[str], default: int) -> int:
    try:
        return int(value) if value not in (None, "") else default
    except ValueError:
        return default


def _float(value: Optional[str], default: float) -> float:
    try:
        return float(value) if value not in (None, "") else default
    except ValueError:
        return default


@dataclass(frozen=True)
class AppConfig:
    """
    Process-wide settings, read once at startup and passed to the components
    that need them.
    """
    host: str = "localhost"
    port: int = 9000
    protocol: str = ""
    local: bool = False
    environment: str = "development"
    ga_ua: str = ""

    authorised_user_group: str = ""
    authorised_admin_group: str = ""
    token_name: str = ""
    jwt_secret: str = ""

    submission_api_url: str = ""
    submission_api_key: str = ""
    submission_timeout_sec: float = 10.0

    addresses_api_url: str = ""
    addresses_api_key: str = ""

    notify_api_key: str = ""
    email_template_id: str = ""
    send_emails: bool = False
    notify_timeout_sec: float = 10.0

    outbox_dir: Path = PROJECT_ROOT / "tmp" / "outbox"
    wizards_dir: Path = PROJECT_ROOT / "wizards"
    templates_dir: Path = PROJECT_ROOT / "templates"
    public_dir: Path = PROJECT_ROOT / "public"
    wizard_id: str = "resident-support"
    log_level: str = "INFO"

    @property
    def enforce_https(self) -> bool:
        return not self.local and self.environment != "development"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        env = os.environ if environ is None else environ
        outbox_dir = env.get("OUTBOX_DIR")
        return cls(
            host=env.get("HOST") or "localhost",
            port=_int(env.get("PORT"), 9000),
            protocol=env.get("PROTOCOL", ""),
            # any non-empty value switches local mode on
            local=bool(env.get("LOCAL")),
            environment=env.get("ENVIRONMENT") or "development",
            ga_ua=env.get("GA_UA", ""),
            authorised_user_group=env.get("AUTHORISED_USER_GROUP", ""),
            authorised_admin_group=env.get("AUTHORISED_ADMIN_GROUP", ""),
            token_name=env.get("TOKEN_NAME", ""),
            jwt_secret=env.get("HACKNEY_JWT_SECRET", ""),
            submission_api_url=env.get("RESIDENT_SUPPORT_REQUESTS_API_URL", ""),
            submission_api_key=env.get("RESIDENT_SUPPORT_REQUESTS_API_KEY", ""),
            submission_timeout_sec=_float(env.get("SUBMISSION_TIMEOUT_SEC"), 10.0),
            addresses_api_url=env.get("ADDRESSES_API_URL", ""),
            addresses_api_key=env.get("ADDRESSES_API_KEY", ""),
            notify_api_key=env.get("NOTIFY_API_KEY", ""),
            email_template_id=env.get("EMAIL_TEMPLATE_ID", ""),
            send_emails=_flag(env.get("SEND_EMAILS")),
            notify_timeout_sec=_float(env.get("NOTIFY_TIMEOUT_SEC"), 10.0),
            outbox_dir=Path(outbox_dir) if outbox_dir else PROJECT_ROOT / "tmp" / "outbox",
            wizard_id=env.get("WIZARD_ID") or "resident-support",
            log_level=env.get("LOG_LEVEL") or "INFO",
        )
