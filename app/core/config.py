from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal

AppEnv = Literal["dev", "test", "prod"]
LogLevel = Literal["debug", "info", "warning", "error"]
PasswordScheme = Literal["plaintext", "argon2"]

_TRUTHY = ("1", "true", "yes", "on")
_FALSY = ("", "0", "false", "no", "off")


def _getenv(name: str, default: str) -> str:
    # Centralize env access so it’s easy to extend later (type casting, required vars)
    return os.environ.get(name, default).strip()


def _getenv_bool(name: str, default: bool) -> bool:
    raw = _getenv(name, "true" if default else "false").lower()
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean (got {raw!r})")


@dataclass(frozen=True)
class Settings:
    app_env: AppEnv
    log_level: LogLevel
    log_json: bool
    port: int
    mongo_url: str | None
    users_db_name: str
    courses_db_name: str
    blog_db_name: str
    admin_secret: str | None
    password_scheme: PasswordScheme
    cors_origins: tuple[str, ...]

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"

    @property
    def is_test(self) -> bool:
        return self.app_env == "test"

    @property
    def is_prod(self) -> bool:
        return self.app_env == "prod"


def load_settings() -> Settings:
    app_env_raw = _getenv("APP_ENV", "dev").lower()
    log_level_raw = _getenv("LOG_LEVEL", "info").lower()
    port_raw = _getenv("PORT", "5000")
    scheme_raw = _getenv("PASSWORD_SCHEME", "plaintext").lower()

    if app_env_raw not in ("dev", "test", "prod"):
        raise ValueError(f"APP_ENV must be dev|test|prod (got {app_env_raw!r})")

    if log_level_raw not in ("debug", "info", "warning", "error"):
        raise ValueError(
            f"LOG_LEVEL must be debug|info|warning|error (got {log_level_raw!r})"
        )

    if scheme_raw not in ("plaintext", "argon2"):
        raise ValueError(
            f"PASSWORD_SCHEME must be plaintext|argon2 (got {scheme_raw!r})"
        )

    try:
        port = int(port_raw)
    except ValueError:
        raise ValueError(f"PORT must be an integer (got {port_raw!r})") from None

    mongo_url = _getenv("MONGO_URL", "") or None
    # Read once here; the access guard receives it by injection.
    admin_secret = _getenv("ADMIN_SECRET", "") or None

    cors_origins = tuple(
        o.strip() for o in _getenv("CORS_ORIGINS", "*").split(",") if o.strip()
    )

    return Settings(  # type: ignore[arg-type]
        app_env=app_env_raw,
        log_level=log_level_raw,
        log_json=_getenv_bool("LOG_JSON", False),
        port=port,
        mongo_url=mongo_url,
        users_db_name=_getenv("USERS_DB_NAME", "security-course-user"),
        courses_db_name=_getenv("COURSES_DB_NAME", "coursesDB"),
        blog_db_name=_getenv("BLOG_DB_NAME", "blogDB"),
        admin_secret=admin_secret,
        password_scheme=scheme_raw,
        cors_origins=cors_origins or ("*",),
    )


# Optional: module-level singleton so imports are cheap
SETTINGS = load_settings()
