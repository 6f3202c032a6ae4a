from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings

BASE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    # --- app ---
    app_name: str = "Server Monitor Dashboard"
    debug: bool = False

    # --- server ---
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: list[str] = ["*"]
    frontend_dist: str = str(BASE_DIR.parent / "web" / "dist")

    # --- auth ---
    jwt_secret: str = "your-secret-key-change-in-production"
    jwt_algorithm: str = "HS256"
    token_ttl_hours: int = 24
    login_path: str | None = None  # used only when no persisted path exists
    login_path_file: str = str(BASE_DIR / ".login-path")
    admin_username: str = "admin"
    admin_password_hash: str = (
        "$2a$10$9WNbUVeJDP1ld.KeJKo7Keyj2ppOYkpkJfMzGafn/RYIf9pRi5s1m"
    )

    # --- sampling ---
    process_cache_window_ms: int = 2000
    process_list_limit: int = 100

    model_config = {"env_file": ".env", "env_prefix": ""}


settings = Settings()
