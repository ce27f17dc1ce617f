from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env from the project root (one level above server/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Spotify app credentials
    spotify_client_id: str = ""
    spotify_client_secret: str = ""
    spotify_redirect_uri: str = "http://localhost:3000"
    spotify_scopes: str = "user-read-private,user-read-email"
    spotify_accounts_url: str = "https://accounts.spotify.com"
    spotify_api_url: str = "https://api.spotify.com/v1"

    # Lyrics provider
    lrclib_base_url: str = "https://lrclib.net"
    lrclib_user_agent: str = "LyricSnap/0.1 (FastAPI; +https://github.com/lyricsnap/lyricsnap)"

    # Client side
    proxy_base_url: str = "http://localhost:8000"
    request_timeout_seconds: float = 15.0

    # Storage
    storage_path: str = "./data/storage"

    # App settings
    cors_origins: str = "http://localhost:3000"
    max_selected_lines: int = 4
    export_pixel_ratio: int = 2
    log_level: str = "INFO"

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",")]

    @property
    def spotify_scope_list(self) -> list[str]:
        return [s.strip() for s in self.spotify_scopes.split(",") if s.strip()]

    @property
    def export_dir(self) -> Path:
        path = Path(self.storage_path) / "exports"
        path.mkdir(parents=True, exist_ok=True)
        return path


settings = Settings()
