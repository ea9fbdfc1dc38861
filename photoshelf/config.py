"""PhotoShelf Server Configuration."""

import secrets
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Server
    server_name: str = "PhotoShelf Server"
    debug: bool = False
    log_level: str = "INFO"

    # Paths
    data_dir: Path = Path.home() / "photoshelf" / "data"

    # Database
    db_path: Path = Path.home() / "photoshelf" / "data" / "photoshelf.db"
    db_url: str = ""  # overrides db_path when set
    db_busy_timeout: float = 15.0  # seconds to wait on a locked SQLite database

    # JWT (identity tokens are issued elsewhere; we only verify them)
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440  # 24 hours

    # Listing
    default_page_size: int = 100
    max_page_size: int = 1000
    memory_lane_limit: int = 20

    model_config = {"env_prefix": "PHOTOSHELF_"}

    @property
    def database_url(self) -> str:
        return self.db_url or f"sqlite:///{self.db_path}"

    def ensure_dirs(self) -> None:
        """Create all required directories."""
        for d in [self.data_dir, self.db_path.parent]:
            d.mkdir(parents=True, exist_ok=True)

    def ensure_secrets(self) -> None:
        """Generate the JWT secret if not set, persist to file so it survives restarts."""
        secrets_file = self.data_dir / ".secrets"
        saved = {}
        if secrets_file.exists():
            for line in secrets_file.read_text().strip().splitlines():
                if "=" in line:
                    k, v = line.split("=", 1)
                    saved[k.strip()] = v.strip()

        if not self.jwt_secret:
            self.jwt_secret = saved.get("jwt_secret", "") or secrets.token_urlsafe(32)

        secrets_file.write_text(f"jwt_secret={self.jwt_secret}\n")


settings = Settings()
settings.ensure_dirs()
settings.ensure_secrets()
