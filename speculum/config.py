from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Dict, List


def _split_list(value: str) -> List[str]:
    return [item.strip() for item in value.replace(",", " ").split() if item.strip()]


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str
    DB_STARTUP_REQUIRED: bool = True  # Refuse to start if the database is unreachable
    DB_RETRY_AFTER_SECONDS: int = 5  # Retry-After sent with 503 while the DB is down

    # Security
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_HOURS: int = 24

    # Admin
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD_HASH: str = ""  # bcrypt hash, see scripts/hash_password.py

    # Application
    APP_NAME: str = "SpeculumX"
    APP_VERSION: str = "4.0.0"
    DEBUG: bool = False
    ALLOWED_ORIGINS: str = "http://localhost:8000"
    ALLOWED_REDIRECT_HOSTS: str = "speculumx.at"

    # Logging
    LOG_DIR: str = "./logs"
    LOG_LEVEL: str = "INFO"

    # File Upload
    UPLOAD_DIR: str = "./uploads"
    MAX_FILE_SIZE: int = 5242880  # 5MB

    # Server
    HOST: str = "0.0.0.0"  # nosec: B104
    PORT: int = 8000

    # Content Security Policy (space separated source lists)
    CSP_ENABLED: bool = True
    CSP_DEFAULT_SRC: str = "'self'"
    CSP_SCRIPT_SRC: str = (
        "'self' https://cdn.jsdelivr.net https://cdnjs.cloudflare.com"
    )
    CSP_STYLE_SRC: str = (
        "'self' https://fonts.googleapis.com https://cdn.jsdelivr.net "
        "https://cdnjs.cloudflare.com"
    )
    CSP_FONT_SRC: str = "'self' https://fonts.gstatic.com https://cdnjs.cloudflare.com"
    CSP_IMG_SRC: str = "'self' data: https: blob:"
    CSP_CONNECT_SRC: str = "'self'"
    # Known inline hashes, e.g. "'sha256-...' 'sha256-...'"
    CSP_SCRIPT_HASHES: str = ""
    CSP_STYLE_HASHES: str = ""

    @property
    def allowed_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    @property
    def allowed_redirect_hosts_list(self) -> List[str]:
        return [host.lower() for host in _split_list(self.ALLOWED_REDIRECT_HOSTS)]

    @property
    def csp_script_hashes_list(self) -> List[str]:
        return _split_list(self.CSP_SCRIPT_HASHES)

    @property
    def csp_style_hashes_list(self) -> List[str]:
        return _split_list(self.CSP_STYLE_HASHES)

    @property
    def csp_directives(self) -> Dict[str, List[str]]:
        return {
            "default-src": _split_list(self.CSP_DEFAULT_SRC),
            "script-src": _split_list(self.CSP_SCRIPT_SRC),
            "style-src": _split_list(self.CSP_STYLE_SRC),
            "font-src": _split_list(self.CSP_FONT_SRC),
            "img-src": _split_list(self.CSP_IMG_SRC),
            "connect-src": _split_list(self.CSP_CONNECT_SRC),
            "frame-src": ["'none'"],
            "object-src": ["'none'"],
            "base-uri": ["'self'"],
            "form-action": ["'self'"],
            "frame-ancestors": ["'none'"],
        }

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=True, extra="ignore"
    )


settings = Settings()  # type: ignore
