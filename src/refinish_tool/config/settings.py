"""
Centralized settings and path configuration for the refinish tool.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    # Walk up from this file to find the project root
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 4 levels up from this file (src/refinish_tool/config/settings.py)
    return Path(__file__).resolve().parent.parent.parent.parent


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    """Read an environment variable, treating blank values as unset."""
    value = os.environ.get(name, '').strip()
    return value or default


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path
    data_dir: Path

    # Order storage
    orders_csv: Path
    uploads_csv: Path
    upload_dir: Path

    # Optional price table override (key,cents CSV)
    price_table_csv: Optional[Path] = None

    # Email (Resend)
    resend_api_key: Optional[str] = None
    from_email: str = 'noreply@cmart073.com'
    admin_email: Optional[str] = None
    ship_to_address: str = 'Cmart Customization Shop'
    site_url: str = 'https://customization.cmart073.com'

    # Bot check (Turnstile)
    turnstile_secret_key: Optional[str] = None

    log_level: str = 'INFO'

    @property
    def emails_enabled(self) -> bool:
        return bool(self.resend_api_key)

    @property
    def admin_email_enabled(self) -> bool:
        return self.emails_enabled and bool(self.admin_email)

    @property
    def bot_check_enabled(self) -> bool:
        return bool(self.turnstile_secret_key)

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the project structure and environment."""
        root = project_root or get_project_root()

        data_dir = Path(_env('REFINISH_DATA_DIR', str(root / 'data')))

        # Price table override is only used when the file is present
        price_table_csv = data_dir / 'prices.csv'

        return cls(
            project_root=root,
            data_dir=data_dir,
            orders_csv=data_dir / 'orders.csv',
            uploads_csv=data_dir / 'order_uploads.csv',
            upload_dir=data_dir / 'objects',
            price_table_csv=price_table_csv if price_table_csv.exists() else None,
            resend_api_key=_env('RESEND_API_KEY'),
            from_email=_env('FROM_EMAIL', 'noreply@cmart073.com'),
            admin_email=_env('ADMIN_EMAIL'),
            ship_to_address=_env('SHIP_TO_ADDRESS', 'Cmart Customization Shop'),
            site_url=_env('SITE_URL', 'https://customization.cmart073.com').rstrip('/'),
            turnstile_secret_key=_env('TURNSTILE_SECRET_KEY'),
            log_level=_env('LOG_LEVEL', 'INFO').upper(),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reset_settings():
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
