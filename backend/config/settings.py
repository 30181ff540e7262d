"""
Reference table settings

Values come from the environment, with a .env file loaded first for local
development. Paths are resolved lazily so importing this module never touches
the file system.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_path(name: str) -> Optional[Path]:
    value = os.getenv(name, "").strip()
    return Path(value).expanduser() if value else None


@dataclass
class ReferenceSettings:
    """Where reference data lives and how the server runs"""
    data_dir: Optional[Path] = None
    data_zip: Optional[Path] = None
    standard_tlk: str = "dialog.tlk"
    custom_tlk: str = "custom.tlk"
    export_dir: Optional[Path] = None
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"
    log_filter: str = ""
    cors_origins: list = field(default_factory=lambda: ["http://localhost:3000"])

    @classmethod
    def from_env(cls) -> "ReferenceSettings":
        origins = os.getenv("CORS_ORIGINS", "")
        return cls(
            data_dir=_env_path("NWN2_REFERENCE_DATA_DIR"),
            data_zip=_env_path("NWN2_REFERENCE_ZIP"),
            standard_tlk=os.getenv("NWN2_STANDARD_TLK", "dialog.tlk"),
            custom_tlk=os.getenv("NWN2_CUSTOM_TLK", "custom.tlk"),
            export_dir=_env_path("NWN2_EXPORT_DIR"),
            host=os.getenv("HOST", "127.0.0.1"),
            port=int(os.getenv("PORT", "8000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_filter=os.getenv("LOG_FILTER", ""),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()]
            or ["http://localhost:3000"],
        )

    def resolved_data_dir(self) -> Path:
        """Data directory, defaulting to backend/data"""
        return self.data_dir or Path(__file__).parent.parent / "data"

    def resolved_export_dir(self) -> Path:
        if self.export_dir is not None:
            self.export_dir.mkdir(parents=True, exist_ok=True)
            return self.export_dir
        from utils.paths import get_writable_dir
        return get_writable_dir("exports")


settings = ReferenceSettings.from_env()
