# ============================================================================
# src/medicine_resolver/config/base_config.py
# ============================================================================
"""
Base Configuration
- Project root
- Data directory
- Medicine catalog database
"""

from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings

class BaseSettingsConfig(BaseSettings):
    # Root project directory
    PROJECT_ROOT: Path = Field(
        default_factory=lambda: Path(__file__).parent.parent.parent.parent,
        description="Root directory of the project"
    )

    DATA_DIR: Path = Field(
        default=Path("data/medicines"),
        description="Directory holding the medicine catalog database and CSV exports"
    )

    MEDICINE_DB_PATH: Path = Field(
        default=Path("data/medicines/medicines.db"),
        description="SQLite database with the med_details catalog table"
    )

    def resolve_path(self, path: Path) -> Path:
        """Resolve a relative path against the project root"""
        return path if path.is_absolute() else self.PROJECT_ROOT / path

    def get_db_path(self) -> Path:
        """Absolute path of the medicine catalog database"""
        return self.resolve_path(self.MEDICINE_DB_PATH)

    def create_directories(self):
        """Create the data directory if it doesn't exist"""
        self.resolve_path(self.DATA_DIR).mkdir(parents=True, exist_ok=True)

# Global instance
base_settings = BaseSettingsConfig()
