"""Configuration management for the COVID query layer."""
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Config:
    """Application configuration."""

    # Project paths
    ROOT_DIR = Path(__file__).parent.parent
    DATA_DIR = Path(os.getenv("COVID_DATA_DIR", str(ROOT_DIR / "data")))

    # Input tables
    CASES_FILE: str = os.getenv("COVID_CASES_FILE", "covid_deaths.csv")
    VACCINATIONS_FILE: str = os.getenv("COVID_VACCINATIONS_FILE", "covid_vaccinations.csv")
    CSV_SEPARATOR: str = os.getenv("COVID_CSV_SEPARATOR", ",")

    # Query defaults
    MIN_CASES: int = int(os.getenv("COVID_MIN_CASES", "1000"))
    TOP_LIMIT: int = int(os.getenv("COVID_TOP_LIMIT", "10"))
    MIN_AVG_VACCINATION_RATE: float = float(os.getenv("COVID_MIN_AVG_VACCINATION_RATE", "20"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE: Optional[str] = os.getenv("LOG_FILE")

    @classmethod
    def validate(cls) -> None:
        """Validate numeric settings."""
        if cls.TOP_LIMIT < 0:
            raise ValueError(f"COVID_TOP_LIMIT must be non-negative, got {cls.TOP_LIMIT}")
        if len(cls.CSV_SEPARATOR) != 1:
            raise ValueError(f"COVID_CSV_SEPARATOR must be a single character, got {cls.CSV_SEPARATOR!r}")

    @property
    def cases_path(self) -> Path:
        return self.DATA_DIR / self.CASES_FILE

    @property
    def vaccinations_path(self) -> Path:
        return self.DATA_DIR / self.VACCINATIONS_FILE

    @property
    def log_path(self) -> Optional[Path]:
        return Path(self.LOG_FILE) if self.LOG_FILE else None


config = Config()
