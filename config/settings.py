"""
Configuration settings for the Rooming List reconciliation system.
"""
import os
from dataclasses import dataclass
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


@dataclass
class ExtractionConfig:
    """Settings for the OCR-text-to-snapshot extraction service."""
    provider: str = os.getenv("LLM_PROVIDER", "local")
    model_name: str = os.getenv("LLM_MODEL", "gemini-2.5-pro")
    api_key: str = os.getenv("GOOGLE_API_KEY", "")
    temperature: float = float(os.getenv("LLM_TEMPERATURE", "0.0"))


@dataclass
class RosterConfig:
    """Roster aggregation settings."""
    # Hotel-name substring used by the solo-traveler metric
    solo_hotel_target: str = os.getenv("SOLO_HOTEL_TARGET", "venetur margarita")
    title: str = os.getenv("ROSTER_TITLE", "RoomingList 2025")

    # Fallback labels for records without hotel/agency
    unknown_label: str = "Unknown"
    no_agency_label: str = "Sin Agencia"


@dataclass
class AppConfig:
    """Application configuration settings."""
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")


extraction_config = ExtractionConfig()
roster_config = RosterConfig()
app_config = AppConfig()
