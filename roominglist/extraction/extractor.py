"""
Snapshot extraction - provider-agnostic conversion of OCR text into booking snapshots.
"""
import json
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from ..utils.logger import get_logger, RosterLogger
from ..utils.models import BookingSnapshot, ExtractionError, SOURCE_FIELD_ALIASES
from config.settings import extraction_config

REQUIRED_FIELDS = (
    'flight_date', 'email_timestamp', 'status', 'reservation_code', 'full_name',
    'passport_number', 'hotel',
)

EXTRACTION_PROMPT = """
You are an expert data extraction system. Analyse the following unstructured text, which holds booking records for a travel agency.
The text is one large table where every row is the record of one passenger. Some rows may be misaligned or wrapped over several lines.

Your task:
1. Read every row and extract every booking detail available for each passenger.
2. The source columns are (in Spanish): Fecha Vuelo, Fecha Hora Correo, Estatus, Codigo Reserva, Genero, Nombre Completo, Fecha Nacimiento, Edad, Pasaporte, Nacionalidad, Agencia, Fecha Inicio, Fecha Fin, Noches, Hotel, Plan de Comidas, Alojamiento, Observaciones. The 'Fecha Nacimiento' header may be misspelled as 'echa Nacimient'.
3. Merge the information into a single structured record per passenger.
4. The passport is sometimes split into two numbers. Join them into a single string.
5. Column alignment may be imperfect. Use the context and the header names to attach values to the right column.
6. Some remarks (Observaciones) are empty. Use an empty string for them.
7. Normalise every date (flight date, email timestamp, birth date, check-in, check-out) to ISO "YYYY-MM-DD", or "YYYY-MM-DD HH:mm:ss" when a time is present. Dates written DD.MM.YY are in the 2000s (25 means 2025).
8. Return ONLY a JSON array of objects with these keys:
   flight_date, email_timestamp, status (NEW BOOKING, AMEND or CANCELLATION), reservation_code, gender (Mr. or Mrs.),
   full_name, birth_date, age (integer), passport_number, nationality, agency, check_in, check_out, nights (integer),
   hotel, meal_plan, accommodation, remarks.

Here is the data:
"""


_PAGE_HEADER = re.compile(r'^Page \d+:[ \t]*$', re.MULTILINE)


def combine_pages(pages: Sequence[str]) -> str:
    """Join OCR pages into one extraction input."""
    return "\n\n".join(f"Page {i}:\n{page}" for i, page in enumerate(pages, start=1))


class ExtractionProvider(ABC):
    """Abstract base class for extraction providers."""

    @abstractmethod
    def extract_snapshots(self, text: str) -> List[Any]:
        """Return the raw JSON items extracted from OCR text."""
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        """Get the provider name."""
        pass


def _parse_json_payload(raw: str) -> Any:
    text = raw.strip()
    # Models sometimes wrap JSON in a markdown fence
    if text.startswith("```"):
        text = text.strip("`")
        if text.lower().startswith("json"):
            text = text[4:]
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ExtractionError(f"Extraction response is not valid JSON: {e}") from e


class MockExtractionProvider(ExtractionProvider):
    """
    Provider for testing and local development.

    Every page is expected to hold a JSON snapshot array already; arrays of
    a multi-page input are concatenated in page order.
    """

    def __init__(self, model_name: str = "mock-model"):
        self.model_name = model_name
        self.logger = get_logger("mock_extraction")

    def extract_snapshots(self, text: str) -> List[Any]:
        self.logger.info("Reading snapshots from JSON input", text_length=len(text))
        chunks = [chunk for chunk in _PAGE_HEADER.split(text) if chunk.strip()]
        if len(chunks) <= 1:
            return _parse_json_payload(chunks[0] if chunks else text)

        items: List[Any] = []
        for page, chunk in enumerate(chunks, start=1):
            payload = _parse_json_payload(chunk)
            if not isinstance(payload, list):
                raise ExtractionError(f"Page {page} does not hold a JSON array")
            items.extend(payload)
        return items

    def get_provider_name(self) -> str:
        return "mock"


class GeminiExtractionProvider(ExtractionProvider):
    """Google Gemini provider implementation."""

    def __init__(self, api_key: str, model_name: str = "gemini-2.5-pro", temperature: float = 0.0):
        self.api_key = api_key
        self.model_name = model_name
        self.temperature = temperature
        self.logger = get_logger("gemini_extraction")

        try:
            import google.generativeai as genai
        except ImportError:
            raise ImportError("Google Generative AI package not installed. Run: pip install google-generativeai")
        genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(model_name)

    def extract_snapshots(self, text: str) -> List[Any]:
        """Generate structured snapshots using the Gemini API."""
        try:
            response = self.model.generate_content(
                f"{EXTRACTION_PROMPT}\n{text}",
                generation_config={
                    "response_mime_type": "application/json",
                    "temperature": self.temperature,
                },
            )
            raw = response.text
        except Exception as e:
            self.logger.error("Gemini API error", error=str(e))
            raise ExtractionError(f"Gemini extraction failed: {e}") from e

        self.logger.info("Gemini extraction response", model=self.model_name, response_length=len(raw))
        return _parse_json_payload(raw)

    def get_provider_name(self) -> str:
        return "gemini"


class SnapshotExtractor:
    """Runs the configured provider and validates its output into snapshots."""

    def __init__(self, provider: Optional[ExtractionProvider] = None, roster_logger: Optional[RosterLogger] = None):
        self.logger = get_logger("snapshot_extractor")
        self.roster_logger = roster_logger or RosterLogger(self.logger)
        self.provider = provider or self._initialize_provider()

    def _initialize_provider(self) -> ExtractionProvider:
        """Initialize the configured extraction provider."""
        provider_name = extraction_config.provider.lower()

        try:
            if provider_name == "gemini":
                if not extraction_config.api_key:
                    raise ValueError("GOOGLE_API_KEY not found in environment")
                provider = GeminiExtractionProvider(
                    extraction_config.api_key,
                    extraction_config.model_name,
                    extraction_config.temperature,
                )
            else:  # local/mock
                provider = MockExtractionProvider()

            self.logger.info(f"Initialized {provider_name} provider", model=extraction_config.model_name)
            return provider

        except Exception as e:
            self.logger.warning(f"Failed to initialize {provider_name}, falling back to mock", error=str(e))
            return MockExtractionProvider("fallback-model")

    def extract(self, text: str) -> List[BookingSnapshot]:
        """
        Extract booking snapshots from OCR text.

        Raises:
            ExtractionError: the provider failed or returned malformed data
        """
        try:
            items = self.provider.extract_snapshots(text)
        except ExtractionError as e:
            self.roster_logger.log_error(e, "Extraction failed")
            raise
        except Exception as e:
            self.roster_logger.log_error(e, "Extraction failed")
            raise ExtractionError(f"Snapshot extraction failed: {e}") from e

        snapshots = self.to_snapshots(items)
        self.roster_logger.log_extraction(self.provider.get_provider_name(), len(snapshots))
        return snapshots

    def to_snapshots(self, items: Any) -> List[BookingSnapshot]:
        """
        Validate a raw payload and build snapshots from it.

        The payload must be a list of objects. Objects missing fields are
        defaulted rather than rejected.
        """
        if not isinstance(items, list):
            error = ExtractionError(f"Extraction response is not an array (got {type(items).__name__})")
            self.roster_logger.log_error(error, "Malformed batch")
            raise error

        snapshots = []
        for index, item in enumerate(items):
            if not isinstance(item, dict):
                error = ExtractionError(f"Item {index} is not an object (got {type(item).__name__})")
                self.roster_logger.log_error(error, "Malformed batch")
                raise error

            missing = self._missing_fields(item)
            if missing:
                self.roster_logger.log_malformed_item(index, missing)
            snapshots.append(BookingSnapshot.from_dict(item))
        return snapshots

    @staticmethod
    def _missing_fields(item: Dict[str, Any]) -> List[str]:
        present = {SOURCE_FIELD_ALIASES.get(k, k) for k, v in item.items() if v not in (None, "")}
        return [name for name in REQUIRED_FIELDS if name not in present]
