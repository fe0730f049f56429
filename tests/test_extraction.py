"""
Unit tests for snapshot extraction.
"""
import json
import sys
from unittest.mock import Mock, MagicMock, patch

import pytest

from roominglist.extraction.extractor import (
    MockExtractionProvider,
    GeminiExtractionProvider,
    SnapshotExtractor,
    combine_pages
)
from roominglist.utils.models import ExtractionError

ITEMS = [
    {
        "flight_date": "2025-03-05",
        "email_timestamp": "2025-01-02 10:00:00",
        "status": "NEW BOOKING",
        "reservation_code": "R1",
        "full_name": "Juan Perez",
        "passport_number": "P1",
        "hotel": "Hotel A",
        "nights": 4,
    },
    {
        "flight_date": "2025-03-05",
        "email_timestamp": "2025-01-02 10:00:00",
        "status": "NEW BOOKING",
        "reservation_code": "R1",
        "full_name": "Ana Perez",
        "passport_number": "P2",
        "hotel": "Hotel A",
        "nights": 4,
    },
]


@pytest.fixture
def fake_genai():
    """A stand-in google.generativeai module."""
    genai = MagicMock()
    google = MagicMock()
    google.generativeai = genai
    with patch.dict(sys.modules, {"google": google, "google.generativeai": genai}):
        yield genai


class TestCombinePages:
    """Test cases for combine_pages."""

    def test_page_headers(self):
        """Pages are numbered from 1 and separated by a blank line."""
        text = combine_pages(["first", "second"])

        assert text == "Page 1:\nfirst\n\nPage 2:\nsecond"

    def test_single_page(self):
        """A single page still gets its header."""
        assert combine_pages(["only"]) == "Page 1:\nonly"


class TestMockExtractionProvider:
    """Test cases for MockExtractionProvider."""

    def test_initialization(self):
        """Test MockExtractionProvider initialization."""
        provider = MockExtractionProvider("test-model")

        assert provider.model_name == "test-model"
        assert provider.get_provider_name() == "mock"

    def test_plain_json(self):
        """Raw JSON input is returned as parsed items."""
        provider = MockExtractionProvider()

        assert provider.extract_snapshots(json.dumps(ITEMS)) == ITEMS

    def test_fenced_json(self):
        """Markdown fences around the JSON are ignored."""
        provider = MockExtractionProvider()

        assert provider.extract_snapshots(f"```json\n{json.dumps(ITEMS)}\n```") == ITEMS

    def test_multiple_pages(self):
        """Arrays from several pages are concatenated in page order."""
        provider = MockExtractionProvider()
        text = combine_pages([json.dumps(ITEMS[:1]), json.dumps(ITEMS[1:])])

        assert provider.extract_snapshots(text) == ITEMS

    def test_invalid_json(self):
        """Text that is not JSON raises ExtractionError."""
        provider = MockExtractionProvider()

        with pytest.raises(ExtractionError):
            provider.extract_snapshots("Fecha Vuelo | Estatus | ...")

    def test_empty_input(self):
        """Empty input raises ExtractionError."""
        with pytest.raises(ExtractionError):
            MockExtractionProvider().extract_snapshots("")


class TestGeminiExtractionProvider:
    """Test cases for GeminiExtractionProvider."""

    def test_initialization(self, fake_genai):
        """The client is configured with the key and model."""
        provider = GeminiExtractionProvider("test-key", "gemini-test", 0.0)

        fake_genai.configure.assert_called_once_with(api_key="test-key")
        fake_genai.GenerativeModel.assert_called_once_with("gemini-test")
        assert provider.get_provider_name() == "gemini"

    def test_extract_snapshots(self, fake_genai):
        """The model is asked for JSON and its response parsed."""
        fake_genai.GenerativeModel.return_value.generate_content.return_value = Mock(text=json.dumps(ITEMS))
        provider = GeminiExtractionProvider("test-key")

        items = provider.extract_snapshots("Page 1:\nraw table")

        assert items == ITEMS
        args, kwargs = fake_genai.GenerativeModel.return_value.generate_content.call_args
        assert "raw table" in args[0]
        assert kwargs["generation_config"]["response_mime_type"] == "application/json"

    def test_api_error(self, fake_genai):
        """Client errors surface as ExtractionError."""
        fake_genai.GenerativeModel.return_value.generate_content.side_effect = RuntimeError("quota exceeded")
        provider = GeminiExtractionProvider("test-key")

        with pytest.raises(ExtractionError, match="quota exceeded"):
            provider.extract_snapshots("text")


class TestSnapshotExtractor:
    """Test cases for SnapshotExtractor."""

    def test_default_provider_is_mock(self):
        """The local provider is used without configuration."""
        with patch('roominglist.extraction.extractor.extraction_config') as config:
            config.provider = "local"
            extractor = SnapshotExtractor()

        assert extractor.provider.get_provider_name() == "mock"

    def test_gemini_without_key_falls_back(self):
        """A missing API key falls back to the mock provider."""
        with patch('roominglist.extraction.extractor.extraction_config') as config:
            config.provider = "gemini"
            config.api_key = ""
            extractor = SnapshotExtractor()

        assert isinstance(extractor.provider, MockExtractionProvider)
        assert extractor.provider.model_name == "fallback-model"

    def test_gemini_with_key(self, fake_genai):
        """A configured key selects the Gemini provider."""
        with patch('roominglist.extraction.extractor.extraction_config') as config:
            config.provider = "gemini"
            config.api_key = "test-key"
            config.model_name = "gemini-test"
            config.temperature = 0.0
            extractor = SnapshotExtractor()

        assert extractor.provider.get_provider_name() == "gemini"

    def test_extract(self):
        """Extraction yields snapshots and updates the load counters."""
        extractor = SnapshotExtractor(provider=MockExtractionProvider())

        snapshots = extractor.extract(json.dumps(ITEMS))

        assert [s.passport_number for s in snapshots] == ["P1", "P2"]
        assert extractor.roster_logger.stats['snapshots_received'] == 2

    def test_provider_failure_is_wrapped(self):
        """Unexpected provider errors become ExtractionError."""
        provider = Mock()
        provider.extract_snapshots.side_effect = ConnectionError("network down")
        extractor = SnapshotExtractor(provider=provider)

        with pytest.raises(ExtractionError, match="network down"):
            extractor.extract("text")
        assert extractor.roster_logger.stats['errors'] == 1

    def test_non_list_payload(self):
        """A JSON object instead of an array fails the batch."""
        extractor = SnapshotExtractor(provider=MockExtractionProvider())

        with pytest.raises(ExtractionError, match="not an array"):
            extractor.extract(json.dumps({"records": ITEMS}))

    def test_non_object_item(self):
        """A non-object item fails the whole batch."""
        extractor = SnapshotExtractor(provider=MockExtractionProvider())

        with pytest.raises(ExtractionError, match="Item 1"):
            extractor.to_snapshots([ITEMS[0], "garbage"])

    def test_missing_fields_are_defaulted(self):
        """Objects missing fields are kept with defaults and reported."""
        extractor = SnapshotExtractor(provider=MockExtractionProvider())

        snapshots = extractor.to_snapshots([{"reservation_code": "R1"}])

        assert snapshots[0].reservation_code == "R1"
        assert snapshots[0].hotel == ""
        assert extractor.roster_logger.stats['malformed_items'] == 1

    def test_empty_batch(self):
        """An empty array is a valid, empty batch."""
        extractor = SnapshotExtractor(provider=MockExtractionProvider())

        assert extractor.extract("[]") == []
