"""
Tests for the structured logger.
"""

import pytest
from loguru import logger

from huepalette.utils.logging import get_logger


@pytest.fixture
def captured_records():
    """Collect loguru records emitted through the structured logger."""
    structured = get_logger()
    records = []
    sink_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield structured, records
    logger.remove(sink_id)


class TestStructuredLogger:
    """Test level routing and extra binding"""

    @pytest.mark.parametrize("method,level", [
        ("debug", "DEBUG"),
        ("info", "INFO"),
        ("warning", "WARNING"),
        ("error", "ERROR"),
    ])
    def test_level_routing(self, captured_records, method, level):
        structured, records = captured_records
        getattr(structured, method)("palette ready")
        assert records[-1]["level"].name == level
        assert records[-1]["message"] == "palette ready"

    def test_extra_is_bound(self, captured_records):
        structured, records = captured_records
        structured.info("decoded", extra={"request_id": "pal-1", "ms_decode": 1.5})
        assert records[-1]["extra"]["request_id"] == "pal-1"
        assert records[-1]["extra"]["ms_decode"] == 1.5

    def test_without_extra(self, captured_records):
        structured, records = captured_records
        structured.warning("no extra")
        assert records[-1]["extra"] == {}

    def test_record_points_at_caller(self, captured_records):
        structured, records = captured_records
        structured.info("from test")
        assert records[-1]["function"] == "test_record_points_at_caller"
