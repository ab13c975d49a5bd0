"""Tests for correlation-aware logging and diagnostics."""

import logging

import pytest

from xmlx.shared import (
    BuildMetrics,
    CorrelationLogger,
    DiagnosticEntry,
    DiagnosticSeverity,
    get_logger,
)


class TestCorrelationLogger:
    """Test correlation fields on emitted records."""

    def test_records_carry_correlation_fields(self, caplog):
        """Test component and correlation ID are attached as extras."""
        logger = get_logger("xmlx.tests", "req-1", "node_builder")

        with caplog.at_level(logging.DEBUG, logger="xmlx.tests"):
            logger.debug("building", extra={"root": "a"})

        record = caplog.records[-1]
        assert record.component == "node_builder"
        assert record.correlation_id == "req-1"
        assert record.root == "a"

    def test_component_defaults_to_module_name(self):
        """Test default component naming."""
        logger = CorrelationLogger("xmlx.tree.builder")
        assert logger.component == "builder"
        assert logger.correlation_id is None

    def test_warning_level(self, caplog):
        """Test warnings are emitted at WARNING level."""
        logger = get_logger("xmlx.tests", None, "source")

        with caplog.at_level(logging.WARNING, logger="xmlx.tests"):
            logger.debug("hidden")
            logger.warning("shown")

        assert [record.getMessage() for record in caplog.records] == ["shown"]
        assert caplog.records[0].levelno == logging.WARNING


class TestDiagnosticEntry:
    """Test diagnostic entry validation and serialization."""

    def test_to_dict_omits_empty_fields(self):
        """Test dictionary conversion."""
        entry = DiagnosticEntry(DiagnosticSeverity.WARNING, "truncated", "node_builder")
        assert entry.to_dict() == {
            "severity": "WARNING",
            "message": "truncated",
            "component": "node_builder",
        }

    def test_to_dict_includes_details(self):
        """Test details and position are copied."""
        entry = DiagnosticEntry(
            DiagnosticSeverity.ERROR,
            "bad",
            "source",
            position={"line": 3, "column": 1},
            details={"code": 76},
        )
        data = entry.to_dict()
        assert data["position"] == {"line": 3, "column": 1}
        assert data["details"] == {"code": 76}

    def test_empty_message_rejected(self):
        """Test message validation."""
        with pytest.raises(ValueError, match="message cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.INFO, "", "source")

    def test_empty_component_rejected(self):
        """Test component validation."""
        with pytest.raises(ValueError, match="component cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.INFO, "msg", "")


class TestBuildMetrics:
    """Test derived metric values."""

    def test_rates(self):
        """Test per-second rates."""
        metrics = BuildMetrics(processing_time_ms=500.0, tokens_consumed=10, elements_built=4)
        assert metrics.tokens_per_second == pytest.approx(20.0)
        assert metrics.elements_per_second == pytest.approx(8.0)

    def test_rates_without_time(self):
        """Test zero processing time gives zero rates."""
        metrics = BuildMetrics(tokens_consumed=10)
        assert metrics.tokens_per_second == 0.0
        assert metrics.elements_per_second == 0.0
