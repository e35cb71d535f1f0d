from __future__ import annotations

import pytest

from report_rendering import (
    REPORT_TABLE,
    DuplicateReportName,
    OutputFormat,
    ReportHandler,
    ReportRegistry,
    StatementReport,
)


def test_default_table_registers_statement(environment):
    registry = ReportRegistry()

    count = registry.initialize(REPORT_TABLE, environment)

    assert count == 1
    assert "statement" in registry
    handler = registry.lookup("statement")
    assert isinstance(handler, StatementReport)
    assert isinstance(handler, ReportHandler)


def test_lookup_unknown_returns_none(environment):
    registry = ReportRegistry()
    registry.initialize(REPORT_TABLE, environment)

    assert registry.lookup("nonexistent") is None


def test_register_duplicate_name_fails(environment):
    registry = ReportRegistry()
    registry.register("statement", StatementReport(environment))

    with pytest.raises(DuplicateReportName):
        registry.register("statement", StatementReport(environment))


def test_duplicate_in_table_leaves_registry_untouched(environment):
    registry = ReportRegistry()
    registry.initialize(REPORT_TABLE, environment)
    table = (("statement", StatementReport), ("statement", StatementReport))

    with pytest.raises(DuplicateReportName):
        registry.initialize(table, environment)

    assert len(registry) == 1


def test_initialize_is_idempotent(environment):
    registry = ReportRegistry()

    registry.initialize(REPORT_TABLE, environment)
    registry.initialize(REPORT_TABLE, environment)

    assert len(registry) == 1
    assert registry.list_capabilities() == {"statement": frozenset(OutputFormat)}


def test_every_report_supports_all_formats(environment):
    registry = ReportRegistry()
    registry.register("statement", StatementReport(environment))
    registry.register("statement_copy", StatementReport(environment))

    capabilities = registry.list_capabilities()

    assert set(capabilities) == {"statement", "statement_copy"}
    for formats in capabilities.values():
        assert formats == {OutputFormat.HTML, OutputFormat.CSV, OutputFormat.PDF}
