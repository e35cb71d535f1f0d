"""
Report definitions.

REPORT_TABLE is the registration table read once at startup: each entry pairs
a template name with the factory building its handler from a ReportEnvironment.
Add new reports here.
"""

from .statement import StatementReport, StatementModel, parse_statement

REPORT_TABLE = (
    (StatementReport.name, StatementReport),
)

__all__ = [
    'REPORT_TABLE',
    'StatementReport',
    'StatementModel',
    'parse_statement',
]
