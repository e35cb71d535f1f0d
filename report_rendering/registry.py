"""
Report Registry module.

Indexes report handlers by template name. The index is built once at startup
from a registration table and only read afterwards, so lookups need no locking.
"""

import logging
from typing import Callable, Dict, FrozenSet, Iterable, Optional, Tuple

from .errors import DuplicateReportName
from .handler import ReportEnvironment, ReportHandler
from .models import OutputFormat

logger = logging.getLogger(__name__)

ReportFactory = Callable[[ReportEnvironment], ReportHandler]

ALL_FORMATS: FrozenSet[OutputFormat] = frozenset(OutputFormat)


class ReportRegistry:
    """Mapping from template name to report handler."""

    def __init__(self):
        self._handlers: Dict[str, ReportHandler] = {}

    def register(self, name: str, handler: ReportHandler) -> None:
        """
        Register a handler under a template name.

        Raises:
            DuplicateReportName: If the name is already taken
        """
        if name in self._handlers:
            raise DuplicateReportName(name)
        self._handlers[name] = handler
        logger.info(f"Registered report handler for template: {name}")

    def initialize(
        self,
        table: Iterable[Tuple[str, ReportFactory]],
        environment: ReportEnvironment
    ) -> int:
        """
        Build every handler in the table and replace the current index.

        Running it again with the same table yields the same set of handlers.

        Returns:
            Number of registered handlers

        Raises:
            DuplicateReportName: If the table names a template twice
        """
        logger.info("Initializing report handlers")

        staged = ReportRegistry()
        for name, factory in table:
            staged.register(name, factory(environment))

        self._handlers = staged._handlers
        logger.info(f"Initialized {len(self._handlers)} report handlers")
        return len(self._handlers)

    def lookup(self, name: str) -> Optional[ReportHandler]:
        return self._handlers.get(name)

    def list_capabilities(self) -> Dict[str, FrozenSet[OutputFormat]]:
        """Supported output formats per template; every report supports all of them."""
        return {name: ALL_FORMATS for name in self._handlers}

    def __contains__(self, name: str) -> bool:
        return name in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)
