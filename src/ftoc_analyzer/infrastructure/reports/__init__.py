"""Report formatters for FTOC Analyzer."""

import logging
from typing import Optional, Union

from ftoc_analyzer.core.models.analysis import AnalysisReport, Warning
from ftoc_analyzer.core.models.concordance import TagConcordance
from ftoc_analyzer.core.models.configuration import AnalysisConfig, Thresholds
from ftoc_analyzer.core.models.enums import ReportFormat
from ftoc_analyzer.infrastructure.reports.base import NO_ISSUES, ReportFormatter
from ftoc_analyzer.infrastructure.reports.html import HtmlFormatter
from ftoc_analyzer.infrastructure.reports.json_report import JsonFormatter, concordance_from_dict
from ftoc_analyzer.infrastructure.reports.junit import JUnitXmlFormatter
from ftoc_analyzer.infrastructure.reports.markdown import MarkdownFormatter
from ftoc_analyzer.infrastructure.reports.plain import PlainTextFormatter
from ftoc_analyzer.shared.exceptions import FtocAnalyzerError, ReportGenerationError

logger = logging.getLogger(__name__)

FORMATTERS: dict[ReportFormat, type] = {
    ReportFormat.PLAIN_TEXT: PlainTextFormatter,
    ReportFormat.MARKDOWN: MarkdownFormatter,
    ReportFormat.HTML: HtmlFormatter,
    ReportFormat.JSON: JsonFormatter,
    ReportFormat.JUNIT_XML: JUnitXmlFormatter,
}

ReportData = Union[list[Warning], tuple[Warning, ...], TagConcordance, AnalysisReport]


def get_formatter(
    fmt: Union[ReportFormat, str], thresholds: Optional[Thresholds] = None
) -> ReportFormatter:
    """Return a formatter for a format or its name ("plain", "json", ...).

    ``thresholds`` set the significance cutoff and similar-tag limits of
    concordance sections (defaults when None).

    Raises:
        ReportGenerationError: If the format is unknown
    """
    try:
        report_format = ReportFormat(fmt.lower() if isinstance(fmt, str) else fmt)
    except ValueError:
        raise ReportGenerationError(
            f"Unknown report format: {fmt!r}. Use one of: "
            + ", ".join(f.value for f in ReportFormat)
        ) from None
    return FORMATTERS[report_format](thresholds=thresholds)


def format_report(
    data: ReportData,
    fmt: Union[ReportFormat, str],
    config: Optional[AnalysisConfig] = None,
) -> str:
    """Render warnings, a concordance or a full analysis report.

    The thresholds of ``config`` apply to concordance sections.

    Raises:
        ReportGenerationError: If the format is unknown, the data is of an
            unsupported type or the formatter fails
    """
    formatter = get_formatter(fmt, config.thresholds if config is not None else None)
    try:
        if isinstance(data, AnalysisReport):
            return formatter.render_report(data)
        if isinstance(data, TagConcordance):
            return formatter.render_concordance(data)
        if isinstance(data, (list, tuple)) and all(isinstance(w, Warning) for w in data):
            return formatter.render_warnings(list(data))
    except FtocAnalyzerError:
        raise
    except Exception as e:
        logger.debug("Formatter %s failed", type(formatter).__name__, exc_info=True)
        raise ReportGenerationError(f"Could not render {fmt} report: {e}") from e
    raise ReportGenerationError(f"Cannot render {type(data).__name__} as a report")


__all__ = [
    "FORMATTERS",
    "NO_ISSUES",
    "ReportFormatter",
    "PlainTextFormatter",
    "MarkdownFormatter",
    "HtmlFormatter",
    "JsonFormatter",
    "concordance_from_dict",
    "JUnitXmlFormatter",
    "get_formatter",
    "format_report",
]
