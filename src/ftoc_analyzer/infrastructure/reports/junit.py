"""JUnit XML reports for CI servers."""

import re
from typing import Optional
from xml.etree.ElementTree import Element, SubElement, tostring

from ftoc_analyzer.core.models.analysis import AnalysisReport, Warning, sort_warnings
from ftoc_analyzer.core.models.concordance import TagConcordance
from ftoc_analyzer.core.models.configuration import Thresholds
from ftoc_analyzer.core.models.enums import Severity
from ftoc_analyzer.infrastructure.reports.base import ConcordanceView
from ftoc_analyzer.shared.formatters import format_ratio

SUITE_NAME = "ftoc-analysis"

_XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'

# Code points XML 1.0 does not allow, even escaped (tab, LF and CR are fine)
_INVALID_XML_CHARS = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def xml_safe(text: str) -> str:
    """Replace characters that cannot appear in an XML 1.0 document."""
    return _INVALID_XML_CHARS.sub("\ufffd", text)


def _element(
    tag: str, parent: Optional[Element] = None, text: Optional[str] = None, **attrs: str
) -> Element:
    attrs = {key: xml_safe(value) for key, value in attrs.items()}
    element = Element(tag, attrs) if parent is None else SubElement(parent, tag, attrs)
    if text is not None:
        element.text = xml_safe(text)
    return element


class JUnitXmlFormatter:
    """One synthetic ``<testsuite>`` with a ``<testcase>`` per warning.

    ERROR and WARNING findings are ``<failure>`` elements; INFO findings
    are reported as passing test cases with their message in
    ``<system-out>``. Text from feature files is cleaned of characters
    XML forbids, so the output always parses.
    """

    def __init__(self, thresholds: Optional[Thresholds] = None):
        self.thresholds = thresholds

    def render_warnings(self, warnings: list[Warning]) -> str:
        return self._dump(self._build_suite(sort_warnings(warnings), SUITE_NAME))

    def render_concordance(self, concordance: TagConcordance) -> str:
        view = ConcordanceView.of(concordance, self.thresholds)
        suite = _element(
            "testsuite",
            name=f"{SUITE_NAME}.concordance",
            tests=str(view.unique_tags),
            failures="0",
            errors="0",
        )
        properties = _element("properties", suite)
        _element("property", properties, name="uniqueTags", value=str(view.unique_tags))
        _element("property", properties, name="totalOccurrences", value=str(view.total_occurrences))
        _element(
            "property",
            properties,
            name="significantTags",
            value=",".join(tag.name for tag in view.significant),
        )
        for row in view.rows:
            case = _element("testcase", suite, classname="ftoc.tags", name=row.tag.name)
            _element(
                "system-out",
                case,
                text=(
                    f"count={row.count} category={row.tag.category.value} "
                    f"significance={format_ratio(row.significance)}"
                ),
            )
        return self._dump(suite)

    def render_report(self, report: AnalysisReport) -> str:
        suite = self._build_suite(sort_warnings(report.warnings), SUITE_NAME)
        properties = _element("properties")
        for name, value in (
            ("features", report.feature_count),
            ("scenarios", report.scenario_count),
            ("uniqueTags", report.concordance.unique_tag_count),
        ):
            _element("property", properties, name=name, value=str(value))
        suite.insert(0, properties)
        return self._dump(suite)

    def _build_suite(self, warnings: list[Warning], name: str) -> Element:
        failures = sum(1 for w in warnings if w.severity is not Severity.INFO)
        suite = _element(
            "testsuite",
            name=name,
            tests=str(len(warnings)),
            failures=str(failures),
            errors="0",
        )
        for warning in warnings:
            case = _element(
                "testcase",
                suite,
                classname=f"ftoc.{warning.type.family.value}",
                name=warning.type.value,
            )
            details = [warning.message]
            if warning.location:
                details.append(f"Location: {warning.location}")
            details.extend(f"- {r}" for r in warning.recommendations)

            if warning.severity is Severity.INFO:
                _element("system-out", case, text="\n".join(details))
            else:
                _element(
                    "failure",
                    case,
                    text="\n".join(details),
                    message=warning.message,
                    type=warning.severity.value,
                )
        return suite

    def _dump(self, element: Element) -> str:
        return _XML_DECLARATION + tostring(element, encoding="unicode") + "\n"
