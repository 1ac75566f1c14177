"""Custom exceptions for FTOC Analyzer."""


class FtocAnalyzerError(Exception):
    """Base exception for all FTOC Analyzer errors."""

    pass


class InvalidTagError(FtocAnalyzerError):
    """Tag string is empty, blank or otherwise malformed."""

    def __init__(self, raw: object, reason: str = "tag cannot be empty"):
        self.raw = raw
        self.reason = reason
        super().__init__(f"Invalid tag {raw!r}: {reason}")


class ConfigurationError(FtocAnalyzerError):
    """Invalid threshold, severity or warning kind in the configuration."""

    pass


class ParseError(FtocAnalyzerError):
    """Error parsing a feature file."""

    pass


class UnsupportedFileError(ParseError):
    """File is not a feature file."""

    pass


class AnalysisError(FtocAnalyzerError):
    """Error during analysis."""

    pass


class AnalysisTimeoutError(AnalysisError):
    """The analysis batch did not finish within the allotted time."""

    pass


class ReportGenerationError(AnalysisError):
    """Error rendering a report."""

    pass
