"""Value formatters for display."""


def format_ratio(value: float, decimals: int = 2) -> str:
    """
    Format a ratio such as a Jaccard coefficient or significance score.

    Args:
        value: Float value to format
        decimals: Number of decimal places

    Returns:
        Formatted string like "0.67"
    """
    return f"{value:.{decimals}f}"


def format_percentage(part: int, total: int, decimals: int = 1) -> str:
    """
    Format a share of a total as a percentage.

    Args:
        part: Partial count
        total: Total count (0 renders as 0%)
        decimals: Number of decimal places

    Returns:
        Formatted string like "15.5%"
    """
    if total <= 0:
        return f"{0:.{decimals}f}%"
    return f"{part * 100 / total:.{decimals}f}%"


def truncate(text: str, limit: int = 50) -> str:
    """
    Shorten text for display, marking the cut with an ellipsis.

    Args:
        text: Text to shorten
        limit: Maximum length of the result

    Returns:
        The text itself if short enough, otherwise its prefix plus "..."
    """
    if len(text) <= limit:
        return text
    return text[: max(0, limit - 3)] + "..."
