"""Step wording patterns used by the anti-pattern analyzer.

All patterns are matched case-insensitively against the step text
(without its Given/When/Then keyword).
"""

# =========================
# UI-FOCUSED WORDING
# =========================

UI_PATTERNS = (
    r"click(s|ed|ing)?\s+(on\s+)?the\s+",
    r"select(s|ed|ing)?\s+(from\s+)?the\s+",
    r"enter(s|ed|ing)?\s+.+\s+into\s+the\s+",
    r"type(s|d|ing)?\s+.+\s+into\s+the\s+",
    r"navigate(s|d)?\s+to\s+",
    r"navigating\s+to\s+",
    r"scroll(s|ed|ing)?\s+(down|up|to)\b",
    r"hover(s|ed|ing)?\s+over\s+the\s+",
    r"drag(s|ged|ging)?\s+.+\s+to\s+",
    r"check(s|ed|ing)?\s+the\s+checkbox",
    r"upload(s|ed|ing)?\s+(a\s+|the\s+)?file",
)

# =========================
# IMPLEMENTATION DETAILS
# =========================

# HTTP/API wording, selectors, storage and timing
IMPLEMENTATION_PATTERNS = (
    r"\bjs\b|javascript",
    r"\bcss\b|stylesheet",
    r"\bapi\s+endpoint",
    r"\bhttp\b|\burl\b|\buri\b",
    r"\b(get|post|put|patch|delete)\s+request\b",
    r"\bstatus\s+code\b|\b[1-5]\d\d\s+(ok|created|error)\b",
    r"\bdatabase\b|\bsql\b|\bquery\b",
    r"\belement\s+id\b|\bxpath\b|\bcss\s+selector\b",
    r"\bwait\s+for\b|\btimeout\b|\bdelay\b|\bsleep\b",
    r"\b\d+\s*(ms|milliseconds|seconds)\b",
)

# =========================
# AMBIGUOUS LANGUAGE
# =========================

PRONOUNS = ("it", "they", "them", "this", "that", "these", "those")

PRONOUN_PATTERN = r"\b(" + "|".join(PRONOUNS) + r")\b"

# Words that never act as the noun a pronoun could refer back to
NON_NOUN_WORDS = frozenset({
    "i", "we", "you", "he", "she", "a", "an", "the", "and", "or", "but",
    "is", "am", "are", "was", "were", "be", "been", "do", "does", "did",
    "have", "has", "had", "will", "should", "can", "must", "not", "to",
    "of", "in", "on", "at", "for", "with", "from", "into", "by", "see",
    "check", "verify", "click", "open", "close", "submit", "save",
    *PRONOUNS,
})

PRESENT_TENSE_PATTERN = (
    r"\b(i|user|we|they|he|she)\s+"
    r"(am|is|are|do|does|have|has|click|clicks|select|selects|enter|enters"
    r"|navigate|navigates|see|sees|view|views|open|opens|submit|submits)\b"
)

PAST_TENSE_PATTERN = (
    r"\b(i|user|we|they|he|she)\s+"
    r"(was|were|did|had|clicked|selected|entered|navigated|saw|viewed|opened|submitted)\b"
)

FUTURE_TENSE_PATTERN = r"\bwill\s+(not\s+)?\w+"

CONJUNCTION_PATTERN = r"\b(and|but|or)\b"

# Conjunctions only join clauses when at least this many words sit on each side
MIN_CLAUSE_WORDS = 2
