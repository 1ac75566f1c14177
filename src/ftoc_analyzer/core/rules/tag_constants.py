"""Built-in tag vocabularies and analysis thresholds.

These are the defaults used when no configuration file overrides them.
All tag lists are written the way authors write them in feature files;
comparisons always go through tag normalization (case, marker and
separator insensitive).
"""

# Marker that prefixes every Gherkin tag
TAG_MARKER = "@"

# Characters ignored when comparing tags (@in-progress == @in_progress == @InProgress)
TAG_SEPARATORS = "-_."

# =========================
# TAG VOCABULARIES
# =========================

PRIORITY_TAGS = (
    "@P0", "@P1", "@P2", "@P3", "@P4",
    "@Critical", "@High", "@Medium", "@Low",
    "@Priority0", "@Priority1", "@Priority2", "@Priority3", "@Priority4",
)

TYPE_TAGS = (
    "@UI", "@API", "@Backend", "@Frontend", "@Integration", "@Unit",
    "@Performance", "@Security", "@Regression", "@Smoke", "@E2E",
    "@Functional", "@Acceptance", "@System", "@Component",
)

STATUS_TAGS = (
    "@WIP", "@Ready", "@Review", "@Flaky", "@Deprecated", "@Legacy",
    "@Todo", "@Debug", "@InProgress", "@Completed", "@Blocked",
)

LOW_VALUE_TAGS = (
    "@Test", "@Tests", "@Feature", "@Cucumber", "@Scenario", "@Gherkin",
    "@Temp", "@Temporary", "@Pending", "@Fixme", "@Workaround",
    "@Ignore", "@Skip", "@Manual",
)

# Normalized shorthand accepted as a priority even though it is short (p0-p4)
PRIORITY_SHORTHAND_PATTERN = r"^p[0-4]$"

# =========================
# THRESHOLDS
# =========================

MAX_STEPS = 10
MIN_STEPS = 2
MAX_TAGS = 6
MAX_SCENARIO_NAME_LENGTH = 100
MAX_STEP_LENGTH = 120
MIN_EXAMPLES = 2

# Typo detection: edit distance <= 2 between tags of at least 4 characters.
# Shorter tags (@P0 vs @P1) are legitimately one edit apart.
TYPO_MAX_DISTANCE = 2
TYPO_MIN_LENGTH = 4

# Tags shorter than this (normalized) are ambiguous unless priority shorthand
AMBIGUOUS_TAG_LENGTH = 3

# Tags scoring at or above this quantile of significance are "significant"
SIGNIFICANCE_QUANTILE = 0.75

# Generic tag: present on >= 90% of scenarios once the corpus has > 5 of them
GENERIC_TAG_RATIO = 0.9
GENERIC_TAG_MIN_SCENARIOS = 5

# Run analyzers in a worker pool only above this many features
PARALLEL_THRESHOLD = 5
