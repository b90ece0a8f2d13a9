"""Fixed business constants for holdings normalization and analysis."""

from decimal import Decimal

# Canonical column names, matched verbatim against header cells
SCHEME_NAME = "Scheme Name"
CATEGORY = "Category"
SUB_CATEGORY = "Sub-category"
AMC = "AMC"
UNITS = "Units"
INVESTED_VALUE = "Invested Value"
CURRENT_VALUE = "Current Value"
RETURNS = "Returns"
XIRR = "XIRR"

CANONICAL_FIELDS = (
    SCHEME_NAME,
    CATEGORY,
    SUB_CATEGORY,
    AMC,
    UNITS,
    INVESTED_VALUE,
    CURRENT_VALUE,
    RETURNS,
    XIRR,
)

AMOUNT_FIELDS = (INVESTED_VALUE, CURRENT_VALUE, RETURNS, UNITS)
PERCENT_FIELDS = (XIRR,)

# Header row must contain both markers (case-insensitive)
HEADER_MARKERS = ("scheme name", "current value")

# Label used when category, sub-category or AMC is absent
OTHER = "Other"

# Holdings below this current value (Rs.) are clutter
CLUTTER_THRESHOLD = Decimal("5000")

# Sub-categories with more distinct schemes than this get a consolidation plan
CONSOLIDATION_MIN_SCHEMES = 2

# Health score policy
HEALTH_BASE_SCORE = Decimal("100")
HEALTH_CLUTTER_PENALTY = Decimal("2")
HEALTH_CLUTTER_CAP = Decimal("20")
HEALTH_LOSS_PENALTY = Decimal("1.5")
HEALTH_LOSS_CAP = Decimal("15")

# (holding count threshold, flat penalty); each applies once count exceeds it
HEALTH_SIZE_PENALTIES = (
    (20, Decimal("10")),
    (40, Decimal("10")),
)

# (upper bound exclusive, label), checked in order
HEALTH_LABELS = (
    (40, "Critical"),
    (60, "Poor"),
    (80, "Good"),
)
HEALTH_TOP_LABEL = "Excellent"

TWO_PLACES = Decimal("0.01")
