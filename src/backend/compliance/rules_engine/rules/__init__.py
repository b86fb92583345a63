from .ukri_ts_001_completeness import UKRI_TS_001_COMPLETENESS
from .ukri_ts_002_signature import UKRI_TS_002_SIGNATURE
from .ukri_ts_003_timeliness import UKRI_TS_003_TIMELINESS
from .ukri_ts_004_hours_plausibility import UKRI_TS_004_HOURS_PLAUSIBILITY
from .ukri_ts_005_grant_boundary import UKRI_TS_005_GRANT_BOUNDARY
from .ukri_ts_006_fte_consistency import UKRI_TS_006_FTE_CONSISTENCY
from .ukri_ts_007_combined_fte_cap import UKRI_TS_007_COMBINED_FTE_CAP
from .ukri_ts_008_immutability import UKRI_TS_008_IMMUTABILITY

# Evaluation and reporting order.
UKRI_VALIDATION_RULES = (
    UKRI_TS_001_COMPLETENESS,
    UKRI_TS_002_SIGNATURE,
    UKRI_TS_003_TIMELINESS,
    UKRI_TS_004_HOURS_PLAUSIBILITY,
    UKRI_TS_005_GRANT_BOUNDARY,
    UKRI_TS_006_FTE_CONSISTENCY,
    UKRI_TS_007_COMBINED_FTE_CAP,
    UKRI_TS_008_IMMUTABILITY,
)

__all__ = [
    "UKRI_VALIDATION_RULES",
    "UKRI_TS_001_COMPLETENESS",
    "UKRI_TS_002_SIGNATURE",
    "UKRI_TS_003_TIMELINESS",
    "UKRI_TS_004_HOURS_PLAUSIBILITY",
    "UKRI_TS_005_GRANT_BOUNDARY",
    "UKRI_TS_006_FTE_CONSISTENCY",
    "UKRI_TS_007_COMBINED_FTE_CAP",
    "UKRI_TS_008_IMMUTABILITY",
]
