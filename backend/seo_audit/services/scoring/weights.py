"""
Scoring Weights Configuration - v1.1

Every numeric policy the aggregation engine applies lives here so that a
change is a visible, versioned edit rather than a constant buried in a scorer.
Bump SCORING_VERSION when any value changes and CATEGORY_MAP_VERSION when the
bucket mapping changes; both are stamped on every audit snapshot.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ImportanceWeights:
    """Multiplier applied to a factor's contribution by its importance."""
    high: float = 3.0
    medium: float = 2.0
    low: float = 1.0

    def for_importance(self, importance: str) -> float:
        return {
            "High": self.high,
            "Medium": self.medium,
            "Low": self.low,
        }[importance]


@dataclass(frozen=True)
class StatusScores:
    """Implicit 0-100 score for items without an explicit sub-score.

    NotApplicable is never scored.
    """
    ok: float = 100.0
    ofi: float = 50.0
    priority_ofi: float = 0.0


@dataclass(frozen=True)
class SeverityWeights:
    """Page priority weight per outstanding issue (one Priority OFI = three OFIs)."""
    priority_ofi: float = 3.0
    ofi: float = 1.0


@dataclass(frozen=True)
class PageTierWeights:
    """Page-type multipliers. Tier 1 pages drive conversions."""
    tier_1: float = 3.0
    tier_2: float = 2.0
    tier_3: float = 1.0

    def for_tier(self, tier: int) -> float:
        return {1: self.tier_1, 2: self.tier_2, 3: self.tier_3}[tier]


@dataclass(frozen=True)
class CategoryWeights:
    """Weight of each detailed category in the overall and bucket means."""
    onPage: float = 1.0
    structureNavigation: float = 1.0
    contactPage: float = 1.0
    servicePages: float = 1.0
    locationPages: float = 1.0
    serviceAreaPages: float = 1.0
    contentQuality: float = 1.0
    technicalSEO: float = 1.0
    localSEO: float = 1.0
    uxPerformance: float = 1.0

    def for_category(self, category: str) -> float:
        return getattr(self, category)


@dataclass(frozen=True)
class FixTimeHours:
    """Effort per outstanding issue, in hours, and the human-readable buckets."""
    easy: float = 1.5
    medium: float = 4.0
    hard: float = 16.0
    priority_multiplier: float = 1.5

    # (upper bound in hours, label); the last label covers everything above
    buckets: tuple = (
        (8.0, "a few hours"),
        (16.0, "1-2 days"),
        (40.0, "3-5 days"),
        (80.0, "1-2 weeks"),
    )
    overflow_label: str = "2+ weeks"
    none_label: str = "No fixes needed"

    def for_difficulty(self, difficulty: str) -> float:
        return {"easy": self.easy, "medium": self.medium, "hard": self.hard}[difficulty]


@dataclass(frozen=True)
class IssueSeverityWeights:
    """Audit-level issue severity: 100 minus a penalty per outstanding issue."""
    priority_ofi_penalty: float = 15.0
    high_impact_ofi_penalty: float = 8.0
    issue_penalty: float = 3.0  # every Priority OFI and OFI

    # (band, min Priority OFIs, min issues, score below); first match wins
    bands: tuple = (
        ("critical", 5, None, 40.0),
        ("high", 2, None, 60.0),
        ("medium", None, 5, 80.0),
    )
    default_band: str = "low"


# Detailed categories, in output order. serviceAreaPages is optional on the wire.
CATEGORY_KEYS = (
    "onPage",
    "structureNavigation",
    "contactPage",
    "servicePages",
    "locationPages",
    "serviceAreaPages",
    "contentQuality",
    "technicalSEO",
    "localSEO",
    "uxPerformance",
)
OPTIONAL_CATEGORY_KEYS = frozenset({"serviceAreaPages"})

# Short category names emitted by older factor checks
CATEGORY_ALIASES = {
    "content": "contentQuality",
    "technical": "technicalSEO",
    "local": "localSEO",
    "ux": "uxPerformance",
    "performance": "uxPerformance",
}

# Four summary buckets -> detailed categories. Changing this invalidates
# historical bucket comparisons, so bump CATEGORY_MAP_VERSION with it.
CATEGORY_BUCKETS = {
    "contentQuality": ("onPage", "contentQuality"),
    "technicalSEO": ("structureNavigation", "technicalSEO"),
    "localSEO": ("contactPage", "servicePages", "locationPages", "serviceAreaPages", "localSEO"),
    "uxPerformance": ("uxPerformance",),
}


@dataclass(frozen=True)
class ScoringPolicy:
    """Bundle of every weight table, handed to the scorers."""
    importance: ImportanceWeights = field(default_factory=ImportanceWeights)
    status: StatusScores = field(default_factory=StatusScores)
    severity: SeverityWeights = field(default_factory=SeverityWeights)
    page_tiers: PageTierWeights = field(default_factory=PageTierWeights)
    categories: CategoryWeights = field(default_factory=CategoryWeights)
    fix_time: FixTimeHours = field(default_factory=FixTimeHours)
    issue_severity: IssueSeverityWeights = field(default_factory=IssueSeverityWeights)


# Default weight instances
IMPORTANCE_WEIGHTS = ImportanceWeights()
STATUS_SCORES = StatusScores()
SEVERITY_WEIGHTS = SeverityWeights()
PAGE_TIER_WEIGHTS = PageTierWeights()
CATEGORY_WEIGHTS = CategoryWeights()
FIX_TIME_HOURS = FixTimeHours()
ISSUE_SEVERITY_WEIGHTS = IssueSeverityWeights()
DEFAULT_POLICY = ScoringPolicy(
    importance=IMPORTANCE_WEIGHTS,
    status=STATUS_SCORES,
    severity=SEVERITY_WEIGHTS,
    page_tiers=PAGE_TIER_WEIGHTS,
    categories=CATEGORY_WEIGHTS,
    fix_time=FIX_TIME_HOURS,
    issue_severity=ISSUE_SEVERITY_WEIGHTS,
)

# Scoring version
SCORING_VERSION = "1.1"
CATEGORY_MAP_VERSION = "1"


# --- Validation (Prevent Drift) ---
def _validate_weights():
    """Ensure the tables are internally consistent."""
    # 1. Importance must strictly order High > Medium > Low
    w_imp = IMPORTANCE_WEIGHTS
    if not (w_imp.high > w_imp.medium > w_imp.low > 0):
        raise ValueError(f"CRITICAL: Importance weights out of order: {w_imp}")

    # 2. Status scores stay inside 0-100 and keep OK > OFI > Priority OFI
    s = STATUS_SCORES
    for value in (s.ok, s.ofi, s.priority_ofi):
        if not 0 <= value <= 100:
            raise ValueError(f"CRITICAL: Status score {value} outside 0-100")
    if not (s.ok > s.ofi > s.priority_ofi):
        raise ValueError(f"CRITICAL: Status scores out of order: {s}")

    # 3. A Priority OFI must outweigh a plain OFI
    if SEVERITY_WEIGHTS.priority_ofi <= SEVERITY_WEIGHTS.ofi:
        raise ValueError("CRITICAL: Priority OFI severity must exceed OFI severity")

    # 4. Every detailed category appears in exactly one bucket
    mapped = [c for members in CATEGORY_BUCKETS.values() for c in members]
    if sorted(mapped) != sorted(CATEGORY_KEYS):
        raise ValueError(f"CRITICAL: Bucket map does not cover categories exactly once: {mapped}")

    # 5. Every category has a positive weight
    for category in CATEGORY_KEYS:
        if CATEGORY_WEIGHTS.for_category(category) <= 0:
            raise ValueError(f"CRITICAL: Category weight for {category} must be positive")

    # 6. Fix-time buckets must be ascending
    bounds = [bound for bound, _ in FIX_TIME_HOURS.buckets]
    if bounds != sorted(bounds):
        raise ValueError(f"CRITICAL: Fix-time buckets not ascending: {bounds}")

    # 7. Issue severity penalties cannot reward issues
    sev = ISSUE_SEVERITY_WEIGHTS
    if min(sev.priority_ofi_penalty, sev.high_impact_ofi_penalty, sev.issue_penalty) < 0:
        raise ValueError(f"CRITICAL: Issue severity penalties must be non-negative: {sev}")

_validate_weights()
