# design_poker/app/services/estimation/catalogs.py
"""Factor catalogs for design-task estimation.

Every catalog is a closed, ordered tuple. Option values are domain weights
(not IDs) and are looked up by value, never by position.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional, Tuple


UNKNOWN_LABEL = "Unknown"

# Ceiling for a single task estimate
MAX_POINTS = 100


@dataclass(frozen=True)
class FactorOption:
    value: float
    label: str
    description: str


@dataclass(frozen=True)
class ActivityOption:
    id: str
    label: str
    description: str
    impact: int


@dataclass(frozen=True)
class ActivitySection:
    name: str
    activities: Tuple[ActivityOption, ...]


class FactorKind(str, Enum):
    """Catalog-valued estimation dimensions."""
    EFFORT = "effort"
    SPRINTS = "sprints"
    DESIGNER_COUNT = "designerCount"
    DESIGNER_LEVEL = "designerLevel"
    BREAKPOINTS = "breakpoints"
    FIDELITY = "fidelity"
    MEETING_BUFFER = "meetingBuffer"
    ITERATION_MULTIPLIER = "iterationMultiplier"
    DISCOVERY_ACTIVITY = "discoveryActivity"
    DESIGN_ACTIVITY = "designActivity"


EFFORT_OPTIONS: Tuple[FactorOption, ...] = (
    FactorOption(1, "Very Low", "Copy tweaks, color or spacing fixes"),
    FactorOption(2, "Low", "Small component or state change"),
    FactorOption(3, "Medium", "Standard feature screen"),
    FactorOption(5, "High", "Complex feature or multi-step flow"),
    FactorOption(8, "Very High", "New product area or major redesign"),
)

SPRINT_OPTIONS: Tuple[FactorOption, ...] = (
    FactorOption(0.25, "Quarter sprint", "A few days of focused work"),
    FactorOption(0.5, "Half sprint", "About one week"),
    FactorOption(1, "1 sprint", "A full sprint"),
    FactorOption(2, "2 sprints", "Spans two sprints"),
    FactorOption(3, "3+ sprints", "Multi-sprint effort"),
)

DESIGNER_COUNT_OPTIONS: Tuple[FactorOption, ...] = (
    FactorOption(1, "1 designer", "Single owner"),
    FactorOption(2, "2 designers", "Pair"),
    FactorOption(3, "3 designers", "Small squad"),
    FactorOption(4, "4+ designers", "Full team"),
)

DESIGNER_LEVEL_OPTIONS: Tuple[FactorOption, ...] = (
    FactorOption(1, "Junior", "Needs guidance and reviews"),
    FactorOption(1.5, "Mid", "Works independently"),
    FactorOption(2, "Senior", "Leads and coordinates the work"),
)

DEFAULT_DESIGNER_LEVEL = 1.5

BREAKPOINT_OPTIONS: Tuple[FactorOption, ...] = (
    FactorOption(1, "Desktop only", "Single layout"),
    FactorOption(2, "Desktop + Mobile", "Two layouts"),
    FactorOption(3, "Desktop + Tablet + Mobile", "Three layouts"),
    FactorOption(4, "All breakpoints + responsive", "Fluid layouts and edge cases"),
)

FIDELITY_OPTIONS: Tuple[FactorOption, ...] = (
    FactorOption(1, "Lo-fi", "Sketches and wireframes"),
    FactorOption(2, "Mid-fi", "Grey-box layouts with real content"),
    FactorOption(3, "Hi-fi", "Production-ready visuals"),
    FactorOption(4, "Hi-fi + design system", "Visuals plus reusable components"),
)

MEETING_BUFFER_OPTIONS: Tuple[FactorOption, ...] = (
    FactorOption(0, "No buffer", "No coordination overhead"),
    FactorOption(0.1, "+10%", "Light check-ins"),
    FactorOption(0.2, "+20%", "Regular stakeholder reviews"),
    FactorOption(0.3, "+30%", "Frequent syncs across teams"),
    FactorOption(0.5, "+50%", "Heavy alignment work"),
)

ITERATION_MULTIPLIER_OPTIONS: Tuple[FactorOption, ...] = (
    FactorOption(1, "1x (No iteration)", "Single pass"),
    FactorOption(2, "2x (2 rounds)", "One round of rework"),
    FactorOption(3, "3x (3 rounds)", "Two rounds of rework"),
    FactorOption(4, "4x (4 rounds)", "Open-ended exploration"),
)

DISCOVERY_ACTIVITIES: Tuple[ActivityOption, ...] = (
    ActivityOption("stakeholder_interviews", "Stakeholder interviews", "Align on goals and constraints", 3),
    ActivityOption("user_research", "User research", "Interviews or field studies with users", 5),
    ActivityOption("competitive_analysis", "Competitive analysis", "Review comparable products", 2),
    ActivityOption("journey_mapping", "Journey mapping", "Map the end-to-end user journey", 3),
    ActivityOption("discovery_workshop", "Discovery workshop", "Facilitated session with the team", 2),
)

DESIGN_ACTIVITY_SECTIONS: Tuple[ActivitySection, ...] = (
    ActivitySection(
        "Design",
        (
            ActivityOption("wireframes", "Wireframes", "Low-fidelity structure", 2),
            ActivityOption("visual_design", "Visual design", "Polished UI screens", 3),
            ActivityOption("design_system_components", "Design system components", "New or updated library components", 3),
        ),
    ),
    ActivitySection(
        "Prototyping",
        (
            ActivityOption("interactive_prototype", "Interactive prototype", "Clickable flow", 3),
            ActivityOption("motion_design", "Motion design", "Transitions and micro-interactions", 2),
        ),
    ),
    ActivitySection(
        "Testing",
        (
            ActivityOption("usability_testing", "Usability testing", "Moderated sessions with users", 5),
            ActivityOption("ab_testing", "A/B testing", "Variant design and analysis", 3),
            ActivityOption("accessibility_audit", "Accessibility audit", "WCAG review of the designs", 2),
        ),
    ),
)

DESIGN_ACTIVITIES: Tuple[ActivityOption, ...] = tuple(
    activity for section in DESIGN_ACTIVITY_SECTIONS for activity in section.activities
)


_CATALOGS: Dict[FactorKind, Tuple[FactorOption, ...]] = {
    FactorKind.EFFORT: EFFORT_OPTIONS,
    FactorKind.SPRINTS: SPRINT_OPTIONS,
    FactorKind.DESIGNER_COUNT: DESIGNER_COUNT_OPTIONS,
    FactorKind.DESIGNER_LEVEL: DESIGNER_LEVEL_OPTIONS,
    FactorKind.BREAKPOINTS: BREAKPOINT_OPTIONS,
    FactorKind.FIDELITY: FIDELITY_OPTIONS,
    FactorKind.MEETING_BUFFER: MEETING_BUFFER_OPTIONS,
    FactorKind.ITERATION_MULTIPLIER: ITERATION_MULTIPLIER_OPTIONS,
}

_ACTIVITY_CATALOGS: Dict[FactorKind, Tuple[ActivityOption, ...]] = {
    FactorKind.DISCOVERY_ACTIVITY: DISCOVERY_ACTIVITIES,
    FactorKind.DESIGN_ACTIVITY: DESIGN_ACTIVITIES,
}


def catalog_for(kind: FactorKind) -> Tuple[FactorOption, ...]:
    catalog = _CATALOGS.get(kind)
    if catalog is None:
        raise ValueError(f"{kind.value} is an activity checklist, not a factor catalog")
    return catalog


def activity_catalog_for(kind: FactorKind) -> Tuple[ActivityOption, ...]:
    catalog = _ACTIVITY_CATALOGS.get(kind)
    if catalog is None:
        raise ValueError(f"{kind.value} is not an activity checklist")
    return catalog


def is_activity_kind(kind: FactorKind) -> bool:
    return kind in _ACTIVITY_CATALOGS


def find_option(catalog: Iterable[FactorOption], value: Optional[float]) -> Optional[FactorOption]:
    """Find an option by value; None when absent."""
    if value is None:
        return None
    for option in catalog:
        if option.value == value:
            return option
    return None


def find_activity(catalog: Iterable[ActivityOption], activity_id: Optional[str]) -> Optional[ActivityOption]:
    if activity_id is None:
        return None
    for activity in catalog:
        if activity.id == activity_id:
            return activity
    return None


def option_label(kind: FactorKind, value) -> str:
    """Display label for a catalog value, falling back to "Unknown"."""
    if is_activity_kind(kind):
        activity = find_activity(activity_catalog_for(kind), value)
        return activity.label if activity else UNKNOWN_LABEL
    option = find_option(catalog_for(kind), value)
    return option.label if option else UNKNOWN_LABEL


def validate_catalogs() -> None:
    """Sanity-check the static tables: unique keys and non-negative weights."""
    for kind, catalog in _CATALOGS.items():
        values = [o.value for o in catalog]
        if len(values) != len(set(values)):
            raise ValueError(f"Duplicate values in {kind.value} catalog")
        if any(v < 0 for v in values):
            raise ValueError(f"Negative weight in {kind.value} catalog")
    for kind, activities in _ACTIVITY_CATALOGS.items():
        ids = [a.id for a in activities]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Duplicate ids in {kind.value} catalog")
        if any(a.impact < 0 for a in activities):
            raise ValueError(f"Negative impact in {kind.value} catalog")


validate_catalogs()


__all__ = [
    "UNKNOWN_LABEL",
    "MAX_POINTS",
    "FactorOption",
    "ActivityOption",
    "ActivitySection",
    "FactorKind",
    "EFFORT_OPTIONS",
    "SPRINT_OPTIONS",
    "DESIGNER_COUNT_OPTIONS",
    "DESIGNER_LEVEL_OPTIONS",
    "DEFAULT_DESIGNER_LEVEL",
    "BREAKPOINT_OPTIONS",
    "FIDELITY_OPTIONS",
    "MEETING_BUFFER_OPTIONS",
    "ITERATION_MULTIPLIER_OPTIONS",
    "DISCOVERY_ACTIVITIES",
    "DESIGN_ACTIVITY_SECTIONS",
    "DESIGN_ACTIVITIES",
    "catalog_for",
    "activity_catalog_for",
    "is_activity_kind",
    "find_option",
    "find_activity",
    "option_label",
    "validate_catalogs",
]
