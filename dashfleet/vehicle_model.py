"""
Component-health model behind the "problem visualization" panel.

Rendering is left to the UI. This module only owns the state a renderer
needs: which problem areas are highlighted and the health of each named
component. Callers get a VehicleModel handle from create_vehicle_model()
and push updates through it; nothing is shared between handles.
"""

import re
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

import pandas as pd

from dashfleet.catalogs import IssueType, parse_issue_type
from dashfleet.prng import prng, round_half_up

WHEEL_NAMES = ("Wheel FL", "Wheel FR", "Wheel RL", "Wheel RR")
WHEEL_HEALTH_MIN = 70
WHEEL_HEALTH_SPREAD = 25

BASE_COMPONENTS: Tuple[Tuple[str, int], ...] = (
    ("Body", 86),
    ("Roof", 92),
    ("Front Bumper", 73),
    ("Left Headlight", 88),
    ("Right Headlight", 90),
    ("Door", 81),
    ("Windows (Left)", 95),
    ("Windows (Right)", 94),
    ("Left Tail Light", 89),
    ("Right Tail Light", 87),
    ("Battery Pack", 90),
    ("Inverter", 91),
    ("Radiator", 88),
    ("Drive Unit", 90),
    ("Brake Assembly", 85),
    ("Suspension", 87),
)

# problem area -> components that light up when the area is highlighted
AREA_COMPONENTS: Dict[IssueType, Tuple[str, ...]] = {
    IssueType.BRAKES: ("Brake Assembly",),
    IssueType.TRANSMISSION: ("Drive Unit",),
    IssueType.BATTERY: ("Battery Pack",),
    IssueType.SUSPENSION: ("Suspension",),
    IssueType.TIRES: WHEEL_NAMES,
    IssueType.COOLING: ("Radiator",),
    IssueType.ELECTRICAL: ("Battery Pack", "Inverter", "Left Headlight", "Right Headlight"),
}


@dataclass
class Component:
    name: str
    health: int
    highlighted: bool = False


class VehicleModel:
    def __init__(self, components: Iterable[Component]):
        self._components: Dict[str, Component] = {c.name: c for c in components}
        self._highlighted: FrozenSet[IssueType] = frozenset()

    @property
    def highlighted_areas(self) -> FrozenSet[IssueType]:
        return self._highlighted

    def components_for_area(self, area: Union[str, IssueType]) -> List[str]:
        return [n for n in AREA_COMPONENTS[parse_issue_type(area)] if n in self._components]

    def set_highlighted_areas(self, areas: Iterable[Union[str, IssueType]]) -> None:
        """Replace the highlighted set; previous highlights are cleared first."""
        parsed = frozenset(parse_issue_type(a) for a in areas)
        for comp in self._components.values():
            comp.highlighted = False
        for area in parsed:
            for name in self.components_for_area(area):
                self._components[name].highlighted = True
        self._highlighted = parsed

    def set_component_health(self, name_or_pattern: Union[str, re.Pattern], value: float) -> int:
        """
        Set health on every component matching an exact name or a compiled
        regex. Returns how many components were updated.
        """
        def matches(name: str) -> bool:
            if isinstance(name_or_pattern, re.Pattern):
                return name_or_pattern.search(name) is not None
            return name == name_or_pattern

        health = max(0, min(100, round_half_up(value)))
        updated = 0
        for comp in self._components.values():
            if matches(comp.name):
                comp.health = health
                updated += 1
        return updated

    def component_health(self, name: str) -> Optional[int]:
        comp = self._components.get(name)
        return comp.health if comp else None

    def highlighted_components(self) -> List[str]:
        return [c.name for c in self._components.values() if c.highlighted]

    def health_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [{"component": c.name, "health": c.health, "highlighted": c.highlighted} for c in self._components.values()],
            columns=["component", "health", "highlighted"],
        )


def create_vehicle_model(seed: Optional[int] = None) -> VehicleModel:
    """Fresh handle; wheel health is drawn from ``seed`` (fixed wear when None)."""
    components = [Component(name, health) for name, health in BASE_COMPONENTS]
    rand = prng(seed) if seed is not None else (lambda: 0.5)
    for name in WHEEL_NAMES:
        components.append(Component(name, WHEEL_HEALTH_MIN + int(rand() * WHEEL_HEALTH_SPREAD)))
    return VehicleModel(components)
