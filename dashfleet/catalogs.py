# dashfleet/catalogs.py
#
# Fixed catalogs of predicted issue types and maintenance service types,
# with the display copy and cost bands each entry carries.

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple, Union

from dashfleet.errors import UnknownCatalogKeyError

logger = logging.getLogger(__name__)


# -------------------------------------------------
# Issue types (predicted failures)
# -------------------------------------------------


class IssueType(str, Enum):
    BRAKES = "brakes"
    TRANSMISSION = "transmission"
    BATTERY = "battery"
    SUSPENSION = "suspension"
    TIRES = "tires"
    COOLING = "cooling"
    ELECTRICAL = "electrical"


@dataclass(frozen=True)
class IssueInfo:
    label: str
    description: str
    insight: str
    severity: str
    area: str


ISSUE_CATALOG: Dict[IssueType, IssueInfo] = {
    IssueType.BRAKES: IssueInfo(
        label="Brakes",
        description="Brake pad wear exceeding threshold",
        insight="Replace brake pads immediately. Inspect rotors for scoring. Check brake fluid level.",
        severity="critical",
        area="brakes",
    ),
    IssueType.TRANSMISSION: IssueInfo(
        label="Transmission",
        description="Shifting delays or rough engagement",
        insight="Flush transmission fluid. Inspect clutch assembly. May need software update or sensor replacement.",
        severity="high",
        area="transmission",
    ),
    IssueType.BATTERY: IssueInfo(
        label="Battery",
        description="Battery capacity below 70%",
        insight="Test battery health. Clean terminals. Consider replacement if over 3 years old.",
        severity="medium",
        area="battery",
    ),
    IssueType.SUSPENSION: IssueInfo(
        label="Suspension",
        description="Unusual wear patterns detected",
        insight="Inspect shock absorbers and struts. Check alignment. Replace worn bushings.",
        severity="medium",
        area="suspension",
    ),
    IssueType.TIRES: IssueInfo(
        label="Tires",
        description="Tread depth below safe limit",
        insight="Replace tires immediately. Check tire pressure. Rotate remaining tires.",
        severity="critical",
        area="tires",
    ),
    IssueType.COOLING: IssueInfo(
        label="Cooling System",
        description="Coolant temperature elevated",
        insight="Check coolant level. Inspect radiator for leaks. Test thermostat operation.",
        severity="high",
        area="cooling",
    ),
    IssueType.ELECTRICAL: IssueInfo(
        label="Electrical",
        description="Voltage fluctuations detected",
        insight="Test alternator output. Inspect wiring harness. Check for loose connections.",
        severity="medium",
        area="electrical",
    ),
}


# -------------------------------------------------
# Service types (maintenance history)
# -------------------------------------------------


class ServiceType(str, Enum):
    BATTERY_CHECK = "Battery Check"
    BRAKE_SERVICE = "Brake Service"
    SOFTWARE_UPDATE = "Software Update"
    TIRE_ROTATION = "Tire Rotation"
    COOLING_SYSTEM = "Cooling System"
    HV_POWER_ELECTRONICS = "HV Power Electronics"
    SUSPENSION_INSPECTION = "Suspension Inspection"
    CHARGING_PORT = "Charging Port"
    HVAC_SERVICE = "HVAC Service"
    STEERING_ALIGNMENT = "Steering Alignment"


@dataclass(frozen=True)
class ServiceMeta:
    notes: Tuple[str, ...]
    cost_range: Tuple[int, int]


SERVICE_CATALOG: Dict[ServiceType, ServiceMeta] = {
    ServiceType.BATTERY_CHECK: ServiceMeta(
        ("Cell balancing & calibration", "Thermal management tune", "SOH diagnostics"), (220, 380)
    ),
    ServiceType.BRAKE_SERVICE: ServiceMeta(
        ("Front pads replaced", "Rotor skim + fluid", "Parking brake recalibration"), (140, 320)
    ),
    ServiceType.SOFTWARE_UPDATE: ServiceMeta(
        ("Efficiency firmware update", "ADAS patch applied", "BMS update"), (0, 0)
    ),
    ServiceType.TIRE_ROTATION: ServiceMeta(
        ("Front–rear rotation", "Rotation + pressure check"), (40, 80)
    ),
    ServiceType.COOLING_SYSTEM: ServiceMeta(
        ("Coolant top-up & bleed", "Pump inspection", "Radiator flush"), (180, 420)
    ),
    ServiceType.HV_POWER_ELECTRONICS: ServiceMeta(
        ("Inverter thermal paste refresh", "DC/DC inspection", "IGBT check"), (260, 520)
    ),
    ServiceType.SUSPENSION_INSPECTION: ServiceMeta(
        ("Bushing check", "Control arm torque", "Dampers inspection"), (120, 260)
    ),
    ServiceType.CHARGING_PORT: ServiceMeta(
        ("Connector clean & reseat", "CCS latch replacement", "Wiring continuity"), (90, 210)
    ),
    ServiceType.HVAC_SERVICE: ServiceMeta(
        ("Cabin filter + recharge", "Heat pump efficiency test"), (110, 240)
    ),
    ServiceType.STEERING_ALIGNMENT: ServiceMeta(
        ("Toe adjust", "Camber/caster check"), (80, 160)
    ),
}

DEFAULT_SERVICE_META = ServiceMeta(("Service",), (120, 240))


# -------------------------------------------------
# Lookups
# -------------------------------------------------


def parse_issue_type(key: Union[str, IssueType]) -> IssueType:
    try:
        return IssueType(key)
    except ValueError:
        logger.warning("Unknown issue type %r", key)
        raise UnknownCatalogKeyError("issue type", key) from None


def parse_service_type(key: Union[str, ServiceType]) -> ServiceType:
    try:
        return ServiceType(key)
    except ValueError:
        logger.warning("Unknown service type %r", key)
        raise UnknownCatalogKeyError("service type", key) from None


def issue_info(issue_type: Union[str, IssueType]) -> IssueInfo:
    return ISSUE_CATALOG[parse_issue_type(issue_type)]


def service_meta(service_type: Union[str, ServiceType]) -> ServiceMeta:
    """Catalog entry for a service type, or the explicit default entry."""
    meta = SERVICE_CATALOG.get(service_type)
    if meta is None:
        logger.warning("Unknown service type %r, using default catalog entry", service_type)
        return DEFAULT_SERVICE_META
    return meta
