"""
Fault knowledge mapping.

Maps a fault type code to the technician skills and replacement parts a
repair needs. The table is fixed for the plant and read-only; lookups are
case-insensitive and total (unknown fault types fall back to the defaults).
"""

from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping

DEFAULT_SKILLS: FrozenSet[str] = frozenset({"general_maintenance"})
DEFAULT_PARTS: FrozenSet[str] = frozenset()

_FAULT_TO_SKILLS = {
    "curing_temperature_excessive": [
        "tire_curing_press",
        "temperature_control",
        "instrumentation",
        "electrical_systems",
        "plc_troubleshooting",
        "mold_maintenance",
    ],
    "curing_cycle_time_deviation": [
        "tire_curing_press",
        "plc_troubleshooting",
        "mold_maintenance",
        "bladder_replacement",
        "hydraulic_systems",
        "instrumentation",
    ],
    "building_drum_vibration": [
        "tire_building_machine",
        "vibration_analysis",
        "bearing_replacement",
        "alignment",
        "precision_alignment",
        "drum_balancing",
        "mechanical_systems",
    ],
    "ply_tension_excessive": [
        "tire_building_machine",
        "tension_control",
        "servo_systems",
        "precision_alignment",
        "sensor_alignment",
        "plc_programming",
    ],
    "extruder_barrel_overheating": [
        "tire_extruder",
        "temperature_control",
        "rubber_processing",
        "screw_maintenance",
        "instrumentation",
        "electrical_systems",
        "motor_drives",
    ],
    "low_material_throughput": [
        "tire_extruder",
        "rubber_processing",
        "screw_maintenance",
        "motor_drives",
        "temperature_control",
    ],
    "high_radial_force_variation": [
        "tire_uniformity_machine",
        "data_analysis",
        "measurement_systems",
        "tire_building_machine",
        "tire_curing_press",
    ],
    "load_cell_drift": [
        "tire_uniformity_machine",
        "load_cell_calibration",
        "measurement_systems",
        "sensor_alignment",
        "instrumentation",
    ],
    "mixing_temperature_excessive": [
        "banbury_mixer",
        "temperature_control",
        "rubber_processing",
        "instrumentation",
        "electrical_systems",
        "mechanical_systems",
    ],
    "excessive_mixer_vibration": [
        "banbury_mixer",
        "vibration_analysis",
        "bearing_replacement",
        "alignment",
        "mechanical_systems",
        "preventive_maintenance",
    ],
}

_FAULT_TO_PARTS = {
    "curing_temperature_excessive": ["TCP-HTR-4KW", "GEN-TS-K400"],
    "curing_cycle_time_deviation": ["TCP-BLD-800", "TCP-SEAL-200"],
    "building_drum_vibration": ["TBM-BRG-6220"],
    "ply_tension_excessive": ["TBM-LS-500N", "TBM-SRV-5KW"],
    "extruder_barrel_overheating": ["EXT-HTR-BAND", "GEN-TS-K400"],
    "low_material_throughput": ["EXT-SCR-250", "EXT-DIE-TR"],
    "high_radial_force_variation": [],  # diagnosis and adjustment only
    "load_cell_drift": ["TUM-LC-2KN", "TUM-ENC-5000"],
    "mixing_temperature_excessive": ["BMX-TIP-500", "GEN-TS-K400"],
    "excessive_mixer_vibration": ["BMX-BRG-22320", "BMX-SEAL-DP"],
}


def _freeze(table: Dict[str, list]) -> Mapping[str, FrozenSet[str]]:
    return MappingProxyType({key.lower(): frozenset(values) for key, values in table.items()})


FAULT_SKILLS: Mapping[str, FrozenSet[str]] = _freeze(_FAULT_TO_SKILLS)
FAULT_PARTS: Mapping[str, FrozenSet[str]] = _freeze(_FAULT_TO_PARTS)


def _normalize(fault_type) -> str:
    return (fault_type or "").strip().lower()


def required_skills(fault_type: str) -> FrozenSet[str]:
    """Skills a technician needs for this fault type; {'general_maintenance'} if unknown."""
    return FAULT_SKILLS.get(_normalize(fault_type), DEFAULT_SKILLS)


def required_parts(fault_type: str) -> FrozenSet[str]:
    """Part numbers usually replaced for this fault type; empty if unknown."""
    return FAULT_PARTS.get(_normalize(fault_type), DEFAULT_PARTS)


def known_fault_types() -> list[str]:
    return sorted(FAULT_SKILLS)
