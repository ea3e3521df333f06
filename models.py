"""
Data Models for ADAS SoC Selection

Contains all dataclass definitions for the catalog entities: resource vectors,
software functions, sensors, selectable features and candidate SoCs.
"""

import math
from dataclasses import dataclass, field, fields
from enum import Enum


@dataclass(frozen=True)
class AxisInfo:
    label: str
    unit: str
    color: str


# Serialized key -> dataclass attribute. Order is the display order everywhere.
AXIS_KEYS = {
    'kDMIPS': 'kdmips',
    'tops': 'tops',
    'isp': 'isp',
    'dewarp': 'dewarp',
    'gpu': 'gpu',
    'dramBw': 'dram_bw',
}

RESOURCE_AXES = {
    'kdmips': AxisInfo('CPU', 'kDMIPS', '#38BDF8'),
    'tops': AxisInfo('AI/ML', 'TOPs', '#4ADE80'),
    'isp': AxisInfo('ISP', 'MP/s', '#F87171'),
    'dewarp': AxisInfo('Dewarp', 'MP/s', '#FACC15'),
    'gpu': AxisInfo('GPU', 'GFLOPS', '#A78BFA'),
    'dram_bw': AxisInfo('DRAM BW', 'GB/s', '#F472B6'),
}


def _to_number(key, value, clamp):
    if value is None or value == '':
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Resource '{key}' must be numeric, got {value!r}")
    if math.isnan(number):
        return 0.0
    if number < 0:
        if not clamp:
            raise ValueError(f"Resource '{key}' must be non-negative, got {number}")
        return 0.0
    return number


@dataclass(frozen=True)
class ResourceVector:
    """
    Six-axis resource record. Used both as a requirement (functions, sensors)
    and as available capacity (SoCs).
    """
    kdmips: float = 0.0   # kilo Dhrystone MIPS
    tops: float = 0.0     # AI/ML tera-ops per second
    isp: float = 0.0      # image signal processing, MP/s
    dewarp: float = 0.0   # MP/s
    gpu: float = 0.0      # GFLOPS
    dram_bw: float = 0.0  # GB/s

    @classmethod
    def axes(cls):
        return [f.name for f in fields(cls)]

    @classmethod
    def zero(cls):
        return cls()

    @classmethod
    def from_dict(cls, data, clamp=True):
        """
        Build a vector from a serialized mapping.

        Accepts both the camelCase keys used in saved files ('kDMIPS', 'dramBw')
        and the attribute names. Absent axes are 0. Negative values are clamped
        to 0 unless clamp is False, in which case they raise ValueError.
        """
        if data is None:
            return cls()
        values = {}
        for key, value in data.items():
            axis = AXIS_KEYS.get(key, key)
            if axis not in RESOURCE_AXES:
                continue
            values[axis] = _to_number(key, value, clamp)
        return cls(**values)

    def as_dict(self):
        return {key: getattr(self, axis) for key, axis in AXIS_KEYS.items()}

    def values(self):
        return [getattr(self, axis) for axis in self.axes()]

    def __add__(self, other):
        if not isinstance(other, ResourceVector):
            return NotImplemented
        return ResourceVector(*[a + b for a, b in zip(self.values(), other.values())])

    def __radd__(self, other):
        # lets sum() start from the integer 0
        if other == 0:
            return self
        return self.__add__(other)

    def dominates(self, other):
        """True if every axis of self is >= the same axis of other."""
        return all(a >= b for a, b in zip(self.values(), other.values()))

    def total(self):
        """Unweighted scalar sum of all axes."""
        return sum(self.values())

    def is_zero(self):
        return not any(v > 0 for v in self.values())


class Category(Enum):
    DRIVING = 'Driving'
    PARKING = 'Parking'


class Tier(Enum):
    ENTRY = 'Entry'
    MID_RANGE = 'Mid-range'
    HIGH_PERFORMANCE = 'High-performance'


def _parse_enum(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    for member in enum_cls:
        if member.value.lower() == str(value).strip().lower():
            return member
    allowed = ", ".join(m.value for m in enum_cls)
    raise ValueError(f"Unknown {enum_cls.__name__.lower()} {value!r} (expected one of: {allowed})")


def _require_id(data):
    component_id = data.get('id')
    if component_id is None or str(component_id).strip() == '':
        raise ValueError(f"Entry is missing an 'id': {data!r}")
    return str(component_id).strip()


@dataclass
class Component:
    id: str
    name: str
    resources: ResourceVector = field(default_factory=ResourceVector)

    @classmethod
    def from_dict(cls, data, clamp=True):
        component_id = _require_id(data)
        return cls(
            id=component_id,
            name=str(data.get('name') or component_id),
            resources=ResourceVector.from_dict(data.get('resources'), clamp=clamp),
        )

    def to_dict(self):
        return {'id': self.id, 'name': self.name, 'resources': self.resources.as_dict()}


@dataclass
class Function(Component):
    """Software component with its own resource cost."""


@dataclass
class Sensor(Component):
    """Hardware input whose processing costs SoC resources."""


@dataclass
class FeatureMeta:
    description: str = ''
    category: Category = Category.DRIVING
    mandatory_function_ids: list = None
    mandatory_sensor_ids: list = None

    def __post_init__(self):
        # keep first-seen order, drop duplicates and blanks
        self.mandatory_function_ids = list(dict.fromkeys(
            i for i in (self.mandatory_function_ids or []) if i))
        self.mandatory_sensor_ids = list(dict.fromkeys(
            i for i in (self.mandatory_sensor_ids or []) if i))
        self.category = _parse_enum(Category, self.category)


@dataclass
class Feature:
    """
    A user-selectable capability. Wraps a plain Function record (identity, and a
    resource vector that is always zero) together with the feature metadata.
    Its cost comes entirely from its mandatory functions and sensors.
    """
    component: Function
    meta: FeatureMeta = field(default_factory=FeatureMeta)

    def __post_init__(self):
        if not self.component.resources.is_zero():
            self.component = Function(self.component.id, self.component.name)

    @property
    def id(self):
        return self.component.id

    @property
    def name(self):
        return self.component.name

    @property
    def category(self):
        return self.meta.category

    @classmethod
    def create(cls, id, name, description='', category=Category.DRIVING,
               function_ids=None, sensor_ids=None):
        return cls(
            component=Function(id=id, name=name),
            meta=FeatureMeta(
                description=description,
                category=category,
                mandatory_function_ids=function_ids,
                mandatory_sensor_ids=sensor_ids,
            ),
        )

    @classmethod
    def from_dict(cls, data):
        feature_id = _require_id(data)
        return cls.create(
            id=feature_id,
            name=str(data.get('name') or feature_id),
            description=data.get('description') or '',
            category=data.get('category') or Category.DRIVING,
            function_ids=_id_list(data.get('mandatoryFunctionIds')),
            sensor_ids=_id_list(data.get('mandatorySensorIds')),
        )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'isFeature': True,
            'description': self.meta.description,
            'category': self.meta.category.value,
            'resources': self.component.resources.as_dict(),
            'mandatoryFunctionIds': list(self.meta.mandatory_function_ids),
            'mandatorySensorIds': list(self.meta.mandatory_sensor_ids),
        }


def _id_list(value):
    if value is None:
        return []
    if isinstance(value, str):
        return [s.strip() for s in value.split(',') if s.strip()]
    return [str(v).strip() for v in value if str(v).strip()]


@dataclass
class SoC:
    id: str
    name: str
    vendor: str = ''
    tier: Tier = Tier.ENTRY
    resources: ResourceVector = field(default_factory=ResourceVector)  # available capacity

    def __post_init__(self):
        self.tier = _parse_enum(Tier, self.tier)

    @classmethod
    def from_dict(cls, data, clamp=True):
        soc_id = _require_id(data)
        return cls(
            id=soc_id,
            name=str(data.get('name') or soc_id),
            vendor=str(data.get('vendor') or ''),
            tier=data.get('tier') or Tier.ENTRY,
            resources=ResourceVector.from_dict(data.get('resources'), clamp=clamp),
        )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'vendor': self.vendor,
            'tier': self.tier.value,
            'resources': self.resources.as_dict(),
        }


def is_flagged(value):
    """Truthiness of a boolean flag that may arrive as a string from tables."""
    if isinstance(value, float) and math.isnan(value):
        return False
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes', 'y')
    return bool(value)


def split_functions_and_features(entries, clamp=True):
    """
    Split the mixed 'adasFunctions' list used by saved states and feature
    portfolios into (functions, features). Only entries flagged isFeature
    become features; plain functions may still carry empty id lists.
    """
    functions = []
    features = []
    for entry in entries:
        if is_flagged(entry.get('isFeature')):
            features.append(Feature.from_dict(entry))
        else:
            functions.append(Function.from_dict(entry, clamp=clamp))
    return functions, features
