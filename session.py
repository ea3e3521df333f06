"""
Session State

Caller-owned container for the catalogs and the current feature selection.
Every evaluation passes the session's current values into the resolver and
matcher; nothing is cached between calls.
"""

import json
import os
from dataclasses import dataclass, field

from models import Category, Feature, Function, Sensor, SoC, _parse_enum, split_functions_and_features
from resolver import RequirementResolver
from matcher import SoCMatcher


CATALOG_KINDS = {
    'function': Function,
    'sensor': Sensor,
    'soc': SoC,
}


@dataclass(frozen=True)
class Evaluation:
    requirements: object  # resolver.Requirements
    match: object         # matcher.MatchResult


@dataclass
class Session:
    functions: list = field(default_factory=list)
    sensors: list = field(default_factory=list)
    features: list = field(default_factory=list)
    socs: list = field(default_factory=list)
    selected_feature_ids: set = field(default_factory=set)

    def __post_init__(self):
        self.selected_feature_ids = set(self.selected_feature_ids)
        self._custom_counter = 0

    # =========================================================================
    # SELECTION
    # =========================================================================
    @property
    def selection(self):
        return frozenset(self.selected_feature_ids)

    def toggle_feature(self, feature_id):
        """Select the feature if unselected, otherwise deselect it. Returns the new state."""
        if feature_id in self.selected_feature_ids:
            self.selected_feature_ids.discard(feature_id)
            return False
        self.selected_feature_ids.add(feature_id)
        return True

    def clear_selection(self):
        self.selected_feature_ids = set()

    # =========================================================================
    # FEATURES
    # =========================================================================
    def get_feature(self, feature_id):
        return next((f for f in self.features if f.id == feature_id), None)

    def features_by_category(self, category):
        category = _parse_enum(Category, category)
        return [f for f in self.features if f.category == category]

    def _next_custom_id(self):
        existing = {f.id for f in self.features}
        while True:
            self._custom_counter += 1
            candidate = f"feat-custom-{self._custom_counter}"
            if candidate not in existing:
                return candidate

    def add_feature(self, name, description='', category='Driving', function_ids=None, sensor_ids=None,
                    feature_id=None):
        if feature_id is None:
            feature_id = self._next_custom_id()
        elif self.get_feature(feature_id) is not None:
            raise ValueError(f"Feature '{feature_id}' already exists")
        feature = Feature.create(feature_id, name, description, category, function_ids, sensor_ids)
        self.features.append(feature)
        return feature

    def update_feature(self, feature):
        for i, existing in enumerate(self.features):
            if existing.id == feature.id:
                self.features[i] = feature
                return feature
        raise KeyError(f"Unknown feature '{feature.id}'")

    def remove_feature(self, feature_id):
        before = len(self.features)
        self.features = [f for f in self.features if f.id != feature_id]
        if len(self.features) == before:
            raise KeyError(f"Unknown feature '{feature_id}'")
        self.selected_feature_ids.discard(feature_id)

    # =========================================================================
    # FUNCTION / SENSOR / SOC CATALOGS
    # =========================================================================
    def _catalog(self, kind, component=None):
        if kind not in CATALOG_KINDS:
            raise ValueError(f"Unknown catalog kind '{kind}' (expected one of: {', '.join(CATALOG_KINDS)})")
        if component is not None and not isinstance(component, CATALOG_KINDS[kind]):
            raise TypeError(f"Expected a {CATALOG_KINDS[kind].__name__} for the {kind} catalog, "
                            f"got {type(component).__name__}")
        return {'function': self.functions, 'sensor': self.sensors, 'soc': self.socs}[kind]

    def add_component(self, kind, component):
        catalog = self._catalog(kind, component)
        if any(c.id == component.id for c in catalog):
            raise ValueError(f"{kind.capitalize()} '{component.id}' already exists")
        catalog.append(component)
        return component

    def update_component(self, kind, component):
        catalog = self._catalog(kind, component)
        for i, existing in enumerate(catalog):
            if existing.id == component.id:
                catalog[i] = component
                return component
        raise KeyError(f"Unknown {kind} '{component.id}'")

    def remove_component(self, kind, component_id):
        """
        Remove an entry from a catalog. Features that still reference a removed
        function or sensor are left untouched; the resolver ignores the
        dangling id.
        """
        catalog = self._catalog(kind)
        for i, existing in enumerate(catalog):
            if existing.id == component_id:
                del catalog[i]
                return
        raise KeyError(f"Unknown {kind} '{component_id}'")

    # =========================================================================
    # EVALUATION
    # =========================================================================
    def evaluate(self, resolver=None, matcher=None):
        resolver = resolver or RequirementResolver()
        matcher = matcher or SoCMatcher()
        requirements = resolver.resolve(self.selection, self.features, self.functions, self.sensors)
        match = matcher.match(requirements.total_resources, self.socs)
        return Evaluation(requirements=requirements, match=match)

    # =========================================================================
    # PERSISTENCE
    # =========================================================================
    def to_dict(self):
        return {
            'adasFunctions': [f.to_dict() for f in self.functions] + [f.to_dict() for f in self.features],
            'sensors': [s.to_dict() for s in self.sensors],
            'soCs': [s.to_dict() for s in self.socs],
            'selectedFeatureIds': sorted(self.selected_feature_ids),
        }

    @classmethod
    def from_dict(cls, state, default_socs=None, clamp=True):
        """
        Build a session from the saved-state shape. States saved before SoCs
        were persisted fall back to default_socs.
        """
        functions, features = split_functions_and_features(state.get('adasFunctions', []), clamp=clamp)
        sensors = [Sensor.from_dict(s, clamp=clamp) for s in state.get('sensors', [])]
        if state.get('soCs') is not None:
            socs = [SoC.from_dict(s, clamp=clamp) for s in state['soCs']]
        else:
            socs = list(default_socs or [])
        return cls(
            functions=functions,
            sensors=sensors,
            features=features,
            socs=socs,
            selected_feature_ids=set(state.get('selectedFeatureIds', [])),
        )

    def save(self, path):
        directory = os.path.dirname(path)
        if directory and not os.path.exists(directory):
            os.makedirs(directory)
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)
        return path

    @classmethod
    def load(cls, path, default_socs=None, clamp=True):
        if not os.path.exists(path):
            raise FileNotFoundError(f"Session file not found: {path}")
        with open(path, 'r') as f:
            state = json.load(f)
        if not isinstance(state, dict):
            raise ValueError(f"Invalid session file {path}: expected an object")
        return cls.from_dict(state, default_socs=default_socs, clamp=clamp)

    @classmethod
    def defaults(cls, config_reader):
        """Fresh session populated from a ConfigReader's catalog."""
        return cls(
            functions=config_reader.get_functions(),
            sensors=config_reader.get_sensors(),
            features=config_reader.get_features(),
            socs=config_reader.get_socs(),
            selected_feature_ids=set(config_reader.get_default_selection()),
        )
