"""
Requirement Resolver

Expands a selection of features into the mandatory functions and sensors they
depend on and sums their resource vectors into one aggregate requirement.
"""

from dataclasses import dataclass, field

from models import ResourceVector


@dataclass(frozen=True)
class Requirements:
    mandatory_functions: list
    mandatory_sensors: list
    total_resources: ResourceVector
    selected_features: list = field(default_factory=list)
    # Diagnostics only; never part of the totals.
    unknown_feature_ids: list = field(default_factory=list)
    unresolved_function_ids: list = field(default_factory=list)
    unresolved_sensor_ids: list = field(default_factory=list)

    @property
    def components(self):
        return list(self.mandatory_functions) + list(self.mandatory_sensors)

    @property
    def is_empty(self):
        return not self.mandatory_functions and not self.mandatory_sensors

    @property
    def has_dangling_references(self):
        return bool(self.unknown_feature_ids or self.unresolved_function_ids
                    or self.unresolved_sensor_ids)


class RequirementResolver:
    """
    Selection -> mandatory components -> aggregate ResourceVector.

    Stateless; one instance can be reused for any number of evaluations.
    """

    # =========================================================================
    # HELPER FUNCTIONS
    # =========================================================================
    def _collect_dependency_ids(self, selected_features):
        function_ids = set()
        sensor_ids = set()
        for feature in selected_features:
            function_ids.update(feature.meta.mandatory_function_ids)
            sensor_ids.update(feature.meta.mandatory_sensor_ids)
        return function_ids, sensor_ids

    def _resolve(self, ids, catalog):
        """Catalog entries whose id is in ids (catalog order) and the ids left over."""
        resolved = []
        seen = set()
        for component in catalog:
            if component.id in ids and component.id not in seen:
                resolved.append(component)
                seen.add(component.id)
        return resolved, sorted(ids - seen)

    # =========================================================================
    # MAIN ENTRY POINT
    # =========================================================================
    def resolve(self, selection, features, functions, sensors):
        selection = set(selection)

        selected_features = []
        matched = set()
        for feature in features:
            if feature.id in selection and feature.id not in matched:
                selected_features.append(feature)
                matched.add(feature.id)

        function_ids, sensor_ids = self._collect_dependency_ids(selected_features)
        mandatory_functions, missing_functions = self._resolve(function_ids, functions)
        mandatory_sensors, missing_sensors = self._resolve(sensor_ids, sensors)

        # Feature resources are never added here, only their dependencies.
        total = sum((c.resources for c in mandatory_functions + mandatory_sensors),
                    ResourceVector.zero())

        return Requirements(
            mandatory_functions=mandatory_functions,
            mandatory_sensors=mandatory_sensors,
            total_resources=total,
            selected_features=selected_features,
            unknown_feature_ids=sorted(selection - matched),
            unresolved_function_ids=missing_functions,
            unresolved_sensor_ids=missing_sensors,
        )


def resolve_requirements(selection, features, functions, sensors):
    """Module-level shortcut for RequirementResolver().resolve(...)."""
    return RequirementResolver().resolve(selection, features, functions, sensors)
