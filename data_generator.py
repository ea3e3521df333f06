import random
from models import AXIS_KEYS, Category, Feature, Function, ResourceVector, Sensor, SoC, Tier


class CatalogGenerator:
    """
    Generates a reproducible synthetic catalog (functions, sensors, features,
    SoCs) from the value ranges in generator.json. Useful for what-if runs on
    catalogs larger than the default one.
    """

    def __init__(self, num_functions=12, num_sensors=5, num_features=6, num_socs=5, seed=42, config_reader=None):
        self.rng = random.Random(seed)
        self.num_functions = num_functions
        self.num_sensors = num_sensors
        self.num_features = num_features
        self.num_socs = num_socs
        self.functions = []
        self.sensors = []
        self.features = []
        self.socs = []

        if config_reader is None:
            raise ValueError("config_reader is required")
        else:
            self.config_reader = config_reader

        self.function_ranges = self.config_reader.get_function_ranges()
        self.sensor_ranges = self.config_reader.get_sensor_ranges()
        self.soc_tiers = self.config_reader.get_soc_tiers()
        self.vendors = self.config_reader.get_vendors()
        self.categories, self.category_weights = self.config_reader.get_category_weights()

        generator_config = self.config_reader.get_generator_config()
        self.max_functions_per_feature = generator_config.get('max_functions_per_feature', 3)
        self.max_sensors_per_feature = generator_config.get('max_sensors_per_feature', 3)

    def _draw_resources(self, ranges):
        """Uniform draw per axis. Axes without a range stay 0."""
        values = {}
        for key in AXIS_KEYS:
            bounds = ranges.get(key)
            if not bounds:
                continue
            low, high = bounds
            values[key] = round(self.rng.uniform(low, high), 1)
        return ResourceVector.from_dict(values)

    def generate_functions(self):
        """Generate software functions"""
        for i in range(self.num_functions):
            self.functions.append(Function(
                id=f"func_{i}",
                name=f"Function_{i + 1}",
                resources=self._draw_resources(self.function_ranges),
            ))

    def generate_sensors(self):
        """Generate sensors"""
        for i in range(self.num_sensors):
            self.sensors.append(Sensor(
                id=f"sensor_{i}",
                name=f"Sensor {i + 1}",
                resources=self._draw_resources(self.sensor_ranges),
            ))

    def generate_features(self, weights=None):
        """Generate features, each depending on a random subset of functions and sensors"""
        if weights is None:
            weights = self.category_weights

        counters = {category: 0 for category in self.categories}
        for i in range(self.num_features):
            category = self.rng.choices(self.categories, weights=weights)[0]
            counters[category] += 1

            n_funcs = self.rng.randint(1, max(1, min(self.max_functions_per_feature, len(self.functions))))
            n_sens = self.rng.randint(1, max(1, min(self.max_sensors_per_feature, len(self.sensors))))
            function_ids = [f.id for f in self.rng.sample(self.functions, min(n_funcs, len(self.functions)))]
            sensor_ids = [s.id for s in self.rng.sample(self.sensors, min(n_sens, len(self.sensors)))]

            self.features.append(Feature.create(
                id=f"feat_{i}",
                name=f"Feature_{category[0].lower()}_{counters[category]}",
                description=f"Synthetic {category.lower()} feature.",
                category=Category(category),
                function_ids=function_ids,
                sensor_ids=sensor_ids,
            ))

    def generate_socs(self):
        """Generate candidate SoCs with tier distribution from config"""
        tier_names = list(self.soc_tiers.keys())
        tier_weights = [self.soc_tiers[t].get('weight', 1.0) for t in tier_names]

        # Calculate exact count per tier based on weights; last tier gets the remainder
        tier_counts = {}
        remaining = self.num_socs
        total_weight = sum(tier_weights) or 1.0
        for i, tier in enumerate(tier_names):
            if i < len(tier_names) - 1:
                count = min(remaining, round(tier_weights[i] / total_weight * self.num_socs))
                tier_counts[tier] = count
                remaining -= count
            else:
                tier_counts[tier] = remaining

        idx = 0
        for tier, count in tier_counts.items():
            ranges = self.soc_tiers[tier].get('ranges', {})
            for _ in range(count):
                self.socs.append(SoC(
                    id=f"soc_{idx}",
                    name=f"SoC {idx + 1:03d}",
                    vendor=self.rng.choice(self.vendors),
                    tier=Tier(tier),
                    resources=self._draw_resources(ranges),
                ))
                idx += 1

    def generate_data(self):
        self.generate_functions()
        self.generate_sensors()
        self.generate_features()
        self.generate_socs()
        return self.functions, self.sensors, self.features, self.socs
