import json
import os
from models import Function, Sensor, Feature, SoC


class ConfigReader:
    """Reads and parses the ADAS catalog from JSON files"""

    FILES = {
        'functions': 'functions.json',
        'sensors': 'sensors.json',
        'features': 'features.json',
        'socs': 'socs.json',
        'generator': 'generator.json',
    }

    def __init__(self, config_dir='configs', clamp=True):
        """
        Initialize config reader

        Args:
            config_dir: Directory containing configuration JSON files
            clamp: Clamp negative resource values to 0 instead of raising ValueError
        """
        if not os.path.exists(config_dir):
            raise FileNotFoundError(f"Configuration directory not found: {config_dir}")

        self.config_dir = config_dir
        self.clamp = clamp

        # Load all config files
        self.functions_config = self._load_json(self.FILES['functions'])
        self.sensors_config = self._load_json(self.FILES['sensors'])
        self.features_config = self._load_json(self.FILES['features'])
        self.socs_config = self._load_json(self.FILES['socs'])
        # Only needed for synthetic catalogs
        self.generator_config = self._load_json(self.FILES['generator'], required=False)

    def _load_json(self, filename, required=True):
        """Load a JSON file from config directory"""
        filepath = os.path.join(self.config_dir, filename)
        if not os.path.exists(filepath):
            if required:
                raise FileNotFoundError(f"Configuration file not found: {filepath}")
            return {}
        with open(filepath, 'r') as f:
            return json.load(f)

    def _entries(self, config, key):
        entries = config.get(key, []) if isinstance(config, dict) else config
        if not isinstance(entries, list):
            raise ValueError(f"'{key}' must be a list of entries")
        return entries

    def get_functions(self):
        """Get software function catalog"""
        return [Function.from_dict(f, clamp=self.clamp)
                for f in self._entries(self.functions_config, 'functions')]

    def get_sensors(self):
        """Get sensor catalog"""
        return [Sensor.from_dict(s, clamp=self.clamp)
                for s in self._entries(self.sensors_config, 'sensors')]

    def get_features(self):
        """Get selectable features"""
        return [Feature.from_dict(f) for f in self._entries(self.features_config, 'features')]

    def get_socs(self):
        """Get candidate SoC catalog"""
        return [SoC.from_dict(s, clamp=self.clamp) for s in self._entries(self.socs_config, 'socs')]

    def get_default_selection(self):
        """Feature ids preselected in features.json, if any"""
        if isinstance(self.features_config, dict):
            return list(self.features_config.get('default_selection', []))
        return []

    def get_generator_config(self):
        """Get value ranges for synthetic catalog generation"""
        if not self.generator_config:
            raise ValueError(f"No {self.FILES['generator']} found in {self.config_dir}")
        return self.generator_config

    def get_function_ranges(self):
        return self.get_generator_config().get('function_ranges', {})

    def get_sensor_ranges(self):
        return self.get_generator_config().get('sensor_ranges', {})

    def get_soc_tiers(self):
        """Get SoC tier configurations (weight and per-axis ranges)"""
        return self.get_generator_config().get('soc_tiers', {})

    def get_vendors(self):
        return self.get_generator_config().get('vendors', ['Generic'])

    def get_category_weights(self):
        """Get feature category weights as a list in category order"""
        weights_dict = self.get_generator_config().get('category_weights', {'Driving': 1.0})
        categories = list(weights_dict.keys())
        return categories, [weights_dict[c] for c in categories]
