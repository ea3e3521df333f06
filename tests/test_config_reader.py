import json

import pytest

from config_reader import ConfigReader
from models import Category, Tier


def test_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigReader(str(tmp_path / "nope"))


def test_missing_required_file(config_dir):
    (config_dir / "socs.json").unlink()
    with pytest.raises(FileNotFoundError, match="socs.json"):
        ConfigReader(str(config_dir))


def test_default_catalog(config_reader):
    assert len(config_reader.get_functions()) == 12
    assert len(config_reader.get_sensors()) == 5
    features = config_reader.get_features()
    assert len(features) == 6
    assert sum(f.category is Category.PARKING for f in features) == 1
    socs = config_reader.get_socs()
    assert [s.id for s in socs][:2] == ["soc_entry", "soc_mid"]
    assert socs[2].tier is Tier.HIGH_PERFORMANCE
    assert config_reader.get_default_selection() == []


def test_absent_axes_read_as_zero(config_reader):
    rear_cam = next(s for s in config_reader.get_sensors() if s.id == "sensor_rear_cam")
    assert rear_cam.resources.kdmips == 0
    assert rear_cam.resources.dewarp == 500


def test_negative_values_clamped_or_rejected(config_dir, write_json):
    write_json(config_dir / "sensors.json",
               {"sensors": [{"id": "s", "name": "S", "resources": {"isp": -10, "kDMIPS": 2}}]})
    sensor = ConfigReader(str(config_dir)).get_sensors()[0]
    assert sensor.resources.isp == 0
    assert sensor.resources.kdmips == 2

    with pytest.raises(ValueError):
        ConfigReader(str(config_dir), clamp=False).get_sensors()


def test_generator_config_is_optional(config_dir):
    (config_dir / "generator.json").unlink()
    reader = ConfigReader(str(config_dir))
    assert len(reader.get_socs()) == 5
    with pytest.raises(ValueError):
        reader.get_generator_config()


def test_default_selection(config_dir):
    path = config_dir / "features.json"
    data = json.loads(path.read_text())
    data["default_selection"] = ["feat_aeb"]
    path.write_text(json.dumps(data))
    assert ConfigReader(str(config_dir)).get_default_selection() == ["feat_aeb"]


def test_category_weights(config_reader):
    categories, weights = config_reader.get_category_weights()
    assert categories == ["Driving", "Parking"]
    assert weights == [0.7, 0.3]
