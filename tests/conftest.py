"""
Shared fixtures: the shipped default catalog, a two-SoC scenario and
temporary configuration directories.
"""

import json
import os
import shutil

import matplotlib

matplotlib.use("Agg")

import pytest

from config_reader import ConfigReader
from models import Feature, Function, ResourceVector, Sensor, SoC
from session import Session

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_CONFIG_DIR = os.path.join(ROOT, "configs")


@pytest.fixture
def config_reader():
    return ConfigReader(DEFAULT_CONFIG_DIR)


@pytest.fixture
def default_session(config_reader):
    return Session.defaults(config_reader)


@pytest.fixture
def config_dir(tmp_path):
    """Writable copy of the shipped configs."""
    target = tmp_path / "configs"
    shutil.copytree(DEFAULT_CONFIG_DIR, target)
    return target


@pytest.fixture
def write_json():
    def _write(path, data):
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def soc_a():
    return SoC("soc_a", "SoC A", "Alpha", "Entry",
               ResourceVector(kdmips=50, tops=5, isp=1500, dewarp=500, gpu=100, dram_bw=8))


@pytest.fixture
def soc_b():
    return SoC("soc_b", "SoC B", "Gamma", "High-performance",
               ResourceVector(kdmips=250, tops=40, isp=6000, dewarp=3000, gpu=800, dram_bw=30))


@pytest.fixture
def small_catalog():
    """Two features sharing a sensor and a function."""
    functions = [
        Function("f1", "Detect", ResourceVector(kdmips=10, tops=2)),
        Function("f2", "Plan", ResourceVector(kdmips=5, dram_bw=1)),
        Function("f3", "Park", ResourceVector(isp=100, dewarp=50)),
    ]
    sensors = [
        Sensor("s1", "Camera", ResourceVector(isp=500, dram_bw=1.5)),
        Sensor("s2", "Radar", ResourceVector(kdmips=3)),
    ]
    features = [
        Feature.create("a", "A", function_ids=["f1", "f2"], sensor_ids=["s1"]),
        Feature.create("b", "B", function_ids=["f2"], sensor_ids=["s1", "s2"]),
        Feature.create("p", "P", category="Parking", function_ids=["f3", "ghost_func"],
                       sensor_ids=["ghost_sensor"]),
    ]
    return functions, sensors, features
