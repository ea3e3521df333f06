import pandas as pd
import pytest

from models import Feature, Function
from portfolio import (export_portfolio, export_session, flatten_entry, import_into, import_portfolio,
                       session_entries, unflatten_row)


def test_flatten_entry_spreads_resources_and_joins_ids():
    feature = Feature.create("f", "F", function_ids=["a", "b"], sensor_ids=["s"])
    flat = flatten_entry(feature.to_dict())
    assert flat["mandatoryFunctionIds"] == "a, b"
    assert flat["resources.kDMIPS"] == 0
    assert "resources" not in flat


def test_unflatten_row_handles_empty_cells():
    row = {"id": "f", "name": "F", "isFeature": "TRUE", "category": "Parking",
           "mandatoryFunctionIds": "a, b", "mandatorySensorIds": float("nan"),
           "resources.kDMIPS": float("nan"), "resources.isp": 5}
    entry = unflatten_row(row, "features")
    assert entry["isFeature"] is True
    assert entry["mandatoryFunctionIds"] == ["a", "b"]
    assert entry["mandatorySensorIds"] == []
    assert entry["resources"] == {"kDMIPS": None, "isp": 5}


def test_unflatten_row_plain_function_in_mixed_sheet():
    row = {"id": "func", "name": "Func", "isFeature": float("nan"),
           "mandatoryFunctionIds": float("nan"), "mandatorySensorIds": float("nan"),
           "resources.kDMIPS": 12}
    entry = unflatten_row(row, "features")
    assert entry["isFeature"] is False
    assert entry["mandatoryFunctionIds"] == []
    assert entry["resources"] == {"kDMIPS": 12}


def test_json_must_be_an_array(tmp_path, write_json):
    path = write_json(tmp_path / "socs.json", {"socs": []})
    with pytest.raises(ValueError, match="expected an array"):
        import_portfolio(str(path), "socs")


def test_unsupported_extension(tmp_path):
    path = tmp_path / "socs.txt"
    path.write_text("[]")
    with pytest.raises(ValueError, match="Unsupported"):
        import_portfolio(str(path), "socs")
    with pytest.raises(ValueError, match="Unsupported"):
        export_portfolio([], str(tmp_path / "out.txt"))


def test_unknown_kind(tmp_path, write_json):
    path = write_json(tmp_path / "x.json", [])
    with pytest.raises(ValueError, match="kind"):
        import_portfolio(str(path), "actuators")


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        import_portfolio(str(tmp_path / "missing.csv"), "sensors")


def test_csv_socs_round_trip(default_session, tmp_path):
    path = export_portfolio(session_entries(default_session, "socs"), str(tmp_path / "socs.csv"))
    df = pd.read_csv(path)
    assert "resources.dramBw" in df.columns
    assert list(df["id"]) == [s.id for s in default_session.socs]
    assert import_portfolio(path, "socs") == default_session.socs


def test_csv_features_round_trip(default_session, tmp_path):
    path = export_portfolio(session_entries(default_session, "features"), str(tmp_path / "features.csv"))
    functions, features = import_portfolio(path, "features")
    assert functions == default_session.functions
    assert [f.id for f in features] == [f.id for f in default_session.features]
    assert features[0].meta.mandatory_sensor_ids == ["sensor_fc_mc_eco", "sensor_radar_gen4"]


def test_xlsx_sensors_import(tmp_path):
    path = tmp_path / "sensors.xlsx"
    pd.DataFrame([
        {"id": "cam", "name": "Camera", "resources.isp": 400, "resources.dramBw": 1.1},
        {"id": "imu", "name": "IMU", "resources.kDMIPS": -1},
    ]).to_excel(path, index=False)
    sensors = import_portfolio(str(path), "sensors")
    assert [s.id for s in sensors] == ["cam", "imu"]
    assert sensors[0].resources.isp == 400
    assert sensors[1].resources.kdmips == 0
    assert sensors[1].resources.isp == 0


def test_import_into_replaces_catalog(default_session, tmp_path, write_json):
    path = write_json(tmp_path / "socs.json", [
        {"id": "tiny", "name": "Tiny", "vendor": "X", "tier": "Entry", "resources": {"kDMIPS": 1}},
    ])
    assert import_into(default_session, str(path), "socs") == 1
    assert [s.id for s in default_session.socs] == ["tiny"]


def test_import_into_features_replaces_functions_too(default_session, tmp_path, write_json):
    path = write_json(tmp_path / "features.json", [
        Function("fx", "Fx").to_dict(),
        Feature.create("feat_x", "X", function_ids=["fx"]).to_dict(),
    ])
    assert import_into(default_session, str(path), "features") == 2
    assert [f.id for f in default_session.functions] == ["fx"]
    assert [f.id for f in default_session.features] == ["feat_x"]


@pytest.mark.parametrize("fmt", ["json", "csv", "xlsx"])
def test_export_session(default_session, tmp_path, fmt):
    paths = export_session(default_session, str(tmp_path / "export"), fmt=fmt)
    assert len(paths) == 3
    socs_path = next(p for p in paths if "soc-portfolio" in p)
    assert import_portfolio(socs_path, "socs") == default_session.socs


def test_csv_without_feature_flag_imports_functions(tmp_path):
    path = tmp_path / "functions.csv"
    pd.DataFrame([
        {"id": "f1", "name": "F1", "mandatoryFunctionIds": "", "mandatorySensorIds": "",
         "resources.kDMIPS": 10},
        {"id": "f2", "name": "F2", "mandatoryFunctionIds": "", "mandatorySensorIds": "",
         "resources.kDMIPS": 5},
    ]).to_csv(path, index=False)
    functions, features = import_portfolio(str(path), "features")
    assert [f.id for f in functions] == ["f1", "f2"]
    assert features == []
    assert functions[0].resources.kdmips == 10


def test_string_feature_flags_in_json(tmp_path, write_json):
    path = write_json(tmp_path / "features.json", [
        {"id": "f1", "name": "F1", "isFeature": "false", "resources": {"kDMIPS": 3}},
        {"id": "feat", "name": "Feat", "isFeature": "TRUE", "mandatoryFunctionIds": ["f1"]},
    ])
    functions, features = import_portfolio(str(path), "features")
    assert [f.id for f in functions] == ["f1"]
    assert [f.id for f in features] == ["feat"]
