import os

from main import build_parser, main
from session import Session

DEFAULT_CONFIG_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "configs")


def _run(tmp_path, *extra):
    args = build_parser().parse_args(["--config_dir", DEFAULT_CONFIG_DIR,
                                      "--output_dir", str(tmp_path / "results"), *extra])
    return main(args)


def test_pipeline_with_selected_features(tmp_path, capsys):
    evaluation = _run(tmp_path, "--features", "feat_aeb,feat_lka")
    assert evaluation.match.best_fit.id == "soc_mid"
    out = capsys.readouterr().out
    assert "PIPELINE COMPLETED SUCCESSFULLY" in out


def test_pipeline_reports_unknown_features(tmp_path, capsys):
    evaluation = _run(tmp_path, "--features", "feat_missing")
    assert evaluation.requirements.unknown_feature_ids == ["feat_missing"]
    assert "Unknown feature ids ignored" in capsys.readouterr().out


def test_pipeline_saves_state_plots_and_exports(tmp_path):
    state = tmp_path / "session.json"
    _run(tmp_path, "--all_features", "--plots", "--report", "--save_state", str(state),
         "--export_dir", str(tmp_path / "export"), "--export_format", "csv")

    assert state.exists()
    assert Session.load(str(state)).selection
    assert os.path.exists(tmp_path / "results" / "adas-soc-summary.png")
    assert os.path.exists(tmp_path / "export" / "soc-portfolio.csv")

    evaluation = _run(tmp_path, "--state", str(state))
    assert evaluation.match.best_fit.id == "soc_delta_mid"


def test_pipeline_synthetic(tmp_path):
    evaluation = _run(tmp_path, "--synthetic", "--num_socs", "8", "--all_features", "--seed", "11")
    assert len(evaluation.requirements.selected_features) == 6
