"""Tests for run-file loading and the config tracker."""

import io

import pytest

from cfrsim import InvalidParameter
from cfrsim.config import DEFAULTS_PATH
from cfrsim.utils import (
    ConfigTracker,
    load_config_from_file,
    settings_from_config,
    validate_config,
)


def test_packaged_defaults_match_tutorial():
    config = load_config_from_file()
    settings = settings_from_config(config)
    assert DEFAULTS_PATH.exists()
    assert settings.case_counts == [5, 10, 100]
    assert settings.period_count == 90
    assert settings.cfr_by_scenario == [0.2, 0.2, 0.2]
    assert settings.seed == 42


def test_overrides_replace_file_values(run_file):
    path = run_file(
        "simulation:\n"
        "  case_counts: [5, 10]\n"
        "  period_count: 30\n"
        "  cfr: 0.2\n"
    )
    config = load_config_from_file(path)
    settings = settings_from_config(
        config, overrides={"period_count": 7, "cfr": [0.1, 0.4], "seed": None}
    )
    assert settings.period_count == 7
    assert settings.cfr_by_scenario == [0.1, 0.4]
    assert settings.seed is None
    assert settings.output_dir is None


def test_unknown_override_rejected():
    config = load_config_from_file()
    with pytest.raises(KeyError):
        settings_from_config(config, overrides={"horizon": 10})


def test_missing_file():
    with pytest.raises(FileNotFoundError):
        load_config_from_file("does/not/exist.yaml")


def test_empty_file(run_file):
    with pytest.raises(ValueError):
        load_config_from_file(run_file(""))


def test_missing_section(run_file):
    with pytest.raises(KeyError):
        load_config_from_file(run_file("output:\n  dir: results\n"))


def test_missing_key():
    with pytest.raises(KeyError):
        validate_config({"simulation": {"case_counts": [5], "cfr": 0.2}})


def test_report_unused(run_file):
    path = run_file(
        "simulation:\n"
        "  case_counts: [5]\n"
        "  period_count: 3\n"
        "  cfr: 0.2\n"
        "  smoothing: 7\n"
        "plotting:\n"
        "  dpi: 150\n"
    )
    config = load_config_from_file(path)
    settings_from_config(config)
    out = io.StringIO()
    unused = config.report_unused(out_stream=out)
    assert unused == ["plotting", "simulation.smoothing"]
    assert "simulation.smoothing" in out.getvalue()


def test_tracker_tracks_nested_sections():
    config = ConfigTracker({"simulation": {"cfr": 0.2, "note": "x"}, "output": {"dir": "r"}})
    assert config["simulation"]["cfr"] == 0.2
    assert config.unused() == ["output", "simulation.note"]


def test_tracker_returns_lists_unchanged():
    config = ConfigTracker({"case_counts": [5, 10]})
    assert config["case_counts"] == [5, 10]
    assert type(config["case_counts"]) is list
    assert config.get("missing", 3) == 3
    assert config.unused() == []


def test_single_cfr_list_must_match_case_counts(run_file):
    path = run_file(
        "simulation:\n"
        "  case_counts: [5, 10, 100]\n"
        "  period_count: 30\n"
        "  cfr: [0.2]\n"
    )
    with pytest.raises(InvalidParameter):
        settings_from_config(load_config_from_file(path))


def test_scalar_case_counts_is_invalid_parameter(run_file):
    path = run_file(
        "simulation:\n"
        "  case_counts: 5\n"
        "  period_count: 30\n"
        "  cfr: 0.2\n"
    )
    with pytest.raises(InvalidParameter):
        settings_from_config(load_config_from_file(path))
