"""Test the stroke replay CLI.

Tests for scripts/stroke_demo.py:
    - Synthetic trace shape and monotone timestamps
    - run_demo summary keys, optional post-processing entries
    - Seeded runs are reproducible
    - --simplify falls back to paths.simplify_tolerance, --tolerance wins
    - main() writes YAML and returns 0; bad inputs return 1
    - main() applies the config logging section and installs the excepthook

Run:
    pytest tests/test_stroke_demo.py -v
"""

import json
import logging
import sys
from pathlib import Path

import numpy as np
import pytest
import yaml

from inkflow.utils import logging_config
from scripts import stroke_demo


@pytest.fixture(scope="module")
def project_root():
    """Project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture(autouse=True)
def restore_logging(monkeypatch):
    """Undo the handlers and excepthook installed by main()."""
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler.formatter, logging_config.ContextFormatter):
            root.removeHandler(handler)
            handler.close()


def _write_engine_config(path, **sections):
    path.write_text(yaml.safe_dump({"schema": "engine.v1", **sections}))
    return path


def test_synthetic_trace():
    trace = stroke_demo.synthetic_trace(50, 200.0, 10.0)
    assert trace.shape == (50, 6)
    assert np.all(np.diff(trace[:, 5]) > 0)
    assert trace[:, 2].min() >= 0.0 and trace[:, 2].max() <= 1.0
    assert stroke_demo.synthetic_trace(1, 10.0, 1.0).shape == (2, 6)


def test_run_demo_summary():
    args = stroke_demo.parse_args(["--preset", "Pencil", "--seed", "3", "--points", "60"])
    summary = stroke_demo.run_demo(args)

    assert summary['preset'] == "Pencil"
    assert summary['points'] == 60
    assert summary['segments'] == 59
    assert 0.3 <= summary['width_min'] <= summary['width_max'] <= 6.0
    assert summary['length_px'] > 400.0 * 0.9
    assert 'outline_area' not in summary


def test_run_demo_post_processing(project_root):
    args = stroke_demo.parse_args([
        "--presets", str(project_root / "configs/brush_presets.v1.yaml"),
        "--config", str(project_root / "configs/engine.v1.yaml"),
        "--preset", "Marker", "--seed", "1",
        "--simplify", "--tolerance", "1.0", "--smooth", "0.5", "--outline", "4.0",
    ])
    summary = stroke_demo.run_demo(args)
    assert summary['preset'] == "Marker"
    assert 3 <= summary['simplified_vertices'] < summary['points']
    assert summary['smoothed_segments'] == summary['simplified_vertices']
    assert summary['outline_subpaths'] >= 1
    assert summary['outline_area'] > 0.0


def test_seeded_runs_match():
    argv = ["--preset", "Airbrush", "--seed", "11", "--points", "40"]
    first = stroke_demo.run_demo(stroke_demo.parse_args(argv))
    second = stroke_demo.run_demo(stroke_demo.parse_args(argv))
    assert first == second


def test_main_writes_yaml(tmp_path):
    out = tmp_path / "summary.yaml"
    code = stroke_demo.main(["--seed", "2", "--points", "30", "--output", str(out)])
    assert code == 0
    summary = yaml.safe_load(out.read_text())
    assert summary['preset'] == "Basic Pen"
    assert summary['points'] == 30


def test_main_missing_presets_file(tmp_path):
    code = stroke_demo.main(["--presets", str(tmp_path / "missing.yaml")])
    assert code == 1


def test_simplify_tolerance_from_config(tmp_path):
    config = _write_engine_config(tmp_path / "engine.v1.yaml", paths={"simplify_tolerance": 0.0})
    base = ["--preset", "Basic Pen", "--seed", "4", "--simplify"]

    exact = stroke_demo.run_demo(stroke_demo.parse_args(base + ["--config", str(config)]))
    assert exact['simplify_tolerance'] == 0.0

    default = stroke_demo.run_demo(stroke_demo.parse_args(base))
    assert default['simplify_tolerance'] == 1.0
    assert default['simplified_vertices'] < exact['simplified_vertices']

    override = stroke_demo.run_demo(stroke_demo.parse_args(
        base + ["--config", str(config), "--tolerance", "1.0"]))
    assert override['simplify_tolerance'] == 1.0
    assert override['simplified_vertices'] == default['simplified_vertices']


def test_main_applies_logging_config(tmp_path):
    log_file = tmp_path / "logs" / "demo.log"
    hook = sys.excepthook
    config = _write_engine_config(
        tmp_path / "engine.v1.yaml",
        logging={"level": "WARNING", "file": str(log_file), "json": True, "color": False},
    )
    code = stroke_demo.main(["--config", str(config), "--points", "20",
                             "--output", str(tmp_path / "summary.yaml")])
    assert code == 0
    assert logging.getLogger().level == logging.WARNING
    assert sys.excepthook is not hook
    # INFO records are below the configured level
    quiet = [json.loads(line) for line in log_file.read_text().strip().splitlines()]
    assert all(r['lvl'] in ("WARNING", "ERROR", "CRITICAL") for r in quiet)

    code = stroke_demo.main(["--config", str(config), "--points", "20", "--verbose",
                             "--output", str(tmp_path / "summary.yaml")])
    assert code == 0
    assert logging.getLogger().level == logging.DEBUG
    records = [json.loads(line) for line in log_file.read_text().strip().splitlines()]
    assert any(r['msg'].startswith("Using preset") for r in records)
