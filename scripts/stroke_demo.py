#!/usr/bin/env python3
"""Replay a synthetic pointer trace through a brush preset.

CLI tool to exercise the stroke engine end to end without a host UI: a
wavy pointer trace with rising and falling pressure is fed through the
StrokeSynthesizer, then optionally simplified, smoothed and outlined. A
YAML summary (point/segment counts, width range, bounding boxes, areas) is
printed or written to a file.

Usage:
    # Basic Pen, 120 samples, print summary
    python scripts/stroke_demo.py --preset "Basic Pen"

    # Deterministic pencil stroke, simplified (1 px) and outlined
    python scripts/stroke_demo.py --preset Pencil --seed 7 \
        --simplify --tolerance 1.0 --outline 4.0 --output outputs/pencil_summary.yaml

    # Presets from a file; engine defaults, logging and the simplify
    # tolerance from config
    python scripts/stroke_demo.py --presets configs/brush_presets.v1.yaml \
        --config configs/engine.v1.yaml --preset Airbrush

Outputs:
    - summary YAML (stdout, or --output path written atomically)
"""

import argparse
import logging
import math
import sys
from typing import Any, Dict, List, Optional

import numpy as np
import yaml

from inkflow.path_ops import measure, outline_path, simplify_path, smooth_path
from inkflow.stroke_engine import StrokeSynthesizer, get_default_profile
from inkflow.utils import fs, logging_config, validators

SAMPLE_INTERVAL_MS = 16.0


def parse_args(argv: Optional[List[str]] = None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Replay a synthetic stroke through the brush engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    parser.add_argument('--preset', type=str, default="Basic Pen", help='Preset name')
    parser.add_argument('--presets', type=str, default=None,
                        help='brush_presets.v1 YAML (default: built-in presets)')
    parser.add_argument('--config', type=str, default=None, help='engine.v1 YAML')
    parser.add_argument('--points', type=int, default=120, help='Number of pointer samples')
    parser.add_argument('--length', type=float, default=400.0, help='Trace length along x (px)')
    parser.add_argument('--amplitude', type=float, default=30.0, help='Wave amplitude (px)')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed (overrides config)')
    parser.add_argument('--simplify', action='store_true', help='Simplify the stroke path')
    parser.add_argument('--tolerance', type=float, default=None,
                        help='Simplify tolerance (px, default: paths.simplify_tolerance)')
    parser.add_argument('--smooth', type=float, default=None, help='Smoothness for smooth_path')
    parser.add_argument('--outline', type=float, default=None, help='Outline width (px)')
    parser.add_argument('--output', type=str, default=None, help='Write summary YAML here')
    parser.add_argument('--verbose', action='store_true', help='Debug logging (overrides config level)')

    return parser.parse_args(argv)


def synthetic_trace(n_points: int, length: float, amplitude: float) -> np.ndarray:
    """Pointer trace rows of (x, y, pressure, tilt_x, tilt_y, timestamp_ms)."""
    n_points = max(2, n_points)
    t = np.linspace(0.0, 1.0, n_points)
    x = t * length
    y = amplitude * np.sin(t * 4.0 * math.pi)
    pressure = 0.2 + 0.8 * np.sin(t * math.pi)
    tilt_x = 30.0 * np.cos(t * math.pi)
    tilt_y = np.zeros(n_points)
    timestamps = np.arange(n_points) * SAMPLE_INTERVAL_MS
    return np.stack([x, y, pressure, tilt_x, tilt_y, timestamps], axis=1)


def load_engine_config(args) -> validators.EngineConfigV1:
    """engine.v1 from --config (defaults otherwise), with --seed applied."""
    engine_cfg = validators.load_engine_config(args.config) if args.config else validators.EngineConfigV1()
    if args.seed is not None:
        engine_cfg.randomness.seed = args.seed
    return engine_cfg


def configure_logging(log_cfg: validators.LoggingConfig, verbose: bool = False) -> None:
    """Apply the config's logging section; --verbose forces DEBUG."""
    logging_config.setup_logging(
        log_level=log_cfg.level,
        log_file=log_cfg.file,
        json=log_cfg.json_format,
        color=log_cfg.color,
    )
    if verbose:
        logging_config.set_level("DEBUG")


def run_demo(args, engine_cfg: Optional[validators.EngineConfigV1] = None) -> Dict[str, Any]:
    """Synthesize the stroke and post-process it; return the summary dict."""
    logger = logging.getLogger(__name__)

    if engine_cfg is None:
        engine_cfg = load_engine_config(args)
    presets = validators.load_brush_presets(args.presets) if args.presets else None

    synth = StrokeSynthesizer.from_config(engine_cfg, presets)
    preset = presets.get(args.preset) if presets is not None else None
    synth.load_profile(preset.to_profile() if preset is not None else get_default_profile(args.preset))
    logger.info(f"Using preset '{synth.profile.name}'")

    trace = synthetic_trace(args.points, args.length, args.amplitude)
    x0, y0, p0, _, _, t0 = trace[0]
    synth.begin_stroke((x0, y0), pressure=p0, timestamp=t0)
    for x, y, p, tx, ty, ts in trace[1:]:
        synth.add_point((x, y), pressure=p, tilt_x=tx, tilt_y=ty, timestamp=ts)
    result = synth.end_stroke()

    widths = [s.width for s in result.styles]
    summary: Dict[str, Any] = {
        'preset': synth.profile.name,
        'points': len(result.points),
        'segments': len(result.styles),
        'width_min': float(min(widths)) if widths else 0.0,
        'width_max': float(max(widths)) if widths else 0.0,
        'bbox': [float(v) for v in result.bounding_box()],
        'length_px': float(measure.path_perimeter(result.path)),
    }

    path = result.path
    paths_cfg = engine_cfg.paths
    if args.simplify:
        tolerance = args.tolerance if args.tolerance is not None else paths_cfg.simplify_tolerance
        path = simplify_path(path, tolerance)
        summary['simplify_tolerance'] = float(tolerance)
        summary['simplified_vertices'] = int(path.vertices().shape[0])
    if args.smooth is not None:
        path = smooth_path(path, args.smooth)
        summary['smoothed_segments'] = len(path)
    if args.outline is not None:
        outline = outline_path(
            path, args.outline,
            clipper_scale=paths_cfg.clipper_scale,
            flatten_tolerance=paths_cfg.flatten_tolerance,
            arc_tolerance=paths_cfg.arc_tolerance,
        )
        summary['outline_subpaths'] = len(outline.subpaths())
        summary['outline_area'] = float(measure.path_area(outline, paths_cfg.flatten_tolerance))

    return summary


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Console logging until the config's logging section is known
    logging_config.setup_logging(log_level="DEBUG" if args.verbose else "INFO", log_file=None)
    logging_config.install_excepthook()
    logger = logging.getLogger(__name__)

    try:
        engine_cfg = load_engine_config(args)
        configure_logging(engine_cfg.logging, verbose=args.verbose)
        summary = run_demo(args, engine_cfg)
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return 1

    if args.output:
        fs.atomic_yaml_dump(summary, args.output)
        logger.info(f"Saved summary: {args.output}")
    else:
        sys.stdout.write(yaml.safe_dump(summary, sort_keys=False))

    return 0


if __name__ == '__main__':
    sys.exit(main())
