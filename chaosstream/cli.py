"""Command-line entry point for chaosstream.

Usage:
    chaosstream audio --dt 0.01 --total-time 2.0 --sampling-rate 48000 --output-dir out/
    chaosstream audio --config configs/lorenz96.yaml
    chaosstream lines --model lorenz --count 40 --scale 0.1 --out lorenz.npz
    chaosstream trace --model lorenz --initial-state 1,1,1 --steps 40
"""

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from chaosstream.config import SimulationConfig, build_field, build_integrator, load_config
from chaosstream.errors import ChaosStreamError
from chaosstream.integrate.stream import take, trajectory_stream, until_non_finite
from chaosstream.render.geometry import build_lines, save_lines

logger = logging.getLogger(__name__)


def _float_list(text: str) -> List[float]:
    try:
        return [float(v) for v in text.split(",") if v.strip()]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected comma-separated numbers, got {text!r}") from exc


def _overrides(args) -> Dict[str, Any]:
    """Translate common flags into a nested config override dict."""
    overrides: Dict[str, Any] = {}
    if args.model is not None:
        overrides["model"] = args.model
    if args.dt is not None:
        overrides["step_size"] = args.dt
    if args.initial_state is not None:
        overrides["initial_state"] = args.initial_state
    if getattr(args, "forcing", None) is not None:
        forcing = args.forcing[0] if len(args.forcing) == 1 else args.forcing
        overrides.setdefault("lorenz96", {})["forcing"] = forcing
    if getattr(args, "dimension", None) is not None:
        overrides.setdefault("lorenz96", {})["dimension"] = args.dimension
    return overrides


def _load(args, extra: Optional[Dict[str, Any]] = None) -> SimulationConfig:
    overrides = _overrides(args)
    for section, values in (extra or {}).items():
        values = {k: v for k, v in values.items() if v is not None}
        if values:
            overrides.setdefault(section, {}).update(values)
    return load_config(args.config, overrides)


def cmd_audio(args) -> int:
    """Export one normalized WAV file per state coordinate."""
    from chaosstream.audio.export import export_audio

    cfg = _load(args, {"audio": {
        "total_time": args.total_time,
        "sampling_rate": args.sampling_rate,
        "output_dir": args.output_dir,
    }})
    paths = export_audio(cfg)
    print(f"Wrote {len(paths)} channel(s) to {cfg.audio.output_dir}")
    return 0


def cmd_lines(args) -> int:
    """Build line geometry and save it for an external renderer."""
    cfg = _load(args, {"visual": {"vertex_count": args.count, "scale": args.scale}})
    field = build_field(cfg)
    integrator = build_integrator(cfg, field)
    stream = trajectory_stream(integrator, field, warmup_steps=cfg.visual.warmup_steps)
    geometry = build_lines(stream, cfg.visual.vertex_count, cfg.visual.scale, cfg.visual.truncate)
    save_lines(geometry, args.out)
    print(f"Wrote {geometry.vertex_count} vertices to {args.out}")
    return 0


def cmd_trace(args) -> int:
    """Print t and state for each step as JSON lines."""
    cfg = _load(args)
    field = build_field(cfg)
    integrator = build_integrator(cfg, field)
    for sample in take(until_non_finite(trajectory_stream(integrator, field)), args.steps):
        print(json.dumps({"index": sample.index, "t": sample.t, "state": sample.state.tolist()}))
    return 0


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("--config", type=str, help="Simulation config YAML")
    p.add_argument("--model", choices=["lorenz", "lorenz96"], help="Vector field to integrate")
    p.add_argument("--dt", type=float, help="Integration time step")
    p.add_argument("--initial-state", type=_float_list, dest="initial_state",
                   help="Comma-separated initial state")
    p.add_argument("--forcing", type=_float_list,
                   help="Lorenz-96 forcing: one value or one per coordinate")
    p.add_argument("--dimension", type=int, help="Lorenz-96 variable count")
    p.add_argument("--verbose", action="store_true", help="Verbose output")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chaosstream",
        description="Integrate Lorenz-family flows and export geometry or audio",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Audio command
    audio_parser = subparsers.add_parser("audio", help="Export per-coordinate WAV files")
    _add_common(audio_parser)
    audio_parser.add_argument("--total-time", type=float, dest="total_time",
                              help="Audio length in seconds (default: 2.0)")
    audio_parser.add_argument("--sampling-rate", type=int, dest="sampling_rate",
                              help="Audio sampling rate (default: 48000)")
    audio_parser.add_argument("--output-dir", type=str, dest="output_dir",
                              help="Directory for the WAV files (default: .)")

    # Lines command
    lines_parser = subparsers.add_parser("lines", help="Export line geometry (.npz)")
    _add_common(lines_parser)
    lines_parser.add_argument("--count", type=int, help="Number of vertices")
    lines_parser.add_argument("--scale", type=float, help="Position scale factor")
    lines_parser.add_argument("--out", required=True, help="Output .npz path")

    # Trace command
    trace_parser = subparsers.add_parser("trace", help="Print the trajectory as JSON lines")
    _add_common(trace_parser)
    trace_parser.add_argument("--steps", type=int, default=40, help="Number of steps")

    return parser


def main(argv: Optional[list] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    commands = {
        "audio": cmd_audio,
        "lines": cmd_lines,
        "trace": cmd_trace,
    }
    try:
        return commands[args.command](args)
    except ChaosStreamError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
