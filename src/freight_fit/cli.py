from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from freight_fit.config import configure_logging, load_settings
from freight_fit.fit import calculate_fit
from freight_fit.models import CargoGroup, VehicleGeometry
from freight_fit.parsing import parse_dimensions
from freight_fit.vehicles import VEHICLE_PRESETS, get_vehicle_preset, vehicle_from_record

logger = logging.getLogger(__name__)


def read_text(args: argparse.Namespace) -> str:
    if getattr(args, "text", None):
        return args.text
    if getattr(args, "file", None):
        return Path(args.file).read_text(encoding="utf-8")
    return ""


def load_input(path: Path) -> tuple[VehicleGeometry | None, list[CargoGroup], bool]:
    """
    Read a JSON fit request:
        {
            "vehicle": {...} | "vehicle_preset": "26FT_BOX" | "vehicle_record": {...},
            "text": "3@48 x 48 x 52" | "groups": [{...}],
            "stackable": false
        }
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object")

    for key in ("vehicle", "vehicle_record"):
        if data.get(key) is not None and not isinstance(data[key], dict):
            raise ValueError(f"{path}: '{key}' must be a JSON object")
    if data.get("groups") is not None and not (
        isinstance(data["groups"], list) and all(isinstance(g, dict) for g in data["groups"])
    ):
        raise ValueError(f"{path}: 'groups' must be a list of JSON objects")
    if not isinstance(data.get("text") or "", str):
        raise ValueError(f"{path}: 'text' must be a string")

    vehicle = None
    if data.get("vehicle") is not None:
        vehicle = VehicleGeometry(**data["vehicle"])
    elif data.get("vehicle_preset"):
        vehicle = get_vehicle_preset(str(data["vehicle_preset"]))
    elif data.get("vehicle_record") is not None:
        vehicle = vehicle_from_record(data["vehicle_record"])

    if data.get("groups") is not None:
        groups = [CargoGroup(**g) for g in data["groups"]]
    else:
        groups = parse_dimensions(data.get("text") or "")

    return vehicle, groups, bool(data.get("stackable", False))


def vehicle_from_args(args: argparse.Namespace) -> VehicleGeometry | None:
    if args.preset:
        return get_vehicle_preset(args.preset)
    if args.vehicle_json:
        return vehicle_from_record(json.loads(Path(args.vehicle_json).read_text(encoding="utf-8")))
    if args.length:
        return VehicleGeometry(
            interior_length=args.length,
            interior_width=args.width,
            interior_height=args.height,
            door_width=args.door_width,
            door_height=args.door_height,
        )
    return None


def write_plan(plan: dict[str, Any], output_path: str | None) -> None:
    text = json.dumps(plan, indent=2, sort_keys=True)
    if output_path:
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    print(text)


def run_parse(args: argparse.Namespace) -> int:
    groups = parse_dimensions(read_text(args))
    write_plan(
        {
            "groups": [g.model_dump() for g in groups],
            "total_units": sum(g.quantity for g in groups),
        },
        args.output,
    )
    return 0


def run_fit(args: argparse.Namespace) -> int:
    if args.input:
        vehicle, groups, stackable = load_input(Path(args.input))
        stackable = stackable or args.stackable
    else:
        vehicle = None
        groups = parse_dimensions(read_text(args))
        stackable = args.stackable

    cli_vehicle = vehicle_from_args(args)
    if cli_vehicle is not None:
        vehicle = cli_vehicle

    if vehicle is None:
        raise ValueError("A vehicle is required: --preset, --vehicle-json or --length/--width/--height")
    if not groups:
        raise ValueError("No freight dimensions could be parsed")

    result = calculate_fit(vehicle, groups, stackable=stackable)
    logger.info(f"fits={result.fits} units={result.total_units} length_required={result.length_required}")
    write_plan(result.model_dump(), args.output)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="freight-fit", description="Freight fit calculator")
    parser.add_argument("--log-level", help="Logging level (default from FREIGHT_FIT_LOG_LEVEL)")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_text_source(p: argparse.ArgumentParser) -> None:
        p.add_argument("--text", help="Dimension text, e.g. '3@48 x 48 x 52'")
        p.add_argument("--file", help="File holding dimension text")
        p.add_argument("--output", help="Also write the JSON result to this path")

    p_parse = sub.add_parser("parse", help="Parse dimension text into cargo groups")
    add_text_source(p_parse)
    p_parse.set_defaults(func=run_parse)

    p_fit = sub.add_parser("fit", help="Check whether freight fits a vehicle")
    add_text_source(p_fit)
    p_fit.add_argument("--input", help="JSON fit request (vehicle + text/groups + stackable)")
    p_fit.add_argument("--preset", choices=sorted(VEHICLE_PRESETS.keys()), help="Named vehicle preset")
    p_fit.add_argument("--vehicle-json", help="Vehicle catalog record as a JSON file")
    p_fit.add_argument("--length", type=float, help="Interior length (in)")
    p_fit.add_argument("--width", type=float, default=96.0, help="Interior width (in)")
    p_fit.add_argument("--height", type=float, default=96.0, help="Interior height (in)")
    p_fit.add_argument("--door-width", type=float, help="Door width (in), defaults to interior width")
    p_fit.add_argument("--door-height", type=float, help="Door height (in), defaults to interior height")
    p_fit.add_argument("--stackable", action="store_true", help="Allow stacking freight")
    p_fit.set_defaults(func=run_fit)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level or load_settings().log_level)

    try:
        return args.func(args)
    except (ValueError, ValidationError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
