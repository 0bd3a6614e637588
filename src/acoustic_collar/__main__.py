"""Command line tool for inspecting and preparing collar settings files.

Usage:
    python -m acoustic_collar show --settings config/appSettings.yaml
    python -m acoustic_collar validate config/appSettings.yaml
    python -m acoustic_collar init config/appSettings.yaml
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from acoustic_collar.config import SystemConfig, configure_logging
from acoustic_collar.exceptions import ValidationError
from acoustic_collar.formatting import describe_step, format_milliseconds, format_percentage
from acoustic_collar.models import STEP_KEYS, AppSettings
from acoustic_collar.persistence import load_settings_from_yaml, save_settings_to_yaml


def print_settings(settings: AppSettings) -> None:
    print("=" * 60)
    print("COLLAR SETTINGS")
    print("=" * 60)
    print(
        f"Idle period:       {format_milliseconds(settings.idle_period_min_ms)} - "
        f"{format_milliseconds(settings.idle_period_max_ms)}"
    )
    print(
        f"Action period:     {format_milliseconds(settings.action_period_min_ms)} - "
        f"{format_milliseconds(settings.action_period_max_ms)}"
    )
    print(
        f"Decibel threshold: {settings.decibel_threshold_min} - {settings.decibel_threshold_max} dB"
    )
    print(f"Mic sensitivity:   {settings.mic_sensitivity}")
    print(f"Alert type:        {settings.alert_type.name}")
    print(
        f"Shock bounds:      {format_percentage(settings.collar_min_shock / 100)} - "
        f"{format_percentage(settings.collar_max_shock / 100)}"
    )
    print(
        f"Vibration bounds:  {format_percentage(settings.collar_min_vibe / 100)} - "
        f"{format_percentage(settings.collar_max_vibe / 100)}"
    )

    for key in STEP_KEYS:
        steps = settings.steps(key)
        print(f"\n{key.replace('_', ' ').capitalize()} ({len(steps)}):")
        for index, step in enumerate(steps):
            print(f"  {index}. {describe_step(step)}")


def cmd_show(args: argparse.Namespace) -> int:
    settings = load_settings_from_yaml(args.settings) if args.settings else AppSettings()
    print_settings(settings)
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    try:
        load_settings_from_yaml(args.file)
    except (FileNotFoundError, ValidationError, yaml.YAMLError) as e:
        print(f"✗ INVALID: {e}")
        return 1
    print(f"✓ VALID: {args.file}")
    return 0


def cmd_init(args: argparse.Namespace) -> int:
    path = Path(args.file)
    if path.exists() and not args.force:
        print(f"Error: {path} already exists (use --force to overwrite)")
        return 1
    save_settings_to_yaml(AppSettings(), path)
    print(f"Wrote default settings to {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="acoustic_collar", description="Inspect and prepare collar settings files."
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug output")
    sub = parser.add_subparsers(dest="command", required=True)

    show = sub.add_parser("show", help="Print a configuration (defaults without --settings)")
    show.add_argument("--settings", "-s", help="Path to a settings .yaml file")
    show.set_defaults(func=cmd_show)

    validate = sub.add_parser("validate", help="Check a settings file")
    validate.add_argument("file", help="Path to the settings .yaml file")
    validate.set_defaults(func=cmd_validate)

    init = sub.add_parser("init", help="Write the default settings to a file")
    init.add_argument("file", help="Destination .yaml file")
    init.add_argument("--force", action="store_true", help="Overwrite an existing file")
    init.set_defaults(func=cmd_init)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(SystemConfig(log_level="DEBUG" if args.verbose else "WARNING"))
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
