#!/usr/bin/env python3
"""Lightweight validator for the mood configuration JSON."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, List

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from money_mood.colors import is_hex_color
from money_mood.icons import validate_distinct_colors, validate_icon_entry
from money_mood.models import AppIconVariant
from money_mood.settings import validate_thresholds

CONFIG_PATH = PROJECT_ROOT / "money_mood" / "settings" / "mood.json"


def _check_thresholds(label: str, table: Dict[str, Any], errors: List[str]) -> None:
    try:
        validate_thresholds(table)
    except (TypeError, ValueError) as exc:
        errors.append(f"{label}: {exc}")


def validate_config(data: Dict[str, Any]) -> List[str]:
    errors: List[str] = []

    status = data.get("status", {})
    _check_thresholds("status.thresholds", status.get("thresholds", {}), errors)
    for key, color in status.get("colors", {}).items():
        if not is_hex_color(color):
            errors.append(f"status.colors.{key}: invalid hex {color!r}")

    icons = data.get("icons", {})
    _check_thresholds("icons.thresholds", icons.get("thresholds", {}), errors)
    variants = icons.get("variants", {})
    for variant in AppIconVariant:
        entry = variants.get(variant.value)
        if entry is None:
            errors.append(f"icons.variants.{variant.value}: missing")
            continue
        try:
            validate_icon_entry(variant.value, entry)
        except ValueError as exc:
            errors.append(f"icons.variants.{variant.value}: {exc}")
    try:
        validate_distinct_colors(entry.get("color", "") for entry in variants.values())
    except ValueError as exc:
        errors.append(f"icons.variants: {exc}")

    return errors


def main() -> int:
    if not CONFIG_PATH.exists():
        print(f"Mood config not found: {CONFIG_PATH}")
        return 1

    with CONFIG_PATH.open("r", encoding="utf-8") as handle:
        data = json.load(handle)

    errors = validate_config(data)
    if errors:
        print("Mood config validation failed:")
        for message in errors:
            print(f"  - {message}")
        return 1

    print("Mood config validated successfully.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
