#!/usr/bin/env python3
"""
GENERATE INDICATOR
==================
Command-line front end for the Pine Script generator.

Usage:
    # Default settings to stdout
    python backend/tools/generate_indicator.py

    # SVM model, volume enabled, heavier RSI weight, copied to clipboard
    python backend/tools/generate_indicator.py --model svm --enable volume \\
        --weight rsi=1.2 --copy

    # Write to a file / to OUTPUT_DIR
    python backend/tools/generate_indicator.py --output my_indicator.pine
    python backend/tools/generate_indicator.py --save
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Tuple

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from pydantic import ValidationError

from api.indicator_routes import IndicatorConfigRequest
from config import DEFAULT_INDICATOR_SETTINGS, DOWNLOAD_FILENAME, OUTPUT_DIR
from logging_config import log
from models.indicator_config import FeatureId, IndicatorConfig, MarkerSize, ModelType
from pinescript_generator import generate_pinescript
from services.clipboard import ClipboardError, copy_to_clipboard

MODEL_CHOICES = {
    "logistic": ModelType.LOGISTIC_REGRESSION,
    "svm": ModelType.SVM_LINEAR_KERNEL,
}

MARKER_CHOICES = {
    "small": MarkerSize.SMALL,
    "medium": MarkerSize.MEDIUM,
    "large": MarkerSize.LARGE,
}

FEATURE_CHOICES = [f.value for f in FeatureId]


def parse_weight(text: str) -> Tuple[str, float]:
    """FEATURE=VALUE -> (feature, value)"""
    feature, sep, value = text.partition("=")
    feature = feature.strip().lower()
    if not sep or feature not in FEATURE_CHOICES:
        raise argparse.ArgumentTypeError(
            f"expected FEATURE=VALUE with FEATURE in {FEATURE_CHOICES}, got {text!r}"
        )
    try:
        return feature, float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"weight for {feature} is not a number: {value!r}")


def build_parser() -> argparse.ArgumentParser:
    defaults = DEFAULT_INDICATOR_SETTINGS
    parser = argparse.ArgumentParser(description="Generate the Agentic ML Signal Suite Pine Script")
    parser.add_argument("--lookback", type=int, default=defaults["lookback"],
                        help="Lookback period in bars (50-200)")
    parser.add_argument("--buy-threshold", type=float, default=defaults["buy_threshold"],
                        help="Buy probability threshold (0.5-0.9)")
    parser.add_argument("--sell-threshold", type=float, default=defaults["sell_threshold"],
                        help="Sell probability threshold (0.1-0.5)")
    parser.add_argument("--bias", type=float, default=defaults["bias"],
                        help="Model bias (-10 to 10)")
    parser.add_argument("--model", choices=sorted(MODEL_CHOICES), default="logistic",
                        help="Model type")
    parser.add_argument("--marker-size", choices=list(MARKER_CHOICES), default="medium",
                        help="Buy/sell marker size")
    parser.add_argument("--enable", action="append", choices=FEATURE_CHOICES, default=[],
                        metavar="FEATURE", help="Enable a feature (repeatable)")
    parser.add_argument("--disable", action="append", choices=FEATURE_CHOICES, default=[],
                        metavar="FEATURE", help="Disable a feature (repeatable)")
    parser.add_argument("--weight", action="append", type=parse_weight, default=[],
                        metavar="FEATURE=VALUE", help="Set a feature weight (repeatable, -5 to 5)")
    parser.add_argument("--output", "-o", type=Path, help="Write the script to this file")
    parser.add_argument("--save", action="store_true",
                        help=f"Write the script to OUTPUT_DIR/{DOWNLOAD_FILENAME}")
    parser.add_argument("--copy", action="store_true", help="Copy the script to the clipboard")
    return parser


def build_config(parser: argparse.ArgumentParser, args: argparse.Namespace) -> IndicatorConfig:
    """Range-check the arguments and build the config; exits via parser.error on bad input."""
    conflicting = sorted(set(args.enable) & set(args.disable))
    if conflicting:
        parser.error(f"features both enabled and disabled: {', '.join(conflicting)}")

    features = {feature: True for feature in args.enable}
    features.update({feature: False for feature in args.disable})

    try:
        request = IndicatorConfigRequest(
            lookback=args.lookback,
            buy_threshold=args.buy_threshold,
            sell_threshold=args.sell_threshold,
            features=features,
            weights=dict(args.weight),
            bias=args.bias,
            model=MODEL_CHOICES[args.model],
            marker_size=MARKER_CHOICES[args.marker_size],
        )
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        parser.error(problems)

    return request.to_config()


def write_script(path: Path, script: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(script, encoding="utf-8")
    log(f"[CLI] Wrote {path}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config = build_config(parser, args)

    script = generate_pinescript(config)

    if args.output:
        write_script(args.output, script)
    if args.save:
        write_script(OUTPUT_DIR / DOWNLOAD_FILENAME, script)
    if not args.output and not args.save:
        sys.stdout.write(script)

    if args.copy:
        # Copy failures never fail the run; the script was already emitted
        try:
            command = copy_to_clipboard(script)
            log(f"[Clipboard] Script copied to clipboard ({command})")
        except ClipboardError as e:
            log(f"[Clipboard] Copy failed: {e}. Run again with --copy to retry.", level='WARNING')

    return 0


if __name__ == "__main__":
    sys.exit(main())
