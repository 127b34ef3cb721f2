"""rcas: sharpen an image file with RCAS from the command line."""

import argparse
import logging
import os
import sys
from pathlib import Path

import numpy as np
import sentry_sdk
from PIL import Image

from _version import __version__
from diagnostics import init_diagnostics
from effects import registry
from engine.pipeline import apply_chain
from security import MAX_IMAGE_PIXELS, strip_pii, validate_image_path, validate_output_path
from sharpen.config import EXTENDED_MAX_SHARPNESS, LumaMode
from sharpen.sampler import BorderMode

logger = logging.getLogger(__name__)

_CONSENT_PATH = "~/.rcas/telemetry_consent"

# Formats without an alpha channel
_OPAQUE_EXTENSIONS = {".jpg", ".jpeg", ".bmp"}


def _init_sentry():
    """Consent-gated Sentry init. Without consent the DSN stays empty (no-op client)."""
    consent = Path(os.path.expanduser(_CONSENT_PATH))
    dsn = ""
    if consent.is_file() and consent.read_text().strip() == "yes":
        dsn = os.environ.get("SENTRY_DSN", "")
    sentry_sdk.init(
        dsn=dsn,
        release=f"rcas@{__version__}",
        environment=os.environ.get("SENTRY_ENV", "development"),
        before_send=strip_pii,
        max_breadcrumbs=50,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rcas",
        description="Robust Contrast Adaptive Sharpening for image files.",
    )
    parser.add_argument("input", help="Source image")
    parser.add_argument("output", help="Destination image (format from extension)")
    parser.add_argument(
        "--sharpness",
        type=float,
        default=1.0,
        help=f"Lobe multiplier, 0-1.0 (0-{EXTENDED_MAX_SHARPNESS} with --extended)",
    )
    parser.add_argument(
        "--limit", type=float, default=None, help="Lobe ceiling (extended mode only)"
    )
    parser.add_argument(
        "--no-denoise", action="store_true", help="Disable noise attenuation"
    )
    parser.add_argument(
        "--passthrough-alpha", action="store_true", help="Keep source alpha"
    )
    parser.add_argument(
        "--luma-mode",
        choices=[m.value for m in LumaMode],
        default=LumaMode.WEIGHTED_DOT.value,
    )
    parser.add_argument(
        "--extended", action="store_true", help="Enable non-standard features"
    )
    parser.add_argument(
        "--border",
        choices=[m.value for m in BorderMode],
        default=BorderMode.CLAMP.value,
    )
    parser.add_argument(
        "--mix", type=float, default=1.0, help="Dry/wet blend, 0-1 (default 1)"
    )
    parser.add_argument(
        "--confidence-map",
        action="store_true",
        help="Write the noise-detector confidence map instead of sharpening",
    )
    parser.add_argument("--verbose", "-v", action="store_true")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _chain_from_args(args: argparse.Namespace) -> list[dict]:
    if args.confidence_map:
        effect_id = "debug.rcas_confidence"
        params = registry.defaults(effect_id)
        params.update({"luma_mode": args.luma_mode, "border": args.border})
    else:
        effect_id = "fx.rcas"
        params = registry.defaults(effect_id)
        params.update(
            {
                "sharpness": args.sharpness,
                "denoise": not args.no_denoise,
                "passthrough_alpha": args.passthrough_alpha,
                "luma_mode": args.luma_mode,
                "extended": args.extended,
                "border": args.border,
            }
        )
        if args.limit is not None:
            params["limit"] = args.limit
    return [{"effect_id": effect_id, "params": params, "mix": args.mix}]


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    init_diagnostics(verbose=args.verbose)
    _init_sentry()

    errors = validate_image_path(args.input) + validate_output_path(args.output)
    if errors:
        for err in errors:
            print(f"rcas: {err}", file=sys.stderr)
        return 2

    Image.MAX_IMAGE_PIXELS = MAX_IMAGE_PIXELS
    try:
        with Image.open(args.input) as img:
            has_alpha = "A" in img.getbands()
            frame = np.asarray(img.convert("RGBA")).copy()
    except (OSError, Image.DecompressionBombError) as e:
        logger.error("Could not read %s: %s", args.input, e)
        print(f"rcas: could not read {args.input}: {e}", file=sys.stderr)
        return 1

    logger.info("Sharpening %s (%dx%d)", args.input, frame.shape[1], frame.shape[0])
    output, failures = apply_chain(frame, _chain_from_args(args))
    if failures:
        for effect_id, err in failures:
            logger.error("Effect %s failed, %s not written: %s", effect_id, args.output, err)
            print(
                f"rcas: {effect_id} failed ({type(err).__name__}: {err}), "
                f"{args.output} not written",
                file=sys.stderr,
            )
        return 1

    keep_alpha = (
        has_alpha
        and (args.passthrough_alpha or args.confidence_map)
        and Path(args.output).suffix.lower() not in _OPAQUE_EXTENSIONS
    )
    result = Image.fromarray(output)
    if not keep_alpha:
        result = result.convert("RGB")
    result.save(args.output)
    logger.info("Wrote %s", args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
