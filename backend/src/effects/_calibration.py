"""Effect parameter calibration: measures how much each numeric param moves the output.

Run:  cd backend/src && python -m effects._calibration
"""

import sys

import numpy as np

from effects.registry import defaults, get, list_all

VALID_CURVES = {"linear", "logarithmic", "exponential", "s-curve"}

LEVELS = (0, 25, 50, 75, 100)

KW = {"frame_index": 0, "resolution": (160, 120)}


def _test_frame(w: int = 160, h: int = 120) -> np.ndarray:
    """Deterministic RGBA frame: soft gradient with a hard-edged block and mild noise."""
    rng = np.random.default_rng(42)
    y, x = np.mgrid[0:h, 0:w]
    base = (x / (w - 1) * 160 + y / (h - 1) * 60).astype(np.float32)
    base[h // 4 : h // 2, w // 4 : w // 2] += 60
    frame = np.empty((h, w, 4), dtype=np.uint8)
    for ch in range(3):
        noisy = base + rng.normal(0, 6, (h, w)) + ch * 10
        frame[:, :, ch] = np.clip(noisy, 0, 255).astype(np.uint8)
    frame[:, :, 3] = 255
    return frame


def _mean_diff(a: np.ndarray, b: np.ndarray) -> float:
    """Mean absolute pixel difference across RGB channels."""
    return float(
        np.mean(np.abs(a[:, :, :3].astype(np.float32) - b[:, :, :3].astype(np.float32)))
    )


def calibrate_all(overrides: dict[str, dict] | None = None) -> list[dict]:
    """Sweep every float/int param from min to max against the default render.

    ``overrides`` maps effect id to params applied on top of the defaults,
    e.g. ``{"fx.rcas": {"extended": True}}`` to sweep the extended ranges.

    Returns a list of result dicts:
      {effect_id, param, level_pct, value, mean_pixel_diff, curve, unit}
    """
    overrides = overrides or {}
    frame = _test_frame()
    results: list[dict] = []

    for effect_info in list_all():
        eid = effect_info["id"]
        fn = get(eid)["fn"]
        base_params = defaults(eid)
        base_params.update(overrides.get(eid, {}))
        ref_out, _ = fn(frame, dict(base_params), None, **KW)

        for param_key, pdef in effect_info["params"].items():
            ptype = pdef.get("type")
            if ptype not in ("float", "int"):
                continue
            pmin = pdef.get("min", 0)
            pmax = pdef.get("max", 1)

            for level_pct in LEVELS:
                value = pmin + (pmax - pmin) * level_pct / 100.0
                if ptype == "int":
                    value = int(round(value))
                out, _ = fn(frame, {**base_params, param_key: value}, None, **KW)
                results.append(
                    {
                        "effect_id": eid,
                        "param": param_key,
                        "level_pct": level_pct,
                        "value": value,
                        "mean_pixel_diff": round(_mean_diff(ref_out, out), 3),
                        "curve": pdef.get("curve", "linear"),
                        "unit": pdef.get("unit", ""),
                    }
                )

    return results


def validate_curves() -> list[str]:
    """Check that every param with a 'curve' field uses a valid curve name."""
    errors: list[str] = []
    for effect_info in list_all():
        for param_key, pdef in effect_info["params"].items():
            curve = pdef.get("curve")
            if curve is not None and curve not in VALID_CURVES:
                errors.append(
                    f"{effect_info['id']}.{param_key}: invalid curve '{curve}' "
                    f"(valid: {VALID_CURVES})"
                )
    return errors


def print_report(results: list[dict]) -> None:
    print(
        f"{'Effect':<24} {'Param':<12} {'Level%':>6} {'Value':>8} {'PixDiff':>8} {'Curve':<8} {'Unit'}"
    )
    print("-" * 78)
    current_effect = ""
    for r in results:
        eid = r["effect_id"] if r["effect_id"] != current_effect else ""
        current_effect = r["effect_id"]
        print(
            f"{eid:<24} {r['param']:<12} {r['level_pct']:>5}% "
            f"{r['value']:>8.4f} {r['mean_pixel_diff']:>8.3f} {r['curve']:<8} {r['unit']}"
        )


if __name__ == "__main__":
    curve_errors = validate_curves()
    if curve_errors:
        print("CURVE VALIDATION ERRORS:")
        for e in curve_errors:
            print(f"  {e}")
        sys.exit(1)

    print("== standard mode")
    print_report(calibrate_all())
    print("\n== extended mode")
    print_report(calibrate_all({"fx.rcas": {"extended": True}}))
