#!/usr/bin/env python3
"""Render a scene to a PNG file.

This script renders the built-in reference scene (or a JSON scene file) with
the Whitted ray caster and writes the result as an 8-bit PNG. Optionally it
compares the result against a golden image.

Usage:
    python -m examples.render_scene [options]

Options:
    --width WIDTH       Image width in pixels (default: 1024)
    --height HEIGHT     Image height in pixels (default: 768)
    --fov FOV           Vertical field of view in radians (default: 1.0)
    --output OUTPUT     Output file path (default: out.png)
    --scene FILE        JSON scene file (overrides --preset)
    --preset NAME       Built-in scene: reference, single_sphere (default: reference)
    --tone-map METHOD   clamp or normalize (default: clamp)
    --reference FILE    Golden PNG to compare against
    --preview           Show the result in a Matplotlib window
    --cpu               Force the CPU backend
    --verbose           Enable debug logging
    --quiet             Suppress progress output

Example:
    python -m examples.render_scene --width 512 --height 384 --output small.png
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a scene with the Whitted ray caster.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=1024,
        help="Image width in pixels (default: 1024)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=768,
        help="Image height in pixels (default: 768)",
    )
    parser.add_argument(
        "--fov",
        type=float,
        default=1.0,
        help="Vertical field of view in radians (default: 1.0)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="out.png",
        help="Output file path (default: out.png)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene file (overrides --preset)",
    )
    parser.add_argument(
        "--preset",
        choices=["reference", "single_sphere"],
        default="reference",
        help="Built-in scene (default: reference)",
    )
    parser.add_argument(
        "--tone-map",
        choices=["clamp", "normalize"],
        default="clamp",
        help="Tone mapping before quantization (default: clamp)",
    )
    parser.add_argument(
        "--reference",
        type=str,
        default=None,
        help="Golden PNG to compare the result against",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the result in a Matplotlib window",
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the CPU backend",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def render_scene(
    width: int = 1024,
    height: int = 768,
    fov: float = 1.0,
    output_path: str = "out.png",
    scene_file: str | None = None,
    preset: str = "reference",
    tone_map: str = "clamp",
    reference_path: str | None = None,
    preview: bool = False,
    quiet: bool = False,
) -> Path:
    """Render a scene and save it to a PNG file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        fov: Vertical field of view in radians.
        output_path: Output file path (PNG).
        scene_file: Optional JSON scene file.
        preset: Built-in scene name, used when scene_file is None.
        tone_map: Tone mapping method ("clamp" or "normalize").
        reference_path: Optional golden PNG to compare against.
        preview: If True, show the result in a Matplotlib window.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from whitted.camera.pinhole import PinholeCamera
    from whitted.core.renderer import render
    from whitted.preview.display import show_preview
    from whitted.preview.export import (
        compute_rmse,
        image_to_uint8,
        load_png,
        max_channel_difference,
        save_png,
    )
    from whitted.scene.manager import load_scene_file
    from whitted.scene.presets import PRESETS

    if scene_file is not None:
        scene = load_scene_file(scene_file)
        source = scene_file
    else:
        scene = PRESETS[preset]()
        source = f"preset '{preset}'"

    camera = PinholeCamera(width=width, height=height, fov=fov)

    if not quiet:
        print(f"Rendering {source} ({width}x{height}, fov={fov})...")

    start_time = time.time()

    def progress_callback(rows_done: int, total_rows: int) -> None:
        if not quiet:
            progress_pct = (rows_done / total_rows) * 100 if total_rows > 0 else 0
            print(
                f"\r  Progress: {rows_done}/{total_rows} rows ({progress_pct:.1f}%)",
                end="",
                flush=True,
            )

    target = render(
        scene,
        camera,
        rows_per_batch=max(1, height // 16),
        callback=progress_callback,
    )

    if not quiet:
        print()  # Newline after progress

    output_file = save_png(target, output_path, tone_map=tone_map)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    if reference_path is not None:
        golden = load_png(reference_path)
        rendered = image_to_uint8(target.pixels, tone_map=tone_map)
        rmse = compute_rmse(rendered.astype("float32") / 255.0, golden)
        max_diff = max_channel_difference(rendered, (golden * 255.0).round().astype("uint8"))
        print(f"Reference RMSE: {rmse:.6f}, max channel difference: {max_diff}")

    if preview:
        show_preview(target, tone_map=tone_map)

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    # Initialize Taichi
    # Use GPU if available, fall back to CPU
    if args.cpu:
        ti.init(arch=ti.cpu)
    else:
        try:
            ti.init(arch=ti.gpu)
            if not args.quiet:
                print("Using GPU backend")
        except Exception:
            ti.init(arch=ti.cpu)
            if not args.quiet:
                print("Using CPU backend")

    try:
        render_scene(
            width=args.width,
            height=args.height,
            fov=args.fov,
            output_path=args.output,
            scene_file=args.scene,
            preset=args.preset,
            tone_map=args.tone_map,
            reference_path=args.reference,
            preview=args.preview,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
