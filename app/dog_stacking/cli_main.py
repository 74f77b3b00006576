"""DoG stacking CLI entry point.

Every input image is run through the Difference-of-Gaussians filter and the
results are stacked top-to-bottom into one output image. One bad input aborts
the whole run and nothing is written.

Example (run from repo root):
    python -m app.dog_stacking.cli_main a.png b.jpg -o output.jpg --sigma 3 -k 0.5
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, Sequence

import cv2
import numpy as np
from tqdm import tqdm

from app.dog_stacking.annotate import draw_point
from app.dog_stacking.blur import BACKENDS, BOUNDARIES, gaussian_blur
from app.dog_stacking.config import DoGConfig, load_config
from app.dog_stacking.dog import METHODS, DoGStages, dog_stages
from app.dog_stacking.errors import BatchAbortedError, DoGError
from app.dog_stacking.image_io import read_image, write_image
from app.dog_stacking.stacking import stack_vertically

logger = logging.getLogger(__name__)


def save_debug_images(stages: DoGStages, image_dir: Path) -> None:
    """Write both blurs and the DoG, plain and min-max normalized (for viewing), to `image_dir`."""
    write_image(image_dir / "blur_sigma.png", stages.blur_sigma)
    write_image(image_dir / "blur_k_sigma.png", stages.blur_k_sigma)
    write_image(image_dir / "dog.png", stages.dog)
    dog_norm = cv2.normalize(stages.dog, None, 0, 255, cv2.NORM_MINMAX)
    write_image(image_dir / "dog_normalized.png", dog_norm)


def _process_image(image: np.ndarray, config: DoGConfig, keep_blurs: bool) -> DoGStages:
    stages = dog_stages(image, config.sigma, config.k, **_core_kwargs(config))
    if not keep_blurs:
        return DoGStages(dog=stages.dog)
    if stages.blur_sigma is None:
        # single-pass never forms the blurs
        blur_kwargs = dict(radius_factor=config.radius_factor, boundary=config.boundary, backend=config.backend)
        stages = DoGStages(
            dog=stages.dog,
            blur_sigma=gaussian_blur(image, config.sigma, **blur_kwargs),
            blur_k_sigma=gaussian_blur(image, config.k * config.sigma, **blur_kwargs),
        )
    return stages


def run_dog_stacking(
    *,
    image_paths: Sequence[str | Path],
    output_path: str | Path,
    config: DoGConfig,
    debug_dir: Path | None = None,
    marks: Iterable[tuple[int, int]] = (),
    mark_radius: int = 5,
) -> Path:
    """Run the DoG stacking pipeline.

    Every input is decoded and filtered before anything is written, so a failing
    input leaves neither the output nor any debug images behind.

    Args:
        image_paths: Input images, stacked in this order.
        output_path: Where the stacked image is written.
        config: DoG parameters.
        debug_dir: Optional directory for per-image intermediate images.
        marks: (x, y) canvas positions to mark on the stacked output.
        mark_radius: Radius of each mark in pixels.

    Returns:
        Path to the written output image.

    Raises:
        BatchAbortedError: If any input fails to load or process.
        InvalidParameterError: If `config` is invalid or there are no inputs.
        ImageEncodeError: If the output cannot be written.
    """
    config.validate()

    processed: list[DoGStages] = []
    for path in tqdm(image_paths, desc="Difference of Gaussians", unit="image"):
        try:
            image = read_image(path)
            stages = _process_image(image, config, keep_blurs=debug_dir is not None)
        except (OSError, MemoryError, cv2.error, DoGError) as exc:
            raise BatchAbortedError(path, exc) from exc
        logger.debug("Processed %s -> %s", path, stages.dog.shape)
        processed.append(stages)

    if debug_dir is not None:
        logger.info("Saving intermediate images to: %s", debug_dir)
        for index, stages in enumerate(processed):
            save_debug_images(stages, Path(debug_dir) / f"image_{index:03d}")

    logger.info("Stacking %d image(s)...", len(processed))
    final_image = stack_vertically([stages.dog for stages in processed])
    for x, y in marks:
        final_image = draw_point(final_image, x, y, mark_radius)

    output_path = write_image(output_path, final_image)
    logger.info("Saved stacked image to: %s", output_path)
    return output_path


def _core_kwargs(config: DoGConfig) -> dict:
    kwargs = config.dog_kwargs()
    del kwargs["sigma"], kwargs["k"]
    return kwargs


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dog-stack",
        description="Apply a Difference-of-Gaussians filter to images and stack the results vertically.",
    )
    parser.add_argument("images", nargs="*", help="Input images, stacked top-to-bottom in this order")
    parser.add_argument("-o", "--output", type=str, default="output.jpg", help="Output image path")
    parser.add_argument("--config", type=str, default=None, help="[Optional] YAML file with DoG parameters")
    parser.add_argument("--sigma", type=float, default=None, help="Standard deviation of the base blur")
    parser.add_argument("-k", type=float, default=None, help="Scale factor of the second blur (k * sigma)")
    parser.add_argument(
        "--radius-factor",
        type=float,
        default=None,
        help="Kernel window half-extent in units of sigma",
    )
    parser.add_argument("--boundary", choices=BOUNDARIES, default=None, help="Border handling policy")
    parser.add_argument("--method", choices=METHODS, default=None, help="DoG computation method")
    parser.add_argument("--backend", choices=BACKENDS, default=None, help="Convolution backend")
    parser.add_argument(
        "--debug-dir",
        type=str,
        default=None,
        help="[Optional] Directory for intermediate blur/DoG images of every input",
    )
    parser.add_argument(
        "--mark",
        type=int,
        nargs=2,
        action="append",
        default=[],
        metavar=("X", "Y"),
        help="Draw a marker at canvas position (X, Y); can be repeated",
    )
    parser.add_argument("--mark-radius", type=int, default=5, help="Marker radius in pixels")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose (debug) logging")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.images:
        logging.error("Please specify one or several images!")
        return 1

    try:
        config = load_config(args.config) if args.config else DoGConfig()
        config = config.replace(
            sigma=args.sigma,
            k=args.k,
            radius_factor=args.radius_factor,
            boundary=args.boundary,
            method=args.method,
            backend=args.backend,
        )
        run_dog_stacking(
            image_paths=args.images,
            output_path=args.output,
            config=config,
            debug_dir=Path(args.debug_dir) if args.debug_dir else None,
            marks=[tuple(mark) for mark in args.mark],
            mark_radius=args.mark_radius,
        )
    except (OSError, MemoryError, cv2.error, DoGError) as exc:
        logging.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
