import argparse
import json
import logging
import os
import sys
from typing import List, Optional

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from house_recolor.config import ClassifierConfig, PipelineConfig, TemplateConfig
from house_recolor.masks import class_at_pixel, render_overlay
from house_recolor.pipeline import HouseRecolorPipeline
from house_recolor.types import PixelBuffer
from house_recolor.utils.image_io import load_pixels, save_mask, save_pixels

logger = logging.getLogger("segment_image")


def _write_metadata(path: str, payload: dict) -> None:
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, ensure_ascii=True)


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Segment a house photo into architectural classes.")
    parser.add_argument("--image", required=True, help="Input photo (jpg, png, heic)")
    parser.add_argument("--outdir", default="outputs/segments", help="Output directory")
    parser.add_argument("--mode", default="heuristic", choices=["heuristic", "template"])
    parser.add_argument("--color-threshold", type=float, default=30.0)
    parser.add_argument("--edge-threshold", type=float, default=50.0)
    parser.add_argument("--min-confidence", type=float, default=0.1)
    parser.add_argument("--jitter", type=float, default=0.0, help="Boundary jitter amplitude in pixels")
    parser.add_argument("--hole-probability", type=float, default=0.0)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--analysis-max-side", type=int, default=1024, help="0 analyses every pixel")
    parser.add_argument("--pixel", type=int, nargs=2, metavar=("X", "Y"), action="append", default=[],
                        help="Report the class owning pixel X Y (repeatable)")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = PipelineConfig(
        classifier=ClassifierConfig(
            mode=args.mode,
            color_threshold=args.color_threshold,
            edge_threshold=args.edge_threshold,
            min_confidence=args.min_confidence,
            jitter_amplitude=args.jitter,
            hole_probability=args.hole_probability,
            seed=args.seed,
            analysis_max_side=args.analysis_max_side,
        ),
        template=TemplateConfig(seed=args.seed),
    )
    pipeline = HouseRecolorPipeline(config)

    pixels = load_pixels(args.image)
    result = pipeline.segment(pixels)

    image_name = os.path.splitext(os.path.basename(args.image))[0]
    outdir = os.path.join(args.outdir, image_name)
    os.makedirs(outdir, exist_ok=True)

    mask_paths = {}
    for mask in result.masks:
        path = os.path.join(outdir, f"mask_{mask.class_id}_{mask.class_name}.png")
        save_mask(path, mask.data)
        mask_paths[mask.class_name] = path

    overlay_path = os.path.join(outdir, "overlay.png")
    save_pixels(overlay_path, PixelBuffer(render_overlay(result)))

    pixel_owners = []
    for x, y in args.pixel:
        class_id = class_at_pixel(result, x, y)
        pixel_owners.append({"x": x, "y": y, "class_id": class_id})
        logger.info("Pixel (%d, %d) belongs to class %d", x, y, class_id)

    metadata = {
        "args": vars(args),
        "width": result.width,
        "height": result.height,
        "classes": [
            {
                "id": mask.class_id,
                "name": mask.class_name,
                "confidence": mask.confidence,
                "pixels": mask.pixel_count,
                "mask": mask_paths[mask.class_name],
            }
            for mask in result.masks
        ],
        "pixels": pixel_owners,
        "overlay": overlay_path,
    }
    _write_metadata(os.path.join(outdir, "metadata.json"), metadata)

    print(f"Done. Outputs saved to {outdir}")


if __name__ == "__main__":
    main()
