import argparse
import json
import logging
import os
import sys
from typing import List, Optional

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from house_recolor.config import ClassifierConfig, PipelineConfig, TransformConfig
from house_recolor.pipeline import HouseRecolorPipeline
from house_recolor.transform import upscale_for_display
from house_recolor.types import ColorChangeOptions, ManualSelection, get_class, get_class_by_name
from house_recolor.utils.color import POPULAR_HOUSE_COLORS, color_recommendations, is_valid_hex
from house_recolor.utils.image_io import load_pixels, save_mask, save_pixels

logger = logging.getLogger("recolor_image")


def _parse_polygon(text: str, class_id: int) -> ManualSelection:
    points = [float(value) for value in text.split(",") if value.strip()]
    return ManualSelection(points=points, class_id=class_id, tool="polygon")


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Recolor selected parts of a house photo.")
    parser.add_argument("--image", required=True, help="Input photo (jpg, png, heic)")
    parser.add_argument("--color", required=True, help="Target color as #RRGGBB")
    parser.add_argument(
        "--classes",
        default="walls",
        help="Comma separated class names to recolor, e.g. walls,trim",
    )
    parser.add_argument(
        "--polygon",
        action="append",
        default=[],
        help="Extra manual region as x0,y0,x1,y1,...; assigned to the first class",
    )
    parser.add_argument("--outdir", default="outputs/recolor", help="Output directory")
    parser.add_argument("--mode", default="heuristic", choices=["heuristic", "template"])
    parser.add_argument("--intensity", type=float, default=1.0)
    parser.add_argument("--no-preserve-texture", action="store_true")
    parser.add_argument("--no-blend-edges", action="store_true")
    parser.add_argument("--preview-scale", type=float, default=0.25)
    parser.add_argument("--analysis-max-side", type=int, default=1024, help="0 analyses every pixel")
    parser.add_argument("--save-json", action="store_true", help="Save metadata.json")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if not is_valid_hex(args.color):
        names = ", ".join(POPULAR_HOUSE_COLORS)
        raise ValueError(f"Invalid color {args.color!r}; try one of: {names}")

    class_ids = [get_class_by_name(name).id for name in args.classes.split(",") if name.strip()]
    if not class_ids:
        raise ValueError("At least one class must be selected.")

    config = PipelineConfig(
        classifier=ClassifierConfig(mode=args.mode, analysis_max_side=args.analysis_max_side),
        transform=TransformConfig(preview_scale=args.preview_scale),
    )
    pipeline = HouseRecolorPipeline(config)
    session = pipeline.new_session(load_pixels(args.image))
    result = session.segment()

    for class_id in class_ids:
        if result.get_mask(class_id) is None:
            logger.warning("Class %s was not detected; only manual regions apply", get_class(class_id).name)
        session.select(class_id)
    for text in args.polygon:
        session.add_manual_selection(_parse_polygon(text, class_ids[0]))

    options = ColorChangeOptions(
        new_color=args.color,
        preserve_texture=not args.no_preserve_texture,
        blend_edges=not args.no_blend_edges,
        intensity=args.intensity,
    )
    mask = session.combined_mask()

    image_name = os.path.splitext(os.path.basename(args.image))[0]
    outdir = os.path.join(args.outdir, image_name)
    os.makedirs(outdir, exist_ok=True)
    mask_path = os.path.join(outdir, "selection.png")
    preview_path = os.path.join(outdir, "preview.png")
    final_path = os.path.join(outdir, "recolored.png")
    save_mask(mask_path, mask)

    preview = pipeline.preview(session.original, mask, options)
    display = upscale_for_display(preview.pixels, session.original.width, session.original.height)
    save_pixels(preview_path, display)
    logger.info("Preview rendered in %.1f ms", preview.processing_time_ms)

    final = session.render_final(options)
    save_pixels(final_path, final.pixels)
    logger.info("Final render in %.1f ms", final.processing_time_ms)

    if args.save_json:
        metadata = {
            "args": vars(args),
            "detected": [item.class_name for item in result.masks],
            "selected": [get_class(class_id).name for class_id in class_ids],
            "selected_pixels": int((mask > 0).sum()),
            "preview_ms": preview.processing_time_ms,
            "final_ms": final.processing_time_ms,
            "suggestions": color_recommendations(args.color),
            "outputs": {
                "selection": mask_path,
                "preview": preview_path,
                "recolored": final_path,
            },
        }
        with open(os.path.join(outdir, "metadata.json"), "w", encoding="utf-8") as handle:
            json.dump(metadata, handle, indent=2, ensure_ascii=True)

    print(f"Done. Outputs saved to {outdir}")


if __name__ == "__main__":
    main()
