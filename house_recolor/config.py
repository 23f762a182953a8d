"""Configuration dataclasses for the house recolor pipeline."""

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass
class ClassifierConfig:
    """Settings for the heuristic region classifier.

    Bands are expressed as fractions of the image height (rows) or width
    (columns); a band ``(top, bottom)`` covers ``top * H <= y < bottom * H``.

    Attributes:
        mode: "heuristic" (content based) or "template" (canned house overlay).
        color_threshold: Max Euclidean RGB distance to the seed color for a
            pixel to join a flood-filled color region.
        edge_threshold: Sobel magnitude above which a pixel is an edge.
        min_confidence: Classes at or below this coverage are omitted.
        wall_region_fraction: Minimum share of the image a color region must
            cover for its pixels to count as wall candidates.
        sky_band: Rows searched for blue, bright sky.
        bright_sky_band: Rows where any very bright pixel counts as sky.
        roof_band: Rows searched for the roof.
        wall_band: Rows searched for walls and windows.
        door_band: Rows searched for doors.
        door_columns: Columns searched for doors.
        door_min_row: Doors must sit at or below this row fraction.
        landscape_band: Rows classified as landscape.
        sky_brightness: Minimum luminance for blue sky pixels.
        very_bright: Luminance above which upper pixels count as sky.
        roof_max_brightness: Roof pixels must be darker than this.
        window_brightness: Minimum luminance for window pixels.
        window_edge_radius: Window pixels need an edge within this radius.
        door_edge_rows: Door pixels need an edge in the same column within
            this many rows.
        jitter_amplitude: Boundary displacement in pixels; 0 disables jitter.
        hole_probability: Chance of punching a texture hole into a mask pixel.
        seed: Seed for the jitter random source.
        analysis_max_side: Run the analysis on a downsampled copy when the
            longer image side exceeds this value. The region flood fill runs
            per pixel in Python, so full-resolution phone photos take tens of
            seconds; None or 0 analyses every pixel.
    """

    mode: str = "heuristic"
    color_threshold: float = 30.0
    edge_threshold: float = 50.0
    min_confidence: float = 0.1
    wall_region_fraction: float = 0.05
    sky_band: Tuple[float, float] = (0.0, 0.6)
    bright_sky_band: Tuple[float, float] = (0.0, 0.4)
    roof_band: Tuple[float, float] = (0.0, 0.5)
    wall_band: Tuple[float, float] = (0.2, 0.8)
    door_band: Tuple[float, float] = (0.4, 0.9)
    door_columns: Tuple[float, float] = (0.2, 0.8)
    door_min_row: float = 0.5
    landscape_band: Tuple[float, float] = (0.75, 1.0)
    sky_brightness: float = 0.5
    very_bright: float = 0.85
    roof_max_brightness: float = 0.5
    window_brightness: float = 0.6
    window_edge_radius: int = 5
    door_edge_rows: int = 3
    jitter_amplitude: float = 0.0
    hole_probability: float = 0.0
    seed: int = 42
    analysis_max_side: Optional[int] = 1024


@dataclass
class TemplateConfig:
    """Settings for the template (demo) classifier.

    Attributes:
        min_coverage: Classes covering at most this share are omitted.
        boundary_noise: Random boundary noise amplitude in pixels.
        seed: Seed for the boundary noise.
    """

    min_coverage: float = 0.01
    boundary_noise: float = 1.0
    seed: int = 42


@dataclass
class TransformConfig:
    """Settings for the color transform engine.

    Attributes:
        preview_scale: Default downsampling factor for previews.
        edge_blend_radius: Half size of the square window used for edge
            blending (2 gives a 5x5 window).
        min_edge_blend: Lower bound of the edge blend factor.
        shadow_lightness: Pixels darker than this (percent) are shadows.
        shadow_max_saturation: Saturation cap for shadows.
        highlight_lightness: Pixels lighter than this (percent) are highlights.
        highlight_max_saturation: Saturation cap for highlights.
        midtone_original_weight: Weight of the original saturation for
            mid-tones; the target saturation gets the remainder.
        midtone_min_saturation: Saturation floor for mid-tones.
    """

    preview_scale: float = 0.25
    edge_blend_radius: int = 2
    min_edge_blend: float = 0.5
    shadow_lightness: float = 15.0
    shadow_max_saturation: float = 20.0
    highlight_lightness: float = 85.0
    highlight_max_saturation: float = 30.0
    midtone_original_weight: float = 0.4
    midtone_min_saturation: float = 25.0


@dataclass
class SessionConfig:
    """Settings for interactive sessions.

    Attributes:
        debounce_seconds: Quiet period before a pending preview is rendered.
    """

    debounce_seconds: float = 0.1


@dataclass
class PipelineConfig:
    """Top-level configuration for the house recolor pipeline."""

    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    template: TemplateConfig = field(default_factory=TemplateConfig)
    transform: TransformConfig = field(default_factory=TransformConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
