"""
BannerLib - Banner jobs

This module combines canvases, layers and text overlays into complete
generated graphics described by JSON job files.
"""

from DI_Libs.BannerLib.banner_job import (
    LayerSpec,
    TextSpec,
    BannerJob,
    parse_color,
    build_text_renderer,
    run_banner_job,
    load_banner_job,
)

__all__ = [
    "LayerSpec",
    "TextSpec",
    "BannerJob",
    "parse_color",
    "build_text_renderer",
    "run_banner_job",
    "load_banner_job",
]
