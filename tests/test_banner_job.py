"""
Tests for banner jobs.

Tests cover:
- Color parsing from JSON values
- Job validation and dictionary round trips
- Running jobs with layers and text items
- Loading jobs from JSON files with relative paths
"""

import json

import pytest

from DI_Libs.BannerLib.banner_job import (
    BannerJob,
    LayerSpec,
    TextSpec,
    build_text_renderer,
    load_banner_job,
    parse_color,
    run_banner_job,
)
from DI_Libs.constants import MERGE_SCALE_DST
from DI_Libs.exceptions import (
    ConfigError,
    DecodeError,
    TypeMismatchError,
    UnsupportedFormatError,
    ValidationError,
)
from DI_Libs.ImageLib.canvas import Canvas
from DI_Libs.ImageLib.color import Color
from DI_Libs.TextLib.decorators import BorderDecorator, ShadowDecorator
from DI_Libs.TextLib.text import Text


class TestParseColor:
    """Test parse_color()."""

    def test_list(self):
        assert parse_color([1, 2, 3]) == Color(1, 2, 3, 0)

    def test_list_with_alpha(self):
        assert parse_color([1, 2, 3, 4]) == Color(1, 2, 3, 4)

    def test_dict(self):
        assert parse_color({"red": 9, "blue": 7}) == Color(9, 0, 7, 0)

    def test_passthrough(self):
        color = Color(5, 5, 5)
        assert parse_color(color) is color
        assert parse_color(None) is None

    @pytest.mark.parametrize("value", ["#ffffff", [1, 2], 42])
    def test_unknown_shape(self, value):
        """Test values that are not colors."""
        with pytest.raises(ConfigError):
            parse_color(value)

    def test_out_of_range(self):
        with pytest.raises(ValidationError):
            parse_color([256, 0, 0])

    def test_wrong_type(self):
        with pytest.raises(TypeMismatchError):
            parse_color(["255", 0, 0])


class TestJobValidation:
    """Test dataclass validation and serialization."""

    def test_job_needs_base(self):
        """Test a job needs a base image or a size."""
        with pytest.raises(ConfigError):
            BannerJob(width=10)

    def test_layer_strategy(self):
        """Test unknown merge strategies are rejected."""
        with pytest.raises(ConfigError, match="Unsupported merge strategy"):
            LayerSpec(image_path="a.png", strategy="stretch")

    def test_layer_alpha(self):
        """Test layer alpha is range checked."""
        with pytest.raises(ValidationError):
            LayerSpec(image_path="a.png", alpha=200)

    def test_layer_path_required(self):
        with pytest.raises(ConfigError):
            LayerSpec(image_path="")

    def test_text_missing_fields(self):
        """Test text items need text, position and font."""
        with pytest.raises(ConfigError, match="x, y"):
            TextSpec.from_dict({"text": "hi", "font": "f.ttf"})

    def test_round_trip(self):
        """Test a job survives to_dict/from_dict."""
        job = BannerJob(
            base_image="bg.png",
            cache_dir="cache",
            layers=[LayerSpec("logo.png", 1, 2, MERGE_SCALE_DST), LayerSpec("badge.png", alpha=64)],
            texts=[TextSpec("Hi", 3, 4, "f.ttf", 10.0, Color(1, 2, 3), border_color=Color(0, 0, 0))],
            output="out.png",
        )

        restored = BannerJob.from_dict(json.loads(json.dumps(job.to_dict())))

        assert restored == job

    def test_from_dict_requires_object(self):
        with pytest.raises(ConfigError):
            BannerJob.from_dict([])


class TestBuildTextRenderer:
    """Test the decorator chain built for a text item."""

    def test_plain(self, fake_font):
        spec = TextSpec("Hi", 0, 0, str(fake_font))

        renderer = build_text_renderer(Canvas.create(10, 10), spec)

        assert isinstance(renderer, Text)
        assert renderer.get_text_color() == Color(255, 255, 255)

    def test_border_and_shadow(self, fake_font):
        spec = TextSpec("Hi", 0, 0, str(fake_font), border_color=[0, 0, 0], shadow_color=[9, 9, 9])

        renderer = build_text_renderer(Canvas.create(10, 10), spec)

        assert isinstance(renderer, ShadowDecorator)
        assert isinstance(renderer.get_wrapped(), BorderDecorator)
        assert renderer.get_border_color() == Color(0, 0, 0)


class TestRunBannerJob:
    """Test job execution."""

    def test_blank_base(self):
        canvas = run_banner_job(BannerJob(width=30, height=20))

        assert (canvas.get_width(), canvas.get_height()) == (30, 20)
        assert canvas.get_mime_type() is None

    def test_layers_and_text(self, image_dir, cache_dir, draw_calls, fake_font):
        """Test layers are merged and texts drawn on the base image."""
        job = BannerJob(
            base_image=str(image_dir / "test.png"),
            cache_dir=str(cache_dir),
            layers=[
                LayerSpec(str(image_dir / "test_small.png"), 0, 0),
                LayerSpec(str(image_dir / "test_small.png"), 64, 64, alpha=0),
            ],
            texts=[TextSpec("Hi", 5, 50, str(fake_font), border_color=[0, 0, 0])],
        )

        canvas = run_banner_job(job)

        assert canvas.get_mime_type() == "image/png"
        assert canvas.image.getpixel((0, 0)) == (250, 250, 0, 255)
        assert canvas.image.getpixel((70, 70)) == (250, 250, 0, 255)
        assert canvas.image.getpixel((50, 50)) == (30, 30, 200, 255)
        assert len(draw_calls) == 9
        assert (cache_dir / "test_small.png").is_file()

    def test_missing_layer(self, image_dir):
        """Test a missing layer file fails the job."""
        job = BannerJob(width=10, height=10, layers=[LayerSpec(str(image_dir / "missing.png"))])

        with pytest.raises(DecodeError):
            run_banner_job(job)

    def test_unsupported_base(self, image_dir):
        with pytest.raises(UnsupportedFormatError):
            run_banner_job(BannerJob(base_image=str(image_dir / "test.tif")))


class TestLoadBannerJob:
    """Test loading jobs from JSON files."""

    def test_relative_paths(self, image_dir):
        """Test paths in a job file resolve against its directory."""
        job_file = image_dir / "job.json"
        job_file.write_text(json.dumps({
            "base_image": "test.png",
            "layers": [{"image_path": "test_small.png", "x": 4, "y": 4}],
            "output": "out.png",
        }))

        job = load_banner_job(job_file)

        assert job.base_image == str(image_dir / "test.png")
        assert job.layers[0].image_path == str(image_dir / "test_small.png")
        assert job.output == str(image_dir / "out.png")
        assert run_banner_job(job).get_width() == 128

    def test_invalid_json(self, tmp_path):
        job_file = tmp_path / "job.json"
        job_file.write_text("{not json")

        with pytest.raises(ConfigError, match="Failed to load banner job"):
            load_banner_job(job_file)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_banner_job(tmp_path / "missing.json")

    def test_unknown_layer_keys_ignored(self, tmp_path):
        job_file = tmp_path / "job.json"
        job_file.write_text(json.dumps({
            "width": 5,
            "height": 5,
            "layers": [{"image_path": "a.png", "comment": "logo"}],
        }))

        job = load_banner_job(job_file)

        assert job.layers[0].image_path == str(tmp_path / "a.png")

    def test_bad_color_in_file(self, tmp_path):
        """Test channel errors keep their own type."""
        job_file = tmp_path / "job.json"
        job_file.write_text(json.dumps({
            "width": 5,
            "height": 5,
            "texts": [{"text": "x", "x": 0, "y": 0, "font": "f.ttf", "color": [300, 0, 0]}],
        }))

        with pytest.raises(ValidationError):
            load_banner_job(job_file)
