from __future__ import annotations

import logging

from designrender.model import Color, GradientPaint, ImagePaint, Radii
from designrender.paint import (
    blend_mode_css,
    gradient_to_css,
    image_placement,
    image_url,
    linear_gradient_angle,
    mask_image_css,
    paint_css,
    radius_css,
    rgba_to_css,
)

from .helpers import design_node, rect, solid, text_node

RED = solid(1, 0, 0)
BLUE = solid(0, 0, 1)


def test_two_solid_paints_become_layers_with_top_paint_first():
    css = paint_css(design_node(rect("r", style={"fills": [RED, BLUE]})))

    layers = css.get("background-image")
    assert layers is not None
    assert layers.startswith("linear-gradient(0deg, rgb(0,0,255) 0%, rgb(0,0,255) 100%)")
    assert layers.endswith("linear-gradient(0deg, rgb(255,0,0) 0%, rgb(255,0,0) 100%)")
    assert css.get("background-repeat") == "no-repeat, no-repeat"
    assert "background" not in css


def test_single_solid_paint_is_plain_background():
    css = paint_css(design_node(rect("r", fill=RED)))

    assert css.serialize() == "background:rgb(255,0,0);"
    assert "background-image" not in css


def test_invisible_paints_are_skipped():
    hidden = {**BLUE, "visible": False}

    css = paint_css(design_node(rect("r", style={"fills": [RED, hidden]})))

    assert css.serialize() == "background:rgb(255,0,0);"


def test_text_nodes_take_no_background():
    data = text_node("t")
    data["style"] = {"fills": [RED]}

    assert not paint_css(design_node(data))


def test_image_paint_uses_url_template_and_scale_mode():
    paint = {"type": "IMAGE", "imageId": "abc123", "scaleMode": "FIT"}

    css = paint_css(design_node(rect("r", fill=paint)), image_url_template="assets/{image_id}.webp")

    assert css.get("background-image") == "url('assets/abc123.webp')"
    assert css.get("background-size") == "contain"
    assert css.get("background-repeat") == "no-repeat"


def test_image_url_keeps_absolute_ids():
    assert image_url("abc") == "images/abc.png"
    assert image_url("/static/hero.png") == "/static/hero.png"


def test_rgba_to_css_folds_paint_opacity_into_alpha():
    assert rgba_to_css(Color(r=1, g=0, b=0)) == "rgb(255,0,0)"
    assert rgba_to_css(Color(r=1, g=0, b=0, a=0.5)) == "rgba(255,0,0,0.5)"
    assert rgba_to_css(Color(r=0, g=0, b=0, a=1), 0.25) == "rgba(0,0,0,0.25)"
    assert rgba_to_css(None) is None


def test_linear_gradient_angle_from_handles():
    paint = GradientPaint.model_validate(
        {
            "type": "GRADIENT_LINEAR",
            "gradientStops": [
                {"position": 0, "color": {"r": 1, "g": 0, "b": 0, "a": 1}},
                {"position": 1, "color": {"r": 0, "g": 0, "b": 1, "a": 1}},
            ],
            "gradientHandlePositions": [{"x": 0.5, "y": 0}, {"x": 0.5, "y": 1}],
        }
    )

    assert gradient_to_css(paint) == "linear-gradient(180deg, rgb(255,0,0) 0.00%, rgb(0,0,255) 100.00%)"


def _linear(**extra):
    return GradientPaint.model_validate(
        {
            "type": "GRADIENT_LINEAR",
            "gradientStops": [
                {"position": 0, "color": {"r": 1, "g": 0, "b": 0, "a": 1}},
                {"position": 1, "color": {"r": 0, "g": 0, "b": 1, "a": 1}},
            ],
            **extra,
        }
    )


def test_linear_gradient_angle_from_transform_wins_over_handles():
    handles = [{"x": 0.5, "y": 0}, {"x": 0.5, "y": 1}]
    identity = _linear(gradientTransform=[[1, 0, 0], [0, 1, 0]], gradientHandlePositions=handles)
    swapped = _linear(gradientTransform=[[0, 1, 0], [1, 0, 0]])

    assert linear_gradient_angle(identity, 100, 50) == 90
    assert linear_gradient_angle(swapped, 100, 50) == 0
    assert gradient_to_css(identity, 100, 50).startswith("linear-gradient(90deg, ")


def test_linear_gradient_angle_from_rotated_transform_on_a_square():
    c = 0.7071068
    paint = _linear(gradientTransform=[[c, -c, 0], [c, c, 0]])

    assert linear_gradient_angle(paint, 100, 100) == 45


def test_linear_gradient_angle_defaults_to_180():
    assert linear_gradient_angle(_linear(), 100, 50) == 180


def _image(**extra):
    return ImagePaint.model_validate({"type": "IMAGE", "imageId": "img", **extra})


def test_crop_image_placement_follows_image_transform():
    paint = _image(scaleMode="CROP", imageTransform=[[0.5, 0, 0.25], [0, 0.5, 0.1]])

    assert image_placement(paint, 100, 80) == ("200.00px 160.00px", "-50.00px -16.00px", "no-repeat")


def test_crop_with_rotated_image_transform_falls_back_to_cover():
    paint = _image(scaleMode="CROP", imageTransform=[[0, 1, 0], [1, 0, 0]])

    assert image_placement(paint, 100, 80) == ("cover", "center", "no-repeat")
    assert image_placement(_image(scaleMode="CROP"), 100, 80) == ("cover", "center", "no-repeat")


def test_gradient_with_one_stop_is_dropped():
    paint = GradientPaint.model_validate(
        {"type": "GRADIENT_RADIAL", "gradientStops": [{"position": 0, "color": {"r": 1}}]}
    )

    assert gradient_to_css(paint) is None


def test_diamond_gradient_is_approximated_and_logged(caplog):
    paint = GradientPaint.model_validate(
        {
            "type": "GRADIENT_DIAMOND",
            "gradientStops": [
                {"position": 0, "color": {"r": 1, "a": 1}},
                {"position": 1, "color": {"b": 1, "a": 1}},
            ],
        }
    )

    with caplog.at_level(logging.DEBUG, logger="designrender.paint"):
        value = gradient_to_css(paint)

    assert value.startswith("radial-gradient(ellipse,")
    assert "GRADIENT_DIAMOND" in caplog.text


def test_blend_mode_css():
    assert blend_mode_css(None) == "normal"
    assert blend_mode_css("PASS_THROUGH") == "normal"
    assert blend_mode_css("COLOR_DODGE") == "color-dodge"


def test_radius_css():
    assert radius_css(None).serialize() == ""
    assert radius_css(Radii(uniform=8)).serialize() == "border-radius:8px;"
    assert radius_css(Radii(corners=(4, 0, 4, 0))).serialize() == "border-radius:4px 0px 4px 0px;"


def test_mask_image_css_for_image_filled_mask():
    mask = rect("m", fill={"type": "IMAGE", "imageId": "shape"}, isMask=True, maskType="LUMINANCE")

    css = mask_image_css(design_node(mask))

    assert css.get("mask-image") == "url('images/shape.png')"
    assert css.get("-webkit-mask-image") == "url('images/shape.png')"
    assert css.get("mask-mode") == "luminance"
