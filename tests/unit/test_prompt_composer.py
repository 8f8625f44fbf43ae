"""Tests for archetype.core.prompt_composer.

Tests cover:
- The fixed preamble and closing constraints around every prompt.
- Fragment order and the omission of empty slots.
- Variation modifiers appended after the base composition.
- The sunset-rooftop reference composition.
"""

from __future__ import annotations

import pytest

from archetype.core.catalog import PresetOption
from archetype.core.models import Selection
from archetype.core.prompt_composer import (
    CLOSING_CONSTRAINTS,
    SYSTEM_PREAMBLE,
    compose_directive,
    compose_prompt,
)


@pytest.fixture
def selection(catalogs, image_asset) -> Selection:
    return Selection.from_ids(catalogs, identity=image_asset, outfit=image_asset)


class TestComposePrompt:
    """Tests for compose_prompt."""

    def test_sunset_rooftop_reference(self, catalogs, image_asset):
        selection = Selection.from_ids(
            catalogs,
            lighting_id="studio",
            skin_texture_id="natural",
            aspect_ratio_id="1:1",
            directive="sunset rooftop",
            identity=image_asset,
            outfit=image_asset,
        )

        prompt = compose_prompt(selection)

        assert prompt == (
            SYSTEM_PREAMBLE
            + "high-end commercial studio lighting, soft box, rim light, sharp details. "
            + "Hyper-realistic skin with visible pores, fine lines, and natural textures. "
            + "Maximum authenticity. "
            + "sunset rooftop. "
            + CLOSING_CONSTRAINTS
        )
        for pose in catalogs.poses:
            assert pose.prompt not in prompt

    @pytest.mark.parametrize("pose_id", [None, "editorial", "runway"])
    @pytest.mark.parametrize("directive", ["", "sunset rooftop", "  beach at dawn.  "])
    def test_preamble_and_closing_always_present(self, selection, catalogs, pose_id, directive):
        selection.pose = catalogs.poses.get(pose_id) if pose_id else None
        selection.directive = directive

        prompt = compose_prompt(selection)

        assert prompt.startswith(SYSTEM_PREAMBLE)
        assert prompt.endswith(CLOSING_CONSTRAINTS)

    def test_fragment_order(self, selection, catalogs):
        selection.lighting = catalogs.lighting.get("neon")
        selection.skin_texture = catalogs.skin_textures.get("airbrushed")
        selection.pose = catalogs.poses.get("runway")
        selection.directive = "rain-soaked street"

        prompt = compose_prompt(selection)

        positions = [
            prompt.index("vibrant cinematic neon lighting"),
            prompt.index("Flawless, perfectly even skin"),
            prompt.index("Fashion week runway photography"),
            prompt.index("rain-soaked street"),
            prompt.index(CLOSING_CONSTRAINTS),
        ]
        assert positions == sorted(positions)

    def test_pose_prompt_included(self, selection, catalogs):
        selection.pose = catalogs.poses.get("campaign")
        assert catalogs.poses.get("campaign").prompt.rstrip(".") in compose_prompt(selection)

    def test_no_double_periods(self, selection, catalogs):
        selection.pose = catalogs.poses.get("editorial")
        selection.directive = "sunset rooftop."
        assert ".." not in compose_prompt(selection)

    def test_directive_kept_verbatim(self, selection):
        selection.directive = "sunset rooftop, golden hour. Wind in the hair."
        prompt = compose_prompt(selection)
        assert "sunset rooftop, golden hour. Wind in the hair. Maintain identical" in prompt

    def test_directive_ending_in_question_mark(self, selection):
        selection.directive = "  could the coat be red?  "
        prompt = compose_prompt(selection)
        assert "Maximum authenticity. could the coat be red? Maintain identical" in prompt

    def test_empty_directive_adds_nothing(self, selection):
        selection.directive = "   "
        prompt = compose_prompt(selection)
        assert ". . " not in prompt
        assert prompt.endswith("Maximum authenticity. " + CLOSING_CONSTRAINTS)

    def test_images_do_not_affect_prompt(self, selection, image_asset):
        without_product = compose_prompt(selection)
        selection.product = image_asset
        assert compose_prompt(selection) == without_product

    def test_deterministic(self, selection):
        assert compose_prompt(selection) == compose_prompt(selection)


class TestVariation:
    """Composition with a variation modifier."""

    def test_variation_appended_after_base(self, selection):
        selection.directive = "sunset rooftop"
        base = compose_prompt(selection)

        varied = compose_prompt(selection, variation="Slightly different camera angle")

        base_body = base[: -len(CLOSING_CONSTRAINTS)]
        assert varied.startswith(base_body)
        assert "Variation: Slightly different camera angle" in varied
        assert varied.index("sunset rooftop") < varied.index("Variation: ")
        assert varied.endswith(CLOSING_CONSTRAINTS)

    def test_no_variation_is_base_verbatim(self, selection):
        assert compose_prompt(selection, variation=None) == compose_prompt(selection)
        assert compose_prompt(selection, variation="") == compose_prompt(selection)

    def test_variation_after_punctuated_directive(self, selection):
        selection.directive = "sunset rooftop."
        varied = compose_prompt(selection, variation="Different angle")
        assert "sunset rooftop. Variation: Different angle. Maintain" in varied

    def test_variation_with_empty_directive(self, selection):
        varied = compose_prompt(selection, variation="Soft lens bloom effect")
        assert "Maximum authenticity. Variation: Soft lens bloom effect. " in varied


class TestComposeDirective:
    """Tests for compose_directive."""

    def test_all_absent(self):
        assert compose_directive(None, "") == ""

    def test_pose_then_text(self):
        pose = PresetOption(id="runway", label="Runway", prompt="Runway photography.")
        assert compose_directive(pose, "city lights") == "Runway photography. city lights"

    def test_text_period_kept(self):
        assert compose_directive(None, "city lights.", "Different angle") == (
            "city lights. Variation: Different angle"
        )

    def test_variation_only(self):
        assert compose_directive(None, "", "Different angle") == "Variation: Different angle"
