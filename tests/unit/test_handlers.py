"""Unit tests for Gradio event handlers.

Handlers are called directly with a StudioState; the generation client is
always the test double from conftest.
"""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest
from PIL import Image

from archetype.core.errors import ServiceError
from archetype.core.generation_client import UNREADABLE_RESULT_MESSAGE
from archetype.core.models import GenerationResult, ImageAsset
from archetype.ui.formatting import PENDING_MESSAGE
from archetype.ui.handlers import (
    export_selected_result,
    generate_image,
    generate_variation,
    lock_controls,
    make_pose_handler,
    make_upload_handler,
    pose_button_variants,
    remove_selected_result,
    render_gallery,
    reset_session_handler,
    select_aspect_ratio_handler,
    select_lighting_handler,
    select_result,
    set_directive_handler,
)
from archetype.ui.models import GenerationStatus
from archetype.ui.validation import OUTFIT_REQUIRED_MESSAGE


@pytest.fixture
def patched_client(generation_client):
    with patch("archetype.ui.state.get_generation_client", return_value=generation_client):
        yield generation_client


def _with_results(state, image_asset, count):
    for i in range(count):
        state.results.insert(0, GenerationResult.create(image_asset, f"prompt {i}"))
    return [r.id for r in state.results]


class TestSelectionHandlers:
    """Upload, pose, preset and directive handlers."""

    def test_upload_sets_slot(self, studio_state, image_file):
        status, state = make_upload_handler("identity")(str(image_file), studio_state)

        assert state.selection.identity is not None
        assert "**Identity** · Asset synchronized" in status

    def test_upload_clear(self, ready_state):
        status, state = make_upload_handler("outfit")(None, ready_state)

        assert state.selection.outfit is None
        assert "**Outfit** · Not uploaded" in status

    def test_upload_unreadable_file_keeps_state(self, ready_state, temp_dir):
        old = ready_state.selection.identity

        _, state = make_upload_handler("identity")(str(temp_dir / "gone.jpg"), ready_state)

        assert state.selection.identity is old

    def test_pose_toggle_outputs(self, studio_state, catalogs):
        handler = make_pose_handler("lifestyle")

        *variants, status, state = handler(studio_state)

        assert len(variants) == len(catalogs.poses)
        selected = catalogs.poses.ids.index("lifestyle")
        assert variants[selected]["variant"] == "primary"
        assert all(v["variant"] == "secondary" for i, v in enumerate(variants) if i != selected)
        assert "Global Lifestyle" in status

        *variants, status, state = handler(state)
        assert state.selection.pose is None
        assert all(v["variant"] == "secondary" for v in variants)

    def test_pose_button_variants_no_pose(self, studio_state):
        assert all(v["variant"] == "secondary" for v in pose_button_variants(studio_state))

    def test_select_lighting(self, studio_state):
        state = select_lighting_handler("cinematic", studio_state)
        assert state.selection.lighting.id == "cinematic"

    def test_select_unknown_ratio_is_ignored(self, studio_state):
        state = select_aspect_ratio_handler("21:9", studio_state)
        assert state.selection.aspect_ratio.id == "1:1"

    def test_set_directive(self, studio_state):
        state = set_directive_handler("sunset rooftop", studio_state)
        assert state.selection.directive == "sunset rooftop"


class TestGenerationHandlers:
    """Generate, variation, lock and reset handlers."""

    def test_lock_controls(self, studio_state):
        generate_update, variation_update, status = lock_controls(studio_state)
        assert generate_update["interactive"] is False
        assert variation_update["interactive"] is False
        assert status == PENDING_MESSAGE

    def test_generate_success(self, ready_state, patched_client):
        gallery, status, generate_update, variation_update, info, state = asyncio.run(
            generate_image(ready_state)
        )

        assert len(gallery) == 1
        assert isinstance(gallery[0][0], Image.Image)
        assert "Render complete" in status
        assert generate_update["interactive"] is True
        assert variation_update["interactive"] is True
        assert state.status is GenerationStatus.SUCCEEDED
        patched_client.generate.assert_awaited_once()

    def test_generate_validation_failure(self, studio_state, patched_client, image_asset):
        studio_state.selection.identity = image_asset

        gallery, status, generate_update, variation_update, _, state = asyncio.run(
            generate_image(studio_state)
        )

        assert gallery == []
        assert OUTFIT_REQUIRED_MESSAGE in status
        assert generate_update["interactive"] is True
        assert variation_update["interactive"] is False
        assert patched_client.generate.await_count == 0

    def test_generate_service_failure_keeps_gallery(self, ready_state, patched_client, image_asset):
        _with_results(ready_state, image_asset, 2)
        patched_client.generate = AsyncMock(side_effect=ServiceError("API key not valid"))

        gallery, status, _, variation_update, _, state = asyncio.run(generate_image(ready_state))

        assert len(gallery) == 2
        assert "API key not valid" in status
        assert variation_update["interactive"] is True
        assert state.status is GenerationStatus.FAILED

    def test_unreadable_result_reported_as_failure(self, ready_state, patched_client, image_asset):
        ids = _with_results(ready_state, image_asset, 1)
        patched_client.generate = AsyncMock(side_effect=ServiceError(UNREADABLE_RESULT_MESSAGE))

        gallery, status, generate_update, _, _, state = asyncio.run(generate_image(ready_state))

        assert UNREADABLE_RESULT_MESSAGE in status
        assert [r.id for r in state.results] == ids
        assert len(gallery) == 1
        assert state.status is GenerationStatus.FAILED
        assert generate_update["interactive"] is True

    def test_unexpected_error_shown_in_status(self, ready_state, patched_client):
        patched_client.generate = AsyncMock(side_effect=KeyError("boom"))

        _, status, generate_update, _, _, state = asyncio.run(generate_image(ready_state))

        assert "An unexpected error occurred" in status
        assert state.status is GenerationStatus.FAILED
        assert generate_update["interactive"] is True

    def test_pending_request_rejected(self, ready_state, patched_client):
        ready_state.status = GenerationStatus.PENDING

        _, status, generate_update, _, _, state = asyncio.run(generate_image(ready_state))

        assert status == PENDING_MESSAGE
        assert generate_update["interactive"] is False
        assert patched_client.generate.await_count == 0

    def test_variation_adds_result(self, ready_state, patched_client, image_asset):
        _with_results(ready_state, image_asset, 1)

        gallery, _, _, _, _, state = asyncio.run(generate_variation(ready_state))

        assert len(gallery) == 2
        assert "Variation: " in state.results[0].prompt

    def test_variation_without_results(self, ready_state, patched_client):
        _, status, _, _, _, state = asyncio.run(generate_variation(ready_state))

        assert "Generate an image before requesting a variation" in status
        assert patched_client.generate.await_count == 0

    def test_reset_session_outputs(self, ready_state, image_asset, catalogs):
        _with_results(ready_state, image_asset, 2)
        ready_state.selection.directive = "sunset rooftop"
        ready_state.selection.pose = catalogs.poses.get("runway")

        outputs = reset_session_handler(ready_state)

        gallery, status, _, variation_update, _, state = outputs[:6]
        image_updates = outputs[6:9]
        skin, lighting, ratio, directive = outputs[9:13]
        pose_updates = outputs[13 : 13 + len(catalogs.poses)]
        asset_status, pose_status = outputs[13 + len(catalogs.poses) :]

        assert gallery == []
        assert state.results == []
        assert variation_update["interactive"] is False
        assert all(u["value"] is None for u in image_updates)
        assert (skin, lighting, ratio, directive) == ("natural", "studio", "1:1", "")
        assert all(u["variant"] == "secondary" for u in pose_updates)
        assert asset_status.count("Not uploaded") == 3
        assert "No pose preset" in pose_status


class TestResultHandlers:
    """Gallery selection, removal and export."""

    def test_render_gallery_newest_first(self, studio_state, image_asset):
        ids = _with_results(studio_state, image_asset, 3)
        gallery = render_gallery(studio_state)
        assert len(gallery) == len(ids) == 3

    def test_render_gallery_tolerates_undecodable_result(self, studio_state, image_asset):
        _with_results(studio_state, image_asset, 1)
        broken = GenerationResult.create(ImageAsset(data=b"not-an-image"), "p")
        studio_state.results.insert(0, broken)

        gallery = render_gallery(studio_state)

        assert len(gallery) == 2
        assert all(isinstance(image, Image.Image) for image, _ in gallery)
        assert "unreadable" in gallery[0][1]

    def test_undecodable_result_does_not_break_later_renders(
        self, ready_state, patched_client, image_asset
    ):
        broken = GenerationResult.create(ImageAsset(data=b"not-an-image"), "p")
        ready_state.results.insert(0, broken)

        gallery, _, _, _, _, state = asyncio.run(generate_image(ready_state))
        assert len(gallery) == 2
        assert state.status is GenerationStatus.SUCCEEDED

        state.selected_result_id = broken.id
        gallery, _, _, state = remove_selected_result(state)
        assert broken not in state.results
        assert len(gallery) == 1

    def test_select_result(self, studio_state, image_asset):
        ids = _with_results(studio_state, image_asset, 2)

        info, state = select_result(studio_state, SimpleNamespace(index=1))

        assert state.selected_result_id == ids[1]
        assert ids[1] in info

    def test_select_out_of_range(self, studio_state, image_asset):
        _with_results(studio_state, image_asset, 1)

        info, state = select_result(studio_state, SimpleNamespace(index=5))

        assert state.selected_result_id is None
        assert "Select a result" in info

    def test_remove_selected(self, studio_state, image_asset):
        ids = _with_results(studio_state, image_asset, 3)
        studio_state.selected_result_id = ids[1]

        gallery, info, variation_update, state = remove_selected_result(studio_state)

        assert [r.id for r in state.results] == [ids[0], ids[2]]
        assert len(gallery) == 2
        assert "Select a result" in info
        assert variation_update["interactive"] is True

    def test_remove_last_result_disables_variation(self, studio_state, image_asset):
        ids = _with_results(studio_state, image_asset, 1)
        studio_state.selected_result_id = ids[0]

        _, _, variation_update, state = remove_selected_result(studio_state)

        assert state.results == []
        assert variation_update["interactive"] is False

    def test_remove_without_selection(self, studio_state, image_asset):
        ids = _with_results(studio_state, image_asset, 2)

        _, _, _, state = remove_selected_result(studio_state)

        assert [r.id for r in state.results] == ids

    def test_export_selected(self, studio_state, image_asset, test_config):
        ids = _with_results(studio_state, image_asset, 1)
        studio_state.selected_result_id = ids[0]

        with patch("archetype.ui.handlers.results.config", test_config):
            update = export_selected_result(studio_state)

        assert update["visible"] is True
        assert update["value"].endswith(f"influencer-{ids[0]}.png")
        assert (test_config.export_dir / f"influencer-{ids[0]}.png").read_bytes() == image_asset.data

    def test_export_without_selection(self, studio_state):
        update = export_selected_result(studio_state)
        assert update["visible"] is False
