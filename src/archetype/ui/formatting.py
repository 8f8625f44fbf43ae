"""Markdown rendering of session state for the Gradio UI."""

from datetime import datetime

from archetype.core.models import GenerationResult, Selection

from .models import ASSET_LABELS, ASSET_SLOTS, GenerationStatus, StudioState

PENDING_MESSAGE = "⏳ **Rendering...** The studio is synthesizing your photo."


def format_status(state: StudioState) -> str:
    """Status line shown under the action buttons.

    The most recent error stays visible until the next submit clears it.
    """
    if state.status is GenerationStatus.PENDING:
        return PENDING_MESSAGE
    if state.status is GenerationStatus.FAILED:
        return f"❌ **{state.error or 'Synthesis failed.'}**"
    if state.status is GenerationStatus.SUCCEEDED:
        count = len(state.results)
        return f"✅ **Render complete** · {count} result{'s' if count != 1 else ''} in this session"
    return "*Upload an identity and an outfit to begin*"


def format_asset_status(selection: Selection) -> str:
    """One line per image slot: synchronized or still missing."""
    lines = []
    for slot in ASSET_SLOTS:
        label = ASSET_LABELS[slot]
        optional = " (optional)" if slot == "product" else ""
        if getattr(selection, slot) is not None:
            lines.append(f"✅ **{label}** · Asset synchronized")
        else:
            lines.append(f"▫️ **{label}**{optional} · Not uploaded")
    return "\n\n".join(lines)


def format_pose_status(selection: Selection) -> str:
    if selection.pose is None:
        return "*No pose preset: the directive text is used on its own*"
    return f"**Pose:** {selection.pose.label}"


def format_result_caption(result: GenerationResult) -> str:
    return datetime.fromtimestamp(result.created_at).strftime("%H:%M:%S")


def format_result_info(result: GenerationResult | None) -> str:
    """Details of the selected result."""
    if result is None:
        return "*Select a result to inspect, export or remove it*"
    created = datetime.fromtimestamp(result.created_at).strftime("%Y-%m-%d %H:%M:%S")
    return (
        f"**Result:** `{result.id}`\n"
        f"**Created:** {created}\n"
        f"**Export name:** {result.export_filename}\n\n"
        f"**Prompt:**\n\n```\n{result.prompt}\n```"
    )
