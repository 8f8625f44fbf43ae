"""Prompt composition for identity-preserving fashion synthesis.

The composed prompt is a single instruction string built in a fixed order:

Template Structure::

    [Fixed: system preamble - asset hierarchy and output standards]
    [Lighting preset]. [Skin-texture preset].
    [Pose preset]. [Free text]. [Variation: <modifier>].
    [Fixed: closing constraints]

Bracketed slots that are empty (no pose selected, no free text, no
variation) are dropped entirely; no placeholder text is inserted. Preset
fragments lose their trailing full stop and are joined with ``". "``. Free
text is kept as typed; when it already ends a sentence (``.``, ``!`` or
``?``) the next fragment follows after a single space, so no ``".."`` is
produced.

Composition is pure: the same selection and modifier always produce the
same string. The "generate similar variation" action relies on this: it
re-runs composition with one extra modifier and nothing else changes.

Usage
-----
::

    prompt = compose_prompt(selection)
    variant = compose_prompt(selection, variation="Soft lens bloom effect")
"""

from __future__ import annotations

from .catalog import PresetOption
from .models import Selection

# ---------------------------------------------------------------------------
# Fixed boilerplate sections.
# The preamble ends with "Context: " so preset fragments read as its tail.
# ---------------------------------------------------------------------------

SYSTEM_PREAMBLE = (
    "You are a Lead Technical Photographer for a high-fashion digital studio. \n"
    "TASK: Generate a master-quality 8K photograph.\n"
    "\n"
    "ASSET HIERARCHY:\n"
    "1. IDENTITY (Face Image): Use this image for face identity. "
    "Their facial features must be 100% IDENTICAL.\n"
    "2. GARMENT (Outfit Image): Replicate the exact clothing from this image "
    "(color, texture, pattern).\n"
    "3. ITEM (Product Image): Integrate this specific item naturally if provided.\n"
    "\n"
    "STANDARDS:\n"
    "- Output must be a real DSLR photo (8k resolution).\n"
    "- NO AI smoothing unless explicitly requested.\n"
    "- Precise composition based on technical specs.\n"
    "\n"
    "Context: "
)

CLOSING_CONSTRAINTS = "Maintain identical face identity. Replicate the outfit exactly."

FRAGMENT_SEPARATOR = ". "
SENTENCE_ENDINGS = (".", "!", "?")
VARIATION_LABEL = "Variation: "


def _clean(fragment: str) -> str:
    """Preset text without its trailing full stop."""
    return fragment.strip().rstrip(".").rstrip()


def _join(fragments: list[str]) -> str:
    text = ""
    for fragment in fragments:
        fragment = fragment.strip()
        if not fragment:
            continue
        if not text:
            text = fragment
        elif text.endswith(SENTENCE_ENDINGS):
            text = f"{text} {fragment}"
        else:
            text = f"{text}{FRAGMENT_SEPARATOR}{fragment}"
    return text


def compose_directive(
    pose: PresetOption | None,
    text: str,
    variation: str | None = None,
) -> str:
    """Compose the user-controlled part of the prompt.

    Args:
        pose: Selected pose preset, or None
        text: Free-text directive (may be empty); kept verbatim apart from
            surrounding whitespace
        variation: Optional variation modifier

    Returns:
        Pose fragment, free text and ``Variation: <modifier>`` clause joined
        in that order; empty string if all three are absent.
    """
    clause = ""
    if variation and variation.strip():
        clause = f"{VARIATION_LABEL}{_clean(variation)}"
    return _join([_clean(pose.prompt) if pose is not None else "", text or "", clause])


def compose_prompt(selection: Selection, variation: str | None = None) -> str:
    """Compose the full instruction string for the synthesis service.

    Args:
        selection: Current user selection (images are not inspected)
        variation: Optional variation modifier appended after the directive

    Returns:
        The composed prompt, always starting with ``SYSTEM_PREAMBLE`` and
        ending with ``CLOSING_CONSTRAINTS``.
    """
    body = _join(
        [
            _clean(selection.lighting.prompt),
            _clean(selection.skin_texture.prompt),
            compose_directive(selection.pose, selection.directive, variation),
            CLOSING_CONSTRAINTS,
        ]
    )
    return f"{SYSTEM_PREAMBLE}{body}"
