"""Validation utilities for Archetype UI inputs."""

import logging

from archetype.core.models import Selection

from .models import StudioState

logger = logging.getLogger(__name__)

IDENTITY_REQUIRED_MESSAGE = "IDENTITY REQUIRED: Please upload the source face."
OUTFIT_REQUIRED_MESSAGE = "OUTFIT REQUIRED: Please provide a garment reference."
VARIATION_REQUIRES_RESULT_MESSAGE = "Generate an image before requesting a variation."


class ValidationError(Exception):
    """User-friendly validation error.

    This exception is raised when user input fails validation.
    The message is intended to be displayed directly to the user.
    """

    pass


def validate_required_inputs(identity: object, outfit: object) -> None:
    """Check that both required image inputs are present.

    Works on anything with a truth value: decoded assets, file paths or
    raw base64 strings. The identity input is checked first, so inputs
    missing both report the identity message.

    Raises:
        ValidationError: With the identity- or outfit-specific message
    """
    if not identity:
        raise ValidationError(IDENTITY_REQUIRED_MESSAGE)
    if not outfit:
        raise ValidationError(OUTFIT_REQUIRED_MESSAGE)


def validate_required_assets(selection: Selection) -> None:
    """Check that the selection holds both required images.

    Raises:
        ValidationError: With the identity- or outfit-specific message
    """
    validate_required_inputs(selection.identity, selection.outfit)


def validate_directive(text: str, max_length: int = 100000) -> None:
    """Validate free-text directive content.

    Empty text is valid; it simply contributes nothing to the prompt.

    Raises:
        ValidationError: If the text is too long
    """
    if len(text) > max_length:
        raise ValidationError(
            f"Directive is too long ({len(text)} characters). Maximum is {max_length} characters."
        )


def validate_variation_available(state: StudioState) -> None:
    """Variations re-run an earlier generation, so one must exist.

    Raises:
        ValidationError: If the session has no results yet
    """
    if not state.results:
        raise ValidationError(VARIATION_REQUIRES_RESULT_MESSAGE)
