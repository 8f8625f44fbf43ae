"""Gradio studio interface.

Handlers live in :mod:`archetype.ui.handlers`; per-session state and its
transitions in :mod:`archetype.ui.state`. Launch with ``archetype-ui`` or
mount :func:`archetype.ui.app.create_ui` into another ASGI app.
"""
