"""Archetype Studio: FastAPI REST API layer.

This package contains the FastAPI application and its Pydantic
request/response models.

Modules
-------
main
    FastAPI application with all route handlers and the ``main()`` CLI
    entry point, which also mounts the Gradio studio.
models
    Pydantic models for API request and response validation.
"""
