"""OpenAPI customization utilities.

Enriches the generated schema with tag descriptions and documents the
throttling response shared by the login endpoints, keeping documentation
concerns out of the app factory.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

TAGS_METADATA = [
    {
        "name": "Admin Auth",
        "description": "Admin panel sign-in, throttled per email address.",
    },
    {
        "name": "Health",
        "description": "Liveness and readiness checks.",
    },
]

_THROTTLED_RESPONSE = {
    "description": "Too many login attempts; see the Retry-After header.",
    "headers": {
        "Retry-After": {
            "description": "Seconds until the block expires.",
            "schema": {"type": "integer"},
        },
    },
}


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation to add tags and a 429 response.

    - Adds tags metadata if not present
    - Documents 429 on POST /admin/login
    """

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        for tag in TAGS_METADATA:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        login_post = schema.get("paths", {}).get("/admin/login", {}).get("post")
        if isinstance(login_post, dict):
            login_post.setdefault("responses", {}).setdefault("429", _THROTTLED_RESPONSE)

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
