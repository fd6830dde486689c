from richtext.schemas.schemas import (
    DEFAULT_ALLOWED_TAGS,
    SanitizeOverrides, RenderOptions,
    RenderRequest, RenderResponse,
)

__all__ = [
    "DEFAULT_ALLOWED_TAGS",
    "SanitizeOverrides", "RenderOptions",
    "RenderRequest", "RenderResponse",
]
