"""Detection of web parts that embed Microsoft Stream (Classic) video."""

from .config import DEPRECATED_VIDEO_MARKER
from .models import Component


def matches(component: Component) -> bool:
    """Return True when the component's embed code references the deprecated video service."""
    embed_code = component.embed_code
    if not embed_code:
        return False
    return DEPRECATED_VIDEO_MARKER in embed_code
