"""Auth package: bearer token dependencies and the Viewer capability."""

from growth_catalyst.auth.dependencies import get_current_user, get_viewer, require_role
from growth_catalyst.auth.viewer import Capability, Viewer

__all__ = [
    "Capability",
    "Viewer",
    "get_current_user",
    "get_viewer",
    "require_role",
]
