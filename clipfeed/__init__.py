"""Business rules for a short-video service: errors, follow relations, permissions and videos."""

__version__ = "0.1.0"
__all__ = ["errors", "relation", "permission", "video"]