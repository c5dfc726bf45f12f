"""Publishing of releases to GitHub."""

from .context import DownloadEntry, ReleaseContext, ReleaseContextBuilder
from .publisher import ReleasePublisher, ReleasePublishError

__all__ = ["DownloadEntry", "ReleaseContext", "ReleaseContextBuilder", "ReleasePublisher", "ReleasePublishError"]
