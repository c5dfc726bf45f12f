"""Platform binary builds and release packaging."""

from .builder import DEFAULT_TARGETS, ArtifactBuildError, ArtifactBuilder, BuildArtifacts, BuildTarget

__all__ = ["ArtifactBuilder", "ArtifactBuildError", "BuildArtifacts", "BuildTarget", "DEFAULT_TARGETS"]
