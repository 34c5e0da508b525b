"""Models package for Gradlebox."""

from .base import GradleboxBaseModel, GradleboxFrozenModel


__all__ = ["GradleboxBaseModel", "GradleboxFrozenModel"]
