"""Rendering of type descriptors as TypeScript annotation text."""

from .renderer import EnumStyle, render, render_annotation

__all__ = ["EnumStyle", "render", "render_annotation"]
