"""Rendering: camera, colour model, frame builder, input and the view handle."""

from atlasic.render.camera import Camera
from atlasic.render.colors import ColorMode, ColorModel
from atlasic.render.commands import Frame, Transform
from atlasic.render.interaction import InteractionController, InteractionState
from atlasic.render.renderer import DetailLevel, Renderer, RenderState
from atlasic.render.search import SearchBox, suggest
from atlasic.render.view import GraphView, ViewClosedError

__all__ = [
    "Camera",
    "ColorMode",
    "ColorModel",
    "Frame",
    "Transform",
    "InteractionController",
    "InteractionState",
    "DetailLevel",
    "Renderer",
    "RenderState",
    "SearchBox",
    "suggest",
    "GraphView",
    "ViewClosedError",
]
