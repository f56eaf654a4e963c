from grapher_plot.errors import PlotDataError
from grapher_plot.graph import Graph, GraphSamples, InputGrid, evaluate
from grapher_plot.navigator import Navigator
from grapher_plot.render import FrameRenderer, RenderStyle, save_png

__all__ = [
    "FrameRenderer",
    "Graph",
    "GraphSamples",
    "InputGrid",
    "Navigator",
    "PlotDataError",
    "RenderStyle",
    "evaluate",
    "save_png",
]
