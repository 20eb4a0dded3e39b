from .scatterplot_view import ScatterplotView
from .matrix_view import MatrixView

__all__ = ["ScatterplotView", "MatrixView"]
