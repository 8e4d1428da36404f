"""Batch module for solving puzzle files and charting the results."""

from .batch import BatchRunner, BatchResult
from .visualizer import Visualizer

__all__ = ["BatchRunner", "BatchResult", "Visualizer"]
