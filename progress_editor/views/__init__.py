"""
Chart consumers of the published dataset.
"""

from .progress_chart import ProgressChart

__all__ = ["ProgressChart"]
