"""
Core domain layer: dataset snapshot model, normalisation, the table
mutation engine, the owned editor state and the in-process event channel.
"""

from .dataset import Dataset, Row
from .events import DATA_EVENT, EventBus
from .state import EditorState
from .table_engine import TableEngine

__all__ = ["Dataset", "Row", "DATA_EVENT", "EventBus", "EditorState", "TableEngine"]
