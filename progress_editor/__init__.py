"""
Top-level package for the progress multiplier editor.

Most code should import from submodules such as:
    progress_editor.core
    progress_editor.services
    progress_editor.ui
"""

__all__: list[str] = []
