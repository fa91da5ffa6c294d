from dataclasses import dataclass

from progress_editor.services.dialogs import MessageQueueDialogs
from progress_editor.services.editor_service import EditorService
from progress_editor.views.progress_chart import ProgressChart


@dataclass
class AppConfig:
    """
    Holds the wired services for the Dash app. Passed into layout + callback
    registration functions instead of using module-level globals.
    """
    editor: EditorService
    chart: ProgressChart
    dialogs: MessageQueueDialogs
    ui_title: str = "AI R&D Progress Multiplier Data"

    def validate(self) -> None:
        """Ensure the editor is wired to the same dialog service the UI drains."""
        if self.editor.dialogs is not self.dialogs:
            raise RuntimeError("AppConfig.dialogs must be the editor's dialog service.")
