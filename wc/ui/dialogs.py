"""Manual time entry dialog."""

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QDialog,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
)
from wc.util import clamp_manual_input

# Opens when the user clicks a day in the week list. Whatever is typed gets clamped to a non-negative int before
# it goes anywhere near the engine.
class ManualTimeDialog(QDialog):

    def __init__(self, parent, day):
        super().__init__(parent)
        self.setWindowTitle(f"Set time for {day.name.capitalize()}")
        self.setModal(True)

        # Output attributes, read by MainWindow after the dialog is accepted
        self.day = day
        self.hours = 0
        self.minutes = 0

        outer = QVBoxLayout(self)
        outer.addWidget(QLabel("Enter the total time worked for this day."))

        form = QFormLayout()
        self._hours_edit = QLineEdit()
        self._hours_edit.setPlaceholderText("0")
        form.addRow("Hours", self._hours_edit)
        self._minutes_edit = QLineEdit()
        self._minutes_edit.setPlaceholderText("0")
        form.addRow("Minutes", self._minutes_edit)
        outer.addLayout(form)

        btn_row = QHBoxLayout()
        btn_row.addStretch(1)
        cancel_btn = QPushButton("Cancel")
        cancel_btn.clicked.connect(self.reject)
        btn_row.addWidget(cancel_btn)
        save_btn = QPushButton("Save")
        save_btn.setDefault(True)
        save_btn.clicked.connect(self._on_save)
        btn_row.addWidget(save_btn)
        outer.addLayout(btn_row)

        self._hours_edit.setFocus(Qt.OtherFocusReason)

    def _on_save(self):
        self.hours = clamp_manual_input(self._hours_edit.text())
        self.minutes = clamp_manual_input(self._minutes_edit.text())
        self.accept()
