import sys
from datetime import date
from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QApplication,
    QDialog,
    QFrame,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)
from wc.common.logger import log
from wc.core.engine import SessionEngine, SessionStatus
from wc.core.models import DAY_ORDER, Day
from wc.ui.dialogs import ManualTimeDialog
from wc.ui.theme import STATUS_COLORS, break_button_color, build_stylesheet, clock_button_color
from wc.util import format_hms, format_hours_minutes, week_label

_STATUS_TEXT = {
    SessionStatus.CLOCKED_OUT: "CLOCKED OUT",
    SessionStatus.WORKING: "CLOCKED IN",
    SessionStatus.ON_BREAK: "ON BREAK",
}


class MainWindow(QMainWindow):
    """Read-only view over a SessionEngine plus buttons that forward to its commands."""

    def __init__(self, engine: SessionEngine):
        super().__init__()
        self.setWindowTitle("WeekClock")
        self.engine = engine
        self._day_buttons = {}

        central = QWidget()
        central.setObjectName("central")
        self.setCentralWidget(central)
        main_lay = QVBoxLayout(central)
        main_lay.setContentsMargins(24, 16, 24, 16)

        # -- Header --
        title = QLabel("Clock Tracker")
        title.setObjectName("title")
        title.setAlignment(Qt.AlignCenter)
        main_lay.addWidget(title)
        self._week_lbl = QLabel()
        self._week_lbl.setObjectName("weekLabel")
        self._week_lbl.setAlignment(Qt.AlignCenter)
        main_lay.addWidget(self._week_lbl)

        # -- Timer --
        self._status_lbl = QLabel()
        self._status_lbl.setAlignment(Qt.AlignCenter)
        main_lay.addWidget(self._status_lbl)
        self._timer_lbl = QLabel()
        self._timer_lbl.setObjectName("timer")
        self._timer_lbl.setAlignment(Qt.AlignCenter)
        main_lay.addWidget(self._timer_lbl)

        # -- Buttons --
        btn_row = QHBoxLayout()
        btn_row.addStretch(1)
        self._clock_btn = QPushButton()
        self._clock_btn.setObjectName("clockButton")
        self._clock_btn.clicked.connect(lambda: self._run_command(self.engine.toggle_clock))
        btn_row.addWidget(self._clock_btn)
        self._break_btn = QPushButton()
        self._break_btn.setObjectName("breakButton")
        self._break_btn.clicked.connect(lambda: self._run_command(self.engine.toggle_break))
        btn_row.addWidget(self._break_btn)
        btn_row.addStretch(1)
        main_lay.addLayout(btn_row)

        # -- Week list --
        card = QFrame()
        card.setObjectName("weekCard")
        card_lay = QVBoxLayout(card)
        header_row = QHBoxLayout()
        header = QLabel("This Week")
        header.setObjectName("weekHeader")
        header_row.addWidget(header)
        header_row.addStretch(1)
        self._reset_btn = QPushButton("Reset")
        self._reset_btn.setObjectName("resetButton")
        self._reset_btn.clicked.connect(self._on_reset_clicked)
        header_row.addWidget(self._reset_btn)
        card_lay.addLayout(header_row)

        for day in DAY_ORDER:
            btn = QPushButton()
            btn.setObjectName("dayRow")
            btn.clicked.connect(lambda _checked=False, d=day: self._on_day_clicked(d))
            card_lay.addWidget(btn)
            self._day_buttons[day] = btn

        self._total_lbl = QLabel()
        self._total_lbl.setObjectName("total")
        card_lay.addWidget(self._total_lbl)
        main_lay.addWidget(card, 1)

        self.setStyleSheet(build_stylesheet())

        engine.status_changed.connect(self._on_status_changed)
        engine.elapsed_changed.connect(self._on_elapsed_changed)
        engine.week_changed.connect(self._on_week_changed)
        self._on_status_changed(engine.status)
        self._on_elapsed_changed(engine.elapsed_seconds)
        self._on_week_changed(engine.week_totals)

    # ------------------------------------------------------------------ #
    #  Engine -> view                                                      #
    # ------------------------------------------------------------------ #

    def _on_status_changed(self, status):
        clocked_in = status is not SessionStatus.CLOCKED_OUT
        on_break = status is SessionStatus.ON_BREAK

        self._status_lbl.setText(_STATUS_TEXT[status])
        self._status_lbl.setStyleSheet(
            f"color: {STATUS_COLORS[status.name]}; font-size: 14px; font-weight: 600; letter-spacing: 2px;")

        self._clock_btn.setText("Clock Out" if clocked_in else "Clock In")
        self._clock_btn.setStyleSheet(f"background: {clock_button_color(clocked_in)};")
        self._break_btn.setText("Resume" if on_break else "Break")
        self._break_btn.setEnabled(clocked_in)
        if clocked_in:
            self._break_btn.setStyleSheet(f"background: {break_button_color(on_break)};")
        else:
            self._break_btn.setStyleSheet("")

        # Reset is only offered while clocked out
        self._reset_btn.setEnabled(not clocked_in)

    def _on_elapsed_changed(self, seconds):
        self._timer_lbl.setText(format_hms(seconds))

    def _on_week_changed(self, totals):
        today = Day.of(date.today())
        for day, btn in self._day_buttons.items():
            seconds = totals.get(day.name, 0)
            shown = "—" if seconds == 0 else format_hours_minutes(seconds)
            btn.setText(f"{day.name.capitalize():<12}{shown}")
            btn.setProperty("today", day is today)
            btn.style().unpolish(btn)
            btn.style().polish(btn)
        self._total_lbl.setText(f"Total    {format_hours_minutes(sum(totals.values()))}")
        if self.engine.week_anchor is not None:
            self._week_lbl.setText(week_label(self.engine.week_anchor))

    # ------------------------------------------------------------------ #
    #  View -> engine                                                      #
    # ------------------------------------------------------------------ #

    # Engine commands only raise when state.json can't be written. In-memory state stays as the engine left it.
    def _run_command(self, command, *args):
        try:
            command(*args)
        except OSError as e:
            log.exception("Failed to save state after a command")
            QMessageBox.critical(self, "Save failed", f"Your latest change could not be saved:\n{e}")

    def _on_day_clicked(self, day):
        dlg = ManualTimeDialog(self, day)
        if dlg.exec() == QDialog.Accepted:
            self._run_command(self.engine.set_manual_time, dlg.day, dlg.hours, dlg.minutes)

    def _on_reset_clicked(self):
        if self.engine.is_clocked_in:
            return
        answer = QMessageBox.question(self, "Reset week", "Reset all of this week's totals to zero?",
                                      QMessageBox.Yes | QMessageBox.No, QMessageBox.No)
        if answer == QMessageBox.Yes:
            self._run_command(self.engine.reset_week)

    def closeEvent(self, event):
        self.engine.shutdown()
        super().closeEvent(event)


def main():
    app = QApplication(sys.argv)
    engine = SessionEngine()
    window = MainWindow(engine)
    window.show()
    sys.exit(app.exec())
