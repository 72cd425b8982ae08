from PySide6.QtWidgets import QWidget, QHBoxLayout, QLabel

from BackEnd.core.clock import fmt_duration_short
from FrontEnd.styles.design_tokens import COLORS, FONTS


def today_text(total_sec):
    return f"Today: {fmt_duration_short(total_sec)}"


class FooterToday(QWidget):
    def __init__(self, total_sec=0):
        super().__init__()
        layout = QHBoxLayout()
        layout.addStretch()
        self.label = QLabel(today_text(total_sec))
        self.label.setObjectName("TodayLabel")
        layout.addWidget(self.label)
        self.setLayout(layout)
        self.setStyleSheet(f"background: {COLORS['footer_bg']}; border-radius: 16px; padding: 8px 24px; margin: 0 32px 32px 0; color: {COLORS['footer_text']}; font-family: {FONTS['family']}; font-size: {FONTS['footer_size']}px; font-weight: 500;")

    def set_today(self, total_sec):
        self.label.setText(today_text(total_sec))
