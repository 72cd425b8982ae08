import datetime
import math

from PySide6.QtCore import QRectF, QSize, Qt
from PySide6.QtGui import QColor, QFont, QPainter, QPen
from PySide6.QtWidgets import QSizePolicy, QWidget

from BackEnd.core.clock import month_days
from FrontEnd.styles.design_tokens import CALENDAR, COLORS

COLUMNS = 7


def grid_rows(day_count):
	return int(math.ceil(day_count / COLUMNS))


def paint_month(painter, x, y, days, work_days, cell, gap, show_numbers=False, today=None):
	"""Draw one month as rows of 7 squares, days of the month only (no padding)."""
	work = QColor(COLORS['work_day'])
	work.setAlpha(CALENDAR['work_day_alpha'])
	empty = QColor(COLORS['empty_day'])
	for i, d in enumerate(days):
		col = i % COLUMNS
		row = i // COLUMNS
		rect = QRectF(x + col * (cell + gap), y + row * (cell + gap), cell, cell)
		is_work = d in work_days
		painter.setPen(Qt.NoPen)
		painter.setBrush(work if is_work else empty)
		painter.drawRoundedRect(rect, CALENDAR['radius'], CALENDAR['radius'])
		if today is not None and d == today:
			pen = QPen(QColor(COLORS['today_outline']))
			pen.setWidth(1)
			painter.setPen(pen)
			painter.setBrush(Qt.NoBrush)
			painter.drawRoundedRect(rect, CALENDAR['radius'], CALENDAR['radius'])
		if show_numbers:
			font = QFont()
			font.setPixelSize(max(6, int(cell * 0.6)))
			painter.setFont(font)
			painter.setPen(QColor('#FFFFFF') if is_work else QColor(COLORS['text']))
			painter.drawText(rect, Qt.AlignCenter, str(d.day))


class YearCalendar(QWidget):
	"""Twelve month grids, three per row, for the calendar page."""

	MONTH_COLUMNS = 3
	LABEL_H = 20
	H_SPACING = 20
	V_SPACING = 24

	def __init__(self, parent=None):
		super().__init__(parent)
		self.year = datetime.date.today().year
		self.work_days = set()
		self.show_numbers = False
		self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)

	def set_data(self, year, work_days, show_numbers=None):
		self.year = year
		self.work_days = set(work_days)
		if show_numbers is not None:
			self.show_numbers = show_numbers
		self.update()

	def _month_size(self):
		cell, gap = self._cell()
		width = COLUMNS * cell + (COLUMNS - 1) * gap
		height = self.LABEL_H + 6 * cell + 5 * gap
		return width, height

	def _cell(self):
		cell = CALENDAR['cell'] + (6 if self.show_numbers else 0)
		return cell, CALENDAR['gap']

	def sizeHint(self):
		w, h = self._month_size()
		return QSize(
			self.MONTH_COLUMNS * w + (self.MONTH_COLUMNS - 1) * self.H_SPACING,
			4 * h + 3 * self.V_SPACING,
		)

	def paintEvent(self, event):
		painter = QPainter(self)
		painter.setRenderHint(QPainter.Antialiasing)
		cell, gap = self._cell()
		month_w, month_h = self._month_size()
		col_w = max(month_w + self.H_SPACING, self.width() / self.MONTH_COLUMNS)
		today = datetime.date.today()
		label_font = QFont()
		label_font.setBold(True)
		for index in range(12):
			first = datetime.date(self.year, index + 1, 1)
			x = (index % self.MONTH_COLUMNS) * col_w
			y = (index // self.MONTH_COLUMNS) * (month_h + self.V_SPACING)
			painter.setFont(label_font)
			painter.setPen(QColor(COLORS['text_strong']))
			painter.drawText(QRectF(x + 4, y, month_w, self.LABEL_H), Qt.AlignLeft | Qt.AlignVCenter, first.strftime("%B"))
			paint_month(painter, x, y + self.LABEL_H, month_days(first), self.work_days,
				cell, gap, self.show_numbers, today)
		painter.end()


class MonthGrid(QWidget):
	"""Current month only, squares scaled to fill the widget."""

	SPACING = 4

	def __init__(self, parent=None):
		super().__init__(parent)
		self.month = datetime.date.today()
		self.work_days = set()
		self.setMinimumSize(140, 120)

	def set_entry(self, month, work_days):
		self.month = month
		self.work_days = set(work_days)
		self.update()

	def paintEvent(self, event):
		days = month_days(self.month)
		rows = grid_rows(len(days))
		spacing = self.SPACING
		by_width = (self.width() - spacing * (COLUMNS - 1)) / COLUMNS
		by_height = (self.height() - spacing * (rows - 1)) / rows
		cell = max(2, min(by_width, by_height))
		used_w = cell * COLUMNS + spacing * (COLUMNS - 1)
		used_h = cell * rows + spacing * (rows - 1)
		painter = QPainter(self)
		painter.setRenderHint(QPainter.Antialiasing)
		paint_month(painter, (self.width() - used_w) / 2, (self.height() - used_h) / 2,
			days, self.work_days, cell, spacing)
		painter.end()
