import datetime
import logging
from pathlib import Path

from PySide6.QtCore import QDate, Qt
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import (
	QApplication, QCheckBox, QComboBox, QDateEdit, QHBoxLayout, QLabel, QListWidget,
	QListWidgetItem, QMainWindow, QMessageBox, QProgressBar, QPushButton, QScrollArea,
	QSizePolicy, QSpinBox, QStackedWidget, QSystemTrayIcon, QTableWidget,
	QTableWidgetItem, QVBoxLayout, QWidget
)
from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg as FigureCanvas
from matplotlib.figure import Figure

from BackEnd.core.clock import fmt_duration_short, fmt_hms
from BackEnd.services.aggregation import period_days, period_label
from FrontEnd.components.calendar_grid import YearCalendar
from FrontEnd.components.footer_today import FooterToday
from FrontEnd.styles.design_tokens import COLORS

logger = logging.getLogger(__name__)

STYLESHEET = Path(__file__).parent / "styles" / "uptime.qss"

PAGE_TIMER, PAGE_CALENDAR, PAGE_HISTORY, PAGE_TESTING = range(4)
PRESET_MINUTES = (25, 50, 60)


class MainWindow(QMainWindow):
	def __init__(self, timer_service, aggregator, calendar_service, settings=None, menu_bar=None):
		super().__init__()
		self.timer_service = timer_service
		self.aggregator = aggregator
		self.calendar_service = calendar_service
		self.settings = settings
		self.menu_bar = menu_bar
		self._quitting = False

		self.setWindowTitle("Uptime")
		self.resize(1000, 650)
		try:
			with open(STYLESHEET, 'r', encoding='utf-8') as f:
				self.setStyleSheet(f.read())
		except OSError:
			logger.warning("Stylesheet %s not found, using default look", STYLESHEET)

		# --- Sidebar ---
		self.sidebar = QListWidget()
		self.sidebar.setFixedWidth(200)
		self.sidebar.setSpacing(8)
		for name in ("Timer", "Calendar", "History", "Testing"):
			self.sidebar.addItem(QListWidgetItem(name))
		self.sidebar.setCurrentRow(PAGE_TIMER)

		self.stack = QStackedWidget()
		self.stack.addWidget(self._build_timer_tab())
		self.stack.addWidget(self._build_calendar_tab())
		self.stack.addWidget(self._build_history_tab())
		self.stack.addWidget(self._build_testing_tab())
		self.sidebar.currentRowChanged.connect(self._on_page_changed)

		main_layout = QHBoxLayout()
		main_layout.setContentsMargins(0, 0, 0, 0)
		main_layout.setSpacing(0)
		main_layout.addWidget(self.sidebar)
		main_layout.addWidget(self.stack)
		container = QWidget()
		container.setLayout(main_layout)
		self.setCentralWidget(container)

		self._build_toolbar()
		self._build_menus()
		self._apply_testing_mode(self.settings.show_testing_mode() if self.settings else False)

		# Timer wiring
		self.timer_service.tick.connect(self._on_tick)
		self.timer_service.state_changed.connect(self._on_state)
		self.timer_service.completed.connect(self._on_complete)
		self.timer_service.config_changed.connect(self._on_config_changed)
		if self.timer_service.notifier is not None:
			self.timer_service.notifier.delivered.connect(self._on_alert)
		self.calendar_service.changed.connect(self._update_calendar)

		self._on_config_changed()
		self._on_state(self.timer_service.state)
		self.calendar_service.refresh()
		self._update_bar_chart()

	# ----- Chrome -----
	def _build_toolbar(self):
		toolbar = self.addToolBar("Widget")
		toolbar.setMovable(False)
		refresh = QAction("Refresh Widget", self)
		refresh.setToolTip("Refresh widget data")
		refresh.triggered.connect(self._refresh_widget)
		reset = QAction("Reset Widget Data", self)
		reset.setToolTip("Clear all widget data")
		reset.triggered.connect(self._reset_widget_data)
		toolbar.addAction(refresh)
		toolbar.addAction(reset)

	def _build_menus(self):
		test_menu = self.menuBar().addMenu("Test")
		self.testing_action = QAction("Show Testing Mode", self)
		self.testing_action.setCheckable(True)
		self.testing_action.setShortcut(QKeySequence("Ctrl+Alt+T"))
		self.testing_action.toggled.connect(self._on_testing_toggled)
		test_menu.addAction(self.testing_action)

	def _on_testing_toggled(self, checked):
		if self.settings is not None:
			self.settings.set_show_testing_mode(checked)
		self._apply_testing_mode(checked)
		if checked:
			self.sidebar.setCurrentRow(PAGE_TESTING)

	def _apply_testing_mode(self, enabled):
		self.testing_action.blockSignals(True)
		self.testing_action.setChecked(enabled)
		self.testing_action.blockSignals(False)
		self.sidebar.item(PAGE_TESTING).setHidden(not enabled)
		if not enabled and self.sidebar.currentRow() == PAGE_TESTING:
			self.sidebar.setCurrentRow(PAGE_TIMER)

	def _on_page_changed(self, row):
		self.stack.setCurrentIndex(row)
		if row == PAGE_CALENDAR:
			self.calendar_service.refresh()
		elif row == PAGE_HISTORY:
			self._update_bar_chart()

	def _refresh_widget(self):
		self.aggregator.publish_today()

	def _reset_widget_data(self):
		self.aggregator.reset_shared()
		self.calendar_service.refresh()

	def quit_app(self):
		self._quitting = True
		QApplication.quit()

	def closeEvent(self, event):
		# With a tray icon the app keeps running (and timing) in the background.
		tray = self.menu_bar.tray if self.menu_bar is not None else None
		if tray is not None and tray.isVisible() and not self._quitting:
			event.ignore()
			self.hide()
			return
		self.timer_service.shutdown()
		event.accept()

	# ----- Timer page -----
	def _build_timer_tab(self):
		w = QWidget()
		outer = QVBoxLayout()
		outer.setContentsMargins(32, 32, 32, 32)
		outer.setSpacing(0)
		outer.addStretch()

		timer_card = QWidget()
		timer_card_layout = QVBoxLayout()
		timer_card_layout.setAlignment(Qt.AlignmentFlag.AlignCenter)
		timer_card.setLayout(timer_card_layout)
		timer_card.setObjectName("TimerCard")

		# Target editor (hours / minutes / seconds), only while idle
		self.editor = QWidget()
		editor_layout = QHBoxLayout()
		editor_layout.setContentsMargins(0, 0, 0, 0)
		self.hours_spin = self._time_spin(23)
		self.minutes_spin = self._time_spin(59)
		self.seconds_spin = self._time_spin(59)
		for i, spin in enumerate((self.hours_spin, self.minutes_spin, self.seconds_spin)):
			if i:
				editor_layout.addWidget(QLabel(":"))
			editor_layout.addWidget(spin)
		self.set_btn = QPushButton("Set")
		self.set_btn.clicked.connect(self._apply_time)
		editor_layout.addWidget(self.set_btn)
		self.clear_btn = QPushButton("Clear")
		self.clear_btn.clicked.connect(self.timer_service.reset_timer)
		editor_layout.addWidget(self.clear_btn)
		self.editor.setLayout(editor_layout)
		timer_card_layout.addWidget(self.editor, alignment=Qt.AlignmentFlag.AlignCenter)

		presets = QHBoxLayout()
		self.preset_btns = []
		for minutes in PRESET_MINUTES:
			btn = QPushButton(f"{minutes}m")
			btn.clicked.connect(lambda _checked=False, m=minutes: self.timer_service.set_preset_duration(m))
			presets.addWidget(btn)
			self.preset_btns.append(btn)
		timer_card_layout.addLayout(presets)

		self.timer_label = QLabel("00:00:00")
		self.timer_label.setObjectName("TimerLabel")
		self.timer_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
		timer_card_layout.addWidget(self.timer_label)

		self.progress_bar = QProgressBar()
		self.progress_bar.setRange(0, 1000)
		self.progress_bar.setTextVisible(False)
		self.progress_bar.setFixedWidth(240)
		timer_card_layout.addWidget(self.progress_bar, alignment=Qt.AlignmentFlag.AlignCenter)
		self.status_label = QLabel("")
		self.status_label.setObjectName("CompleteLabel")
		self.status_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
		timer_card_layout.addWidget(self.status_label)

		btn_layout = QHBoxLayout()
		btn_layout.setSpacing(24)
		self.start_pause_btn = QPushButton("Start")
		self.start_pause_btn.setObjectName("StartBtn")
		self.end_btn = QPushButton("Stop")
		self.end_btn.setObjectName("StopBtn")
		for btn in (self.start_pause_btn, self.end_btn):
			btn.setMinimumHeight(50)
			btn.setMinimumWidth(120)
			btn_layout.addWidget(btn)
		timer_card_layout.addSpacing(24)
		timer_card_layout.addLayout(btn_layout)

		outer.addWidget(timer_card, alignment=Qt.AlignmentFlag.AlignHCenter)
		outer.addStretch()
		self.footer_today = FooterToday(self.aggregator.today_total())
		outer.addWidget(self.footer_today)
		w.setLayout(outer)

		self.start_pause_btn.clicked.connect(self.timer_service.toggle)
		self.end_btn.clicked.connect(self.timer_service.stop)
		return w

	def _time_spin(self, maximum):
		spin = QSpinBox()
		spin.setRange(0, maximum)
		spin.setButtonSymbols(QSpinBox.ButtonSymbols.NoButtons)
		spin.setAlignment(Qt.AlignmentFlag.AlignCenter)
		spin.setFixedWidth(64)
		spin.setSpecialValueText("00")
		return spin

	def _apply_time(self):
		self.timer_service.set_custom_duration(
			self.hours_spin.value(), self.minutes_spin.value(), self.seconds_spin.value()
		)

	def _on_config_changed(self):
		svc = self.timer_service
		total = svc.target_duration
		self.hours_spin.setValue(total // 3600)
		self.minutes_spin.setValue((total % 3600) // 60)
		self.seconds_spin.setValue(total % 60)
		if self.settings is not None:
			self.settings.save_timer(svc.target_duration, svc.timer_enabled)
		self._on_tick(svc.snapshot())
		self._set_buttons(svc.state)

	def _on_tick(self, snap):
		if self.timer_service.timer_enabled:
			self.timer_label.setText(fmt_hms(snap.remaining_sec))
		else:
			self.timer_label.setText(fmt_hms(snap.elapsed_sec))
		self.progress_bar.setValue(int(snap.progress * 1000))
		if snap.complete:
			self.status_label.setText("Timer Complete!")
		elif snap.state != "idle":
			self.status_label.setText(f"Remaining: {fmt_hms(snap.remaining_sec)}")
		else:
			self.status_label.setText("")

	def _on_state(self, state):
		self._set_buttons(state)
		self.editor.setEnabled(state == "idle")
		for btn in self.preset_btns:
			btn.setEnabled(state == "idle")
		if state == "idle":
			self._update_today_label()
			self.calendar_service.refresh()
			self._update_bar_chart()

	def _set_buttons(self, state):
		if state == "running":
			self.start_pause_btn.setEnabled(True)
			self.start_pause_btn.setText("Pause")
			self.start_pause_btn.setObjectName("PauseBtn")
			self.end_btn.setEnabled(True)
		elif state == "paused":
			self.start_pause_btn.setEnabled(True)
			self.start_pause_btn.setText("Resume")
			self.start_pause_btn.setObjectName("StartBtn")
			self.end_btn.setEnabled(True)
		else:
			self.start_pause_btn.setEnabled(self.timer_service.timer_enabled)
			self.start_pause_btn.setText("Start")
			self.start_pause_btn.setObjectName("StartBtn")
			self.end_btn.setEnabled(False)
		# re-polish so the objectName-based style applies
		self.start_pause_btn.style().unpolish(self.start_pause_btn)
		self.start_pause_btn.style().polish(self.start_pause_btn)

	def _on_complete(self):
		QApplication.beep()

	def _on_alert(self, identifier, title, body):
		tray = self.menu_bar.tray if self.menu_bar is not None else None
		if tray is not None:
			tray.showMessage(title, body, QSystemTrayIcon.MessageIcon.Information)
		else:
			logger.info("%s: %s", title, body)

	def _update_today_label(self):
		self.footer_today.set_today(self.aggregator.today_total())

	# ----- Calendar page -----
	def _build_calendar_tab(self):
		w = QWidget()
		layout = QVBoxLayout()
		layout.setContentsMargins(32, 32, 32, 32)

		header = QHBoxLayout()
		self.year_prev_btn = QPushButton("◀")
		self.year_prev_btn.setObjectName("NavBtn")
		self.year_prev_btn.setFixedSize(28, 28)
		self.year_next_btn = QPushButton("▶")
		self.year_next_btn.setObjectName("NavBtn")
		self.year_next_btn.setFixedSize(28, 28)
		self.year_label = QLabel("")
		self.year_label.setObjectName("YearLabel")
		self.show_days_check = QCheckBox("Show Days")
		header.addWidget(self.year_prev_btn)
		header.addStretch()
		header.addWidget(self.year_label)
		header.addStretch()
		header.addWidget(self.show_days_check)
		header.addWidget(self.year_next_btn)
		layout.addLayout(header)

		self.year_calendar = YearCalendar()
		scroll = QScrollArea()
		scroll.setWidgetResizable(True)
		scroll.setWidget(self.year_calendar)
		layout.addWidget(scroll)
		w.setLayout(layout)

		self.year_prev_btn.clicked.connect(lambda: self._change_year(-1))
		self.year_next_btn.clicked.connect(lambda: self._change_year(1))
		self.show_days_check.toggled.connect(lambda _on: self._update_calendar())
		return w

	def _change_year(self, direction):
		current = self.calendar_service.year_of
		self.calendar_service.refresh(datetime.date(current.year + direction, 1, 1))

	def _update_calendar(self):
		svc = self.calendar_service
		self.year_label.setText(str(svc.year_of.year))
		self.year_calendar.set_data(svc.year_of.year, svc.work_days, self.show_days_check.isChecked())
		self.year_calendar.updateGeometry()

	# ----- History page -----
	def _build_history_tab(self):
		w = QWidget()
		layout = QVBoxLayout()
		layout.setAlignment(Qt.AlignmentFlag.AlignTop)
		layout.setContentsMargins(32, 32, 32, 32)

		timeframe_layout = QHBoxLayout()
		timeframe_layout.addStretch()
		timeframe_label = QLabel("Show work time for:")
		self.timeframe_combo = QComboBox()
		self.timeframe_combo.addItems(["Week", "Month"])
		self.timeframe_combo.setCurrentIndex(0)
		self.timeframe_combo.setMinimumWidth(140)
		timeframe_layout.addWidget(timeframe_label)
		timeframe_layout.addWidget(self.timeframe_combo)
		layout.addLayout(timeframe_layout)

		self.figure = Figure(figsize=(5, 2.5))
		self.canvas = FigureCanvas(self.figure)
		layout.addWidget(self.canvas)

		self.hist_prev_btn = QPushButton("◀")
		self.hist_prev_btn.setFixedSize(28, 28)
		self.hist_prev_btn.setObjectName("NavBtn")
		self.hist_next_btn = QPushButton("▶")
		self.hist_next_btn.setFixedSize(28, 28)
		self.hist_next_btn.setObjectName("NavBtn")
		self.hist_period_label = QLabel("")
		self.hist_period_label.setObjectName("HistPeriodLabel")
		self.hist_period_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
		nav_row = QHBoxLayout()
		nav_row.addStretch()
		nav_row.addWidget(self.hist_prev_btn)
		nav_row.addWidget(self.hist_period_label)
		nav_row.addWidget(self.hist_next_btn)
		nav_row.addStretch()
		layout.addLayout(nav_row)

		self.history_table = QTableWidget()
		self.history_table.setColumnCount(4)
		self.history_table.setHorizontalHeaderLabels(["Date", "Start", "End", "Duration"])
		self.history_table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
		self.history_table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
		self.history_table.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
		layout.addWidget(self.history_table)
		w.setLayout(layout)

		# 0 == current period, 1 == previous, etc.
		self.history_offset = 0

		def _on_timeframe_changed(i):
			self.history_offset = 0
			self._update_bar_chart()

		self.timeframe_combo.currentIndexChanged.connect(_on_timeframe_changed)
		self.hist_prev_btn.clicked.connect(lambda: self._shift_history(1))
		self.hist_next_btn.clicked.connect(lambda: self._shift_history(-1))
		return w

	def _shift_history(self, delta):
		self.history_offset = max(0, self.history_offset + delta)
		self._update_bar_chart()

	def _update_bar_chart(self):
		tf = self.timeframe_combo.currentText().lower()
		offset = self.history_offset
		days = period_days(tf, offset, self.aggregator.today())
		hours = [sec / 3600 for sec in self.aggregator.daily_totals(days)]
		if tf == "week":
			x = [d.strftime("%a") for d in days]
			xlabel = "Day of Week"
		else:
			x = [str(d.day) for d in days]
			xlabel = "Day of Month"

		self.figure.clear()
		self.figure.patch.set_alpha(0.0)
		ax = self.figure.add_subplot(111)
		ax.set_facecolor('#F7FAFC')
		bars = ax.bar(x, hours, color=COLORS['work_day'], edgecolor='#3E8F57', linewidth=1.2, alpha=0.9)
		for bar, value in zip(bars, hours):
			if value > 0:
				ax.text(bar.get_x() + bar.get_width() / 2, bar.get_height() + 0.05,
						f'{value:.1f}h', ha='center', va='bottom',
						fontsize=9, fontweight='600', color=COLORS['text_strong'])
		ax.set_ylabel("Hours Worked", fontsize=11, color=COLORS['text_strong'])
		ax.set_xlabel(xlabel, fontsize=11, color=COLORS['text_strong'])
		ax.set_ylim(bottom=0)
		ax.grid(True, axis='y', alpha=0.25, linestyle='--', linewidth=0.8)
		ax.set_axisbelow(True)
		for spine in ['top', 'right']:
			ax.spines[spine].set_visible(False)
		if tf == "month" and len(x) > 15:
			ax.tick_params(axis='x', rotation=45)
		self.figure.tight_layout()
		self.canvas.draw_idle()

		self.hist_period_label.setText(period_label(tf, offset, days[0]))
		self.hist_next_btn.setEnabled(offset > 0)
		self._refresh_history(days[0], days[-1])

	def _refresh_history(self, first, last):
		sessions = [s for s in self.aggregator.store.sessions_in_range(first, last) if not s.is_open]
		sessions.sort(key=lambda s: s.start, reverse=True)
		self.history_table.setRowCount(len(sessions))
		for row, sess in enumerate(sessions):
			start = sess.start.astimezone()
			end = sess.end.astimezone()
			self.history_table.setItem(row, 0, QTableWidgetItem(sess.day.isoformat()))
			self.history_table.setItem(row, 1, QTableWidgetItem(start.strftime("%H:%M:%S")))
			self.history_table.setItem(row, 2, QTableWidgetItem(end.strftime("%H:%M:%S")))
			self.history_table.setItem(row, 3, QTableWidgetItem(fmt_hms(sess.duration_sec)))

	# ----- Testing page -----
	def _build_testing_tab(self):
		w = QWidget()
		layout = QVBoxLayout()
		layout.setAlignment(Qt.AlignmentFlag.AlignTop)
		layout.setContentsMargins(32, 32, 32, 32)

		layout.addWidget(QLabel("Test Session Creation"))
		form = QHBoxLayout()
		self.test_date = QDateEdit(QDate.currentDate())
		self.test_date.setCalendarPopup(True)
		self.test_hours = QSpinBox()
		self.test_hours.setRange(0, 23)
		self.test_hours.setValue(1)
		self.test_hours.setSuffix("h")
		self.test_minutes = QSpinBox()
		self.test_minutes.setRange(0, 59)
		self.test_minutes.setSingleStep(15)
		self.test_minutes.setSuffix("m")
		form.addWidget(QLabel("Date"))
		form.addWidget(self.test_date)
		form.addWidget(QLabel("Duration:"))
		form.addWidget(self.test_hours)
		form.addWidget(self.test_minutes)
		form.addStretch()
		layout.addLayout(form)
		create_btn = QPushButton("Create Test Session")
		create_btn.clicked.connect(self._create_test_session)
		layout.addWidget(create_btn)

		layout.addSpacing(24)
		layout.addWidget(QLabel("Session Management"))
		delete_btn = QPushButton("Delete Sessions for Selected Date")
		delete_btn.clicked.connect(self._delete_sessions_for_date)
		delete_all_btn = QPushButton("Delete All Sessions")
		delete_all_btn.clicked.connect(self._delete_all_sessions)
		layout.addWidget(delete_btn)
		layout.addWidget(delete_all_btn)

		layout.addSpacing(24)
		self.test_info = QLabel("")
		layout.addWidget(self.test_info)
		self.test_date.dateChanged.connect(lambda _d: self._update_test_info())
		self.test_hours.valueChanged.connect(lambda _v: self._update_test_info())
		self.test_minutes.valueChanged.connect(lambda _v: self._update_test_info())
		self._update_test_info()
		w.setLayout(layout)
		return w

	def _test_duration(self):
		return self.test_hours.value() * 3600 + self.test_minutes.value() * 60

	def _selected_test_date(self):
		return self.test_date.date().toPython()

	def _update_test_info(self):
		self.test_info.setText(
			f"Selected Date: {self._selected_test_date().strftime('%b %d, %Y')}\n"
			f"Test Duration: {fmt_duration_short(self._test_duration())}"
		)

	def _create_test_session(self):
		self.aggregator.create_test_session(self._selected_test_date(), self._test_duration())
		self._after_data_change()

	def _delete_sessions_for_date(self):
		day = self._selected_test_date()
		reply = QMessageBox.question(
			self, "Delete Sessions",
			f"Are you sure you want to delete all sessions for {day.strftime('%b %d, %Y')}?",
		)
		if reply != QMessageBox.StandardButton.Yes:
			return
		self.aggregator.delete_sessions(day)
		self._after_data_change()

	def _delete_all_sessions(self):
		reply = QMessageBox.question(
			self, "Delete All Sessions",
			"Are you sure you want to delete ALL sessions? This cannot be undone.",
		)
		if reply != QMessageBox.StandardButton.Yes:
			return
		self.aggregator.reset_all()
		self._after_data_change()

	def _after_data_change(self):
		self._update_today_label()
		self.calendar_service.refresh()
		self._update_bar_chart()
