# this project is licensed under the WTFPLv2, see COPYING.txt for details

from PyQt5.QtGui import QKeySequence
from PyQt5.QtWidgets import QMainWindow, QTabWidget

from eolmark.connector import CategoryMixin
from eolmark.helpers import trailing_newline
from eolmark.qt import Signal, Slot, override
from eolmark.widgets.editor import Editor

__all__ = ('Window',)


class Window(QMainWindow, CategoryMixin):
	"""Main window: one tab per editor

	Instances have the "window" category.
	"""

	EditorClass = Editor

	"""Class of the widget to create when a file is opened."""

	quit_requested = Signal()

	def __init__(self, **kwargs):
		super().__init__(**kwargs)

		self.tabs = QTabWidget()
		self.tabs.setTabsClosable(True)
		self.tabs.tabCloseRequested.connect(self._tab_close_requested)
		self.setCentralWidget(self.tabs)

		self.add_category('window')

	def create_default_menu_bar(self):
		menu = self.menuBar().addMenu(self.tr('&File'))
		menu.addAction(self.tr('&Save'), self.save_current, QKeySequence.Save)
		menu.addAction(self.tr('&Reload'), self.reload_current, QKeySequence.Refresh)
		menu.addSeparator()
		menu.addAction(self.tr('&Quit'), self.quit_requested.emit, QKeySequence.Quit)

		menu = self.menuBar().addMenu(self.tr('&View'))
		menu.addAction(self.tr('Toggle trailing &newline marker'), self.toggle_marker)
		menu.addAction(self.tr('Toggle &line numbers'), self.toggle_line_numbers)

	def current_editor(self):
		return self.tabs.currentWidget()

	def open_editor(self, path):
		"""Open `path` in a new tab and return the editor, or None if it can't be read"""
		ed = self.EditorClass()
		if not ed.open_file(path):
			ed.deleteLater()
			return None

		idx = self.tabs.addTab(ed, ed.path)
		self.tabs.setCurrentIndex(idx)
		ed.modificationChanged.connect(self._modification_changed)
		return ed

	def close_editor(self, ed):
		"""Close the tab of `ed`, returns False if the user cancelled"""
		if not ed.close():
			return False
		self.tabs.removeTab(self.tabs.indexOf(ed))
		ed.deleteLater()
		return True

	## actions
	@Slot()
	def save_current(self):
		ed = self.current_editor()
		if ed:
			ed.save_file()

	@Slot()
	def reload_current(self):
		ed = self.current_editor()
		if ed:
			ed.reload_file()

	@Slot()
	def toggle_marker(self):
		ed = self.current_editor()
		if ed:
			trailing_newline.trailing_newline_mode(ed)

	@Slot()
	def toggle_line_numbers(self):
		ed = self.current_editor()
		if not ed:
			return

		margin = ed.margins['lines']
		if margin.visible:
			margin.hide()
		else:
			margin.show()
		# no signal for margin changes
		trailing_newline.document_for(ed).hooks.moved.run()

	## private
	@Slot(int)
	def _tab_close_requested(self, idx):
		self.close_editor(self.tabs.widget(idx))

	@Slot(bool)
	def _modification_changed(self, modified):
		ed = self.sender()
		idx = self.tabs.indexOf(ed)
		if idx >= 0:
			self.tabs.setTabText(idx, '%s%s' % (ed.path, '*' if modified else ''))

	@override
	def closeEvent(self, ev):
		for ed in [self.tabs.widget(i) for i in range(self.tabs.count())]:
			if not self.close_editor(ed):
				ev.ignore()
				return
		ev.accept()
