# this project is licensed under the WTFPLv2, see COPYING.txt for details

"""Editor widget

A QsciScintilla editing a file. Positions given to or returned by QsciScintilla
methods taking a single integer are byte offsets in the UTF-8 text, line numbers start
at 0.

Module contents
---------------
"""

from logging import getLogger
import os
import shutil
import tempfile
from weakref import ref

from PyQt5.Qsci import QsciScintilla
from PyQt5.QtWidgets import QMessageBox

from eolmark import structs
from eolmark.qt import Slot, Signal, override
from eolmark.widgets.helpers import WidgetMixin, accept_if

__all__ = ('Editor', 'Margin')


LOGGER = getLogger(__name__)


class HasWeakEditorMixin:
	def __init__(self, editor=None, **kwargs):
		super().__init__(**kwargs)
		self.editor = editor

	@property
	def editor(self):
		if self.__editor is not None:
			return self.__editor()

	@editor.setter
	def editor(self, value):
		if value is None:
			self.__editor = None
		else:
			self.__editor = ref(value)


class Margin(HasWeakEditorMixin):
	"""Margin of an editor

	A margin is a column at the left of the text. Its width is 0 when hidden.
	"""

	@staticmethod
	def NumbersMargin(editor=None):
		return Margin(editor, id=0, type=QsciScintilla.NumberMargin)

	@staticmethod
	def TextMargin(editor=None):
		return Margin(editor, id=3, type=QsciScintilla.TextMargin)

	def __init__(self, editor=None, id=3, type=None):
		super().__init__(editor=editor)
		self.id = id
		self.type = type
		self.width = 0
		self.visible = True

	def _create(self, editor=None):
		if self.editor is None:
			self.editor = editor
		if self.editor:
			if self.type is not None:
				self.editor.setMarginType(self.id, self.type)
			self.width = self.editor.marginWidth(self.id)

	def set_width(self, w):
		"""Set the width, in pixels (`int`) or as the width of a sample text (`str`)"""
		self.width = w
		if self.visible:
			self.show()

	def show(self):
		self.visible = True
		self.editor.setMarginWidth(self.id, self.width)

	def hide(self):
		self.visible = False
		self.editor.setMarginWidth(self.id, 0)


class Editor(QsciScintilla, WidgetMixin):
	"""Editor widget class

	Instances have the "editor" category (see :doc:`eolmark.connector`). Read-only
	system views should call :any:`set_special`.
	"""

	def __init__(self, **kwargs):
		super().__init__(**kwargs)

		self.path = ''

		self.saving = structs.PropDict()
		self.saving.encoding = 'utf-8'
		# utf-8 internally, encoding only applies to file data
		self.setUtf8(True)

		self.margins = {}
		self.create_margin('lines', Margin.NumbersMargin())
		self.linesChanged.connect(self._update_lines_margin)
		self._update_lines_margin()

		self.add_category('editor')

	def __repr__(self):
		return '<Editor path=%r>' % self.path

	## margins
	def create_margin(self, name, margin):
		"""Create and return margin `name`, or return the existing one"""
		if name in self.margins:
			return self.margins[name]
		self.margins[name] = margin
		margin._create(editor=self)
		return margin

	@Slot()
	def _update_lines_margin(self):
		# one more digit as the last one may be truncated
		self.margins['lines'].set_width('0%d' % self.lines())

	def line_numbers_shown(self):
		return self.margins['lines'].visible

	## categories
	def set_special(self, b=True):
		"""Mark this editor as a read-only system view (not a user file)"""
		self.setReadOnly(b)
		if b:
			self.add_category('special')
		else:
			self.remove_category('special')

	## file management
	def _read_file(self, path):
		with open(path, 'rb') as fd:
			return fd.read().decode(self.saving.encoding)

	def _write_file(self, path, text):
		data = text.encode(self.saving.encoding)
		fd, tmp = tempfile.mkstemp(dir=os.path.dirname(path) or '.')
		try:
			with os.fdopen(fd, 'wb') as fp:
				fp.write(data)
			if os.path.exists(path):
				shutil.copymode(path, tmp)
			os.replace(tmp, path)
		except OSError:
			os.unlink(tmp)
			raise

	def open_file(self, path):
		"""Load file `path` in the editor, returns True on success"""
		path = os.path.abspath(path)
		try:
			text = self._read_file(path)
		except (OSError, UnicodeDecodeError):
			LOGGER.error('cannot read file %r', path, exc_info=True)
			return False

		self.path = path
		self.setText(text)
		self.setModified(False)
		self.file_opened.emit(path)
		return True

	@Slot()
	def save_file(self, path=None):
		"""Save the editor content to `path` (or current path), returns True on success"""
		if path:
			path = os.path.abspath(path)
		new_file = bool(path) and path != self.path
		path = path or self.path
		if not path:
			LOGGER.warning('cannot save %r, it has no path', self)
			return False

		try:
			self._write_file(path, self.text())
		except OSError:
			LOGGER.error('cannot write file %r', path, exc_info=True)
			return False

		self.path = path
		self.setModified(False)
		if new_file:
			self.file_saved_as.emit(path)
		else:
			self.file_saved.emit(path)
		return True

	@Slot()
	def reload_file(self):
		"""Replace editor content with the file content, losing unsaved changes

		The replacement can be undone.
		"""
		old_pos = self.getCursorPosition()

		try:
			text = self._read_file(self.path)
		except (OSError, UnicodeDecodeError):
			LOGGER.error('cannot reload file %r', self.path, exc_info=True)
			return False

		self.beginUndoAction()
		try:
			# setText would clear the undo history
			self.SendScintilla(QsciScintilla.SCI_CLEARALL)
			self.insert(text)
		finally:
			self.endUndoAction()
		self.setModified(False)
		self.setCursorPosition(*old_pos)
		self.file_reloaded.emit(self.path)
		return True

	def close_file(self):
		"""Prepare for closing file and return `True` if modification state is clean

		If the editor has unsaved modifications, ask the user whether they should be saved,
		discarded, or if closing should be cancelled.
		"""
		if not self.isModified():
			return True

		answer = QMessageBox.question(
			self, self.tr('Unsaved file'),
			self.tr('%s has been modified, do you want to close it?') % (self.path or '<untitled>'),
			QMessageBox.Discard | QMessageBox.Cancel | QMessageBox.Save
		)
		if answer == QMessageBox.Discard:
			return True
		elif answer == QMessageBox.Save:
			return self.save_file()
		return False

	## lexer
	def setLexer(self, lexer):
		QsciScintilla.setLexer(self, lexer)
		self.lexer_changed.emit(lexer)

	## signals
	file_saved = Signal(str)

	"""Signal file_saved(str)"""

	file_saved_as = Signal(str)

	"""Signal file_saved_as(str)"""

	file_opened = Signal(str)

	"""Signal file_opened(str)"""

	file_reloaded = Signal(str)

	"""Signal file_reloaded(str)"""

	file_closed = Signal(str)

	"""Signal file_closed(str): the editor was closed"""

	lexer_changed = Signal(object)

	"""Signal lexer_changed(object)"""

	## events
	@override
	def closeEvent(self, ev):
		if accept_if(ev, self.close_file()):
			self.file_closed.emit(self.path)
