# this project is licensed under the WTFPLv2, see COPYING.txt for details

"""Trailing newline marker plugin

When the text of an editor ends with a newline, QScintilla shows one more, empty, line.
This plugin shows a symbol (``⏎`` by default) in the margin of that line, followed by
the number of that line if the editor shows line numbers.

To enable it for one editor::

	>>> import eolmark.helpers.trailing_newline as trailing_newline
	>>> trailing_newline.trailing_newline_mode(editor, True)

To enable it for all editors opened from a file, now and in the future::

	>>> trailing_newline.global_trailing_newline_mode(True)

Options are in ``REGISTRY.options`` (see :any:`eolmark.core.Options`), they can be
changed with :any:`configure`. Styles ``"trailing_newline/marker"`` and
``"trailing_newline/number"`` are accessed with :any:`eolmark.helpers.styles`.
"""

from logging import getLogger
from weakref import ref

from PyQt5.Qsci import QsciScintilla, QsciStyledText

from eolmark.connector import register_signal, category_objects, disabled
from eolmark.core import (
	Document, Hook, Registry, is_suitable, mode_argument, MARKER_STYLE, NUMBER_STYLE,
)
from eolmark.helpers.styles import line_number_style
from eolmark.widgets.editor import Margin

__all__ = (
	'trailing_newline_mode', 'global_trailing_newline_mode', 'configure',
	'document_for', 'EditorDocument', 'REGISTRY',
)


LOGGER = getLogger(__name__)

MARGIN_NAME = 'trailing_newline'

STYLE_SIZE_DELTAS = {
	MARKER_STYLE: 0,
	NUMBER_STYLE: -2,
}

STRUCTURAL_CHANGE = Hook()

"""Hook run with an :any:`EditorDocument` when the lexer of its editor changes"""

REGISTRY = Registry(structural_hook=STRUCTURAL_CHANGE)

"""Registry shared by all editors"""


class EditorDocument(Document):
	"""Document wrapping an :any:`eolmark.widgets.editor.Editor`

	The decoration is margin text on the last line, in a dedicated text margin. That
	margin is hidden when there is no decoration.
	"""

	def __init__(self, editor):
		super(EditorDocument, self).__init__()
		self._editor = ref(editor)
		self.alive = True

		editor.textChanged.connect(self._content_changed)
		editor.file_saved.connect(self._saved)
		editor.file_saved_as.connect(self._saved)
		editor.file_reloaded.connect(self._reloaded)
		editor.cursorPositionChanged.connect(self._moved)
		editor.verticalScrollBar().valueChanged.connect(self._moved)
		editor.destroyed.connect(self._destroyed)

	@property
	def editor(self):
		return self._editor()

	def __repr__(self):
		return '<EditorDocument editor=%r>' % (self.editor,)

	def _content_changed(self):
		self.hooks.content_changed.run()

	def _saved(self, path):
		self.hooks.saved.run()

	def _reloaded(self, path):
		self.hooks.reloaded.run()

	def _moved(self, *args):
		self.hooks.moved.run()

	def _destroyed(self, *args):
		# also reached without a close event, e.g. when the parent widget is deleted
		self.alive = False
		REGISTRY.document_closed(self)

	def end_position(self):
		return self.editor.length()

	def char_before(self, pos):
		# SCI_GETCHARAT returns a signed char
		return chr(self.editor.SendScintilla(QsciScintilla.SCI_GETCHARAT, pos - 1) & 0xff)

	def line_number_at(self, pos):
		return self.editor.SendScintilla(QsciScintilla.SCI_LINEFROMPOSITION, pos) + 1

	def line_numbers_visible(self):
		return self.editor.line_numbers_shown()

	def add_margin_decoration(self, pos, glyph):
		editor = self.editor
		margin = editor.create_margin(MARGIN_NAME, Margin.TextMargin())

		line = editor.SendScintilla(QsciScintilla.SCI_LINEFROMPOSITION, pos)
		parts = [
			QsciStyledText(text, line_number_style(editor, name, STYLE_SIZE_DELTAS[name]))
			for text, name in glyph
		]
		editor.setMarginText(line, parts)
		margin.set_width(''.join(text for text, _ in glyph) + ' ')
		return line

	def remove_margin_decoration(self, handle):
		if not self.alive:
			return

		editor = self.editor
		# margin text moves with inserted lines, the handle line may be stale
		editor.clearMarginText()
		if MARGIN_NAME in editor.margins:
			editor.margins[MARGIN_NAME].set_width(0)

	def is_minibuffer(self):
		return 'minibuffer' in self.editor.categories()

	def is_special(self):
		return 'special' in self.editor.categories()

	def file_path(self):
		return self.editor.path or None


def document_for(editor):
	"""Return the :any:`EditorDocument` of `editor`, creating it if needed"""
	try:
		return editor.trailing_newline_document
	except AttributeError:
		doc = editor.trailing_newline_document = EditorDocument(editor)
		return doc


def trailing_newline_mode(editor, arg=None):
	"""Toggle the trailing newline marker in `editor`

	:param arg: None to toggle, True or a positive number to enable, False, zero or a
	            negative number to disable
	:returns: whether the marker is now enabled
	"""
	return REGISTRY.decorator_for(document_for(editor)).toggle(arg)


@register_signal('editor', 'file_opened')
@register_signal('editor', 'file_saved_as')
@disabled
def auto_enable(editor, path=None):
	"""Enable the marker in `editor` if it is a suitable editor

	See :any:`eolmark.core.is_suitable`.
	"""
	doc = document_for(editor)
	if is_suitable(doc, REGISTRY):
		REGISTRY.decorator_for(doc).enable()


def global_trailing_newline_mode(arg=None):
	"""Toggle the trailing newline marker in all editors

	When enabled, the marker is enabled in open editors backed by a file, and in editors
	later opening a file. When disabled, the marker is disabled in all editors.

	:param arg: same as :any:`trailing_newline_mode`
	:returns: whether the global mode is now enabled
	"""
	enabled = mode_argument(arg, auto_enable.enabled)
	auto_enable.enabled = enabled

	for editor in category_objects('editor'):
		if enabled:
			auto_enable(editor)
		elif hasattr(editor, 'trailing_newline_document'):
			trailing_newline_mode(editor, False)

	LOGGER.debug('global trailing newline marker: %s', enabled)
	return enabled


def configure(symbol=None, show_line_number=None):
	"""Change options and redraw the marker of all editors"""
	if symbol is not None:
		REGISTRY.options.symbol = symbol
	if show_line_number is not None:
		REGISTRY.options.show_line_number = show_line_number
	REGISTRY.refresh()


@register_signal('editor', 'lexer_changed')
def on_lexer_changed(editor, lexer):
	doc = getattr(editor, 'trailing_newline_document', None)
	if doc is not None:
		STRUCTURAL_CHANGE.run(doc)


@register_signal('editor', 'file_closed')
def on_close(editor, path):
	doc = getattr(editor, 'trailing_newline_document', None)
	if doc is not None:
		REGISTRY.document_closed(doc)
