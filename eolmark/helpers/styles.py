# this project is licensed under the WTFPLv2, see COPYING.txt for details

"""Named QsciStyle objects

`QsciStyle` objects have numeric identifiers, in a limited number. This module holds a
dict-like mapping text names to `QsciStyle`, so the trailing newline marker and user
configuration use the same styles.

The marker uses ``STYLES['trailing_newline/marker']`` and the appended line number
``STYLES['trailing_newline/number']``. When first needed, they are derived from the
line number margin style of the editor, the second one with a smaller font. A
configuration script can change them beforehand, attributes it did not change are
still derived::

	from PyQt5.QtGui import QColor
	from eolmark.helpers.styles import STYLES

	STYLES['trailing_newline/marker'].setColor(QColor('#ff0000'))
"""

from PyQt5.Qsci import QsciScintilla, QsciStyle
from PyQt5.QtGui import QColor, QFont


__all__ = ('STYLES', 'line_number_style')


class Styles(object):
	def __init__(self):
		super(Styles, self).__init__()
		self.styles = {}
		self.reuse = set()
		self.initial = {}

	def __iter__(self):
		return iter(self.styles)

	def __contains__(self, name):
		return name in self.styles

	def __getitem__(self, name):
		if name not in self.styles:
			if self.reuse:
				id = self.reuse.pop()
			else:
				id = -1
			style = self.styles[name] = QsciStyle(id)
			self.initial[name] = style_look(style)

		return self.styles[name]

	def __setitem__(self, name, style):
		if name in self.styles and self.styles[name].style() != style.style():
			self.reuse.add(self.styles[name].style())
		self.styles[name] = style
		self.initial.pop(name, None)

	def __delitem__(self, name):
		self.reuse.add(self.styles[name].style())
		del self.styles[name]
		self.initial.pop(name, None)


STYLES = Styles()

"""Dict-like for storing QsciStyle objects.

Deleting an item marks the id used by the associated QsciStyle as free. Free ids are
reused first when a new key is inserted.
"""


def style_look(style):
	return (style.color(), style.paper(), style.font())


def sci_color(value):
	"""Convert a Scintilla 0xBBGGRR integer to QColor"""
	return QColor(value & 0xff, (value >> 8) & 0xff, (value >> 16) & 0xff)


def line_number_style(editor, name, size_delta=0):
	"""Return style `name`, deriving its look from the line number margin of `editor`

	The look is derived once per style. If the style was obtained from :any:`STYLES`
	beforehand (by a configuration script for example), the color, paper and font
	changed since then are kept, the others are derived. A style put in :any:`STYLES`
	by assignment is used as is.

	:param size_delta: points added to the font size of the line number margin
	"""
	style = STYLES[name]
	initial = STYLES.initial.pop(name, None)
	if initial is None:
		return style

	color, paper, font = initial
	if not style.description():
		style.setDescription(name)

	sci_style = QsciScintilla.STYLE_LINENUMBER
	if style.color() == color:
		style.setColor(sci_color(editor.SendScintilla(QsciScintilla.SCI_STYLEGETFORE, sci_style)))
	if style.paper() == paper:
		style.setPaper(sci_color(editor.SendScintilla(QsciScintilla.SCI_STYLEGETBACK, sci_style)))
	if style.font() == font:
		font = QFont(editor.font())
		size = editor.SendScintilla(QsciScintilla.SCI_STYLEGETSIZE, sci_style) or font.pointSize()
		font.setPointSize(max(1, size + size_delta))
		style.setFont(font)
	return style
