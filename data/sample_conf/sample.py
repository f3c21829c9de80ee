# copy this file to ~/.config/eolmark/startup/sample.py

## marker options

import eolmark.helpers.trailing_newline as trailing_newline

trailing_newline.REGISTRY.options.symbol = '¶'
trailing_newline.REGISTRY.options.show_line_number = True


## marker look
# paper and font not changed here are still derived from the line number margin

from PyQt5.QtGui import QColor

from eolmark.helpers.styles import STYLES

STYLES['trailing_newline/marker'].setColor(QColor('#93a1a1'))


## log when a file is saved

import logging

from eolmark.connector import register_signal

@register_signal('editor', 'file_saved')
def log_save(editor, path):
	logging.getLogger('eolmark.sample').info('saved %s', path)
