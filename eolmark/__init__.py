# this project is licensed under the WTFPLv2, see COPYING.txt for details

"""Trailing newline marker for QScintilla editors

Shows a symbol (and optionally the next line number) in the margin of the empty
line produced by a final newline character.
"""

import os
import re

__all__ = ()

__version__ = '0.3.0'

BUILDING_DOCS = os.environ.get('BUILDING_DOCS') == 'True'


def _add_doc(func, text):
	"""Append `text` to `func` __doc__"""

	if func.__doc__ is None:
		func.__doc__ = text
	else:
		# keep the indent of the existing docstring body
		lines = func.__doc__.split('\n')[1:]
		indent = ''
		for line in lines:
			if line:
				indent = re.match(r'\s*', line).group(0)
				break

		text = '\n'.join(indent + line for line in text.split('\n'))
		func.__doc__ += '\n\n' + text

	return func
