# this project is licensed under the WTFPLv2, see COPYING.txt for details

"""Helpers for use with Qt"""

import os

from PyQt5.QtCore import pyqtSlot, pyqtSignal

from eolmark import _add_doc

__all__ = ('Slot', 'Signal', 'override')


def Slot(*args, **kwargs):
	"""Like `pyqtSlot`, but also documents the slot signature"""

	def decorator(func):
		if os.environ.get('READTHEDOCS') != 'True':
			func = pyqtSlot(*args, **kwargs)(func)

		sig = ', '.join(getattr(t, '__name__', str(t)) for t in args)
		_add_doc(func, 'This slot has signature ``%s(%s)``.' % (func.__name__, sig))
		return func

	return decorator


def Signal(*args, **kwargs):
	return pyqtSignal(*args, **kwargs)


def override(func):
	_add_doc(func, '*Overrides a Qt method.*')
	return func
