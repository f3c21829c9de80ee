# this project is licensed under the WTFPLv2, see COPYING.txt for details

"""Connector for signals of object categories

Qt connects a signal of one object to a slot. The connector connects a signal of all
existing objects matching a category, and of objects created later, to one function.

A category is a string tag attached to an object (see :any:`CategoryMixin`). Every
:any:`eolmark.widgets.editor.Editor` has the ``"editor"`` category; editors used as
prompts or system views carry ``"minibuffer"`` or ``"special"`` too.

Example::

	from eolmark.connector import register_signal

	@register_signal('editor', 'file_saved')
	def on_saved(editor, path):
		print('file %s was saved' % path)

The callback receives the object that emitted the signal, then the signal arguments.

Module contents
---------------
"""

import inspect
from logging import getLogger
import weakref

from PyQt5.QtCore import QObject

from eolmark import BUILDING_DOCS, _add_doc
from eolmark.qt import Slot
from eolmark.utils import exception_logging

__all__ = (
	'register_signal', 'disabled',
	'category_objects', 'CategoryMixin',
)


LOGGER = getLogger(__name__)


def to_stringlist(obj):
	if isinstance(obj, (str, bytes)):
		return [obj]
	else:
		return obj


class SignalListener(QObject):
	def __init__(self, cb, categories, signal, parent=None):
		super(SignalListener, self).__init__(parent)
		self.cb = cb
		self.categories = categories
		self.signal = signal

	@Slot()
	@Slot(object)
	@Slot(str)
	@Slot(int, int)
	def map(self, *args):
		if not getattr(self.cb, 'enabled', True):
			return

		with exception_logging(reraise=False, logger=LOGGER):
			self.cb(self.sender(), *args)

	def do_connect(self, obj):
		getattr(obj, self.signal).connect(self.map)

	def do_disconnect(self, obj):
		getattr(obj, self.signal).disconnect(self.map)


class EventConnector(QObject):
	def __init__(self):
		super(EventConnector, self).__init__()
		self.all_objects = weakref.WeakSet()
		self.all_listeners = []

	def do_connect(self, obj, lis):
		LOGGER.debug('connecting %r to %r in %r categories', obj, lis.cb, set(lis.categories))
		with exception_logging(reraise=False, logger=LOGGER):
			lis.do_connect(obj)

	def do_disconnect(self, obj, lis):
		LOGGER.debug('disconnecting %r from %r in %r categories', obj, lis.cb, set(lis.categories))
		with exception_logging(reraise=False, logger=LOGGER):
			lis.do_disconnect(obj)

	def add_listener(self, lis):
		self.all_listeners.append(lis)

		# objects may be collected while iterating on the WeakSet
		for obj in list(self.all_objects):
			if lis.categories <= obj.categories():
				self.do_connect(obj, lis)

	def add_object(self, obj):
		self.all_objects.add(obj)

		oc = obj.categories()
		if not oc:
			return

		for lis in self.all_listeners:
			if lis.categories <= oc:
				self.do_connect(obj, lis)

	def add_category(self, obj, cat):
		oc = obj.categories()

		for lis in self.all_listeners:
			if cat in lis.categories and lis.categories <= oc:
				self.do_connect(obj, lis)

	def remove_category(self, obj, cat):
		# obj.categories() no longer holds cat here
		oc = obj.categories() | {cat}

		for lis in self.all_listeners:
			if cat in lis.categories and lis.categories <= oc:
				self.do_disconnect(obj, lis)

	def objects_matching(self, categories):
		categories = frozenset(to_stringlist(categories))
		return [obj for obj in self.all_objects if categories <= obj.categories()]


class CategoryMixin(object):
	"""Mixin class to support object categories.

	This class should be inherited by classes of objects which should have categories.
	"""

	def __init__(self, **kwargs):
		super(CategoryMixin, self).__init__(**kwargs)
		self._categories = set()
		CONNECTOR.add_object(self)

	def categories(self):
		"""Return categories of the object."""
		return self._categories

	def add_category(self, c):
		"""Add a category to the object."""
		if c in self._categories:
			return
		self._categories.add(c)
		CONNECTOR.add_category(self, c)

	def remove_category(self, c):
		"""Remove a category from an object."""
		if c not in self._categories:
			return
		self._categories.remove(c)
		CONNECTOR.remove_category(self, c)


def category_objects(categories):
	"""Return objects matching all specified categories.

	:param categories: matching object should match _all_ these categories
	:type categories: list or str
	"""
	return CONNECTOR.objects_matching(categories)


def register_signal(categories, signal):
	"""Decorate a function that should be run when a signal is emitted.

	When the `signal` of any existing or future object matching all `categories` is
	emitted, the decorated function is called with the object as first argument, then
	the signal arguments.

	:param categories: the categories to match
	:type categories: list or str
	"""

	categories = frozenset(to_stringlist(categories))
	doctext = ('This handler is registered for categories ``%s`` on signal ``%s``.'
	           % (sorted(categories), signal))

	if BUILDING_DOCS:
		return lambda x: _add_doc(x, doctext)

	def deco(func):
		LOGGER.debug('%r from %r listens to %r', func, inspect.getfile(func), signal)
		CONNECTOR.add_listener(SignalListener(func, categories, signal, CONNECTOR))
		_add_doc(func, doctext)
		return func

	return deco


def disabled(func):
	"""Disable a function previously decorated with a listener like register_signal.

	The function will not be called by the connector until its ``enabled`` attribute
	is set back to True. Signals emitted while disabled are not replayed.
	"""
	func.enabled = False
	_add_doc(func, 'This handler is disabled by default.')
	return func


CONNECTOR = EventConnector()
