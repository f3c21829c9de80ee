# this project is licensed under the WTFPLv2, see COPYING.txt for details

"""Trailing newline marker, toolkit-independent part

When a document ends with a newline character, editors display one more, empty, line
after the last line of text. This module decides whether that line should be decorated
and what the decoration shows: a symbol, optionally followed by the number that line
would have.

The host editor is abstracted by :any:`Document`. The host integration (see
:doc:`eolmark.helpers.trailing_newline`) implements it and runs the document hooks when
the editor content changes, when the file is saved or reloaded, and when the cursor or
viewport moves.

State is not stored in documents: a :any:`Registry` owns the per-document
:any:`DocumentState` records, the count of documents having the feature enabled, and
the shared listener for structural changes (lexer changes).

Example::

	registry = Registry()
	deco = registry.decorator_for(document)
	deco.enable()
	# document hooks now call deco.on_content_changed() etc.
	deco.disable()

Module contents
---------------
"""

from logging import getLogger
import weakref

from eolmark.structs import PropDict
from eolmark.utils import exception_logging

__all__ = (
	'Hook', 'Document', 'Options', 'DocumentState', 'Registry', 'TrailingNewlineDecorator',
	'build_glyph', 'is_suitable', 'mode_argument',
	'DEFAULT_SYMBOL', 'MARKER_STYLE', 'NUMBER_STYLE',
)


LOGGER = getLogger(__name__)

DEFAULT_SYMBOL = '⏎'

"""Default marker: RETURN SYMBOL"""

MARKER_STYLE = 'trailing_newline/marker'

"""Style name of the marker symbol"""

NUMBER_STYLE = 'trailing_newline/number'

"""Style name of the appended line number"""

LOCAL_HOOKS = (
	('content_changed', 'on_content_changed'),
	('saved', 'on_saved'),
	('reloaded', 'on_reloaded'),
	('moved', 'on_viewport_or_cursor_moved'),
)


class Hook(object):
	"""Ordered list of callbacks

	Adding a callback already present does nothing. Running the hook calls each callback
	with the given arguments; an exception in a callback is logged and does not prevent
	the next callbacks from running.
	"""

	def __init__(self):
		super(Hook, self).__init__()
		self.callbacks = []

	def add(self, cb):
		if cb not in self.callbacks:
			self.callbacks.append(cb)

	def remove(self, cb):
		if cb in self.callbacks:
			self.callbacks.remove(cb)

	def clear(self):
		del self.callbacks[:]

	def run(self, *args):
		for cb in list(self.callbacks):
			with exception_logging(reraise=False, logger=LOGGER):
				cb(*args)

	def __contains__(self, cb):
		return cb in self.callbacks

	def __len__(self):
		return len(self.callbacks)

	def __iter__(self):
		return iter(list(self.callbacks))


class Document(object):
	"""Interface of a host document

	Subclasses wrap an editor of the host and implement the methods raising
	`NotImplementedError`. Positions are integer offsets from the start of the text, the
	end position being the length of the text.

	The host must run the hooks in :attr:`hooks`:

	- ``content_changed`` after each text modification
	- ``saved`` after the document was written to its file
	- ``reloaded`` after the document was reverted from its file
	- ``moved`` after the cursor or the viewport moved
	"""

	def __init__(self):
		super(Document, self).__init__()
		self.hooks = PropDict((name, Hook()) for name, _ in LOCAL_HOOKS)

	def end_position(self) -> int:
		"""Return the position after the last character"""
		raise NotImplementedError()

	def char_before(self, pos: int) -> str:
		"""Return the character just before position `pos`"""
		raise NotImplementedError()

	def line_number_at(self, pos: int) -> int:
		"""Return the line number (starting at 1) of position `pos`"""
		raise NotImplementedError()

	def line_numbers_visible(self) -> bool:
		"""Return True if the editor currently shows line numbers"""
		raise NotImplementedError()

	def add_margin_decoration(self, pos: int, glyph):
		"""Show `glyph` in the left margin at `pos` and return a handle to it

		`glyph` is a list of ``(text, style_name)`` pairs.
		"""
		raise NotImplementedError()

	def remove_margin_decoration(self, handle):
		"""Remove a decoration previously returned by :any:`add_margin_decoration`"""
		raise NotImplementedError()

	def is_minibuffer(self) -> bool:
		return False

	def is_special(self) -> bool:
		return False

	def file_path(self):
		return None


class Options(PropDict):
	"""Options of the feature

	:param symbol: text shown in the margin of the trailing empty line
	:param show_line_number: whether the number of that line is appended (only when the
	                         editor displays line numbers)
	"""

	def __init__(self, symbol=DEFAULT_SYMBOL, show_line_number=True):
		super(Options, self).__init__(symbol=symbol, show_line_number=show_line_number)


class DocumentState(PropDict):
	"""Per-document state record

	``enabled`` is whether the feature is on for the document, ``decoration`` the handle
	of the displayed decoration, if any. ``finalizer`` releases the registry if the
	document is garbage-collected while enabled.
	"""

	def __init__(self):
		super(DocumentState, self).__init__(enabled=False, decoration=None, finalizer=None)


def mode_argument(arg, current):
	"""Return the state a toggle command should set

	`None` toggles `current`. `True` or a positive number enables, `False`, zero or a
	negative number disables.
	"""
	if arg is None:
		return not current
	return arg > 0


def build_glyph(options, next_line, with_number):
	"""Return the decoration content as a list of ``(text, style_name)``"""
	glyph = [(options.symbol, MARKER_STYLE)]
	if options.show_line_number and with_number:
		glyph.append((' %d' % next_line, NUMBER_STYLE))
	return glyph


class TrailingNewlineDecorator(object):
	"""Decorate the trailing empty line of one document

	Instances are obtained with :any:`Registry.decorator_for`.
	"""

	def __init__(self, registry, document):
		super(TrailingNewlineDecorator, self).__init__()
		self.registry = registry
		self._document = weakref.ref(document)

	@property
	def document(self):
		return self._document()

	@property
	def state(self):
		return self.registry.state_for(self.document)

	def __repr__(self):
		return '<TrailingNewlineDecorator document=%r>' % (self.document,)

	def is_enabled(self):
		return self.state.enabled

	def enable(self):
		state = self.state
		if state.enabled:
			return

		LOGGER.debug('enabling trailing newline marker for %r', self.document)
		state.enabled = True
		self.registry.acquire()
		state.finalizer = weakref.finalize(self.document, self.registry.document_collected)
		state.finalizer.atexit = False
		self.add_listeners()
		self.recompute()

	def disable(self):
		state = self.state
		if not state.enabled:
			return

		LOGGER.debug('disabling trailing newline marker for %r', self.document)
		self.remove_decoration()
		state.enabled = False
		state.finalizer.detach()
		state.finalizer = None
		self.registry.release()
		self.remove_listeners()

	def toggle(self, arg=None):
		"""Enable or disable, see :any:`mode_argument` for `arg`

		Returns the new enabled state.
		"""
		if mode_argument(arg, self.state.enabled):
			self.enable()
		else:
			self.disable()
		return self.state.enabled

	def listeners(self):
		for hook_name, method_name in LOCAL_HOOKS:
			yield self.document.hooks[hook_name], getattr(self, method_name)

	def add_listeners(self):
		for hook, cb in self.listeners():
			hook.add(cb)

	def remove_listeners(self):
		for hook, cb in self.listeners():
			hook.remove(cb)

	def has_listeners(self):
		# only checks content_changed, other hooks cleared by the host go unnoticed
		return self.on_content_changed in self.document.hooks.content_changed

	def remove_decoration(self):
		state = self.state
		if state.decoration is not None:
			self.document.remove_margin_decoration(state.decoration)
			state.decoration = None

	def recompute(self):
		"""Update the decoration to match the document content"""
		self.remove_decoration()

		doc = self.document
		end = doc.end_position()
		if end <= 0 or doc.char_before(end) != '\n':
			return

		next_line = doc.line_number_at(end - 1) + 1
		glyph = build_glyph(self.registry.options, next_line, doc.line_numbers_visible())
		self.state.decoration = doc.add_margin_decoration(end, glyph)

	def on_content_changed(self):
		self.recompute()

	def on_saved(self):
		self.recompute()

	def on_reloaded(self):
		self.recompute()

	def on_viewport_or_cursor_moved(self):
		self.recompute()


class Registry(object):
	"""Shared context of trailing newline decorators

	Owns the options, the state of every document (weakly referenced), the number of
	documents having the feature enabled and the listener attached to
	:attr:`structural_hook` while that number is not zero.

	The host runs :attr:`structural_hook` with the document as argument when the lexer
	of a document is changed. If the document-local listeners were lost at that moment,
	they are registered again.
	"""

	def __init__(self, options=None, structural_hook=None):
		super(Registry, self).__init__()
		if options is None:
			options = Options()
		if structural_hook is None:
			structural_hook = Hook()

		self.options = options
		self.structural_hook = structural_hook
		self.active_count = 0
		self.states = weakref.WeakKeyDictionary()
		self.decorators = weakref.WeakKeyDictionary()

	def state_for(self, document):
		try:
			return self.states[document]
		except KeyError:
			state = self.states[document] = DocumentState()
			return state

	def decorator_for(self, document):
		try:
			return self.decorators[document]
		except KeyError:
			deco = self.decorators[document] = TrailingNewlineDecorator(self, document)
			return deco

	def is_enabled(self, document):
		state = self.states.get(document)
		return bool(state and state.enabled)

	def enabled_documents(self):
		return [doc for doc, state in list(self.states.items()) if state.enabled]

	def is_listening(self):
		return self.on_structural_change in self.structural_hook

	def acquire(self):
		self.active_count += 1
		self.structural_hook.add(self.on_structural_change)

	def release(self):
		self.active_count = max(0, self.active_count - 1)
		if not self.active_count:
			self.structural_hook.remove(self.on_structural_change)

	def on_structural_change(self, document):
		if not self.is_enabled(document):
			return

		deco = self.decorator_for(document)
		if not deco.has_listeners():
			LOGGER.debug('listeners of %r were lost, registering them again', document)
			deco.add_listeners()
		deco.recompute()

	def document_collected(self):
		LOGGER.debug('an enabled document was garbage-collected without being closed')
		self.release()

	def document_closed(self, document):
		"""Tear down everything related to `document`"""
		if document in self.states:
			self.decorator_for(document).disable()
			del self.states[document]
		self.decorators.pop(document, None)

	def refresh(self):
		"""Redraw the decoration of all enabled documents, after an option change"""
		for doc in self.enabled_documents():
			self.decorator_for(doc).recompute()


def is_suitable(document, registry):
	"""Return True if the feature should be enabled automatically for `document`

	Prompts (minibuffers), special system views, documents not backed by a file and
	documents where the feature is already enabled are not suitable.
	"""
	return (
		not document.is_minibuffer()
		and not document.is_special()
		and bool(document.file_path())
		and not registry.is_enabled(document)
	)
