# this project is licensed under the WTFPLv2, see COPYING.txt for details

import gc
import unittest

from eolmark.core import (
	Document, Hook, Registry, Options, is_suitable, mode_argument, build_glyph,
	DEFAULT_SYMBOL, MARKER_STYLE, NUMBER_STYLE,
)


class StringDocument(Document):
	def __init__(self, text='', path=None, line_numbers=True):
		super(StringDocument, self).__init__()
		self.text = text
		self.path = path
		self.line_numbers = line_numbers
		self.minibuffer = False
		self.special = False
		self.decorations = {}
		self.last_handle = 0

	def set_text(self, text):
		self.text = text
		self.hooks.content_changed.run()

	def end_position(self):
		return len(self.text)

	def char_before(self, pos):
		return self.text[pos - 1]

	def line_number_at(self, pos):
		return self.text.count('\n', 0, pos) + 1

	def line_numbers_visible(self):
		return self.line_numbers

	def add_margin_decoration(self, pos, glyph):
		self.last_handle += 1
		self.decorations[self.last_handle] = (pos, glyph)
		return self.last_handle

	def remove_margin_decoration(self, handle):
		del self.decorations[handle]

	def is_minibuffer(self):
		return self.minibuffer

	def is_special(self):
		return self.special

	def file_path(self):
		return self.path

	def glyph(self):
		assert len(self.decorations) <= 1
		for pos, glyph in self.decorations.values():
			return glyph


class DecorationTests(unittest.TestCase):
	def setUp(self):
		self.registry = Registry()

	def enabled_doc(self, text, **kwargs):
		doc = StringDocument(text, **kwargs)
		self.registry.decorator_for(doc).enable()
		return doc

	def test_empty(self):
		doc = self.enabled_doc('')
		self.assertEqual(doc.decorations, {})

	def test_no_trailing_newline(self):
		doc = self.enabled_doc('abc')
		self.assertEqual(doc.decorations, {})

	def test_symbol_only_without_line_numbers(self):
		doc = self.enabled_doc('abc\n', line_numbers=False)
		self.assertEqual(doc.glyph(), [(DEFAULT_SYMBOL, MARKER_STYLE)])

	def test_symbol_only_when_configured(self):
		self.registry.options.show_line_number = False
		doc = self.enabled_doc('abc\n')
		self.assertEqual(doc.glyph(), [(DEFAULT_SYMBOL, MARKER_STYLE)])

	def test_next_line_number(self):
		doc = self.enabled_doc('line1\nline2\n')
		self.assertEqual(doc.glyph(), [(DEFAULT_SYMBOL, MARKER_STYLE), (' 3', NUMBER_STYLE)])

		pos, _ = list(doc.decorations.values())[0]
		self.assertEqual(pos, len('line1\nline2\n'))

	def test_single_newline(self):
		doc = self.enabled_doc('\n')
		self.assertEqual(doc.glyph(), [(DEFAULT_SYMBOL, MARKER_STYLE), (' 2', NUMBER_STYLE)])

	def test_custom_symbol(self):
		self.registry.options.symbol = '$'
		doc = self.enabled_doc('a\n')
		self.assertEqual(doc.glyph()[0], ('$', MARKER_STYLE))

	def test_exists_iff_trailing_newline(self):
		texts = ['', 'a', '\n', 'a\n', 'a\nb', 'a\nb\n', '\n\n', 'a\r\n', 'a\r', ' \n ']
		for text in texts:
			doc = self.enabled_doc(text)
			self.assertEqual(bool(doc.decorations), text.endswith('\n'), text)

	def test_follows_content(self):
		doc = self.enabled_doc('abc')
		doc.set_text('abc\n')
		self.assertEqual(doc.glyph()[1], (' 2', NUMBER_STYLE))

		doc.set_text('abc\ndef\n')
		self.assertEqual(len(doc.decorations), 1)
		self.assertEqual(doc.glyph()[1], (' 3', NUMBER_STYLE))

		doc.set_text('abc\ndef')
		self.assertEqual(doc.decorations, {})

		doc.set_text('')
		self.assertEqual(doc.decorations, {})

	def test_other_events(self):
		doc = self.enabled_doc('a\n', line_numbers=False)
		self.assertEqual(len(doc.glyph()), 1)

		doc.line_numbers = True
		doc.hooks.moved.run()
		self.assertEqual(len(doc.glyph()), 2)

		doc.text = 'a\nb\n'
		doc.hooks.saved.run()
		self.assertEqual(doc.glyph()[1], (' 3', NUMBER_STYLE))

		doc.text = 'a'
		doc.hooks.reloaded.run()
		self.assertEqual(doc.decorations, {})

	def test_refresh(self):
		doc = self.enabled_doc('a\n')
		self.registry.options.symbol = '!'
		self.registry.refresh()
		self.assertEqual(doc.glyph()[0], ('!', MARKER_STYLE))

	def test_disabled_ignores_changes(self):
		doc = StringDocument('a')
		deco = self.registry.decorator_for(doc)
		deco.enable()
		deco.disable()
		doc.set_text('a\n')
		self.assertEqual(doc.decorations, {})


class LifecycleTests(unittest.TestCase):
	def setUp(self):
		self.registry = Registry()

	def test_enable_idempotent(self):
		doc = StringDocument('a\n')
		deco = self.registry.decorator_for(doc)
		deco.enable()
		deco.enable()

		self.assertEqual(self.registry.active_count, 1)
		self.assertEqual(len(self.registry.structural_hook), 1)
		for hook in doc.hooks.values():
			self.assertEqual(len(hook), 1)
		self.assertEqual(len(doc.decorations), 1)

	def test_decorator_per_document(self):
		doc = StringDocument()
		self.assertIs(self.registry.decorator_for(doc), self.registry.decorator_for(doc))
		self.assertIsNot(self.registry.decorator_for(doc), self.registry.decorator_for(StringDocument()))

	def test_disable(self):
		doc = StringDocument('a\n')
		deco = self.registry.decorator_for(doc)
		deco.enable()
		deco.disable()

		self.assertEqual(doc.decorations, {})
		self.assertEqual(self.registry.active_count, 0)
		self.assertFalse(self.registry.is_listening())
		for hook in doc.hooks.values():
			self.assertEqual(len(hook), 0)

		deco.disable()
		self.assertEqual(self.registry.active_count, 0)

	def test_count(self):
		docs = [StringDocument('%d\n' % n) for n in range(3)]
		decos = [self.registry.decorator_for(doc) for doc in docs]

		decos[0].enable()
		decos[1].enable()
		decos[1].enable()
		self.assertEqual(self.registry.active_count, 2)

		decos[2].disable()
		self.assertEqual(self.registry.active_count, 2)

		decos[0].disable()
		self.assertEqual(self.registry.active_count, 1)
		self.assertTrue(self.registry.is_listening())

		decos[2].enable()
		decos[1].disable()
		decos[2].disable()
		decos[2].disable()
		self.assertEqual(self.registry.active_count, 0)
		self.assertFalse(self.registry.is_listening())
		self.assertEqual(self.registry.enabled_documents(), [])

	def test_count_clamped(self):
		self.registry.release()
		self.assertEqual(self.registry.active_count, 0)

		self.registry.acquire()
		self.registry.release()
		self.registry.release()
		self.assertEqual(self.registry.active_count, 0)

	def test_toggle(self):
		doc = StringDocument('a\n')
		deco = self.registry.decorator_for(doc)

		self.assertTrue(deco.toggle())
		self.assertFalse(deco.toggle())
		self.assertTrue(deco.toggle(1))
		self.assertTrue(deco.toggle(True))
		self.assertEqual(self.registry.active_count, 1)
		self.assertFalse(deco.toggle(0))
		self.assertFalse(deco.toggle(-1))
		self.assertFalse(deco.toggle(False))
		self.assertEqual(self.registry.active_count, 0)

	def test_close(self):
		doc = StringDocument('a\n')
		self.registry.decorator_for(doc).enable()

		self.registry.document_closed(doc)
		self.assertEqual(doc.decorations, {})
		self.assertEqual(self.registry.active_count, 0)
		self.assertNotIn(doc, self.registry.states)
		self.assertFalse(self.registry.is_enabled(doc))

		self.registry.document_closed(doc)
		self.registry.document_closed(StringDocument())
		self.assertEqual(self.registry.active_count, 0)

	def test_collected_without_close(self):
		doc = StringDocument('a\n')
		self.registry.decorator_for(doc).enable()
		self.assertEqual(self.registry.active_count, 1)

		del doc
		gc.collect()
		self.assertEqual(self.registry.active_count, 0)
		self.assertFalse(self.registry.is_listening())
		self.assertEqual(self.registry.enabled_documents(), [])

	def test_collected_after_disable(self):
		kept = StringDocument('a\n')
		self.registry.decorator_for(kept).enable()
		doc = StringDocument('b\n')
		self.registry.decorator_for(doc).enable()
		self.registry.decorator_for(doc).disable()

		del doc
		gc.collect()
		self.assertEqual(self.registry.active_count, 1)
		self.assertTrue(self.registry.is_listening())

	def test_close_keeps_others(self):
		doc1 = StringDocument('a\n')
		doc2 = StringDocument('b\n')
		self.registry.decorator_for(doc1).enable()
		self.registry.decorator_for(doc2).enable()

		self.registry.document_closed(doc1)
		self.assertEqual(self.registry.active_count, 1)
		self.assertTrue(self.registry.is_listening())
		self.assertEqual(len(doc2.decorations), 1)


class StructuralChangeTests(unittest.TestCase):
	def setUp(self):
		self.registry = Registry()
		self.doc = StringDocument('a\n')
		self.deco = self.registry.decorator_for(self.doc)

	def test_reattach_once(self):
		self.deco.enable()
		for hook in self.doc.hooks.values():
			hook.clear()

		self.doc.text = 'a\nb\n'
		self.registry.structural_hook.run(self.doc)
		for hook in self.doc.hooks.values():
			self.assertEqual(len(hook), 1)
		self.assertEqual(self.doc.glyph()[1], (' 3', NUMBER_STYLE))

		self.registry.structural_hook.run(self.doc)
		for hook in self.doc.hooks.values():
			self.assertEqual(len(hook), 1)

		self.doc.set_text('a\nb\nc\n')
		self.assertEqual(len(self.doc.decorations), 1)
		self.assertEqual(self.doc.glyph()[1], (' 4', NUMBER_STYLE))

	def test_enabled_survives(self):
		self.deco.enable()
		self.registry.structural_hook.run(self.doc)
		self.assertTrue(self.deco.is_enabled())
		self.assertEqual(self.registry.active_count, 1)

	def test_not_enabled(self):
		self.registry.on_structural_change(self.doc)
		for hook in self.doc.hooks.values():
			self.assertEqual(len(hook), 0)
		self.assertEqual(self.doc.decorations, {})

	def test_only_listening_while_enabled(self):
		self.assertFalse(self.registry.is_listening())
		self.deco.enable()
		self.assertTrue(self.registry.is_listening())
		self.deco.disable()
		self.assertFalse(self.registry.is_listening())


class SuitabilityTests(unittest.TestCase):
	def setUp(self):
		self.registry = Registry()

	def test_file(self):
		self.assertTrue(is_suitable(StringDocument(path='/tmp/foo'), self.registry))

	def test_no_file(self):
		self.assertFalse(is_suitable(StringDocument(), self.registry))

	def test_minibuffer(self):
		doc = StringDocument(path='/tmp/foo')
		doc.minibuffer = True
		self.assertFalse(is_suitable(doc, self.registry))

	def test_special(self):
		doc = StringDocument(path='/tmp/foo')
		doc.special = True
		self.assertFalse(is_suitable(doc, self.registry))

	def test_already_enabled(self):
		doc = StringDocument(path='/tmp/foo')
		self.registry.decorator_for(doc).enable()
		self.assertFalse(is_suitable(doc, self.registry))


class HelperTests(unittest.TestCase):
	def test_mode_argument(self):
		self.assertTrue(mode_argument(None, False))
		self.assertFalse(mode_argument(None, True))
		self.assertTrue(mode_argument(True, False))
		self.assertTrue(mode_argument(4, True))
		self.assertFalse(mode_argument(False, True))
		self.assertFalse(mode_argument(0, True))
		self.assertFalse(mode_argument(-1, False))

	def test_build_glyph(self):
		options = Options(symbol='>')
		self.assertEqual(build_glyph(options, 7, True), [('>', MARKER_STYLE), (' 7', NUMBER_STYLE)])
		self.assertEqual(build_glyph(options, 7, False), [('>', MARKER_STYLE)])

		options.show_line_number = False
		self.assertEqual(build_glyph(options, 7, True), [('>', MARKER_STYLE)])

	def test_hook_logs_exceptions(self):
		calls = []

		def fail():
			raise RuntimeError('boom')

		hook = Hook()
		hook.add(fail)
		hook.add(lambda: calls.append(1))
		hook.add(fail)
		self.assertEqual(len(hook), 2)

		with self.assertLogs('eolmark.core', level='ERROR'):
			hook.run()
		self.assertEqual(calls, [1])

		hook.remove(fail)
		hook.remove(fail)
		self.assertEqual(len(hook), 1)


if __name__ == '__main__':
	unittest.main()
