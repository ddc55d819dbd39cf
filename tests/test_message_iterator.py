"""Test the message iterators of the debug model"""

import unittest

from lcs.language_models.message_iterator import (
    yield_message,
    yield_constant_message,
)


class TestMessageIterator(unittest.TestCase):

    def test_default_prefix(self):
        iterator = yield_message()
        self.assertEqual(next(iterator), "Message 1")
        self.assertEqual(next(iterator), "Message 2")

    def test_independent_iterators(self):
        iter1 = yield_message("Task")
        iter2 = yield_message("Event")
        next(iter1)
        self.assertEqual(next(iter2), "Event 1")
        self.assertEqual(next(iter1), "Task 2")

    def test_iterator_protocol(self):
        iterator = yield_message("Test")
        self.assertIs(iter(iterator), iterator)
        messages: list[str] = []
        for i, message in enumerate(iterator):
            messages.append(message)
            if i >= 2:
                break
        self.assertEqual(messages, ["Test 1", "Test 2", "Test 3"])

    def test_constant_message(self):
        iterator = yield_constant_message("Alert")
        self.assertEqual(next(iterator), "Alert")
        self.assertEqual(next(iterator), "Alert")
        self.assertEqual(iterator.counter, 2)


if __name__ == "__main__":
    unittest.main()
