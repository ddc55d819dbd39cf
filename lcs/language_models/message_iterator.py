"""
Iterators that generate the messages returned by the debug chat
model. The iterators are infinite, so that the debug model may be
called any number of times.
"""

from collections.abc import Iterator


class MessageIterator:
    """
    An iterator that generates sequential messages with a customizable
    prefix, following the pattern "{prefix} {counter}" where counter
    starts at 1.
    """

    def __init__(self, prefix: str = "Message") -> None:
        self.prefix = prefix
        self.counter = 1

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        message = f"{self.prefix} {self.counter}"
        self.counter += 1
        return message


class ConstantMessageIterator:
    """
    An iterator that generates the message with which it was
    initialized, counting how many times it was called.
    """

    def __init__(self, message: str = "Message") -> None:
        self.message = message
        self.counter = 0

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        self.counter += 1
        return self.message


def yield_message(prefix: str = "Message") -> MessageIterator:
    """
    Create an iterator of numbered messages.

    Example:
        >>> iterator = yield_message("Alert")
        >>> next(iterator)
        'Alert 1'
        >>> next(iterator)
        'Alert 2'
    """
    return MessageIterator(prefix)


def yield_constant_message(
    message: str = "Message",
) -> ConstantMessageIterator:
    """
    Create an iterator repeating the same message.

    Example:
        >>> iterator = yield_constant_message("Alert")
        >>> next(iterator)
        'Alert'
        >>> next(iterator)
        'Alert'
    """
    return ConstantMessageIterator(message)
