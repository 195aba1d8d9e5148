from ast import literal_eval
import traceback

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import get_lexer_by_name


def exception_string(exc: BaseException):
    """
    Returns the traceback text Python prints when the exception goes unhandled.
    """
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


class ReadableMultiline:
    """
    Encoder/decoder that encodes a multi-line string as a single-line string, attempting to maintain readability.
    """

    @classmethod
    def encode(cls, in_str):
        return str(in_str.encode())

    @classmethod
    def decode(cls, encoded_str):
        return literal_eval(encoded_str).decode()


class ErrorEncoder(ReadableMultiline):
    """
    Encodes exceptions as single-line traceback strings, suitable for log records. Decoding can optionally (and by default) colorize the traceback for terminal display.
    """

    _terminal_formatter = TerminalFormatter()
    _lexer = get_lexer_by_name("py3tb")

    @classmethod
    def encode(cls, in_err: BaseException):
        return super().encode(exception_string(in_err))

    @classmethod
    def decode(cls, in_err_str: str, colorize=True):
        tbtext = super().decode(in_err_str)
        if colorize:
            tbtext = highlight(tbtext, cls._lexer, cls._terminal_formatter)
        return tbtext
