from __future__ import annotations


class SnippetLidError(Exception):
    """
    Base error class for snippet-lid.

    Callers can catch SnippetLidError for SDK-level issues while still catching the matching
    built-in exception types via multiple inheritance.
    """


class EmptyInputError(ValueError, SnippetLidError):
    """
    Raised when the input produces zero tokens (empty or whitespace-only text).

    There is no meaningful frequency vector for such input, so classification is rejected
    instead of returning an arbitrary label.
    """


class MalformedModelError(RuntimeError, SnippetLidError):
    """
    Raised at load time when a model asset cannot be parsed into a valid model.

    A model that fails validation is never served.
    """


class UnknownLabelError(LookupError, SnippetLidError):
    """
    Raised when a label id is missing from the label table.

    Unreachable with a validated model; indicates a data defect.
    """


class InvalidConfigError(ValueError, SnippetLidError):
    """
    Raised when a user-provided config/argument is invalid.
    """
