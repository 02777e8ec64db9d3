"""
Error types raised while loading and splitting workbooks.
"""


class SplitterError(ValueError):
    """Base class for every error raised by the splitter."""


class LoadError(SplitterError):
    """The workbook container could not be read."""


class SheetNotFoundError(SplitterError):
    """The requested sheet does not exist in the loaded workbook."""


class NoDataError(SplitterError):
    """The sheet has a header row but no data row."""


class InvalidColumnError(SplitterError):
    """The split column index is outside the header's bounds."""


class RowReadError(SplitterError):
    """A row could not be decoded."""


class StyleReadError(SplitterError):
    """The style of a sampled column could not be read."""


class WidthReadError(SplitterError):
    """The width of a sampled column could not be read."""


class OutputWriteError(SplitterError):
    """Writing the workbook for one group failed."""

    def __init__(self, message: str, value: str = ""):
        super().__init__(message)
        self.value = value
