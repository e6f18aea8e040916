class AutofillError(Exception):
    """Base class for every failure raised by javadoc_autofill."""


class JavaParseError(AutofillError, ValueError):
    """The source unit could not be tokenized, parsed or mapped back to text."""


class DeclarationProcessingError(AutofillError):
    def __init__(self, kind: str, name: str, cause: BaseException) -> None:
        super().__init__(f"Failed to process {kind} {name}: {type(cause).__name__}: {cause}")
        self.kind = kind
        self.name = name
        self.cause = cause


class FileProcessingError(AutofillError):
    def __init__(self, path: str, cause: BaseException) -> None:
        super().__init__(f"Failed to process file {path}: {type(cause).__name__}: {cause}")
        self.path = path
        self.cause = cause


class TraversalError(AutofillError):
    """The source root is missing or cannot be enumerated."""
