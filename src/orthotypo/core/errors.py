class OrthotypoError(Exception):
    """Base class of the errors raised by the checker."""


class ParseFailureError(OrthotypoError):
    def __init__(self, language: str, detail: str = "the syntax tree could not be built") -> None:
        super().__init__(f"Could not parse as {language}: {detail}")
        self.language = language


class MalformedFixError(OrthotypoError, ValueError):
    """Fixes overlap, are unsorted or point outside of the buffer."""


class UnsupportedLanguageError(OrthotypoError, ValueError):
    pass


class ConfigError(OrthotypoError):
    pass
