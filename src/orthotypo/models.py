from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, model_validator

from orthotypo.core.spans import LineIndex


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    row: int
    column: int


class ByteSpan(BaseModel):
    """Half-open byte range ``[start, end)`` over a file's buffer."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=0)
    end: int = Field(ge=0)

    @model_validator(mode="after")
    def _check_order(self) -> "ByteSpan":
        if self.start > self.end:
            raise ValueError(f"span start {self.start} is after its end {self.end}")
        return self

    def __len__(self) -> int:
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def contains(self, offset: int) -> bool:
        return self.start <= offset < self.end

    def overlaps(self, other: "ByteSpan") -> bool:
        if self.is_empty or other.is_empty:
            return False
        return self.start < other.end and other.start < self.end

    def shift(self, delta: int) -> "ByteSpan":
        return ByteSpan(start=self.start + delta, end=self.end + delta)


class ProseKind(str, Enum):
    PLAIN_LITERAL = "plain_literal"
    DOC_COMMENT = "doc_comment"
    MARKDOWN_PROSE = "markdown_prose"


class ProseRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    span: ByteSpan
    kind: ProseKind = ProseKind.PLAIN_LITERAL


class Fix(BaseModel):
    model_config = ConfigDict(frozen=True)

    span: ByteSpan
    replacement: str = ""


class Diagnostic(BaseModel):
    model_config = ConfigDict(frozen=True)

    span: ByteSpan
    message: str
    code: str
    help: str | None = None
    fix: Fix | None = None

    @model_validator(mode="after")
    def _check_span(self) -> "Diagnostic":
        if self.span.is_empty:
            raise ValueError("a diagnostic must cover at least one byte")
        return self


class ErrorKind(str, Enum):
    PARSE = "parse"
    IO = "io"
    INTERNAL = "internal"


class FileError(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    message: str


class FileResult(BaseModel):
    """Everything the checker found in one file."""

    path: str
    language: str | None = None
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    errors: list[FileError] = Field(default_factory=list)
    fixed: int = 0
    source: bytes = Field(default=b"", repr=False, exclude=True)

    _line_index: LineIndex | None = PrivateAttr(default=None)

    @property
    def failed(self) -> bool:
        return bool(self.diagnostics or self.errors)

    def position(self, offset: int) -> Position:
        if self._line_index is None:
            self._line_index = LineIndex(self.source)
        row, column = self._line_index.locate(offset)
        return Position(row=row, column=column)

    def line(self, row: int) -> str:
        if self._line_index is None:
            self._line_index = LineIndex(self.source)
        return self._line_index.line(row)
