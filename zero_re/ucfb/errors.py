"""Error taxonomy for UCFB parsing and chunk visitation."""

from __future__ import annotations


class UCFBError(Exception):
    """Base class for everything raised while reading a UCFB container."""


class FormatError(UCFBError):
    """Wrong magic, or a chunk handed to a decoder for another tag."""


class TruncatedError(UCFBError):
    """A declared size runs past the bytes that are actually available."""


class CorruptedError(UCFBError):
    """Positional sub-chunks are missing or malformed."""


class CorruptedClipError(CorruptedError):
    """An embedded clip declares a size that overruns its buffer."""


class LookupFailure(CorruptedError):
    """A hash key or format code is not present in a static table."""


class UCFBIOError(UCFBError):
    """The underlying stream failed."""


class TranslationFailure(UCFBError):
    """The external bytecode translator rejected a script."""


class VisitError(UCFBError):
    """Decoding one chunk failed during visitation.

    ``index`` is the position of the chunk in its container and ``tag``
    its raw 4-byte identifier. The decoder's exception is kept as
    ``cause`` (and chained as ``__cause__``).
    """

    def __init__(self, index: int, tag: bytes, cause: BaseException):
        self.index = index
        self.tag = tag
        self.cause = cause
        super().__init__(f"chunk #{index} ({tag!r}): {cause}")

    @property
    def depth(self) -> int:
        return 0

    @property
    def path(self) -> tuple[int, ...]:
        return (self.index,)

    @property
    def root_cause(self) -> BaseException:
        return self.cause

    def to_dict(self) -> dict:
        return {
            "path": list(self.path),
            "depth": self.depth,
            "tag": self.tag.decode("latin-1"),
            "error": type(self.root_cause).__name__,
            "message": str(self.root_cause),
        }


class SubchunkVisitationError(VisitError):
    """A failure inside a nested archive or level.

    Wraps the inner :class:`VisitError` so the nesting path survives.
    """

    def __init__(self, index: int, tag: bytes, inner: VisitError):
        super().__init__(index, tag, inner)
        self.inner = inner

    @property
    def depth(self) -> int:
        return self.inner.depth + 1

    @property
    def path(self) -> tuple[int, ...]:
        return (self.index,) + self.inner.path

    @property
    def root_cause(self) -> BaseException:
        return self.inner.root_cause
