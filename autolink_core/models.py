"""Data models for the autolink core."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Segment:
    """A contiguous run of text that is either rewritable or protected."""
    text: str
    protected: bool = False
    start: int = 0

    @property
    def end(self) -> int:
        return self.start + len(self.text)


@dataclass(frozen=True)
class CandidateMatch:
    """A match found by one detection pattern during a single rewrite pass."""
    text: str
    start: int
    pattern: str

    @property
    def end(self) -> int:
        return self.start + len(self.text)

    def touches(self, cursor: int) -> bool:
        """True if the cursor sits inside the match or on either edge of it."""
        return self.start <= cursor <= self.end


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of a batch or live conversion."""
    original: str
    text: str

    @property
    def changed(self) -> bool:
        return self.text != self.original
