"""
Transpiler exceptions.

Every failure raised by the pipeline is a :class:`ZenoscriptError`; the
command line turns them into an ``Error:`` line and exit status 1.
"""

from typing import Any, Dict, Optional, Tuple


def locate(source: str, offset: int) -> Tuple[int, int]:
    """Return the 1-based (line, column) of ``offset`` in ``source``."""
    offset = max(0, min(offset, len(source)))
    line = source.count("\n", 0, offset) + 1
    column = offset - (source.rfind("\n", 0, offset) + 1) + 1
    return line, column


class ZenoscriptError(Exception):
    """Base exception for transpiler errors"""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class LexError(ZenoscriptError):
    """Raised for an unterminated string, template or block comment"""

    def __init__(self, message: str, source: str, offset: int):
        self.offset = offset
        self.line, self.column = locate(source, offset)
        super().__init__(
            message=f"{message} at line {self.line}, column {self.column}",
            details={"offset": offset, "line": self.line, "column": self.column}
        )


class ZenoscriptSyntaxError(ZenoscriptError):
    """Raised when a stage recognizes a construct that is malformed"""

    def __init__(self, message: str, source: str, offset: int, stage: str, text: str = ""):
        self.stage = stage
        self.offset = offset
        self.text = text
        self.line, self.column = locate(source, offset)
        where = f"line {self.line}, column {self.column}"
        if text:
            where += f" near {text!r}"
        super().__init__(
            message=f"{stage}: {message} at {where}",
            details={
                "stage": stage,
                "offset": offset,
                "line": self.line,
                "column": self.column,
                "text": text,
            }
        )
