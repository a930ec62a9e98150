"""
The Zenoscript to TypeScript pipeline.

Stages run in a fixed order, each a pure ``str -> str`` rewrite over a fresh
token stream of its input. The order matters: pipes are lowered before
match blocks so arm actions are already plain calls, match blocks before
atoms so arm heads are still recognisable, simplified ``if`` before
optional parentheses so conditions are not mistaken for calls, and implicit
returns last so they see the final statement shapes.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional

from ..core.config import TranspileOptions, settings
from ..core.logging import get_stage_logger
from .atoms import AtomRewriter
from .bindings import LetRewriter
from .calls import OptionalParensRewriter
from .conditionals import SimplifiedIfRewriter
from .declarations import StructRewriter, TraitRewriter
from .matching import MatchRewriter
from .pipes import PipeRewriter
from .returns import OptionalReturnRewriter
from .zs_scanner import RewriteStage, TokenStream

logger = logging.getLogger(__name__)


class TokenGuard(RewriteStage):
    """
    Tokenize the source once and return it unchanged.

    Running first means an unterminated string, template or comment is
    reported as a :class:`~zenoscript.core.errors.LexError` before any
    stage rewrites anything.
    """

    def apply(self, stream: TokenStream) -> str:
        return stream.source


STAGES = (
    TokenGuard,
    StructRewriter,
    TraitRewriter,
    LetRewriter,
    PipeRewriter,
    MatchRewriter,
    AtomRewriter,
    SimplifiedIfRewriter,
    OptionalParensRewriter,
    OptionalReturnRewriter,
)


def default_stages() -> List[RewriteStage]:
    """Fresh instances of the standard stage sequence."""
    return [stage() for stage in STAGES]


class ZenoscriptTranspiler:
    """
    Run Zenoscript source through the rewrite stages.

    Example:
        >>> ZenoscriptTranspiler().transpile("let x = 5")
        'const x = 5;'
    """

    def __init__(
        self,
        options: Optional[TranspileOptions] = None,
        stages: Optional[Iterable[RewriteStage]] = None,
    ):
        self.options = options or TranspileOptions()
        self.stages = list(stages) if stages is not None else default_stages()

    def transpile(self, source: str) -> str:
        """
        Transpile one source unit.

        Either the complete output is returned or an error is raised;
        there is no partial result.

        Raises:
            LexError: On an unterminated string, template string or comment
            ZenoscriptSyntaxError: On a malformed Zenoscript construct
        """
        debug = self.options.debug
        if debug:
            logger.debug("Input source:\n%s", source)

        result = source
        for stage in self.stages:
            rewritten = stage.rewrite(result)
            if debug and rewritten != result:
                stage_logger = get_stage_logger(__name__, stage.name)
                stage_logger.debug("%s output:\n%s", stage.name, rewritten)
            result = rewritten

        if debug:
            logger.debug("Output TypeScript:\n%s", result)
        if self.options.verbose:
            logger.info(
                "Transpilation completed successfully (%d -> %d characters)",
                len(source),
                len(result),
            )
        return result

    def transpile_file(
        self,
        input_path: str | Path,
        output_path: str | Path | None = None,
        encoding: Optional[str] = None,
    ) -> str:
        """
        Transpile a file, optionally writing the result.

        Args:
            input_path: Zenoscript source file
            output_path: Destination; parent directories are created
            encoding: Text encoding (defaults to ``settings.ENCODING``)

        Returns:
            The generated TypeScript

        Raises:
            FileNotFoundError: If ``input_path`` does not exist
        """
        encoding = encoding or settings.ENCODING
        source_file = Path(input_path)
        if not source_file.exists():
            raise FileNotFoundError(f"Zenoscript source file not found: {source_file}")
        if source_file.suffix != settings.SOURCE_SUFFIX:
            logger.warning(
                "Source file %s does not have the %s suffix", source_file, settings.SOURCE_SUFFIX
            )

        result = self.transpile(source_file.read_text(encoding=encoding))

        if output_path is not None:
            output = Path(output_path)
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(result, encoding=encoding)
            if self.options.verbose:
                logger.info("Wrote %s", output)
        return result


def transpile(source: str, options: Optional[TranspileOptions] = None) -> str:
    """Transpile Zenoscript ``source`` to TypeScript."""
    return ZenoscriptTranspiler(options).transpile(source)


def transpile_file(
    source_path: str | Path,
    *,
    output_path: str | Path | None = None,
    encoding: Optional[str] = None,
    transpiler: Optional[ZenoscriptTranspiler] = None,
) -> str:
    """Transpile a ``.zs`` file, writing to ``output_path`` when given."""
    processor = transpiler or ZenoscriptTranspiler()
    return processor.transpile_file(source_path, output_path, encoding=encoding)
