"""Zenoscript - a sugar layer over TypeScript.

Main namespace package:
- zenoscript.core: Settings, logging and error types shared by every module
- zenoscript.transpiler: Tokenizer, rewrite stages, pipeline and command line
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
