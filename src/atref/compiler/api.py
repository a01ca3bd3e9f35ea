from __future__ import annotations

"""Single-document compile entry points.

`compile_content` works on an in-memory text and never writes.
`compile_file` reads a document, compiles it and writes the result to
`output_path` (default: the `name.built.ext` sibling).
"""

import logging
import os
from typing import Optional

from atref.compiler.engine import NodeOutput, RecursiveCompiler
from atref.compiler.session import CompilationSession
from atref.core.errors import DocumentReadError, OutputWriteError
from atref.core.models import CompileResult
from atref.core.options import CompileOptions
from atref.io.filesystem import default_filesystem
from atref.logging.helpers import get_logger
from atref.utils.paths import built_output_path

__all__ = ["built_output_path", "compile_content", "compile_file"]


def _result(
    input_path: str,
    output_path: Optional[str],
    output: NodeOutput,
    written: bool,
    session: CompilationSession,
) -> CompileResult:
    found = sum(1 for r in output.records if r.found)
    return CompileResult(
        input_path=input_path,
        output_path=output_path,
        compiled_content=output.text,
        references=output.records,
        success_count=found,
        failed_count=len(output.records) - found,
        written=written,
        import_stats=session.stats(),
        clamped_headings=output.clamped,
    )


def compile_content(
    text: str,
    options: Optional[CompileOptions] = None,
    *,
    session: Optional[CompilationSession] = None,
    source_path: Optional[str] = None,
    logger: Optional[logging.Logger] = None,
) -> CompileResult:
    """Compile *text* without writing anything.

    *source_path*, when given, is the document's identity: it seeds the
    ancestor chain and anchors `./`-relative references.
    """
    opts = options or CompileOptions()
    session = session if session is not None else CompilationSession()
    src = os.path.abspath(source_path) if source_path else None
    engine = RecursiveCompiler(opts, session, logger=logger)
    output = engine.compile(text, src)
    return _result(src or "", None, output, False, session)


def compile_file(
    path: str,
    options: Optional[CompileOptions] = None,
    *,
    session: Optional[CompilationSession] = None,
    logger: Optional[logging.Logger] = None,
) -> CompileResult:
    """Compile the document at *path*.

    Raises:
        DocumentReadError: *path* itself cannot be read.
        OutputWriteError: the compiled text cannot be written.
    """
    opts = options or CompileOptions()
    log = logger or get_logger("compiler")
    fs = default_filesystem(opts.filesystem)
    session = session if session is not None else CompilationSession()
    src = os.path.abspath(path)

    try:
        text = fs.read_text(src)
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentReadError(src, str(exc)) from exc

    engine = RecursiveCompiler(opts, session, logger=log)
    output = engine.compile(text, src)

    out_path = os.path.abspath(opts.output_path or built_output_path(src))
    written = False
    if opts.write_output:
        try:
            fs.write_text(out_path, output.text)
        except OSError as exc:
            raise OutputWriteError(out_path, str(exc)) from exc
        written = True
        log.info("✔ Output written → %s", out_path)

    return _result(src, out_path, output, written, session)
