from __future__ import annotations

"""Folder compilation.

Stages (timed on a `RunReport`): discover -> graph -> sort -> compile ->
write. Every document in the sort ordering is compiled with one shared
`CompilationSession`, so "first occurrence wins" deduplication spans the
whole folder. Compiled documents land under `output_dir` (default
`<dir>/dist`) with the source layout preserved.
"""

import dataclasses
import logging
import os
import time
from typing import List, Optional

from atref.compiler.api import compile_file
from atref.compiler.session import CompilationSession
from atref.constants import DIST_DIR
from atref.core.errors import DocumentReadError
from atref.core.models import CompileResult, DocumentFailure, FolderCompileResult
from atref.core.options import FolderCompileOptions
from atref.core.report import RunReport, StageTimer
from atref.graph.builder import build_dependency_graph
from atref.graph.toposort import topological_sort
from atref.io.filesystem import default_filesystem
from atref.io.walker import DocumentWalker
from atref.logging.helpers import get_logger


def output_path_for(path: str, root_dir: str, output_dir: str) -> str:
    """Mirror *path* (inside *root_dir*) under *output_dir*."""
    return os.path.join(output_dir, os.path.relpath(path, root_dir))


def compile_folder(
    directory: str,
    options: Optional[FolderCompileOptions] = None,
    *,
    logger: Optional[logging.Logger] = None,
) -> FolderCompileResult:
    """Compile every document below *directory* in dependency order.

    A document that cannot be read or written becomes a `DocumentFailure`;
    the run continues with the next document.
    """
    opts = options or FolderCompileOptions()
    log = logger or get_logger("folder")
    fs = default_filesystem(opts.filesystem)
    t0 = time.perf_counter()

    root_dir = os.path.abspath(directory)
    output_dir = os.path.abspath(opts.output_dir or os.path.join(root_dir, DIST_DIR))
    report = RunReport(root=root_dir, output_dir=output_dir)

    with StageTimer(report, "discover"):
        walker = DocumentWalker(
            filesystem=fs,
            suffixes=opts.suffixes,
            exclude_dir_names=opts.exclude_dirs,
            logger=log,
        )
        files = walker.gather_files([root_dir], exclude_dirs=[output_dir])
    log.debug("discovered %d document(s) under %s", len(files), root_dir)

    with StageTimer(report, "graph"):
        graph = build_dependency_graph(files, opts, logger=log)

    with StageTimer(report, "sort"):
        sort_result = topological_sort(graph)
    if sort_result.has_cycles:
        for cycle in sort_result.cycles:
            log.warning("⚠  dependency cycle: %s", " → ".join(os.path.relpath(p, root_dir) for p in cycle))
        report.cyclic_documents = list(sort_result.cyclic_nodes)

    session = CompilationSession()
    results: List[CompileResult] = []
    failures: List[DocumentFailure] = []

    for path in sort_result.ordering:
        dest = output_path_for(path, root_dir, output_dir)
        doc_opts = opts.compile_options(output_path=dest, write_output=False)
        try:
            with StageTimer(report, "compile"):
                result = compile_file(path, doc_opts, session=session, logger=log)
        except (DocumentReadError, OSError) as exc:
            log.error("✘ %s: %s", path, exc)
            failures.append(DocumentFailure(path=path, error=str(exc)))
            report.add_error(f"{path}: {exc}")
            continue

        if opts.write_output:
            try:
                with StageTimer(report, "write"):
                    fs.write_text(dest, result.compiled_content)
            except OSError as exc:
                log.error("✘ could not write %s: %s", dest, exc)
                failures.append(DocumentFailure(path=path, error=f"cannot write {dest}: {exc}"))
                report.add_error(f"{dest}: {exc}")
            else:
                result = dataclasses.replace(result, written=True)
                report.documents_written += 1
        results.append(result)

    stats = session.stats()
    circular = sorted({r.resolved_path for res in results for r in res.references if r.circular})
    total_refs = sum(len(r.references) for r in results)
    failed_refs = sum(r.failed_count for r in results)

    report.documents = len(results)
    report.references_total = total_refs
    report.references_failed = failed_refs
    report.duplicates = len(stats.duplicate_files)
    report.finish()

    log.info(
        "✔ %d document(s) compiled, %d reference(s), %d failure(s) → %s",
        len(results),
        total_refs,
        failed_refs + len(failures),
        output_dir,
    )

    return FolderCompileResult(
        root_dir=root_dir,
        output_dir=output_dir,
        results=results,
        failures=failures,
        total_files=len(files),
        total_references=total_refs,
        total_failures=failed_refs + len(failures),
        circular_files=circular,
        cyclic_documents=list(sort_result.cyclic_nodes),
        graph=graph,
        sort_result=sort_result,
        import_stats=stats,
        duration_s=time.perf_counter() - t0,
        report=report,
    )
