from __future__ import annotations

"""
Recursive transclusion engine.

One `RecursiveCompiler` expands one document tree. Per node:

1. leading front matter is stripped from the working text;
2. references are extracted, resolved once, and given a heading context;
3. with duplicate optimisation, first occurrences claim their target in the
   session's imported-files set, in document order. A claim whose inline
   fails is released, so the next occurrence inlines instead of stubbing;
4. every reference becomes a replacement segment (inline, stub) or a
   failure record, and the node text is rebuilt from segments;
5. the node's own headings are renumbered from its incoming context; spliced
   child output is protected, whatever the content wrapper.

Cycle detection uses the ancestor chain of the node, never the session.
Failures are recorded on `CompiledReference` and never abort siblings.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from atref.compiler.markup import stub_file, wrap_file
from atref.compiler.session import CompilationSession
from atref.constants import MAX_HEADING_LEVEL
from atref.core.models import CompiledReference, HeadingContext, Reference, ResolvedPath
from atref.core.options import CompileOptions, HeadingMode
from atref.io.filesystem import default_filesystem
from atref.logging.helpers import get_logger
from atref.parsing.code_spans import Span
from atref.parsing.frontmatter import strip_front_matter
from atref.parsing.references import extract_references
from atref.processing.headings import (
    adjust_headings_report,
    analyze_heading_context,
    clamp_level,
    first_heading_level,
)
from atref.resolution.path_resolver import PathResolver, base_for_reference

DIRECTORY_ERROR = "Path is a directory, not a file"


@dataclass
class NodeOutput:
    """Expanded text of one node plus the records of its whole subtree."""
    text: str
    records: List[CompiledReference] = field(default_factory=list)
    clamped: int = 0


class RecursiveCompiler:
    def __init__(
        self,
        options: Optional[CompileOptions] = None,
        session: Optional[CompilationSession] = None,
        *,
        resolver: Optional[PathResolver] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._opts = options or CompileOptions()
        self._session = session if session is not None else CompilationSession()
        self._fs = default_filesystem(self._opts.filesystem)
        self._resolver = resolver or PathResolver(
            filesystem=self._fs, try_extensions=self._opts.try_extensions
        )
        self._mode = HeadingMode.parse(self._opts.heading_mode)
        self._log = logger or get_logger("compiler")

    @property
    def session(self) -> CompilationSession:
        return self._session

    # Public entry -----------------------------------------------------------

    def compile(self, text: str, source_path: Optional[str] = None) -> NodeOutput:
        """Expand *text*; *source_path* (absolute) seeds the ancestor chain."""
        ancestors: Tuple[str, ...] = (source_path,) if source_path else ()
        return self._compile_node(text, source_path, ancestors, None, 0)

    # Resolution -------------------------------------------------------------

    def _resolve_all(self, refs: Sequence[Reference], source_path: Optional[str]) -> List[ResolvedPath]:
        base = self._opts.base_path
        return [
            self._resolver.resolve(r.path, base_for_reference(r.path, source_path, base))
            for r in refs
        ]

    def _prescan(self, resolved: Sequence[ResolvedPath], ancestors: Sequence[str]) -> List[bool]:
        """Flag first occurrences and claim them in the session."""
        firsts: List[bool] = []
        for res in resolved:
            if not self._opts.optimize_duplicates or not res.is_file or res.path in ancestors:
                firsts.append(True)
                continue
            firsts.append(self._session.claim(res.path))
        return firsts

    def _reclaim(self, res: ResolvedPath) -> bool:
        """Take over a claim released by an earlier failed occurrence."""
        if not self._opts.optimize_duplicates or not res.is_file:
            return False
        return not self._session.is_imported(res.path) and self._session.claim(res.path)

    # Headings ---------------------------------------------------------------

    def _node_shift(self, body: str, context: Optional[HeadingContext]) -> int:
        if context is None or self._mode is HeadingMode.NONE:
            return 0
        if self._mode is HeadingMode.ADDITIVE:
            return context.shift_amount
        first = first_heading_level(body)
        if not first:
            return 0
        return min(context.context_level + 1, MAX_HEADING_LEVEL) - first

    @staticmethod
    def _child_context(
        local: HeadingContext, node_shift: int, incoming: Optional[HeadingContext]
    ) -> HeadingContext:
        if local.context_level > 0:
            level = clamp_level(local.context_level + node_shift)
        else:
            level = incoming.context_level if incoming else 0
        return HeadingContext(context_level=level, shift_amount=node_shift + local.context_level)

    # Recursion --------------------------------------------------------------

    def _compile_node(
        self,
        text: str,
        source_path: Optional[str],
        ancestors: Tuple[str, ...],
        context: Optional[HeadingContext],
        depth: int,
    ) -> NodeOutput:
        body = strip_front_matter(text)
        refs = extract_references(body)
        node_shift = self._node_shift(body, context)

        if not refs:
            return self._finish(body, node_shift, context, [], 0, ())

        contexts = analyze_heading_context(body, refs)
        resolved = self._resolve_all(refs, source_path)
        firsts = self._prescan(resolved, ancestors)

        replacements: Dict[int, str] = {}
        records: List[CompiledReference] = []
        clamped = 0

        for idx, (ref, res) in enumerate(zip(refs, resolved)):
            first = firsts[idx] or self._reclaim(res)
            child_ctx = self._child_context(contexts[ref.start], node_shift, context)
            replacement, produced, child_clamped = self._process(
                ref, res, first, source_path, ancestors, child_ctx, depth
            )
            if replacement is not None:
                replacements[idx] = replacement
            records.extend(produced)
            clamped += child_clamped

        parts: List[str] = []
        spliced: List[Span] = []
        cursor = 0
        offset = 0
        for idx, ref in enumerate(refs):
            if idx not in replacements:
                continue
            keep = body[cursor:ref.start]
            offset += len(keep)
            parts.append(keep)
            parts.append(replacements[idx])
            spliced.append(Span(offset, offset + len(replacements[idx])))
            offset += len(replacements[idx])
            cursor = ref.end
        parts.append(body[cursor:])

        return self._finish("".join(parts), node_shift, context, records, clamped, spliced)

    def _finish(
        self,
        text: str,
        node_shift: int,
        context: Optional[HeadingContext],
        records: List[CompiledReference],
        clamped: int,
        spliced: Sequence[Span],
    ) -> NodeOutput:
        if context is None or node_shift == 0:
            return NodeOutput(text=text, records=records, clamped=clamped)
        adjusted = adjust_headings_report(
            text,
            node_shift,
            warn_on_clamp=self._opts.warn_on_clamp,
            skip_file_blocks=True,
            protect=spliced,
            logger=self._log,
        )
        return NodeOutput(text=adjusted.text, records=records, clamped=clamped + adjusted.clamped)

    def _process(
        self,
        ref: Reference,
        res: ResolvedPath,
        first: bool,
        source_path: Optional[str],
        ancestors: Tuple[str, ...],
        child_ctx: HeadingContext,
        depth: int,
    ) -> Tuple[Optional[str], List[CompiledReference], int]:
        def record(**kw) -> CompiledReference:
            kw.setdefault("found", False)
            return CompiledReference(
                reference=ref,
                resolved_path=res.path,
                imported_from=source_path,
                depth=depth,
                **kw,
            )

        if res.exists and res.path in ancestors:
            self._log.debug("circular reference %s in %s", res.path, source_path)
            return None, [record(circular=True, error=f"Circular reference: {res.path}")], 0
        if not res.exists:
            return None, [record(error=res.error or f"File not found: {res.path}")], 0
        if res.is_directory:
            return None, [record(error=DIRECTORY_ERROR)], 0

        if not first:
            count = self._session.record_import(res.path)
            self._log.debug("stub for duplicate %s (import #%d)", res.path, count)
            return stub_file(res.path), [record(found=True, stub=True, import_count=count)], 0

        if depth + 1 > self._opts.max_depth:
            msg = f"Maximum include depth ({self._opts.max_depth}) exceeded"
            self._log.warning("⚠  %s at %s", msg, res.path)
            self._session.release(res.path)
            return None, [record(error=msg)], 0

        try:
            raw = self._fs.read_text(res.path)
        except (OSError, UnicodeDecodeError) as exc:
            self._log.error("⚠  could not read %s (%s)", res.path, exc)
            self._session.release(res.path)
            return None, [record(error=str(exc))], 0

        count = self._session.record_import(res.path)

        child = self._compile_node(raw, res.path, ancestors + (res.path,), child_ctx, depth + 1)
        wrapper = self._opts.content_wrapper
        wrapped = wrapper(child.text, res.path, ref) if wrapper else wrap_file(child.text, res.path)
        own = record(found=True, content=child.text, import_count=count)
        return wrapped, [own, *child.records], child.clamped
