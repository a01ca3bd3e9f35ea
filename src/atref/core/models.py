from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from atref.compiler.session import ImportStats
    from atref.core.report import RunReport


# --------------------------------------------------------------------------- #
#  Extraction & resolution                                                    #
# --------------------------------------------------------------------------- #
@dataclass(frozen=True)
class Reference:
    """One `@path` occurrence in one document's text.

    `start`/`end` index the text as it existed at extraction time.
    """
    raw: str
    path: str
    start: int
    end: int
    line: int
    column: int


@dataclass(frozen=True)
class ResolvedPath:
    path: str
    exists: bool
    is_directory: bool = False
    error: Optional[str] = None

    @property
    def is_file(self) -> bool:
        return self.exists and not self.is_directory


@dataclass(frozen=True)
class ResolvedReference:
    reference: Reference
    resolution: ResolvedPath


# --------------------------------------------------------------------------- #
#  Headings                                                                   #
# --------------------------------------------------------------------------- #
@dataclass(frozen=True)
class Heading:
    level: int
    position: int
    text: str


@dataclass(frozen=True)
class HeadingContext:
    context_level: int
    shift_amount: int


@dataclass(frozen=True)
class HeadingAdjustment:
    text: str
    shift: int
    clamped: int = 0


# --------------------------------------------------------------------------- #
#  Compilation                                                                #
# --------------------------------------------------------------------------- #
@dataclass(frozen=True)
class CompiledReference:
    """Outcome of one reference occurrence anywhere in an expansion tree."""
    reference: Reference
    resolved_path: str
    found: bool
    content: Optional[str] = None
    error: Optional[str] = None
    circular: bool = False
    stub: bool = False
    import_count: Optional[int] = None
    imported_from: Optional[str] = None
    depth: int = 0


@dataclass(frozen=True)
class CompileResult:
    input_path: str
    output_path: Optional[str]
    compiled_content: str
    references: List[CompiledReference]
    success_count: int
    failed_count: int
    written: bool
    import_stats: "ImportStats"
    clamped_headings: int = 0

    @property
    def circular_paths(self) -> List[str]:
        return [r.resolved_path for r in self.references if r.circular]


@dataclass(frozen=True)
class DocumentFailure:
    path: str
    error: str


# --------------------------------------------------------------------------- #
#  Dependency graph                                                           #
# --------------------------------------------------------------------------- #
@dataclass
class GraphNode:
    path: str
    dependencies: Set[str] = field(default_factory=set)
    dependents: Set[str] = field(default_factory=set)


@dataclass(frozen=True)
class GraphError:
    path: str
    message: str
    reference: Optional[Reference] = None


@dataclass
class DependencyGraph:
    """Intra-set dependency graph; node order is discovery order."""
    nodes: Dict[str, GraphNode] = field(default_factory=dict)
    root_files: Set[str] = field(default_factory=set)
    errors: List[GraphError] = field(default_factory=list)

    def __contains__(self, path: object) -> bool:
        return path in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)


@dataclass(frozen=True)
class SortResult:
    sorted: List[str]
    cyclic_nodes: List[str]
    blocked_nodes: List[str] = field(default_factory=list)
    cycles: List[Tuple[str, ...]] = field(default_factory=list)
    ordering: List[str] = field(default_factory=list)

    @property
    def has_cycles(self) -> bool:
        return bool(self.cyclic_nodes)


@dataclass(frozen=True)
class FolderCompileResult:
    root_dir: str
    output_dir: str
    results: List[CompileResult]
    failures: List[DocumentFailure]
    total_files: int
    total_references: int
    total_failures: int
    circular_files: List[str]
    cyclic_documents: List[str]
    graph: DependencyGraph
    sort_result: SortResult
    import_stats: "ImportStats"
    duration_s: float
    report: Optional["RunReport"] = None

    def result_for(self, path: str) -> Optional[CompileResult]:
        for res in self.results:
            if res.input_path == path:
                return res
        return None


# --------------------------------------------------------------------------- #
#  Validation                                                                 #
# --------------------------------------------------------------------------- #
@dataclass(frozen=True)
class ValidationStats:
    total: int
    valid: int
    invalid: int


@dataclass(frozen=True)
class ValidationResult:
    references: List[ResolvedReference]
    valid: List[ResolvedReference]
    invalid: List[ResolvedReference]
    stats: ValidationStats


@dataclass(frozen=True)
class FileValidation:
    path: str
    result: ValidationResult


@dataclass(frozen=True)
class ReferenceSource:
    path: str
    line: int
    column: int


@dataclass
class BrokenReferenceByTarget:
    target_path: str
    raw: str
    error: str
    sources: List[ReferenceSource] = field(default_factory=list)

