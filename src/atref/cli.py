from __future__ import annotations

import argparse
import os
import re
import sys
import time
from typing import List, NoReturn, Optional, Sequence, TextIO

from atref.compiler.api import compile_file
from atref.core.errors import AtRefError
from atref.core.models import CompileResult, FileValidation, FolderCompileResult
from atref.core.options import CompileOptions, FolderCompileOptions, HeadingMode, ValidateOptions
from atref.formatting.formatter import (
    CYAN,
    GREEN,
    RED,
    color,
    format_check_report,
    format_compile_result,
    format_folder_result,
    format_summary,
    format_validation_result,
    format_validation_summary,
)
from atref.graph.folder import compile_folder
from atref.io.walker import DocumentWalker
from atref.logging.factory import DefaultLoggerFactory
from atref.logging.helpers import get_logger
from atref.utils.paths import find_workspace_root
from atref.validation.validator import validate_file, validate_tree

logger = get_logger('cli')


def _configure_logging(enable_json: bool, verbose: bool = False) -> None:
    """Configure process-wide logging once, either JSON or plain text."""
    factory = DefaultLoggerFactory.from_env(json_logs=enable_json, verbose=verbose)
    mode = (factory.json_logs, verbose)
    if getattr(_configure_logging, '_configured_mode', None) == mode:
        return
    global logger
    logger = factory.get_logger('cli')
    setattr(_configure_logging, '_configured_mode', mode)


def _regex(value: str) -> re.Pattern[str]:
    try:
        return re.compile(value)
    except re.error as exc:
        raise argparse.ArgumentTypeError(f'invalid --ignore pattern {value!r}: {exc}') from None


def _heading_mode(value: str) -> HeadingMode:
    try:
        return HeadingMode.parse(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def _build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    g_out = common.add_argument_group('Output')
    g_out.add_argument('--no-color', action='store_true', dest='no_color', help='Disable ANSI colours.')
    g_out.add_argument('--json-logs', action='store_true', dest='json_logs', help='Emit logs as JSON (or ATREF_JSON_LOGS=1).')
    g_out.add_argument('-v', '--verbose', action='store_true', help='Debug logging.')
    g_out.add_argument(
        '--workspace-root-path',
        metavar='DIR',
        dest='workspace_root_path',
        help='Explicit workspace root. Bare and "/"-rooted references resolve against it '
             '(default: nearest ancestor holding .git, else the document directory).',
    )

    p = argparse.ArgumentParser(
        prog='atref',
        formatter_class=argparse.RawTextHelpFormatter,
        description='atref – validate and compile @path/to/file references in text documents.',
    )
    sub = p.add_subparsers(dest='command', metavar='COMMAND')
    sub.required = True

    p_val = sub.add_parser('validate', parents=[common], help='Validate @ references in files.')
    p_val.add_argument('files', nargs='+', metavar='FILE', help='Documents or directories to validate.')
    p_val.add_argument('-q', '--quiet', action='store_true', help='Only show errors.')
    p_val.add_argument('--ignore', action='append', type=_regex, default=[], metavar='RX',
                       help='Skip references whose path matches RX (repeatable).')
    p_val.add_argument('-r', '--recursive', action='store_true',
                       help='Follow valid references and validate the whole dependency tree.')

    p_chk = sub.add_parser('check', parents=[common], help='Scan markdown files and list broken links by file.')
    p_chk.add_argument('path', nargs='?', default='.', metavar='PATH', help='Directory or markdown file (default: .).')
    p_chk.add_argument('--ignore', action='append', type=_regex, default=[], metavar='RX',
                       help='Skip references whose path matches RX (repeatable).')

    p_cmp = sub.add_parser('compile', parents=[common], help='Compile documents by expanding @ references.')
    p_cmp.add_argument('paths', nargs='+', metavar='PATH', help='Documents or directories to compile.')
    p_cmp.add_argument('-o', '--output', metavar='FILE', help='Output file (single document only).')
    p_cmp.add_argument('--output-dir', metavar='DIR', dest='output_dir',
                       help='Output directory (directories: default <dir>/dist).')
    p_cmp.add_argument('--optimize-duplicates', action='store_true', dest='optimize_duplicates',
                       help='Inline each file once per run; later occurrences become <file path="..." /> stubs.')
    p_cmp.add_argument('--heading-mode', type=_heading_mode, default=HeadingMode.NORMALIZE, dest='heading_mode',
                       metavar='MODE', help='normalize (default), additive or none.')
    p_cmp.add_argument('--report', metavar='FILE',
                       help='Write the folder run report as JSON to FILE ("-" for stderr).')
    return p


def _workspace(path: str, explicit: Optional[str]) -> str:
    return find_workspace_root(os.path.dirname(os.path.abspath(path)), explicit)


def _expand_inputs(paths: Sequence[str]) -> List[str]:
    """Expand directories into their markdown documents, keeping order, no duplicates."""
    walker = DocumentWalker(logger=logger)
    out: List[str] = []
    for raw in paths:
        if os.path.isdir(raw):
            out.extend(walker.gather_files([raw]))
        else:
            out.append(os.path.abspath(raw))
    return list(dict.fromkeys(out))


def _emit(stream: TextIO, text: str) -> None:
    print(text, file=stream)


# --------------------------------------------------------------------------- #
#  Commands                                                                   #
# --------------------------------------------------------------------------- #
def run_validate(ns: argparse.Namespace, out: TextIO) -> int:
    files = _expand_inputs(ns.files)
    if not files:
        logger.error('✘ no matching files found')
        return 1

    t0 = time.perf_counter()
    results: List[FileValidation] = []
    seen: set[str] = set()
    failed = False

    for path in files:
        if not os.path.isfile(path):
            logger.error('✘ File not found: %s', path)
            failed = True
            continue
        opts = ValidateOptions(base_path=_workspace(path, ns.workspace_root_path), ignore_patterns=ns.ignore)
        try:
            if ns.recursive:
                batch = [fv for fv in validate_tree(path, opts, logger=logger) if fv.path not in seen]
            else:
                batch = [FileValidation(path=path, result=validate_file(path, opts))]
        except AtRefError as exc:
            logger.error('✘ %s', exc)
            failed = True
            continue

        for fv in batch:
            seen.add(fv.path)
            results.append(fv)
            failed = failed or bool(fv.result.invalid)
            if ns.recursive or (ns.quiet and not fv.result.invalid):
                continue
            _emit(out, format_validation_result(
                fv.result,
                no_color=ns.no_color,
                errors_only=ns.quiet,
                show_file_path=os.path.relpath(fv.path),
            ))
            _emit(out, '')

    if ns.recursive:
        _emit(out, format_validation_summary(
            results,
            recursive=True,
            duration_ms=(time.perf_counter() - t0) * 1000,
            no_color=ns.no_color,
        ))
    elif len(results) > 1:
        _emit(out, format_summary(results, no_color=ns.no_color))

    return 1 if failed else 0


def run_check(ns: argparse.Namespace, out: TextIO) -> int:
    target = ns.path
    if not os.path.exists(target):
        logger.error('✘ Path not found: %s', target)
        return 1
    if os.path.isdir(target):
        files = DocumentWalker(logger=logger).gather_files([target])
    elif target.endswith('.md'):
        files = [os.path.abspath(target)]
    else:
        logger.error('✘ Path must be a directory or a markdown file: %s', target)
        return 1

    if not files:
        _emit(out, 'No markdown files found')
        return 0

    results: List[FileValidation] = []
    for path in files:
        opts = ValidateOptions(base_path=_workspace(path, ns.workspace_root_path), ignore_patterns=ns.ignore)
        try:
            results.append(FileValidation(path=path, result=validate_file(path, opts)))
        except AtRefError as exc:
            logger.error('✘ %s', exc)

    _emit(out, format_check_report(results, no_color=ns.no_color))
    return 1 if any(fv.result.invalid for fv in results) else 0


def _write_report(result: FolderCompileResult, target: str) -> None:
    if result.report is None:
        return
    if target == '-':
        print(result.report.to_json(), file=sys.stderr)
        return
    os.makedirs(os.path.dirname(os.path.abspath(target)), exist_ok=True)
    with open(target, 'w', encoding='utf-8') as fh:
        fh.write(result.report.to_json() + '\n')
    logger.info('✔ Report written → %s', target)


def run_compile(ns: argparse.Namespace, out: TextIO) -> int:
    paths = list(ns.paths)
    if ns.output and (len(paths) > 1 or os.path.isdir(paths[0])):
        logger.error('✘ --output can only be used with a single file')
        return 1

    failed = False
    file_results: List[CompileResult] = []

    for raw in paths:
        if os.path.isdir(raw):
            opts = FolderCompileOptions(
                base_path=find_workspace_root(os.path.abspath(raw), ns.workspace_root_path),
                output_dir=ns.output_dir,
                optimize_duplicates=ns.optimize_duplicates,
                heading_mode=ns.heading_mode,
                warn_on_clamp=True,
            )
            folder = compile_folder(raw, opts, logger=logger)
            _emit(out, format_folder_result(folder, no_color=ns.no_color))
            _emit(out, '')
            if ns.report:
                _write_report(folder, ns.report)
            failed = failed or folder.total_failures > 0
            continue

        if not os.path.isfile(raw):
            logger.error('✘ File not found: %s', raw)
            failed = True
            continue

        output = ns.output
        if output is None and ns.output_dir:
            output = os.path.join(ns.output_dir, os.path.basename(raw))
        opts = CompileOptions(
            base_path=_workspace(raw, ns.workspace_root_path),
            output_path=output,
            optimize_duplicates=ns.optimize_duplicates,
            heading_mode=ns.heading_mode,
            warn_on_clamp=True,
        )
        try:
            result = compile_file(raw, opts, logger=logger)
        except AtRefError as exc:
            logger.error('✘ %s', exc)
            failed = True
            continue
        file_results.append(result)
        _emit(out, format_compile_result(result, no_color=ns.no_color))
        _emit(out, '')
        failed = failed or result.failed_count > 0

    if len(file_results) > 1:
        ok = sum(r.success_count for r in file_results)
        bad = sum(r.failed_count for r in file_results)
        _emit(out, (
            f"{color('Total:', CYAN, ns.no_color)} {len(file_results)} files compiled, "
            f"{color(f'{ok} references resolved', GREEN, ns.no_color)}, "
            f"{color(f'{bad} failed', RED, ns.no_color)}"
        ))

    return 1 if failed else 0


_COMMANDS = {
    'validate': run_validate,
    'check': run_check,
    'compile': run_compile,
}


class AtRef:
    """Top-level façade for command-style execution."""

    @staticmethod
    def run(argv: Sequence[str], stdout: Optional[TextIO] = None) -> int:
        """Run one command and return its exit status."""
        ns = _build_parser().parse_args(list(argv))
        _configure_logging(ns.json_logs, ns.verbose)
        return _COMMANDS[ns.command](ns, stdout or sys.stdout)


def main() -> NoReturn:
    """Entry point for `atref` and `python -m atref`."""
    try:
        raise SystemExit(AtRef.run(sys.argv[1:]))
    except KeyboardInterrupt:
        logger.error('Interrupted by user.')
        raise SystemExit(130)
    except BrokenPipeError:
        raise SystemExit(0)
    except Exception as exc:
        if os.getenv('DEBUG') == '1':
            raise
        logger.error('Unexpected error: %s', exc)
        raise SystemExit(1)


if __name__ == '__main__':
    main()
