"""Static checks: pattern-based issue detection over a file's added lines.

Every detector is a plain function ``(FileChange) -> list[Issue]``. They
only look at text: no parsing, no control flow, no cross-file knowledge.
The logical-bug rules in particular ("code after return", "array access
without bounds check") are single-line heuristics and will both miss real
problems and flag harmless code.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Optional

from diff_reviewer.code_context import (
    file_extension,
    get_code_context,
    language_for,
    mask_literals,
)
from diff_reviewer.config import (
    DOC_LOOKAHEAD,
    DOC_LOOKBEHIND,
    DOC_SNIPPET_CHARS,
    FUNCTION_BODY_WINDOW,
    GUARD_WINDOW,
    JS_EXTENSIONS,
    LINE_RULES,
    MAX_LINE_LENGTH,
    NESTED_LOOP_WINDOW,
)
from diff_reviewer.models import FileChange, Issue, LineChange, Severity

Detector = Callable[[FileChange], list[Issue]]
LineRule = Callable[[FileChange, LineChange], list[Issue]]


# ── Helpers ──────────────────────────────────────────────────────────────────


def _make_issue(
    file_change: FileChange,
    line: LineChange,
    severity: Severity,
    title: str,
    description: str,
    suggestion: str,
    context_lines: int = 2,
) -> Issue:
    return Issue(
        severity=severity,
        title=title,
        description=description,
        file=file_change.file_name,
        line=line.line_number,
        suggestion=suggestion,
        code_snippet=get_code_context(file_change, line, context_lines),
        language=language_for(file_change.file_name),
    )


def _is_js_file(file_change: FileChange) -> bool:
    return file_extension(file_change.file_name) in JS_EXTENSIONS


def _nearby(file_change: FileChange, line: LineChange, window: int) -> list[LineChange]:
    """Recorded changes within ``window`` line numbers of ``line``, itself included."""
    return file_change.line_index.between(
        line.line_number - window, line.line_number + window
    )


def _run_line_rules(file_change: FileChange, rules: list[LineRule]) -> list[Issue]:
    """Apply ``rules`` to each added line, line by line."""
    issues: list[Issue] = []
    for line in file_change.added_lines:
        for rule in rules:
            issues.extend(rule(file_change, line))
    return issues


# ── Table-Driven Rules ───────────────────────────────────────────────────────


def _table_rule(name: str) -> LineRule:
    """Build a line rule from an entry of ``LINE_RULES``."""
    rule_def = LINE_RULES[name]
    pattern = re.compile(rule_def["pattern"], re.IGNORECASE)
    extensions = rule_def.get("extensions")

    def rule(file_change: FileChange, line: LineChange) -> list[Issue]:
        if extensions and file_extension(file_change.file_name) not in extensions:
            return []
        if not pattern.search(line.content):
            return []
        return [
            _make_issue(
                file_change,
                line,
                Severity(rule_def["severity"]),
                rule_def["title"],
                rule_def["description"],
                rule_def["suggestion"],
                rule_def["context"],
            )
        ]

    rule.__name__ = f"rule_{name}"
    return rule


_todo_fixme = _table_rule("todo_fixme")
_loose_equality = _table_rule("loose_equality")
_infinite_loop = _table_rule("infinite_loop")
_assignment_in_conditional = _table_rule("assignment_in_conditional")
_code_after_return = _table_rule("code_after_return")
_type_coercion = _table_rule("type_coercion")
_uncached_loop_bound = _table_rule("uncached_loop_bound")
_sync_io = _table_rule("sync_io")
_string_concatenation = _table_rule("string_concatenation")
_secret_match = _table_rule("hardcoded_secret")


# ── Code Quality ─────────────────────────────────────────────────────────────


def _long_line(file_change: FileChange, line: LineChange) -> list[Issue]:
    length = len(line.content)
    if length <= MAX_LINE_LENGTH:
        return []
    return [
        _make_issue(
            file_change,
            line,
            Severity.MINOR,
            "Long line detected",
            f"Line is {length} characters long",
            "Break into multiple lines for better readability",
            3,
        )
    ]


def check_code_quality(file_change: FileChange) -> list[Issue]:
    """Long lines and unresolved TODO/FIXME markers."""
    return _run_line_rules(file_change, [_long_line, _todo_fixme])


# ── Security ─────────────────────────────────────────────────────────────────


def _hardcoded_secret(file_change: FileChange, line: LineChange) -> list[Issue]:
    # The snippet must not repeat the secret it is reporting
    return [
        replace(issue, code_snippet=mask_literals(issue.code_snippet or ""))
        for issue in _secret_match(file_change, line)
    ]


def check_security(file_change: FileChange) -> list[Issue]:
    """Credentials written straight into the source."""
    return _run_line_rules(file_change, [_hardcoded_secret])


# ── Best Practices ───────────────────────────────────────────────────────────


def check_best_practices(file_change: FileChange) -> list[Issue]:
    """Loose equality in JavaScript/TypeScript."""
    return _run_line_rules(file_change, [_loose_equality])


# ── Logical Bugs ─────────────────────────────────────────────────────────────

_PROPERTY_ACCESS = re.compile(r"[A-Za-z_$][\w$]*\.[A-Za-z_$]")
_GUARDED_LINE = re.compile(r"if\s*\(|&&|\bcatch\b|\btry\b")
_NULL_GUARD = re.compile(
    r"if\s*\([^)]*\bnull\b|if\s*\([^)]*\bundefined\b|&&\s*\w+|\?\."
)
_INDEX_ACCESS = re.compile(r"[\w$)\]]\[[^\]]+\]")
_LENGTH_CHECK = re.compile(r"\.length\b")


def _has_null_check_nearby(file_change: FileChange, line: LineChange) -> bool:
    return any(
        _NULL_GUARD.search(c.content) for c in _nearby(file_change, line, GUARD_WINDOW)
    )


def _unchecked_property_access(
    file_change: FileChange, line: LineChange
) -> list[Issue]:
    content = line.content
    if not _PROPERTY_ACCESS.search(content) or "?." in content:
        return []
    if _GUARDED_LINE.search(content) or _has_null_check_nearby(file_change, line):
        return []
    return [
        _make_issue(
            file_change,
            line,
            Severity.MAJOR,
            "Potential null/undefined access",
            "Object property access without null checking",
            "Add null check or use optional chaining (?.)",
            3,
        )
    ]


def _unchecked_array_index(file_change: FileChange, line: LineChange) -> list[Issue]:
    if not _INDEX_ACCESS.search(line.content):
        return []
    if any(
        _LENGTH_CHECK.search(c.content)
        for c in _nearby(file_change, line, GUARD_WINDOW)
    ):
        return []
    return [
        _make_issue(
            file_change,
            line,
            Severity.MINOR,
            "Array access without bounds check",
            "Direct array indexing without length validation",
            "Check array length before accessing elements",
        )
    ]


def check_logical_bugs(file_change: FileChange) -> list[Issue]:
    """Null access, unchecked indexing, endless loops and other likely slips."""
    return _run_line_rules(
        file_change,
        [
            _unchecked_property_access,
            _unchecked_array_index,
            _infinite_loop,
            _assignment_in_conditional,
            _code_after_return,
            _type_coercion,
        ],
    )


# ── Documentation ────────────────────────────────────────────────────────────

_CONTROL_KEYWORDS = r"(?:if|for|while|switch|catch|with|return|function|typeof|new)"
_FUNCTION_DECLARATIONS = [
    re.compile(r"^\s*(?:export\s+)?(?:default\s+)?(?:async\s+)?function\s*\*?\s*\w+"),
    re.compile(r"^\s*(?:export\s+)?(?:const|let|var)\s+\w+\s*=\s*(?:async\s+)?\([^)]*\)\s*(?::\s*[^=]+)?=>"),
    re.compile(rf"^\s*(?:async\s+)?(?!{_CONTROL_KEYWORDS}\b)\w+\s*\([^)]*\)\s*(?::\s*[^{{]+)?\{{"),
    re.compile(r"^\s*(?:public|private|protected)\s+(?:static\s+)?(?:async\s+)?\w+\s*\([^)]*\)"),
]
_CLASS_DECLARATION = re.compile(
    r"^\s*(?:export\s+)?(?:default\s+)?(?:abstract\s+)?class\s+(\w+)"
)
_FUNCTION_NAME = re.compile(r"function\s*\*?\s*(\w+)|(\w+)\s*\(|(\w+)\s*=")
_PARAMS = re.compile(r"\(([^)]*)\)")


@dataclass(frozen=True)
class FunctionInfo:
    name: str
    params: list[str]
    has_return: bool


def is_function_declaration(content: str) -> bool:
    return any(p.search(content) for p in _FUNCTION_DECLARATIONS)


def extract_function_info(content: str) -> FunctionInfo:
    """Best-effort name, parameter names and return presence of a declaration line."""
    name_match = _FUNCTION_NAME.search(content)
    name = "anonymous"
    if name_match:
        name = next((g for g in name_match.groups() if g), "anonymous")

    params: list[str] = []
    params_match = _PARAMS.search(content)
    if params_match and params_match.group(1).strip():
        for raw in params_match.group(1).split(","):
            words = raw.strip().split()
            if not words:
                continue
            param = re.sub(r"[=:?].*", "", words[0]).lstrip(".")
            if param:
                params.append(param)

    has_return = "return" in content or "=>" in content
    return FunctionInfo(name=name, params=params, has_return=has_return)


def _has_doc_above(lines: list[LineChange], index: int) -> bool:
    """Whether a doc comment closes within the few added lines above ``index``."""
    for i in range(index - 1, max(index - DOC_LOOKBEHIND, 0) - 1, -1):
        content = lines[i].content
        if "*/" in content:
            return True
        if content.strip() and not re.match(r"^\s*[*/@]", content):
            break
    return False


def _doc_suggestion(info: FunctionInfo) -> str:
    parts = ["/**", f" * Description of {info.name}"]
    parts.extend(f" * @param {{*}} {param} - Description" for param in info.params)
    if info.has_return:
        parts.append(" * @returns {*} Description")
    parts.append(" */")
    return "\n".join(parts)


def _extract_doc_block(lines: list[LineChange], start: int) -> str:
    block: list[str] = []
    for line in lines[start:]:
        block.append(line.content)
        if "*/" in line.content:
            break
    return "\n".join(block) + "\n"


def _find_next_function(lines: list[LineChange], start: int) -> Optional[LineChange]:
    for line in lines[start + 1 : start + 1 + DOC_LOOKAHEAD]:
        if is_function_declaration(line.content):
            return line
    return None


def validate_doc_block(block: str, info: FunctionInfo) -> list[str]:
    """Describe each parameter or return value the doc block leaves out."""
    problems = []
    for param in info.params:
        tag = re.compile(
            r"@param\s+(?:\{[^}]*\}\s*)?\[?" + re.escape(param) + r"\b"
        )
        if not tag.search(block):
            problems.append(f"Missing @param for '{param}'")
    if info.has_return and not re.search(r"@returns?\b", block):
        problems.append("Missing @returns documentation")
    return problems


def check_documentation(file_change: FileChange) -> list[Issue]:
    """Missing or incomplete doc comments on JavaScript/TypeScript declarations."""
    issues: list[Issue] = []
    if not _is_js_file(file_change):
        return issues

    lines = file_change.added_lines
    for i, line in enumerate(lines):
        content = line.content

        if is_function_declaration(content) and not _has_doc_above(lines, i):
            info = extract_function_info(content)
            issues.append(
                _make_issue(
                    file_change,
                    line,
                    Severity.MINOR,
                    "Missing JSDoc documentation",
                    f"Function '{info.name}' lacks JSDoc documentation",
                    _doc_suggestion(info),
                    3,
                )
            )

        class_match = _CLASS_DECLARATION.match(content)
        if class_match and not _has_doc_above(lines, i):
            class_name = class_match.group(1)
            issues.append(
                _make_issue(
                    file_change,
                    line,
                    Severity.MINOR,
                    "Missing class JSDoc",
                    f"Class '{class_name}' lacks JSDoc documentation",
                    f"Add JSDoc:\n/**\n * Description of {class_name} class\n */",
                    3,
                )
            )

        if "/**" in content:
            target = _find_next_function(lines, i)
            if target is None:
                continue
            block = _extract_doc_block(lines, i)
            for problem in validate_doc_block(block, extract_function_info(target.content)):
                issues.append(
                    Issue(
                        severity=Severity.MINOR,
                        title="Incomplete JSDoc",
                        description=problem,
                        file=file_change.file_name,
                        line=line.line_number,
                        suggestion="Add missing JSDoc tags (@param, @returns, @throws)",
                        code_snippet=block[:DOC_SNIPPET_CHARS] + "...",
                        language=language_for(file_change.file_name),
                    )
                )

    return issues


# ── Performance ──────────────────────────────────────────────────────────────

_LOOP_HEADER = re.compile(r"\b(?:for|while)\s*\(")
_INNER_LOOP = re.compile(r"\bfor\s*\(|\bwhile\s*\(|\bforEach\s*\(")
_EXPENSIVE_OPERATION = re.compile(
    r"\b(?:sort|filter|map|reduce)\s*\(|JSON\.(?:parse|stringify)\b|\bRegExp\b"
)


def _nested_loop(file_change: FileChange, line: LineChange) -> list[Issue]:
    if not _LOOP_HEADER.search(line.content):
        return []
    start = line.line_number
    has_inner = any(
        _INNER_LOOP.search(c.content)
        for c in file_change.line_index.between(start + 1, start + NESTED_LOOP_WINDOW)
    )
    if not has_inner:
        return []
    return [
        _make_issue(
            file_change,
            line,
            Severity.MINOR,
            "Nested loop detected",
            "Nested loops can have O(n²) complexity",
            "Consider optimizing with better data structures or algorithms",
            4,
        )
    ]


def _function_body(lines: list[LineChange], start: int) -> list[str]:
    """Added lines from a declaration until its braces balance, within a window."""
    body: list[str] = []
    depth = 0
    for line in lines[start : start + FUNCTION_BODY_WINDOW]:
        body.append(line.content)
        depth += line.content.count("{") - line.content.count("}")
        if depth <= 0 and "{" in "".join(body):
            break
    return body


def _memoization_candidates(file_change: FileChange) -> list[Issue]:
    issues: list[Issue] = []
    lines = file_change.added_lines
    for i, line in enumerate(lines):
        if "{" not in line.content or not is_function_declaration(line.content):
            continue
        if not any(_EXPENSIVE_OPERATION.search(text) for text in _function_body(lines, i)):
            continue
        issues.append(
            _make_issue(
                file_change,
                line,
                Severity.INFO,
                "Consider memoization",
                "Function with expensive operations could benefit from memoization",
                "Consider caching results for repeated calls with same parameters",
                4,
            )
        )
    return issues


def check_performance(file_change: FileChange) -> list[Issue]:
    """Loop costs, blocking I/O, string building and memoization hints."""
    issues = _run_line_rules(
        file_change,
        [_uncached_loop_bound, _nested_loop, _sync_io, _string_concatenation],
    )
    issues.extend(_memoization_candidates(file_change))
    return issues


# ── Registry ─────────────────────────────────────────────────────────────────

DETECTORS: list[Detector] = [
    check_code_quality,
    check_security,
    check_best_practices,
    check_logical_bugs,
    check_documentation,
    check_performance,
]


def analyze_file_change(file_change: FileChange) -> list[Issue]:
    """Run every detector on one file and concatenate their issues in registry order."""
    issues: list[Issue] = []
    for detector in DETECTORS:
        issues.extend(detector(file_change))
    return issues
