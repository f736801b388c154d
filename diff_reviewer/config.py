"""Configuration for the diff reviewer."""

from __future__ import annotations

# ── Server Config ────────────────────────────────────────────────────────────
SERVER_NAME = "diff-reviewer-mcp"
SERVER_VERSION = "1.0.0"
# "stdio" for editor integrations, "streamable-http" to serve on host:port
SERVER_TRANSPORT = "stdio"
SERVER_HOST = "127.0.0.1"
SERVER_PORT = 8088

# ── Git ──────────────────────────────────────────────────────────────────────
DEFAULT_TO_REF = "HEAD"
# Tried in order when review_branches is called without a target branch
DEFAULT_BRANCH_CANDIDATES = ["origin/main", "origin/master", "main", "master"]

# ── Templates ────────────────────────────────────────────────────────────────
DEFAULT_TEMPLATE = "comprehensive"

# ── Detector Thresholds ──────────────────────────────────────────────────────
MAX_LINE_LENGTH = 120
# Distance (in line numbers) searched for a null guard or a .length check
GUARD_WINDOW = 3
# Lines after a loop header searched for an inner loop
NESTED_LOOP_WINDOW = 20
# Added lines above a declaration searched for a closing doc comment
DOC_LOOKBEHIND = 5
# Added lines after a doc block searched for the function it documents
DOC_LOOKAHEAD = 10
# Added lines scanned for a function body when looking for memoization hints
FUNCTION_BODY_WINDOW = 30
# Characters of a doc block quoted in an incomplete-doc finding
DOC_SNIPPET_CHARS = 100

# ── File Types ───────────────────────────────────────────────────────────────
# Rules specific to JavaScript semantics only run on these
JS_EXTENSIONS = frozenset({".js", ".ts", ".jsx", ".tsx"})

SYNC_IO_CALLS = [
    "readFileSync",
    "writeFileSync",
    "appendFileSync",
    "existsSync",
    "statSync",
    "lstatSync",
    "readdirSync",
    "mkdirSync",
    "unlinkSync",
    "rmSync",
    "copyFileSync",
    "renameSync",
]

LANGUAGE_MAP = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".py": "python",
    ".java": "java",
    ".c": "c",
    ".cpp": "cpp",
    ".cs": "csharp",
    ".php": "php",
    ".rb": "ruby",
    ".go": "go",
    ".rs": "rust",
    ".swift": "swift",
    ".kt": "kotlin",
    ".scala": "scala",
    ".html": "html",
    ".css": "css",
    ".scss": "scss",
    ".less": "less",
    ".json": "json",
    ".xml": "xml",
    ".yaml": "yaml",
    ".yml": "yaml",
}
DEFAULT_LANGUAGE = "text"

# ── Line Rules ───────────────────────────────────────────────────────────────
# Single-line patterns, matched case-insensitively against added lines.
# "context" is the number of neighbouring lines quoted in the snippet;
# "extensions" limits the rule to JS-family files.
LINE_RULES = {
    "todo_fixme": {
        "pattern": r"\b(?:TODO|FIXME)\b",
        "severity": "info",
        "title": "TODO/FIXME comment found",
        "description": "Unresolved TODO or FIXME comment",
        "suggestion": "Address the TODO or create a proper issue",
        "context": 2,
    },
    "hardcoded_secret": {
        "pattern": r"""(?:password|secret|key|token)\s*[:=]\s*['"][^'"]+['"]|api_key""",
        "severity": "critical",
        "title": "Potential hardcoded secret",
        "description": "Possible hardcoded credential or secret",
        "suggestion": "Move to environment variables or a secrets manager",
        "context": 2,
    },
    "loose_equality": {
        "pattern": r"[^=!]==[^=]|[^=!]!=[^=]",
        "severity": "minor",
        "title": "Use strict equality",
        "description": "Using loose equality instead of strict",
        "suggestion": "Use === or !== for strict comparison",
        "context": 2,
        "extensions": JS_EXTENSIONS,
    },
    "infinite_loop": {
        "pattern": r"while\s*\(\s*true\s*\)|for\s*\(\s*;\s*;\s*\)",
        "severity": "major",
        "title": "Potential infinite loop",
        "description": "Loop condition that may never become false",
        "suggestion": "Add proper exit condition or break statement",
        "context": 4,
    },
    "assignment_in_conditional": {
        "pattern": r"\bif\s*\([^)]*(?<![=!<>+\-*/%&|^])=(?!=)",
        "severity": "major",
        "title": "Assignment in conditional",
        "description": "Assignment (=) used instead of comparison (==, ===)",
        "suggestion": (
            "Use comparison operator or wrap assignment in extra "
            "parentheses if intentional"
        ),
        "context": 3,
    },
    "code_after_return": {
        "pattern": r"\breturn\b[^;]*;\s*[^}\s/]",
        "severity": "minor",
        "title": "Potentially unreachable code",
        "description": "Code after return statement may be unreachable",
        "suggestion": "Remove unreachable code or restructure logic",
        "context": 4,
    },
    "type_coercion": {
        "pattern": r"""(?<!\+)\+(?![+=])\s*['"]|['"]\s*\+(?![+=])""",
        "severity": "minor",
        "title": "Potential type coercion",
        "description": (
            "String concatenation with + operator may cause unexpected "
            "type conversion"
        ),
        "suggestion": "Use template literals or explicit type conversion",
        "context": 2,
        "extensions": JS_EXTENSIONS,
    },
    "uncached_loop_bound": {
        "pattern": r"for\s*\([^)]*<=?\s*[\w$.\[\]]+\.length[^)]*\)",
        "severity": "minor",
        "title": "Inefficient loop condition",
        "description": "Array length accessed in every loop iteration",
        "suggestion": "Cache array length in a variable before the loop",
        "context": 3,
    },
    "sync_io": {
        "pattern": r"\b(?:" + "|".join(SYNC_IO_CALLS) + r")\s*\(",
        "severity": "major",
        "title": "Synchronous file operation",
        "description": "Synchronous operations block the event loop",
        "suggestion": "Use asynchronous alternatives with async/await",
        "context": 3,
    },
    "string_concatenation": {
        "pattern": r"""\+=\s*['"`]""",
        "severity": "minor",
        "title": "Inefficient string concatenation",
        "description": "String concatenation in loops can be inefficient",
        "suggestion": "Use array.join() or template literals for better performance",
        "context": 3,
        "extensions": JS_EXTENSIONS,
    },
}
