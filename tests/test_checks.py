import pytest

from diff_reviewer.checks import (
    DETECTORS,
    analyze_file_change,
    check_best_practices,
    check_code_quality,
    check_documentation,
    check_logical_bugs,
    check_performance,
    check_security,
    extract_function_info,
    is_function_declaration,
)
from diff_reviewer.models import ChangeType, FileChange, LineChange, Severity


def _titles(issues):
    return [i.title for i in issues]


class TestPrecisionExamples:
    def test_hardcoded_api_key(self, make_file):
        issues = analyze_file_change(make_file("src/config.ts", ['const API_KEY = "sk-12345";']))
        assert len(issues) == 1
        (issue,) = issues
        assert issue.severity == Severity.CRITICAL
        assert "hardcoded secret" in issue.title.lower()
        assert "sk-12345" not in issue.code_snippet
        assert '"***"' in issue.code_snippet

    def test_assignment_in_conditional(self, make_file):
        issues = analyze_file_change(make_file("src/app.ts", ["if (x = 5) {"]))
        assert len(issues) == 1
        assert issues[0].severity == Severity.MAJOR
        assert issues[0].title.lower() == "assignment in conditional"

    def test_unconditional_loop(self, make_file):
        issues = analyze_file_change(make_file("src/app.ts", ["while (true) {"]))
        assert len(issues) == 1
        assert issues[0].severity == Severity.MAJOR
        assert "infinite loop" in issues[0].title.lower()

    def test_long_line(self, make_file):
        issues = analyze_file_change(make_file("src/app.ts", ["a" * 130]))
        assert len(issues) == 1
        assert issues[0].severity == Severity.MINOR
        assert issues[0].title == "Long line detected"
        assert issues[0].description == "Line is 130 characters long"


class TestCodeQuality:
    def test_line_at_limit_is_fine(self, make_file):
        assert check_code_quality(make_file("a.py", ["a" * 120])) == []

    def test_todo_and_fixme(self, make_file):
        issues = check_code_quality(make_file("a.py", ["# TODO: handle retries", "x = 1  # fixme"]))
        assert [i.severity for i in issues] == [Severity.INFO, Severity.INFO]
        assert [i.line for i in issues] == [1, 2]

    def test_todo_needs_word_boundary(self, make_file):
        assert check_code_quality(make_file("a.ts", ["const todoList = [];"])) == []

    def test_only_additions_are_checked(self):
        f = FileChange(
            file_name="a.py",
            old_file_name="a.py",
            changes=[
                LineChange(ChangeType.DELETION, 1, "# TODO old"),
                LineChange(ChangeType.CONTEXT, 2, "# TODO context"),
            ],
        )
        assert check_code_quality(f) == []

    def test_issue_carries_location_and_language(self, make_file):
        (issue,) = check_code_quality(make_file("pkg/mod.py", ["# TODO"], start=7))
        assert issue.file == "pkg/mod.py"
        assert issue.line == 7
        assert issue.language == "python"
        assert issue.code_snippet == ">   7+ # TODO"


class TestSecurity:
    @pytest.mark.parametrize(
        "line",
        [
            "password = 'hunter22'",
            'db_secret: "abc"',
            "TOKEN='t0k3n'",
            "headers['api_key'] = value",
        ],
    )
    def test_secret_patterns(self, make_file, line):
        issues = check_security(make_file("settings.py", [line]))
        assert [i.severity for i in issues] == [Severity.CRITICAL]

    def test_variable_reference_is_not_a_secret(self, make_file):
        assert check_security(make_file("a.py", ["password = os.environ['PW']"])) == []

    def test_every_literal_in_the_snippet_is_masked(self, make_file):
        f = make_file("a.ts", ['const user = "admin";', 'const password = "pw123";'])
        (issue,) = check_security(f)
        assert "admin" not in issue.code_snippet
        assert "pw123" not in issue.code_snippet


class TestBestPractices:
    def test_loose_equality_in_js(self, make_file):
        issues = check_best_practices(make_file("a.js", ["if (a == b) {", "if (c != d) {"]))
        assert _titles(issues) == ["Use strict equality", "Use strict equality"]

    def test_strict_equality_is_fine(self, make_file):
        assert check_best_practices(make_file("a.ts", ["if (a === b && c !== d) {"])) == []

    def test_other_languages_are_skipped(self, make_file):
        assert check_best_practices(make_file("a.py", ["if a == b:"])) == []


class TestLogicalBugs:
    def test_unguarded_property_access(self, make_file):
        issues = check_logical_bugs(make_file("a.ts", ["const n = user.name;"]))
        assert _titles(issues) == ["Potential null/undefined access"]
        assert issues[0].severity == Severity.MAJOR

    def test_guard_nearby_suppresses_property_access(self, make_file):
        f = make_file("a.ts", ["if (user !== null) {", "  const n = user.name;", "}"])
        assert "Potential null/undefined access" not in _titles(check_logical_bugs(f))

    def test_optional_chaining_is_fine(self, make_file):
        assert check_logical_bugs(make_file("a.ts", ["const n = user?.name;"])) == []

    def test_guard_outside_window_does_not_count(self, make_file):
        lines = ["if (user == null) return;", "", "", "", "", "const n = user.name;"]
        titles = _titles(check_logical_bugs(make_file("a.py", lines)))
        assert "Potential null/undefined access" in titles

    def test_array_index_without_length_check(self, make_file):
        issues = check_logical_bugs(make_file("a.ts", ["const first = items[0];"]))
        assert _titles(issues) == ["Array access without bounds check"]
        assert issues[0].severity == Severity.MINOR

    def test_length_check_nearby_suppresses_array_index(self, make_file):
        f = make_file("a.ts", ["if (items.length > 0) {", "  const first = items[0];", "}"])
        assert "Array access without bounds check" not in _titles(check_logical_bugs(f))

    def test_type_annotations_are_not_indexing(self, make_file):
        assert check_logical_bugs(make_file("a.ts", ["let names: string[];"])) == []

    def test_for_ever_loop(self, make_file):
        issues = check_logical_bugs(make_file("a.c", ["for (;;) {"]))
        assert _titles(issues) == ["Potential infinite loop"]

    @pytest.mark.parametrize("line", ["if (x === 5) {", "if (x <= 5) {", "if (a != b) {"])
    def test_comparisons_are_not_assignments(self, make_file, line):
        assert "Assignment in conditional" not in _titles(
            check_logical_bugs(make_file("a.ts", [line]))
        )

    def test_code_after_return(self, make_file):
        issues = check_logical_bugs(make_file("a.ts", ["return done; cleanup();"]))
        assert "Potentially unreachable code" in _titles(issues)

    def test_return_before_closing_brace_is_fine(self, make_file):
        assert check_logical_bugs(make_file("a.ts", ["return done; }"])) == []

    def test_type_coercion(self, make_file):
        issues = check_logical_bugs(make_file("a.ts", ['const label = "count: " + n;']))
        assert _titles(issues) == ["Potential type coercion"]

    def test_type_coercion_only_for_js_family(self, make_file):
        assert check_logical_bugs(make_file("a.py", ['label = "count: " + n'])) == []

    def test_plus_equals_is_not_coercion(self, make_file):
        assert check_logical_bugs(make_file("a.ts", ['out += "x";'])) == []


class TestDocumentation:
    def test_missing_function_doc(self, make_file):
        f = make_file("a.ts", ["function add(a, b) {", "  return a + b;", "}"])
        (issue,) = check_documentation(f)
        assert issue.title == "Missing JSDoc documentation"
        assert issue.description == "Function 'add' lacks JSDoc documentation"
        assert "@param {*} a - Description" in issue.suggestion
        assert "@param {*} b - Description" in issue.suggestion
        assert issue.line == 1

    def test_documented_function(self, make_file):
        f = make_file(
            "a.ts",
            [
                "/**",
                " * Adds two numbers.",
                " * @param {number} a - first",
                " * @param {number} b - second",
                " */",
                "function add(a, b) {",
            ],
        )
        assert check_documentation(f) == []

    def test_incomplete_doc_block(self, make_file):
        f = make_file(
            "a.ts",
            [
                "/**",
                " * Adds two numbers.",
                " * @param {number} a - first",
                " */",
                "function add(a, b) {",
            ],
        )
        (issue,) = check_documentation(f)
        assert issue.title == "Incomplete JSDoc"
        assert issue.description == "Missing @param for 'b'"
        assert issue.line == 1
        assert issue.code_snippet.endswith("...")

    def test_missing_returns_tag(self, make_file):
        f = make_file(
            "a.ts",
            [
                "/**",
                " * Doubles.",
                " * @param x - value",
                " */",
                "const double = (x) => x * 2;",
            ],
        )
        assert [i.description for i in check_documentation(f)] == [
            "Missing @returns documentation"
        ]

    def test_doc_block_too_far_from_function(self, make_file):
        lines = ["/**", " * Orphan.", " */"] + ["let x = 1;"] * 12 + ["function f(a) {"]
        titles = _titles(check_documentation(make_file("a.ts", lines)))
        assert "Incomplete JSDoc" not in titles
        assert "Missing JSDoc documentation" in titles

    def test_missing_class_doc(self, make_file):
        (issue,) = check_documentation(make_file("a.ts", ["export class Foo {"]))
        assert issue.title == "Missing class JSDoc"
        assert "'Foo'" in issue.description

    def test_control_flow_is_not_a_declaration(self, make_file):
        f = make_file("a.ts", ["if (ready) {", "while (busy) {", "switch (kind) {"])
        assert check_documentation(f) == []

    def test_non_js_files_are_skipped(self, make_file):
        assert check_documentation(make_file("a.py", ["def add(a, b):"])) == []


class TestFunctionInfo:
    def test_arrow_function(self):
        info = extract_function_info("const handler = async (req, res) => {")
        assert info.name == "handler"
        assert info.params == ["req", "res"]
        assert info.has_return

    def test_typed_params_with_defaults(self):
        info = extract_function_info('function greet(name: string, greeting = "hi") {')
        assert info.name == "greet"
        assert info.params == ["name", "greeting"]
        assert not info.has_return

    def test_declaration_shapes(self):
        assert is_function_declaration("export async function load(id) {")
        assert is_function_declaration("const f = (a) => a;")
        assert is_function_declaration("  render(): void {")
        assert is_function_declaration("  private save(item: Item)")
        assert not is_function_declaration("  for (const x of xs) {")
        assert not is_function_declaration("  doThing(x);")


class TestPerformance:
    def test_uncached_loop_bound(self, make_file):
        f = make_file("a.ts", ["for (let i = 0; i < arr.length; i++) {"])
        assert "Inefficient loop condition" in _titles(check_performance(f))

    def test_nested_loop(self, make_file):
        f = make_file("a.ts", ["for (const a of xs) {", "  for (const b of ys) {", "  }", "}"])
        nested = [i for i in check_performance(f) if i.title == "Nested loop detected"]
        assert [i.line for i in nested] == [1]

    def test_inner_loop_beyond_window(self, make_file):
        lines = ["for (const a of xs) {"] + ["  work();"] * 20 + ["  xs.forEach(go);"]
        nested = [i for i in check_performance(make_file("a.ts", lines)) if i.title == "Nested loop detected"]
        assert nested == []

    def test_sync_io(self, make_file):
        issues = check_performance(make_file("a.js", ["const data = fs.readFileSync(p);"]))
        assert _titles(issues) == ["Synchronous file operation"]
        assert issues[0].severity == Severity.MAJOR

    def test_string_concatenation(self, make_file):
        issues = check_performance(make_file("a.ts", ['html += "<li>";']))
        assert _titles(issues) == ["Inefficient string concatenation"]

    def test_memoization_candidate(self, make_file):
        f = make_file("a.ts", ["function sorted(xs) {", "  return xs.slice().sort();", "}"])
        memo = [i for i in check_performance(f) if i.title == "Consider memoization"]
        assert len(memo) == 1
        assert memo[0].severity == Severity.INFO
        assert memo[0].line == 1

    def test_cheap_function_is_not_a_memoization_candidate(self, make_file):
        f = make_file("a.ts", ["function inc(x) {", "  return x + 1;", "}", "xs.map(inc);"])
        assert "Consider memoization" not in _titles(check_performance(f))


class TestRegistry:
    def test_order(self):
        assert [d.__name__ for d in DETECTORS] == [
            "check_code_quality",
            "check_security",
            "check_best_practices",
            "check_logical_bugs",
            "check_documentation",
            "check_performance",
        ]

    def test_results_follow_registry_order(self, make_file):
        # A long line that also holds a secret: quality findings come first
        line = 'const token = "' + "x" * 130 + '";'
        issues = analyze_file_change(make_file("a.py", [line]))
        assert _titles(issues) == ["Long line detected", "Potential hardcoded secret"]

    @pytest.mark.parametrize(
        "content",
        ["", "   ", "}", "((((", "@@ -1 +1 @@", "/**", "ünïcödé ✓", "x" * 5000],
    )
    def test_detectors_never_raise(self, content):
        f = FileChange(
            file_name="weird.ts",
            old_file_name="weird.ts",
            changes=[
                LineChange(ChangeType.ADDITION, 0, content),
                LineChange(ChangeType.ADDITION, 0, content),
            ],
        )
        assert isinstance(analyze_file_change(f), list)
