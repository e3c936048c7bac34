from pathlib import Path

import pytest

from skillshelf.lint import CHECKERS, check_code_blocks

PATH = Path("sample.md")


def _doc(language: str, code: str) -> str:
    return f"# Sample\n\n```{language}\n{code}\n```\n"


@pytest.mark.parametrize(
    "language,code",
    [
        ("python", "def f(x):\n    return x * 2"),
        ("py", "import os"),
        ("json", '{"a": [1, 2, {"b": null}]}'),
        ("yaml", "---\nid: x\ntags:\n  - a"),
        ("toml", '[project]\nname = "x"'),
        ("typescript", "const add = (a: number, b: number): number => a + b;"),
        ("ts", "const msg = `Hello, ${user.name}! You have ${count} ${count === 1 ? `item` : `items`}`;"),
        ("javascript", "const re = /[(]+/g;\nconst half = total / 2;"),
        ("ts", "const r = i++ / 2;"),
        ("js", "let j = k-- / 2;\nconst n = (a + b) / 2;"),
        ("tsx", "export const App = () => <div>{/* comment */}</div>;"),
        ("tsx", "const a = <p>Don't panic</p>;"),
        ("jsx", "const b = <p>It's fine</p>;"),
        ("js", "// a ) comment\n/* another ] one */\nconst s = \"quote ' and }\";"),
        ("bash", "echo ((("),
        ("text", "anything {{{"),
    ],
)
def test_valid_blocks(language, code):
    assert check_code_blocks(PATH, _doc(language, code)) == []


@pytest.mark.parametrize(
    "language,code,line,fragment",
    [
        ("python", "x = 1\ndef f(:\n    pass", 5, "python block"),
        ("json", '{\n  "a": 1\n  "b": 2\n}', 6, "json block"),
        ("yaml", "a: 1\nb: c: d", 5, "yaml block"),
        ("toml", "name = ", 4, "toml block"),
        ("typescript", "function f() {\n  return [1, 2);\n}", 5, "')' does not match '['"),
        ("typescript", "if (ok) {\n  run();", 4, "'{' is never closed"),
        ("javascript", "const s = 'open;", 4, "unterminated string literal"),
        ("js", "/* never closed", 4, "unterminated block comment"),
        ("ts", "const t = `${a}", 4, "unterminated template literal"),
        ("ts", "f());", 4, "unexpected ')'"),
    ],
)
def test_invalid_blocks(language, code, line, fragment):
    issues = check_code_blocks(PATH, _doc(language, code))
    assert len(issues) == 1
    issue = issues[0]
    assert issue.code == "code-syntax"
    assert issue.line == line
    assert fragment in issue.message


def test_line_numbers_account_for_frontmatter():
    text = "---\nid: x\n---\n" + _doc("python", "def f(:")
    (issue,) = check_code_blocks(PATH, text)
    assert issue.line == 7


def test_block_without_language():
    issues = check_code_blocks(PATH, "# Sample\n\n```\nplain\n```\n")
    assert [i.code for i in issues] == ["code-no-language"]
    assert issues[0].line == 3
    assert check_code_blocks(PATH, "# Sample\n\n```\nplain\n```\n", require_language=False) == []


def test_language_is_case_insensitive_and_ignores_attributes():
    assert check_code_blocks(PATH, _doc("Python title='x.py'", "def f(:"))[0].code == "code-syntax"


def test_unclosed_block_is_left_to_markdown_check():
    assert check_code_blocks(PATH, "# Sample\n\n```python\ndef f(:\n") == []


def test_checkers_cover_documented_languages():
    for language in ("python", "json", "yaml", "toml", "typescript", "javascript"):
        assert language in CHECKERS


def test_jsx_flavours_are_not_scanned():
    assert "tsx" not in CHECKERS
    assert "jsx" not in CHECKERS


def test_prefix_increment_still_allows_regex():
    assert check_code_blocks(PATH, _doc("js", "const ok = +/x/.test(s);")) == []


def test_block_inside_blockquote_is_checked():
    text = "# Sample\n\n> Example:\n>\n> ```python\n> def f(:\n> ```\n"
    (issue,) = check_code_blocks(PATH, text)
    assert issue.code == "code-syntax"
    assert issue.line == 6
