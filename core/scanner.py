"""Delimiter-balance scanner for JS/TS/JSX source.

A small finite-state machine instead of regex counting, so braces inside
comments, strings and template literals are not miscounted. States:

    CODE, LINE_COMMENT, BLOCK_COMMENT, STRING(quote), TEMPLATE

A template interpolation `${` counts as one extra open brace and pushes a CODE
frame; the `}` that closes it is counted like any other close brace and pops
back to TEMPLATE. Frames nest, so `${ `${x}` }` is handled.

Quoted strings end at an unescaped newline. JS strings cannot span lines, and
this keeps a stray apostrophe in JSX text from swallowing the rest of the file.

In JSX mode a quote only opens a string where an expression can start (after
an operator, an opening delimiter, a keyword such as `return` or `from`, or at
the start of a line). Anywhere else it is JSX text, so the apostrophe in
`<p>We're closed</p>` is just a character.
"""

from dataclasses import dataclass, field

CODE = "code"
LINE_COMMENT = "line_comment"
BLOCK_COMMENT = "block_comment"
STRING = "string"
TEMPLATE = "template"

PAIRS = {"{": "}", "(": ")", "[": "]", "<": ">"}

_EXPRESSION_OPENERS = set("=(,{[:?&|!+-*/%;")
_EXPRESSION_KEYWORDS = frozenset({
    "return", "from", "import", "case", "typeof", "in", "of", "yield", "await",
})


@dataclass
class Balance:
    open: int
    close: int

    @property
    def diff(self) -> int:
        return self.open - self.close

    @property
    def balanced(self) -> bool:
        return self.open == self.close


@dataclass
class ScanResult:
    counts: dict = field(default_factory=lambda: {ch: 0 for ch in "{}()[]<>"})
    unterminated: str | None = None     # state left open at end of input, if any

    def balance(self, open_char) -> Balance:
        return Balance(self.counts[open_char], self.counts[PAIRS[open_char]])


class _Frame:
    __slots__ = ("state", "quote", "depth")

    def __init__(self, state, quote=None):
        self.state = state
        self.quote = quote
        self.depth = 0          # brace depth inside an interpolation frame


def _expression_can_start(content, i):
    """True if a quote at content[i] can begin a string literal."""
    j = i - 1
    while j >= 0 and content[j] in " \t\r":
        j -= 1
    if j < 0 or content[j] == "\n":
        return True
    prev = content[j]
    if prev in _EXPRESSION_OPENERS:
        return True
    if prev == ">":
        return j > 0 and content[j - 1] == "="
    if prev.isalnum() or prev in "_$":
        start = j
        while start > 0 and (content[start - 1].isalnum() or content[start - 1] in "_$"):
            start -= 1
        return content[start:j + 1] in _EXPRESSION_KEYWORDS
    return False


def scan(content, track_angles=False, line_comments=True, jsx=False) -> ScanResult:
    """Count delimiters that appear in code context only.

    Pass line_comments=False for stylesheets, where `//` is not a comment and
    shows up in url(http://...) values. Pass jsx=True for .tsx/.jsx sources so
    quotes in JSX text do not open strings.
    """
    result = ScanResult()
    counts = result.counts
    stack = [_Frame(CODE)]
    i = 0
    n = len(content)

    while i < n:
        ch = content[i]
        nxt = content[i + 1] if i + 1 < n else ""
        frame = stack[-1]
        state = frame.state

        if state == CODE:
            if line_comments and ch == "/" and nxt == "/":
                stack.append(_Frame(LINE_COMMENT))
                i += 2
                continue
            if ch == "/" and nxt == "*":
                stack.append(_Frame(BLOCK_COMMENT))
                i += 2
                continue
            if ch in "\"'":
                if not jsx or _expression_can_start(content, i):
                    stack.append(_Frame(STRING, quote=ch))
            elif ch == "`":
                stack.append(_Frame(TEMPLATE))
            elif ch == "{":
                counts["{"] += 1
                frame.depth += 1
            elif ch == "}":
                counts["}"] += 1
                if len(stack) > 1 and frame.depth == 0:
                    # closes a ${ ... } interpolation
                    stack.pop()
                else:
                    frame.depth -= 1
            elif ch in "()[]":
                counts[ch] += 1
            elif track_angles and ch == "<":
                if nxt != "=":
                    counts["<"] += 1
            elif track_angles and ch == ">":
                prev = content[i - 1] if i else ""
                if prev != "=" and nxt != "=":
                    counts[">"] += 1

        elif state == LINE_COMMENT:
            if ch == "\n":
                stack.pop()

        elif state == BLOCK_COMMENT:
            if ch == "*" and nxt == "/":
                stack.pop()
                i += 2
                continue

        elif state == STRING:
            if ch == "\\":
                i += 2
                continue
            if ch == frame.quote or ch == "\n":
                stack.pop()

        elif state == TEMPLATE:
            if ch == "\\":
                i += 2
                continue
            if ch == "`":
                stack.pop()
            elif ch == "$" and nxt == "{":
                counts["{"] += 1
                stack.append(_Frame(CODE))
                i += 2
                continue

        i += 1

    top = stack[-1].state
    if top in (BLOCK_COMMENT, STRING, TEMPLATE):
        result.unterminated = top
    return result


def balance(content, open_char, jsx=False) -> Balance:
    """Balance for a single delimiter pair, e.g. balance(src, "{")."""
    return scan(content, track_angles=open_char == "<", jsx=jsx).balance(open_char)
