import re
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..model import CommentSpan

_WHITESPACE = re.compile(r"\s*")


class SourceMapError(ValueError):
    pass


class SourceMap:
    """
    Token-level index over one Java source text.

    javalang tokens carry line/column positions but no char offsets and drop
    comments entirely, so the text is re-walked here: every token gets its
    exact offset, the comments found in front of it, and the brace/paren
    nesting it sits at. `{`/`}` and `(`/`)` themselves report the outer level.
    """

    def __init__(self, code: str, tokens: Sequence) -> None:
        self.code = code
        self.tokens = list(tokens)
        self.offsets: List[int] = []
        self.leading: List[List[CommentSpan]] = []
        self.brace_depth: List[int] = []
        self.paren_depth: List[int] = []
        self.matching: Dict[int, int] = {}
        self._index()

    # ---------------- Indexing ----------------

    def _skip_trivia(self, pos: int) -> Tuple[int, List[CommentSpan]]:
        code = self.code
        comments: List[CommentSpan] = []
        while True:
            pos = _WHITESPACE.match(code, pos).end()
            if code.startswith("//", pos):
                end = code.find("\n", pos)
                end = len(code) if end == -1 else end
            elif code.startswith("/*", pos):
                end = code.find("*/", pos + 2)
                if end == -1:
                    raise SourceMapError(f"unterminated comment at offset {pos}")
                end += 2
            else:
                return pos, comments
            comments.append(CommentSpan(pos, end, code[pos:end]))
            pos = end

    def _index(self) -> None:
        pos = 0
        braces = parens = 0
        open_braces: List[int] = []

        for i, tok in enumerate(self.tokens):
            pos, comments = self._skip_trivia(pos)
            if not self.code.startswith(tok.value, pos):
                raise SourceMapError(f"token {tok.value!r} not found at offset {pos}")
            self.offsets.append(pos)
            self.leading.append(comments)
            pos += len(tok.value)

            v = tok.value
            if v == "}":
                braces -= 1
                if open_braces:
                    self.matching[open_braces.pop()] = i
            elif v == ")":
                parens -= 1
            self.brace_depth.append(braces)
            self.paren_depth.append(parens)
            if v == "{":
                braces += 1
                open_braces.append(i)
            elif v == "(":
                parens += 1

    # ---------------- Queries ----------------

    def __len__(self) -> int:
        return len(self.tokens)

    def value(self, i: int) -> Optional[str]:
        if 0 <= i < len(self.tokens):
            return self.tokens[i].value
        return None

    def at_level(self, i: int, depth: int) -> bool:
        return self.brace_depth[i] == depth and self.paren_depth[i] == 0

    def find(self, start: int, predicate: Callable[[int], bool], stop: Optional[int] = None) -> Optional[int]:
        stop = len(self.tokens) if stop is None else min(stop, len(self.tokens))
        for i in range(max(start, 0), stop):
            if predicate(i):
                return i
        return None

    def declaration_start(self, anchor: int, boundaries: Sequence[str]) -> int:
        """
        Walk back from `anchor` over modifiers, annotations (and their
        argument lists) and type parameters to the first token of the
        declaration.
        """
        j, parens = anchor - 1, 0
        while j >= 0:
            v = self.tokens[j].value
            if v == ")":
                parens += 1
            elif v == "(":
                parens -= 1
            elif parens == 0 and v in boundaries:
                break
            j -= 1
        return j + 1

    def javadoc_before(self, i: int) -> Optional[CommentSpan]:
        for span in reversed(self.leading[i]):
            if span.is_javadoc:
                return span
        return None

    def line_prefix(self, offset: int) -> str:
        line_start = self.code.rfind("\n", 0, offset) + 1
        return self.code[line_start:offset]
