import logging
from typing import Any, List, Optional, Sequence, Tuple

import javalang  # type: ignore

from ..doc.javadoc import parse_javadoc, render_javadoc
from ..errors import JavaParseError
from ..model import (
    AnnotationMember,
    Declaration,
    EnumConstant,
    JavaUnit,
    Method,
    Parameter,
    SourceSite,
    TypeDecl,
)
from .source_map import SourceMap, SourceMapError

logger = logging.getLogger(__name__)

BOM = "\ufeff"


class JavaAdapter:
    """
    Java source <-> JavaUnit.

    Parsing runs javalang over the text and collects every documentable
    declaration reachable through type bodies:
      - top-level and member types (class / interface / enum / @interface)
      - methods and constructors
      - enum constants
      - annotation members
    Each declaration is pinned to its exact position in the text through a
    SourceMap, so rendering only splices the Javadoc blocks that changed and
    leaves every other byte untouched.
    """

    language = "java"

    TYPE_NODES = (
        javalang.tree.ClassDeclaration,
        javalang.tree.InterfaceDeclaration,
        javalang.tree.EnumDeclaration,
        javalang.tree.AnnotationDeclaration,
    )
    TYPE_KEYWORDS = {"class", "interface", "enum"}
    MEMBER_BOUNDARIES = (";", "{", "}")
    CONSTANT_BOUNDARIES = (";", "{", "}", ",")

    # ---------------- Helpers ----------------

    def _type_kind(self, node) -> str:
        if isinstance(node, javalang.tree.InterfaceDeclaration):
            return "interface"
        if isinstance(node, javalang.tree.EnumDeclaration):
            return "enum"
        if isinstance(node, javalang.tree.AnnotationDeclaration):
            return "annotation"
        return "class"

    def _type_text(self, t, varargs: bool = False) -> str:
        """
        Source-like text of a javalang Type node, generics included
        (e.g. "Map<String, List<Item>>", "int[]", "String...").
        None means void.
        """
        if t is None:
            return "void"

        text = getattr(t, "name", None) or "Object"
        args = getattr(t, "arguments", None)
        if args:
            text += "<" + ", ".join(self._type_argument_text(a) for a in args) + ">"
        sub = getattr(t, "sub_type", None)
        if sub is not None:
            text += "." + self._type_text(sub)
        dims = getattr(t, "dimensions", None) or []
        text += "[]" * len(dims)
        if varargs:
            text += "..."
        return text

    def _type_argument_text(self, arg) -> str:
        pattern = getattr(arg, "pattern_type", None)
        inner = getattr(arg, "type", None)
        if pattern == "?" or inner is None:
            return "?"
        if pattern in ("extends", "super"):
            return f"? {pattern} {self._type_text(inner)}"
        return self._type_text(inner)

    def _members(self, node) -> List[Any]:
        body = getattr(node, "body", None)
        if isinstance(node, javalang.tree.EnumDeclaration):
            if body is None:
                return []
            return list(body.constants or []) + list(body.declarations or [])
        return list(body or [])

    def _site(self, smap: SourceMap, start: int) -> SourceSite:
        offset = smap.offsets[start]
        prefix = smap.line_prefix(offset)
        first_on_line = not prefix.strip()
        indent = prefix if first_on_line else prefix[: len(prefix) - len(prefix.lstrip())]
        return SourceSite(
            offset=offset,
            indent=indent,
            first_on_line=first_on_line,
            javadoc=smap.javadoc_before(start),
        )

    def _comment_at(self, site: SourceSite):
        return parse_javadoc(site.javadoc.text) if site.javadoc else None

    # ---------------- Parsing entry points ----------------

    def parse_to_ast(self, code: str) -> Tuple[list, Any]:
        try:
            tokens = list(javalang.tokenizer.tokenize(code))
            tree = javalang.parser.Parser(tokens).parse()
        except javalang.parser.JavaSyntaxError as e:
            raise JavaParseError(f"Java syntax error: {getattr(e, 'description', e)}") from e
        except javalang.tokenizer.LexerError as e:
            raise JavaParseError(f"Java lexer error: {e}") from e
        except Exception as e:
            raise JavaParseError(f"Failed to parse Java code: {e}") from e
        return tokens, tree

    def build_unit(self, code: str, source_file: Optional[str] = None) -> JavaUnit:
        bom = BOM if code.startswith(BOM) else ""
        text = code[len(bom):]
        tokens, tree = self.parse_to_ast(text)
        try:
            smap = SourceMap(text, tokens)
        except SourceMapError as e:
            raise JavaParseError(f"Cannot map tokens back to source: {e}") from e

        unit = JavaUnit(
            code=text,
            source_file=source_file,
            newline="\r\n" if "\r\n" in text else "\n",
            bom=bom,
        )

        cursor = 0
        for t in tree.types or []:
            if isinstance(t, self.TYPE_NODES):
                cursor = self._collect_type(t, smap, cursor, 0, unit.declarations)
        return unit

    # ---------------- Core processing ----------------

    def _collect_type(self, node, smap: SourceMap, cursor: int, depth: int, out: List[Declaration]) -> int:
        keyword = smap.find(
            cursor,
            lambda i: smap.value(i) in self.TYPE_KEYWORDS
            and smap.at_level(i, depth)
            and smap.value(i + 1) == node.name
            and smap.value(i - 1) != ".",
        )
        if keyword is None:
            logger.debug("Could not locate type %s in source", node.name)
            return cursor

        anchor = keyword - 1 if smap.value(keyword - 1) == "@" else keyword
        start = smap.declaration_start(anchor, self.MEMBER_BOUNDARIES)
        site = self._site(smap, start)
        out.append(TypeDecl(name=node.name, kind=self._type_kind(node), comment=self._comment_at(site), site=site))

        open_brace = smap.find(keyword, lambda i: smap.value(i) == "{" and smap.at_level(i, depth))
        if open_brace is None or open_brace not in smap.matching:
            return keyword + 1
        close_brace = smap.matching[open_brace]

        inner = open_brace + 1
        for member in self._members(node):
            inner = self._collect_member(member, smap, inner, depth + 1, close_brace, out)
        return close_brace + 1

    def _collect_member(self, m, smap: SourceMap, cursor: int, depth: int, stop: int, out: List[Declaration]) -> int:
        if isinstance(m, self.TYPE_NODES):
            return self._collect_type(m, smap, cursor, depth, out)

        if isinstance(m, javalang.tree.FieldDeclaration):
            # only skipped over, so initializers never shadow a later member
            first = m.declarators[0].name if m.declarators else None
            i = self._find_name(smap, cursor, depth, first, ("=", ";", ",", "["), stop)
            if i is None:
                return cursor
            end = smap.find(i, lambda k: smap.value(k) == ";" and smap.at_level(k, depth), stop)
            return cursor if end is None else end + 1

        if isinstance(m, javalang.tree.EnumConstantDeclaration):
            i = self._find_name(smap, cursor, depth, m.name, ("(", "{", ",", ";", "}"), stop)
            if i is None:
                logger.debug("Could not locate enum constant %s in source", m.name)
                return cursor
            start = smap.declaration_start(i, self.CONSTANT_BOUNDARIES)
            site = self._site(smap, start)
            out.append(EnumConstant(name=m.name, comment=self._comment_at(site), site=site))
            end = smap.find(i, lambda k: smap.value(k) in (",", ";") and smap.at_level(k, depth), stop)
            return stop if end is None else end + 1

        if isinstance(m, (javalang.tree.MethodDeclaration, javalang.tree.ConstructorDeclaration, javalang.tree.AnnotationMethod)):
            i = self._find_name(smap, cursor, depth, m.name, ("(",), stop)
            if i is None:
                logger.debug("Could not locate member %s in source", m.name)
                return cursor
            start = smap.declaration_start(i, self.MEMBER_BOUNDARIES)
            site = self._site(smap, start)
            out.append(self._declaration_for(m, site))
            return self._member_end(m, smap, i, depth, stop) + 1

        # initializer blocks and stray semicolons
        return cursor

    def _find_name(self, smap: SourceMap, cursor: int, depth: int, name: Optional[str], followers: Sequence[str], stop: int) -> Optional[int]:
        if not name:
            return None
        return smap.find(
            cursor,
            lambda i: smap.value(i) == name
            and smap.at_level(i, depth)
            and smap.value(i + 1) in followers
            and smap.value(i - 1) not in (".", "@", "new"),
            stop,
        )

    def _member_end(self, m, smap: SourceMap, name_index: int, depth: int, stop: int) -> int:
        has_body = not isinstance(m, javalang.tree.AnnotationMethod) and getattr(m, "body", None) is not None
        if has_body:
            brace = smap.find(name_index, lambda k: smap.value(k) == "{" and smap.at_level(k, depth), stop)
            if brace is not None and brace in smap.matching:
                return smap.matching[brace]
        end = smap.find(name_index, lambda k: smap.value(k) == ";" and smap.at_level(k, depth), stop)
        return name_index if end is None else end

    def _declaration_for(self, m, site: SourceSite) -> Declaration:
        comment = self._comment_at(site)

        if isinstance(m, javalang.tree.AnnotationMethod):
            return_type = self._type_text(m.return_type) + "[]" * len(getattr(m, "dimensions", None) or [])
            return AnnotationMember(name=m.name, return_type=return_type, comment=comment, site=site)

        is_ctor = isinstance(m, javalang.tree.ConstructorDeclaration)
        params = [
            Parameter(name=p.name, type_name=self._type_text(p.type, varargs=bool(getattr(p, "varargs", False))))
            for p in (m.parameters or [])
        ]
        return_type = None
        if not is_ctor and m.return_type is not None:
            return_type = self._type_text(m.return_type)

        return Method(
            name=m.name,
            parameters=params,
            type_parameters=[tp.name for tp in (m.type_parameters or [])],
            return_type=return_type,
            throws=list(m.throws or []),
            modifiers=tuple(sorted(m.modifiers or ())),
            is_constructor=is_ctor,
            body=m.body,
            comment=comment,
            site=site,
        )

    # ---------------- Serialization ----------------

    def render(self, unit: JavaUnit) -> str:
        """
        Source text of the unit with every changed comment re-rendered.
        Unchanged declarations keep their original bytes.
        """
        code = unit.code
        edits = []
        for decl in unit.declarations:
            if decl.site is None or not decl.comment_changed:
                continue
            edits.append(self._edit_for(decl, code, unit.newline))

        for start, end, replacement in sorted(edits, key=lambda e: e[0], reverse=True):
            code = code[:start] + replacement + code[end:]
        return unit.bom + code

    def _edit_for(self, decl: Declaration, code: str, newline: str) -> Tuple[int, int, str]:
        site = decl.site
        if site.javadoc is not None:
            line_start = code.rfind("\n", 0, site.javadoc.start) + 1
            prefix = code[line_start:site.javadoc.start]
            indent = prefix if not prefix.strip() else site.indent
            return site.javadoc.start, site.javadoc.end, render_javadoc(decl.comment, indent, newline)

        if site.first_on_line:
            block = render_javadoc(decl.comment, site.indent, newline)
            return site.offset, site.offset, block + newline + site.indent
        block = render_javadoc(decl.comment, site.indent, newline, compact=True)
        return site.offset, site.offset, block + " "
