"""
Per-declaration reconciliation: bring a declaration's Comment in line with
its signature. Every handler mutates the comment in place and returns
whether anything changed.
"""
import logging
from typing import Callable, Dict, List, Optional, Set, Tuple

from ..config import AutofillConfig
from ..model import AnnotationMember, Declaration, EnumConstant, Method, TypeDecl
from .classifier import classify
from .model import Comment, Tag, TagKind
from .text import (
    describe_declaration,
    describe_param,
    describe_return,
    describe_throws,
    describe_type_param,
    escape_angle_brackets,
    has_angle_brackets,
    strip_generic_brackets,
)

logger = logging.getLogger(__name__)

KIND_WORDS = {
    "class": "class",
    "interface": "interface",
    "enum": "enum",
    "annotation": "interface",
}

_NAMED_KINDS = (TagKind.PARAM, TagKind.TYPE_PARAM, TagKind.THROWS)


# ---------------- Tag-level steps ----------------

def strip_non_standard_tags(comment: Comment) -> bool:
    kept = [t for t in comment.tags if t.is_standard]
    if len(kept) == len(comment.tags):
        return False
    for tag in comment.tags:
        if not tag.is_standard:
            logger.debug("Removing non-standard tag @%s", tag.label)
    comment.tags = kept
    return True


def collapse_duplicates(comment: Comment) -> bool:
    """Keep one tag per (kind, name) for params, type params and throws."""
    keep: Dict[Tuple[TagKind, Optional[str]], Tag] = {}
    for tag in comment.tags:
        if tag.kind not in _NAMED_KINDS:
            continue
        key = (tag.kind, tag.name)
        if key not in keep or (keep[key].is_empty and not tag.is_empty):
            keep[key] = tag

    kept = [t for t in comment.tags if t.kind not in _NAMED_KINDS or keep[(t.kind, t.name)] is t]
    if len(kept) == len(comment.tags):
        return False
    comment.tags = kept
    return True


def _clean_or_regenerate(comment: Comment, existing: Optional[Tag], fresh: Callable[[], Tag]) -> bool:
    """
    Missing or empty tag -> (re)insert a generated one.
    Existing text with generic brackets -> strip them, keep the rest.
    Unbalanced brackets that survive stripping are HTML-escaped.
    """
    if existing is None:
        comment.insert(fresh())
        return True
    if existing.is_empty:
        comment.replace(existing, fresh())
        return True
    if has_angle_brackets(existing.content):
        cleaned = escape_angle_brackets(strip_generic_brackets(existing.content))
        if not cleaned.strip():
            comment.replace(existing, fresh())
            return True
        if cleaned != existing.content:
            existing.content = cleaned
            return True
    return False


def reconcile_type_params(comment: Comment, type_parameters: List[str]) -> bool:
    modified = False
    for name in type_parameters:
        existing = comment.find(TagKind.TYPE_PARAM, name)
        if existing is None or existing.is_empty:
            fresh = Tag.type_param(name, describe_type_param(name))
            if existing is None:
                comment.insert(fresh)
            else:
                comment.replace(existing, fresh)
            modified = True
    return modified


def reconcile_params(comment: Comment, method: Method) -> bool:
    modified = False
    for p in method.parameters:
        existing = comment.find(TagKind.PARAM, p.name)
        modified |= _clean_or_regenerate(
            comment,
            existing,
            lambda p=p: Tag.param(p.name, describe_param(p.name, p.type_name)),
        )
    return modified


def remove_stale_params(comment: Comment, method: Method) -> bool:
    declared: Set[Tuple[TagKind, str]] = {(TagKind.PARAM, p.name) for p in method.parameters}
    declared |= {(TagKind.TYPE_PARAM, name) for name in method.type_parameters}

    stale = [
        t for t in comment.tags
        if t.kind in (TagKind.PARAM, TagKind.TYPE_PARAM) and (t.kind, t.name) not in declared
    ]
    for tag in stale:
        logger.debug("Removing @param %s, no such parameter", tag.name)
        comment.remove(tag)
    return bool(stale)


def reconcile_return(comment: Comment, return_type: Optional[str]) -> bool:
    """
    The declared type is authoritative: stale @return text is replaced,
    never preserved. `None` means the declaration returns no value.
    """
    existing = comment.find_all(TagKind.RETURN)
    if return_type is None:
        for tag in existing:
            comment.remove(tag)
        return bool(existing)

    wanted = describe_return(return_type)
    if len(existing) == 1 and existing[0].content.strip() == wanted:
        return False
    for tag in existing:
        comment.remove(tag)
    comment.insert(Tag.returns(wanted))
    return True


def _simple_name(name: Optional[str]) -> str:
    return strip_generic_brackets(name).rsplit(".", 1)[-1]


def _is_throws_tag(tag: Tag) -> bool:
    return tag.kind is TagKind.THROWS or (tag.kind is TagKind.OTHER and tag.label == "exception")


def _find_throws(comment: Comment, exception: str) -> Optional[Tag]:
    names = [exception]
    clean = strip_generic_brackets(exception)
    if clean != exception:
        names.append(clean)
    for name in names:
        tag = comment.find(TagKind.THROWS, name)
        if tag is None:
            tag = comment.find(TagKind.OTHER, name, label="exception")
        if tag is not None:
            return tag

    # java.io.IOException <-> IOException
    simple = _simple_name(exception)
    for tag in comment.tags:
        if _is_throws_tag(tag) and tag.name and _simple_name(tag.name) == simple:
            return tag
    return None


def reconcile_throws(comment: Comment, throws: List[str]) -> bool:
    modified = False
    for exception in throws:
        clean = strip_generic_brackets(exception)
        existing = _find_throws(comment, exception)
        modified |= _clean_or_regenerate(
            comment,
            existing,
            lambda clean=clean: Tag.throws(clean, describe_throws(clean)),
        )
    return modified


# ---------------- Declaration handlers ----------------

def _reconcile_described(decl, kind_word: str) -> bool:
    if decl.comment is None:
        decl.comment = Comment(description=describe_declaration(decl.name, kind_word))
        return True
    return strip_non_standard_tags(decl.comment)


def reconcile_type(decl: TypeDecl, config: AutofillConfig) -> bool:
    return _reconcile_described(decl, KIND_WORDS.get(decl.kind, "class"))


def reconcile_enum_constant(decl: EnumConstant, config: AutofillConfig) -> bool:
    return _reconcile_described(decl, "enum constant")


def reconcile_method(decl: Method, config: AutofillConfig) -> bool:
    if decl.is_private and not config.include_private_methods:
        return False

    modified = False
    if decl.comment is None:
        if not config.add_method_javadoc:
            return False
        decl.comment = Comment(description=classify(decl))
        modified = True

    comment = decl.comment
    modified |= strip_non_standard_tags(comment)
    modified |= collapse_duplicates(comment)

    if config.add_param_javadoc:
        modified |= remove_stale_params(comment, decl)
        modified |= reconcile_type_params(comment, decl.type_parameters)
        modified |= reconcile_params(comment, decl)

    if config.add_return_javadoc:
        modified |= reconcile_return(comment, decl.return_type)

    if config.add_throws_javadoc:
        modified |= reconcile_throws(comment, decl.throws)

    return modified


def reconcile_annotation_member(decl: AnnotationMember, config: AutofillConfig) -> bool:
    if not config.add_return_javadoc:
        return False
    if decl.comment is None:
        decl.comment = Comment()
    return reconcile_return(decl.comment, decl.return_type or None)


_HANDLERS: Dict[type, Callable[..., bool]] = {
    TypeDecl: reconcile_type,
    EnumConstant: reconcile_enum_constant,
    Method: reconcile_method,
    AnnotationMember: reconcile_annotation_member,
}


def reconcile(decl: Declaration, config: AutofillConfig) -> bool:
    return _HANDLERS[type(decl)](decl, config)
