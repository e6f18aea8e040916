import copy
from dataclasses import dataclass, field
from typing import Any, List, Literal, Optional, Tuple, Union

from .doc.model import Comment

TypeKind = Literal["class", "interface", "enum", "annotation"]


@dataclass
class CommentSpan:
    start: int                # char offset of "/*" or "//"
    end: int                  # char offset just past the comment
    text: str

    @property
    def is_javadoc(self) -> bool:
        return self.text.startswith("/**") and self.text != "/**/"


@dataclass
class SourceSite:
    offset: int                         # char offset of the declaration's first token
    indent: str = ""                    # leading whitespace of that line
    first_on_line: bool = True
    javadoc: Optional[CommentSpan] = None


class _Documented:
    """
    Shared behaviour of every declaration variant: the parsed comment is
    snapshotted on construction so the serializer can tell which comments
    actually changed.
    """
    comment: Optional[Comment]
    original_comment: Optional[Comment]

    def __post_init__(self) -> None:
        self.original_comment = copy.deepcopy(self.comment)

    @property
    def comment_changed(self) -> bool:
        return self.comment is not None and self.comment != self.original_comment


@dataclass
class TypeDecl(_Documented):
    name: str
    kind: TypeKind = "class"
    comment: Optional[Comment] = None
    site: Optional[SourceSite] = None
    original_comment: Optional[Comment] = field(default=None, repr=False, compare=False)


@dataclass
class EnumConstant(_Documented):
    name: str
    comment: Optional[Comment] = None
    site: Optional[SourceSite] = None
    original_comment: Optional[Comment] = field(default=None, repr=False, compare=False)


@dataclass
class Parameter:
    name: str
    type_name: str            # raw type text (e.g. List<Item>)


@dataclass
class Method(_Documented):
    name: str
    parameters: List[Parameter] = field(default_factory=list)
    type_parameters: List[str] = field(default_factory=list)
    return_type: Optional[str] = None       # None: declares no value (void, constructors)
    throws: List[str] = field(default_factory=list)
    modifiers: Tuple[str, ...] = ()
    is_constructor: bool = False
    body: Any = field(default=None, repr=False, compare=False)
    comment: Optional[Comment] = None
    site: Optional[SourceSite] = None
    original_comment: Optional[Comment] = field(default=None, repr=False, compare=False)

    @property
    def is_private(self) -> bool:
        return "private" in self.modifiers


@dataclass
class AnnotationMember(_Documented):
    name: str
    return_type: str = ""
    comment: Optional[Comment] = None
    site: Optional[SourceSite] = None
    original_comment: Optional[Comment] = field(default=None, repr=False, compare=False)


Declaration = Union[TypeDecl, EnumConstant, Method, AnnotationMember]


@dataclass
class JavaUnit:
    """
    One parsed compilation unit: the original text plus every documentable
    declaration in source order.
    """
    code: str
    source_file: Optional[str] = None
    declarations: List[Declaration] = field(default_factory=list)
    newline: str = "\n"
    bom: str = ""

    def types(self) -> List[Union[TypeDecl, EnumConstant]]:
        return [d for d in self.declarations if isinstance(d, (TypeDecl, EnumConstant))]

    def methods(self) -> List[Method]:
        return [d for d in self.declarations if isinstance(d, Method)]

    def annotation_members(self) -> List[AnnotationMember]:
        return [d for d in self.declarations if isinstance(d, AnnotationMember)]
