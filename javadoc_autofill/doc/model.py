from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class TagKind(Enum):
    PARAM = "param"
    TYPE_PARAM = "type_param"
    RETURN = "return"
    THROWS = "throws"
    OTHER = "other"


# Block tags recognised by the javadoc tool; anything else gets stripped.
STANDARD_TAGS = frozenset(
    {
        "author",
        "deprecated",
        "exception",
        "param",
        "return",
        "see",
        "serial",
        "serialData",
        "serialField",
        "since",
        "throws",
        "version",
    }
)

# Canonical order of the structured tags inside one comment.
_RANK = {
    TagKind.TYPE_PARAM: 0,
    TagKind.PARAM: 1,
    TagKind.RETURN: 2,
    TagKind.THROWS: 3,
}


@dataclass
class Tag:
    kind: TagKind
    label: str                 # literal tag word, e.g. "param", "exception", "author"
    name: Optional[str] = None
    content: str = ""

    @classmethod
    def param(cls, name: str, content: str) -> "Tag":
        return cls(TagKind.PARAM, "param", name, content)

    @classmethod
    def type_param(cls, name: str, content: str) -> "Tag":
        return cls(TagKind.TYPE_PARAM, "param", name, content)

    @classmethod
    def returns(cls, content: str) -> "Tag":
        return cls(TagKind.RETURN, "return", None, content)

    @classmethod
    def throws(cls, name: str, content: str) -> "Tag":
        return cls(TagKind.THROWS, "throws", name, content)

    @property
    def is_standard(self) -> bool:
        return self.label in STANDARD_TAGS

    @property
    def is_empty(self) -> bool:
        return not self.content.strip()

    @property
    def rank(self) -> Optional[int]:
        if self.label == "exception":
            return _RANK[TagKind.THROWS]
        return _RANK.get(self.kind)

    def render(self) -> str:
        head = "@" + self.label
        if self.kind is TagKind.TYPE_PARAM:
            head += f" <{self.name}>"
        elif self.name:
            head += " " + self.name
        return f"{head} {self.content}" if self.content else head


@dataclass
class Comment:
    """
    In-memory Javadoc block: free-text description plus ordered block tags.
    Owned by exactly one declaration and mutated in place while reconciling.
    """
    description: str = ""
    tags: List[Tag] = field(default_factory=list)

    def find(self, kind: TagKind, name: Optional[str] = None, label: Optional[str] = None) -> Optional[Tag]:
        for tag in self.tags:
            if tag.kind is not kind:
                continue
            if label is not None and tag.label != label:
                continue
            if name is None or tag.name == name:
                return tag
        return None

    def find_all(self, kind: TagKind) -> List[Tag]:
        return [t for t in self.tags if t.kind is kind]

    def remove(self, tag: Tag) -> None:
        # identity, not equality: two tags may carry identical text
        self.tags = [t for t in self.tags if t is not tag]

    def replace(self, old: Tag, new: Tag) -> None:
        for index, tag in enumerate(self.tags):
            if tag is old:
                self.tags[index] = new
                return
        self.insert(new)

    def insert(self, tag: Tag) -> None:
        rank = tag.rank
        if rank is not None:
            for index, existing in enumerate(self.tags):
                other = existing.rank
                if other is not None and other > rank:
                    self.tags.insert(index, tag)
                    return
        self.tags.append(tag)
