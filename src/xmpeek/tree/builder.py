"""Simplified tree building for parsed XMP packets.

Converts an lxml element tree into plain XmlNode objects: name, ordered
attributes, the last non-empty text run and ordered children. Comments and
processing instructions are dropped. References to entities declared in the
internal DTD subset are replaced by their text; external entities are not
read. The result owns all of its data and keeps no reference to the lxml
document.
"""

import re
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from lxml import etree

from xmpeek.shared import TreeConfig, get_logger

Attribute = Tuple[str, str]

_XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"

_PREDEFINED_ENTITIES = {"lt": "<", "gt": ">", "amp": "&", "apos": "'", "quot": '"'}
_ENTITY_REFERENCE = re.compile(r"&(#x[0-9A-Fa-f]+|#[0-9]+|[^\s&;#]+);")

# Bounds on entity expansion, mirroring libxml2's own nesting limit
MAX_ENTITY_DEPTH = 40
MAX_ENTITY_TEXT = 1 << 20


@dataclass
class XmlNode:
    """One element of the simplified tree.

    ``path`` holds the element-child indexes leading from the root to this
    node. It is unique within a tree and stable across rebuilds of the same
    document, so consumers can use it to tell same-named siblings apart.
    """

    name: str
    attributes: List[Attribute] = field(default_factory=list)
    children: List["XmlNode"] = field(default_factory=list)
    text: Optional[str] = None
    path: Tuple[int, ...] = ()

    def __post_init__(self) -> None:
        """Validate node values."""
        if not self.name:
            raise ValueError("Node name cannot be empty")

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def depth(self) -> int:
        """Depth of this node in its tree (root = 0)."""
        return len(self.path)

    @property
    def key(self) -> str:
        """Path rendered as a string, ``"/"`` for the root."""
        if not self.path:
            return "/"
        return "/".join(str(index) for index in self.path)

    @property
    def element_count(self) -> int:
        """Number of nodes in the subtree rooted here."""
        return sum(1 for _ in self.iter())

    def iter(self) -> Iterator["XmlNode"]:
        """Iterate over this node and its descendants in document order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def find(self, name: str) -> Optional["XmlNode"]:
        """Find first descendant (or self) with matching name."""
        return next((node for node in self.iter() if node.name == name), None)

    def find_all(self, name: str) -> List["XmlNode"]:
        """Find all descendants (and self) with matching name."""
        return [node for node in self.iter() if node.name == name]

    def get_attribute(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get the first attribute value with matching key."""
        for attr_key, value in self.attributes:
            if attr_key == key:
                return value
        return default

    def to_dict(self) -> Dict[str, Any]:
        """Convert node and its subtree to dictionary representation."""
        result: Dict[str, Any] = {
            "name": self.name,
            "attributes": [list(attr) for attr in self.attributes],
        }

        if self.text is not None:
            result["text"] = self.text

        if self.children:
            result["children"] = [child.to_dict() for child in self.children]

        return result


class XmlTreeBuilder:
    """Builds XmlNode trees from lxml elements.

    Uses an explicit work stack instead of recursion, so documents nested
    deeper than the interpreter's recursion limit are still converted.
    """

    def __init__(
        self,
        config: Optional[TreeConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize tree builder.

        Args:
            config: Tree configuration, defaults to TreeConfig()
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or TreeConfig()
        self.logger = get_logger(__name__, correlation_id, "xml_tree_builder")

    def build(self, element: Any) -> XmlNode:
        """Build the simplified tree rooted at ``element``.

        Args:
            element: Root lxml element of a successfully parsed document

        Returns:
            Root XmlNode of a freshly built tree

        Raises:
            TypeError: If ``element`` is not an XML element
        """
        if not _is_element(element):
            raise TypeError("Tree root must be an XML element")

        root = self._make_node(element, ())
        entities = _EntityExpander(element)
        pending = [(element, root)]
        count = 1

        while pending:
            source, node = pending.pop()
            expand = []
            text: Optional[str] = None
            run = [source.text or ""]

            for child in source:
                if isinstance(child, etree._Entity):
                    # Entity text joins the surrounding run
                    run.append(entities.expand(child.name))
                    run.append(child.tail or "")
                    continue
                text = _trimmed("".join(run)) or text
                run = [child.tail or ""]
                if _is_element(child):
                    child_node = self._make_node(child, node.path + (len(node.children),))
                    node.children.append(child_node)
                    expand.append((child, child_node))

            node.text = _trimmed("".join(run)) or text
            count += len(expand)
            pending.extend(reversed(expand))

        self.logger.debug("Tree built", extra={"root": root.name, "element_count": count})
        return root

    def _make_node(self, element: Any, path: Tuple[int, ...]) -> XmlNode:
        nsmap = element.nsmap if self.config.qualified_names else {}
        attributes = [
            (self._attribute_name(key, nsmap), value)
            for key, value in element.attrib.items()
        ]
        return XmlNode(
            name=self._element_name(element),
            attributes=attributes,
            path=path,
        )

    def _element_name(self, element: Any) -> str:
        local = etree.QName(element).localname
        if self.config.qualified_names and element.prefix:
            return f"{element.prefix}:{local}"
        return local

    def _attribute_name(self, key: str, nsmap: Dict[Optional[str], str]) -> str:
        qname = etree.QName(key)
        if not self.config.qualified_names or qname.namespace is None:
            return qname.localname
        if qname.namespace == _XML_NAMESPACE:
            return f"xml:{qname.localname}"
        for prefix, uri in nsmap.items():
            if uri == qname.namespace and prefix:
                return f"{prefix}:{qname.localname}"
        return qname.localname


class _EntityExpander:
    """Replacement text of the entities declared in a document's internal subset.

    The parser runs with entity resolution off, so references reach the
    builder as entity nodes. Only internal declarations are expanded; nested
    references are followed up to MAX_ENTITY_DEPTH and each expansion is cut
    at MAX_ENTITY_TEXT characters.
    """

    def __init__(self, element: Any) -> None:
        self._declarations: Dict[str, str] = {}
        self._expanded: Dict[str, str] = {}
        dtd = element.getroottree().docinfo.internalDTD
        if dtd is not None:
            for decl in dtd.iterentities():
                if decl.system_url is None and decl.content is not None:
                    self._declarations[decl.name] = decl.content

    def expand(self, name: str, active: Tuple[str, ...] = ()) -> str:
        if name in _PREDEFINED_ENTITIES:
            return _PREDEFINED_ENTITIES[name]
        if name in self._expanded:
            return self._expanded[name]
        content = self._declarations.get(name)
        if content is None or name in active or len(active) >= MAX_ENTITY_DEPTH:
            return ""

        nested = active + (name,)
        text = _ENTITY_REFERENCE.sub(
            lambda match: self._reference(match.group(1), nested), content
        )[:MAX_ENTITY_TEXT]
        self._expanded[name] = text
        return text

    def _reference(self, name: str, active: Tuple[str, ...]) -> str:
        if name.startswith("#"):
            code = int(name[2:], 16) if name.startswith("#x") else int(name[1:])
            return chr(code) if code <= sys.maxunicode else ""
        return self.expand(name, active)


def _is_element(node: Any) -> bool:
    # lxml gives comments, PIs and entities a callable as tag
    return isinstance(node, etree._Element) and isinstance(node.tag, str)


def _trimmed(text: Optional[str]) -> Optional[str]:
    if text is None:
        return None
    text = text.strip()
    return text or None


def build_tree(element: Any, config: Optional[TreeConfig] = None) -> XmlNode:
    """Build the simplified tree rooted at ``element``.

    Examples:
        >>> from lxml import etree
        >>> root = build_tree(etree.fromstring('<root a="1"><child>hi</child></root>'))
        >>> root.attributes, root.children[0].text
        ([('a', '1')], 'hi')
    """
    return XmlTreeBuilder(config).build(element)
