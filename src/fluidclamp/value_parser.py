"""
CSS Value Parser (Layer 1: Raw Value Text → Value Tree).

Turns the text of a single CSS declaration value into an ordered list of
nodes, walks that tree depth-first, and serializes it back.

Node kinds:
    - WordNode      plain token (``1rem``, ``320``, ``auto``, ``@fluid``)
    - StringNode    quoted string
    - DivNode       separator (``,`` ``/`` ``:``) with the whitespace around it
    - SpaceNode     whitespace between sibling nodes
    - CommentNode   ``/* ... */``
    - FunctionNode  ``name(...)`` with an ordered, mutable child list

ROUND-TRIP GUARANTEE:
    stringify(parse(text)) == text for every input.
    Whitespace, comments and unclosed constructs are kept verbatim so that
    an untouched tree serializes back to exactly what was read.

This module knows nothing about clamp() or @fluid().
"""

from dataclasses import dataclass, field, replace
from typing import Callable, List, Tuple, Union


WHITESPACE = " \t\n\r\f"
DIVIDERS = ",/:"
QUOTES = "'\""

# Characters that terminate a word token
_WORD_BREAK = set(WHITESPACE + DIVIDERS + QUOTES + "()")


@dataclass(frozen=True)
class WordNode:
    """A literal token such as ``1rem``, ``16px`` or ``@fluid``."""
    value: str


@dataclass(frozen=True)
class StringNode:
    """A quoted string. ``value`` excludes the quotes, escapes are kept raw."""
    value: str
    quote: str = '"'
    unclosed: bool = False


@dataclass(frozen=True)
class DivNode:
    """
    A divider between arguments.

    ``before`` and ``after`` hold the whitespace that surrounded the
    divider in the source so that ``a , b`` survives a round-trip.
    """
    value: str
    before: str = ""
    after: str = ""


@dataclass(frozen=True)
class SpaceNode:
    value: str


@dataclass(frozen=True)
class CommentNode:
    value: str
    unclosed: bool = False


@dataclass
class FunctionNode:
    """
    A function call, or a bare parenthesized group when ``name`` is empty.

    Properties:
        name: Function name exactly as written (``clamp``, ``@fluid``, ``url``)
        nodes: Ordered child nodes; replacing an entry rewrites that argument
        before: Whitespace after the opening parenthesis
        after: Whitespace before the closing parenthesis
        unclosed: True when the input ended before the closing parenthesis
    """
    name: str
    nodes: List["Node"] = field(default_factory=list)
    before: str = ""
    after: str = ""
    unclosed: bool = False


Node = Union[WordNode, StringNode, DivNode, SpaceNode, CommentNode, FunctionNode]


class _ValueParser:
    """Position-based recursive parser over one value string."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def parse(self) -> List[Node]:
        nodes, _ = self._parse_nodes(inside_function=False)
        return _fold_dividers(nodes)

    def _parse_nodes(self, inside_function: bool) -> Tuple[List[Node], bool]:
        """Parse sibling nodes until ``)`` (inside a function) or end of input."""
        text = self.text
        nodes: List[Node] = []

        while self.pos < len(text):
            ch = text[self.pos]

            if ch in WHITESPACE:
                nodes.append(SpaceNode(self._read_whitespace()))
            elif text.startswith("/*", self.pos):
                nodes.append(self._read_comment())
            elif ch in DIVIDERS:
                nodes.append(DivNode(ch))
                self.pos += 1
            elif ch in QUOTES:
                nodes.append(self._read_string())
            elif ch == "(":
                self.pos += 1
                nodes.append(self._read_function(""))
            elif ch == ")":
                self.pos += 1
                if inside_function:
                    return nodes, True
                # Unbalanced closing parenthesis is kept as plain text
                nodes.append(WordNode(")"))
            else:
                word = self._read_word()
                if self.pos < len(text) and text[self.pos] == "(":
                    self.pos += 1
                    nodes.append(self._read_function(word))
                else:
                    nodes.append(WordNode(word))

        return nodes, False

    def _read_whitespace(self) -> str:
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos] in WHITESPACE:
            self.pos += 1
        return self.text[start:self.pos]

    def _read_comment(self) -> CommentNode:
        start = self.pos + 2
        end = self.text.find("*/", start)
        if end == -1:
            self.pos = len(self.text)
            return CommentNode(self.text[start:], unclosed=True)
        self.pos = end + 2
        return CommentNode(self.text[start:end])

    def _read_string(self) -> StringNode:
        quote = self.text[self.pos]
        start = self.pos + 1
        pos = start
        while pos < len(self.text):
            ch = self.text[pos]
            if ch == "\\":
                pos += 2
                continue
            if ch == quote:
                self.pos = pos + 1
                return StringNode(self.text[start:pos], quote=quote)
            pos += 1
        self.pos = len(self.text)
        return StringNode(self.text[start:], quote=quote, unclosed=True)

    def _read_word(self) -> str:
        start = self.pos
        text = self.text
        while self.pos < len(text):
            ch = text[self.pos]
            if ch in _WORD_BREAK or text.startswith("/*", self.pos):
                break
            if ch == "\\" and self.pos + 1 < len(text):
                self.pos += 2
                continue
            self.pos += 1
        return text[start:self.pos]

    def _read_function(self, name: str) -> FunctionNode:
        """Parse the body of ``name(`` up to and including its ``)``."""
        if name.lower() == "url" and not self._quoted_argument_follows():
            return self._read_raw_url(name)

        children, closed = self._parse_nodes(inside_function=True)
        node = FunctionNode(name=name, unclosed=not closed)

        if children and isinstance(children[0], SpaceNode):
            node.before = children.pop(0).value
        if children and isinstance(children[-1], SpaceNode):
            node.after = children.pop().value

        node.nodes = _fold_dividers(children)
        return node

    def _quoted_argument_follows(self) -> bool:
        pos = self.pos
        while pos < len(self.text) and self.text[pos] in WHITESPACE:
            pos += 1
        return pos < len(self.text) and self.text[pos] in QUOTES

    def _read_raw_url(self, name: str) -> FunctionNode:
        """Unquoted ``url(...)`` contents are a single raw word."""
        end = self.text.find(")", self.pos)
        closed = end != -1
        if not closed:
            end = len(self.text)

        body = self.text[self.pos:end]
        self.pos = end + 1 if closed else end

        stripped = body.strip(WHITESPACE)
        node = FunctionNode(name=name, unclosed=not closed)
        if not stripped:
            node.before = body
            return node

        node.before = body[:len(body) - len(body.lstrip(WHITESPACE))]
        node.after = body[len(body.rstrip(WHITESPACE)):]
        node.nodes = [WordNode(stripped)]
        return node


def _fold_dividers(nodes: List[Node]) -> List[Node]:
    """Move whitespace adjacent to a divider into the divider itself."""
    folded: List[Node] = []
    for node in nodes:
        if isinstance(node, DivNode):
            if folded and isinstance(folded[-1], SpaceNode):
                node = replace(node, before=folded.pop().value)
            folded.append(node)
        elif (
            isinstance(node, SpaceNode)
            and folded
            and isinstance(folded[-1], DivNode)
            and not folded[-1].after
        ):
            folded[-1] = replace(folded[-1], after=node.value)
        else:
            folded.append(node)
    return folded


def parse(text: str) -> List[Node]:
    """
    Parse a CSS value into a list of nodes.

    Never raises: malformed input (unclosed strings, comments or functions,
    stray parentheses) is represented in the tree rather than rejected.
    """
    return _ValueParser(text).parse()


Visitor = Callable[[Node, int, List[Node]], None]


def walk(nodes: List[Node], callback: Visitor) -> None:
    """
    Visit every node depth-first, parents before their arguments.

    The callback receives ``(node, index, siblings)`` where
    ``siblings[index] is node``. It may replace entries of ``siblings`` or
    of ``node.nodes``; the walk descends into whatever sits at ``index``
    once the callback returns.
    """
    for index in range(len(nodes)):
        callback(nodes[index], index, nodes)
        current = nodes[index]
        if isinstance(current, FunctionNode):
            walk(current.nodes, callback)


def stringify_node(node: Node) -> str:
    if isinstance(node, WordNode):
        return node.value
    if isinstance(node, SpaceNode):
        return node.value
    if isinstance(node, DivNode):
        return node.before + node.value + node.after
    if isinstance(node, StringNode):
        return node.quote + node.value + ("" if node.unclosed else node.quote)
    if isinstance(node, CommentNode):
        return "/*" + node.value + ("" if node.unclosed else "*/")
    if isinstance(node, FunctionNode):
        return (
            node.name
            + "("
            + node.before
            + stringify(node.nodes)
            + node.after
            + ("" if node.unclosed else ")")
        )
    raise TypeError(f"Unsupported value node type: {type(node)}")


def stringify(nodes: List[Node]) -> str:
    """Serialize a (possibly modified) node list back to CSS value text."""
    return "".join(stringify_node(node) for node in nodes)

__all__ = [
    "Node",
    "WordNode",
    "StringNode",
    "DivNode",
    "SpaceNode",
    "CommentNode",
    "FunctionNode",
    "parse",
    "walk",
    "stringify",
    "stringify_node",
]
