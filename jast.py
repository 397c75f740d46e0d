"""Tree-walking interpreter for programs written directly as a JSON AST."""

from typing import Any, Optional, TextIO
import sys
import json
import logging
from frozendict import frozendict
import operator as op
from dataclasses import dataclass
from functools import partial

dataclass = partial(dataclass, frozen=True)

logger = logging.getLogger("jast")
logger.addHandler(logging.NullHandler())

BITS = 32


class Node:
    pass


@dataclass
class Undefined(Node):
    pass


UNDEFINED = Undefined()


@dataclass
class Num(Node):
    value: int


@dataclass
class Str(Node):
    text: str


@dataclass
class Var(Node):
    name: str


@dataclass
class Let(Node):
    bindings: frozendict[str, Node]


@dataclass
class Print(Node):
    value: Node


@dataclass
class Binary(Node):
    lhs: Node
    rhs: Node


@dataclass
class Sum(Binary):
    pass


@dataclass
class Sub(Binary):
    pass


@dataclass
class Mul(Binary):
    pass


@dataclass
class Div(Binary):
    pass


@dataclass
class Eq(Binary):
    pass


@dataclass
class Fn(Node):
    body: Node


@dataclass
class Call(Node):
    callee: Node
    pars: frozendict[str, Node] = frozendict()


@dataclass
class If(Node):
    cond: Node
    then: Node
    otherwise: Node


@dataclass
class Block(Node):
    nodes: tuple[Node, ...] = ()


class DecodeError(ValueError):
    pass


def fits(n: int, bits: int = BITS) -> bool:
    half = 1 << (bits - 1)
    return -half <= n < half


def wrap(n: int, bits: int = BITS) -> int:
    """Reduce ``n`` into the signed two's complement range of ``bits``."""
    half = 1 << (bits - 1)
    return (n + half) % (half << 1) - half


def trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def utf8(text: str) -> str:
    # json accepts lone surrogate escapes, which cannot be written back out.
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise DecodeError(f"Invalid string {text!r}: {e.reason}") from e
    return text


def decode_map(mapping: dict[str, Any], bits: int = BITS) -> frozendict[str, Node]:
    return frozendict(
        (utf8(name), decode(value, bits)) for name, value in sorted(mapping.items())
    )


def decode(value: Any, bits: int = BITS) -> Node:
    """Select a node class from the shape of a parsed JSON value.

    Shapes are tried in a fixed priority order and object keys not named by
    the selected shape are ignored.
    """
    match value:
        case bool():
            raise DecodeError(f"Unknown node {value!r}")
        case int(n) if fits(n, bits):
            return Num(n)
        case {"str": str(text)}:
            return Str(utf8(text))
        case str(name) | {"var": str(name)}:
            return Var(utf8(name))
        case {"let": dict(bindings)}:
            return Let(decode_map(bindings, bits))
        case {"print": child}:
            return Print(decode(child, bits))
        case {"+": [lhs, rhs]}:
            return Sum(decode(lhs, bits), decode(rhs, bits))
        case {"-": [lhs, rhs]}:
            return Sub(decode(lhs, bits), decode(rhs, bits))
        case {"*": [lhs, rhs]}:
            return Mul(decode(lhs, bits), decode(rhs, bits))
        case {"/": [lhs, rhs]}:
            return Div(decode(lhs, bits), decode(rhs, bits))
        case {"==": [lhs, rhs]}:
            return Eq(decode(lhs, bits), decode(rhs, bits))
        case {"fn": body}:
            return Fn(decode(body, bits))
        case {"call": callee, "pars": dict(pars)}:
            return Call(decode(callee, bits), decode_map(pars, bits))
        case {"call": callee} if "pars" not in value:
            return Call(decode(callee, bits))
        case {"if": cond, "then": then, "else": otherwise}:
            return If(decode(cond, bits), decode(then, bits), decode(otherwise, bits))
        case list(nodes):
            return Block(tuple(decode(node, bits) for node in nodes))
        case None:
            return UNDEFINED
        case _:
            raise DecodeError(f"Unknown node {value!r}")


def loads(source: str, bits: int = BITS) -> Node:
    node = decode(json.loads(source), bits)
    logger.debug("decoded %s", type(node).__name__)
    return node


def show(node: Node) -> str:
    match node:
        case Num(value):
            return str(value)
        case Str(text):
            return text
        case _:
            return "undefined"


ARITHMETIC = {Sum: op.add, Sub: op.sub, Mul: op.mul}


class Evaluator:
    """Evaluates nodes against a stack of variable frames.

    ``frames[0]`` is the global frame. Names resolve in the first frame that
    binds them, counting from the global frame, while ``let`` always binds
    into the last frame.
    """

    def __init__(
        self,
        bits: int = BITS,
        out: Optional[TextIO] = None,
        max_depth: Optional[int] = None,
    ):
        self.bits = bits
        self.out = out
        self.max_depth = max_depth
        self.frames: list[frozendict[str, Node]] = [frozendict()]

    @property
    def depth(self) -> int:
        return len(self.frames) - 1

    def lookup(self, name: str) -> Node:
        for frame in self.frames:
            if name in frame:
                return frame[name]
        return UNDEFINED

    def bind(self, name: str, value: Node):
        self.frames[-1] = self.frames[-1] | {name: value}

    def call(self, callee: Node, pars: frozendict[str, Node]) -> Node:
        if self.max_depth is not None and self.depth >= self.max_depth:
            logger.debug("call depth limit %d reached", self.max_depth)
            return UNDEFINED
        # Popped on every exit, RecursionError included.
        self.frames.append(frozendict())
        try:
            logger.debug("enter call, depth %d", self.depth)
            self.evaluate(Let(pars))
            match self.evaluate(callee):
                case Fn(body):
                    return self.evaluate(body)
                case result:
                    return self.evaluate(result)
        finally:
            self.frames.pop()
            logger.debug("leave call, depth %d", self.depth)

    def evaluate(self, node: Node) -> Node:
        match node:
            case Num() | Str() | Undefined():
                return node
            case Var(name):
                return self.lookup(name)
            case Let(bindings):
                for name, child in bindings.items():
                    self.bind(name, self.evaluate(child))
                return UNDEFINED
            case Print(value):
                print(show(self.evaluate(value)), file=self.out)
                return UNDEFINED
            case Sum(lhs, rhs) | Sub(lhs, rhs) | Mul(lhs, rhs):
                match self.evaluate(lhs), self.evaluate(rhs):
                    case Num(a), Num(b):
                        return Num(wrap(ARITHMETIC[type(node)](a, b), self.bits))
                    case _:
                        return UNDEFINED
            case Div(lhs, rhs):
                match self.evaluate(lhs), self.evaluate(rhs):
                    case Num(), Num(0):
                        return UNDEFINED
                    case Num(a), Num(b):
                        return Num(wrap(trunc_div(a, b), self.bits))
                    case _:
                        return UNDEFINED
            case Eq(lhs, rhs):
                match self.evaluate(lhs), self.evaluate(rhs):
                    case Num(a), Num(b) if a == b:
                        return Num(1)
                    case _:
                        return Num(0)
            case Fn(body):
                return body
            case Call(callee, pars):
                return self.call(callee, pars)
            case If(cond, then, otherwise):
                match self.evaluate(cond):
                    case Num(0) | Undefined():
                        return self.evaluate(otherwise)
                    case Num():
                        return self.evaluate(then)
                    case Str(""):
                        return self.evaluate(otherwise)
                    case Str():
                        return self.evaluate(then)
                    case _:
                        return UNDEFINED
            case Block(nodes):
                result = UNDEFINED
                for child in nodes:
                    result = self.evaluate(child)
                return result
            case _:
                raise RuntimeError(f"Unknown node {node}")


def main():
    try:
        source = sys.stdin.buffer.read().decode("utf-8")
    except (OSError, ValueError) as e:
        sys.exit(f"jast: read: {e}")
    try:
        root = loads(source)
    except (ValueError, RecursionError) as e:
        sys.exit(f"jast: parse: {e}")
    Evaluator().evaluate(root)


if __name__ == "__main__":
    main()
