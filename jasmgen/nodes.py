"""Abstract syntax tree node classes and the visitor protocol."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import Any, ClassVar

from .symbols import SymEntry
from .typesys import Type

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


class Op(enum.Enum):
    """Operators of unary, binary and postfix expressions."""

    PLUS = enum.auto()
    MINUS = enum.auto()
    MUL = enum.auto()
    DIV = enum.auto()
    MOD = enum.auto()
    LESS = enum.auto()
    LESS_EQ = enum.auto()
    GREATER_EQ = enum.auto()
    GREATER = enum.auto()
    EQUAL = enum.auto()
    NOT_EQUAL = enum.auto()
    AND = enum.auto()
    OR = enum.auto()
    NEG = enum.auto()
    NOT = enum.auto()
    INC = enum.auto()
    DEC = enum.auto()


class Visitor:
    """Dispatches a node to the ``visit_<snake_case_class_name>`` method."""

    def visit(self, node: Node) -> Any:
        handler = getattr(self, f"visit_{node.visit_name}", None)
        if handler is None:
            raise TypeError(
                f"{type(self).__name__} cannot visit {type(node).__name__}"
            )
        return handler(node)


@dataclass(eq=False)
class Node:
    """Base of all tree nodes; carries the source line."""

    visit_name: ClassVar[str] = "node"
    line: int = field(default=0, kw_only=True)

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.visit_name = _CAMEL_BOUNDARY.sub("_", cls.__name__).lower()

    def accept(self, visitor: Visitor) -> Any:
        """Hand this node to ``visitor`` and return what it returns."""
        return visitor.visit(self)


# ---------------------------------------------------------------- expressions


@dataclass(eq=False)
class Expr(Node):
    """Base of expressions; ``ty`` is filled in by semantic analysis."""

    ty: Type = field(default_factory=Type, kw_only=True)


@dataclass(eq=False)
class IntLit(Expr):
    value: int


@dataclass(eq=False)
class RealLit(Expr):
    value: float


@dataclass(eq=False)
class StringLit(Expr):
    value: str


@dataclass(eq=False)
class BoolLit(Expr):
    value: bool


@dataclass(eq=False)
class CharLit(Expr):
    value: str


@dataclass(eq=False)
class Var(Expr):
    name: str
    indices: list[Expr] = field(default_factory=list)
    sym: SymEntry | None = None


@dataclass(eq=False)
class Unary(Expr):
    op: Op
    rhs: Expr


@dataclass(eq=False)
class Binary(Expr):
    op: Op
    lhs: Expr
    rhs: Expr


@dataclass(eq=False)
class Postfix(Expr):
    op: Op
    operand: Var


@dataclass(eq=False)
class Call(Expr):
    callee: str
    args: list[Expr] = field(default_factory=list)
    sym: SymEntry | None = None


@dataclass(eq=False)
class RangeExpr(Expr):
    start: Expr
    end: Expr


@dataclass(eq=False)
class Assign(Expr):
    lhs: Var
    rhs: Expr


# ---------------------------------------------------------------- statements


@dataclass(eq=False)
class Stmt(Node):
    """Base of statements."""


@dataclass(eq=False)
class Block(Stmt):
    stmts: list[Stmt] = field(default_factory=list)


@dataclass(eq=False)
class ExprStmt(Stmt):
    expr: Expr


@dataclass(eq=False)
class EmptyStmt(Stmt):
    pass


@dataclass(eq=False)
class Decl(Stmt):
    """Base of declarations."""

    is_const: bool = field(default=False, kw_only=True)


@dataclass(eq=False)
class DeclList(Decl):
    decls: list[Decl] = field(default_factory=list)


@dataclass(eq=False)
class IfStmt(Stmt):
    cond: Expr
    then_stmt: Stmt
    else_stmt: Stmt | None = None


@dataclass(eq=False)
class WhileStmt(Stmt):
    cond: Expr
    body: Stmt


@dataclass(eq=False)
class ForStmt(Stmt):
    init: Stmt | None
    cond: Expr | None
    step: Stmt | None
    body: Stmt | None


@dataclass(eq=False)
class ForEachStmt(Stmt):
    var: Var
    collection: Expr
    body: Stmt


@dataclass(eq=False)
class ReturnStmt(Stmt):
    expr: Expr | None = None


@dataclass(eq=False)
class VarDecl(Decl):
    var_type: Type
    name: str
    init: Expr | None = None
    dims: list[int] = field(default_factory=list)
    sym: SymEntry | None = None


@dataclass(eq=False)
class VarDeclList(VarDecl):
    """Several variables declared in one statement."""

    var_type: Type = field(default_factory=Type)
    name: str = ""
    decls: list[VarDecl] = field(default_factory=list)


@dataclass(eq=False)
class ConstDecl(VarDecl):
    """A constant declaration; always marked ``is_const``."""

    def __post_init__(self) -> None:
        self.is_const = True


@dataclass(eq=False)
class FuncDecl(Decl):
    return_type: Type
    name: str
    params: list[VarDecl] = field(default_factory=list)
    body: Stmt | None = None
    sym: SymEntry | None = None


@dataclass(eq=False)
class Print(Stmt):
    expr: Expr


@dataclass(eq=False)
class Println(Stmt):
    expr: Expr


@dataclass(eq=False)
class Read(Stmt):
    var: Var


# ---------------------------------------------------------------- root


@dataclass(eq=False)
class Program(Node):
    globals: list[Decl] = field(default_factory=list)
    stmts: list[Stmt] = field(default_factory=list)