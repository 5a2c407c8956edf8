"""Type checking of expressions and constant evaluation of literals."""

from __future__ import annotations

import copy

from .nodes import (
    Binary,
    BoolLit,
    Call,
    CharLit,
    Expr,
    IntLit,
    Op,
    Postfix,
    RangeExpr,
    RealLit,
    StringLit,
    Unary,
    Var,
    Visitor,
)
from .symbols import ConstValue, SymbolTable
from .typesys import BasicType, Type

_LITERALS = (IntLit, RealLit, StringLit, BoolLit, CharLit)

_ARITHMETIC_KINDS = frozenset(
    {
        BasicType.CHAR,
        BasicType.INT,
        BasicType.FLOAT,
        BasicType.DOUBLE,
        BasicType.BOOL,
    }
)

_NEGATABLE_KINDS = frozenset(
    {BasicType.CHAR, BasicType.INT, BasicType.FLOAT, BasicType.DOUBLE}
)

_ARITHMETIC_SYMBOLS = {Op.MINUS: "-", Op.MUL: "*", Op.DIV: "/"}

_ORDERING_SYMBOLS = {
    Op.LESS: "<",
    Op.LESS_EQ: "<=",
    Op.GREATER: ">",
    Op.GREATER_EQ: ">=",
}

_EQUALITY_SYMBOLS = {Op.EQUAL: "==", Op.NOT_EQUAL: "!="}

_LOGICAL_SYMBOLS = {Op.AND: "&&", Op.OR: "||"}

_ERROR = Type(BasicType.ERROR)
_BOOL = Type(BasicType.BOOL)
_INT = Type(BasicType.INT)


def eval_const_expr(expr: Expr | None) -> ConstValue | None:
    """Return the value of a literal expression, or None for anything else."""
    if isinstance(expr, _LITERALS):
        return expr.value
    return None


class ExpressionChecker(Visitor):
    """Resolves names and assigns types to expression nodes.

    Problems are collected as ``"line N: message"`` strings in ``errors``
    and ``warnings`` rather than raised, so that one pass reports them all.
    """

    def __init__(self, symtab: SymbolTable) -> None:
        self.symtab = symtab
        self.errors: list[str] = []
        self.warnings: list[str] = []

    def error(self, line: int, msg: str) -> None:
        """Record an error found at ``line``."""
        self.errors.append(f"line {line}: {msg}")

    def warning(self, line: int, msg: str) -> None:
        """Record a warning found at ``line``."""
        self.warnings.append(f"line {line}: {msg}")

    # ------------------------------------------------------------ names

    def visit_var(self, node: Var) -> None:
        entry = self.symtab.lookup(node.name)
        if entry is None:
            self.error(node.line, f"Undeclared variable '{node.name}'")
            node.ty = _ERROR
            return

        base = entry.type
        node.ty = base
        node.sym = copy.deepcopy(entry)

        if not node.indices:
            return
        if len(node.indices) > len(base.dims):
            self.error(
                node.line,
                f"Too many indices for array '{node.name}' (expected at most "
                f"{len(base.dims)}, got {len(node.indices)})",
            )
            node.ty = _ERROR
            return
        for position, index in enumerate(node.indices):
            index.accept(self)
            if index.ty.kind is not BasicType.INT:
                self.error(
                    node.line,
                    f"Array index must be int in '{node.name}', index #{position}",
                )
                node.ty = _ERROR
                return
        node.ty = Type(base.kind, base.dims[len(node.indices):])

    # ------------------------------------------------------------ literals

    def visit_int_lit(self, node: IntLit) -> None:
        node.ty = Type(BasicType.INT)

    def visit_real_lit(self, node: RealLit) -> None:
        node.ty = Type(BasicType.FLOAT)

    def visit_string_lit(self, node: StringLit) -> None:
        node.ty = Type(BasicType.STRING)

    def visit_bool_lit(self, node: BoolLit) -> None:
        node.ty = Type(BasicType.BOOL)

    def visit_char_lit(self, node: CharLit) -> None:
        node.ty = Type(BasicType.CHAR)

    # ------------------------------------------------------------ operators

    def visit_unary(self, node: Unary) -> None:
        node.rhs.accept(self)
        operand = node.rhs.ty
        if operand.kind is BasicType.ERROR:
            node.ty = _ERROR
            return

        if node.op is Op.MINUS:
            if operand.kind not in _NEGATABLE_KINDS:
                self.error(node.line, "Unary '-' requires int, char, float, or double!")
                node.ty = _ERROR
                return
            node.ty = operand
        elif node.op is Op.NOT:
            if operand.kind is not BasicType.BOOL:
                self.error(node.line, "Unary '!' requires bool!")
                node.ty = _ERROR
                return
            node.ty = _BOOL
        else:
            self.error(node.line, "Unknown unary operator")
            node.ty = _ERROR

    def visit_binary(self, node: Binary) -> None:
        node.lhs.accept(self)
        node.rhs.accept(self)
        left, right = node.lhs.ty, node.rhs.ty

        if BasicType.ERROR in (left.kind, right.kind):
            node.ty = _ERROR
            return

        op = node.op
        if op is Op.PLUS:
            if left == right:
                node.ty = left
            else:
                self._fail(node, "Binary '+' requires same types!")
        elif op in _ARITHMETIC_SYMBOLS:
            symbol = _ARITHMETIC_SYMBOLS[op]
            if left != right:
                self._fail(node, f"Binary '{symbol}' requires same types!")
            elif left.kind not in _ARITHMETIC_KINDS or right.kind not in _ARITHMETIC_KINDS:
                self._fail(
                    node,
                    f"Binary '{symbol}' requires char, int, float, double or bool!",
                )
            else:
                node.ty = left
        elif op is Op.MOD:
            if left.kind is not BasicType.INT or right.kind is not BasicType.INT:
                self._fail(node, "Binary '%' requires int!")
            else:
                node.ty = _INT
        elif op in _ORDERING_SYMBOLS:
            if left == right:
                node.ty = _BOOL
            else:
                self._fail(node, f"Binary '{_ORDERING_SYMBOLS[op]}' requires same types!")
        elif op in _EQUALITY_SYMBOLS:
            if left == right:
                node.ty = _BOOL
            else:
                self._fail(node, f"Binary '{_EQUALITY_SYMBOLS[op]}' requires same type!")
        elif op in _LOGICAL_SYMBOLS:
            if left.kind is BasicType.BOOL and right.kind is BasicType.BOOL:
                node.ty = _BOOL
            else:
                self._fail(node, f"Binary '{_LOGICAL_SYMBOLS[op]}' requires bool!")
        else:
            self._fail(node, "Operator not implemented")

    def _fail(self, node: Expr, msg: str) -> None:
        self.error(node.line, msg)
        node.ty = _ERROR

    def visit_range_expr(self, node: RangeExpr) -> None:
        node.start.accept(self)
        node.end.accept(self)
        if node.start.ty.kind is not BasicType.INT or node.end.ty.kind is not BasicType.INT:
            self.error(node.line, "Range bounds must be integers")
            node.ty = _ERROR
            return
        node.ty = _INT

    def visit_postfix(self, node: Postfix) -> None:
        node.operand.accept(self)
        operand = node.operand.ty
        if operand.kind is BasicType.ERROR:
            self.error(node.line, "Invalid expression with ERROR type in postfix operation")
            node.ty = _ERROR
            return
        if operand.kind not in _NEGATABLE_KINDS:
            self.error(
                node.line,
                f"Postfix operator is '{operand}' type, and that is not applicable to type.",
            )
            node.ty = _ERROR
            return
        if node.op not in (Op.INC, Op.DEC):
            self.error(
                node.line,
                "Postfix operator not applicable to type, only '++' and '--' are allowed",
            )
            node.ty = _ERROR
            return
        node.ty = operand

    # ------------------------------------------------------------ calls

    def visit_call(self, node: Call) -> None:
        for arg in node.args:
            arg.accept(self)

        entry = self.symtab.lookup(node.callee)
        if entry is None or not entry.is_func:
            self.error(node.line, f"Undeclared function '{node.callee}'")
            node.ty = _ERROR
            return

        params = entry.param_types
        if params is not None:
            if len(node.args) != len(params):
                self.error(node.line, f"Parameter count mismatch in call to '{node.callee}'")
            else:
                for arg, expected in zip(node.args, params):
                    if arg.ty != expected:
                        self.error(
                            node.line,
                            f"Parameter type mismatch in call to '{node.callee}'",
                        )

        node.ty = entry.return_type if entry.return_type is not None else Type(BasicType.VOID)
        node.sym = copy.deepcopy(entry)

        if node.ty.kind is BasicType.ERROR:
            self.error(node.line, f"Function '{node.callee}' has error return type")