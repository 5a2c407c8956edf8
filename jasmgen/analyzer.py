"""Semantic analysis of whole programs: scopes, declarations and statements."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from math import prod

from .checker import ExpressionChecker, eval_const_expr
from .nodes import (
    Assign,
    Block,
    ConstDecl,
    DeclList,
    EmptyStmt,
    ExprStmt,
    ForEachStmt,
    ForStmt,
    FuncDecl,
    IfStmt,
    Node,
    Print,
    Println,
    Program,
    RangeExpr,
    Read,
    ReturnStmt,
    Stmt,
    VarDecl,
    VarDeclList,
    WhileStmt,
)
from .symbols import SymbolTable, SymEntry
from .typesys import BasicType, Type

_ERROR = Type(BasicType.ERROR)
_VOID_KINDS = (BasicType.ERROR, BasicType.VOID)


class SemanticError(Exception):
    """Raised when analysis finds one or more errors."""

    def __init__(self, errors: Sequence[str]) -> None:
        self.errors = list(errors)
        super().__init__("\n".join(self.errors))


class SemanticAnalyzer(ExpressionChecker):
    """Checks declarations and statements, filling in types and symbols."""

    def __init__(self, symtab: SymbolTable | None = None) -> None:
        super().__init__(symtab if symtab is not None else SymbolTable())
        self._return_type: Type | None = None
        self._skip_block_scope = 0

    def analyze(self, program: Program) -> list[str]:
        """Analyse ``program``; raise SemanticError on errors, else return warnings."""
        program.accept(self)
        if self.errors:
            raise SemanticError(self.errors)
        return list(self.warnings)

    def _accept_all(self, nodes: Iterable[Node]) -> None:
        for child in nodes:
            child.accept(self)

    # ------------------------------------------------------------ return paths

    def stmt_returns(self, stmt: Stmt | None) -> bool:
        """Return True if ``stmt`` returns on every path through it."""
        if isinstance(stmt, ReturnStmt):
            return True
        if isinstance(stmt, Block):
            return self.all_paths_return(stmt.stmts)
        if isinstance(stmt, IfStmt):
            if stmt.else_stmt is None:
                return False
            return self.stmt_returns(stmt.then_stmt) and self.stmt_returns(stmt.else_stmt)
        return False

    def all_paths_return(self, stmts: Sequence[Stmt]) -> bool:
        """Return True if any statement of the sequence always returns."""
        return any(self.stmt_returns(stmt) for stmt in stmts)

    # ------------------------------------------------------------ program

    def visit_program(self, node: Program) -> None:
        self._accept_all(node.globals)
        self._accept_all(node.stmts)

    # ------------------------------------------------------------ declarations

    def visit_var_decl(self, node: VarDecl) -> None:
        if node.init is not None:
            node.init.accept(self)
            init_ty = node.init.ty
            if init_ty.kind is BasicType.ERROR:
                node.var_type = _ERROR
                return
            widening = (
                node.var_type.kind is BasicType.DOUBLE
                and init_ty.kind is BasicType.FLOAT
            )
            if init_ty != node.var_type and not widening:
                self.error(
                    node.line,
                    f"Type mismatch in initialization of '{node.name}', expected "
                    f"{node.var_type} but got {init_ty}",
                )

        entry = SymEntry(
            name=node.name,
            type=Type(node.var_type.kind, tuple(node.dims)),
            is_const=node.is_const,
            value=eval_const_expr(node.init),
        )
        if node.dims:
            entry.array_values = [0] * prod(node.dims)
        stored = self.symtab.insert(entry)
        node.sym = stored
        if stored is None:
            self.error(node.line, f"Redefinition of variable '{node.name}'")

    def visit_const_decl(self, node: ConstDecl) -> None:
        if node.init is None:
            self.error(node.line, f"Const '{node.name}' must be initialized")
            node.var_type = _ERROR
            return
        node.init.accept(self)
        if node.init.ty.kind is BasicType.ERROR:
            node.var_type = _ERROR
            return
        if node.init.ty != node.var_type:
            self.error(
                node.line,
                f"Type mismatch in initialization of '{node.name}', expected "
                f"{node.var_type} but got {node.init.ty}",
            )
        value = eval_const_expr(node.init)
        if value is None:
            self.error(
                node.line,
                f"Const initializer must be constant expression for '{node.name}'",
            )

        entry = SymEntry(name=node.name, type=node.var_type, is_const=True, value=value)
        stored = self.symtab.insert(entry)
        node.sym = stored
        if stored is None:
            self.error(node.line, f"Redefinition of const '{node.name}'")

    def visit_var_decl_list(self, node: VarDeclList) -> None:
        self._accept_all(node.decls)

    def visit_decl_list(self, node: DeclList) -> None:
        self._accept_all(node.decls)

    def visit_func_decl(self, node: FuncDecl) -> None:
        entry = SymEntry(
            name=node.name,
            type=node.return_type,
            is_func=True,
            return_type=node.return_type,
            param_types=[param.var_type for param in node.params],
        )
        stored = self.symtab.insert(entry)
        node.sym = stored
        if stored is None:
            self.error(node.line, f"Redefinition of function '{node.name}'")
            return

        self._return_type = node.return_type
        self.symtab.enter_scope(True)
        self._accept_all(node.params)

        self._skip_block_scope += 1
        if node.body is not None:
            node.body.accept(self)

        if node.return_type.kind is not BasicType.VOID and isinstance(node.body, Block):
            if not self.all_paths_return(node.body.stmts):
                self.warning(
                    node.line,
                    f"Non-void function '{node.name}' might not return on all paths.",
                )

        self.symtab.exit_scope()
        self._return_type = None

    # ------------------------------------------------------------ simple statements

    def visit_expr_stmt(self, node: ExprStmt) -> None:
        node.expr.accept(self)

    def visit_empty_stmt(self, node: EmptyStmt) -> None:
        """An empty statement has no children, so visiting it checks nothing."""
        self._accept_all(())

    def visit_print(self, node: Print) -> None:
        node.expr.accept(self)
        if node.expr.ty.kind in _VOID_KINDS:
            self.error(node.line, "Invalid argument type in print statement")

    def visit_println(self, node: Println) -> None:
        node.expr.accept(self)
        if node.expr.ty.kind in _VOID_KINDS:
            self.error(node.line, "Invalid argument type in println statement")

    def visit_read(self, node: Read) -> None:
        node.var.accept(self)
        if node.var.ty.kind in _VOID_KINDS:
            self.error(node.line, "Invalid identifier type in read statement")

    # ------------------------------------------------------------ assignment

    def visit_assign(self, node: Assign) -> None:
        node.rhs.accept(self)
        node.lhs.accept(self)
        name = node.lhs.name

        entry = self.symtab.lookup(name)
        if entry is None:
            self.error(node.line, f"Undeclared variable '{name}'")
            node.lhs.ty = _ERROR
            node.rhs.ty = _ERROR
            return

        if node.lhs.indices:
            self._assign_element(node, entry)
            return

        if entry.is_const:
            self.error(node.line, f"Cannot assign to const '{name}'")
        if node.rhs.ty != entry.type:
            self.error(
                node.line,
                f"Type mismatch in assignment to '{name}', expected "
                f"'{entry.type}' but got {node.rhs.ty}",
            )
        entry.value = eval_const_expr(node.rhs)
        node.ty = Type(BasicType.VOID)

    def _assign_element(self, node: Assign, entry: SymEntry) -> None:
        name = node.lhs.name
        dims = entry.type.dims
        if len(node.lhs.indices) != len(dims):
            self.error(node.line, f"Dimension mismatch in assignment to '{name}'")
            return

        dynamic = False
        positions: list[int] = []
        for index, bound in zip(node.lhs.indices, dims):
            index.accept(self)
            if index.ty.kind is not BasicType.INT:
                self.error(node.line, f"Array index must be int in assignment to '{name}'")
                return
            value = eval_const_expr(index)
            if not isinstance(value, int) or isinstance(value, bool):
                dynamic = True
                break
            if not 0 <= value < bound:
                self.error(node.line, f"Index out of bounds in assignment to '{name}'")
                return
            positions.append(value)

        if entry.array_values is None:
            self.error(node.line, f"Variable '{name}' is not an array")
            return

        if dynamic:
            if entry.is_const:
                self.error(node.line, f"Cannot assign to const '{name}'")
            element = Type(entry.type.kind)
            if node.rhs.ty != element:
                self.error(
                    node.line,
                    f"Type mismatch in assignment to '{name}', expected "
                    f"'{element}' but got {node.rhs.ty}",
                )
            node.ty = node.rhs.ty
            return

        linear = 0
        for position, bound in zip(positions, dims):
            linear = linear * bound + position
        values = entry.array_values
        value = eval_const_expr(node.rhs)
        if value is None:
            values.clear()
        elif linear < len(values):
            values[linear] = value

    # ------------------------------------------------------------ control flow

    def visit_if_stmt(self, node: IfStmt) -> None:
        node.cond.accept(self)
        if node.cond.ty.kind is not BasicType.BOOL:
            self.error(node.line, "Condition in if statement must be boolean")

        for branch in (node.then_stmt, node.else_stmt):
            if branch is None:
                continue
            self.symtab.enter_scope()
            if isinstance(branch, Block):
                self._skip_block_scope += 1
            branch.accept(self)
            self.symtab.exit_scope()

    def visit_while_stmt(self, node: WhileStmt) -> None:
        node.cond.accept(self)
        if node.cond.ty.kind is not BasicType.BOOL:
            self.error(node.line, "Condition in while statement must be boolean")
        node.body.accept(self)

    def visit_for_stmt(self, node: ForStmt) -> None:
        self.symtab.enter_scope()
        if node.init is not None:
            node.init.accept(self)
        if node.cond is not None:
            node.cond.accept(self)
            if node.cond.ty.kind is not BasicType.BOOL:
                self.error(node.line, "Condition in for statement must be boolean")
        if node.step is not None:
            node.step.accept(self)
        self._skip_block_scope += 1
        if node.body is not None:
            node.body.accept(self)
        self.symtab.exit_scope()

    def visit_for_each_stmt(self, node: ForEachStmt) -> None:
        node.var.accept(self)
        node.collection.accept(self)
        if node.collection.ty.kind is BasicType.ERROR:
            self.error(node.line, "Invalid collection in foreach loop")
            return
        collection = node.collection
        if isinstance(collection, RangeExpr):
            if (
                collection.start.ty.kind is not BasicType.INT
                or collection.end.ty.kind is not BasicType.INT
            ):
                self.error(node.line, "Range bounds in foreach must be integers")
        else:
            self.error(node.line, "Only integer ranges are supported in foreach loops")
        node.body.accept(self)

    def visit_return_stmt(self, node: ReturnStmt) -> None:
        expected = self._return_type
        if expected is None:
            self.error(node.line, "Return statement outside of function.")
            return
        if expected.kind is BasicType.VOID:
            if node.expr is not None:
                node.expr.accept(self)
                self.error(node.line, "Cannot return a value from a void function.")
            return
        if node.expr is None:
            self.error(node.line, "Return statement missing expression in non-void function.")
            return
        node.expr.accept(self)
        actual = node.expr.ty
        if actual.kind is not BasicType.ERROR and actual != expected:
            self.error(
                node.line,
                f"Return type mismatch: expected '{expected}' but got '{actual}'.",
            )

    def visit_block(self, node: Block) -> None:
        merged = self._skip_block_scope > 0
        if merged:
            self._skip_block_scope -= 1
        else:
            self.symtab.enter_scope()
        self._accept_all(node.stmts)
        if not merged:
            self.symtab.exit_scope()