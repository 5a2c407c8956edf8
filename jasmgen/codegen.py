"""Generation of Jasmin-style JVM assembly from an analysed syntax tree."""

from __future__ import annotations

from .emitter import CodeEmitter, CodeGenContext
from .nodes import (
    Assign,
    Binary,
    Block,
    BoolLit,
    Call,
    CharLit,
    ConstDecl,
    DeclList,
    EmptyStmt,
    Expr,
    ExprStmt,
    ForEachStmt,
    ForStmt,
    FuncDecl,
    IfStmt,
    IntLit,
    Op,
    Postfix,
    Print,
    Println,
    Program,
    RangeExpr,
    Read,
    RealLit,
    ReturnStmt,
    Stmt,
    StringLit,
    Unary,
    Var,
    VarDecl,
    VarDeclList,
    Visitor,
    WhileStmt,
)
from .symbols import SymbolTable, SymEntry
from .typesys import BasicType, Type

_JASM_TYPES = {
    BasicType.INT: "int",
    BasicType.BOOL: "boolean",
    BasicType.STRING: "java.lang.String",
    BasicType.VOID: "void",
}

_FIELD_TYPES = {
    BasicType.INT: "int",
    BasicType.BOOL: "boolean",
    BasicType.STRING: "java.lang.String",
}

_ARITHMETIC = {
    Op.PLUS: "iadd",
    Op.MINUS: "isub",
    Op.MUL: "imul",
    Op.DIV: "idiv",
    Op.MOD: "irem",
}

_COMPARISON_JUMPS = {
    Op.LESS: "iflt",
    Op.LESS_EQ: "ifle",
    Op.GREATER: "ifgt",
    Op.GREATER_EQ: "ifge",
    Op.EQUAL: "ifeq",
    Op.NOT_EQUAL: "ifne",
}

_LOGICAL = {Op.AND: "iand", Op.OR: "ior"}

_PRINT_SIGNATURES = {
    BasicType.INT: "(int)",
    BasicType.BOOL: "(boolean)",
    BasicType.STRING: "(java.lang.String)",
}


def _jasm_type(ty: Type) -> str:
    return _JASM_TYPES.get(ty.kind, "int")


def _print_signature(ty: Type) -> str:
    return _PRINT_SIGNATURES.get(ty.kind, "(int)")


def _param_list(types: list[Type] | None) -> str:
    return ", ".join(_jasm_type(t) for t in types or [])


def _ends_with_return(stmt: Stmt | None) -> bool:
    if isinstance(stmt, ReturnStmt):
        return True
    if isinstance(stmt, Block):
        return bool(stmt.stmts) and _ends_with_return(stmt.stmts[-1])
    if isinstance(stmt, IfStmt):
        return (
            stmt.else_stmt is not None
            and _ends_with_return(stmt.then_stmt)
            and _ends_with_return(stmt.else_stmt)
        )
    return False


class CodeGenVisitor(Visitor):
    """Walks an analysed program and emits assembly through a CodeEmitter."""

    def __init__(
        self,
        emitter: CodeEmitter,
        context: CodeGenContext,
        symtab: SymbolTable | None = None,
    ) -> None:
        self.em = emitter
        self.ctx = context
        self.symtab = symtab if symtab is not None else SymbolTable()

    def generate(self, root: Program) -> None:
        """Emit the whole class for ``root``."""
        root.accept(self)

    # ------------------------------------------------------------ program

    def visit_program(self, node: Program) -> None:
        if not self.ctx.class_name:
            self.ctx.class_name = "example"
        self.em.emit(f"class {self.ctx.class_name}")
        self.em.emit("{")
        self.em.push()

        deferred: list[tuple[VarDecl, Expr]] = []
        for decl in node.globals:
            if isinstance(decl, VarDeclList):
                for inner in decl.decls:
                    self._emit_field(inner, deferred)
            elif isinstance(decl, VarDecl):
                self._emit_field(decl, deferred)

        if deferred:
            self.em.emit("method static void <clinit>()")
            self.em.emit("max_stack 32")
            self.em.emit("max_locals 32")
            self.em.emit("{")
            self.em.push()
            for decl, expr in deferred:
                expr.accept(self)
                self._emit_store(decl.sym)
            self.em.emit("return")
            self.em.pop()
            self.em.emit("}")

        for item in (*node.globals, *node.stmts):
            if isinstance(item, FuncDecl):
                item.accept(self)

        self.em.pop()
        self.em.emit("}")

    def _emit_field(self, decl: VarDecl, deferred: list[tuple[VarDecl, Expr]]) -> None:
        field_type = _FIELD_TYPES.get(decl.var_type.kind)
        if field_type is None:
            return
        instruction = f"field static {field_type} {decl.name}"
        init = decl.init
        if isinstance(init, IntLit):
            instruction += f" = {init.value}"
        elif isinstance(init, BoolLit):
            instruction += " = " + ("1" if init.value else "0")
        elif isinstance(init, StringLit):
            instruction += f' = "{init.value}"'
        elif init is not None:
            deferred.append((decl, init))
        self.em.emit(instruction)

    # ------------------------------------------------------------ functions

    def visit_func_decl(self, node: FuncDecl) -> None:
        entry = node.sym
        return_type = entry.return_type if entry.return_type is not None else entry.type
        if node.name == "main":
            params = "java.lang.String[]"
        else:
            params = _param_list(entry.param_types)
        self.em.emit(
            f"method public static {_jasm_type(return_type)} {node.name}({params})"
        )
        self.em.emit("max_stack 32")
        self.em.emit("max_locals 32")
        self.em.emit("{")
        self.em.push()

        self.ctx.reset_local(len(entry.param_types) if entry.param_types else 0)

        if node.body is not None:
            node.body.accept(self)
        if return_type.kind is BasicType.VOID:
            self.em.emit("return")

        self.em.pop()
        self.em.emit("}")

    # ------------------------------------------------------------ statements

    def visit_block(self, node: Block) -> None:
        for stmt in node.stmts:
            stmt.accept(self)

    def visit_var_decl(self, node: VarDecl) -> None:
        if node.init is not None:
            node.init.accept(self)
            self._emit_store(node.sym)

    def visit_const_decl(self, node: ConstDecl) -> None:
        self.visit_var_decl(node)

    def visit_var_decl_list(self, node: VarDeclList) -> None:
        for decl in node.decls:
            decl.accept(self)

    def visit_decl_list(self, node: DeclList) -> None:
        for decl in node.decls:
            decl.accept(self)

    def visit_assign(self, node: Assign) -> None:
        node.rhs.accept(self)
        self._emit_store(node.lhs.sym)

    def visit_print(self, node: Print) -> None:
        self.em.emit("getstatic java.io.PrintStream java.lang.System.out")
        node.expr.accept(self)
        self.em.emit(
            "invokevirtual void java.io.PrintStream.print" + _print_signature(node.expr.ty)
        )

    def visit_println(self, node: Println) -> None:
        self.em.emit("getstatic java.io.PrintStream java.lang.System.out")
        node.expr.accept(self)
        self.em.emit(
            "invokevirtual void java.io.PrintStream.println"
            + _print_signature(node.expr.ty)
        )

    def visit_read(self, node: Read) -> None:
        return None

    def visit_expr_stmt(self, node: ExprStmt) -> None:
        if node.expr is None:
            return
        node.expr.accept(self)
        if node.expr.ty.kind not in (BasicType.VOID, BasicType.ERROR):
            self.em.emit("pop")

    def visit_empty_stmt(self, node: EmptyStmt) -> None:
        return None

    def visit_return_stmt(self, node: ReturnStmt) -> None:
        if node.expr is None:
            self.em.emit("return")
            return
        node.expr.accept(self)
        if node.expr.ty.kind is BasicType.STRING:
            self.em.emit("areturn")
        else:
            self.em.emit("ireturn")

    # ------------------------------------------------------------ control flow

    def visit_if_stmt(self, node: IfStmt) -> None:
        if node.else_stmt is not None:
            else_label = self.ctx.new_label()
            end_label = self.ctx.new_label()
            node.cond.accept(self)
            self.em.emit(f"ifeq {else_label}")
            node.then_stmt.accept(self)
            if not _ends_with_return(node.then_stmt):
                self.em.emit(f"goto {end_label}")
            self.em.emit(f"{else_label}:")
            node.else_stmt.accept(self)
            self.em.emit(f"{end_label}:")
            self.em.emit("nop")
        else:
            end_label = self.ctx.new_label()
            node.cond.accept(self)
            self.em.emit(f"ifeq {end_label}")
            node.then_stmt.accept(self)
            self.em.emit(f"{end_label}:")
            self.em.emit("nop")

    def visit_while_stmt(self, node: WhileStmt) -> None:
        start = self.ctx.new_label()
        end = self.ctx.new_label()
        self.em.emit(f"{start}:")
        node.cond.accept(self)
        self.em.emit(f"ifeq {end}")
        node.body.accept(self)
        self.em.emit(f"goto {start}")
        self.em.emit(f"{end}:")

    def visit_for_stmt(self, node: ForStmt) -> None:
        if node.init is not None:
            node.init.accept(self)
        start = self.ctx.new_label()
        end = self.ctx.new_label()
        self.em.emit(f"{start}:")
        if node.cond is not None:
            node.cond.accept(self)
            self.em.emit(f"ifeq {end}")
        if node.body is not None:
            node.body.accept(self)
        if node.step is not None:
            node.step.accept(self)
        self.em.emit(f"goto {start}")
        self.em.emit(f"{end}:")

    def visit_for_each_stmt(self, node: ForEachStmt) -> None:
        rng = node.collection
        if not isinstance(rng, RangeExpr):
            return
        index = node.var.sym

        rng.start.accept(self)
        self._emit_store(index)

        rng.start.accept(self)
        rng.end.accept(self)
        ascending = self.ctx.new_label()
        descending = self.ctx.new_label()
        end = self.ctx.new_label()
        self.em.emit(f"if_icmple {ascending}")
        self.em.emit(f"goto {descending}")

        for label, step, jump in (
            (ascending, "iadd", "if_icmple"),
            (descending, "isub", "if_icmpge"),
        ):
            self.em.emit(f"{label}:")
            body = self.ctx.new_label()
            self.em.emit(f"goto {body}_cond")
            self.em.emit(f"{body}:")
            node.body.accept(self)
            self._emit_load(index)
            self.em.emit("iconst_1")
            self.em.emit(step)
            self._emit_store(index)
            self.em.emit(f"{body}_cond:")
            self._emit_load(index)
            rng.end.accept(self)
            self.em.emit(f"{jump} {body}")
            self.em.emit(f"goto {end}")

        self.em.emit(f"{end}:")

    # ------------------------------------------------------------ literals

    def visit_int_lit(self, node: IntLit) -> None:
        value = node.value
        if value == -1:
            self.em.emit("iconst_m1")
        elif 0 <= value <= 5:
            self.em.emit(f"iconst_{value}")
        elif -128 <= value <= 127:
            self.em.emit(f"bipush {value}")
        else:
            self.em.emit(f"ldc {value}")

    def visit_bool_lit(self, node: BoolLit) -> None:
        self.em.emit("iconst_1" if node.value else "iconst_0")

    def visit_string_lit(self, node: StringLit) -> None:
        self.em.emit(f'ldc "{node.value}"')

    def visit_char_lit(self, node: CharLit) -> None:
        self.em.emit(f"ldc '{node.value[:1]}'")

    def visit_real_lit(self, node: RealLit) -> None:
        self.em.emit(f"ldc2_w {node.value:f}")

    # ------------------------------------------------------------ expressions

    def visit_var(self, node: Var) -> None:
        self._emit_load(node.sym)

    def visit_unary(self, node: Unary) -> None:
        node.rhs.accept(self)
        if node.op is Op.MINUS:
            self.em.emit("ineg")
        elif node.op is Op.NOT:
            true_label = self.ctx.new_label()
            end_label = self.ctx.new_label()
            self.em.emit(f"ifeq {true_label}")
            self.em.emit("iconst_0")
            self.em.emit(f"goto {end_label}")
            self.em.emit(f"{true_label}:")
            self.em.emit("iconst_1")
            self.em.emit(f"{end_label}:")

    def visit_binary(self, node: Binary) -> None:
        node.lhs.accept(self)
        node.rhs.accept(self)
        op = node.op
        if op in _ARITHMETIC:
            self.em.emit(_ARITHMETIC[op])
        elif op in _COMPARISON_JUMPS:
            true_label = self.ctx.new_label()
            end_label = self.ctx.new_label()
            self.em.emit("isub")
            self.em.emit(f"{_COMPARISON_JUMPS[op]} {true_label}")
            self.em.emit("iconst_0")
            self.em.emit(f"goto {end_label}")
            self.em.emit(f"{true_label}:")
            self.em.emit("iconst_1")
            self.em.emit(f"{end_label}:")
        elif op in _LOGICAL:
            self.em.emit(_LOGICAL[op])

    def visit_call(self, node: Call) -> None:
        for arg in node.args:
            arg.accept(self)
        entry = node.sym
        return_type = entry.return_type if entry.return_type is not None else entry.type
        self.em.emit(
            f"invokestatic {_jasm_type(return_type)} "
            f"{self.ctx.class_name}.{entry.name}({_param_list(entry.param_types)})"
        )

    def visit_postfix(self, node: Postfix) -> None:
        entry = node.operand.sym
        step = "iadd" if node.op is Op.INC else "isub"
        if entry.is_global:
            desc = _jasm_type(node.ty)
            field_name = f"{self.ctx.class_name}.{entry.name}"
            self.em.emit(f"getstatic {desc} {field_name}")
            self.em.emit("dup")
            self.em.emit("iconst_1")
            self.em.emit(step)
            self.em.emit(f"putstatic {desc} {field_name}")
        else:
            self.em.emit(f"iload {entry.slot}")
            self.em.emit("dup")
            self.em.emit("iconst_1")
            self.em.emit(step)
            self.em.emit(f"istore {entry.slot}")

    def visit_range_expr(self, node: RangeExpr) -> None:
        node.start.accept(self)
        node.end.accept(self)

    # ------------------------------------------------------------ helpers

    def _field_descriptor(self, entry: SymEntry) -> str:
        if entry.type.kind is BasicType.STRING:
            return "java.lang.String"
        if entry.type.kind is BasicType.BOOL:
            return "boolean"
        return "int"

    def _emit_load(self, entry: SymEntry) -> None:
        if entry.is_global:
            self.em.emit(
                f"getstatic {self._field_descriptor(entry)} "
                f"{self.ctx.class_name}.{entry.name} "
            )
        else:
            self.em.emit(f"iload {entry.slot}")

    def _emit_store(self, entry: SymEntry) -> None:
        if entry.is_global:
            self.em.emit(
                f"putstatic {self._field_descriptor(entry)} "
                f"{self.ctx.class_name}.{entry.name} "
            )
        else:
            self.em.emit(f"istore {entry.slot}")