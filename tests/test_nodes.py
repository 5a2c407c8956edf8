import pytest

from jasmgen.nodes import (
    Assign,
    Binary,
    Block,
    BoolLit,
    ConstDecl,
    ForEachStmt,
    IfStmt,
    IntLit,
    Op,
    Program,
    RangeExpr,
    ReturnStmt,
    StringLit,
    Var,
    VarDecl,
    VarDeclList,
    Visitor,
)
from jasmgen.typesys import BasicType, Type


class Echo(Visitor):
    def visit_int_lit(self, node):
        return self.visit_int_lit, node

    def visit_var_decl(self, node):
        return self.visit_var_decl, node

    def visit_var_decl_list(self, node):
        return self.visit_var_decl_list, node

    def visit_const_decl(self, node):
        return self.visit_const_decl, node

    def visit_for_each_stmt(self, node):
        return self.visit_for_each_stmt, node

    def visit_range_expr(self, node):
        return self.visit_range_expr, node

    def visit_if_stmt(self, node):
        return self.visit_if_stmt, node


class Summer(Visitor):
    def visit_int_lit(self, node):
        return node.value

    def visit_binary(self, node):
        left = node.lhs.accept(self)
        right = node.rhs.accept(self)
        return left + right if node.op is Op.PLUS else left - right


def test_accept_returns_visitor_result():
    v = Echo()
    node = IntLit(7)
    method, got = node.accept(v)
    assert method == v.visit_int_lit
    assert got is node


@pytest.mark.parametrize(
    "node, attr",
    [
        (VarDecl(Type(BasicType.INT), "x"), "visit_var_decl"),
        (VarDeclList(decls=[]), "visit_var_decl_list"),
        (ConstDecl(Type(BasicType.INT), "c", IntLit(1)), "visit_const_decl"),
        (RangeExpr(IntLit(0), IntLit(3)), "visit_range_expr"),
        (IfStmt(BoolLit(True), Block()), "visit_if_stmt"),
        (
            ForEachStmt(Var("i"), RangeExpr(IntLit(0), IntLit(3)), Block()),
            "visit_for_each_stmt",
        ),
    ],
)
def test_dispatch_uses_most_specific_class(node, attr):
    v = Echo()
    method, got = v.visit(node)
    assert method == getattr(v, attr)
    assert got is node


def test_recursive_visit_evaluates_tree():
    tree = Binary(Op.MINUS, Binary(Op.PLUS, IntLit(10), IntLit(5)), IntLit(3))
    assert tree.accept(Summer()) == 12


def test_missing_handler_raises_type_error():
    with pytest.raises(TypeError):
        StringLit("hi").accept(Echo())


def test_expression_type_defaults_to_error():
    assert IntLit(1).ty.kind is BasicType.ERROR


def test_line_is_keyword_and_defaults_to_zero():
    assert IntLit(1).line == 0
    assert IntLit(1, line=9).line == 9


def test_const_decl_is_always_const():
    decl = ConstDecl(Type(BasicType.INT), "k", IntLit(2))
    assert decl.is_const
    assert not VarDecl(Type(BasicType.INT), "v").is_const


def test_var_decl_list_defaults():
    inner = VarDecl(Type(BasicType.BOOL), "b")
    group = VarDeclList(decls=[inner])
    assert group.var_type.kind is BasicType.ERROR
    assert group.name == ""
    assert group.decls == [inner]
    assert group.init is None


def test_optional_children_default_to_none():
    assert ReturnStmt().expr is None
    assert IfStmt(BoolLit(False), Block()).else_stmt is None
    assert Var("x").sym is None


def test_mutable_defaults_are_not_shared():
    first, second = Program(), Program()
    first.stmts.append(Block())
    assert second.stmts == []
    a, b = Var("a"), Var("b")
    a.indices.append(IntLit(0))
    assert b.indices == []


def test_nodes_compare_by_identity():
    assert not IntLit(1) == IntLit(1)
    lhs = Var("x")
    assign = Assign(lhs, IntLit(3))
    assert assign.lhs is lhs