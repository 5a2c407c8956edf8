import pytest

from jasmgen.symbols import SymbolTable, SymEntry
from jasmgen.typesys import BasicType, Type


def test_starts_at_global_scope():
    table = SymbolTable()
    assert table.at_global_scope()
    assert table.current_local() == 0


def test_global_insert_marks_global_without_slot():
    table = SymbolTable()
    stored = table.insert(SymEntry("g", Type(BasicType.INT)))
    assert stored.is_global
    assert stored.slot == -1
    assert table.current_local() == 0
    assert table.lookup("g") is stored


def test_duplicate_in_same_scope_returns_none():
    table = SymbolTable()
    table.insert(SymEntry("x"))
    assert table.insert(SymEntry("x")) is None


def test_shadowing_in_inner_scope_is_allowed():
    table = SymbolTable()
    outer = table.insert(SymEntry("x", Type(BasicType.INT)))
    table.enter_scope()
    inner = table.insert(SymEntry("x", Type(BasicType.BOOL)))
    assert inner is not outer
    assert table.lookup("x") is inner
    table.exit_scope()
    assert table.lookup("x") is outer


def test_local_slots_are_sequential():
    table = SymbolTable()
    table.enter_scope(True)
    first = table.insert(SymEntry("a"))
    second = table.insert(SymEntry("b"))
    assert not first.is_global
    assert (first.slot, second.slot) == (0, 1)
    assert table.current_local() == 2


def test_function_scope_restores_outer_counter():
    table = SymbolTable()
    table.reset_local(5)
    table.enter_scope(True)
    assert table.current_local() == 0
    table.insert(SymEntry("p"))
    table.exit_scope()
    assert table.current_local() == 5


def test_function_entry_in_local_scope_gets_no_slot():
    table = SymbolTable()
    table.enter_scope(True)
    fn = table.insert(SymEntry("f", is_func=True))
    assert fn.slot == -1
    assert table.current_local() == 0


def test_insert_stores_a_copy():
    table = SymbolTable()
    entry = SymEntry("v", param_types=[Type(BasicType.INT)])
    stored = table.insert(entry)
    assert stored is not entry
    assert entry.is_global is False
    stored.param_types.append(Type(BasicType.BOOL))
    assert len(entry.param_types) == 1


def test_lookup_missing_returns_none():
    assert SymbolTable().lookup("nope") is None


def test_exit_global_scope_raises():
    with pytest.raises(RuntimeError):
        SymbolTable().exit_scope()


def test_allocate_and_reset():
    table = SymbolTable()
    table.reset_local(3)
    assert table.allocate_slot() == 3
    assert table.current_local() == 4
    table.reset_local()
    assert table.current_local() == 0


def test_lookup_returns_mutable_stored_entry():
    table = SymbolTable()
    table.insert(SymEntry("c", Type(BasicType.INT)))
    table.lookup("c").value = 42
    assert table.lookup("c").value == 42