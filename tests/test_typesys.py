import pytest

from jasmgen.typesys import BasicType, Type


def test_default_type_is_error_scalar():
    ty = Type()
    assert ty.kind is BasicType.ERROR
    assert ty.is_scalar()
    assert str(ty) == "error"


@pytest.mark.parametrize("kind", list(BasicType))
def test_scalar_string_is_kind_name(kind):
    assert str(Type(kind)) == kind.value
    assert str(kind) == kind.value


def test_array_string_appends_dimensions():
    assert str(Type(BasicType.INT, (3, 4))) == "int[3][4]"


def test_array_is_not_scalar():
    assert not Type(BasicType.BOOL, [2]).is_scalar()


def test_dims_list_is_normalised_to_tuple():
    assert Type(BasicType.INT, [2, 5]) == Type(BasicType.INT, (2, 5))
    assert isinstance(Type(BasicType.INT, [2]).dims, tuple)


def test_equality_requires_kind_and_dims():
    assert Type(BasicType.INT) == Type(BasicType.INT)
    assert not Type(BasicType.INT) == Type(BasicType.FLOAT)
    assert not Type(BasicType.INT, (2,)) == Type(BasicType.INT)


def test_type_is_hashable_and_immutable():
    ty = Type(BasicType.STRING)
    assert {ty: 1}[Type(BasicType.STRING)] == 1
    with pytest.raises(AttributeError):
        ty.kind = BasicType.INT