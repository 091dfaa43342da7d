import pytest

from quill.ast import Node
from quill.resolved_type import (
    ResolvedArray,
    ResolvedFunctionDecl,
    ResolvedFunctionParam,
    ResolvedFunctionRef,
    ResolvedGeneric,
    ResolvedStructDecl,
    ResolvedStructField,
    ResolvedStructRef,
    ResolvedType,
    ResolvedTypeKind as K,
    format_resolved_type,
    resolved_struct_decl_eq,
    resolved_type_cast_to,
    resolved_type_eq,
    resolved_type_implicit_to,
)


def prim(kind):
    return ResolvedType(kind)


def ptr(of):
    return ResolvedType(K.POINTER, of=of)


def mut_ptr(of):
    return ResolvedType(K.MUT_POINTER, of=of)


def generic(name, idx, src_id=1):
    return ResolvedType(
        K.GENERIC, generic=ResolvedGeneric(name, idx), src=Node(id=src_id)
    )


def pair_decl(name="Pair", field_name="first"):
    return ResolvedStructDecl(
        name=name,
        fields=[ResolvedStructField(prim(K.INT), field_name)],
        generic_params=["T"],
    )


def struct_decl(decl):
    return ResolvedType(K.STRUCT_DECL, struct_decl=decl)


def struct_ref(decl, args=()):
    return ResolvedType(
        K.STRUCT_REF, struct_ref=ResolvedStructRef(decl=decl, generic_args=list(args))
    )


def test_primitive_equality():
    assert resolved_type_eq(prim(K.INT), prim(K.INT))
    assert not resolved_type_eq(prim(K.INT), prim(K.UINT))


def test_none_equality():
    assert resolved_type_eq(None, None)
    assert not resolved_type_eq(prim(K.INT), None)
    assert not resolved_type_eq(None, prim(K.INT))


def test_pointer_and_mut_pointer_compare_equal_by_target():
    assert resolved_type_eq(ptr(prim(K.CHAR)), mut_ptr(prim(K.CHAR)))
    assert not resolved_type_eq(ptr(prim(K.CHAR)), ptr(prim(K.INT)))
    assert not resolved_type_eq(ptr(prim(K.CHAR)), prim(K.CHAR))


def test_array_equality_is_undefined():
    arr = ResolvedType(K.ARRAY, array=ResolvedArray(prim(K.INT)))
    with pytest.raises(TypeError):
        resolved_type_eq(arr, arr)


def test_struct_decl_equality():
    assert resolved_struct_decl_eq(pair_decl(), pair_decl())
    assert not resolved_struct_decl_eq(pair_decl(), pair_decl(field_name="second"))
    assert not resolved_struct_decl_eq(pair_decl(), pair_decl(name="Other"))
    assert resolved_struct_decl_eq(None, None)
    assert not resolved_struct_decl_eq(pair_decl(), None)


def test_struct_generic_params_must_match():
    other = pair_decl()
    other.generic_params = ["U"]
    assert not resolved_struct_decl_eq(pair_decl(), other)


def test_struct_ref_and_decl_equality():
    assert resolved_type_eq(struct_ref(pair_decl()), struct_decl(pair_decl()))
    assert resolved_type_eq(struct_decl(pair_decl()), struct_ref(pair_decl()))
    assert not resolved_type_eq(
        struct_ref(pair_decl(), [prim(K.INT)]), struct_ref(pair_decl(), [prim(K.CHAR)])
    )


def test_generic_equality_uses_source_index_and_name():
    assert resolved_type_eq(generic("T", 0), generic("T", 0))
    assert not resolved_type_eq(generic("T", 0), generic("T", 0, src_id=2))
    assert not resolved_type_eq(generic("T", 0), generic("T", 1))
    assert not resolved_type_eq(generic("T", 0), generic("U", 0))


def test_implicit_widening():
    assert resolved_type_implicit_to(prim(K.INT8), prim(K.INT64))
    assert resolved_type_implicit_to(prim(K.INT16), prim(K.FLOAT))
    assert not resolved_type_implicit_to(prim(K.INT64), prim(K.INT8))
    assert not resolved_type_implicit_to(prim(K.INT16), prim(K.CHAR))


def test_wide_integers_convert_to_pointers():
    assert resolved_type_implicit_to(prim(K.INT), ptr(prim(K.CHAR)))
    assert not resolved_type_implicit_to(prim(K.INT32), ptr(prim(K.CHAR)))


def test_implicit_with_none_is_false():
    assert not resolved_type_implicit_to(None, prim(K.INT))
    assert not resolved_type_implicit_to(prim(K.INT), None)


def test_generic_converts_to_anything():
    assert resolved_type_implicit_to(generic("T", 0), prim(K.BOOL))
    assert resolved_type_implicit_to(prim(K.BOOL), generic("T", 0))
    assert resolved_type_implicit_to(ptr(prim(K.INT)), generic("T", 0))


def test_pointer_implicit_rules():
    assert resolved_type_implicit_to(ptr(prim(K.INT8)), ptr(prim(K.INT)))
    assert not resolved_type_implicit_to(mut_ptr(prim(K.INT8)), ptr(prim(K.INT)))
    assert resolved_type_implicit_to(mut_ptr(prim(K.INT)), ptr(prim(K.INT)))


def test_struct_implicit_rules():
    assert resolved_type_implicit_to(struct_decl(pair_decl()), struct_ref(pair_decl()))
    assert not resolved_type_implicit_to(
        struct_decl(pair_decl()), struct_decl(pair_decl(name="Other"))
    )
    assert not resolved_type_implicit_to(
        struct_ref(pair_decl(), [prim(K.INT)]), struct_ref(pair_decl())
    )


def test_cast_rules():
    assert resolved_type_cast_to(ptr(prim(K.INT)), mut_ptr(prim(K.CHAR)))
    assert resolved_type_cast_to(prim(K.INT64), prim(K.CHAR))
    assert not resolved_type_cast_to(prim(K.INT), prim(K.CHAR))
    assert resolved_type_cast_to(struct_ref(pair_decl()), struct_decl(pair_decl(name="X")))
    assert not resolved_type_cast_to(prim(K.BOOL), struct_decl(pair_decl()))


def test_implicit_implies_cast():
    kinds = [K.BOOL, K.CHAR, K.INT8, K.INT16, K.INT32, K.INT64, K.UINT, K.FLOAT64]
    for a in kinds:
        for b in kinds:
            if resolved_type_implicit_to(prim(a), prim(b)):
                assert resolved_type_cast_to(prim(a), prim(b))


def test_format_primitives_and_pointers():
    assert format_resolved_type(None) == "null"
    assert format_resolved_type(prim(K.UINT16)) == "uint16"
    assert format_resolved_type(mut_ptr(ptr(prim(K.CHAR)))) == "char**"


def test_format_arrays():
    assert format_resolved_type(ResolvedType(K.ARRAY, array=ResolvedArray(prim(K.INT)))) == "int[]"
    assert (
        format_resolved_type(ResolvedType(K.ARRAY, array=ResolvedArray(prim(K.INT), 4)))
        == "int[4]"
    )


def test_format_generic_and_struct():
    assert format_resolved_type(generic("T", 0)) == "<0:T>"
    decl = ResolvedStructDecl(
        name="Pair",
        fields=[ResolvedStructField(generic("T", 0), "first")],
        generic_params=["T"],
    )
    assert format_resolved_type(struct_decl(decl)) == "Pair<T> {\n    <0:T> first,\n}"
    assert format_resolved_type(struct_ref(decl, [prim(K.INT)])) == "Pair<int>"


def test_format_functions():
    decl = ResolvedFunctionDecl(
        return_type=prim(K.INT),
        params=[ResolvedFunctionParam(ptr(prim(K.CHAR)), "s")],
        generic_params=["T"],
    )
    fn = ResolvedType(K.FUNCTION_DECL, function_decl=decl)
    assert format_resolved_type(fn) == "int <T>(char* s) { ... }"
    ref = ResolvedType(
        K.FUNCTION_REF, function_ref=ResolvedFunctionRef(decl, [prim(K.BOOL)])
    )
    assert format_resolved_type(ref) == "<name_unknown><bool>"


def test_format_namespace_uses_kind_number():
    assert format_resolved_type(ResolvedType(K.NAMESPACE)) == "RTK_0"