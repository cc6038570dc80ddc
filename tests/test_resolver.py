from datetime import date, datetime
from decimal import Decimal

import pytest

from bind_models import (
    BadParent, CompositeModel, Holder, Inner, Invoice, LooseParent, Model, Money,
    NestCompositeModel, Scalars, SlashDateConverter, StrictChild,
)
from csvbind.codec import CsvCodec
from csvbind.codec import scalars
from csvbind.codec.errors import ConversionError
from csvbind.codec.resolver import compile_path, read_path, write_path
from csvbind.codec.scalars import register_decoder


def test_compile_path_reads_declared_types():
    accs = compile_path(Model, ("composite1", "nest1", "text1"))
    assert [a.name for a in accs] == ["composite1", "nest1", "text1"]
    assert accs[0].type is CompositeModel
    assert accs[1].type is NestCompositeModel
    assert accs[2].type is str


def test_compile_path_is_cached():
    assert compile_path(Model, ("text1",)) is compile_path(Model, ("text1",))


def test_unknown_field_is_a_conversion_error():
    with pytest.raises(ConversionError, match="no field 'missing'"):
        compile_path(Model, ("composite1", "missing"))


def test_descending_into_scalar_is_a_conversion_error():
    with pytest.raises(ConversionError):
        compile_path(Model, ("date1", "year"))


def test_read_path_tolerates_missing_intermediate():
    accs = compile_path(Model, ("composite1", "nest1", "text1"))
    assert read_path(Model(), accs) is None
    assert read_path(Model(composite1=CompositeModel()), accs) is None


def test_read_path_returns_leaf():
    m = Model(composite1=CompositeModel(nest1=NestCompositeModel(text1="deep")))
    assert read_path(m, compile_path(Model, ("composite1", "nest1", "text1"))) == "deep"


def test_write_path_materializes_intermediates():
    m = Model()
    write_path(m, compile_path(Model, ("composite1", "nest1", "text1")), "leaf")
    assert m.composite1 == CompositeModel(nest1=NestCompositeModel(text1="leaf"))
    # siblings stay at their defaults
    assert m.composite1.text1 is None
    assert m.text1 is None


def test_write_path_reuses_existing_intermediate():
    existing = CompositeModel(text1="keep")
    m = Model(composite1=existing)
    write_path(m, compile_path(Model, ("composite1", "constant1")), "c")
    assert m.composite1 is existing
    assert existing.text1 == "keep"
    assert existing.constant1 == "c"


def test_write_path_uses_converter():
    m = Model()
    write_path(m, compile_path(Model, ("date1",)), "2024/02/29", SlashDateConverter())
    assert m.date1 == date(2024, 2, 29)


@pytest.mark.parametrize(
    "field, text, expected",
    [
        ("name", "abc", "abc"),
        ("count", "42", 42),
        ("ratio", "2.5", 2.5),
        ("active", "True", True),
        ("active", "no", False),
        ("price", "9.99", Decimal("9.99")),
        ("day", "2023-05-01", date(2023, 5, 1)),
        ("at", "2023-05-01 10:30:00", datetime(2023, 5, 1, 10, 30)),
    ],
)
def test_default_scalar_decoding(field, text, expected):
    s = Scalars()
    write_path(s, compile_path(Scalars, (field,)), text)
    assert getattr(s, field) == expected


@pytest.mark.parametrize(
    "field, text",
    [
        ("count", "abc"),
        ("ratio", "x1"),
        ("active", "maybe"),
        ("price", "cheap"),
        ("day", "yesterday"),
    ],
)
def test_bad_scalar_is_a_conversion_error(field, text):
    with pytest.raises(ConversionError):
        write_path(Scalars(), compile_path(Scalars, (field,)), text)


def test_converter_value_error_is_wrapped():
    with pytest.raises(ConversionError, match="converter failed"):
        write_path(Model(), compile_path(Model, ("date1",)), "not-a-date", SlashDateConverter())


def test_intermediate_without_default_constructor():
    with pytest.raises(ConversionError, match="cannot create"):
        write_path(BadParent(), compile_path(BadParent, ("child", "text")), "x")


def test_nested_int_example():
    h = Holder()
    write_path(h, compile_path(Holder, ("x", "val")), "5")
    assert h.x == Inner(val=5)


# ==========================================================
# PYDANTIC RECORDS
# ==========================================================

def test_pydantic_record_paths_resolve():
    accs = compile_path(LooseParent, ("child", "text"))
    assert accs[0].type is StrictChild
    assert accs[1].type is str


def test_pydantic_intermediate_with_required_field():
    codec = CsvCodec(LooseParent)
    codec.add("t", "child.text")
    with pytest.raises(ConversionError, match="cannot create") as exc:
        codec.parse("x")
    assert exc.value.row == 1
    assert exc.value.column == "t"


def test_pydantic_root_record_with_required_field():
    codec = CsvCodec(StrictChild)
    codec.add("t", "text")
    with pytest.raises(ConversionError, match="cannot create record StrictChild") as exc:
        codec.parse("x")
    assert exc.value.row == 1


def test_pydantic_existing_intermediate_is_reused():
    p = LooseParent(child=StrictChild(required=3))
    write_path(p, compile_path(LooseParent, ("child", "text")), "filled")
    assert p.child == StrictChild(required=3, text="filled")


# ==========================================================
# CUSTOM DECODERS
# ==========================================================

@pytest.fixture
def restore_decoders():
    saved = dict(scalars.DECODERS)
    yield
    scalars.DECODERS.clear()
    scalars.DECODERS.update(saved)


def test_unregistered_type_has_no_default_conversion(restore_decoders):
    with pytest.raises(ConversionError, match="no default conversion"):
        write_path(Invoice(), compile_path(Invoice, ("total",)), "1.50")


def test_register_decoder_extends_default_conversion(restore_decoders):
    register_decoder(Money, lambda s: Money(round(float(s) * 100)))
    codec = CsvCodec(Invoice)
    codec.add("total", "total")
    assert codec.parse("1.50\n\n2") == [Invoice(total=Money(150)), Invoice(), Invoice(total=Money(200))]


def test_registered_decoder_errors_become_conversion_errors(restore_decoders):
    register_decoder(Money, lambda s: Money(int(s)))
    codec = CsvCodec(Invoice)
    codec.add("total", "total")
    with pytest.raises(ConversionError, match="cannot convert 'lots' to Money"):
        codec.parse("lots")
