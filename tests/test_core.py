import pytest

from wavstruct.core import Chunk
from wavstruct.exceptions import ChunkUnpackException
from wavstruct.fields import StructField, StringField
from wavstruct.properties import Dependency


def test_chunk():
    """Check that building a Chunk from fields behaves correctly."""
    class Dummy(Chunk):
        a = StructField('I', default=0xbad)
        b = StringField(0x10)
        c = StructField('I', default=0xdeadbeef)

    dummy = Dummy()

    assert dummy.a.size == 4
    assert dummy.a.raw == b'\xad\x0b\x00\x00'
    assert dummy.a.value == 0xbad
    assert dummy.a.offset == 0x00
    assert dummy.a.father is dummy

    assert dummy.b.size == 0x10
    assert dummy.b.raw == b'\x00' * 0x10
    assert dummy.b.offset == 0x04

    assert dummy.c.size == 0x4
    assert dummy.c.raw == b'\xef\xbe\xad\xde'
    assert dummy.c.offset == 0x14

    assert dummy.size == 0x18
    assert len(dummy.raw) == dummy.size
    assert dummy.raw == (
        b'\xad\x0b\x00\x00' +
        b'\x00' * 0x10 +
        b'\xef\xbe\xad\xde'
    )


def test_chunk_instances_do_not_share_fields():
    class Dummy(Chunk):
        a = StructField('I')

    first = Dummy()
    second = Dummy()

    first.a.value = 0xcafe

    assert first.a is not second.a
    assert second.a.value == 0


def test_chunk_w_dependencies():
    class Example(Chunk):
        sz = StructField('I')
        data = StringField(Dependency('.sz'), default=b'kebab')

    example = Example()

    assert list(example.get_dependencies().keys()) == [
        'data.length',
    ]

    assert example.sz.father is example
    assert example.sz.value == 5
    assert example.data.value == b'kebab'


def test_inheritance():
    '''subclasses inherit fields'''
    class Father(Chunk):
        field_a = StringField(0x10)
        field_b = StructField("I")

    class Son(Father):
        field_c = StringField(0x08)

    field_b_value = b'\x01\x02\x03\x04'
    field_c_value = b'ABCDEFGH'
    son = Son(b'A' * 16 + field_b_value + field_c_value)

    assert [name for name, _ in son.get_fields()] == [
        'field_a', 'field_b', 'field_c',
    ]

    assert son.field_b.value == 0x04030201
    assert son.field_c.value == field_c_value


def test_offset_dependencies():
    class TLV(Chunk):
        type   = StructField('I')
        length = StructField('I')
        data   = StringField(Dependency('length'))
        extra  = StructField('I')

    tlv = TLV((
        b'\x01\x00\x00\x00'
        b'\x0f\x00\x00\x00'
        b'\x41\x41\x41\x41\x41\x41\x41\x41\x41\x41\x41\x41\x41\x41\x41'
        b'\x0a\x0b\x0c\x0d'
    ))

    assert tlv.type.value == 0x01
    assert tlv.type.offset == 0x00
    assert tlv.length.value == 0x0f
    assert tlv.length.offset == 0x04
    assert tlv.data.value == b'\x41' * 0x0f
    assert tlv.data.offset == 0x04 + 0x04
    assert tlv.extra.value == 0x0d0c0b0a
    assert tlv.extra.offset == 0x04 + 0x04 + 0x0f

    # now try to change the data field's size and verify that
    # the offset for extra is recalculated and the size field
    # also is updated accordingly
    tlv.data.value = b'\x42\x42\x42'
    packed = tlv.pack()

    assert tlv.length.value == 0x03
    assert tlv.data.offset == 0x04 + 0x04
    assert tlv.extra.value == 0x0d0c0b0a
    assert tlv.extra.offset == 0x04 + 0x04 + 0x03
    assert packed == (
        b'\x01\x00\x00\x00'
        b'\x03\x00\x00\x00'
        b'\x42\x42\x42'
        b'\x0a\x0b\x0c\x0d'
    )


def test_relayout_fixes_a_stale_length():
    class TLV(Chunk):
        length = StructField('H')
        data   = StringField(Dependency('.length'), default=b'abcd')

    tlv = TLV()
    tlv.length.value = 0x100

    tlv.relayout()

    assert tlv.length.value == 4


def test_proxy_like_format():
    """Check that a file format having sub-components of the same type
    gets an independent copy for each of them."""

    class Proxy(Chunk):
        off = StructField('I')
        sz = StructField('I')

    class Experiment(Chunk):
        proxy_a = Proxy()
        proxy_b = Proxy()

        contents = StringField(0x100)

    experiment = Experiment()

    assert experiment.layout == {
        'proxy_a': (0, 8),
        'proxy_b': (8, 8),
        'contents': (16, 256),
    }

    assert experiment.proxy_a is not experiment.proxy_b
    assert experiment.proxy_a.father is experiment
    assert experiment.size == 0x100 + 2 * (4 + 4)
    assert len(experiment.raw) == experiment.size
    assert experiment.raw == b'\x00' * experiment.size


def test_relayout_nested():
    class Dummy(Chunk):
        a = StructField('I')
        b = StructField('H')

    class Father(Chunk):
        dummy = Dummy()
        c     = StringField(0x10)

    father = Father()

    father.dummy.a.value = 0xcafebabe
    father.dummy.b.value = 0x1dea
    father.c.value       = b'A' * 0x10

    father.relayout()

    assert father.offset == 0
    assert father.dummy.offset == 0
    assert father.dummy.a.offset == 0
    assert father.dummy.b.offset == 4
    assert father.c.offset == 6
    assert father.pack() == b'\xbe\xba\xfe\xca\xea\x1d' + b'A' * 0x10


def test_unpacking_and_packing():
    class Dummy(Chunk):
        fieldA = StructField('I')
        fieldB = StructField('I')

    contents = b'\x01\x02\x03\x04\x0a\x0b\x0c\x0d'

    dummy = Dummy(contents)

    assert dummy.pack() == contents


def test_set_raw_unpacks():
    class Dummy(Chunk):
        a = StructField('H')
        b = StructField('H')

    dummy = Dummy()
    dummy.raw = b'\x01\x00\x02\x00'

    assert dummy.a.value == 1
    assert dummy.b.value == 2


def test_unpack_failure_has_chain():
    class Inner(Chunk):
        a = StructField('I')
        b = StructField('I')

    class Outer(Chunk):
        header = StructField('H')
        inner  = Inner()

    with pytest.raises(ChunkUnpackException) as exc:
        Outer(b'\x01\x00' + b'\x02\x00\x00\x00' + b'\x03')

    assert exc.value.chain == ['b', 'inner']
    assert str(exc.value) == 'failed at inner.b'


def test_field_already_present():
    with pytest.raises(AttributeError):
        class Dummy(Chunk):
            a = StructField('I')

        Dummy.add_to_class('a', StructField('H'))
