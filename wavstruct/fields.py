"""
A Field is "fundamental" datatype from the format point of view, something directly
packable/unpackable without need for relayouting.
"""
import logging
import struct
from enum import Enum
from typing import Dict

from .meta import FieldBase, Endianess, Compliant
from .properties import Dependency, ChunkPhase, PropertyDescriptor
from .streams import Stream
from .exceptions import (
    UnpackException,
    MagicException,
    ChunkUnpackException,
)


class Field(FieldBase):
    """Base class to subclass from"""

    def __init__(self, name=None, father=None, default=None, offset=None,
                 endianess=Endianess.LITTLE_ENDIAN, compliant=Compliant.INHERIT, is_magic=False):
        super().__init__()
        self._phase = ChunkPhase.INIT
        self.logger = logging.getLogger(__name__)
        self.name = name
        self.father = father
        self.default = default
        self.offset = offset
        self.endianess = endianess
        self.compliant = compliant
        self.is_magic = is_magic

        self.init()

    def init(self):
        self.value = self.value_from_default()

    def value_from_default(self):
        return self.default

    def __str__(self):
        return str(self.value)

    def get_dependencies(self) -> Dict[str, Dependency]:
        """Return the dictionary containing as key the attribute depending on another field"""
        return {_k: _v for _k, _v in self.__dict__.items() if isinstance(_v, Dependency)}

    def is_compliant(self, level):
        '''Tells if the field (or its fathers, when inheriting) requires the given level'''
        instance = self
        while instance is not None:
            if instance.compliant & level:
                return True
            if not instance.compliant & Compliant.INHERIT:
                break

            instance = instance.father

        return False

    value = property(
        fget=lambda self: self._get_value(),
        fset=lambda self, value: self._set_value(value))

    def _get_value(self):
        return self._value

    def _set_value(self, value):
        self._value = value

    def _get_size(self):
        raise NotImplementedError(f"method {self.__class__.__name__}._get_size() not implemented")

    size = property(
        fget=lambda self: self._get_size(),
    )

    def _get_raw(self) -> bytes:
        raise NotImplementedError(f"method {self.__class__.__name__}._get_raw() not implemented")

    def _set_raw(self, value) -> None:
        raise NotImplementedError(f"method {self.__class__.__name__}._set_raw() not implemented")

    raw = property(
        fget=lambda self: self._get_raw(),
        fset=lambda self, value: self._set_raw(value),
    )

    def relayout(self, offset=0):
        self.logger.debug("relayouting %s at offset %d", self.__class__.__name__, offset)
        self.offset = offset

        return self.size

    def pack(self, stream=None, relayout=True):
        '''Write the binary representation at the actual position of the stream.'''
        if relayout:
            self.relayout()

        stream = Stream(b'') if stream is None else stream

        raw = self.raw
        stream.write(raw)

        return raw

    def unpack(self, stream):
        raise NotImplementedError('you need to implement this in the subclass')

    def _read(self, stream, size):
        raw = stream.read(size)
        if len(raw) != size:
            self.logger.error('field \'%s\' needs %d bytes but only %d are available' % (self.name, size, len(raw)))
            raise UnpackException(chain=[])

        return raw


class StructField(Field):
    """
    Simplest of the fields: mimic the behaviour of the struct module packing/unpacking
    integers to/from bytes.

    The main advantage is the possibility to indicate via the "enum" argument some subclass
    of enum.Enum so to have directly a representation of the integer value of the field itself.
    """

    def __init__(self, format, default=0, enum=None, **kw):
        self.format = format
        self.enum = enum
        super().__init__(default=default, **kw)

    def _get_encoder(self):
        return repr if isinstance(self.value, bytes) else hex

    def __repr__(self):
        if not isinstance(self.value, Enum):
            return '<%s(%s)>' % (self.__class__.__name__, self._get_encoder()(self.value))

        return f'<{self.__class__.__name__}({self.value!r})>'

    def __str__(self):
        if self.format == 'c':
            return self.value.decode('latin1')

        return '0x%0*x' % (self.size * 2, self._get_integer(self.value))

    def value_from_default(self):
        if not self.enum or isinstance(self.default, self.enum):
            return super().value_from_default()

        return self.enum(self.default)

    def get_format(self):
        prefix = {
            Endianess.LITTLE_ENDIAN: '<',
            Endianess.BIG_ENDIAN: '>',
            Endianess.NETWORK: '!',
            Endianess.NATIVE: '=',
        }[self.endianess]

        return '%s%s' % (prefix, self.format)

    def _get_integer(self, value):
        return value.value if isinstance(value, Enum) else value

    def _set_value(self, value) -> None:
        try:
            struct.pack(self.get_format(), self._get_integer(value))
        except struct.error as e:
            raise ValueError(f'{value!r} is not a valid value for field \'{self.name}\' ({self.format})') from e

        self._value = value

    def _get_size(self):
        return struct.calcsize(self.get_format())

    def _get_raw(self) -> bytes:
        return struct.pack(self.get_format(), self._get_integer(self.value))

    def _set_raw(self, raw: bytes) -> None:
        self.value = self._unpack(raw)

    def _unpack_struct(self, value: bytes) -> int:
        try:
            unpacked_value = struct.unpack(self.get_format(), value)[0]
        except struct.error as e:
            self.logger.error(e)
            exc = MagicException if self.is_compliant(Compliant.MAGIC) else UnpackException
            raise exc(chain=[])

        return unpacked_value

    def _unpack_enum(self, value: int):
        try:
            return self.enum(value)
        except ValueError:
            if self.is_compliant(Compliant.ENUM):
                raise UnpackException(chain=[])

            self.logger.warning(f'enum {self.enum!r} doesn\'t have element with value 0x{value:x} in it')

        return value

    def _unpack(self, raw):
        value = self._unpack_struct(raw)
        if self.enum:
            value = self._unpack_enum(value)

        if self.is_magic and value != self.default:
            self.logger.warning('the magic doesn\'t correspond')
            if self.is_compliant(Compliant.MAGIC):
                raise MagicException(chain=[])

        return value

    def unpack(self, stream):
        self._phase = ChunkPhase.UNPACKING
        self.value = self._unpack(stream.read(self.size))
        self._phase = ChunkPhase.DONE


class StringField(Field):
    """Represent a contiguous chunk of bytes.

    The length can be a Dependency, in that case setting a new value
    writes back its length into the field we depend on."""

    length = PropertyDescriptor('length', int)

    def __init__(self, n=None, **kw):
        if n is None and kw.get('default') is None:
            raise ValueError("StringField must have 'n' or 'default' indicated!")

        self.length = n if n is not None else len(kw['default'])

        super().__init__(**kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, repr(self.value))

    def value_from_default(self):
        if self.default is not None:
            return self.default

        return b'\x00' * (self.length or 0)

    def is_dependent(self):
        return 'length' in self.get_dependencies()

    def _get_size(self):
        return len(self.value)

    def _set_value(self, value) -> None:
        """The StringField has the size as a parameter and we must follow that indication
        unless it's a Dependency, in that case we are going to write back the value where necessary."""
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise ValueError(f'a {self.__class__.__name__} accepts only binary strings, not {value.__class__.__name__}')

        value = bytes(value)

        if not self.is_dependent() and len(value) != self.length:
            raise ValueError(f'you are trying to set a value with the wrong size (that is {self.length} bytes)')

        self._value = value

        if self.is_dependent():
            self.length = len(value)

    def _get_raw(self):
        return self.value

    def _set_raw(self, raw):
        self.value = raw

    def relayout(self, offset=0):
        if self.is_dependent():
            self.length = len(self.value)

        return super().relayout(offset=offset)

    def unpack(self, stream):
        self._phase = ChunkPhase.UNPACKING
        raw = self._read(stream, self.length)

        if self.is_magic and raw != self.default:
            self.logger.warning(f'the magic {raw!r} doesn\'t correspond to {self.default!r}')
            if self.is_compliant(Compliant.MAGIC):
                raise MagicException(chain=[])

        self.value = raw
        self._phase = ChunkPhase.DONE


class PaddingField(Field):
    '''Zero bytes needed to align to a multiple of "alignment" the end of
    a field whose length is indicated by the dependency.

        class Aligned(Chunk):
            length  = fields.StructField('I')
            data    = fields.StringField(Dependency('.length'))
            padding = fields.PaddingField(Dependency('.length'), alignment=2)
    '''

    def __init__(self, dependency, alignment=2, **kw):
        self.dependency = dependency
        self.alignment = alignment
        super().__init__(**kw)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.size})>'

    def init(self):
        pass

    def _get_size(self):
        if self.father is None:
            return 0

        return -self.dependency.resolve(self) % self.alignment

    def _get_value(self):
        return b'\x00' * self.size

    def _get_raw(self):
        return self.value

    def unpack(self, stream):
        raw = stream.read(self.size)
        # a lot of writers forget the last padding byte
        if len(raw) != self.size:
            self.logger.warning('missing padding of %d bytes' % (self.size - len(raw)))


class ArrayField(Field):
    '''Un/Pack an array of Chunks.

    You can indicate an explicit number of elements via the parameter named "n",
    the number of bytes occupied by the elements via the parameter named "size"
    or you can indicate with a callable returning True which element is the terminator
    for the list via the parameter named "canary". All of them except "canary" can be
    a Dependency.

    This class must behave like a list in python, obviously cannot implement all the methods
    since, for example, slicing what should mean?
    '''

    def __init__(self, field_cls, n=0, canary=None, size=None, **kw):
        if not isinstance(n, (int, Dependency)):
            raise ValueError('n is \'%s\' must be of the right type' % n.__class__.__name__)

        self.field_cls = field_cls
        self._n = n
        self._canary = canary
        self._size = size

        super().__init__(**kw)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.value!r})>'

    def __getitem__(self, item):
        return self.value[item]

    def __len__(self):
        return len(self.value)

    def __iter__(self):
        return iter(self.value)

    def value_from_default(self):
        if self.default is not None:
            return list(self.default)

        n = self._n if isinstance(self._n, int) else 0

        return [self.instance_element() for _ in range(n)]

    def clear(self):
        self.value.clear()

    def instance_element(self):
        return self.field_cls.create(father=self)  # pass the father so that we don't lose the hierarchy

    def append(self, element):
        element.father = self
        self.value.append(element)

    def _get_raw(self):
        return b''.join(element.raw for element in self.value)

    def _get_size(self):
        return sum(element.size for element in self.value)

    def relayout(self, offset=0):
        self.offset = offset

        size = 0
        for element in self.value:
            size += element.relayout(offset=offset + size)

        return size

    def pack(self, stream=None, relayout=True):
        if relayout:
            self.relayout()

        stream = Stream(b'') if stream is None else stream

        for element in self.value:
            stream.seek(element.offset)
            element.pack(stream=stream, relayout=False)

        return self.raw

    def _resolve(self, value):
        return value.resolve(self) if isinstance(value, Dependency) else value

    def _is_complete(self, consumed, n, size):
        if self._canary is not None:
            return len(self.value) > 0 and self._canary(self.value[-1])

        if size is not None:
            return consumed >= size

        return len(self.value) >= n

    def unpack_element(self, element, stream):
        element.unpack(stream)

    def unpack(self, stream):
        self._phase = ChunkPhase.UNPACKING

        n = self._resolve(self._n)
        size = self._resolve(self._size)

        self.value = []
        start = stream.tell()

        while not self._is_complete(stream.tell() - start, n, size):
            element = self.instance_element()
            element.offset = stream.tell()
            self.logger.debug('unpacking element #%d at offset %d' % (len(self.value), element.offset))

            try:
                self.unpack_element(element, stream)
            except (UnpackException, ChunkUnpackException) as e:
                chain = e.chain if isinstance(e, ChunkUnpackException) else []
                chain.append(str(len(self.value)))
                raise ChunkUnpackException(chain=chain) from e

            self.append(element)

        self._phase = ChunkPhase.DONE
