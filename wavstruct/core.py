"""
Core module for the abstraction of a file format

"""
import io
from typing import Tuple, List, Dict

from .fields import Field
from .meta import MetaChunk
from .streams import Stream
from .exceptions import (
    ChunkUnpackException,
    UnpackException,
)
from .properties import (
    get_root_from_chunk,
    Dependency,
    ChunkPhase,
)


class Chunk(Field, metaclass=MetaChunk):
    """
    Together with Field is the main class that defines a format: its main attributes
    are offset and size that identify a Chunk.

    A Chunk can contain sub-chunks, an instance of a Chunk can be used as a field
    of another Chunk.

    Passing a path or raw bytes to the constructor unpacks them right away.
    """

    def __init__(self, filepath=None, **kwargs):
        self.stream = Stream(filepath) if filepath is not None else None
        super().__init__(**kwargs)

        # now we have setup all the fields necessary and we can unpack if
        # some data is passed with the constructor
        if self.stream is not None:
            self.logger.debug('unpacking \'%s\' from %s' % (self.__class__.__name__, self.stream))
            self.unpack(self.stream)
        else:
            self.relayout()

    def get_ordered_fields_name(self) -> List[str]:
        return self._meta.fields

    def get_fields(self) -> List[Tuple[str, Field]]:
        '''It returns a list of couples (name, instance) for each field.'''
        return [(_, getattr(self, _)) for _ in self.get_ordered_fields_name()]

    def get_dependencies(self) -> Dict[str, Dependency]:
        dep = super().get_dependencies()

        for field_name, field in self.get_fields():
            for key, value in field.get_dependencies().items():
                dep.update({f'{field_name}.{key}': value})

        return dep

    def __repr__(self):
        msg = []
        for field_name, field in self.get_fields():
            msg.append('%s=%s' % (field_name, repr(field)))
        return '<%s(%s)>' % (self.__class__.__name__, ','.join(msg))

    def __str__(self):
        msg = ''
        for field_name, field in self.get_fields():
            msg += '%s: %s\n' % (field_name, repr(field))
        return msg

    def init(self):
        for _, field in self.get_fields():
            field.init()

    @property
    def root(self):
        '''Obtain the final father of this chunk'''
        return get_root_from_chunk(self)

    def _get_value(self):
        return self

    def _get_size(self):
        '''the size parameter MUST not be set but MUST be derived from the subchunks'''
        return sum(field.size for _, field in self.get_fields())

    def _get_raw(self):
        value = b''
        for field_name, field_instance in self.get_fields():
            field_raw = field_instance.raw
            self.logger.debug("field '{}' raw={!r}".format(field_name, field_raw))
            value += field_raw

        return value

    def _set_raw(self, raw):
        self.unpack(Stream(raw))

    @property
    def layout(self) -> Dict[str, Tuple[int, int]]:
        result = {}
        for name, field in self.get_fields():
            result[name] = (field.offset, field.size)

        return result

    def relayout(self, offset=0):
        '''This method triggers the chunk's children to reset the offsets
        in order to pack correctly.

        In practice it's like packing() but it's only interested in the sizes
        of the chunks.'''
        phase_old = self._phase
        self._phase = ChunkPhase.RELAYOUTING
        self.offset = offset

        size = 0
        for field_name, field_instance in self.get_fields():
            self.logger.debug('relayouting %s.%s' % (self.__class__.__name__, field_name))
            size += field_instance.relayout(offset=offset + size)

        self._phase = phase_old

        return size

    def pack(self, stream=None, relayout=True):
        '''
        Create the raw data encoding of the chunk: each field is written
        at its own offset.

        If no stream is passed the encoded bytes are returned.
        '''
        self._phase = ChunkPhase.PACKING

        if relayout:
            self.relayout()

        stream = Stream(b'') if stream is None else stream

        for field_name, field_instance in self.get_fields():
            if field_instance.offset is None:
                raise AttributeError(f'offset for field named "{field_name}" {field_instance!r} is not defined!')

            self.logger.debug('packing %s.%s at offset %08x' % (
                self.__class__.__name__, field_name, field_instance.offset))

            stream.seek(field_instance.offset)
            field_instance.pack(stream=stream, relayout=False)  # we hope someone triggered the relayout before

        self._phase = ChunkPhase.DONE

        return stream.obj.getvalue() if isinstance(stream.obj, io.BytesIO) else None

    def unpack(self, stream):
        '''This is one of the main APIs to take care of: its aim is to take a binary
        data and transform in the representation given by the class this method
        is implemented.

        The fields are read one after the other starting from the actual
        position of the stream; when a field fails the exception carries the
        chain of the names of the fields involved.
        '''
        self._phase = ChunkPhase.UNPACKING
        self.offset = stream.tell()

        for field_name, field in self.get_fields():
            offset = stream.tell()
            self.logger.debug('unpacking %s.%s at offset %d' % (self.__class__.__name__, field_name, offset))

            try:
                field.unpack(stream)
            except (UnpackException, ChunkUnpackException) as e:
                chain = e.chain if isinstance(e, ChunkUnpackException) else []
                chain.append(field_name)
                raise ChunkUnpackException(chain=chain) from e
            field.offset = offset

        self._phase = ChunkPhase.DONE
