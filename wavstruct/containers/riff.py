'''
# Resource Interchange File Format

Generic container created by Microsoft and IBM, used for WAVE and AVI files.

Everything is a chunk: a four character code, a little endian 32-bit length and
the contents, padded to an even number of bytes (the padding byte is not
counted by the length). The "RIFF" and "LIST" chunks start their contents with
a four character code indicating the form type and contain other chunks

    'RIFF' <length> <form type>
        <id> <length> <data> [pad]
        <id> <length> <data> [pad]
        ...

See <https://www.mmsp.ece.mcgill.ca/Documents/AudioFormats/WAVE/Docs/riffmci.pdf>.

There are two ways of using this module: the Chunk classes describe the whole
container and are what you want to build a new file; ChunkReference instead reads
only the headers so to locate a chunk without loading the contents of the others.
'''
import logging
from typing import Iterator

from ..core import Chunk
from .. import fields
from ..exceptions import UnpackException
from ..properties import Dependency, DeltaDependency
from ..streams import Stream


logger = logging.getLogger(__name__)


RIFF_ID = b'RIFF'

HEADER_SIZE = 8
FORM_TYPE_SIZE = 4


class RIFFChunkHeader(Chunk):
    id     = fields.StringField(4)
    length = fields.StructField('I')


class RIFFSubChunk(RIFFChunkHeader):
    data    = fields.StringField(Dependency('.length'))
    padding = fields.PaddingField(Dependency('.length'), alignment=2)


class RIFFForm(Chunk):
    '''The outermost chunk: its length counts the form type and all the sub-chunks.'''
    id        = fields.StringField(4, default=RIFF_ID, is_magic=True)
    length    = fields.StructField('I')
    form_type = fields.StringField(FORM_TYPE_SIZE)
    chunks    = fields.ArrayField(RIFFSubChunk(), size=DeltaDependency(-FORM_TYPE_SIZE, '.length'))

    def relayout(self, offset=0):
        size = super().relayout(offset=offset)

        self.length.value = self.form_type.size + self.chunks.size

        return size


class ChunkReference(object):
    '''Handle to a chunk inside a stream: only the header is read, the
    contents are read when requested so the stream must be seekable.'''

    def __init__(self, header: RIFFChunkHeader, offset: int):
        self.header = header
        self.offset = offset

    def __repr__(self):
        return '<%s(id=%r,length=%d,offset=%d)>' % (
            self.__class__.__name__, self.id, self.length, self.offset)

    @property
    def id(self) -> bytes:
        return self.header.id.value

    @property
    def length(self) -> int:
        return self.header.length.value

    @property
    def contents_offset(self) -> int:
        return self.offset + HEADER_SIZE

    @property
    def end(self) -> int:
        '''Offset of the byte following the chunk, padding included.'''
        return self.contents_offset + self.length + (self.length & 1)

    def read_contents(self, stream) -> bytes:
        stream = Stream(stream)
        stream.seek(self.contents_offset)

        contents = stream.read(self.length)
        if len(contents) != self.length:
            logger.error('chunk %r declares %d bytes but only %d are available' % (
                self.id, self.length, len(contents)))
            raise UnpackException(chain=[self.id.decode('latin1')])

        return contents

    def read_type(self, stream) -> bytes:
        '''Only for the chunks with sub-chunks, i.e. RIFF and LIST.'''
        stream = Stream(stream)
        stream.seek(self.contents_offset)

        form_type = stream.read(FORM_TYPE_SIZE)
        if len(form_type) != FORM_TYPE_SIZE:
            raise UnpackException(chain=['form_type'])

        return form_type

    def iter(self, stream) -> Iterator["ChunkReference"]:
        '''Yields the sub-chunks in file order.

        The iteration stops at the end declared by the length or at the end of
        the stream, whichever comes first.'''
        stream = Stream(stream)

        end = min(self.contents_offset + self.length, stream.size())
        offset = self.contents_offset + FORM_TYPE_SIZE

        while offset + HEADER_SIZE <= end:
            chunk = read_chunk(stream, offset)
            logger.debug('found chunk %r' % chunk)

            yield chunk

            offset = chunk.end


def read_chunk(stream, offset=0) -> ChunkReference:
    '''Read the header of the chunk starting at the given offset.'''
    stream = Stream(stream)
    stream.seek(offset)

    header = RIFFChunkHeader()
    header.unpack(stream)

    return ChunkReference(header, offset)


def write_form(stream, form_type, children):
    '''Serialize into the stream a RIFF container with the given form type
    and the (id, payload) couples as sub-chunks, in order.'''
    form = RIFFForm()
    form.form_type.value = form_type

    for chunk_id, payload in children:
        chunk = form.chunks.instance_element()
        chunk.id.value = chunk_id
        chunk.data.value = payload
        form.chunks.append(chunk)

    raw = form.pack()
    logger.debug('writing RIFF form %r of %d bytes' % (form_type, len(raw)))

    stream.write(raw)
