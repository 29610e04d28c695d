'''
# Waveform Audio File Format

RIFF container with form type "WAVE" storing uncompressed PCM audio.

Only two chunks are taken into consideration: the "fmt " chunk containing the
header (see wavstruct.audio.wav.header) and the "data" chunk containing the
samples; anything else is skipped when reading and never written.

Supported bit depths are 8, 16 and 24 bits, with any number of channels

    >>> with open('sine.wav', 'rb') as f:
    ...     header, track = read(f)
    >>> with open('output.wav', 'wb') as f:
    ...     write(header, track, f)

The specification is at <https://www.mmsp.ece.mcgill.ca/Documents/AudioFormats/WAVE/WAVE.html>.
'''
import logging

from ...containers import riff
from ...exceptions import (
    WavStructException,
    NotWaveException,
    MissingChunkException,
    UnsupportedFormatException,
)
from ...streams import Stream
from .bit_depth import BitDepth, Eight, Sixteen, TwentyFour, Empty
from .enum import WaveFormat
from .header import Header, WaveFormatChunk


logger = logging.getLogger(__name__)


WAVE_ID = b'WAVE'
FMT_ID  = b'fmt '
DATA_ID = b'data'


def read(source):
    '''Reads the given seekable binary source and extract the header and the
    audio data from it.

    It fails when the data is not a RIFF/WAVE container, when the "fmt " or the "data"
    chunks are missing, when the format is not PCM or when the bit depth is not
    supported; the errors of the source itself are propagated as they are.'''
    stream = Stream(source)

    header = read_header(stream)

    return header, read_data(stream, header)


def write(header: Header, track: BitDepth, sink):
    '''Writes the header and the audio data as a WAVE file into the given sink.

    It fails with EmptyDataException, without writing anything, when the track is Empty.'''
    data = track.encode()

    riff.write_form(sink, WAVE_ID, [
        (FMT_ID, header.to_bytes()),
        (DATA_ID, data),
    ])


def verify_wave_file(stream) -> riff.ChunkReference:
    '''Returns the outermost chunk if it's a RIFF container with form type WAVE.'''
    try:
        wav = riff.read_chunk(stream, 0)
        form_type = wav.read_type(stream)
    except WavStructException as e:
        raise NotWaveException('not a WAVE file, the RIFF header is unreadable') from e

    if wav.id != riff.RIFF_ID:
        raise NotWaveException(f'not a WAVE file, the container is {wav.id!r} instead of RIFF')

    if form_type != WAVE_ID:
        raise NotWaveException(f'not a WAVE file, the RIFF form type is {form_type!r}')

    return wav


def read_header(stream) -> Header:
    wav = verify_wave_file(stream)

    for chunk in wav.iter(stream):
        if chunk.id != FMT_ID:
            continue

        header = Header.from_bytes(chunk.read_contents(stream))
        logger.debug('found header %r' % (header,))

        if header.audio_format != WaveFormat.PCM.value:
            raise UnsupportedFormatException(
                header.audio_format,
                f'unsupported data format {header.format or header.audio_format}, data is not in uncompressed PCM format',
            )

        return header

    raise MissingChunkException(FMT_ID, 'RIFF data is missing the "fmt " chunk')


def read_data(stream, header: Header) -> BitDepth:
    wav = verify_wave_file(stream)

    for chunk in wav.iter(stream):
        if chunk.id != DATA_ID:
            continue

        return BitDepth.decode(chunk.read_contents(stream), header.bits_per_sample)

    raise MissingChunkException(DATA_ID, 'could not locate the audio data, the "data" chunk is missing')


__all__ = [
    'BitDepth',
    'DATA_ID',
    'Eight',
    'Empty',
    'FMT_ID',
    'Header',
    'Sixteen',
    'TwentyFour',
    'WAVE_ID',
    'WaveFormat',
    'WaveFormatChunk',
    'read',
    'read_data',
    'read_header',
    'verify_wave_file',
    'write',
]
