'''
The "fmt " chunk describes how the samples in the "data" chunk must be interpreted.

For PCM data its contents are 16 bytes, all the fields are little endian

    offset  size  field
    0x00    2     audio format (1 for PCM)
    0x02    2     number of channels
    0x04    4     samples per second
    0x08    4     bytes per second (samples per second * block align)
    0x0c    2     block align (bytes for one sample of all the channels)
    0x0e    2     bits per sample
'''
from dataclasses import dataclass

from ...core import Chunk
from ... import fields
from .enum import WaveFormat


HEADER_SIZE = 16


class WaveFormatChunk(Chunk):
    audio_format     = fields.StructField('H', default=WaveFormat.PCM.value)
    channel_count    = fields.StructField('H')
    sampling_rate    = fields.StructField('I')
    bytes_per_second = fields.StructField('I')
    block_align      = fields.StructField('H')
    bits_per_sample  = fields.StructField('H')


@dataclass(frozen=True)
class Header:
    audio_format: int
    channel_count: int
    sampling_rate: int
    bytes_per_second: int
    block_align: int
    bits_per_sample: int

    @classmethod
    def new(cls, audio_format: int, channel_count: int, sampling_rate: int, bits_per_sample: int) -> "Header":
        '''Build a header calculating the redundant fields.'''
        block_align = channel_count * bits_per_sample // 8

        return cls(
            audio_format=audio_format,
            channel_count=channel_count,
            sampling_rate=sampling_rate,
            bytes_per_second=sampling_rate * block_align,
            block_align=block_align,
            bits_per_sample=bits_per_sample,
        )

    @classmethod
    def from_bytes(cls, raw: bytes) -> "Header":
        '''Only the first 16 bytes are used, the extension of the non-PCM
        formats is ignored.'''
        chunk = WaveFormatChunk(bytes(raw[:HEADER_SIZE]))

        return cls(**{name: field.value for name, field in chunk.get_fields()})

    def to_bytes(self) -> bytes:
        chunk = WaveFormatChunk()
        for name, field in chunk.get_fields():
            field.value = getattr(self, name)

        return chunk.pack()

    def __bytes__(self):
        return self.to_bytes()

    @property
    def format(self):
        '''The WaveFormat of the audio data, None if unknown.'''
        try:
            return WaveFormat(self.audio_format)
        except ValueError:
            return None
