'''
Sample buffers, one class for each supported bit depth.

The samples are in the order they are stored in the "data" chunk, i.e. the
channels are interleaved. The 8 bits samples are unsigned, the others are
signed (two's complement) and little endian.
'''
import struct
from dataclasses import dataclass
from typing import ClassVar, Tuple

from bitstring import Bits

from ...exceptions import EmptyDataException, UnsupportedBitDepthException
from .utils import iter_pairs, iter_triplets, join_groups


class BitDepth(object):
    '''Base class of the sample buffers: the subclasses below are the only ones
    allowed, use BitDepth.decode() to obtain the right one from raw data.

    BitDepth itself can't be instantiated.'''

    bits_per_sample: ClassVar[int] = None

    def __new__(cls, *args, **kwargs):
        if cls is BitDepth:
            raise TypeError('BitDepth is abstract, use one of its subclasses')

        return super().__new__(cls)

    def __len__(self):
        return len(self.samples)

    def encode(self) -> bytes:
        raise NotImplementedError(f'{self.__class__.__name__} must implement encode()')

    @classmethod
    def from_bytes(cls, raw: bytes) -> "BitDepth":
        raise NotImplementedError(f'{cls.__name__} must implement from_bytes()')

    @staticmethod
    def decode(raw: bytes, bits_per_sample: int) -> "BitDepth":
        try:
            cls = bits2class[bits_per_sample]
        except KeyError:
            raise UnsupportedBitDepthException(bits_per_sample, f'unsupported bit depth {bits_per_sample}') from None

        return cls.from_bytes(raw)


@dataclass(frozen=True)
class Eight(BitDepth):
    samples: bytes = b''

    bits_per_sample: ClassVar[int] = 8

    def __post_init__(self):
        object.__setattr__(self, 'samples', bytes(self.samples))

    @classmethod
    def from_bytes(cls, raw):
        return cls(raw)

    def encode(self):
        return self.samples


@dataclass(frozen=True)
class Sixteen(BitDepth):
    samples: Tuple[int, ...] = ()

    bits_per_sample: ClassVar[int] = 16

    def __post_init__(self):
        samples = tuple(self.samples)
        for sample in samples:
            if not -0x8000 <= sample <= 0x7fff:
                raise ValueError(f'{sample} is not a 16 bits sample')

        object.__setattr__(self, 'samples', samples)

    @classmethod
    def from_bytes(cls, raw):
        return cls(tuple(struct.unpack('<h', pair)[0] for pair in iter_pairs(raw)))

    def encode(self):
        return join_groups(struct.pack('<h', sample) for sample in self.samples)


@dataclass(frozen=True)
class TwentyFour(BitDepth):
    '''The samples are kept as 32 bits integers whose most significant byte
    is zeroed: 0x00ffffff and -1 are the same sample, stored as 0x00ffffff.'''
    samples: Tuple[int, ...] = ()

    bits_per_sample: ClassVar[int] = 24

    def __post_init__(self):
        object.__setattr__(self, 'samples', tuple(self._mask(sample) for sample in self.samples))

    @staticmethod
    def _mask(sample):
        if not -0x80000000 <= sample <= 0xffffffff:
            raise ValueError(f'{sample} doesn\'t fit 32 bits')

        return sample & 0xffffff

    @classmethod
    def from_bytes(cls, raw):
        return cls(tuple(Bits(triplet).uintle for triplet in iter_triplets(raw)))

    def encode(self):
        return join_groups(Bits(uintle=sample, length=24).bytes for sample in self.samples)


@dataclass(frozen=True)
class Empty(BitDepth):
    '''No samples at all, it can't be written.'''

    def __len__(self):
        return 0

    def encode(self):
        raise EmptyDataException('no audio data to write')


bits2class = {
    Eight.bits_per_sample: Eight,
    Sixteen.bits_per_sample: Sixteen,
    TwentyFour.bits_per_sample: TwentyFour,
}
