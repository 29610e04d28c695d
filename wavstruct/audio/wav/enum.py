from enum import Enum


class WaveFormat(Enum):
    '''Format tags of the "fmt " chunk, only PCM is supported for decoding.'''
    PCM        = 0x0001
    ADPCM      = 0x0002
    IEEE_FLOAT = 0x0003
    ALAW       = 0x0006
    MULAW      = 0x0007
    EXTENSIBLE = 0xfffe
