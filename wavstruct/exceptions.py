class WavStructException(Exception):
    '''Base class to extend in order to throw exception in wavstruct.

    It takes an optional argument that represents the chain of the layer that
    caused the exception, innermost field first.
    '''

    def __init__(self, *args, chain=None):
        self.chain = chain if chain is not None else []
        super().__init__(*args)

    def __str__(self):
        message = super().__str__()
        if not self.chain:
            return message

        location = '.'.join(reversed(self.chain))
        return f'{message} (at {location})' if message else f'failed at {location}'


class UnpackException(WavStructException):
    pass


class MagicException(WavStructException):
    pass


class ChunkUnpackException(WavStructException):
    pass


class NotWaveException(MagicException):
    '''The container is not a RIFF file with form type WAVE.'''
    pass


class MissingChunkException(WavStructException):

    def __init__(self, chunk_id, *args, **kwargs):
        self.chunk_id = chunk_id
        super().__init__(*args, **kwargs)


class UnsupportedFormatException(WavStructException):
    '''The audio data is not uncompressed PCM.'''

    def __init__(self, audio_format, *args, **kwargs):
        self.audio_format = audio_format
        super().__init__(*args, **kwargs)


class UnsupportedBitDepthException(WavStructException):

    def __init__(self, bits_per_sample, *args, **kwargs):
        self.bits_per_sample = bits_per_sample
        super().__init__(*args, **kwargs)


class EmptyDataException(WavStructException):
    pass
