import io
import logging
import os

import pytest

from utils import build_chunk, build_fmt, build_riff


logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.INFO)


@pytest.fixture
def wave_file():
    '''Factory of in-memory WAVE files built without using the library.'''
    def _wave_file(data=b'', extra_chunks=(), **kwargs):
        return io.BytesIO(build_riff(
            b'WAVE',
            build_chunk(b'fmt ', build_fmt(**kwargs)),
            *extra_chunks,
            build_chunk(b'data', data),
        ))

    return _wave_file
