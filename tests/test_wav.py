import io

import pytest

from wavstruct.audio import wav
from wavstruct.exceptions import (
    EmptyDataException,
    MissingChunkException,
    NotWaveException,
    UnsupportedBitDepthException,
    UnsupportedFormatException,
)

from utils import build_chunk, build_fmt, build_riff


@pytest.mark.parametrize('bits_per_sample,track', [
    (8, wav.Eight(b'\x00\x80\xff\x10')),
    (16, wav.Sixteen((0, -1, 0x7fff, -0x8000))),
    (24, wav.TwentyFour((0, -1, 0x7fffff, -0x800000, 0x123456))),
])
def test_write_and_read(bits_per_sample, track):
    header = wav.Header.new(wav.WaveFormat.PCM.value, channel_count=1, sampling_rate=22050, bits_per_sample=bits_per_sample)
    stream = io.BytesIO()

    wav.write(header, track, stream)
    stream.seek(0)

    assert wav.read(stream) == (header, track)


def test_write_layout():
    header = wav.Header.new(wav.WaveFormat.PCM.value, channel_count=2, sampling_rate=8000, bits_per_sample=8)
    track = wav.Eight(b'\x01\x02\x03')
    stream = io.BytesIO()

    wav.write(header, track, stream)

    assert stream.getvalue() == build_riff(
        b'WAVE',
        build_chunk(b'fmt ', build_fmt(channel_count=2, sampling_rate=8000, bits_per_sample=8)),
        build_chunk(b'data', b'\x01\x02\x03'),
    )
    assert stream.getvalue()[4:8] == b'\x28\x00\x00\x00'


def test_write_empty():
    header = wav.Header.new(wav.WaveFormat.PCM.value, channel_count=1, sampling_rate=8000, bits_per_sample=16)
    stream = io.BytesIO()

    with pytest.raises(EmptyDataException):
        wav.write(header, wav.Empty(), stream)

    assert stream.getvalue() == b''


def test_read(wave_file):
    header, track = wav.read(wave_file(b'\x01\x00\xff\xff', channel_count=2, sampling_rate=48000))

    assert header.channel_count == 2
    assert header.sampling_rate == 48000
    assert header.block_align == 4
    assert header.bits_per_sample == 16
    assert track == wav.Sixteen((1, -1))


def test_read_path(tmp_path, wave_file):
    path = tmp_path / 'sound.wav'
    path.write_bytes(wave_file(b'\x10\x20', bits_per_sample=8).getvalue())

    with open(path, 'rb') as f:
        header, track = wav.read(f)

    assert track == wav.Eight(b'\x10\x20')


def test_read_skips_unknown_chunks(wave_file):
    source = wave_file(b'\x02\x00', extra_chunks=[
        build_chunk(b'LIST', b'INFOISFT\x03\x00\x00\x00ab\x00\x00'),
        build_chunk(b'fact', b'\x01\x00\x00'),
    ])

    header, track = wav.read(source)

    assert track == wav.Sixteen((2,))


def test_read_chunks_in_any_order():
    source = io.BytesIO(build_riff(
        b'WAVE',
        build_chunk(b'data', b'\x01\x02\x03'),
        build_chunk(b'fmt ', build_fmt(bits_per_sample=24)),
    ))

    header, track = wav.read(source)

    assert track == wav.TwentyFour((0x030201,))


def test_read_first_chunk_wins():
    source = io.BytesIO(build_riff(
        b'WAVE',
        build_chunk(b'fmt ', build_fmt(bits_per_sample=8)),
        build_chunk(b'data', b'\x01'),
        build_chunk(b'fmt ', build_fmt(bits_per_sample=16)),
        build_chunk(b'data', b'\x02\x00'),
    ))

    header, track = wav.read(source)

    assert header.bits_per_sample == 8
    assert track == wav.Eight(b'\x01')


def test_read_truncated_samples(wave_file):
    header, track = wav.read(wave_file(b'\x01\x02\x03'))

    assert track == wav.Sixteen((0x0201,))


def test_read_twenty_four(wave_file):
    header, track = wav.read(wave_file(b'\x01\x00\x00\xff\xff\xff', bits_per_sample=24))

    assert header.block_align == 3
    assert track.samples == (1, 0x00ffffff)
    assert track == wav.TwentyFour((1, -1))


def test_read_empty_data(wave_file):
    header, track = wav.read(wave_file(b''))

    assert len(track) == 0


def test_read_not_riff():
    with pytest.raises(NotWaveException):
        wav.read(io.BytesIO(build_riff(b'WAVE', riff_id=b'RIFX')))


def test_read_not_wave():
    with pytest.raises(NotWaveException):
        wav.read(io.BytesIO(build_riff(b'AVI ', build_chunk(b'fmt ', build_fmt()))))


@pytest.mark.parametrize('data', [
    b'',
    b'RIFF',
    b'RIFF\x04\x00\x00\x00WA',
])
def test_read_garbage(data):
    with pytest.raises(NotWaveException):
        wav.read(io.BytesIO(data))


def test_read_unsupported_format(wave_file):
    with pytest.raises(UnsupportedFormatException) as exc:
        wav.read(wave_file(b'\x00' * 4, audio_format=2))

    assert exc.value.audio_format == 2


def test_read_unsupported_bit_depth(wave_file):
    with pytest.raises(UnsupportedBitDepthException):
        wav.read(wave_file(b'\x00' * 4, bits_per_sample=32))


def test_read_missing_fmt():
    with pytest.raises(MissingChunkException) as exc:
        wav.read(io.BytesIO(build_riff(b'WAVE', build_chunk(b'data', b'\x00\x00'))))

    assert exc.value.chunk_id == wav.FMT_ID


def test_read_missing_data():
    with pytest.raises(MissingChunkException) as exc:
        wav.read(io.BytesIO(build_riff(b'WAVE', build_chunk(b'fmt ', build_fmt()))))

    assert exc.value.chunk_id == wav.DATA_ID


def test_read_header_only(wave_file):
    header = wav.read_header(wave_file(b'\x00' * 6, channel_count=3))

    assert header.channel_count == 3
    assert header.block_align == 6


def test_verify_wave_file(wave_file):
    source = wave_file(b'\x00\x00')

    reference = wav.verify_wave_file(source)

    assert reference.id == b'RIFF'
    assert reference.end == len(source.getvalue())
