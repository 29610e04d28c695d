import struct


def build_chunk(chunk_id, payload):
    '''Encode a RIFF sub-chunk by hand, padding included.'''
    return chunk_id + struct.pack('<I', len(payload)) + payload + b'\x00' * (len(payload) & 1)


def build_riff(form_type, *chunks, riff_id=b'RIFF'):
    contents = form_type + b''.join(chunks)
    return riff_id + struct.pack('<I', len(contents)) + contents


def build_fmt(audio_format=1, channel_count=1, sampling_rate=8000, bits_per_sample=16):
    block_align = channel_count * bits_per_sample // 8
    return struct.pack(
        '<HHIIHH',
        audio_format,
        channel_count,
        sampling_rate,
        sampling_rate * block_align,
        block_align,
        bits_per_sample,
    )
