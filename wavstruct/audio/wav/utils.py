import logging


logger = logging.getLogger(__name__)


def iter_groups(data, n):
    '''Yields the consecutive groups of n bytes of data, an incomplete
    group at the end is dropped.'''
    remainder = len(data) % n
    if remainder:
        logger.debug(f'dropping the last {remainder} bytes, not enough for a group of {n}')

    for idx in range(0, len(data) - remainder, n):
        yield bytes(data[idx:idx + n])


def iter_pairs(data):
    return iter_groups(data, 2)


def iter_triplets(data):
    return iter_groups(data, 3)


def join_groups(groups):
    return b''.join(groups)
