import io
import logging


logger = logging.getLogger(__name__)


class Stream(object):
    '''This is a simple wrapper around bytes/file object to
    uniform its properties: mainly we need to have a seek() method
    that can be chained and a way to know the size of the data.

    Only the objects opened by the Stream itself are closed by it,
    a file object passed by the caller is left untouched.'''
    def __init__(self, obj, flags='r'):
        '''Here we normalize the object in order to be accessed as a normal file object'''
        self._type = type(obj)
        self.flags = flags
        self.obj = obj
        self.history = []
        self._owned = False

        init_method_name = 'init_%s' % self.obj.__class__.__name__

        init_method = getattr(self, init_method_name, self.init_file)

        init_method()

    def __repr__(self):
        return '<%s(%r)>' % (self.__class__.__name__, self.obj)

    def __getattr__(self, name):
        if name == 'obj':
            raise AttributeError(name)
        return getattr(self.obj, name)

    def __del__(self):
        self.close()

    def close(self):
        obj = self.__dict__.get('obj')
        if self.__dict__.get('_owned') and obj is not None:
            obj.close()

    def init_str(self):
        '''We think this is a path'''
        logger.debug('opening path \'%s\'' % self.obj)
        self.obj = open(self.obj, 'rb')
        self._owned = True

    def init_bytes(self):
        '''We think these are raw bytes'''
        self.obj = io.BytesIO(self.obj)
        self._owned = True

    init_bytearray = init_bytes

    def init_Stream(self):
        self.obj = self.obj.obj

    def init_file(self):
        '''Anything else must behave like a binary file object'''
        for method_name in ('read', 'seek', 'tell'):
            if not hasattr(self.obj, method_name):
                raise ValueError('\'%s\' is the wrong kind of object to stream' % self.obj.__class__.__name__)

    def seek(self, offset, whence=io.SEEK_SET):
        if not isinstance(offset, int):
            raise ValueError('\'%s\' is the wrong kind of offset to use' % offset.__class__.__name__)

        self.obj.seek(offset, whence)

        return self

    def read(self, size=-1):
        return self.obj.read(size)

    def read_all(self):
        '''Returns all the data from the actual position to the end.'''
        return self.obj.read()

    def write(self, data):
        return self.obj.write(data)

    def size(self):
        '''Total size of the data, the position is preserved.'''
        self.save()
        try:
            return self.obj.seek(0, io.SEEK_END)
        finally:
            self.restore()

    def save(self):
        self.history.append(self.obj.tell())

    def restore(self):
        old_seek = self.history.pop()
        self.obj.seek(old_seek)
