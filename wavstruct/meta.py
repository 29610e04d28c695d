import copy
import logging
from enum import Enum, Flag, auto


logger = logging.getLogger(__name__)


class Endianess(Enum):
    LITTLE_ENDIAN = auto()
    BIG_ENDIAN    = auto()
    NETWORK       = auto()
    NATIVE        = auto()


class Compliant(Flag):
    '''It indicates which degree of compliantness the data must reflect the format.

    INHERIT means that the father is asked when the field itself doesn't say anything.'''
    NONE    = 0
    ENUM    = 1 << 0
    MAGIC   = 1 << 1
    INHERIT = 1 << 2


class FieldDescriptor(object):
    """Wrapper around field access of a Chunk related class.

    Each instance of the chunk gets its own copy of the field declared in the class."""

    def __init__(self, field_instance: "Field", field_name: str):
        self.logger = logging.getLogger(f"{self.__module__}.{self.__class__.__name__}")
        self.field = field_instance
        self.field.name = field_name

    def __get__(self, instance, type=None):
        if instance is None:
            return self

        data = instance.__dict__

        if self.field.name not in data:
            self.logger.debug("create new field for field named '%s'", self.field.name)
            data[self.field.name] = self.field.create(father=instance)

        return data[self.field.name]

    def __set__(self, instance, value):
        data = instance.__dict__

        # if the value is the same type then set as it is
        if isinstance(value, self.field.__class__):
            value.father = instance
            value.name = self.field.name
            data[self.field.name] = value
        # otherwise delegate to the field
        else:
            self.__get__(instance).value = value


class FieldBase(object):

    def contribute_to_chunk(self, cls, name):
        if name in cls.__dict__:
            raise AttributeError(f'field {name} is already present in class {cls.__name__}')

        setattr(cls, name, FieldDescriptor(self, name))

    def create(self, father):
        instance = copy.deepcopy(self)
        instance.father = father
        return instance


class Meta(object):
    """Class containing metadata about the abstraction"""

    def __init__(self):
        self.fields = []


class MetaChunk(type):

    def __new__(cls, names, bases, attrs):
        '''The fields are collected in declaration order, the ones of the parents first.'''
        module = attrs.pop('__module__')
        classcell = attrs.pop('__classcell__', None)

        new_attrs = {
            '__module__': module,
        }
        if classcell is not None:
            new_attrs['__classcell__'] = classcell
        new_cls = super(MetaChunk, cls).__new__(cls, names, bases, new_attrs)

        new_cls._meta = Meta()

        # handle inheritance
        parents = [_ for _ in bases if isinstance(_, MetaChunk)]
        for parent in parents:
            for obj_name in parent._meta.fields:
                if obj_name in new_cls._meta.fields:
                    continue
                setattr(new_cls, obj_name, parent.__dict__[obj_name])
                new_cls._meta.fields.append(obj_name)

        for obj_name, obj in attrs.items():
            new_cls.add_to_class(obj_name, obj)

        return new_cls

    def add_to_class(cls, name, value):
        if hasattr(value, 'contribute_to_chunk'):
            logger.debug('contribute_to_chunk() found for field \'%s\'' % name)
            cls._meta.fields.append(name)
            value.contribute_to_chunk(cls, name)
        else:
            setattr(cls, name, value)
