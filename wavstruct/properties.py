import logging
from enum import Enum, auto
from typing import List


class ChunkPhase(Enum):
    '''Enum to state the actual phase of a chunk'''
    INIT      = 0
    PROGRESS  = auto()
    RELAYOUTING = auto()
    PACKING   = auto()
    UNPACKING = auto()
    DONE      = auto()


def get_root_from_chunk(instance):
    return get_instance_from_chunk(instance, condition=lambda x: x.father is None)


def get_instance_from_chunk(instance, condition):
    while not condition(instance):
        if instance.father is None:
            raise AttributeError(f'no father of {instance.__class__.__name__} satisfies the condition')

        instance = instance.father

    return instance


class Dependency:
    '''This makes the relation between fields possible.

    In practice this class allows to write something like

        class Simple(Chunk):
            length = fields.StructField('I')
            data = fields.StringField(Dependency('.length'))

    and have the (internal) length of the string contained in the field named 'data'
    strictly connected to the field named 'length': unpacking reads the value
    from 'length', setting a new value into 'data' writes back its length.

    The syntax for defining the expression is inspired from module resolution
    with an extra element via the first char of the expression:

     - '.' indicates we refer to a field at the same level
     - otherwise the resolution starts from the root chunk
    '''
    def __init__(self, expression):
        self.expression = expression
        self.logger = logging.getLogger(__name__)
        self._hierarchy: List["Field"] = []

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.expression})>'

    def resolve_field(self, instance):
        self.logger.debug('trying to resolve \'%s\' for \'%s\'' % (
            self.expression,
            instance.__class__.__name__,
        ))

        self._hierarchy = []

        # '.miao'.split(".") -> ['', 'miao']
        # 'miao'.split(".") -> ['miao']
        fields_path = self.expression.split('.')

        # find the root the resolution starts
        if fields_path[0] == '':  # we have a relative dependency
            field = instance.father
            self.logger.debug(' resolve from father: \'%s\'' % field.__class__.__name__)
            fields_path = fields_path[1:]
        else:
            field = get_root_from_chunk(instance)
            self.logger.debug(' resolve from root: \'%s\'' % field.__class__.__name__)

        self._hierarchy.append(field)

        # now we can resolve each component
        for component_name in fields_path:
            field = getattr(field, component_name)
            self.logger.debug(' resolved sub-component "%s" from "%s"' % (
                field.__class__.__name__, component_name))
            self._hierarchy.append(field)

        return field

    def _do_resolve(self, instance):
        value = self._hierarchy[-1].value

        self.logger.debug(' resolved with value %s' % value)

        return value

    def resolve(self, instance):
        '''With this method we resolve the attribute with respect to the instance
        passed as argument.'''
        self.resolve_field(instance)

        return self._do_resolve(instance)

    def _do_value(self, instance, value):
        """Returns the value to be set"""
        return value

    def resolve_and_set(self, instance, value):
        """Write back the value into the field we depend on"""
        real_field = self.resolve_field(instance)
        if not hasattr(real_field, 'value'):
            raise ValueError('something is wrong with the Dependency resolution!')
        real_field.value = self._do_value(instance, value)


class DeltaDependency(Dependency):
    '''The value is the one of the field plus a constant, for example
    a length that counts also some header bytes.'''

    def __init__(self, delta, expression):
        super().__init__(expression)
        self._delta = delta

    def _do_resolve(self, instance):
        return super()._do_resolve(instance) + self._delta

    def _do_value(self, instance, value):
        return value - self._delta


class PropertyDescriptor(object):
    """This the glue for dependency management: the attribute can be a plain
    value or a Dependency resolved with respect to the instance."""

    def __init__(self, name: str, _type: type):
        self.name = name
        self.type = _type

    @property
    def cache_name(self):
        return f'_{self.name}_cache'

    def __get__(self, instance: "Field", owner):
        if instance is None:
            return self

        data = instance.__dict__
        if self.name not in data:
            raise AttributeError(f"no '{self.name}' here!")

        value = data[self.name]

        if isinstance(value, Dependency):
            # without a father there is nothing to resolve against
            if instance.father is None:
                return data.get(self.cache_name)

            return value.resolve(instance)

        return value

    def __set__(self, instance: "Field", value):
        if not isinstance(value, (self.type, Dependency)):
            raise ValueError(f"A property must be of type {self.type} or a Dependency")

        data = instance.__dict__

        # the first time we add without thinking much
        if self.name not in data or isinstance(value, Dependency):
            data[self.name] = value
            return

        attribute = data[self.name]

        if not isinstance(attribute, Dependency):
            data[self.name] = value
            return

        if instance.father is None:
            data[self.cache_name] = value
            return

        attribute.resolve_and_set(instance, value)
