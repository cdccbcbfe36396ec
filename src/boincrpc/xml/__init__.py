# SPDX-FileCopyrightText: 2020-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Declarative description of the XML structures exchanged with the daemon.

A structure is described by subclassing :class:`XMLElement` and listing its
fields as descriptors:

    class VersionInfo(XMLElement, name='server_version'):
        major: DataElement[int] = DataElement(int)
        minor: DataElement[int] = DataElement(int)
        release: OptionalDataElement[int] = OptionalDataElement(int, default=None)

Instances can be parsed from an lxml element with ``from_xml`` and turned
back into one with ``to_xml``. Parsing is strict about the fields that are
described (missing mandatory elements and invalid values raise ValueError)
and ignores everything else, so newer daemons that add elements are still
understood.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, MutableMapping
from inspect import Parameter, Signature
from math import inf
from typing import ClassVar, Protocol, Self, cast, dataclass_transform, overload, runtime_checkable

from lxml import etree

__all__ = (  # noqa: RUF022
    'ETreeElement', 'XMLElement', 'AnnotatedXMLElement', 'xml_parser',
    'DataAdapter', 'AdapterRegistry',
    'BooleanAdapter', 'StringAdapter', 'FloatAdapter', 'IntegerAdapter', 'NonNegativeIntegerAdapter', 'IntAdapter', 'LongAdapter',
    'DataElement', 'OptionalDataElement', 'MultiDataElement', 'FlagElement', 'OptionalElement', 'MultiElement',
)

# noinspection PyProtectedMember
type ETreeElement = etree._Element  # noqa: SLF001
type XMLData = str | int | float | bool


@runtime_checkable
class DataAdapter[T](Protocol):
    """A protocol that describes an external adapter between a data type T and XML"""

    @staticmethod
    def xml_parse(value: str, /) -> T:
        """Parse XML into the data type"""
        ...

    @staticmethod
    def xml_build(value: T, /) -> str:
        """Build XML from the data type"""
        ...


type DataAdapterType[T] = type[DataAdapter[T]]


class AdapterRegistry[T]:
    _adapters: ClassVar[MutableMapping[type, type[DataAdapter]]] = {}

    @classmethod
    def associate(cls, data_type: type[T], adapter: type[DataAdapter[T]]) -> None:
        cls._adapters[data_type] = adapter

    @classmethod
    def get_adapter(cls, data_type: type[T]) -> type[DataAdapter[T]] | None:
        return cls._adapters.get(data_type, None)


class BooleanAdapter:
    @staticmethod
    def xml_parse(value: str) -> bool:
        match value.strip():
            case '1' | 'true':
                return True
            case '0' | 'false':
                return False
            case _:
                raise ValueError(f'Invalid boolean value: {value!r}')

    @staticmethod
    def xml_build(value: bool) -> str:  # noqa: FBT001
        return '1' if value else '0'


class StringAdapter:
    """The daemon pads most text values with whitespace and newlines, which are not part of the value"""

    @staticmethod
    def xml_parse(value: str) -> str:
        return value.strip()

    @staticmethod
    def xml_build(value: str) -> str:
        return value


class FloatAdapter:
    @staticmethod
    def xml_parse(value: str) -> float:
        return float(value)

    @staticmethod
    def xml_build(value: float) -> str:
        return repr(float(value))


AdapterRegistry.associate(bool, BooleanAdapter)
AdapterRegistry.associate(str, StringAdapter)
AdapterRegistry.associate(float, FloatAdapter)


class IntegerAdapter:
    def __init_subclass__(cls, *, min_value: int | None = None, max_value: int | None = None, name: str = 'integer', bits: int | None = None, unsigned: bool = False, **kw) -> None:  # noqa: ANN003
        super().__init_subclass__(**kw)

        # Subclasses should specify either min_value/max_value/name or bits/unsigned.
        # When bits is specified it overwrites the name and boundaries with computed values.

        lower_bound: int | float
        upper_bound: int | float

        if bits is not None:
            if bits <= 0:
                raise ValueError('when specified, bits must be a positive integer')
            name = f'{"unsigned" if unsigned else "signed"} {bits}-bit integer'
            offset: int = 0 if unsigned else 2 ** (bits - 1)
            lower_bound = 0 - offset
            upper_bound = 2**bits - 1 - offset
        else:
            lower_bound = min_value if min_value is not None else -inf
            upper_bound = max_value if max_value is not None else +inf

        def xml_parse(value: str) -> int:
            number = int(value)
            if lower_bound <= number <= upper_bound:
                return number
            raise ValueError(f"invalid value '{value.strip()}' for {name}")

        def xml_build(value: int) -> str:
            if lower_bound <= value <= upper_bound:
                return str(value)
            raise ValueError(f"invalid value '{value}' for {name}")

        cls.xml_parse = staticmethod(xml_parse)  # type: ignore[method-assign]
        cls.xml_build = staticmethod(xml_build)  # type: ignore[method-assign]

    @staticmethod
    def xml_parse(value: str) -> int:
        return int(value)

    @staticmethod
    def xml_build(value: int) -> str:
        return str(value)


class NonNegativeIntegerAdapter(IntegerAdapter, min_value=0, name='non-negative integer'):
    pass


class IntAdapter(IntegerAdapter, bits=32):
    pass


class LongAdapter(IntegerAdapter, bits=64):
    pass


def xml_parser(encoding: str | None = None) -> etree.XMLParser:
    # documents come from the network, do not let them reach out of the parser
    return etree.XMLParser(encoding=encoding, resolve_entities=False, no_network=True, load_dtd=False, huge_tree=False, remove_comments=True, remove_pis=True)


def _resolve_adapter[D](data_type: type[D], adapter: DataAdapterType[D] | None) -> tuple[Callable[[str], D], Callable[[D], str]]:
    if adapter is None:
        adapter = AdapterRegistry.get_adapter(data_type)
    if adapter is not None:
        return adapter.xml_parse, adapter.xml_build
    return cast(Callable[[str], D], data_type), str


class XMLElement:
    # The element name can be given either as a class parameter or as the _name_ class attribute:
    #
    # class MyElement(XMLElement, name=...):
    #     ...

    _name_: ClassVar[str | None] = None

    _fields_: ClassVar[dict[str, 'FieldDescriptor']] = {}

    __signature__: ClassVar[Signature] = Signature()

    _all_arguments: ClassVar[frozenset[str]] = frozenset()
    _mandatory_arguments: ClassVar[frozenset[str]] = frozenset()

    def __new__(cls, **kw: object) -> Self:
        if cls._name_ is None:
            raise TypeError(f'Cannot instantiate abstract class {cls.__qualname__!r} that does not specify a name')
        if not cls._all_arguments.issuperset(kw):
            raise TypeError(f'got an unexpected keyword argument {next(iter(set(kw) - cls._all_arguments))!r}')
        if not cls._mandatory_arguments.issubset(kw):
            raise TypeError(f'missing a required keyword argument {next(iter(cls._mandatory_arguments - set(kw)))!r}')
        return super().__new__(cls)

    def __init__(self, **kw: object) -> None:
        for name, descriptor in self._fields_.items():
            if name in kw:
                setattr(self, name, kw[name])
            else:
                descriptor.set_default(self)

    def __init_subclass__(cls, name: str | None = None, **kw: object) -> None:
        super().__init_subclass__(**kw)

        if name is not None:
            if '_name_' in cls.__dict__ and cls._name_ != name:
                raise TypeError(f'The name specified via class parameter and the "_name_" class attribute are different ({name!r} != {cls._name_!r})')
            cls._name_ = name

        # all the fields on this element (both inherited and locally defined)
        cls._fields_ = cls._fields_ | {name: value for name, value in cls.__dict__.items() if isinstance(value, FieldDescriptor)}

        cls.__signature__ = Signature(parameters=[descriptor.signature_parameter for descriptor in cls._fields_.values()])
        cls._all_arguments = frozenset(cls.__signature__.parameters)
        cls._mandatory_arguments = frozenset(p.name for p in cls.__signature__.parameters.values() if p.default is Parameter.empty)

    def __repr__(self) -> str:
        fields = ', '.join(f'{name}={self.__dict__.get(name)!r}' for name in self._fields_)
        return f'{self.__class__.__qualname__}({fields})'

    def __eq__(self, other: object) -> bool:
        if isinstance(other, XMLElement):
            return type(self) is type(other) and all(self.__dict__.get(name) == other.__dict__.get(name) for name in self._fields_)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    @classmethod
    def from_xml(cls, element: ETreeElement) -> Self:
        if cls._name_ is None:
            raise TypeError(f'Cannot instantiate abstract class {cls.__qualname__} that does not specify a name')
        if element.tag != cls._name_:
            raise ValueError(f'The element tag does not match the {cls.__qualname__} element tag: {element.tag!r} != {cls._name_!r}')
        instance = super().__new__(cls)
        for field in cls._fields_.values():
            field.from_xml(instance, element)
        return instance

    @classmethod
    def from_string(cls, data: str | bytes) -> Self:
        return cls.from_xml(etree.fromstring(data, parser=xml_parser()))

    def to_xml(self) -> ETreeElement:
        if self._name_ is None:
            raise TypeError(f'Cannot build abstract class {self.__class__.__qualname__} that does not specify a name')
        element = etree.Element(self._name_)
        for field in self._fields_.values():
            field.to_xml(self, element)
        return element


def _children(element: ETreeElement, tag: str) -> list[ETreeElement]:
    return [child for child in element if child.tag == tag]


class FieldDescriptor[F](ABC):
    name: str | None
    type: type[F]

    @property
    def signature_parameter(self) -> Parameter:
        assert self.name is not None  # noqa: S101 (used by type checkers)
        return Parameter(name=self.name, kind=Parameter.KEYWORD_ONLY, annotation=self.type)

    def __set_name__(self, owner: type[XMLElement], name: str) -> None:
        if not issubclass(owner, XMLElement):  # static type analysis does not catch this
            raise TypeError(f'Can only use {self.__class__.__qualname__} descriptors on XMLElement objects')
        if self.name is None:
            self.name = name
            self._set_xml_name(name)
        elif name != self.name:
            raise TypeError(f'cannot assign the same {self.__class__.__name__} descriptor to two different names: {self.name} and {name}')

    def _set_xml_name(self, name: str) -> None:
        pass

    def __delete__(self, instance: XMLElement) -> None:
        raise AttributeError(f'the {self.name!r} field cannot be deleted')

    def set_default(self, instance: XMLElement) -> None:  # noqa: B027
        """Store the default value for a field that was not provided to the constructor"""

    @abstractmethod
    def from_xml(self, instance: XMLElement, element: ETreeElement) -> None:
        """Fill in the instance's field value from its corresponding etree element"""
        raise NotImplementedError

    @abstractmethod
    def to_xml(self, instance: XMLElement, element: ETreeElement) -> None:
        """Add the instance's field value to the etree element"""
        raise NotImplementedError


class DataElement[D: XMLData](FieldDescriptor[D]):
    """A mandatory child element that holds a single value"""

    def __init__(self, data_type: type[D], /, *, name: str | None = None, adapter: DataAdapterType[D] | None = None) -> None:
        self.name = None
        self.type = data_type
        self.xml_name = name or ''
        self.adapter = adapter
        self.xml_parse, self.xml_build = _resolve_adapter(data_type, adapter)

    def __repr__(self) -> str:
        adapter_name = self.adapter.__qualname__ if self.adapter else None
        return f'{self.__class__.__name__}({self.type.__name__}, name={self.xml_name!r}, adapter={adapter_name})'

    def _set_xml_name(self, name: str) -> None:
        self.xml_name = self.xml_name or name

    @overload
    def __get__(self, instance: None, owner: type[XMLElement]) -> Self: ...

    @overload
    def __get__(self, instance: XMLElement, owner: type[XMLElement] | None = None) -> D: ...

    def __get__(self, instance: XMLElement | None, owner: type[XMLElement] | None = None) -> Self | D:
        if instance is None:
            return self
        try:
            return instance.__dict__[self.name]
        except KeyError as exc:
            raise AttributeError(f'mandatory element {self.name!r} is missing') from exc

    def __set__(self, instance: XMLElement, value: D) -> None:
        if not isinstance(value, self.type):
            raise TypeError(f'the {self.name!r} element must be of type {self.type.__qualname__}')
        self.xml_build(value)  # reject values that cannot be represented
        instance.__dict__[self.name] = value

    def from_xml(self, instance: XMLElement, element: ETreeElement) -> None:
        elements = _children(element, self.xml_name)
        if not elements:
            raise ValueError(f'Missing mandatory element {self.xml_name!r} from {element.tag!r}')
        if len(elements) > 1:
            raise ValueError(f'Excess elements for {self.xml_name!r} in {element.tag!r}')
        try:
            instance.__dict__[self.name] = self.xml_parse(elements[0].text or '')
        except ValueError as exc:
            raise ValueError(f'Invalid value for element {self.xml_name!r}: {exc!s}') from exc

    def to_xml(self, instance: XMLElement, element: ETreeElement) -> None:
        etree.SubElement(element, self.xml_name).text = self.xml_build(self.__get__(instance))


class OptionalDataElement[D: XMLData](FieldDescriptor[D]):
    """An optional child element that holds a single value"""

    def __init__(self, data_type: type[D], /, *, name: str | None = None, default: D | None = None, adapter: DataAdapterType[D] | None = None) -> None:
        self.name = None
        self.type = data_type
        self.xml_name = name or ''
        self.default = default
        self.adapter = adapter
        self.xml_parse, self.xml_build = _resolve_adapter(data_type, adapter)

    def __repr__(self) -> str:
        adapter_name = self.adapter.__qualname__ if self.adapter else None
        return f'{self.__class__.__name__}({self.type.__name__}, name={self.xml_name!r}, default={self.default!r}, adapter={adapter_name})'

    @property
    def signature_parameter(self) -> Parameter:
        assert self.name is not None  # noqa: S101 (used by type checkers)
        return Parameter(name=self.name, kind=Parameter.KEYWORD_ONLY, annotation=self.type | None, default=self.default)

    def _set_xml_name(self, name: str) -> None:
        self.xml_name = self.xml_name or name

    @overload
    def __get__(self, instance: None, owner: type[XMLElement]) -> Self: ...

    @overload
    def __get__(self, instance: XMLElement, owner: type[XMLElement] | None = None) -> D | None: ...

    def __get__(self, instance: XMLElement | None, owner: type[XMLElement] | None = None) -> Self | D | None:
        if instance is None:
            return self
        return instance.__dict__.get(self.name, self.default)

    def __set__(self, instance: XMLElement, value: D | None) -> None:
        if value is not None:
            if not isinstance(value, self.type):
                raise TypeError(f'the {self.name!r} element must be of type {self.type.__qualname__}')
            self.xml_build(value)  # reject values that cannot be represented
        instance.__dict__[self.name] = value

    def __delete__(self, instance: XMLElement) -> None:
        instance.__dict__[self.name] = None

    def set_default(self, instance: XMLElement) -> None:
        instance.__dict__[self.name] = self.default

    def from_xml(self, instance: XMLElement, element: ETreeElement) -> None:
        elements = _children(element, self.xml_name)
        if len(elements) > 1:
            raise ValueError(f'Excess elements for {self.xml_name!r} in {element.tag!r}')
        if not elements:
            instance.__dict__[self.name] = self.default
            return
        try:
            instance.__dict__[self.name] = self.xml_parse(elements[0].text or '')
        except ValueError as exc:
            raise ValueError(f'Invalid value for element {self.xml_name!r}: {exc!s}') from exc

    def to_xml(self, instance: XMLElement, element: ETreeElement) -> None:
        value = self.__get__(instance)
        if value is not None:
            etree.SubElement(element, self.xml_name).text = self.xml_build(value)


class MultiDataElement[D: XMLData](FieldDescriptor[D]):
    """A repeated child element, each occurrence holding a single value"""

    def __init__(self, data_type: type[D], /, *, name: str | None = None, optional: bool = True, adapter: DataAdapterType[D] | None = None) -> None:
        self.name = None
        self.type = data_type
        self.xml_name = name or ''
        self.optional = optional
        self.adapter = adapter
        self.xml_parse, self.xml_build = _resolve_adapter(data_type, adapter)

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self.type.__name__}, name={self.xml_name!r}, optional={self.optional!r})'

    @property
    def signature_parameter(self) -> Parameter:
        assert self.name is not None  # noqa: S101 (used by type checkers)
        return Parameter(name=self.name, kind=Parameter.KEYWORD_ONLY, annotation=Iterable[self.type], default=() if self.optional else Parameter.empty)  # type: ignore[name-defined]

    def _set_xml_name(self, name: str) -> None:
        self.xml_name = self.xml_name or name

    @overload
    def __get__(self, instance: None, owner: type[XMLElement]) -> Self: ...

    @overload
    def __get__(self, instance: XMLElement, owner: type[XMLElement] | None = None) -> list[D]: ...

    def __get__(self, instance: XMLElement | None, owner: type[XMLElement] | None = None) -> Self | list[D]:
        if instance is None:
            return self
        return instance.__dict__.setdefault(self.name, [])

    def __set__(self, instance: XMLElement, values: Iterable[D]) -> None:
        values = list(values)
        if not values and not self.optional:
            raise ValueError(f'mandatory element {self.name!r} must have at least one entry')
        if not all(isinstance(value, self.type) for value in values):
            raise TypeError(f'the {self.name!r} values must be of type {self.type.__qualname__}')
        instance.__dict__[self.name] = values

    def set_default(self, instance: XMLElement) -> None:
        instance.__dict__[self.name] = []

    def from_xml(self, instance: XMLElement, element: ETreeElement) -> None:
        elements = _children(element, self.xml_name)
        if not self.optional and not elements:
            raise ValueError(f'There must be at least 1 element for {self.xml_name!r} in {element.tag!r}')
        try:
            instance.__dict__[self.name] = [self.xml_parse(child.text or '') for child in elements]
        except ValueError as exc:
            raise ValueError(f'Invalid value for element {self.xml_name!r}: {exc!s}') from exc

    def to_xml(self, instance: XMLElement, element: ETreeElement) -> None:
        for value in self.__get__(instance):
            etree.SubElement(element, self.xml_name).text = self.xml_build(value)


class FlagElement(FieldDescriptor[bool]):
    """
    A boolean carried by the presence of a child element.

    An empty element (<flag/>) or one with a true value means True, one with
    a false value (<flag>0</flag>) or a missing element means False.
    """

    def __init__(self, *, name: str | None = None) -> None:
        self.name = None
        self.type = bool
        self.xml_name = name or ''

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}(name={self.xml_name!r})'

    @property
    def signature_parameter(self) -> Parameter:
        assert self.name is not None  # noqa: S101 (used by type checkers)
        return Parameter(name=self.name, kind=Parameter.KEYWORD_ONLY, annotation=bool, default=False)

    def _set_xml_name(self, name: str) -> None:
        self.xml_name = self.xml_name or name

    @overload
    def __get__(self, instance: None, owner: type[XMLElement]) -> Self: ...

    @overload
    def __get__(self, instance: XMLElement, owner: type[XMLElement] | None = None) -> bool: ...

    def __get__(self, instance: XMLElement | None, owner: type[XMLElement] | None = None) -> Self | bool:
        if instance is None:
            return self
        return instance.__dict__.get(self.name, False)

    def __set__(self, instance: XMLElement, value: bool) -> None:  # noqa: FBT001
        if not isinstance(value, bool):
            raise TypeError(f'the {self.name!r} flag must be of type bool')
        instance.__dict__[self.name] = value

    def set_default(self, instance: XMLElement) -> None:
        instance.__dict__[self.name] = False

    def from_xml(self, instance: XMLElement, element: ETreeElement) -> None:
        elements = _children(element, self.xml_name)
        if not elements:
            instance.__dict__[self.name] = False
            return
        text = (elements[0].text or '').strip()
        try:
            instance.__dict__[self.name] = BooleanAdapter.xml_parse(text) if text else True
        except ValueError as exc:
            raise ValueError(f'Invalid value for flag {self.xml_name!r}: {exc!s}') from exc

    def to_xml(self, instance: XMLElement, element: ETreeElement) -> None:
        if self.__get__(instance):
            etree.SubElement(element, self.xml_name)


class OptionalElement[E: XMLElement](FieldDescriptor[E]):
    """An optional child element described by an XMLElement subclass"""

    def __init__(self, element_type: type[E], /) -> None:
        if not (isinstance(element_type, type) and issubclass(element_type, XMLElement)):
            raise TypeError(f"element type must be a subclass of XMLElement, not '{type(element_type)}'")
        if element_type._name_ is None:
            raise TypeError(f'{element_type.__qualname__!r} must specify a name to be usable as element type')
        self.name = None
        self.type = element_type

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self.type.__name__})'

    @property
    def signature_parameter(self) -> Parameter:
        assert self.name is not None  # noqa: S101 (used by type checkers)
        return Parameter(name=self.name, kind=Parameter.KEYWORD_ONLY, annotation=self.type | None, default=None)

    @overload
    def __get__(self, instance: None, owner: type[XMLElement]) -> Self: ...

    @overload
    def __get__(self, instance: XMLElement, owner: type[XMLElement] | None = None) -> E | None: ...

    def __get__(self, instance: XMLElement | None, owner: type[XMLElement] | None = None) -> Self | E | None:
        if instance is None:
            return self
        return instance.__dict__.get(self.name, None)

    def __set__(self, instance: XMLElement, value: E | None) -> None:
        if value is not None and type(value) is not self.type:
            raise TypeError(f'element must be of type {self.type.__qualname__}')
        instance.__dict__[self.name] = value

    def __delete__(self, instance: XMLElement) -> None:
        instance.__dict__[self.name] = None

    def set_default(self, instance: XMLElement) -> None:
        instance.__dict__[self.name] = None

    def from_xml(self, instance: XMLElement, element: ETreeElement) -> None:
        elements = _children(element, cast(str, self.type._name_))
        if len(elements) > 1:
            raise ValueError(f'Excess elements for {self.type._name_!r} in {element.tag!r}')
        instance.__dict__[self.name] = self.type.from_xml(elements[0]) if elements else None

    def to_xml(self, instance: XMLElement, element: ETreeElement) -> None:
        value = self.__get__(instance)
        if value is not None:
            element.append(value.to_xml())


class MultiElement[E: XMLElement](FieldDescriptor[E]):
    """A repeated child element described by an XMLElement subclass"""

    def __init__(self, element_type: type[E], /, *, optional: bool = True) -> None:
        if not (isinstance(element_type, type) and issubclass(element_type, XMLElement)):
            raise TypeError(f"element type must be a subclass of XMLElement, not '{type(element_type)}'")
        if element_type._name_ is None:
            raise TypeError(f'{element_type.__qualname__!r} must specify a name to be usable as element type')
        self.name = None
        self.type = element_type
        self.optional = optional

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self.type.__name__}, optional={self.optional})'

    @property
    def signature_parameter(self) -> Parameter:
        assert self.name is not None  # noqa: S101 (used by type checkers)
        return Parameter(name=self.name, kind=Parameter.KEYWORD_ONLY, annotation=Iterable[self.type], default=() if self.optional else Parameter.empty)  # type: ignore[name-defined]

    @overload
    def __get__(self, instance: None, owner: type[XMLElement]) -> Self: ...

    @overload
    def __get__(self, instance: XMLElement, owner: type[XMLElement] | None = None) -> list[E]: ...

    def __get__(self, instance: XMLElement | None, owner: type[XMLElement] | None = None) -> Self | list[E]:
        if instance is None:
            return self
        return instance.__dict__.setdefault(self.name, [])

    def __set__(self, instance: XMLElement, value: Iterable[E]) -> None:
        elements = list(value)
        if not elements and not self.optional:
            raise ValueError(f'the {self.name!r} element must have at least one item')
        for element in elements:
            if type(element) is not self.type:
                raise TypeError(f'element must be of type {self.type.__qualname__}')
        instance.__dict__[self.name] = elements

    def set_default(self, instance: XMLElement) -> None:
        instance.__dict__[self.name] = []

    def from_xml(self, instance: XMLElement, element: ETreeElement) -> None:
        elements = _children(element, cast(str, self.type._name_))
        if not self.optional and not elements:
            raise ValueError(f'There must be at least 1 element for {self.type._name_!r} in {element.tag!r}')
        instance.__dict__[self.name] = [self.type.from_xml(child) for child in elements]

    def to_xml(self, instance: XMLElement, element: ETreeElement) -> None:
        element.extend(child.to_xml() for child in self.__get__(instance))


field_specifiers = (DataElement, OptionalDataElement, MultiDataElement, FlagElement, OptionalElement, MultiElement)


@dataclass_transform(kw_only_default=True, field_specifiers=field_specifiers)  # type: ignore[misc]
class AnnotatedXMLElement(XMLElement):
    """
    A static type checker friendly variant of XMLElement.

    The element definition needs to include both an annotation and the
    descriptor definition for each field:

      seqno: DataElement[int] = DataElement(int, adapter=NonNegativeIntegerAdapter)
      results: MultiElement[TaskResult] = MultiElement(TaskResult)

    With these, static type checkers are able to infer the __init__ signature.
    """


del field_specifiers
