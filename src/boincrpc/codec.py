# SPDX-FileCopyrightText: 2020-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Conversion between calls and the XML documents exchanged with the daemon.

A request document wraps a single method element in the request envelope:

    <boinc_gui_rpc_request>
      <get_messages><seqno>10</seqno></get_messages>
    </boinc_gui_rpc_request>

A reply document holds the method specific result elements directly inside
the reply envelope, or an error description:

    <boinc_gui_rpc_reply><error>unauthorized</error></boinc_gui_rpc_reply>

Both sides of the envelope are implemented, the client side is used by the
client and the daemon side is useful to check the client side against.
"""

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import ClassVar, NoReturn, Self

from lxml import etree

from .exceptions import AlreadyAttachedError, BoincRPCError, EncodingError, InvalidURLError, ProtocolError, RpcError, UnauthorizedError
from .xml import ETreeElement, XMLElement, xml_parser

__all__ = (  # noqa: RUF022
    'Parameter', 'Params', 'Request', 'Success', 'Failure', 'Response', 'ReplyParser',
    'encode_request', 'decode_request', 'encode_reply', 'decode_reply', 'parse_document', 'reply_error',
    'raw_reply', 'success_reply', 'element_reply',
    'REQUEST_ROOT', 'REPLY_ROOT', 'ENCODING',
)


REQUEST_ROOT = 'boinc_gui_rpc_request'
REPLY_ROOT = 'boinc_gui_rpc_reply'
ENCODING = 'ISO-8859-1'

type Scalar = str | int | float | bool
type Value = Scalar | XMLElement | Mapping[str, Value] | Sequence[Value] | None
type Params = Mapping[str, Value] | Iterable[Parameter | tuple[str, Value] | Scalar | XMLElement] | Scalar | XMLElement | None


@dataclass(frozen=True, slots=True)
class Parameter:
    name: str | None  # None for a positional parameter
    value: Value


@dataclass(frozen=True, slots=True)
class Request:
    method: str
    params: tuple[Parameter, ...] = ()

    # methods whose parameters carry secrets and must not be logged
    sensitive_methods: ClassVar[frozenset[str]] = frozenset({'auth2', 'acct_mgr_rpc', 'lookup_account', 'create_account', 'project_attach'})

    @classmethod
    def create(cls, method: str, params: Params = ()) -> Self:
        """
        Build a request from the method name and its parameters.

        The parameters can be given as a mapping of names to values, as a
        single positional value, or as a sequence that mixes positional
        values with (name, value) pairs.
        """
        match params:
            case None:
                parameters = ()
            case Mapping():
                parameters = tuple(Parameter(name, value) for name, value in params.items())
            case str() | int() | float() | XMLElement():
                parameters = (Parameter(None, params),)
            case Iterable():
                parameters = tuple(cls._make_parameter(item) for item in params)
            case _:
                raise EncodingError(f'Cannot use a {type(params).__qualname__} as request parameters')
        return cls(method, parameters)

    @staticmethod
    def _make_parameter(item: object) -> Parameter:
        match item:
            case Parameter():
                return item
            case (str() as name, value):
                return Parameter(name, value)  # type: ignore[arg-type]
            case _:
                return Parameter(None, item)  # type: ignore[arg-type]

    @property
    def sensitive(self) -> bool:
        return self.method in self.sensitive_methods

    @property
    def named(self) -> dict[str, Value]:
        return [param.value for param in self.params if param.name is None]


@dataclass(frozen=True, slots=True)
class Success[T]:
    value: T

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Failure:
    error: RpcError

    def unwrap(self) -> NoReturn:
        raise self.error


type Response[T] = Success[T] | Failure
type ReplyParser[T] = Callable[[ETreeElement], T]


# Encoding

def _set_text(element: ETreeElement, text: str) -> None:
    try:
        text.encode(ENCODING)
    except UnicodeEncodeError as exc:
        raise EncodingError(f'The value for {element.tag!r} cannot be represented in {ENCODING}') from exc
    try:
        element.text = text
    except ValueError as exc:
        raise EncodingError(f'The value for {element.tag!r} cannot be represented in XML: {exc!s}') from exc


def _add_element(parent: ETreeElement, name: str, value: Value) -> None:
    if isinstance(value, Sequence) and not isinstance(value, str | bytes):
        for item in value:
            _add_element(parent, name, item)
        return
    try:
        element = etree.SubElement(parent, name)
    except (ValueError, TypeError) as exc:
        raise EncodingError(f'Invalid element name {name!r}') from exc
    _build_value(element, value)


def _build_value(element: ETreeElement, value: Value) -> None:
    match value:
        case None:
            pass
        case bool():
            element.text = '1' if value else '0'
        case int():
            element.text = str(value)
        case float():
            element.text = repr(value)
        case str():
            _set_text(element, value)
        case XMLElement():
            try:
                element.append(value.to_xml())
            except (ValueError, TypeError, AttributeError) as exc:
                raise EncodingError(f'Cannot encode {value!r}: {exc!s}') from exc
        case Mapping():
            for name, item in value.items():
                _add_element(element, name, item)
        case _:
            raise EncodingError(f'Cannot encode a value of type {type(value).__qualname__} for {element.tag!r}')


def _build_content(element: ETreeElement, params: Iterable[Parameter]) -> None:
    positional_text = False
    for param in params:
        if param.name is not None:
            _add_element(element, param.name, param.value)
        elif isinstance(param.value, XMLElement | Mapping):
            _build_value(element, param.value)
        elif isinstance(param.value, str | int | float):
            if positional_text:
                raise EncodingError(f'{element.tag!r} can have at most one positional value')
            positional_text = True
            _build_value(element, param.value)
        else:
            raise EncodingError(f'Cannot encode a positional value of type {type(param.value).__qualname__} for {element.tag!r}')


def _serialize(root: ETreeElement) -> bytes:
    return etree.tostring(root, encoding=ENCODING, xml_declaration=False)


def encode_request(request: Request) -> bytes:
    root = etree.Element(REQUEST_ROOT)
    try:
        method = etree.SubElement(root, request.method)
    except (ValueError, TypeError) as exc:
        raise EncodingError(f'Invalid method name {request.method!r}') from exc
    _build_content(method, request.params)
    return _serialize(root)


def encode_reply(content: Params = ()) -> bytes:
    """Build a reply document; named parameters become the result elements"""
    root = etree.Element(REPLY_ROOT)
    _build_content(root, Request.create(REPLY_ROOT, content).params)
    return _serialize(root)


# Decoding

def parse_document(message: bytes, root_tag: str) -> ETreeElement:
    try:
        root = etree.fromstring(message.lstrip(), parser=xml_parser(ENCODING))
    except etree.XMLSyntaxError as exc:
        raise ProtocolError(f'Malformed document: {exc!s}') from exc
    if root is None:
        raise ProtocolError('Empty document')
    if root.tag != root_tag:
        raise ProtocolError(f'Invalid document root: {root.tag!r}. Expected: {root_tag!r}')
    return root


def _element_value(element: ETreeElement) -> Value:
    children = [child for child in element if isinstance(child.tag, str)]
    if not children:
        text = (element.text or '').strip()
        return text or None
    value: dict[str, Value] = {}
    for child in children:
        item = _element_value(child)
        if child.tag in value:
            existing = value[child.tag]
            if isinstance(existing, list):
                existing.append(item)
            else:
                value[child.tag] = [existing, item]
        else:
            value[child.tag] = item
    return value


def decode_request(message: bytes) -> Request:
    root = parse_document(message, REQUEST_ROOT)
    methods = [child for child in root if isinstance(child.tag, str)]
    if len(methods) != 1:
        raise ProtocolError(f'A request must contain exactly one method element, found {len(methods)}')
    method = methods[0]
    params: list[Parameter] = []
    text = (method.text or '').strip()
    if text:
        params.append(Parameter(None, text))
    content = _element_value(method)
    if isinstance(content, dict):
        params.extend(Parameter(name, value) for name, value in content.items())
    return Request(method.tag, tuple(params))


_error_types: Mapping[str, type[RpcError]] = {
    'unauthorized': UnauthorizedError,
    'Missing authenticator': UnauthorizedError,
    'Missing URL': InvalidURLError,
    'Already attached to project': AlreadyAttachedError,
}


def reply_error(root: ETreeElement) -> RpcError | None:
    """Return the error described by a reply document, or None if it describes a success"""
    message: str | None = None
    code: int | None = None
    failed = False
    for child in root:
        match child.tag:
            case 'error':
                failed = True
                message = (child.text or '').strip() or None
            case 'unauthorized':
                failed = True
                message = message or 'unauthorized'
            case 'status':
                try:
                    code = int(child.text or '')
                except ValueError as exc:
                    raise ProtocolError(f'Invalid status value: {child.text!r}') from exc
                failed = failed or code != 0
    if not failed:
        return None
    error_type = _error_types.get(message, RpcError) if message is not None else RpcError
    return error_type(message, code if code else None)


def decode_reply[T](message: bytes, parser: ReplyParser[T]) -> Response[T]:
    root = parse_document(message, REPLY_ROOT)
    error = reply_error(root)
    if error is not None:
        return Failure(error)
    try:
        return Success(parser(root))
    except BoincRPCError:
        raise
    except Exception as exc:  # any failure of the parser means the reply does not have the expected structure
        raise ProtocolError(f'Unexpected reply structure: {exc!s}') from exc


# Reply parsers

def raw_reply(root: ETreeElement) -> ETreeElement:
    return root


def success_reply(root: ETreeElement) -> None:
    if root.find('success') is None:
        raise ValueError('the reply does not contain the success element')


def element_reply[E: XMLElement](element_type: type[E]) -> ReplyParser[E]:
    """A parser for replies that carry a single element_type structure"""

    def parser(root: ETreeElement) -> E:
        element = root.find(element_type._name_)  # noqa: SLF001
        if element is None:
            raise LookupError(f'the reply does not contain the {element_type._name_!r} element')  # noqa: SLF001
        return element_type.from_xml(element)

    return parser
