# SPDX-FileCopyrightText: 2020-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest

from boincrpc.codec import (
    Failure,
    Parameter,
    Request,
    Success,
    decode_reply,
    decode_request,
    element_reply,
    encode_reply,
    encode_request,
    raw_reply,
    success_reply,
)
from boincrpc.exceptions import AlreadyAttachedError, EncodingError, InvalidURLError, ProtocolError, RpcError, UnauthorizedError
from boincrpc.models import MessageList, VersionInfo
from boincrpc.xml import ETreeElement


def reply(content: str) -> bytes:
    return f'<boinc_gui_rpc_reply>{content}</boinc_gui_rpc_reply>'.encode('latin-1')


class TestRequest:

    def test_create(self) -> None:
        assert Request.create('auth1') == Request('auth1')
        assert Request.create('auth1', None) == Request('auth1')
        assert Request.create('get_messages', {'seqno': 10}) == Request('get_messages', (Parameter('seqno', 10),))
        assert Request.create('get_messages', 10) == Request('get_messages', (Parameter(None, 10),))
        assert Request.create('set_run_mode', [('always', None), ('duration', 0.0)]).named == {'always': None, 'duration': 0.0}

        with pytest.raises(EncodingError):
            Request.create('get_messages', object())  # type: ignore[arg-type]

    def test_sensitive(self) -> None:
        assert Request.create('auth2', {'nonce_hash': 'x'}).sensitive
        assert Request.create('acct_mgr_rpc', {'password': 'x'}).sensitive
        assert not Request.create('get_host_info').sensitive


class TestEncoding:

    def test_encode_request(self) -> None:
        assert encode_request(Request('auth1')) == b'<boinc_gui_rpc_request><auth1/></boinc_gui_rpc_request>'
        assert encode_request(Request.create('get_messages', {'seqno': 10})) == b'<boinc_gui_rpc_request><get_messages><seqno>10</seqno></get_messages></boinc_gui_rpc_request>'
        assert encode_request(Request.create('get_messages', 5)) == b'<boinc_gui_rpc_request><get_messages>5</get_messages></boinc_gui_rpc_request>'

    def test_encode_values(self) -> None:
        message = encode_request(Request.create('method', {'flag': True, 'off': False, 'empty': None, 'number': 1.5, 'items': ['a', 'b'], 'nested': {'x': 1}}))
        assert message == (
            b'<boinc_gui_rpc_request><method>'
            b'<flag>1</flag><off>0</off><empty/><number>1.5</number><items>a</items><items>b</items><nested><x>1</x></nested>'
            b'</method></boinc_gui_rpc_request>'
        )

    def test_encode_xml_element(self) -> None:
        message = encode_request(Request.create('exchange_versions', VersionInfo(major=7, minor=24, release=1)))
        assert message == b'<boinc_gui_rpc_request><exchange_versions><server_version><major>7</major><minor>24</minor><release>1</release></server_version></exchange_versions></boinc_gui_rpc_request>'

    def test_markup_is_escaped(self) -> None:
        request = Request.create('set_language', {'language': '<en> & "fr"'})
        assert b'&lt;en&gt; &amp;' in encode_request(request)
        assert decode_request(encode_request(request)) == request

    def test_latin1_text(self) -> None:
        request = Request.create('set_language', {'language': 'français'})
        assert 'français'.encode('latin-1') in encode_request(request)
        assert decode_request(encode_request(request)).named == {'language': 'français'}

    def test_encoding_errors(self) -> None:
        with pytest.raises(EncodingError, match=r'cannot be represented in ISO-8859-1'):
            encode_request(Request.create('set_language', {'language': '€'}))
        with pytest.raises(EncodingError, match=r'cannot be represented in XML'):
            encode_request(Request.create('set_language', {'language': 'a\x03b'}))
        with pytest.raises(EncodingError, match=r'Invalid element name'):
            encode_request(Request.create('method', {'bad name': 1}))
        with pytest.raises(EncodingError, match=r'Invalid method name'):
            encode_request(Request('bad method'))
        with pytest.raises(EncodingError, match=r'at most one positional value'):
            encode_request(Request.create('method', ['one', 'two']))
        with pytest.raises(EncodingError):
            encode_request(Request.create('method', {'value': object()}))  # type: ignore[dict-item]

    def test_encode_reply(self) -> None:
        assert encode_reply([('success', None)]) == reply('<success/>')
        assert encode_reply({'nonce': 'abc123'}) == reply('<nonce>abc123</nonce>')


class TestDecoding:

    def test_decode_request(self) -> None:
        request = decode_request(b'<boinc_gui_rpc_request>\n<get_results>\n<active_only>1</active_only>\n</get_results>\n</boinc_gui_rpc_request>\n')
        assert request.method == 'get_results'
        assert request.named == {'active_only': '1'}

        with pytest.raises(ProtocolError, match=r'exactly one method element'):
            decode_request(b'<boinc_gui_rpc_request><auth1/><auth2/></boinc_gui_rpc_request>')

    def test_malformed_documents(self) -> None:
        with pytest.raises(ProtocolError, match=r'Malformed document'):
            decode_reply(b'<boinc_gui_rpc_reply><unclosed></boinc_gui_rpc_reply>', raw_reply)
        with pytest.raises(ProtocolError, match=r'Malformed document'):
            decode_reply(b'', raw_reply)
        with pytest.raises(ProtocolError, match=r'Invalid document root'):
            decode_reply(b'<boinc_gui_rpc_request><auth1/></boinc_gui_rpc_request>', raw_reply)

    def test_leading_whitespace_is_ignored(self) -> None:
        response = decode_reply(b'\n\n' + reply('<success/>'), success_reply)
        assert response == Success(None)

    def test_entities_are_not_expanded(self) -> None:
        message = b'<!DOCTYPE boinc_gui_rpc_reply [<!ENTITY secret SYSTEM "file:///etc/passwd">]><boinc_gui_rpc_reply><error>&secret;</error></boinc_gui_rpc_reply>'
        response = decode_reply(message, raw_reply)
        assert isinstance(response, Failure)
        assert 'root:' not in str(response.error)

    def test_error_replies(self) -> None:
        assert decode_reply(reply('<error>unauthorized</error>'), raw_reply) == Failure(UnauthorizedError('unauthorized'))
        assert decode_reply(reply('<error>Missing authenticator</error>'), raw_reply) == Failure(UnauthorizedError('Missing authenticator'))
        assert decode_reply(reply('<error>Missing URL</error>'), raw_reply) == Failure(InvalidURLError('Missing URL'))
        assert decode_reply(reply('<error>Already attached to project</error>'), raw_reply) == Failure(AlreadyAttachedError('Already attached to project'))
        assert decode_reply(reply('<error>Something else</error>'), raw_reply) == Failure(RpcError('Something else'))
        assert decode_reply(reply('<unauthorized/>'), raw_reply) == Failure(UnauthorizedError('unauthorized'))

    def test_status_replies(self) -> None:
        assert decode_reply(reply('<status>-102</status>'), raw_reply) == Failure(RpcError(None, -102))
        assert decode_reply(reply('<error>No such project</error><status>-136</status>'), raw_reply) == Failure(RpcError('No such project', -136))
        assert decode_reply(reply('<success/><status>0</status>'), success_reply) == Success(None)
        with pytest.raises(ProtocolError, match=r'Invalid status value'):
            decode_reply(reply('<status>bad</status>'), raw_reply)

    def test_error_wins_over_parser(self) -> None:
        # an error reply is a failure even for a parser that would accept it
        response = decode_reply(reply('<success/><error>busy</error>'), success_reply)
        assert response == Failure(RpcError('busy'))
        with pytest.raises(RpcError, match=r'busy'):
            response.unwrap()

    def test_success_reply(self) -> None:
        assert decode_reply(reply('<success/>'), success_reply).unwrap() is None
        with pytest.raises(ProtocolError, match=r'Unexpected reply structure'):
            decode_reply(reply('<something_else/>'), success_reply)

    def test_element_reply(self) -> None:
        parser = element_reply(VersionInfo)
        version = decode_reply(reply('<server_version><major>7</major><minor>24</minor><release>1</release><unknown>x</unknown></server_version><extra/>'), parser).unwrap()
        assert version == VersionInfo(major=7, minor=24, release=1)
        assert str(version) == '7.24.1'

        with pytest.raises(ProtocolError):
            decode_reply(reply('<success/>'), parser)
        with pytest.raises(ProtocolError):
            decode_reply(reply('<server_version><major>seven</major><minor>24</minor><release>1</release></server_version>'), parser)
        with pytest.raises(ProtocolError):
            decode_reply(reply('<server_version><minor>24</minor><release>1</release></server_version>'), parser)

    def test_container_reply(self) -> None:
        parser = element_reply(MessageList)
        content = (
            '<msgs>'
            '<msg><project>SETI</project><pri>1</pri><seqno>1</seqno><body>\nStarting\n</body><time>1556292512</time></msg>'
            '<msg><pri>2</pri><seqno>2</seqno><body><![CDATA[Done <ok>]]></body><time>1556292513</time></msg>'
            '<unrelated/>'
            '</msgs>'
        )
        messages = decode_reply(reply(content), parser).unwrap().messages
        assert [message.seqno for message in messages] == [1, 2]
        assert messages[0].project_name == 'SETI'
        assert messages[0].body == 'Starting'
        assert messages[1].project_name is None
        assert messages[1].body == 'Done <ok>'
        assert messages[1].timestamp == 1556292513

        assert decode_reply(reply('<msgs/>'), parser).unwrap().messages == []
        with pytest.raises(ProtocolError):
            decode_reply(reply('<success/>'), parser)

    def test_custom_parser_failures(self) -> None:
        def nonce(root: ETreeElement) -> str:
            return root.find('nonce').text  # type: ignore[union-attr]

        assert decode_reply(reply('<nonce>abc</nonce>'), nonce).unwrap() == 'abc'
        with pytest.raises(ProtocolError, match=r'Unexpected reply structure'):
            decode_reply(reply('<something/>'), nonce)

        def strict(_root: ETreeElement) -> None:
            raise EncodingError('not a structure problem')

        # errors raised by this package go through unchanged
        with pytest.raises(EncodingError):
            decode_reply(reply('<something/>'), strict)
