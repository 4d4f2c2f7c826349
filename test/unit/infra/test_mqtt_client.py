"""MqttClient 유닛 테스트."""

from datetime import timedelta
import logging
import socket
import ssl
from unittest.mock import MagicMock, patch

import pytest
import socks

from sparkplug_client.domain.exceptions import (
    ConnectionOptionsError,
    InconsistentTransportConfigError,
    InvalidAddressError,
    InvalidPortError,
    MissingCredentialError,
    MqttConnectionError,
)
from sparkplug_client.domain.value_objects.transport import (
    ProxyOptions,
    TlsParameters,
)
from sparkplug_client.infra.mqtt.mqtt_client import MqttClient


@pytest.fixture
def mock_paho():
    """paho Client 생성자를 mock으로 대체한다."""
    with patch(
        'sparkplug_client.infra.mqtt.mqtt_client.mqtt.Client'
    ) as MockPaho:
        paho = MagicMock()
        paho.publish.return_value.rc = 0
        MockPaho.return_value = paho
        yield MockPaho


class TestConnectDefaults:
    """기본 설정 연결 테스트."""

    def test_connects_to_localhost_without_tls(
        self, mock_paho, default_options
    ):
        MqttClient(default_options).connect()

        paho = mock_paho.return_value
        paho.connect.assert_called_once_with(
            host='localhost', port=1883, keepalive=60
        )
        paho.tls_set_context.assert_not_called()
        paho.username_pw_set.assert_not_called()
        paho.proxy_set.assert_not_called()
        paho.loop_start.assert_called_once()

    def test_uses_client_id_and_tcp_transport(
        self, mock_paho, default_options
    ):
        MqttClient(default_options).connect()

        kwargs = mock_paho.call_args.kwargs
        assert kwargs['client_id'] == 'SparkplugNet'
        assert kwargs['transport'] == 'tcp'

    def test_reconnect_delay_from_interval(self, mock_paho, default_options):
        default_options.reconnect_interval = timedelta(seconds=12)
        MqttClient(default_options).connect()

        mock_paho.return_value.reconnect_delay_set.assert_called_once_with(
            min_delay=12.0, max_delay=12.0
        )


class TestConnectTls:
    """TLS 연결 테스트."""

    def test_tls_session_to_configured_host(self, mock_paho, tls_options):
        MqttClient(tls_options).connect()

        paho = mock_paho.return_value
        paho.connect.assert_called_once_with(
            host='broker.example.com', port=8883, keepalive=60
        )
        context = paho.tls_set_context.call_args.args[0]
        assert isinstance(context, ssl.SSLContext)
        paho.tls_insecure_set.assert_not_called()
        paho.username_pw_set.assert_called_once_with('operator', 'secret')

    def test_untrusted_certificates_disable_verification(
        self, mock_paho, tls_options
    ):
        tls_options.tls_parameters = TlsParameters(
            allow_untrusted_certificates=True
        )
        MqttClient(tls_options).connect()

        paho = mock_paho.return_value
        context = paho.tls_set_context.call_args.args[0]
        assert context.verify_mode == ssl.CERT_NONE
        paho.tls_insecure_set.assert_called_once_with(True)

    def test_use_tls_without_parameters(self, mock_paho, tls_options):
        tls_options.tls_parameters = None
        MqttClient(tls_options).connect()

        mock_paho.return_value.tls_set_context.assert_called_once()

    def test_tls_parameters_ignored_when_disabled(
        self, mock_paho, default_options
    ):
        default_options.tls_parameters = TlsParameters()
        MqttClient(default_options).connect()

        mock_paho.return_value.tls_set_context.assert_not_called()


class TestConnectWebSocket:
    """WebSocket 및 프록시 연결 테스트."""

    def test_websocket_transport_and_proxy(
        self, mock_paho, websocket_options
    ):
        MqttClient(websocket_options).connect()

        paho = mock_paho.return_value
        assert mock_paho.call_args.kwargs['transport'] == 'websockets'
        paho.ws_set_options.assert_called_once_with(
            path='/ws', headers={'X-Site': 'plant-a'}
        )
        paho.proxy_set.assert_called_once_with(
            proxy_type=socks.HTTP,
            proxy_addr='proxy.example.com',
            proxy_port=3128,
            proxy_username='proxy-user',
            proxy_password='proxy-pass',
        )

    def test_bypass_list_skips_proxy(self, mock_paho, websocket_options):
        websocket_options.proxy_options = ProxyOptions(
            address='proxy.example.com',
            bypass_list=('broker.example.com',),
        )
        MqttClient(websocket_options).connect()

        mock_paho.return_value.proxy_set.assert_not_called()

    def test_bypass_on_local(self, mock_paho, websocket_options):
        websocket_options.broker_address = '127.0.0.1'
        websocket_options.proxy_options = ProxyOptions(
            address='proxy.example.com', bypass_on_local=True
        )
        MqttClient(websocket_options).connect()

        mock_paho.return_value.proxy_set.assert_not_called()

    def test_unsupported_proxy_fields_logged(
        self, mock_paho, websocket_options, caplog
    ):
        websocket_options.proxy_options = ProxyOptions(
            address='proxy.example.com',
            domain='CORP',
            use_default_credentials=True,
        )
        with caplog.at_level(logging.WARNING):
            MqttClient(websocket_options).connect()

        mock_paho.return_value.proxy_set.assert_called_once()
        assert any(
            'not supported' in r.getMessage() for r in caplog.records
        )


class TestConnectRejection:
    """연결 시점 설정 거부 테스트."""

    def test_invalid_port_rejected_before_connect(
        self, mock_paho, default_options
    ):
        default_options.port = 0
        with pytest.raises(InvalidPortError):
            MqttClient(default_options).connect()

        mock_paho.assert_not_called()

    def test_proxy_without_websocket_rejected(
        self, mock_paho, default_options
    ):
        default_options.proxy_options = ProxyOptions(address='proxy.local')
        with pytest.raises(InconsistentTransportConfigError):
            MqttClient(default_options).connect()

    def test_unresolvable_address(self, mock_paho, default_options):
        default_options.broker_address = 'no-such-broker.invalid'
        mock_paho.return_value.connect.side_effect = socket.gaierror(
            -2, 'Name or service not known'
        )

        with pytest.raises(InvalidAddressError) as exc_info:
            MqttClient(default_options).connect()

        assert exc_info.value.fields == ('broker_address',)
        mock_paho.return_value.loop_start.assert_not_called()

    def test_socket_error(self, mock_paho, default_options):
        mock_paho.return_value.connect.side_effect = ConnectionRefusedError()

        with pytest.raises(MqttConnectionError):
            MqttClient(default_options).connect()

    def test_non_string_user_name_rejected(
        self, mock_paho, default_options
    ):
        default_options.user_name = 1234
        with pytest.raises(ConnectionOptionsError) as exc_info:
            MqttClient(default_options).connect()

        assert exc_info.value.fields == ('user_name',)
        assert 'user_name' in str(exc_info.value)
        mock_paho.assert_not_called()


class TestReconnectSession:
    """connect() 재호출 시 세션 교체 테스트."""

    def test_second_connect_stops_previous_client(
        self, mock_paho, default_options
    ):
        first, second = MagicMock(), MagicMock()
        mock_paho.side_effect = [first, second]
        client = MqttClient(default_options)

        client.connect()
        client.connect()

        first.disconnect.assert_called_once_with()
        first.loop_stop.assert_called_once_with()
        assert first.on_message is None
        second.loop_start.assert_called_once_with()
        second.loop_stop.assert_not_called()

    def test_disconnect_stops_current_client(
        self, mock_paho, default_options
    ):
        first, second = MagicMock(), MagicMock()
        mock_paho.side_effect = [first, second]
        client = MqttClient(default_options)
        client.connect()
        client.connect()

        client.disconnect()

        second.disconnect.assert_called_once_with()
        second.loop_stop.assert_called_once_with()
        first.loop_stop.assert_called_once_with()


class TestSubscriptions:
    """구독 저장 및 재연결 복원 테스트."""

    def test_subscribe_stores_qos(self, mock_paho, default_options):
        client = MqttClient(default_options)
        cb = MagicMock()
        client.subscribe('test/topic', cb, qos=1)

        stored_cb, stored_qos = client._subscriptions['test/topic']
        assert stored_cb is cb
        assert stored_qos == 1

    def test_unsubscribe_removes_entry(self, mock_paho, default_options):
        client = MqttClient(default_options)
        client.subscribe('test/topic', MagicMock(), qos=1)
        client.unsubscribe('test/topic')

        assert 'test/topic' not in client._subscriptions

    def test_reconnect_restores_qos(self, mock_paho, default_options):
        client = MqttClient(default_options)
        client.subscribe('topic/a', MagicMock(), qos=0)
        client.subscribe('topic/b', MagicMock(), qos=1)
        client.connect()
        paho = mock_paho.return_value

        client._on_connect(paho, None, {}, 0, None)

        topics_qos = {
            call.args[0]: call.kwargs['qos']
            for call in paho.subscribe.call_args_list
        }
        assert topics_qos == {'topic/a': 0, 'topic/b': 1}
        assert client.is_connected

    def test_message_dispatch(self, mock_paho, default_options):
        client = MqttClient(default_options)
        cb = MagicMock()
        client.subscribe('topic/a', cb)

        msg = MagicMock(topic='topic/a', payload=b'{}')
        client._on_message(None, None, msg)

        cb.assert_called_once_with('topic/a', b'{}')

    def test_handler_exception_is_logged(
        self, mock_paho, default_options, caplog
    ):
        client = MqttClient(default_options)
        client.subscribe('topic/a', MagicMock(side_effect=ValueError('x')))

        msg = MagicMock(topic='topic/a', payload=b'')
        with caplog.at_level(logging.ERROR):
            client._on_message(None, None, msg)

        records = [
            r for r in caplog.records
            if 'Error in MQTT message handler' in r.getMessage()
        ]
        assert len(records) == 1
        assert records[0].exc_info[0] is ValueError

    def test_wildcard_subscription_dispatch(self, mock_paho, default_options):
        client = MqttClient(default_options)
        state_cb = MagicMock()
        other_cb = MagicMock()
        client.subscribe('spBv1.0/STATE/+', state_cb)
        client.subscribe('spBv1.0/plant/#', other_cb)

        msg = MagicMock(topic='spBv1.0/STATE/scada-main', payload=b'{}')
        client._on_message(None, None, msg)

        state_cb.assert_called_once_with('spBv1.0/STATE/scada-main', b'{}')
        other_cb.assert_not_called()


class TestConnectCallbacks:
    """연결 결과 콜백 테스트."""

    def test_auth_failure_records_missing_credential(
        self, mock_paho, default_options
    ):
        client = MqttClient(default_options)
        client._on_connect(None, None, {}, 134, None)

        assert isinstance(client.last_error, MissingCredentialError)
        assert not client.is_connected

    def test_other_failure_records_connection_error(
        self, mock_paho, default_options
    ):
        client = MqttClient(default_options)
        client._on_connect(None, None, {}, 136, None)

        assert isinstance(client.last_error, MqttConnectionError)

    def test_connect_listener_called(self, mock_paho, default_options):
        client = MqttClient(default_options)
        listener = MagicMock()
        client.add_connect_listener(listener)

        client._on_connect(MagicMock(), None, {}, 0, None)

        listener.assert_called_once_with()

    def test_disconnect_marks_offline(self, mock_paho, default_options):
        client = MqttClient(default_options)
        client._on_connect(MagicMock(), None, {}, 0, None)
        client._on_disconnect(None, None, {}, 7, None)

        assert not client.is_connected


class TestPublish:
    def test_publish_before_connect_is_dropped(
        self, mock_paho, default_options
    ):
        MqttClient(default_options).publish('a/b', 'x')
        mock_paho.return_value.publish.assert_not_called()

    def test_last_will_applied_on_connect(self, mock_paho, default_options):
        client = MqttClient(default_options)
        client.set_last_will('spBv1.0/STATE/x', 'offline', qos=1, retain=True)
        client.connect()

        mock_paho.return_value.will_set.assert_called_once_with(
            'spBv1.0/STATE/x', 'offline', qos=1, retain=True
        )

    def test_publish_encodes_payload(self, mock_paho, default_options):
        client = MqttClient(default_options)
        client.connect()
        client.publish('a/b', 'x', qos=1, retain=True)

        mock_paho.return_value.publish.assert_called_once_with(
            'a/b', b'x', qos=1, retain=True
        )
