"""paho-mqtt 래퍼 클라이언트.

ConnectionOptions를 해석하여 paho 클라이언트를 구성하고,
MQTT 연결 관리, 자동 재연결, Last Will 설정 등
paho-mqtt의 저수준 API를 캡슐화한다.
"""

from __future__ import annotations

from collections.abc import Callable
import ipaddress
import logging
import socket
import ssl
import threading

import paho.mqtt.client as mqtt
import socks

from sparkplug_client.domain.entities.connection_options import (
    ConnectionOptions,
)
from sparkplug_client.domain.enums import ProxyType, TlsVersion, TransportKind
from sparkplug_client.domain.exceptions import (
    DomainError,
    InvalidAddressError,
    MissingCredentialError,
    MqttConnectionError,
)
from sparkplug_client.domain.value_objects.transport import (
    ProxyOptions,
    TlsParameters,
)
from sparkplug_client.usecase.validate_connection_options import (
    validate_connection_options,
)

logger = logging.getLogger(__name__)

_KEEPALIVE_SEC = 60

# CONNACK 인증 거부 코드 (MQTT 3.1.1: 4, 5 / MQTT 5: 134, 135)
_AUTH_FAILURE_CODES = (4, 5, 134, 135)

_PROXY_TYPES = {
    ProxyType.HTTP: socks.HTTP,
    ProxyType.SOCKS4: socks.SOCKS4,
    ProxyType.SOCKS5: socks.SOCKS5,
}

_TLS_VERSIONS = {
    TlsVersion.TLSV1_2: ssl.TLSVersion.TLSv1_2,
    TlsVersion.TLSV1_3: ssl.TLSVersion.TLSv1_3,
}

_TRANSPORTS = {
    TransportKind.TCP: 'tcp',
    TransportKind.WEBSOCKET: 'websockets',
}


class MqttClient:
    """paho-mqtt 래퍼.

    connect() 시점에 접속 설정을 한 번 검증한 뒤 paho 클라이언트를
    구성한다. 연결 이후 options를 수정해도 활성 세션에는 반영되지 않는다.

    Args:
        options: 브로커 접속 설정.
    """

    def __init__(self, options: ConnectionOptions) -> None:
        self._options = options
        self._client: mqtt.Client | None = None
        self._lock = threading.Lock()
        self._connected = False
        self._last_error: DomainError | None = None
        self._will: tuple[str, str, int, bool] | None = None
        self._connect_listeners: list[Callable[[], None]] = []
        self._subscriptions: dict[
            str, tuple[Callable[[str, bytes], None], int]
        ] = {}

    @property
    def options(self) -> ConnectionOptions:
        """연결에 사용되는 접속 설정."""
        return self._options

    @property
    def is_connected(self) -> bool:
        """MQTT 브로커 연결 여부."""
        return self._connected

    @property
    def last_error(self) -> DomainError | None:
        """브로커가 마지막으로 거부한 사유. 없으면 None."""
        return self._last_error

    def add_connect_listener(self, callback: Callable[[], None]) -> None:
        """연결(재연결 포함) 성공 시 호출될 콜백을 등록한다."""
        self._connect_listeners.append(callback)

    def set_last_will(
        self, topic: str, payload: str, qos: int = 1, retain: bool = True
    ) -> None:
        """Last Will 메시지를 설정한다.

        connect() 호출 전에 설정해야 한다.

        Args:
            topic: Last Will 토픽.
            payload: Last Will 페이로드.
            qos: QoS 레벨.
            retain: Retained 플래그.
        """
        self._will = (topic, payload, qos, retain)

    def connect(self) -> None:
        """MQTT 브로커에 연결한다.

        Raises:
            ConnectionOptionsError: 접속 설정이 유효하지 않을 때.
            InvalidAddressError: 브로커 주소를 해석할 수 없을 때.
            MqttConnectionError: 소켓 연결에 실패했을 때.
        """
        options = validate_connection_options(self._options)
        client = self._build_client(options)
        with self._lock:
            previous = self._client
            self._client = client
            self._connected = False
            self._last_error = None

        # 이전 세션의 네트워크 스레드 정리
        if previous is not None:
            logger.info('MQTT replacing previous session')
            previous.on_connect = None
            previous.on_disconnect = None
            previous.on_message = None
            previous.disconnect()
            previous.loop_stop()

        logger.info(
            'MQTT connecting to %s:%d (transport=%s, tls=%s)',
            options.broker_address,
            options.port,
            options.transport_kind,
            options.use_tls,
        )
        try:
            client.connect(
                host=options.broker_address,
                port=options.port,
                keepalive=_KEEPALIVE_SEC,
            )
        except socket.gaierror as e:
            raise InvalidAddressError(
                f'broker_address를 해석할 수 없습니다: '
                f'{options.broker_address!r} ({e})',
                fields=['broker_address'],
            ) from e
        except OSError as e:
            raise MqttConnectionError(
                f'MQTT 브로커 연결 실패: '
                f'{options.broker_address}:{options.port} ({e})'
            ) from e
        client.loop_start()

    def disconnect(self) -> None:
        """MQTT 브로커 연결을 종료한다."""
        if self._client is None:
            return
        logger.info('MQTT disconnecting')
        self._client.disconnect()
        self._client.loop_stop()
        self._connected = False

    def publish(
        self, topic: str, payload: str, qos: int = 0, retain: bool = False
    ) -> None:
        """메시지를 발행한다.

        Args:
            topic: MQTT 토픽.
            payload: 페이로드 문자열.
            qos: QoS 레벨.
            retain: Retained 플래그.
        """
        with self._lock:
            if self._client is None:
                logger.error('MQTT publish before connect: topic=%s', topic)
                return
            result = self._client.publish(
                topic, payload.encode('utf-8'), qos=qos, retain=retain
            )
            if result.rc != mqtt.MQTT_ERR_SUCCESS:
                logger.error(
                    'MQTT publish failed: topic=%s, rc=%d', topic, result.rc
                )

    def subscribe(
        self, topic: str, callback: Callable[[str, bytes], None], qos: int = 0
    ) -> None:
        """토픽을 구독한다.

        연결 전에 호출하면 연결 시점에 구독한다.

        Args:
            topic: 구독할 MQTT 토픽.
            callback: 메시지 수신 콜백 (topic, payload).
            qos: QoS 레벨.
        """
        with self._lock:
            self._subscriptions[topic] = (callback, qos)
            if self._client is not None:
                self._client.subscribe(topic, qos=qos)
            logger.info('MQTT subscribe requested: %s (qos=%d)', topic, qos)

    def unsubscribe(self, topic: str) -> None:
        """토픽 구독을 해제한다.

        Args:
            topic: 해제할 MQTT 토픽.
        """
        with self._lock:
            self._subscriptions.pop(topic, None)
            if self._connected and self._client is not None:
                self._client.unsubscribe(topic)

    def _build_client(self, options: ConnectionOptions) -> mqtt.Client:
        """접속 설정으로 paho 클라이언트를 구성한다."""
        client = mqtt.Client(
            callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
            client_id=options.client_id,
            protocol=mqtt.MQTTv311,
            transport=_TRANSPORTS[options.transport_kind],
        )
        client.on_connect = self._on_connect
        client.on_disconnect = self._on_disconnect
        client.on_message = self._on_message

        if options.user_name:
            client.username_pw_set(
                options.user_name, options.password or None
            )

        if options.use_tls:
            tls = options.tls_parameters or TlsParameters()
            client.tls_set_context(_build_ssl_context(tls))
            if not tls.verify_peer:
                logger.warning(
                    'TLS peer verification disabled for %s',
                    options.broker_address,
                )
                client.tls_insecure_set(True)
        elif options.tls_parameters is not None:
            logger.debug('use_tls is false, ignoring tls_parameters')

        ws = options.web_socket_parameters
        if ws is not None:
            client.ws_set_options(
                path=ws.path, headers=ws.headers or None
            )
            if tuple(ws.sub_protocols) != ('mqtt',):
                logger.warning(
                    'WebSocket sub protocols %s not supported, using mqtt',
                    ws.sub_protocols,
                )

        proxy = options.effective_proxy_options
        if proxy is not None and not _bypasses_proxy(
            proxy, options.broker_address
        ):
            client.proxy_set(
                proxy_type=_PROXY_TYPES[ProxyType(proxy.proxy_type)],
                proxy_addr=proxy.address,
                proxy_port=proxy.port,
                proxy_username=proxy.user_name or None,
                proxy_password=proxy.password or None,
            )
            logger.info(
                'MQTT using %s proxy %s:%d',
                proxy.proxy_type,
                proxy.address,
                proxy.port,
            )
            if proxy.domain or proxy.use_default_credentials:
                logger.warning(
                    'Proxy domain and default credentials not supported, '
                    'ignoring them'
                )
        elif options.proxy_options is not None and ws is None:
            logger.debug('No WebSocket transport, ignoring proxy_options')

        delay = options.reconnect_interval.total_seconds()
        client.reconnect_delay_set(min_delay=delay, max_delay=delay)

        if self._will is not None:
            topic, payload, qos, retain = self._will
            client.will_set(topic, payload, qos=qos, retain=retain)

        return client

    def _on_connect(
        self,
        client: mqtt.Client,
        userdata: object,
        flags: object,
        reason_code: object,
        properties: object = None,
    ) -> None:
        """연결 결과 콜백."""
        if reason_code == 0:
            self._connected = True
            logger.info('MQTT connected to broker')
            # 재연결 시 기존 구독 복원
            with self._lock:
                for topic, (_, qos) in self._subscriptions.items():
                    client.subscribe(topic, qos=qos)
                    logger.debug('MQTT re-subscribed: %s', topic)
            for listener in list(self._connect_listeners):
                try:
                    listener()
                except Exception:
                    logger.exception('Error in MQTT connect listener')
        elif reason_code in _AUTH_FAILURE_CODES:
            self._last_error = MissingCredentialError(
                f'브로커가 인증을 거부했습니다 (user_name='
                f'{self._options.user_name!r}, reason={reason_code}).',
                fields=['user_name', 'password'],
            )
            logger.error(
                'MQTT authentication rejected: reason=%s', reason_code
            )
        else:
            self._last_error = MqttConnectionError(
                f'브로커가 연결을 거부했습니다 (reason={reason_code}).'
            )
            logger.error('MQTT connection failed: reason=%s', reason_code)

    def _on_disconnect(
        self,
        client: mqtt.Client,
        userdata: object,
        flags: object,
        reason_code: object,
        properties: object = None,
    ) -> None:
        """연결 해제 콜백."""
        self._connected = False
        if reason_code != 0:
            logger.warning(
                'MQTT unexpected disconnect: reason=%s, '
                'reconnecting every %s',
                reason_code,
                self._options.reconnect_interval,
            )

    def _on_message(
        self,
        client: mqtt.Client,
        userdata: object,
        msg: mqtt.MQTTMessage,
    ) -> None:
        """메시지 수신 콜백."""
        with self._lock:
            callbacks = [
                callback
                for sub, (callback, _) in self._subscriptions.items()
                if mqtt.topic_matches_sub(sub, msg.topic)
            ]

        if not callbacks:
            logger.debug('No handler for topic: %s', msg.topic)

        for callback in callbacks:
            try:
                callback(msg.topic, msg.payload)
            except Exception:
                logger.exception(
                    'Error in MQTT message handler: topic=%s', msg.topic
                )


def _build_ssl_context(tls: TlsParameters) -> ssl.SSLContext:
    """TLS 파라미터로 SSLContext를 생성한다."""
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)

    version = _TLS_VERSIONS.get(TlsVersion(tls.tls_version))
    if version is not None:
        context.minimum_version = version
        context.maximum_version = version

    if tls.ca_certs:
        context.load_verify_locations(cafile=tls.ca_certs)
    else:
        context.load_default_certs()

    if tls.certfile:
        context.load_cert_chain(tls.certfile, keyfile=tls.keyfile)

    if tls.ciphers:
        context.set_ciphers(tls.ciphers)

    if tls.ignore_certificate_revocation_errors:
        context.verify_flags &= ~(
            ssl.VERIFY_CRL_CHECK_LEAF | ssl.VERIFY_CRL_CHECK_CHAIN
        )

    if not tls.verify_peer:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE

    return context


def _bypasses_proxy(proxy: ProxyOptions, host: str) -> bool:
    """브로커 주소가 프록시 우회 대상인지 확인한다."""
    if host in proxy.bypass_list:
        return True
    if not proxy.bypass_on_local:
        return False
    try:
        return ipaddress.ip_address(host).is_loopback
    except ValueError:
        # 점이 없는 호스트 이름은 로컬 네트워크로 간주
        return host == 'localhost' or '.' not in host
