"""Sparkplug 브로커 접속 설정 엔티티.

브로커 주소, 인증 정보, 전송 보안, 재연결 정책 등
브로커 세션 하나를 여는 데 필요한 모든 파라미터를 담는다.

설정 객체는 값을 그대로 보관하는 전달자일 뿐이며 검증하지 않는다.
검증은 연결을 수립하는 계층이 validate_connection_options()로 수행한다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from sparkplug_client.domain.enums import TransportKind
from sparkplug_client.domain.value_objects.transport import (
    ProxyOptions,
    TlsParameters,
    WebSocketParameters,
)

DEFAULT_BROKER = 'localhost'
DEFAULT_PORT = 1883
DEFAULT_CLIENT_ID = 'SparkplugNet'
DEFAULT_USER_NAME = ''
DEFAULT_PASSWORD = ''
DEFAULT_USE_TLS = False
DEFAULT_SCADA_HOST_IDENTIFIER = 'SparkplugNet'
DEFAULT_RECONNECT_INTERVAL = timedelta(seconds=30)

_FIELD_DEFAULTS: dict[str, Any] = {
    'broker_address': DEFAULT_BROKER,
    'port': DEFAULT_PORT,
    'client_id': DEFAULT_CLIENT_ID,
    'user_name': DEFAULT_USER_NAME,
    'password': DEFAULT_PASSWORD,
    'use_tls': DEFAULT_USE_TLS,
    'scada_host_identifier': DEFAULT_SCADA_HOST_IDENTIFIER,
    'reconnect_interval': DEFAULT_RECONNECT_INTERVAL,
    'tls_parameters': None,
    'web_socket_parameters': None,
    'proxy_options': None,
}


@dataclass
class ConnectionOptions:
    """브로커 세션 접속 설정.

    생성 후에도 모든 필드를 개별적으로 수정할 수 있다.
    설정 단계에서만 수정하고, 연결 계층에 넘긴 뒤에는 읽기 전용으로
    취급해야 한다. 세션 수립 후의 수정이 활성 세션에 미치는 영향은
    정의되지 않는다. 동시 수정에 대해 스레드 안전하지 않으므로
    동기화는 호출자가 책임진다.

    tls_parameters는 use_tls가 True일 때만, proxy_options는
    web_socket_parameters가 있을 때만 의미가 있다. 그 외의 조합도
    생성은 허용되며 연결 시점에 해석된다.

    Args:
        broker_address: 브로커 호스트 주소.
        port: 브로커 포트 번호.
        client_id: MQTT 클라이언트 ID.
        user_name: 인증 사용자명.
        password: 인증 비밀번호.
        use_tls: TLS 사용 여부.
        scada_host_identifier: SCADA Host Application 식별자.
        reconnect_interval: 자동 재연결 시도 간격.
        tls_parameters: TLS 파라미터. None이면 미지정.
        web_socket_parameters: WebSocket 파라미터. None이면 TCP 전송.
        proxy_options: WebSocket 프록시 설정. None이면 미지정.
    """

    broker_address: str
    port: int
    client_id: str
    user_name: str
    password: str = field(repr=False)
    use_tls: bool
    scada_host_identifier: str
    reconnect_interval: timedelta
    tls_parameters: TlsParameters | None = None
    web_socket_parameters: WebSocketParameters | None = None
    proxy_options: ProxyOptions | None = None

    @classmethod
    def default(cls) -> ConnectionOptions:
        """기본 상수로 채운 설정을 생성한다."""
        return cls(
            broker_address=DEFAULT_BROKER,
            port=DEFAULT_PORT,
            client_id=DEFAULT_CLIENT_ID,
            user_name=DEFAULT_USER_NAME,
            password=DEFAULT_PASSWORD,
            use_tls=DEFAULT_USE_TLS,
            scada_host_identifier=DEFAULT_SCADA_HOST_IDENTIFIER,
            reconnect_interval=DEFAULT_RECONNECT_INTERVAL,
        )

    def reset(self, field_name: str) -> None:
        """필드 하나를 기본값으로 되돌린다.

        부가 설정(TLS, WebSocket, 프록시)은 미지정(None)으로 되돌린다.

        Args:
            field_name: 필드 이름.

        Raises:
            KeyError: 존재하지 않는 필드 이름일 때.
        """
        setattr(self, field_name, _FIELD_DEFAULTS[field_name])

    @property
    def transport_kind(self) -> TransportKind:
        """web_socket_parameters 유무로 결정되는 전송 방식."""
        if self.web_socket_parameters is not None:
            return TransportKind.WEBSOCKET
        return TransportKind.TCP

    @property
    def effective_tls_parameters(self) -> TlsParameters | None:
        """use_tls가 True일 때만 tls_parameters를 반환한다."""
        return self.tls_parameters if self.use_tls else None

    @property
    def effective_proxy_options(self) -> ProxyOptions | None:
        """WebSocket 전송일 때만 proxy_options를 반환한다."""
        if self.transport_kind is TransportKind.WEBSOCKET:
            return self.proxy_options
        return None
