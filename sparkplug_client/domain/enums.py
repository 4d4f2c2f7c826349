"""Sparkplug 접속 설정 도메인 열거형 정의."""

from enum import StrEnum


class TransportKind(StrEnum):
    """브로커 전송 방식."""

    TCP = 'TCP'
    WEBSOCKET = 'WEBSOCKET'


class ProxyType(StrEnum):
    """WebSocket 프록시 유형."""

    HTTP = 'HTTP'
    SOCKS4 = 'SOCKS4'
    SOCKS5 = 'SOCKS5'


class TlsVersion(StrEnum):
    """TLS 프로토콜 버전.

    TLS_CLIENT는 양측이 지원하는 가장 높은 버전을 협상한다.
    """

    TLS_CLIENT = 'TLS_CLIENT'
    TLSV1_2 = 'TLSV1_2'
    TLSV1_3 = 'TLSV1_3'


class ConnectionState(StrEnum):
    """Sparkplug Host Application STATE."""

    ONLINE = 'ONLINE'
    OFFLINE = 'OFFLINE'
