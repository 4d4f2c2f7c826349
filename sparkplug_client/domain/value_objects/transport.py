"""전송 계층 부가 설정 값 객체.

TLS, WebSocket, 프록시 설정은 ConnectionOptions에서 각각
값 객체 또는 None(미지정)으로 표현된다.
"""

from dataclasses import dataclass, field

from sparkplug_client.domain.enums import ProxyType, TlsVersion


@dataclass(frozen=True)
class TlsParameters:
    """TLS 연결 파라미터.

    use_tls가 True일 때만 의미가 있다.

    Args:
        ca_certs: 신뢰할 CA 인증서 파일 경로. None이면 시스템 기본값.
        certfile: 클라이언트 인증서 파일 경로 (mutual TLS).
        keyfile: 클라이언트 개인키 파일 경로 (mutual TLS).
        tls_version: 사용할 TLS 버전.
        ciphers: 허용 cipher 문자열. None이면 기본값.
        allow_untrusted_certificates: 신뢰할 수 없는 인증서 허용 여부.
        ignore_certificate_chain_errors: 인증서 체인 오류 무시 여부.
        ignore_certificate_revocation_errors: 폐기 확인 오류 무시 여부.
    """

    ca_certs: str | None = None
    certfile: str | None = None
    keyfile: str | None = None
    tls_version: TlsVersion = TlsVersion.TLS_CLIENT
    ciphers: str | None = None
    allow_untrusted_certificates: bool = False
    ignore_certificate_chain_errors: bool = False
    ignore_certificate_revocation_errors: bool = False

    @property
    def verify_peer(self) -> bool:
        """브로커 인증서를 검증해야 하는지 여부."""
        return not (
            self.allow_untrusted_certificates
            or self.ignore_certificate_chain_errors
        )


@dataclass(frozen=True)
class WebSocketParameters:
    """WebSocket 전송 파라미터.

    ConnectionOptions에 지정되면 전송 방식이 WebSocket이 된다.

    Args:
        path: WebSocket 엔드포인트 경로.
        request_headers: 핸드셰이크 시 추가할 HTTP 헤더 (이름, 값) 쌍.
        sub_protocols: 요청할 WebSocket 서브 프로토콜.
    """

    path: str = '/mqtt'
    request_headers: tuple[tuple[str, str], ...] = ()
    sub_protocols: tuple[str, ...] = ('mqtt',)

    @property
    def headers(self) -> dict[str, str]:
        """request_headers를 dict로 반환한다."""
        return dict(self.request_headers)


@dataclass(frozen=True)
class ProxyOptions:
    """WebSocket 프록시 설정.

    WebSocket 전송 위에서만 의미가 있다.

    Args:
        address: 프록시 호스트 주소.
        port: 프록시 포트.
        user_name: 프록시 인증 사용자명.
        password: 프록시 인증 비밀번호.
        domain: 프록시 인증 도메인. paho 전송에서는 지원되지 않는다.
        bypass_on_local: 로컬 주소는 프록시를 우회할지 여부.
        bypass_list: 프록시를 우회할 호스트 목록.
        use_default_credentials: 시스템 기본 인증 정보 사용 여부.
            paho 전송에서는 지원되지 않는다.
        proxy_type: 프록시 유형.
    """

    address: str
    port: int = 8080
    user_name: str = ''
    password: str = field(default='', repr=False)
    domain: str = ''
    bypass_on_local: bool = False
    bypass_list: tuple[str, ...] = ()
    use_default_credentials: bool = False
    proxy_type: ProxyType = ProxyType.HTTP
