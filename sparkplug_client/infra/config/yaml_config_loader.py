"""YAML 파일 기반 접속 설정 로더 구현체."""

from __future__ import annotations

from datetime import timedelta
from enum import StrEnum
import logging
from pathlib import Path
from typing import Any

import yaml

from sparkplug_client.domain.entities.connection_options import (
    DEFAULT_BROKER,
    DEFAULT_CLIENT_ID,
    DEFAULT_PASSWORD,
    DEFAULT_PORT,
    DEFAULT_RECONNECT_INTERVAL,
    DEFAULT_SCADA_HOST_IDENTIFIER,
    DEFAULT_USE_TLS,
    DEFAULT_USER_NAME,
    ConnectionOptions,
)
from sparkplug_client.domain.enums import ProxyType, TlsVersion
from sparkplug_client.domain.value_objects.transport import (
    ProxyOptions,
    TlsParameters,
    WebSocketParameters,
)
from sparkplug_client.usecase.ports.config_port import ConfigPort

logger = logging.getLogger(__name__)


class YamlConfigLoader(ConfigPort):
    """ConfigPort의 YAML 파일 구현체.

    YAML 파일의 ``sparkplug`` 섹션(없으면 문서 루트)을 읽어
    ConnectionOptions로 변환한다. 누락된 키는 기본 상수를 사용하고,
    파일이 없으면 전체 기본값을 사용한다. 값은 검증하지 않는다.

    Args:
        config_path: YAML 설정 파일 경로.
    """

    def __init__(self, config_path: str | Path) -> None:
        self._path = Path(config_path)

    def load(self) -> ConnectionOptions:
        """YAML 파일에서 접속 설정을 로드한다."""
        params = self._extract_params(self._read_yaml())

        reconnect_sec = params.get('reconnect_interval_sec')
        if reconnect_sec is None:
            reconnect_interval = DEFAULT_RECONNECT_INTERVAL
        elif isinstance(reconnect_sec, (int, float)) and not isinstance(
            reconnect_sec, bool
        ):
            reconnect_interval = timedelta(seconds=reconnect_sec)
        else:
            # 숫자가 아니면 그대로 전달하여 연결 시점 검증에서 거부
            reconnect_interval = reconnect_sec

        options = ConnectionOptions(
            broker_address=params.get('broker_address', DEFAULT_BROKER),
            port=params.get('port', DEFAULT_PORT),
            client_id=params.get('client_id', DEFAULT_CLIENT_ID),
            user_name=params.get('user_name', DEFAULT_USER_NAME),
            password=params.get('password', DEFAULT_PASSWORD),
            use_tls=params.get('use_tls', DEFAULT_USE_TLS),
            scada_host_identifier=params.get(
                'scada_host_identifier', DEFAULT_SCADA_HOST_IDENTIFIER
            ),
            reconnect_interval=reconnect_interval,
            tls_parameters=self._parse_tls(params.get('tls')),
            web_socket_parameters=self._parse_websocket(
                params.get('websocket')
            ),
            proxy_options=self._parse_proxy(params.get('proxy')),
        )

        logger.info('Config loaded from %s', self._path)
        return options

    def _read_yaml(self) -> dict[str, Any]:
        """YAML 파일을 dict로 읽는다."""
        if not self._path.exists():
            logger.warning(
                'Config file not found: %s, using defaults', self._path
            )
            return {}

        with open(self._path, encoding='utf-8') as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            logger.warning('Invalid YAML format, using defaults')
            return {}

        return data

    def _extract_params(self, raw: dict[str, Any]) -> dict[str, Any]:
        """YAML 구조에서 sparkplug 섹션을 추출한다."""
        section = raw.get('sparkplug', raw)
        if isinstance(section, dict):
            return section
        return {}

    def _parse_tls(self, data: Any) -> TlsParameters | None:
        if not isinstance(data, dict):
            return None
        return TlsParameters(
            ca_certs=data.get('ca_certs'),
            certfile=data.get('certfile'),
            keyfile=data.get('keyfile'),
            tls_version=_parse_enum(
                TlsVersion, data.get('tls_version'), TlsVersion.TLS_CLIENT
            ),
            ciphers=data.get('ciphers'),
            allow_untrusted_certificates=data.get(
                'allow_untrusted_certificates', False
            ),
            ignore_certificate_chain_errors=data.get(
                'ignore_certificate_chain_errors', False
            ),
            ignore_certificate_revocation_errors=data.get(
                'ignore_certificate_revocation_errors', False
            ),
        )

    def _parse_websocket(self, data: Any) -> WebSocketParameters | None:
        if not isinstance(data, dict):
            return None
        return WebSocketParameters(
            path=data.get('path', '/mqtt'),
            request_headers=tuple(
                dict(data.get('request_headers') or {}).items()
            ),
            sub_protocols=tuple(data.get('sub_protocols', ('mqtt',))),
        )

    def _parse_proxy(self, data: Any) -> ProxyOptions | None:
        if not isinstance(data, dict):
            return None
        return ProxyOptions(
            address=data.get('address', ''),
            port=data.get('port', 8080),
            user_name=data.get('user_name', ''),
            password=data.get('password', ''),
            domain=data.get('domain', ''),
            bypass_on_local=data.get('bypass_on_local', False),
            bypass_list=tuple(data.get('bypass_list') or ()),
            use_default_credentials=data.get(
                'use_default_credentials', False
            ),
            proxy_type=_parse_enum(
                ProxyType, data.get('proxy_type'), ProxyType.HTTP
            ),
        )


def _parse_enum(
    enum_type: type[StrEnum], value: Any, default: StrEnum
) -> Any:
    """문자열을 열거형으로 변환한다.

    알 수 없는 값은 경고 후 그대로 전달하여 연결 시점 검증에서 거부한다.
    """
    if value is None:
        return default
    try:
        return enum_type(str(value).upper())
    except ValueError:
        logger.warning(
            'Unknown %s value %r, left for validation',
            enum_type.__name__,
            value,
        )
        return value
