r"""Sparkplug 접속 설정 점검 진입점.

실행: sparkplug_check -c config.yaml [--connect]
"""

from __future__ import annotations

import argparse
import logging
import sys
import time

from sparkplug_client.domain.exceptions import DomainError
from sparkplug_client.infra.config.yaml_config_loader import YamlConfigLoader
from sparkplug_client.infra.mqtt.host_state import HostStatePublisher
from sparkplug_client.infra.mqtt.mqtt_client import MqttClient
from sparkplug_client.usecase.validate_connection_options import (
    check_connection_options,
)

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='sparkplug_check',
        description='Check Sparkplug broker connection options',
    )
    parser.add_argument(
        '-c', '--config_file', type=str, required=True,
        help='Path to the config.yaml file',
    )
    parser.add_argument(
        '--connect', action='store_true',
        help='Connect to the broker and publish the host STATE',
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """설정을 점검하고, 요청 시 브로커에 연결한다.

    Args:
        argv: 커맨드 라인 인자 (프로그램 이름 제외).

    Returns:
        종료 코드. 설정 문제나 연결 실패 시 1.
    """
    logging.basicConfig(
        level=logging.INFO,
        format='[%(name)s] %(levelname)s: %(message)s',
    )
    args = _build_parser().parse_args(argv)

    options = YamlConfigLoader(args.config_file).load()
    logger.info(
        'Broker %s:%s, client_id=%s, host=%s, transport=%s, tls=%s',
        options.broker_address,
        options.port,
        options.client_id,
        options.scada_host_identifier,
        options.transport_kind,
        options.use_tls,
    )

    issues = check_connection_options(options)
    for issue in issues:
        logger.error(
            '%s [%s]: %s', issue.field, issue.error_type.__name__,
            issue.message,
        )
    if issues:
        return 1

    logger.info('Connection options OK')
    if not args.connect:
        return 0

    client = MqttClient(options)
    host_state = HostStatePublisher(client, options)
    host_state.register_will()
    try:
        client.connect()
    except DomainError as e:
        logger.error('%s', e)
        return 1

    try:
        while True:
            time.sleep(1.0)
    except KeyboardInterrupt:
        logger.info('Shutting down')
    finally:
        host_state.publish_offline()
        client.disconnect()
    return 0


if __name__ == '__main__':
    sys.exit(main())
