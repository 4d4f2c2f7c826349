"""Sparkplug Host Application STATE 발행.

SCADA host 식별자로 STATE 토픽을 구성하고, Last Will로 OFFLINE을
등록한 뒤 연결될 때마다 ONLINE을 retained로 발행한다.
"""

from __future__ import annotations

import json
import logging
import time

from sparkplug_client.domain.entities.connection_options import (
    ConnectionOptions,
)
from sparkplug_client.domain.enums import ConnectionState
from sparkplug_client.infra.mqtt.mqtt_client import MqttClient

logger = logging.getLogger(__name__)

NAMESPACE = 'spBv1.0'

# Sparkplug STATE 메시지는 QoS 1, retained
_QOS_STATE = 1


def build_state_topic(scada_host_identifier: str) -> str:
    """STATE 토픽 경로를 생성한다."""
    return f'{NAMESPACE}/STATE/{scada_host_identifier}'


def build_state_payload(online: bool, timestamp_ms: int) -> str:
    """STATE JSON 페이로드를 생성한다."""
    return json.dumps({'online': online, 'timestamp': timestamp_ms})


class HostStatePublisher:
    """Host Application STATE 발행자.

    Birth(ONLINE)와 Death(OFFLINE)는 같은 timestamp를 공유한다.

    Args:
        client: MQTT 클라이언트 래퍼.
        options: 브로커 접속 설정.
    """

    def __init__(
        self, client: MqttClient, options: ConnectionOptions
    ) -> None:
        self._client = client
        self._topic = build_state_topic(options.scada_host_identifier)
        self._timestamp_ms = int(time.time() * 1000)
        self._state = ConnectionState.OFFLINE

    @property
    def topic(self) -> str:
        """STATE 토픽."""
        return self._topic

    @property
    def state(self) -> ConnectionState:
        """마지막으로 발행한 STATE."""
        return self._state

    def register_will(self) -> None:
        """OFFLINE Death 메시지를 Last Will로 등록한다.

        MqttClient.connect() 전에 호출해야 한다.
        """
        self._timestamp_ms = int(time.time() * 1000)
        self._client.set_last_will(
            self._topic,
            build_state_payload(False, self._timestamp_ms),
            qos=_QOS_STATE,
            retain=True,
        )
        self._client.add_connect_listener(self.publish_online)

    def publish_online(self) -> None:
        """ONLINE STATE를 발행한다."""
        self._publish(ConnectionState.ONLINE)

    def publish_offline(self) -> None:
        """OFFLINE STATE를 발행한다."""
        self._publish(ConnectionState.OFFLINE)

    def _publish(self, state: ConnectionState) -> None:
        self._client.publish(
            self._topic,
            build_state_payload(
                state is ConnectionState.ONLINE, self._timestamp_ms
            ),
            qos=_QOS_STATE,
            retain=True,
        )
        self._state = state
        logger.info('Host STATE %s published to %s', state, self._topic)
