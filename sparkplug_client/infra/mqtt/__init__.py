"""MQTT 통신 인프라."""

from sparkplug_client.infra.mqtt.host_state import HostStatePublisher
from sparkplug_client.infra.mqtt.mqtt_client import MqttClient

__all__ = ["HostStatePublisher", "MqttClient"]
