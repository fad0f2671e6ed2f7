from .alert_publisher import MqttAlertPublisher

__all__ = ["MqttAlertPublisher"]
