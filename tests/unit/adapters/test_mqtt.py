"""
MQTT 경보 발송 어댑터 단위 테스트
"""

import json
import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from aiomqtt import MqttError

from streetwise.adapters.mqtt.alert_publisher import MqttAlertPublisher
from streetwise.core.models import GeofenceEvent, SessionStats


@pytest.fixture
def publisher():
    return MqttAlertPublisher(
        broker_host="localhost",
        broker_port=1883,
        topic_prefix="streetwise/",
        username="user",
        password="pass",
        client_id="sw-test",
        max_retries=2,
        backoff_initial=0.01,
    )


def _mock_client(mock_client_class):
    client = AsyncMock()
    mock_client_class.return_value.__aenter__.return_value = client
    return client


class TestMqttAlertPublisher:
    """MQTT 경보 발송 테스트"""
    
    def test_initialization(self, publisher):
        assert publisher.topic_prefix == "streetwise"
        assert publisher.broker_host == "localhost"
        assert publisher.qos == 1
    
    @pytest.mark.asyncio
    async def test_notify_zone_entered(self, publisher):
        event = GeofenceEvent(zone="Westminster", latitude=51.4975, longitude=-0.1357, distance_m=0.0)
        with patch("streetwise.adapters.mqtt.alert_publisher.Client") as mock_client_class:
            client = _mock_client(mock_client_class)
            await publisher.notify_zone_entered(event)
        
        args, kwargs = client.publish.call_args
        assert args[0] == "streetwise/alerts/zone"
        payload = json.loads(args[1].decode("utf-8"))
        assert payload["zone"] == "Westminster"
        assert payload["kind"] == "entered"
        assert kwargs == {"qos": 1, "retain": False}
        
        client_kwargs = mock_client_class.call_args.kwargs
        assert client_kwargs["hostname"] == "localhost"
        assert client_kwargs["identifier"] == "sw-test"
        assert client_kwargs["username"] == "user"
    
    @pytest.mark.asyncio
    async def test_publish_feed_is_retained(self, publisher):
        stats = SessionStats(total=3, by_category={"robbery": 2, "theft": 1})
        with patch("streetwise.adapters.mqtt.alert_publisher.Client") as mock_client_class:
            client = _mock_client(mock_client_class)
            await publisher.publish_feed(stats)
        
        args, kwargs = client.publish.call_args
        assert args[0] == "streetwise/feed/stats"
        assert json.loads(args[1]) == {"total": 3, "by_category": {"robbery": 2, "theft": 1}}
        assert kwargs["retain"] is True
    
    @pytest.mark.asyncio
    async def test_publish_retries_on_mqtt_error(self, publisher):
        with patch("streetwise.adapters.mqtt.alert_publisher.Client") as mock_client_class, \
             patch("asyncio.sleep", new_callable=AsyncMock):
            client = _mock_client(mock_client_class)
            client.publish.side_effect = [MqttError("down"), None]
            await publisher.publish_json("alerts/zone", {"zone": "Brixton"})
        
        assert client.publish.await_count == 2
    
    @pytest.mark.asyncio
    async def test_publish_gives_up(self, publisher):
        with patch("streetwise.adapters.mqtt.alert_publisher.Client") as mock_client_class, \
             patch("asyncio.sleep", new_callable=AsyncMock):
            client = _mock_client(mock_client_class)
            client.publish.side_effect = MqttError("down")
            with pytest.raises(MqttError):
                await publisher.publish_json("alerts/zone", {"zone": "Brixton"})
        
        assert client.publish.await_count == 3
