"""
MQTT alert publisher adapter for StreetWise.

This module publishes geofence entry events and crime feed
statistics to a local MQTT broker for the presentation layer.
"""

import json
from typing import Any, Dict, Optional

from aiomqtt import Client, MqttError, Will

from streetwise.common.retry import retry_with_backoff
from streetwise.core.models import GeofenceEvent, SessionStats
from streetwise.observability.logging_setup import get_logger

log = get_logger("streetwise.mqtt")

class MqttAlertPublisher:
    """로컬 MQTT 경보 발송 어댑터"""
    
    def __init__(self,
                 *,
                 broker_host: str,
                 broker_port: int,
                 topic_prefix: str = "streetwise",
                 username: Optional[str] = None,
                 password: Optional[str] = None,
                 client_id: Optional[str] = None,
                 keepalive: int = 30,
                 qos: int = 1,
                 max_retries: int = 3,
                 backoff_initial: float = 0.5,
                 backoff_max: float = 10.0):
        """
        초기화합니다.
        
        Args:
            broker_host: MQTT 브로커 호스트
            broker_port: MQTT 브로커 포트
            topic_prefix: 토픽 접두사
            username: 사용자명
            password: 비밀번호
            client_id: 클라이언트 ID
            keepalive: keepalive 시간
            qos: 발송 QoS
            max_retries: 최대 재시도 횟수
            backoff_initial: 초기 백오프 시간
            backoff_max: 최대 백오프 시간
        """
        self.broker_host = broker_host
        self.broker_port = broker_port
        self.topic_prefix = topic_prefix.rstrip("/")
        self.username = username
        self.password = password
        self.client_id = client_id
        self.keepalive = keepalive
        self.qos = qos
        self.max_retries = max_retries
        self.backoff_initial = backoff_initial
        self.backoff_max = backoff_max
    
    def _client(self) -> Client:
        kwargs: Dict[str, Any] = {
            "hostname": self.broker_host,
            "port": self.broker_port,
            "keepalive": self.keepalive,
            # LWT 설정
            "will": Will(topic=f"{self.topic_prefix}/state", payload="offline", qos=1, retain=True),
        }
        if self.username:
            kwargs["username"] = self.username
        if self.password:
            kwargs["password"] = self.password
        if self.client_id:
            kwargs["identifier"] = self.client_id
        return Client(**kwargs)
    
    async def publish_json(self, topic_suffix: str, payload_obj: Dict[str, Any], retain: bool = False) -> None:
        """
        JSON 객체를 발송합니다.
        
        Args:
            topic_suffix: 토픽 접미사
            payload_obj: 발송할 JSON 객체
            retain: retain 플래그
        """
        topic = f"{self.topic_prefix}/{topic_suffix}"
        payload = json.dumps(payload_obj, ensure_ascii=False).encode("utf-8")
        
        async def _publish():
            async with self._client() as client:
                await client.publish(topic, payload, qos=self.qos, retain=retain)
        
        await retry_with_backoff(
            _publish,
            max_retries=self.max_retries,
            base_delay=self.backoff_initial,
            max_delay=self.backoff_max,
            retry_on=(MqttError,),
        )
        log.info(f"메시지 발송 성공 topic:{topic}")
    
    async def notify_zone_entered(self, event: GeofenceEvent) -> None:
        await self.publish_json("alerts/zone", event.model_dump(mode="json"))
    
    async def publish_feed(self, stats: SessionStats) -> None:
        await self.publish_json("feed/stats", stats.model_dump(mode="json"), retain=True)
