# streetwise/settings.py
from __future__ import annotations
from pydantic import BaseModel, Field

class PoliceApi(BaseModel):
    base_url: str = "https://data.police.uk/api"
    category: str = "all-crime"
    timeout_sec: int = 15
    max_retries: int = 3
    backoff_initial_sec: float = 1.0
    backoff_max_sec: float = 30.0

class Feed(BaseModel):
    center_lat: float = 51.5074               # 런던 중심
    center_lon: float = -0.1276
    refresh_interval_sec: float = 900.0
    report_limit: int = 100

class Geofence(BaseModel):
    zones_file: str | None = None             # None이면 기본 런던 구역 사용

class Reports(BaseModel):
    db_path: str = "/data/reports.db"

class LocalMQTT(BaseModel):
    enabled: bool = False
    host: str = "localhost"
    port: int = 1883
    username: str | None = None
    password: str | None = None
    client_id: str | None = None
    keepalive: int = 30
    topic_prefix: str = "streetwise"
    qos: int = 1

class Observability(BaseModel):
    http_port: int = 8099
    metrics_enabled: bool = True
    service_name: str = "StreetWise"
    build_version: str = "0.2.0"
    build_date: str = "2026-10-01"
    log_level: str = "INFO"

class Settings(BaseModel):
    police_api: PoliceApi = Field(default_factory=PoliceApi)
    feed: Feed = Field(default_factory=Feed)
    geofence: Geofence = Field(default_factory=Geofence)
    reports: Reports = Field(default_factory=Reports)
    local_mqtt: LocalMQTT = Field(default_factory=LocalMQTT)
    observability: Observability = Field(default_factory=Observability)
