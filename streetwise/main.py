# streetwise/main.py
import os, asyncio, signal
import uvicorn
from streetwise.settings import Settings
from streetwise.core.geofence import GeofenceEngine
from streetwise.core.zones import DEFAULT_ZONES, load_zones
from streetwise.observability.health import create_app
from streetwise.observability.logging_setup import setup_logging_dev, get_logger
from streetwise.adapters.police_uk.client import PoliceUKClient
from streetwise.adapters.storage.sqlite_reports import SQLiteReportStore
from streetwise.adapters.mqtt.alert_publisher import MqttAlertPublisher
from streetwise.orchestrators.session import SafetySession

def _b(name, default=False): return os.getenv(name, str(default)).lower() in ("1","true","yes","on")

def build_settings() -> Settings:
    s = Settings()

    # Police API
    s.police_api.base_url = os.getenv("POLICE_API_BASE_URL", s.police_api.base_url)
    s.police_api.category = os.getenv("POLICE_API_CATEGORY", s.police_api.category)
    s.police_api.timeout_sec = int(os.getenv("POLICE_API_TIMEOUT_SEC", s.police_api.timeout_sec))
    s.police_api.max_retries = int(os.getenv("POLICE_API_MAX_RETRIES", s.police_api.max_retries))

    # 피드
    s.feed.center_lat = float(os.getenv("FEED_CENTER_LAT", s.feed.center_lat))
    s.feed.center_lon = float(os.getenv("FEED_CENTER_LON", s.feed.center_lon))
    s.feed.refresh_interval_sec = float(os.getenv("FEED_REFRESH_INTERVAL_SEC", s.feed.refresh_interval_sec))
    s.feed.report_limit = int(os.getenv("FEED_REPORT_LIMIT", s.feed.report_limit))

    # 지오펜스 / 신고 저장소
    s.geofence.zones_file = os.getenv("ZONES_FILE", s.geofence.zones_file)
    s.reports.db_path = os.getenv("REPORTS_DB_PATH", s.reports.db_path)

    # LOCAL MQTT
    s.local_mqtt.enabled = _b("LOCAL_MQTT_ENABLED", s.local_mqtt.enabled)
    s.local_mqtt.host = os.getenv("LOCAL_MQTT_HOST", s.local_mqtt.host)
    s.local_mqtt.port = int(os.getenv("LOCAL_MQTT_PORT", s.local_mqtt.port))
    s.local_mqtt.username = os.getenv("LOCAL_MQTT_USERNAME", s.local_mqtt.username)
    s.local_mqtt.password = os.getenv("LOCAL_MQTT_PASSWORD", s.local_mqtt.password)
    s.local_mqtt.topic_prefix = os.getenv("LOCAL_TOPIC_PREFIX", s.local_mqtt.topic_prefix)

    # 관측성
    s.observability.metrics_enabled = _b("METRICS_ENABLED", s.observability.metrics_enabled)
    s.observability.http_port = int(os.getenv("METRICS_PORT", s.observability.http_port))
    s.observability.log_level = os.getenv("LOG_LEVEL", s.observability.log_level)

    return s

async def start_http(settings: Settings, session: SafetySession) -> asyncio.Task:
    app = create_app(settings, session)
    return asyncio.create_task(uvicorn.Server(
        uvicorn.Config(app, host="0.0.0.0", port=settings.observability.http_port, log_level="info")
    ).serve())

async def main():
    s = build_settings()
    setup_logging_dev(s.observability.log_level)
    log = get_logger("streetwise.main")
    log.info("설정 로드 완료")

    zones = load_zones(s.geofence.zones_file) if s.geofence.zones_file else DEFAULT_ZONES
    engine = GeofenceEngine(zones)

    reports = SQLiteReportStore(s.reports.db_path); await reports.init()

    dispatch = None
    if s.local_mqtt.enabled:
        dispatch = MqttAlertPublisher(
            broker_host=s.local_mqtt.host,
            broker_port=s.local_mqtt.port,
            topic_prefix=s.local_mqtt.topic_prefix,
            username=s.local_mqtt.username,
            password=s.local_mqtt.password,
            client_id=s.local_mqtt.client_id,
            keepalive=s.local_mqtt.keepalive,
            qos=s.local_mqtt.qos,
        )
        log.info("로컬 MQTT 퍼블리셔 생성 완료")

    async with PoliceUKClient(
        base_url=s.police_api.base_url,
        timeout=s.police_api.timeout_sec,
        max_retries=s.police_api.max_retries,
        backoff_initial=s.police_api.backoff_initial_sec,
        backoff_max=s.police_api.backoff_max_sec,
        category=s.police_api.category,
    ) as police:
        session = SafetySession(
            engine,
            crimes=police,
            reports=reports,
            dispatch=dispatch,
            center=(s.feed.center_lat, s.feed.center_lon),
            refresh_interval_sec=s.feed.refresh_interval_sec,
            report_limit=s.feed.report_limit,
        )
        log.info("안전 세션 생성 완료")

        http_task = await start_http(s, session)
        log.info("HTTP 서버 시작됨")

        stop = asyncio.Future()
        try:
            loop = asyncio.get_running_loop()
            for sig in (signal.SIGTERM, signal.SIGINT):
                try: loop.add_signal_handler(sig, lambda: (not stop.done()) and stop.set_result(True))
                except NotImplementedError: pass
        except RuntimeError: pass

        session_task = asyncio.create_task(session.start())
        await stop
        session.stop()
        session_task.cancel()
        http_task.cancel()

if __name__ == "__main__":
    asyncio.run(main())
