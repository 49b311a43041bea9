from enque_desk.clients.api_client import EnqueApiClient
from enque_desk.core.config import Settings
from enque_desk.core.errors import UpstreamError
from enque_desk.models.schemas.health import HealthResponse, UpstreamHealth


class HealthService:
    def __init__(self, api_client: EnqueApiClient, settings: Settings) -> None:
        self.api_client = api_client
        self.settings = settings

    def check_upstream(self) -> UpstreamHealth:
        try:
            self.api_client.get("/health")
        except UpstreamError as exc:
            return UpstreamHealth(
                reachable=exc.upstream_status is not None,
                status_code=exc.upstream_status,
                message=exc.message,
            )
        return UpstreamHealth(reachable=True, status_code=200)

    def get_health(self) -> HealthResponse:
        upstream = self.check_upstream()
        status = "ok" if upstream.reachable and upstream.status_code == 200 else "degraded"
        return HealthResponse(
            status=status,
            environment=self.settings.app_env,
            upstream=upstream,
        )
