from pydantic import Field, NonNegativeInt, PositiveFloat
from pydantic_settings import BaseSettings


class FetchConfig(BaseSettings):
    FETCH_DEFAULT_TIMEOUT: PositiveFloat = Field(
        description="Timeout in seconds used by the transport when a request sets none",
        default=60.0,
    )

    FETCH_MAX_REDIRECTS: NonNegativeInt = Field(
        description="Maximum redirects followed, 1 or less disables following",
        default=20,
    )

    FETCH_PROTOCOL_VERSION: PositiveFloat = Field(
        description="HTTP protocol version announced by new requests",
        default=1.0,
    )

    FETCH_USER_AGENT: str = Field(
        description="User-Agent sent when a request does not set one",
        default="",
    )

    FETCH_LOCAL_HOSTS: str = Field(
        description="Comma-separated hosts whose responses are typed 'basic' instead of 'cors'",
        default="localhost,127.0.0.1,::1",
    )

    @property
    def local_hosts(self) -> set[str]:
        return {host.strip().lower() for host in self.FETCH_LOCAL_HOSTS.split(",") if host.strip()}
