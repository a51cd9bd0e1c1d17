from dataclasses import dataclass


@dataclass(frozen=True)
class StatsError:
    message: str


@dataclass(frozen=True)
class StatsApiError(StatsError):
    endpoint: str
    status_code: int | None = None

    def describe(self) -> str:
        status = f" (HTTP {self.status_code})" if self.status_code is not None else ""
        return f"Failed to load {self.endpoint}{status}: {self.message}"
