from typing import Literal

from pydantic import BaseModel

StoreBackend = Literal["memory", "db"]
ReadinessStatus = Literal["ok", "error"]


class HealthResponse(BaseModel):
    status: Literal["ok"]
    store_backend: StoreBackend


class ReadinessDependency(BaseModel):
    name: Literal["database", "local_store"]
    status: ReadinessStatus


class ReadinessResponse(BaseModel):
    status: Literal["ok", "degraded"]
    dependencies: list[ReadinessDependency]
