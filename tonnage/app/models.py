from pydantic import BaseModel

from .env_loader import EnvironmentName


class EnvironmentResponse(BaseModel):
    environment: EnvironmentName
