from typing import Optional

from pydantic_settings import BaseSettings


class AuthConfig(BaseSettings):
    secret: str = "food-delivery-super-secret-key"  # 🔐 Override with SECRET in production
    jwt_lifetime_seconds: int = 86400
    jwt_algorithm: str = "HS256"
    jwt_audience: str = "fastapi-users:auth"

    # Google sign-in is only mounted when both are set
    google_client_id: Optional[str] = None
    google_client_secret: Optional[str] = None

    @property
    def google_enabled(self) -> bool:
        return bool(self.google_client_id and self.google_client_secret)


auth_config = AuthConfig()
