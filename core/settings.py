# core/settings.py
from __future__ import annotations
import yaml
from pathlib import Path
from pydantic import BaseModel

DEFAULT_SETTINGS_PATH = Path(__file__).resolve().parents[1] / "config" / "settings.yaml"

class AppConfig(BaseModel):
    name: str
    school_name: str
    motto: str = ""
    environment: str = "development"
    log_level: str = "INFO"

class AuthConfig(BaseModel):
    admin_user: str
    admin_password: str
    display_name: str = "Administrator"

class ApiConfig(BaseModel):
    base_url: str
    timeout_seconds: float = 10.0

class AdmissionConfig(BaseModel):
    prefix: str = "AHP"

class Settings(BaseModel):
    app: AppConfig
    auth: AuthConfig
    api: ApiConfig
    admission: AdmissionConfig = AdmissionConfig()

def load_settings(path: str | Path = DEFAULT_SETTINGS_PATH) -> Settings:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return Settings(
        app=AppConfig(**data["app"]),
        auth=AuthConfig(**data["auth"]),
        api=ApiConfig(**data["api"]),
        admission=AdmissionConfig(**(data.get("admission") or {})),
    )
