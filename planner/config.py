from __future__ import annotations

import os

import streamlit as st

from planner.constants import DEFAULT_AUTH_PROVIDER, DEFAULT_GEMINI_MODEL, DEFAULT_TIMEZONE

ROOT_DIR = os.path.join(os.path.dirname(__file__), "..")
ENV_PATH = os.path.join(ROOT_DIR, ".env")
DEFAULT_LOCAL_DB_PATH = os.path.join(ROOT_DIR, "kst_calendar_local.db")

ENV_FALLBACK_KEYS = {
    ("auth", "redirect_uri"): "AUTH_REDIRECT_URI",
    ("auth", "cookie_secret"): "AUTH_COOKIE_SECRET",
    ("auth", "kakao", "client_id"): "KAKAO_CLIENT_ID",
    ("auth", "kakao", "client_secret"): "KAKAO_CLIENT_SECRET",
    ("auth", "kakao", "server_metadata_url"): "KAKAO_SERVER_METADATA_URL",
    ("app", "auth_provider"): "AUTH_PROVIDER",
    ("app", "API_BASE_URL"): "API_BASE_URL",
    ("app", "BACKEND_SESSION_SECRET"): "BACKEND_SESSION_SECRET",
    ("app", "local_db_path"): "LOCAL_DB_PATH",
    ("app", "timezone"): "CALENDAR_TIMEZONE",
    ("app", "serialize_writes"): "PLANNER_SERIALIZE_WRITES",
    ("gemini", "api_key"): "GEMINI_API_KEY",
    ("gemini", "model"): "GEMINI_MODEL",
}

_FALSE_VALUES = {"0", "false", "no", "off"}


def load_local_env():
    if not os.path.exists(ENV_PATH):
        return
    with open(ENV_PATH, "r", encoding="utf-8") as env_file:
        for raw_line in env_file:
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


def get_secret(path, default=None):
    env_key = ENV_FALLBACK_KEYS.get(tuple(path))
    if env_key:
        env_value = os.getenv(env_key)
        if env_value:
            return env_value
    current = st.secrets
    for key in path:
        try:
            if key not in current:
                return default
            current = current[key]
        except Exception:
            # st.secrets raises when no secrets.toml exists at all.
            return default
    return current


def local_db_path():
    return str(get_secret(("app", "local_db_path")) or DEFAULT_LOCAL_DB_PATH)


def local_database_url(path=None):
    return f"sqlite:///{path or local_db_path()}"


def calendar_timezone():
    return str(get_secret(("app", "timezone")) or DEFAULT_TIMEZONE)


def auth_provider():
    return str(get_secret(("app", "auth_provider")) or DEFAULT_AUTH_PROVIDER)


def auth_configured(provider=None):
    provider = provider or auth_provider()
    return bool(
        get_secret(("auth", "redirect_uri"))
        and get_secret(("auth", "cookie_secret"))
        and get_secret(("auth", provider, "client_id"))
        and get_secret(("auth", provider, "client_secret"))
    )


def auth_setup_hint(provider=None):
    provider = provider or auth_provider()
    return (
        "[auth]\n"
        "redirect_uri = \"http://localhost:8501/oauth2callback\"\n"
        "cookie_secret = \"LONG_RANDOM_SECRET\"\n\n"
        f"[auth.{provider}]\n"
        "client_id = \"YOUR_REST_API_KEY\"\n"
        "client_secret = \"YOUR_CLIENT_SECRET\"\n"
        "server_metadata_url = \"https://kauth.kakao.com/.well-known/openid-configuration\"\n\n"
        "[app]\n"
        "API_BASE_URL = \"http://localhost:8000\"\n"
        "BACKEND_SESSION_SECRET = \"SAME_SECRET_AS_BACKEND\""
    )


def gemini_api_key():
    return str(get_secret(("gemini", "api_key")) or "")


def gemini_model():
    return str(get_secret(("gemini", "model")) or DEFAULT_GEMINI_MODEL)


def serialize_writes():
    raw = get_secret(("app", "serialize_writes"))
    if raw is None or raw == "":
        return True
    return str(raw).strip().lower() not in _FALSE_VALUES
