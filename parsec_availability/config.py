from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

URL_VAR = "PARSEC_SUPABASE_URL"
KEY_VAR = "PARSEC_SUPABASE_KEY"
ARTIFACT_VAR = "PARSEC_ARTIFACT_DIR"
ENV_FILE_VAR = "PARSEC_ENV_FILE"


@dataclass(frozen=True)
class SupabaseConfig:
    url: str
    api_key: str


@dataclass(frozen=True)
class RuntimeConfig:
    supabase_url: str | None
    artifact_root: Path


def load_env(dotenv_path: str | Path | None = None) -> None:
    path = Path(dotenv_path) if dotenv_path else None
    if path is None and os.getenv(ENV_FILE_VAR):
        path = Path(os.environ[ENV_FILE_VAR])
    if path and path.exists():
        load_dotenv(path)
        return
    load_dotenv()


def runtime_config() -> RuntimeConfig:
    url = os.getenv(URL_VAR, "").strip().rstrip("/") or None
    artifact_root = Path(os.getenv(ARTIFACT_VAR, "./artifacts")).expanduser().resolve()
    artifact_root.mkdir(parents=True, exist_ok=True)
    return RuntimeConfig(supabase_url=url, artifact_root=artifact_root)


def get_supabase_config() -> SupabaseConfig:
    url = os.getenv(URL_VAR, "").strip().rstrip("/")
    api_key = os.getenv(KEY_VAR, "").strip()
    if not url or not api_key:
        missing = [name for name, value in ((URL_VAR, url), (KEY_VAR, api_key)) if not value]
        raise ValueError(
            "Missing Supabase credentials. "
            f"Expected env vars {URL_VAR} and {KEY_VAR}; not set: {', '.join(missing)}"
        )
    return SupabaseConfig(url=url, api_key=api_key)
