from __future__ import annotations

import asyncio
import json
import re
import urllib.error
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from domain.models import AppConfig, ProfileSeed, Skill


@dataclass(frozen=True)
class ConnectivityResult:
    """Outcome of validate_connectivity(): errors plus whether the LLM was probed."""

    errors: list[str]
    llm_checked: bool = False

    @property
    def ok(self) -> bool:
        return len(self.errors) == 0


_REQUIRED_CONFIG_KEYS = {"OPENAI_BASE_URL"}
_REQUIRED_PROFILE_KEYS = {"first_name", "email"}
_POSITIVE_INT_KEYS = (
    "RATE_LIMIT_MAX_REQUESTS",
    "RATE_LIMIT_WINDOW_MS",
    "CACHE_TTL_MS",
    "LLM_TIMEOUT_SECONDS",
)
_PLACEHOLDER_PATTERN = re.compile(r"^YOUR_", re.IGNORECASE)
_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# profile.json key -> job_settings column
_SETTINGS_KEYS = {
    "naukri_email": "naukri_email",
    "target_role": "target_role",
    "location": "location",
    "current_ctc": "current_c_t_c",
    "expected_ctc": "expected_c_t_c",
    "notice_period": "notice_period",
    "years_of_experience": "years_of_experience",
    "availability": "availability",
    "dob": "dob",
}


class FileSystemConfigProvider:
    """Reads config.json and the optional profile.json from a config directory.

    Every public method re-reads from disk so that edits
    to the JSON files take effect without restarting the app.
    """

    def __init__(self, config_dir: str) -> None:
        self._config_dir = Path(config_dir)

    def validate(self) -> list[str]:
        errors: list[str] = []
        config_data = self._validate_json_file(
            self._config_dir / "config.json",
            _REQUIRED_CONFIG_KEYS,
            errors,
        )
        if config_data is not None:
            errors.extend(self._validate_config_formats(config_data))

        profile_path = self._config_dir / "profile.json"
        if profile_path.is_file():
            profile_data = self._validate_json_file(profile_path, _REQUIRED_PROFILE_KEYS, errors)
            if profile_data is not None:
                errors.extend(self._validate_profile_formats(profile_data))

        return errors

    @staticmethod
    def _validate_config_formats(data: dict) -> list[str]:
        errors: list[str] = []
        openai_key = str(data.get("OPENAI_KEY") or "")
        if openai_key:
            if _PLACEHOLDER_PATTERN.search(openai_key) or "YOUR" in openai_key.upper():
                errors.append("OPENAI_KEY is a placeholder. Set your real OpenAI API key or leave it empty.")
            elif not openai_key.startswith("sk-") or len(openai_key) < 10:
                errors.append("OPENAI_KEY must start with 'sk-' and be at least 10 characters.")

        base_url = str(data.get("OPENAI_BASE_URL", ""))
        if not base_url.startswith("https://"):
            errors.append("OPENAI_BASE_URL must start with 'https://'.")

        for key in _POSITIVE_INT_KEYS:
            value = data.get(key)
            if value is not None and (isinstance(value, bool) or not isinstance(value, int) or value <= 0):
                errors.append(f"{key} must be a positive integer.")

        timeout = data.get("ANSWER_TIMEOUT_SECONDS")
        if timeout is not None and (isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0):
            errors.append("ANSWER_TIMEOUT_SECONDS must be a positive number.")

        return errors

    @staticmethod
    def _validate_profile_formats(data: dict) -> list[str]:
        errors: list[str] = []
        email = data.get("email", "")
        if not _EMAIL_PATTERN.match(str(email)):
            errors.append(f"profile.json: email '{email}' is not a valid email address.")

        settings = data.get("settings", {})
        if not isinstance(settings, dict):
            errors.append("profile.json: settings must be an object.")
        else:
            unknown = set(settings) - set(_SETTINGS_KEYS)
            if unknown:
                errors.append(f"profile.json: unknown settings: {', '.join(sorted(unknown))}")

        skills = data.get("skills", [])
        if not isinstance(skills, list) or not all(
            isinstance(s, dict) and s.get("skill_name") for s in skills
        ):
            errors.append("profile.json: skills must be a list of objects with a skill_name.")

        return errors

    async def validate_connectivity(self) -> ConnectivityResult:
        """Verify the OpenAI-compatible endpoint accepts the configured key."""
        config = self.get_config()
        if not config.llm_enabled:
            return ConnectivityResult(errors=[], llm_checked=False)

        openai_err = await asyncio.to_thread(
            self._check_openai, config.openai_key, config.openai_base_url,
        )
        return ConnectivityResult(
            errors=[openai_err] if openai_err else [],
            llm_checked=True,
        )

    @staticmethod
    def _check_openai(api_key: str, base_url: str) -> str | None:
        url = f"{base_url.rstrip('/')}/models"
        try:
            req = urllib.request.Request(url, method="GET")
            req.add_header("Authorization", f"Bearer {api_key}")
            with urllib.request.urlopen(req, timeout=15) as resp:
                resp.read()
            return None
        except urllib.error.HTTPError as exc:
            if exc.code == 401:
                return (
                    "OpenAI API key rejected: 401 Unauthorized. "
                    "Check your OPENAI_KEY in config.json."
                )
            return f"OpenAI API error: {exc.code} {exc.reason}."
        except Exception as exc:
            return f"OpenAI connectivity failed: {exc}"

    def get_config(self) -> AppConfig:
        data = self._read_json("config.json")
        defaults = AppConfig(openai_key="", openai_base_url="")
        return AppConfig(
            openai_key=str(data.get("OPENAI_KEY") or ""),
            openai_base_url=data["OPENAI_BASE_URL"],
            model=data.get("MODEL", defaults.model),
            rate_limit_max_requests=int(data.get("RATE_LIMIT_MAX_REQUESTS", defaults.rate_limit_max_requests)),
            rate_limit_window_ms=int(data.get("RATE_LIMIT_WINDOW_MS", defaults.rate_limit_window_ms)),
            cache_ttl_ms=int(data.get("CACHE_TTL_MS", defaults.cache_ttl_ms)),
            answer_timeout_seconds=float(data.get("ANSWER_TIMEOUT_SECONDS", defaults.answer_timeout_seconds)),
            llm_timeout_seconds=int(data.get("LLM_TIMEOUT_SECONDS", defaults.llm_timeout_seconds)),
        )

    def get_profile_seed(self) -> ProfileSeed | None:
        if not (self._config_dir / "profile.json").is_file():
            return None
        data = self._read_json("profile.json")
        settings = {
            _SETTINGS_KEYS[key]: value
            for key, value in data.get("settings", {}).items()
            if key in _SETTINGS_KEYS
        }
        return ProfileSeed(
            first_name=data["first_name"],
            last_name=data.get("last_name", ""),
            email=data["email"],
            settings=settings,
            skills=tuple(self._to_skill(s) for s in data.get("skills", [])),
            resume_text=self._read_resume_text(data),
        )

    # -- internal helpers ---------------------------------------------------

    def _read_json(self, filename: str) -> dict:
        path = self._config_dir / filename
        return json.loads(path.read_text(encoding="utf-8"))

    def _read_resume_text(self, data: dict) -> str:
        resume_file = data.get("resume_file")
        if resume_file:
            return (self._config_dir / resume_file).read_text(encoding="utf-8")
        return str(data.get("resume_text", ""))

    @staticmethod
    def _to_skill(raw: dict[str, Any]) -> Skill:
        return Skill(
            skill_name=raw["skill_name"],
            display_name=raw.get("display_name"),
            rating=raw.get("rating"),
            out_of=raw.get("out_of"),
            experience=None if raw.get("experience") is None else str(raw["experience"]),
        )

    @staticmethod
    def _validate_json_file(
        path: Path,
        required_keys: set[str],
        errors: list[str],
    ) -> dict | None:
        """Validate a JSON file exists and has required keys.

        Returns the parsed dict on success, or None if the file
        is missing or unparseable.
        """
        if not path.is_file():
            errors.append(f"Missing file: {path}")
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            errors.append(f"Cannot read {path}: {exc}")
            return None
        missing = required_keys - set(data.keys())
        if missing:
            errors.append(f"{path.name} missing keys: {', '.join(sorted(missing))}")
            return None
        return data
