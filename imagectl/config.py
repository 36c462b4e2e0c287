"""Configuration management for imagectl.

This module provides configuration profile management. A profile names the
API origin serving uploaded files plus the image service settings the
resolver uses, so one machine can switch between e.g. a local backend and a
production deployment.
"""

import os
import tomllib
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Any
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator, HttpUrl
import requests

from .exceptions import ConfigError
from .resolver import (
    DEFAULT_API_ORIGIN,
    DEFAULT_AVATAR_BASE,
    DEFAULT_CLOUD_MARKER,
    DEFAULT_PLACEHOLDER_BASE,
)

logger = logging.getLogger(__name__)

ENV_API_URL = "IMAGECTL_API_URL"
ENV_CLOUD_MARKER = "IMAGECTL_CLOUD_MARKER"
ENV_CONFIG_DIR = "IMAGECTL_CONFIG_DIR"

HEALTH_PATH = "/api/health"


class Profile(BaseModel):
    """Configuration profile for an image-serving backend."""

    name: str = Field(..., description="Profile name")
    api_url: HttpUrl = Field(default=DEFAULT_API_ORIGIN, validate_default=True, description="API origin serving /uploads/")
    cloud_marker: str = Field(default=DEFAULT_CLOUD_MARKER, description="Substring identifying Cloudinary URLs")
    placeholder_base: HttpUrl = Field(default=DEFAULT_PLACEHOLDER_BASE, validate_default=True, description="Placeholder image service")
    avatar_base: HttpUrl = Field(default=DEFAULT_AVATAR_BASE, validate_default=True, description="Generated avatar service")
    timeout: int = Field(default=10, description="Health check timeout in seconds")
    active: bool = Field(default=False, description="Whether this is the active profile")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate profile name."""
        if not v or not v.strip():
            raise ValueError("Profile name cannot be empty")
        if "/" in v or "\\" in v:
            raise ValueError("Profile name cannot contain path separators")
        return v

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: HttpUrl) -> HttpUrl:
        """Validate that the API URL is a bare origin."""
        if v.path not in (None, "", "/"):
            raise ValueError("API URL must be an origin without a path, e.g. http://localhost:5000")
        if v.query or v.fragment:
            raise ValueError("API URL cannot contain a query or fragment")
        return v

    @field_validator("cloud_marker")
    @classmethod
    def validate_cloud_marker(cls, v: str) -> str:
        """Validate cloud marker."""
        if not v or not v.strip():
            raise ValueError("Cloud marker cannot be empty")
        return v.strip()

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        """Validate timeout value."""
        if v <= 0:
            raise ValueError("Timeout must be greater than 0")
        if v > 300:
            raise ValueError("Timeout cannot exceed 300 seconds")
        return v

    def model_dump(self, **kwargs: Any) -> Dict[str, Any]:
        """Convert profile to dictionary with proper string conversion."""
        data = super().model_dump(**kwargs)
        # Origins are stored without a trailing slash
        for key in ("api_url", "placeholder_base"):
            if key in data:
                data[key] = str(data[key]).rstrip("/")
        if "avatar_base" in data:
            data["avatar_base"] = str(data["avatar_base"])
        return data

    @property
    def origin(self) -> str:
        return str(self.api_url).rstrip("/")


def default_profile() -> Profile:
    """Get the built-in profile used when nothing is configured."""
    return Profile(name="default")


class ConfigManager:
    """Manages configuration profiles for imagectl."""

    def __init__(self, config_dir: Optional[Path] = None) -> None:
        """Initialize configuration manager.

        Args:
            config_dir: Configuration directory path. If None, uses
                ``$IMAGECTL_CONFIG_DIR`` or ``~/.imagectl``.
        """
        env_dir = os.getenv(ENV_CONFIG_DIR)
        self.config_dir = config_dir or (Path(env_dir) if env_dir else Path.home() / ".imagectl")
        self.config_file = self.config_dir / "config.toml"
        self.profiles_dir = self.config_dir / "profiles"

        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.profiles_dir.mkdir(exist_ok=True)

        self._profiles: Dict[str, Profile] = {}
        self._active_profile: Optional[str] = None
        self._load_config()

    def create_profile(
        self,
        name: str,
        api_url: str = DEFAULT_API_ORIGIN,
        cloud_marker: str = DEFAULT_CLOUD_MARKER,
        timeout: int = 10,
        overwrite: bool = False,
        validate_connection: bool = False,
    ) -> Profile:
        """Create a new configuration profile.

        Args:
            name: Profile name
            api_url: API origin serving uploaded files
            cloud_marker: Substring identifying Cloudinary URLs
            timeout: Health check timeout in seconds
            overwrite: Whether to replace an existing profile
            validate_connection: Whether to check the API health endpoint

        Returns:
            Created profile

        Raises:
            ConfigError: If profile creation fails
        """
        if name in self._profiles and not overwrite:
            raise ConfigError(f"Profile '{name}' already exists")

        try:
            parsed_url = urlparse(api_url)
            if not parsed_url.scheme or not parsed_url.netloc:
                raise ConfigError("Invalid URL format")

            profile = Profile(
                name=name,
                api_url=api_url,
                cloud_marker=cloud_marker,
                timeout=timeout,
                active=name == self._active_profile,
            )

            if validate_connection:
                self.validate_connection(profile)

            self._profiles[name] = profile
            self._save_profile(profile)
            self._save_config()

            logger.info("Saved profile '%s' (%s)", name, profile.origin)
            return profile

        except Exception as e:
            if isinstance(e, ConfigError):
                raise
            raise ConfigError(f"Failed to create profile: {e}")

    def get_profile(self, name: str) -> Profile:
        """Get a specific profile by name.

        Raises:
            ConfigError: If profile doesn't exist
        """
        if name not in self._profiles:
            raise ConfigError(f"Profile '{name}' not found")

        return self._profiles[name]

    def get_profile_config(self, name: str) -> Dict[str, Any]:
        """Get configuration for a specific profile as a dictionary."""
        return self.get_profile(name).model_dump()

    def list_profiles(self) -> List[Dict[str, Any]]:
        """List all available profiles.

        Returns:
            List of profile configurations
        """
        profiles = []
        for profile in self._profiles.values():
            profile_dict = profile.model_dump()
            profile_dict["active"] = profile.name == self._active_profile
            profiles.append(profile_dict)

        return profiles

    def set_active_profile(self, name: str) -> None:
        """Set the active profile.

        Raises:
            ConfigError: If profile doesn't exist
        """
        if name not in self._profiles:
            raise ConfigError(f"Profile '{name}' not found")

        for profile in self._profiles.values():
            profile.active = profile.name == name

        self._active_profile = name
        self._save_config()

    def get_active_profile(self) -> Optional[str]:
        """Get the name of the active profile, or None."""
        return self._active_profile

    def get_default_profile(self) -> Profile:
        """Get the default (active) profile.

        Raises:
            ConfigError: If no default profile is set
        """
        if not self._active_profile:
            raise ConfigError("No default profile set")

        return self._profiles[self._active_profile]

    def delete_profile(self, name: str) -> None:
        """Delete a configuration profile.

        Raises:
            ConfigError: If profile doesn't exist
        """
        if name not in self._profiles:
            raise ConfigError(f"Profile '{name}' not found")

        if self._active_profile == name:
            self._active_profile = None

        del self._profiles[name]

        profile_file = self.profiles_dir / f"{name}.json"
        if profile_file.exists():
            profile_file.unlink()

        self._save_config()

    def export_profile(self, name: str, file_path: Path) -> None:
        """Export a profile to a JSON file.

        Raises:
            ConfigError: If profile doesn't exist or export fails
        """
        if name not in self._profiles:
            raise ConfigError(f"Profile '{name}' not found")

        try:
            profile_data = self._profiles[name].model_dump()
            profile_data.pop("active", None)

            with open(file_path, "w") as f:
                json.dump(profile_data, f, indent=2, default=str)

        except OSError as e:
            raise ConfigError(f"Failed to export profile: {e}")

    def import_profile(self, file_path: Path, overwrite: bool = False) -> Profile:
        """Import a profile from a JSON file.

        Args:
            file_path: Path to import file
            overwrite: Whether to overwrite existing profile

        Returns:
            Imported profile

        Raises:
            ConfigError: If import fails
        """
        try:
            with open(file_path, "r") as f:
                profile_data = json.load(f)

            name = profile_data.get("name")
            if not name:
                raise ConfigError("Profile name not found in import file")

            if name in self._profiles and not overwrite:
                raise ConfigError(f"Profile '{name}' already exists. Use overwrite=True to replace.")

            profile_data["active"] = name == self._active_profile
            profile = Profile(**profile_data)
            self._profiles[name] = profile
            self._save_profile(profile)
            self._save_config()

            return profile

        except Exception as e:
            if isinstance(e, ConfigError):
                raise
            raise ConfigError(f"Failed to import profile: {e}")

    def has_environment_config(self) -> bool:
        """Check if environment variables provide an API origin."""
        return bool(os.getenv(ENV_API_URL))

    def get_environment_config(self) -> Dict[str, Any]:
        """Get configuration from environment variables.

        Raises:
            ConfigError: If IMAGECTL_API_URL is not set
        """
        env_url = os.getenv(ENV_API_URL)
        if not env_url:
            raise ConfigError(f"{ENV_API_URL} environment variable is required")

        return {
            "name": "env",
            "api_url": env_url.rstrip("/"),
            "cloud_marker": os.getenv(ENV_CLOUD_MARKER) or DEFAULT_CLOUD_MARKER,
            "active": True,
        }

    def resolve_profile(self, name: Optional[str] = None) -> Profile:
        """Pick the profile to use.

        Order: the named profile, the environment, the active profile,
        and finally the built-in default.

        Raises:
            ConfigError: If a named profile doesn't exist or the environment
                configuration is invalid
        """
        if name:
            return self.get_profile(name)

        if self.has_environment_config():
            try:
                return Profile(**self.get_environment_config())
            except ValueError as e:
                raise ConfigError(f"Invalid {ENV_API_URL}: {e}")

        if self._active_profile:
            return self._profiles[self._active_profile]

        return default_profile()

    def validate_connection(self, profile: Profile) -> None:
        """Check that the profile's API origin is reachable.

        Raises:
            ConfigError: If connection validation fails
        """
        url = f"{profile.origin}{HEALTH_PATH}"
        try:
            response = requests.get(url, timeout=profile.timeout)
        except requests.exceptions.RequestException as e:
            raise ConfigError(f"Failed to connect to {profile.origin}: {e}")

        if response.status_code >= 500:
            raise ConfigError(f"Failed to connect to {profile.origin}: HTTP {response.status_code}")

    def _load_config(self) -> None:
        """Load configuration from file."""
        if not self.config_file.exists():
            return

        try:
            with open(self.config_file, "rb") as f:
                config_data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Failed to load configuration: {e}")

        for profile_file in self.profiles_dir.glob("*.json"):
            try:
                with open(profile_file, "r") as f:
                    profile_data = json.load(f)

                profile = Profile(**profile_data)
                self._profiles[profile.name] = profile
            except (OSError, ValueError) as e:
                logger.warning("Failed to load profile %s: %s", profile_file, e)

        active = config_data.get("active_profile") or None
        self._active_profile = active if active in self._profiles else None

    def _save_config(self) -> None:
        """Save configuration to file."""
        # tomllib is read-only, so the file is written by hand
        active_line = f'active_profile = "{self._active_profile}"\n' if self._active_profile else ""
        toml_content = f"""# imagectl configuration
version = "1.0"
{active_line}"""

        try:
            with open(self.config_file, "w") as f:
                f.write(toml_content)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration: {e}")

    def _save_profile(self, profile: Profile) -> None:
        """Save individual profile to file."""
        try:
            profile_file = self.profiles_dir / f"{profile.name}.json"
            with open(profile_file, "w") as f:
                json.dump(profile.model_dump(), f, indent=2, default=str)
        except OSError as e:
            raise ConfigError(f"Failed to save profile: {e}")
