"""Judge credentials (.kattisrc files)."""

import configparser
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import click

from ..errors import ConfigurationError


APP_NAME = "kattis"
CONFIG_HOME_ENV = "KATTIS_CONFIG_HOME"


def config_home() -> Path:
    """Directory holding the user's kattis_py configuration."""
    env = os.environ.get(CONFIG_HOME_ENV)
    if env:
        return Path(env)
    return Path(click.get_app_dir(APP_NAME))


@dataclass
class Credentials:
    """
    Credentials for one judge host, as found in a .kattisrc file.
    Either a password or a token authenticates the user.
    """

    username: str
    hostname: str
    loginurl: str
    submissionurl: str
    submissionsurl: str
    password: Optional[str] = None
    token: Optional[str] = None

    @classmethod
    def load(cls, path: Path) -> "Credentials":
        """Load credentials from a .kattisrc file."""
        parser = configparser.ConfigParser(interpolation=None)
        try:
            with open(path, "r", encoding="utf-8") as f:
                parser.read_file(f)
        except OSError as err:
            raise ConfigurationError(f"Failed to read credentials {path}: {err}")
        except configparser.Error as err:
            raise ConfigurationError(f"When parsing credentials {path}: {err}")
        return cls.from_parser(parser, path)

    @classmethod
    def from_parser(cls, parser: configparser.ConfigParser, source="credentials"):
        def get(section: str, key: str, required: bool = True) -> Optional[str]:
            value = parser.get(section, key, fallback=None)
            if value is not None:
                value = value.strip()
            if required and not value:
                raise ConfigurationError(f"When parsing {source}: missing field: {key}")
            return value or None

        hostname = get("kattis", "hostname")
        credentials = cls(
            username=get("user", "username"),
            password=get("user", "password", required=False),
            token=get("user", "token", required=False),
            hostname=hostname,
            loginurl=get("kattis", "loginurl", required=False)
            or f"https://{hostname}/login",
            submissionurl=get("kattis", "submissionurl", required=False)
            or f"https://{hostname}/submit",
            submissionsurl=get("kattis", "submissionsurl", required=False)
            or f"https://{hostname}/submissions",
        )
        if not credentials.has_secret():
            raise ConfigurationError(
                f"When parsing {source}: either a password or a token is required"
            )
        return credentials

    def has_secret(self) -> bool:
        """Check if a password or token is stored."""
        return bool(self.password or self.token)

    @staticmethod
    def directory() -> Path:
        return config_home() / "credentials"

    @classmethod
    def find(cls, hostname: Optional[str]) -> "Credentials":
        """
        Find the credentials file for a hostname.
        Files in the credentials directory are matched by name; the user's
        ~/.kattisrc is the fallback.
        """
        candidates = cls.candidates(hostname)
        if len(candidates) > 1:
            names = ", ".join(p.name for p in candidates)
            raise ConfigurationError(
                f"Multiple credential files match {hostname!r}: {names}"
            )
        if candidates:
            return cls.load(candidates[0])

        fallback = Path.home() / ".kattisrc"
        if fallback.is_file():
            credentials = cls.load(fallback)
            if hostname is None or credentials.hostname == hostname:
                return credentials

        raise ConfigurationError(
            f"No credentials found for {hostname or 'the default host'}. "
            f"Place a .kattisrc file in {cls.directory()}"
        )

    @classmethod
    def candidates(cls, hostname: Optional[str]) -> List[Path]:
        directory = cls.directory()
        if not directory.is_dir():
            return []
        files = sorted(p for p in directory.iterdir() if p.is_file())
        if hostname is None:
            return files if len(files) == 1 else []
        exact = [p for p in files if p.name == hostname or p.stem == hostname]
        if exact:
            return exact
        return [p for p in files if hostname in p.name]
