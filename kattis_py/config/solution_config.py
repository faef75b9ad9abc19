"""Solution configuration (kattis.yml in the solution directory)."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from ..errors import ConfigurationError
from ..runner.compare import ComparisonRules
from .languages import normalize_language


CONFIG_FILENAME = "kattis.yml"
DEFAULT_SAMPLES_DIR = "./samples"
DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class SolutionConfig:
    """
    Resolved configuration for one solution.
    Relative paths (samples, files) are relative to `directory`.
    """

    run: str
    language: str
    directory: Path = field(default_factory=Path.cwd)
    samples: Path = Path(DEFAULT_SAMPLES_DIR)
    files: Tuple[str, ...] = ()
    mainclass: Optional[str] = None
    build: Tuple[str, ...] = ()
    hostname: Optional[str] = None
    problem: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    comparison: ComparisonRules = field(default_factory=ComparisonRules)

    @property
    def samples_dir(self) -> Path:
        """Sample directory, resolved against the solution directory."""
        if self.samples.is_absolute():
            return self.samples
        return self.directory / self.samples

    @classmethod
    def load(
        cls,
        directory: Optional[Path] = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> "SolutionConfig":
        """
        Load kattis.yml from the solution directory.
        If directory is not specified, searches upward from current directory.
        """
        if directory is None:
            path = cls.find_config()
            if path is None:
                raise ConfigurationError(
                    f"Could not find {CONFIG_FILENAME} in this or any parent directory"
                )
        else:
            path = Path(directory) / CONFIG_FILENAME

        if not path.is_file():
            raise ConfigurationError(
                f"Could not find the solution configuration file: {path}"
            )

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as err:
            raise ConfigurationError(f"Config file {path}: failed to parse: {err}")

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path}: expected a mapping")

        return resolve(data, path.parent, overrides or {})

    @staticmethod
    def find_config(start: Optional[Path] = None) -> Optional[Path]:
        """
        Search for kattis.yml starting from `start` (default: current
        directory), walking up to root.
        """
        current = (start or Path.cwd()).resolve()

        while True:
            config_path = current / CONFIG_FILENAME
            if config_path.exists():
                return config_path

            if current == current.parent:
                return None

            current = current.parent


def resolve(
    data: Mapping[str, Any], directory: Path, overrides: Mapping[str, Any]
) -> SolutionConfig:
    """
    Merge file data and command line overrides into one SolutionConfig.
    Precedence: override > file > default. Overrides set to None are ignored.
    """
    merged: Dict[str, Any] = dict(data)
    merged.update({k: v for k, v in overrides.items() if v is not None})

    run = merged.get("run")
    # Older configurations list the run command as a one-element list.
    if isinstance(run, list) and len(run) == 1:
        run = run[0]
    if not isinstance(run, str) or not run.strip():
        raise ConfigurationError("The 'run' command is missing from the configuration")

    language = merged.get("language")
    if not language:
        raise ConfigurationError("The 'language' field is missing from the configuration")

    mainclass = merged.get("mainclass")

    return SolutionConfig(
        run=run,
        language=normalize_language(language),
        directory=Path(directory),
        samples=Path(merged.get("samples") or DEFAULT_SAMPLES_DIR),
        files=_string_tuple(merged, "files"),
        mainclass=str(mainclass) if mainclass else None,
        build=_string_tuple(merged, "build"),
        hostname=merged.get("hostname") or None,
        problem=_optional_str(merged.get("problem")),
        timeout=_timeout(merged.get("timeout", DEFAULT_TIMEOUT)),
        comparison=_comparison(merged.get("compare") or {}),
    )


def _string_tuple(data: Mapping[str, Any], key: str) -> Tuple[str, ...]:
    value = data.get(key) or []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise ConfigurationError(f"'{key}' must be a list of strings")
    return tuple(value)


def _optional_str(value) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _timeout(value) -> float:
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"'timeout' must be a number, got {value!r}")
    if timeout <= 0:
        raise ConfigurationError("'timeout' must be positive")
    return timeout


def _comparison(data) -> ComparisonRules:
    if isinstance(data, ComparisonRules):
        return data
    if not isinstance(data, dict):
        raise ConfigurationError("'compare' must be a mapping")
    try:
        return ComparisonRules(**data)
    except (TypeError, ValueError) as err:
        raise ConfigurationError(f"Invalid 'compare' section: {err}")
