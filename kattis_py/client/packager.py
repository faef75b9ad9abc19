"""Assembling a submission from a solution's configuration."""

from typing import TYPE_CHECKING, Optional

from ..config.languages import needs_mainclass, normalize_language
from ..errors import ConfigurationError, PackageError
from .models import SubmissionFile, SubmissionPackage

if TYPE_CHECKING:
    from ..config.solution_config import SolutionConfig


def package(
    config: "SolutionConfig",
    problem: Optional[str] = None,
    language: Optional[str] = None,
    mainclass: Optional[str] = None,
) -> SubmissionPackage:
    """
    Read the configured files, in configuration order, into a package.
    Arguments override the corresponding configuration fields.
    """
    problem = problem or config.problem
    if not problem:
        raise ConfigurationError("No problem id given; set 'problem' in kattis.yml")
    language = normalize_language(language) if language else config.language
    mainclass = mainclass or config.mainclass

    if not config.files:
        raise ConfigurationError("No files to submit; set 'files' in kattis.yml")
    if needs_mainclass(language) and not mainclass:
        raise ConfigurationError(f"{language} submissions need a 'mainclass'")

    files = []
    for path in config.files:
        full_path = config.directory / path
        if not full_path.is_file():
            raise PackageError.missing_file(path)
        files.append(SubmissionFile(path=path, content=full_path.read_bytes()))

    return SubmissionPackage(
        problem=problem,
        language=language,
        files=tuple(files),
        mainclass=mainclass,
    )
