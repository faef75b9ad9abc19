"""Loading sample test cases from a directory of .in/.ans files."""

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional

from ..errors import SampleError
from .models import Sample

logger = logging.getLogger(__name__)

INPUT_SUFFIX = ".in"
ANSWER_SUFFIX = ".ans"


def load_samples(
    samples_dir: Path, predicate: Optional[Callable[[str], bool]] = None
) -> List[Sample]:
    """
    Pair every <name>.in with its <name>.ans and return the samples sorted
    by name. Names rejected by `predicate` are left out entirely.
    """
    samples_dir = Path(samples_dir)
    if not samples_dir.is_dir():
        raise SampleError.missing_directory(samples_dir)

    inputs: Dict[str, Path] = {}
    answers: Dict[str, Path] = {}
    for path in samples_dir.iterdir():
        if not path.is_file():
            continue
        if predicate is not None and not predicate(path.stem):
            continue
        if path.suffix == INPUT_SUFFIX:
            inputs[path.stem] = path
        elif path.suffix == ANSWER_SUFFIX:
            answers[path.stem] = path
        else:
            logger.debug("ignoring non-sample file %s", path)

    unanswered = sorted(inputs.keys() - answers.keys())
    if unanswered:
        raise SampleError.mismatched(unanswered[0], "answer (.ans)")
    orphaned = sorted(answers.keys() - inputs.keys())
    if orphaned:
        raise SampleError.mismatched(orphaned[0], "input (.in)")

    if not inputs:
        raise SampleError.empty(samples_dir)

    return [
        Sample(
            name=name,
            input=_read(inputs[name]),
            expected=_read(answers[name]),
        )
        for name in sorted(inputs)
    ]


def _read(path: Path) -> str:
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except UnicodeDecodeError:
        raise SampleError.unreadable(path, "not valid UTF-8")
    except OSError as err:
        raise SampleError.unreadable(path, err.strerror or str(err))
