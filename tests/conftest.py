import io
import sys
from pathlib import Path

import pytest

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from jast import Evaluator, loads


@pytest.fixture
def out():
    return io.StringIO()


@pytest.fixture
def evaluator(out):
    """A fresh evaluator writing to an in-memory stream."""
    return Evaluator(out=out)


@pytest.fixture
def run(evaluator, out):
    """Evaluate JSON source, returning (result node, printed lines)."""

    def run_(source):
        result = evaluator.evaluate(loads(source))
        return result, out.getvalue().splitlines()

    return run_
