import pytest

from test_cheese import TestResult


@pytest.fixture
def r(request):
    """Per-test result record, the same object main() hands each test."""
    return TestResult(request.node.name)
