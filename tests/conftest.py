import pytest

from fakes import FakeSvg2Png


@pytest.fixture
def png_backend() -> FakeSvg2Png:
    return FakeSvg2Png()


@pytest.fixture
def failing_backend() -> FakeSvg2Png:
    return FakeSvg2Png(fail=True)
