from pathlib import Path

import pytest

from sqlchain.utils.logging import get_logger

here = Path(__file__).parent
root_path = here.parent


@pytest.fixture(autouse=True)
def _propagate_sqlchain_logs() -> None:
    """Keep the library logger propagating so ``caplog`` sees its records."""
    get_logger().propagate = True
