import sys
from pathlib import Path

import pytest

# Ensure the src directory (for `tokenvest.*`) and this directory (for the
# shared constants module) are importable before collection runs.
project_root = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(project_root / "src"))
sys.path.insert(0, str(Path(__file__).resolve().parent))

from tokenvest.core.contracts.erc20 import ERC20Token  # noqa: E402
from tokenvest.core.defi.access_control import AdminAccessControl  # noqa: E402
from tokenvest.core.vesting.clock import ManualClock  # noqa: E402
from tokenvest.core.vesting.engine import TokenVesting  # noqa: E402
from vesting_constants import (  # noqa: E402
    ADMIN,
    AMOUNT,
    BASE_TIME,
    BENEFICIARY,
    CLIFF,
    DURATION,
    SLICE,
)


@pytest.fixture
def clock():
    return ManualClock(start_time=BASE_TIME)


@pytest.fixture
def access_control():
    return AdminAccessControl(admin_address=ADMIN)


@pytest.fixture
def token():
    """Test token with the whole supply held by the administrator."""
    token = ERC20Token(name="Test Token", symbol="TT", decimals=0, owner=ADMIN)
    token.mint(ADMIN, ADMIN, 1_000_000)
    return token


@pytest.fixture
def vesting(token, access_control, clock):
    """Engine funded with AMOUNT tokens, no schedule yet."""
    engine = TokenVesting(token, access_control, time_provider=clock.now)
    token.transfer(ADMIN, engine.address, AMOUNT)
    return engine


@pytest.fixture
def scheduled_vesting(vesting):
    """Engine running the 30-day-cliff, 120-day, 30-day-slice schedule."""
    vesting.create_schedule(ADMIN, BENEFICIARY, BASE_TIME, CLIFF, DURATION, SLICE, AMOUNT)
    return vesting
