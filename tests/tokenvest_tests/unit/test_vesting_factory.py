"""
Unit tests for VestingFactory and engine snapshots.

Coverage targets:
- One engine per grant with independent state
- Registry lookups
- to_dict/from_dict round trip and corrupted snapshot rejection
- Read-only summary and withdrawable balance
"""

import pytest

from tokenvest.core.blockchain_exceptions import InvalidScheduleError, InvalidScheduleReason
from tokenvest.core.contracts.erc20 import ERC20Token
from tokenvest.core.defi.access_control import AdminAccessControl
from tokenvest.core.vesting.engine import TokenVesting
from tokenvest.core.vesting.factory import VestingFactory
from vesting_constants import (
    ADMIN,
    AMOUNT,
    BASE_TIME,
    BENEFICIARY,
    CLIFF,
    DURATION,
    SLICE,
    STRANGER,
)


class TestVestingFactory:

    def test_deploys_independent_engines(self, token, access_control, clock):
        factory = VestingFactory()
        first = factory.deploy(token, access_control, time_provider=clock.now)
        second = factory.deploy(token, access_control, time_provider=clock.now)

        assert first.address != second.address
        assert factory.get_vesting(first.address) is first
        assert factory.get_vesting(second.address.upper()) is second
        assert factory.get_vesting("0xmissing") is None

        token.transfer(ADMIN, first.address, AMOUNT)
        token.transfer(ADMIN, second.address, 2 * AMOUNT)
        first.create_schedule(ADMIN, BENEFICIARY, BASE_TIME, CLIFF, DURATION, SLICE, AMOUNT)
        second.create_schedule(ADMIN, STRANGER, BASE_TIME, 0, DURATION, 1, 2 * AMOUNT)

        clock.set(BASE_TIME + DURATION // 2)
        assert first.compute_releasable() == 50
        assert second.compute_releasable() == 100

        listing = {entry["address"]: entry for entry in factory.list_vestings()}
        assert listing[first.address]["beneficiary"] == BENEFICIARY
        assert listing[second.address]["amount_total"] == 2 * AMOUNT
        assert all(entry["token"] == token.address for entry in listing.values())

    def test_addresses_are_reproducible(self, token, access_control):
        a = VestingFactory("0xfactory").deploy(token, access_control)
        b = VestingFactory("0xfactory").deploy(token, access_control)
        assert a.address == b.address


class TestSnapshots:

    def test_round_trip_preserves_state(self, scheduled_vesting, token, access_control, clock):
        clock.set(BASE_TIME + DURATION // 2)
        scheduled_vesting.release(BENEFICIARY, 30)

        data = scheduled_vesting.to_dict()
        restored = TokenVesting.from_dict(data, token, access_control, time_provider=clock.now)

        assert restored.address == scheduled_vesting.address
        assert restored.get_schedule() == scheduled_vesting.get_schedule()
        assert restored.get_total_reserved() == 70
        assert restored.compute_releasable() == 20
        assert [e.amount for e in restored.events] == [30]

        restored.release(BENEFICIARY, 20)
        assert restored.get_schedule().released == 50

    def test_restored_engine_stays_single_schedule(self, scheduled_vesting, token, access_control):
        restored = TokenVesting.from_dict(scheduled_vesting.to_dict(), token, access_control)
        with pytest.raises(InvalidScheduleError) as exc_info:
            restored.create_schedule(ADMIN, BENEFICIARY, BASE_TIME, CLIFF, DURATION, SLICE, 1)
        assert exc_info.value.reason is InvalidScheduleReason.ALREADY_INITIALIZED

    def test_corrupted_snapshot_rejected(self, scheduled_vesting, token, access_control):
        data = scheduled_vesting.to_dict()
        data["total_reserved"] = AMOUNT - 1

        with pytest.raises(InvalidScheduleError) as exc_info:
            TokenVesting.from_dict(data, token, access_control)
        assert exc_info.value.reason is InvalidScheduleReason.CORRUPTED_SNAPSHOT

        data = scheduled_vesting.to_dict()
        data["schedule"]["released"] = AMOUNT + 1
        with pytest.raises(InvalidScheduleError):
            TokenVesting.from_dict(data, token, access_control)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"start": -1, "cliff": 0},
            {"cliff": BASE_TIME - 1},
        ],
    )
    def test_snapshot_with_impossible_timing_rejected(
        self, scheduled_vesting, token, access_control, overrides
    ):
        data = scheduled_vesting.to_dict()
        data["schedule"].update(overrides)

        with pytest.raises(InvalidScheduleError) as exc_info:
            TokenVesting.from_dict(data, token, access_control)
        assert exc_info.value.reason is InvalidScheduleReason.CORRUPTED_SNAPSHOT

    def test_snapshot_for_other_token_rejected(self, scheduled_vesting, access_control):
        other = ERC20Token(name="Other", symbol="OT", owner=ADMIN)
        with pytest.raises(ValueError):
            TokenVesting.from_dict(scheduled_vesting.to_dict(), other, access_control)

    def test_empty_engine_round_trip(self, vesting, token, access_control):
        restored = TokenVesting.from_dict(vesting.to_dict(), token, access_control)
        assert restored.get_schedule().initialized is False
        assert restored.get_total_reserved() == 0


class TestReadOnlyQueries:

    def test_summary_reports_progress(self, scheduled_vesting, clock):
        clock.set(BASE_TIME + DURATION // 2)
        scheduled_vesting.release(BENEFICIARY, 10)

        summary = scheduled_vesting.get_schedule_summary()
        assert summary["vested"] == 50
        assert summary["released"] == 10
        assert summary["releasable"] == 40
        assert summary["total_reserved"] == 90
        assert summary["end"] == BASE_TIME + DURATION
        assert summary["display"]["vested"] == "50"

    def test_summary_formats_token_decimals(self, clock):
        token = ERC20Token(name="Wei Token", symbol="WT", decimals=18, owner=ADMIN)
        token.mint(ADMIN, ADMIN, 10**21)
        engine = TokenVesting(token, AdminAccessControl(ADMIN), time_provider=clock.now)
        token.transfer(ADMIN, engine.address, 10**20)
        engine.create_schedule(ADMIN, BENEFICIARY, BASE_TIME, 0, 4, 1, 10**20)

        clock.set(BASE_TIME + 1)
        display = engine.get_schedule_summary()["display"]
        assert display["amount_total"] == "100.000000000000000000"
        assert display["releasable"] == "25.000000000000000000"

    def test_withdrawable_amount_excludes_reserved(self, scheduled_vesting, token):
        assert scheduled_vesting.get_withdrawable_amount() == 0
        token.transfer(ADMIN, scheduled_vesting.address, 40)
        assert scheduled_vesting.get_withdrawable_amount() == 40

    def test_current_time_must_be_integer(self, token, access_control):
        engine = TokenVesting(token, access_control, time_provider=lambda: "soon")
        with pytest.raises(ValueError):
            engine.get_current_time()

    def test_release_with_bad_clock_fails_like_queries(self, token, access_control):
        engine = TokenVesting(token, access_control, time_provider=lambda: None)
        token.transfer(ADMIN, engine.address, AMOUNT)
        engine.create_schedule(ADMIN, BENEFICIARY, BASE_TIME, 0, DURATION, SLICE, AMOUNT)

        for _ in range(2):  # the guard is released after the failure
            with pytest.raises(ValueError, match="integer timestamp"):
                engine.release(BENEFICIARY, 1)
        with pytest.raises(ValueError, match="integer timestamp"):
            engine.compute_releasable()

        assert engine.get_schedule().released == 0
        assert engine.get_total_reserved() == AMOUNT
