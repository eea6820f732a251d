"""Transaction history: completeness, ordering, current vs. snapshot balances."""

from src.bk_common.enums import TransactionType
from src.bk_gateway.auth.principal import Principal
from src.bk_ledger.application.schemas import HistoryItem
from src.bk_ledger.engine.engine import LedgerEngine
from tests.fakes import InMemoryStore


class TestHistory:
    async def test_no_accounts_means_empty_history(
        self, ledger: LedgerEngine, store: InMemoryStore, alice: Principal
    ) -> None:
        assert await ledger.get_transaction_history(store.session(), alice) == []

    async def test_exactly_the_transactions_touching_own_accounts(
        self, ledger: LedgerEngine, store: InMemoryStore, alice: Principal, bob: Principal
    ) -> None:
        carol = store.add_user("carol")
        a = store.add_account(alice, balance=10000)
        b = store.add_account(bob, balance=10000)
        c = store.add_account(carol, balance=10000)

        await ledger.deposit(store.session(), alice, a.account_number, 100)
        await ledger.transfer(store.session(), bob, b.account_number, a.account_number, 200)
        await ledger.withdraw(store.session(), bob, b.account_number, 300)
        await ledger.transfer(store.session(), carol, c.account_number, b.account_number, 400)

        alice_history = await ledger.get_transaction_history(store.session(), alice)
        bob_history = await ledger.get_transaction_history(store.session(), bob)
        carol_history = await ledger.get_transaction_history(store.session(), carol)

        assert [e.transaction.amount for e in alice_history] == [100, 200]
        assert [e.transaction.amount for e in bob_history] == [200, 300, 400]
        assert [e.transaction.amount for e in carol_history] == [400]

    async def test_oldest_first(
        self, ledger: LedgerEngine, store: InMemoryStore, alice: Principal
    ) -> None:
        a = store.add_account(alice, balance=0)
        for amount in (10, 20, 30):
            await ledger.deposit(store.session(), alice, a.account_number, amount)

        history = await ledger.get_transaction_history(store.session(), alice)

        ids = [e.transaction.id for e in history]
        assert ids == sorted(ids)
        assert [e.transaction.amount for e in history] == [10, 20, 30]

    async def test_current_and_snapshot_balances(
        self, ledger: LedgerEngine, store: InMemoryStore, alice: Principal, bob: Principal
    ) -> None:
        a = store.add_account(alice, balance=1000)
        b = store.add_account(bob, balance=0)
        await ledger.transfer(store.session(), alice, a.account_number, b.account_number, 400)
        await ledger.deposit(store.session(), alice, a.account_number, 50)

        first = (await ledger.get_transaction_history(store.session(), alice))[0]

        assert first.transaction.type is TransactionType.TRANSFER
        assert first.source_account_number == a.account_number
        assert first.dest_account_number == b.account_number
        # current balances reflect the later deposit; snapshots do not
        assert first.source_current_balance == 650
        assert first.dest_current_balance == 400
        assert first.transaction.source_balance_after == 600
        assert first.transaction.dest_balance_after == 400

    async def test_absent_side_reports_zero(
        self, ledger: LedgerEngine, store: InMemoryStore, alice: Principal
    ) -> None:
        a = store.add_account(alice, balance=0)
        await ledger.deposit(store.session(), alice, a.account_number, 5000)

        (entry,) = await ledger.get_transaction_history(store.session(), alice)

        assert entry.source_account_number is None
        assert entry.source_current_balance == 0
        assert entry.dest_current_balance == 5000

    async def test_rendered_message(
        self, ledger: LedgerEngine, store: InMemoryStore, alice: Principal
    ) -> None:
        a = store.add_account(alice, balance=10000)
        await ledger.deposit(store.session(), alice, a.account_number, 5000)

        (entry,) = await ledger.get_transaction_history(store.session(), alice)
        item = HistoryItem.from_entry(entry)

        assert item.message == "DEPOSIT - Amount: $50.00"
        assert item.dest_balance_cents == 15000
        assert item.source_balance_cents == 0
        assert item.dest_balance_after_cents == 15000
        assert item.created_at != ""
