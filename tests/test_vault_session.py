"""保险库会话编排测试。"""

import threading

import pytest

from config import PRESET_NETWORKS, ChainType
from errors import (
    InvalidCredential,
    NoMasterSecret,
    SessionNotUnlocked,
    UnknownWallet,
    WeakCredential,
)
from models import DisclosureState, MasterSecret, SessionState
from vault_session import VaultSession

from conftest import KNOWN_ADDRESS_0, KNOWN_KEY_0, KNOWN_PHRASE, PASSWORD


class TestAccountLifecycle:

    def test_weak_password_keeps_no_account(self):
        vault = VaultSession()
        with pytest.raises(WeakCredential):
            vault.create_account("abc")
        assert vault.state == SessionState.NO_ACCOUNT

    def test_lock_and_unlock(self, session):
        assert session.lock() == SessionState.LOCKED
        with pytest.raises(InvalidCredential):
            session.authenticate("wrong")
        assert session.state == SessionState.LOCKED
        assert session.authenticate(PASSWORD) == SessionState.UNLOCKED

    def test_lock_keeps_wallets(self, seeded_session):
        wallet_id = seeded_session.add_wallet()
        seeded_session.lock()
        with pytest.raises(SessionNotUnlocked):
            seeded_session.list_wallets()
        seeded_session.authenticate(PASSWORD)
        assert [w.wallet_id for w in seeded_session.list_wallets()] == [wallet_id]
        assert seeded_session.has_master_secret

    def test_lock_hides_revealed_keys(self, seeded_session):
        wallet_id = seeded_session.add_wallet()
        seeded_session.request_reveal(wallet_id)
        seeded_session.confirm_reveal(wallet_id, PASSWORD)
        seeded_session.lock()
        seeded_session.authenticate(PASSWORD)
        assert seeded_session.disclosure_state(wallet_id) == DisclosureState.HIDDEN


class TestGating:

    def test_list_is_detached_from_registry(self, seeded_session):
        snapshot = seeded_session.list_wallets()
        seeded_session.add_wallet()
        seeded_session.lock()
        assert list(snapshot) == []

    def test_delete_while_iterating(self, seeded_session):
        for _ in range(3):
            seeded_session.add_wallet()
        for wallet in seeded_session.list_wallets():
            seeded_session.delete_wallet(wallet.wallet_id)
        assert seeded_session.list_wallets() == ()

    @pytest.mark.parametrize(
        "operation",
        [
            lambda s: s.generate_master_secret(),
            lambda s: s.add_wallet(),
            lambda s: s.begin_add_wallet(),
            lambda s: s.delete_wallet("w0"),
            lambda s: s.list_wallets(),
            lambda s: s.master_secret_words(),
            lambda s: s.request_reveal("w0"),
            lambda s: s.confirm_reveal("w0", PASSWORD),
        ],
    )
    def test_refused_when_locked(self, seeded_session, operation):
        seeded_session.add_wallet()
        seeded_session.lock()
        with pytest.raises(SessionNotUnlocked):
            operation(seeded_session)

    def test_refused_without_account(self):
        vault = VaultSession()
        with pytest.raises(SessionNotUnlocked):
            vault.generate_master_secret()
        with pytest.raises(SessionNotUnlocked):
            vault.add_wallet()

    def test_add_wallet_requires_master_secret(self, session):
        with pytest.raises(NoMasterSecret):
            session.add_wallet()
        with pytest.raises(NoMasterSecret):
            session.begin_add_wallet()
        with pytest.raises(NoMasterSecret):
            session.master_secret_words()


class TestMasterSecret:

    def test_regeneration_clears_wallets(self, id_factory):
        vault = VaultSession(id_factory=id_factory)
        vault.create_account(PASSWORD)
        old = vault.generate_master_secret()
        vault.add_wallet()
        vault.add_wallet()
        new = vault.generate_master_secret()
        assert len(vault.list_wallets()) == 0
        assert new.phrase != old.phrase
        assert vault.master_secret_words() == new.words
        wallet = vault.get_wallet(vault.add_wallet())
        assert wallet.index == 0

    def test_regeneration_switches_network(self, session):
        solana = next(net for net in PRESET_NETWORKS if net.chain_type == ChainType.SOLANA)
        session.generate_master_secret(network=solana)
        wallet = session.get_wallet(session.add_wallet())
        assert session.network == solana
        assert wallet.is_solana()

    def test_failed_generation_changes_nothing(self, id_factory):
        def broken(num_words):
            raise ValueError("entropy unavailable")

        vault = VaultSession(secret_factory=broken, id_factory=id_factory)
        vault.create_account(PASSWORD)
        with pytest.raises(ValueError):
            vault.generate_master_secret()
        assert not vault.has_master_secret


class TestBackgroundDerivation:

    def test_ticket_round_trip(self, seeded_session):
        ticket = seeded_session.begin_add_wallet()
        wallet = ticket.derive()
        assert seeded_session.complete_add_wallet(ticket, wallet) == ticket.wallet_id
        assert seeded_session.get_wallet(ticket.wallet_id).address == KNOWN_ADDRESS_0
        assert KNOWN_PHRASE not in repr(ticket)

    def test_derive_on_worker_thread(self, seeded_session):
        ticket = seeded_session.begin_add_wallet()
        results = []
        worker = threading.Thread(target=lambda: results.append(ticket.derive()))
        worker.start()
        worker.join()
        seeded_session.complete_add_wallet(ticket, results[0])
        assert len(seeded_session.list_wallets()) == 1

    def test_reserved_index_not_reused(self, seeded_session):
        ticket = seeded_session.begin_add_wallet()
        wallet_id = seeded_session.add_wallet()
        assert seeded_session.get_wallet(wallet_id).index == 1
        seeded_session.complete_add_wallet(ticket, ticket.derive())
        paths = sorted(w.derivation_path for w in seeded_session.list_wallets())
        assert paths == ["m/44'/60'/0'/0/0", "m/44'/60'/0'/0/1"]

    def test_stale_result_dropped_after_regeneration(self, seeded_session):
        ticket = seeded_session.begin_add_wallet()
        wallet = ticket.derive()
        seeded_session.generate_master_secret()
        assert seeded_session.complete_add_wallet(ticket, wallet) is None
        assert len(seeded_session.list_wallets()) == 0

    def test_stale_result_dropped_after_reset(self, seeded_session):
        ticket = seeded_session.begin_add_wallet()
        wallet = ticket.derive()
        seeded_session.reset_all(True)
        seeded_session.create_account(PASSWORD)
        assert seeded_session.complete_add_wallet(ticket, wallet) is None

    def test_result_dropped_when_locked(self, seeded_session):
        ticket = seeded_session.begin_add_wallet()
        seeded_session.lock()
        assert seeded_session.complete_add_wallet(ticket, ticket.derive()) is None


class TestDisclosure:

    def test_reveal_through_session(self, seeded_session):
        wallet_id = seeded_session.add_wallet()
        assert seeded_session.display_value(wallet_id) == KNOWN_KEY_0[:6] + "..." + KNOWN_KEY_0[-4:]
        seeded_session.request_reveal(wallet_id)
        assert seeded_session.confirm_reveal(wallet_id, PASSWORD) == KNOWN_KEY_0
        assert seeded_session.display_value(wallet_id) == KNOWN_KEY_0
        assert seeded_session.masked_view(wallet_id) != KNOWN_KEY_0
        seeded_session.hide(wallet_id)
        assert seeded_session.display_value(wallet_id) != KNOWN_KEY_0

    def test_wrong_password_isolated(self, seeded_session):
        id_a = seeded_session.add_wallet()
        id_b = seeded_session.add_wallet()
        seeded_session.request_reveal(id_b)
        seeded_session.request_reveal(id_a)
        with pytest.raises(InvalidCredential):
            seeded_session.confirm_reveal(id_a, "wrong")
        assert seeded_session.disclosure_state(id_a) == DisclosureState.PENDING_CONFIRMATION
        assert seeded_session.disclosure_state(id_b) == DisclosureState.PENDING_CONFIRMATION
        assert seeded_session.is_unlocked

    def test_unknown_wallet(self, seeded_session):
        with pytest.raises(UnknownWallet):
            seeded_session.request_reveal("missing")
        with pytest.raises(UnknownWallet):
            seeded_session.get_wallet("missing")
        assert seeded_session.hide("missing") == DisclosureState.HIDDEN

    def test_delete_forgets_disclosure(self, seeded_session):
        wallet_id = seeded_session.add_wallet()
        seeded_session.request_reveal(wallet_id)
        seeded_session.delete_wallet(wallet_id)
        assert seeded_session.disclosure_state(wallet_id) == DisclosureState.HIDDEN


class TestReset:

    def test_not_confirmed_is_noop(self, seeded_session):
        seeded_session.add_wallet()
        assert seeded_session.reset_all(lambda: False) is False
        assert seeded_session.reset_all(False) is False
        assert seeded_session.is_unlocked
        assert len(seeded_session.list_wallets()) == 1

    def test_confirmed_from_locked_state(self, seeded_session):
        seeded_session.add_wallet()
        seeded_session.lock()
        assert seeded_session.reset_all(lambda: True) is True
        assert seeded_session.state == SessionState.NO_ACCOUNT
        assert not seeded_session.has_master_secret

    def test_new_account_after_reset(self, seeded_session):
        seeded_session.reset_all(True)
        seeded_session.create_account("wxyz")
        assert not seeded_session.has_master_secret
        assert len(seeded_session.list_wallets()) == 0
        seeded_session.lock()
        with pytest.raises(InvalidCredential):
            seeded_session.authenticate(PASSWORD)


def test_full_scenario():
    vault = VaultSession()
    assert vault.create_account("abcd") == SessionState.UNLOCKED

    secret = vault.generate_master_secret()
    assert isinstance(secret, MasterSecret)
    assert len(vault.master_secret_words()) == 12

    first = vault.add_wallet()
    vault.add_wallet()
    paths = [w.derivation_path for w in vault.list_wallets()]
    assert [p.rsplit("/", 1)[1] for p in paths] == ["0", "1"]

    vault.delete_wallet(first)
    remaining = list(vault.list_wallets())
    assert len(remaining) == 1
    assert remaining[0].derivation_path.endswith("/1")

    assert vault.reset_all(True) is True
    assert vault.state == SessionState.NO_ACCOUNT
    assert not vault.has_master_secret
    vault.create_account("abcd")
    assert len(vault.list_wallets()) == 0
