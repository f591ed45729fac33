"""
The note quota under concurrent creates.

best_effort: the check happens at the gate only, so creates authorized
together can overshoot the FREE limit. strict: the service rechecks under a
per-tenant lock and the limit holds.
"""

import threading

import pytest

from notes_api.auth.pipeline import AuthorizationPipeline
from notes_api.core.errors import QuotaExceeded
from notes_api.services.notes import QUOTA_BEST_EFFORT, QUOTA_STRICT, NoteService, TenantLocks


def _fill(store, n):
    for i in range(n):
        store.create_note(tenant_id="t-acme", user_id="u-acme-admin", title=f"n{i}", content="x")


def test_best_effort_lets_interleaved_creates_overshoot(store, credentials, bearer):
    _fill(store, 2)
    pipeline = AuthorizationPipeline(credentials, store)
    svc = NoteService(store, quota_mode=QUOTA_BEST_EFFORT)

    # both requests pass the gate while the count is still 2
    a = pipeline.authorize(bearer("admin@acme.test"), creates_note=True)
    b = pipeline.authorize(bearer("user@acme.test"), creates_note=True)
    svc.create_note(a, "a", "a")
    svc.create_note(b, "b", "b")

    assert store.count_notes_by_tenant("t-acme") == 4


def test_strict_rejects_the_second_interleaved_create(store, credentials, bearer):
    _fill(store, 2)
    pipeline = AuthorizationPipeline(credentials, store)
    svc = NoteService(store, quota_mode=QUOTA_STRICT, locks=TenantLocks())

    a = pipeline.authorize(bearer("admin@acme.test"), creates_note=True)
    b = pipeline.authorize(bearer("user@acme.test"), creates_note=True)
    svc.create_note(a, "a", "a")
    with pytest.raises(QuotaExceeded):
        svc.create_note(b, "b", "b")

    assert store.count_notes_by_tenant("t-acme") == 3


def test_strict_holds_the_limit_under_threads(store, credentials, bearer):
    pipeline = AuthorizationPipeline(credentials, store)
    svc = NoteService(store, quota_mode=QUOTA_STRICT, locks=TenantLocks())
    header = bearer("user@acme.test")
    workers = 12
    barrier = threading.Barrier(workers)
    results: list[str] = []
    results_lock = threading.Lock()

    def worker(i: int) -> None:
        barrier.wait()
        try:
            ctx = pipeline.authorize(header, creates_note=True)
            svc.create_note(ctx, f"t{i}", "c")
            outcome = "created"
        except QuotaExceeded:
            outcome = "rejected"
        with results_lock:
            results.append(outcome)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)

    assert len(results) == workers
    assert results.count("created") == 3
    assert store.count_notes_by_tenant("t-acme") == 3


def test_strict_does_not_block_other_tenants(store, credentials, bearer):
    _fill(store, 3)
    pipeline = AuthorizationPipeline(credentials, store)
    svc = NoteService(store, quota_mode=QUOTA_STRICT, locks=TenantLocks())

    ctx = pipeline.authorize(bearer("user@globex.test"), creates_note=True)
    assert svc.create_note(ctx, "g", "g").tenant_id == "t-globex"
