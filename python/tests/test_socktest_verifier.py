"""Tests for the blocking heuristic."""

from __future__ import annotations

from socktest.verifier import BlockingVerifier


def test_fast_call_expected_to_block_is_mismatch(clock):
    mismatches = []
    verifier = BlockingVerifier(threshold=1.0, clock=clock, on_mismatch=mismatches.append)
    verifier.mark_start()
    clock.advance(0.01)
    verdict = verifier.check_against(True)
    assert not verdict.blocked
    assert verdict.mismatch
    assert mismatches == ["API did not block."]


def test_slow_call_expected_not_to_block_is_mismatch(clock):
    mismatches = []
    verifier = BlockingVerifier(threshold=1.0, clock=clock, on_mismatch=mismatches.append)
    verifier.mark_start()
    clock.advance(2.5)
    verdict = verifier.check_against(False)
    assert verdict.blocked
    assert mismatches == ["API did block."]
    assert verifier.last_verdict is verdict


def test_agreement_goes_to_agreement_reporter(clock):
    mismatches, agreements = [], []
    verifier = BlockingVerifier(
        threshold=1.0, clock=clock, on_mismatch=mismatches.append, on_agreement=agreements.append
    )
    verifier.mark_start()
    clock.advance(1.5)
    verifier.check_against(True)
    verifier.mark_start()
    verifier.check_against(False)
    assert mismatches == []
    assert agreements == ["API did block.", "API did not block."]


def test_threshold_is_exclusive(clock):
    verifier = BlockingVerifier(threshold=1.0, clock=clock)
    verifier.mark_start()
    clock.advance(1.0)
    assert not verifier.check_against(False).blocked


def test_check_without_start_counts_as_instant(clock):
    verifier = BlockingVerifier(threshold=1.0, clock=clock)
    verdict = verifier.check_against(False)
    assert verdict.elapsed == 0
    assert not verdict.mismatch
