"""Tests for cards and the 52-card deck."""

from __future__ import annotations

import pytest

from house_blackjack.cards import Card, Deck, card_value


@pytest.mark.parametrize(
    ("rank", "expected"),
    [("A", 1), ("2", 2), ("9", 9), ("T", 10), ("J", 10), ("Q", 10), ("K", 10)],
)
def test_card_value(rank: str, expected: int) -> None:
    assert card_value(rank) == expected
    assert Card(rank, "S").value == expected


def test_card_equality_ignores_identity() -> None:
    assert Card("A", "S") == Card("A", "S")
    assert Card("A", "S") != Card("A", "H")
    assert len({Card("K", "D"), Card("K", "D")}) == 1
    assert Card("T", "C").label() == "TC"


def test_full_draw_down_yields_52_distinct_cards() -> None:
    deck = Deck(seed=7)
    deck.shuffle()
    drawn = [deck.deal_next_card() for _ in range(52)]
    assert len(set(drawn)) == 52
    assert {(c.rank, c.suit) for c in drawn} == {(r, s) for r in "23456789TJQKA" for s in "SHDC"}
    assert deck.remaining() == 0


def test_dealing_past_the_end_is_an_error() -> None:
    deck = Deck(seed=1)
    deck.shuffle()
    for _ in range(52):
        deck.deal_next_card()
    with pytest.raises(RuntimeError):
        deck.deal_next_card()


def test_shuffle_resets_cursor() -> None:
    deck = Deck(seed=3)
    deck.shuffle()
    for _ in range(10):
        deck.deal_next_card()
    deck.shuffle()
    assert deck.remaining() == 52
    assert len({deck.deal_next_card() for _ in range(52)}) == 52


def test_seeded_decks_shuffle_identically() -> None:
    a, b = Deck(seed=42), Deck(seed=42)
    a.shuffle()
    b.shuffle()
    assert [a.deal_next_card() for _ in range(52)] == [b.deal_next_card() for _ in range(52)]


def test_shuffle_changes_order_between_rounds() -> None:
    deck = Deck(seed=5)
    deck.shuffle()
    first = [deck.deal_next_card() for _ in range(52)]
    deck.shuffle()
    second = [deck.deal_next_card() for _ in range(52)]
    assert first != second
