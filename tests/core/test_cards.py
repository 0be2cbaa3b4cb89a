"""Tests for cards and the replenishing shoe."""

import pytest
from dataclasses import FrozenInstanceError
from random import Random

from blackjack.cards import Card, Shoe, Rank, Suit, build_deck


class TestCard:
    """Tests for the Card value type."""

    def test_fields_and_flags(self):
        card = Card(Rank.ACE, Suit.CLUBS)
        assert (card.rank, card.suit) == (Rank.ACE, Suit.CLUBS)
        assert card.is_ace
        assert not Card(Rank.KING, Suit.CLUBS).is_ace

    def test_cards_are_frozen(self):
        card = Card(Rank.FIVE, Suit.DIAMONDS)
        with pytest.raises(FrozenInstanceError):
            card.rank = Rank.SIX

    @pytest.mark.parametrize(
        "rank, points",
        [(Rank.TWO, 2), (Rank.NINE, 9), (Rank.TEN, 10), (Rank.JACK, 10),
         (Rank.QUEEN, 10), (Rank.KING, 10), (Rank.ACE, 11)],
    )
    def test_points(self, rank, points):
        """Aces count 11 before any reduction; faces count 10."""
        assert Card(rank, Suit.SPADES).value == points

    @pytest.mark.parametrize(
        "text, card",
        [
            ("AS", Card(Rank.ACE, Suit.SPADES)),
            ("2h", Card(Rank.TWO, Suit.HEARTS)),
            ("10D", Card(Rank.TEN, Suit.DIAMONDS)),
            ("TD", Card(Rank.TEN, Suit.DIAMONDS)),
            (" kc ", Card(Rank.KING, Suit.CLUBS)),
            ("Q♦", Card(Rank.QUEEN, Suit.DIAMONDS)),
            ("A♠", Card(Rank.ACE, Suit.SPADES)),
        ],
    )
    def test_parse(self, text, card):
        assert Card.from_string(text) == card

    @pytest.mark.parametrize("text", ["", "A", "1S", "AX", "11H"])
    def test_parse_rejects_malformed(self, text):
        with pytest.raises(ValueError):
            Card.from_string(text)

    def test_str_uses_suit_symbols(self):
        assert str(Card(Rank.ACE, Suit.SPADES)) == "A♠"
        assert str(Card(Rank.TEN, Suit.HEARTS)) == "10♥"

    def test_equal_cards_share_a_hash(self):
        cards = {Card(Rank.ACE, Suit.SPADES), Card(Rank.ACE, Suit.SPADES), Card(Rank.KING, Suit.SPADES)}
        assert len(cards) == 2


class TestShoe:
    """Tests for the Shoe class."""

    def test_build_deck(self):
        """Test that one deck holds 52 distinct cards."""
        cards = build_deck()
        assert len(cards) == 52
        assert len(set(cards)) == 52

    def test_new_shoe_is_full(self):
        """A new shoe is full and not counted as replenished."""
        shoe = Shoe()
        assert len(shoe) == 52
        assert shoe.replenish_count == 0

    def test_shoe_multiple_decks(self):
        """Test multi-deck shoe."""
        shoe = Shoe(num_decks=6)
        assert len(shoe) == 312
        assert shoe.total_cards == 312

    def test_needs_a_deck(self):
        with pytest.raises(ValueError):
            Shoe(num_decks=0)

    def test_shoe_is_shuffled_on_creation(self):
        """Test that a new shoe is not in build order."""
        shoe = Shoe(rng=Random(42))
        assert list(shoe) != build_deck()
        assert set(shoe) == set(build_deck())

    def test_shuffle_is_reproducible_with_seed(self):
        """Test that two shoes with the same seed deal the same cards."""
        shoe1 = Shoe(rng=Random(7))
        shoe2 = Shoe(rng=Random(7))
        assert [shoe1.draw() for _ in range(10)] == [shoe2.draw() for _ in range(10)]

    def test_shuffle_uses_the_injected_rng(self):
        expected = build_deck()
        Random(7).shuffle(expected)
        assert list(Shoe(rng=Random(7))) == expected

    def test_shuffle_keeps_cards(self):
        """Test that shuffling only reorders."""
        shoe = Shoe(rng=Random(1))
        before = sorted(shoe, key=repr)
        shoe.shuffle()
        assert sorted(shoe, key=repr) == before

    def test_draw_pops_one_card(self):
        shoe = Shoe(rng=Random(3))
        card = shoe.draw()
        assert len(shoe) == 51
        assert card not in list(shoe)

    def test_52_draws_are_one_full_deck(self):
        """Test that a full deck is dealt before any replenish."""
        shoe = Shoe(rng=Random(5))
        cards = [shoe.draw() for _ in range(52)]
        assert len(set(cards)) == 52
        assert len(shoe) == 0
        assert shoe.replenish_count == 0

    def test_53_draws_replenish_exactly_once(self):
        """Test that drawing past the end rebuilds the shoe once and never raises."""
        events = []
        shoe = Shoe(rng=Random(5), on_replenish=events.append)

        for _ in range(53):
            shoe.draw()

        assert shoe.replenish_count == 1
        assert events == [shoe]
        assert len(shoe) == 51

    def test_replenish_restores_full_shoe(self):
        """Test explicit replenish."""
        shoe = Shoe(rng=Random(9))
        for _ in range(20):
            shoe.draw()
        shoe.replenish()
        assert len(shoe) == 52
        assert len(set(shoe)) == 52
        assert shoe.replenish_count == 1

    def test_shuffle_moves_every_position(self):
        """Test that the shuffle spreads the first card across the deck."""
        rng = Random(11)
        positions = set()
        for _ in range(300):
            shoe = Shoe(rng=rng)
            positions.add(list(shoe).index(Card(Rank.TWO, Suit.HEARTS)))
        assert len(positions) > 40
