"""Tests for game state models."""

from collections import Counter

import pytest

from crazy8_engine.cards import Card, Deck, Rank, Suit, create_deck
from crazy8_engine.state import GamePhase, GameState, Side, create_initial_state


class TestSide:
    def test_other(self):
        assert Side.PLAYER.other == Side.OPPONENT
        assert Side.OPPONENT.other == Side.PLAYER

    def test_label(self):
        assert Side.PLAYER.label == "Player"
        assert Side.OPPONENT.label == "Opponent"


class TestGameState:
    def test_effective_suit_defaults_to_active_card(self):
        state = GameState(
            hands=((Card(Rank.TWO, Suit.CLUBS),), (Card(Rank.THREE, Suit.CLUBS),)),
            deck=(),
            active_card=Card(Rank.NINE, Suit.HEARTS),
        )
        assert state.effective_suit == Suit.HEARTS

    def test_effective_suit_uses_wild_suit(self):
        state = GameState(
            hands=((Card(Rank.TWO, Suit.CLUBS),), (Card(Rank.THREE, Suit.CLUBS),)),
            deck=(),
            active_card=Card(Rank.EIGHT, Suit.HEARTS),
            wild_suit=Suit.SPADES,
        )
        assert state.effective_suit == Suit.SPADES

    def test_current_hand_follows_side(self):
        mine = Card(Rank.TWO, Suit.CLUBS)
        theirs = Card(Rank.THREE, Suit.CLUBS)
        state = GameState(
            hands=((mine,), (theirs,)),
            deck=(),
            active_card=Card(Rank.NINE, Suit.HEARTS),
            current_side=Side.OPPONENT,
        )
        assert state.current_hand == (theirs,)

    def test_check_winner_player_first(self):
        state = GameState(
            hands=((), ()),
            deck=(),
            active_card=Card(Rank.NINE, Suit.HEARTS),
        )
        assert state.check_winner() == Side.PLAYER

    def test_check_winner_none(self):
        state = GameState(
            hands=((Card(Rank.TWO, Suit.CLUBS),), (Card(Rank.THREE, Suit.CLUBS),)),
            deck=(),
            active_card=Card(Rank.NINE, Suit.HEARTS),
        )
        assert state.check_winner() is None
        assert not state.is_game_over

    def test_with_winner_sets_game_over(self):
        state = GameState(
            hands=((), (Card(Rank.THREE, Suit.CLUBS),)),
            deck=(),
            active_card=Card(Rank.NINE, Suit.HEARTS),
        )
        over = state.with_winner(Side.PLAYER)
        assert over.is_game_over
        assert over.phase == GamePhase.GAME_OVER
        assert not state.is_game_over

    def test_with_hand_replaces_one_side(self):
        card = Card(Rank.TWO, Suit.CLUBS)
        state = GameState(
            hands=((), ()),
            deck=(),
            active_card=Card(Rank.NINE, Suit.HEARTS),
        )
        new_state = state.with_hand(Side.OPPONENT, (card,))
        assert new_state.opponent_hand == (card,)
        assert new_state.player_hand == ()

    def test_state_is_immutable(self):
        state = GameState(
            hands=((), ()),
            deck=(),
            active_card=Card(Rank.NINE, Suit.HEARTS),
        )
        with pytest.raises(AttributeError):
            state.pending_pickup = 3


class TestCreateInitialState:
    def test_deal_sizes(self):
        state = create_initial_state(seed=42)
        assert len(state.player_hand) == 8
        assert len(state.opponent_hand) == 8
        assert state.active_card is not None
        assert len(state.deck) == 35
        assert state.discard == ()

    def test_all_52_cards_accounted_for(self):
        state = create_initial_state(seed=42)
        cards = state.all_cards()
        assert len(cards) == 52
        assert len({c.id for c in cards}) == 52
        assert Counter(c.face for c in cards) == Counter(c.face for c in create_deck())

    def test_starts_clean(self):
        state = create_initial_state(seed=42)
        assert state.phase == GamePhase.MAIN
        assert state.pending_pickup == 0
        assert state.wild_suit is None
        assert state.winner is None
        assert state.turn_number == 1

    def test_first_side_can_be_pinned(self):
        assert create_initial_state(seed=1, first_side=Side.OPPONENT).current_side == Side.OPPONENT
        assert create_initial_state(seed=1, first_side=Side.PLAYER).current_side == Side.PLAYER

    def test_first_side_is_random(self):
        sides = {create_initial_state(seed=seed).current_side for seed in range(40)}
        assert sides == {Side.PLAYER, Side.OPPONENT}

    def test_same_seed_same_deal(self):
        state1 = create_initial_state(seed=5)
        state2 = create_initial_state(seed=5)
        assert [c.face for c in state1.player_hand] == [c.face for c in state2.player_hand]
        assert state1.active_card.face == state2.active_card.face

    def test_deals_from_front_of_given_deck(self):
        cards = create_deck()
        state = create_initial_state(deck=Deck(cards), first_side=Side.PLAYER)
        assert state.player_hand == tuple(cards[:8])
        assert state.opponent_hand == tuple(cards[8:16])
        assert state.active_card is cards[16]
        assert state.deck == tuple(cards[17:])

    def test_custom_hand_size(self):
        state = create_initial_state(seed=3, hand_size=5)
        assert len(state.player_hand) == 5
        assert len(state.deck) == 52 - 11

    def test_deck_too_small(self):
        with pytest.raises(ValueError):
            create_initial_state(deck=Deck(create_deck()[:16]))
