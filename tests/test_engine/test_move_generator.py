"""Tests for play legality and legal move generation."""

from crazy8_engine.cards import Card, Rank, Suit
from crazy8_engine.move_generator import can_play, generate_legal_moves, playable_cards
from crazy8_engine.moves import ChooseSuit, Draw, PlayCards, ResolveSkip
from crazy8_engine.state import GamePhase, GameState, Side


def _state(hand, active, **kwargs):
    return GameState(
        hands=(tuple(hand), (Card(Rank.KING, Suit.CLUBS),)),
        deck=(Card(Rank.THREE, Suit.CLUBS),),
        active_card=active,
        current_side=Side.PLAYER,
        **kwargs,
    )


class TestCanPlay:
    def test_matching_suit(self):
        assert can_play(Card(Rank.THREE, Suit.HEARTS), Card(Rank.KING, Suit.HEARTS))

    def test_matching_rank(self):
        assert can_play(Card(Rank.KING, Suit.CLUBS), Card(Rank.KING, Suit.HEARTS))

    def test_no_match(self):
        assert not can_play(Card(Rank.THREE, Suit.CLUBS), Card(Rank.KING, Suit.HEARTS))

    def test_eight_always_playable(self):
        for suit in Suit:
            for rank in Rank:
                for wild in (None, *Suit):
                    assert can_play(
                        Card(Rank.EIGHT, suit), Card(rank, Suit.HEARTS), 0, wild
                    )

    def test_two_playable_on_pending_pickup(self):
        two = Card(Rank.TWO, Suit.CLUBS)
        queen = Card(Rank.QUEEN, Suit.SPADES)
        assert not can_play(two, queen, pending_pickup=0)
        assert can_play(two, queen, pending_pickup=5)

    def test_wild_suit_overrides_active_suit(self):
        eight = Card(Rank.EIGHT, Suit.HEARTS)
        assert can_play(Card(Rank.THREE, Suit.SPADES), eight, wild_suit=Suit.SPADES)
        assert not can_play(Card(Rank.THREE, Suit.HEARTS), eight, wild_suit=Suit.SPADES)

    def test_rank_still_matches_under_wild_suit(self):
        active = Card(Rank.EIGHT, Suit.HEARTS)
        assert can_play(Card(Rank.EIGHT, Suit.CLUBS), active, wild_suit=Suit.SPADES)


class TestPlayableCards:
    def test_hand_order_preserved(self):
        a = Card(Rank.NINE, Suit.HEARTS)
        b = Card(Rank.THREE, Suit.CLUBS)
        c = Card(Rank.KING, Suit.SPADES)
        d = Card(Rank.EIGHT, Suit.DIAMONDS)
        state = _state([a, b, c, d], Card(Rank.KING, Suit.HEARTS))
        assert playable_cards(state) == [a, c, d]


class TestGenerateLegalMoves:
    def test_main_phase(self):
        playable = Card(Rank.NINE, Suit.HEARTS)
        unplayable = Card(Rank.THREE, Suit.CLUBS)
        state = _state([playable, unplayable], Card(Rank.KING, Suit.HEARTS))

        moves = generate_legal_moves(state)

        assert moves[0] == Draw()
        assert PlayCards(cards=(playable,)) in moves
        assert PlayCards(cards=(unplayable,)) not in moves
        assert len(moves) == 2

    def test_draw_always_available_in_main(self):
        state = _state([Card(Rank.THREE, Suit.CLUBS)], Card(Rank.KING, Suit.HEARTS))
        assert generate_legal_moves(state) == [Draw()]

    def test_choose_suit_phase(self):
        state = _state(
            [Card(Rank.THREE, Suit.CLUBS)],
            Card(Rank.EIGHT, Suit.HEARTS),
            phase=GamePhase.CHOOSE_SUIT,
        )
        moves = generate_legal_moves(state)
        assert moves == [ChooseSuit(suit=suit) for suit in Suit]

    def test_skip_pending_phase(self):
        state = _state(
            [Card(Rank.THREE, Suit.CLUBS)],
            Card(Rank.FOUR, Suit.HEARTS),
            phase=GamePhase.SKIP_PENDING,
        )
        assert generate_legal_moves(state) == [ResolveSkip()]

    def test_game_over(self):
        state = _state([], Card(Rank.KING, Suit.HEARTS)).with_winner(Side.PLAYER)
        assert generate_legal_moves(state) == []
