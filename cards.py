"""Card encoding helpers.

Cards are plain ints packed in the Cactus Kev layout::

    bits  0..7   prime for the rank (2 -> 2, 3 -> 3, ..., A -> 41)
    bits  8..11  rank, 2..14
    bits 12..15  one-hot suit (clubs, diamonds, hearts, spades)
    bits 16..28  one-hot rank bit (bit 16 = deuce, bit 28 = ace)

so rank, suit and the rank-presence bit all come out with a shift and a mask.
"""
from __future__ import annotations

from typing import Iterable, List, Tuple

from errors import InvalidCard

MIN_RANK = 2
MAX_RANK = 14  # ace
NUM_SUITS = 4

PRIMES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41)
RANK_CHARS = "23456789TJQKA"
RANK_NAMES = ("2", "3", "4", "5", "6", "7", "8", "9", "10", "Jack", "Queen", "King", "Ace")
SUIT_CHARS = "cdhs"
SUIT_NAMES = ("Clubs", "Diamonds", "Hearts", "Spades")

CLUBS, DIAMONDS, HEARTS, SPADES = range(NUM_SUITS)


def _check(rank: int, suit: int) -> None:
    if not isinstance(rank, int) or not MIN_RANK <= rank <= MAX_RANK:
        raise InvalidCard(f"Rank must be in {MIN_RANK}..{MAX_RANK}, got {rank!r}")
    if not isinstance(suit, int) or not 0 <= suit < NUM_SUITS:
        raise InvalidCard(f"Suit must be in 0..{NUM_SUITS - 1}, got {suit!r}")


def encode(rank: int, suit: int) -> int:
    """Pack ``(rank, suit)`` into a card int."""
    _check(rank, suit)
    return (
        PRIMES[rank - MIN_RANK]
        | (rank << 8)
        | ((1 << suit) << 12)
        | ((1 << (rank - MIN_RANK)) << 16)
    )


def rank_of(card: int) -> int:
    return (card >> 8) & 0xF


def suit_bits(card: int) -> int:
    return (card >> 12) & 0xF


def suit_of(card: int) -> int:
    # one-hot nibble -> index
    return suit_bits(card).bit_length() - 1


def rank_bit(card: int) -> int:
    """Single bit for the card's rank, bit 0 = deuce."""
    return (card >> 16) & 0x1FFF


def decode(card: int) -> Tuple[int, int]:
    """Unpack a card int into ``(rank, suit)``.

    Raises ``InvalidCard`` when the packed fields do not describe a real card.
    """
    if not isinstance(card, int) or card <= 0:
        raise InvalidCard(f"Not an encoded card: {card!r}")
    rank, suit = rank_of(card), suit_of(card)
    try:
        expected = encode(rank, suit)
    except InvalidCard:
        raise InvalidCard(f"Not an encoded card: {card!r}") from None
    if card != expected:
        raise InvalidCard(f"Not an encoded card: {card!r}")
    return rank, suit


def is_valid(card: int) -> bool:
    try:
        decode(card)
    except InvalidCard:
        return False
    return True


def rank_mask(cards: Iterable[int]) -> int:
    """13-bit rank-presence mask over ``cards``."""
    mask = 0
    for card in cards:
        mask |= card >> 16
    return mask & 0x1FFF


def full_deck() -> List[int]:
    """All 52 cards, suit by suit, deuce to ace within a suit."""
    return [encode(rank, suit) for suit in range(NUM_SUITS) for rank in range(MIN_RANK, MAX_RANK + 1)]


# ---------------------------------------------------------------------------
# Text forms
# ---------------------------------------------------------------------------


def card_to_string(card: int) -> str:
    """Long form, e.g. ``"Ace of Spades"``."""
    rank, suit = decode(card)
    return f"{RANK_NAMES[rank - MIN_RANK]} of {SUIT_NAMES[suit]}"


def short_string(card: int) -> str:
    """Two-character form, e.g. ``"As"``."""
    rank, suit = decode(card)
    return RANK_CHARS[rank - MIN_RANK] + SUIT_CHARS[suit]


def parse_card(text: str) -> int:
    """Parse ``"As"`` / ``"td"`` style text into a card int."""
    if not isinstance(text, str) or len(text) != 2:
        raise InvalidCard(f"Invalid card string: {text!r}")
    rank_char, suit_char = text[0].upper(), text[1].lower()
    if rank_char not in RANK_CHARS or suit_char not in SUIT_CHARS:
        raise InvalidCard(f"Invalid card string: {text!r}")
    return encode(RANK_CHARS.index(rank_char) + MIN_RANK, SUIT_CHARS.index(suit_char))


def parse_cards(text: str) -> List[int]:
    """Parse whitespace separated cards, e.g. ``"As Ks Qs Js Ts"``."""
    return [parse_card(token) for token in text.split()]


def format_cards(cards: Iterable[int]) -> str:
    return " ".join(short_string(card) for card in cards)
