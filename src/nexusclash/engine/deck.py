from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Protocol, TypeVar

from .types import CardCatalog, CardDefinition

if TYPE_CHECKING:
    from .match import TeamState

T = TypeVar("T")

STARTER_DECK_SIZE = 30
FILLER_CARD_ID = "move_step"


class RandomSource(Protocol):
    """Anything shaped like ``random.Random`` for the calls the engine makes."""

    def shuffle(self, x: list) -> None: ...

    def random(self) -> float: ...


def build_starter_deck(
    cards: CardCatalog,
    deck_size: int = STARTER_DECK_SIZE,
    filler_id: str = FILLER_CARD_ID,
) -> list[CardDefinition]:
    """Expand every definition by its copy limit, then pad with the filler card.

    Each entry is its own object, so two copies of one card never alias.
    The result is unshuffled and may exceed ``deck_size`` if the catalog's
    copy limits alone add up to more.
    """
    if filler_id not in cards.cards:
        raise ValueError(f"Filler card {filler_id!r} is not in the catalog.")
    out: list[CardDefinition] = []
    for card in cards.definitions():
        for _ in range(max(0, card.copies_allowed)):
            out.append(dataclasses.replace(card))
    filler = cards.get(filler_id)
    while len(out) < deck_size:
        out.append(dataclasses.replace(filler))
    return out


def shuffle(items: list[T], rng: RandomSource) -> list[T]:
    """Return a shuffled copy; the input list is left alone."""
    out = list(items)
    rng.shuffle(out)
    return out


def draw_to(hand: list[T], pile: list[T], max_size: int) -> None:
    """Pop from the end of ``pile`` into ``hand`` until it holds ``max_size`` cards.

    Never reshuffles the discard pile.
    """
    while len(hand) < max_size and pile:
        hand.append(pile.pop())


def refresh_round(team: "TeamState", hand_max: int, rng: RandomSource) -> None:
    # Unplayed cards are dropped with the old piles, not carried over.
    team.draw_pile = shuffle(team.deck, rng)
    team.discard = []
    team.hand = []
    draw_to(team.hand, team.draw_pile, hand_max)
