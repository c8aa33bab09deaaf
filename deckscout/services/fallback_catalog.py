"""
Fallback catalog for offline mode.

A minimal, hand-curated Standard meta used when no meta-data provider
is configured. It is intentionally small: three decks covering the
ramp, aggro and control archetypes, enough to exercise every scoring
factor.
"""

from deckscout.models.deck_profile import (
    Archetype,
    DeckCard,
    DeckProfile,
    KeyCard,
    SignatureCard,
)
from deckscout.services.catalog import StaticDeckCatalog

DOMAIN_RAMP = DeckProfile(
    id="domain-ramp",
    name="Domain Ramp",
    colors=frozenset({"W", "U", "B", "R", "G"}),
    meta_share=18.0,
    archetype=Archetype.RAMP,
    signature_cards=(SignatureCard(name="Leyline of the Guildpact", weight=100),),
    key_cards=(
        KeyCard(name="Up the Beanstalk", weight=80, role="ramp"),
        KeyCard(name="Atraxa, Grand Unifier", weight=90, role="finisher"),
    ),
    expected_curve={
        2: ("Up the Beanstalk",),
        7: ("Atraxa",),
    },
    mainboard=(
        DeckCard(name="Leyline of the Guildpact", quantity=4),
        DeckCard(name="Up the Beanstalk", quantity=4),
        DeckCard(name="Atraxa, Grand Unifier", quantity=3),
        DeckCard(name="Sunfall", quantity=3),
        DeckCard(name="Forest", quantity=2),
    ),
    rank=1,
    strategy="Accelerate mana with domain for big threats",
    weakness="Fast aggro and mana disruption",
)

MONO_RED_AGGRO = DeckProfile(
    id="mono-red-aggro",
    name="Mono Red Aggro",
    colors=frozenset({"R"}),
    meta_share=15.0,
    archetype=Archetype.AGGRO,
    signature_cards=(SignatureCard(name="Monastery Swiftspear", weight=100),),
    key_cards=(
        KeyCard(name="Lightning Bolt", weight=95, role="removal"),
        KeyCard(name="Goblin Guide", weight=90, role="threat"),
    ),
    expected_curve={
        1: ("Monastery Swiftspear", "Goblin Guide"),
        2: ("Lightning Bolt",),
    },
    mainboard=(
        DeckCard(name="Monastery Swiftspear", quantity=4),
        DeckCard(name="Goblin Guide", quantity=4),
        DeckCard(name="Lightning Bolt", quantity=4),
        DeckCard(name="Play with Fire", quantity=4),
        DeckCard(name="Mountain", quantity=20),
    ),
    rank=2,
    strategy="Fast pressure with efficient creatures and burn",
    weakness="Lifegain and board wipes",
)

AZORIUS_CONTROL = DeckProfile(
    id="azorius-control",
    name="Azorius Control",
    colors=frozenset({"W", "U"}),
    meta_share=12.0,
    archetype=Archetype.CONTROL,
    signature_cards=(SignatureCard(name="Teferi, Hero of Dominaria", weight=100),),
    key_cards=(
        KeyCard(name="Counterspell", weight=90, role="counter"),
        KeyCard(name="Supreme Verdict", weight=85, role="removal"),
    ),
    expected_curve={
        2: ("Counterspell",),
        4: ("Supreme Verdict",),
        5: ("Teferi",),
    },
    mainboard=(
        DeckCard(name="Teferi, Hero of Dominaria", quantity=3),
        DeckCard(name="Counterspell", quantity=4),
        DeckCard(name="Supreme Verdict", quantity=3),
        DeckCard(name="Plains", quantity=6),
        DeckCard(name="Island", quantity=8),
    ),
    rank=3,
    strategy="Control the game until win condition",
    weakness="Resilient midrange and hand disruption",
)

FALLBACK_DECKS: tuple[DeckProfile, ...] = (DOMAIN_RAMP, MONO_RED_AGGRO, AZORIUS_CONTROL)


def get_fallback_catalog() -> StaticDeckCatalog:
    """Get a provider serving the fallback decks."""
    return StaticDeckCatalog(FALLBACK_DECKS)
