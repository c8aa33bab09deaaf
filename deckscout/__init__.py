"""DeckScout: infer an opponent's deck from the cards they play."""
