"""Scripted player personas for simulation."""

PERSONAS = {
    "striver": {
        "name": "Striver",
        "alignment": "positive",
        "daily": ["exercise", "exercise", "cook", "drink"],
        "explore": "deepest",
        "rest_clicks": 0,
        "helps": "always",
        "style": "Trains every week, takes the bold option, goes as deep as the map allows.",
    },
    "thinker": {
        "name": "Thinker",
        "alignment": "rational",
        "daily": ["read", "cook", "drink", "rest"],
        "explore": "safest",
        "rest_clicks": 1,
        "helps": "always",
        "style": "Plans, rations, reads. Explores only where it is safe.",
    },
    "slacker": {
        "name": "Slacker",
        "alignment": "slack",
        "daily": ["drink", "cook"],
        "explore": "never",
        "rest_clicks": 1,
        "helps": "never",
        "style": "Lies flat, never leaves the flat, keeps the door shut.",
    },
    "wanderer": {
        "name": "Wanderer",
        "alignment": "random",
        "daily": ["drink", "cook"],
        "explore": "all",
        "rest_clicks": 1,
        "helps": "coin",
        "style": "Picks options on a whim and goes on every expedition that is open.",
    },
    "cat_person": {
        "name": "Cat Person",
        "alignment": "rational",
        "daily": ["playWithCat", "playWithCat", "drink", "cook"],
        "explore": "safest",
        "rest_clicks": 1,
        "helps": "always",
        "style": "Orange comes first. Everything else is negotiable.",
    },
    "sleeper": {
        "name": "Sleeper",
        "alignment": "slack",
        "daily": [],
        "explore": "never",
        "rest_clicks": 10,
        "helps": "never",
        "style": "Never gives up on sleeping. Hits rest until something gives.",
    },
}


def get_persona(persona_name: str) -> dict:
    """Persona settings, falling back to the thinker."""
    return PERSONAS.get(persona_name, PERSONAS["thinker"])
