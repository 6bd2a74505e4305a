"""
Single place for default game/setup configuration.
Change DEFAULT_SETUP_ID to switch which board layout is used when creating a new game (when no setup_id is provided).
"""
# Setup id from data/setups/<id>/tiles.json. This is the default for new games.
DEFAULT_SETUP_ID = "standard"
