# Review Menu Bot - Discord Review Collection
# ===========================================
# Customers rate, comment on and pick a product from a per-server menu;
# completed reviews are stored and announced in a review channel.
#
# ARCHITECTURE LAYERS:
# - Domain:         Review flow state machine, models, errors (no I/O)
# - Application:    Session registry, use cases, submission committer
# - Infrastructure: Discord, SQLite, configuration
# - Web:            Liveness endpoint served next to the bot

__version__ = "1.0.0"
