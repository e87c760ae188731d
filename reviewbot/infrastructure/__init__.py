# Infrastructure Layer
# ====================
# Contains all external service integrations:
# - discord_bot/: discord.py client, slash commands, embeds and components
# - persistence/: SQLite settings and review repository
# - config/: Environment and settings management
#
# This layer can be replaced entirely without affecting domain/application layers.
