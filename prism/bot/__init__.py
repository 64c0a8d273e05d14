"""
Discord client, configuration and database setup.
"""
