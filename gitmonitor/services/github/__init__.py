"""
GitHub integration: REST client, deploy status resolution and remote URL
parsing.
"""
