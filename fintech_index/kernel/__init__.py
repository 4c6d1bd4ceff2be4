"""
Domain core: models, identity, authorization, stores, verification,
ingestion and notifications.
"""
