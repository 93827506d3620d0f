"""
Domain layer: persisted models and the interfaces the services depend on.
"""
