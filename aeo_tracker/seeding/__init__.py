"""
Synthetic data for demos and tests.

Modules
-------
generator : generate_checks() builds seeded 14-day × keyword × engine presence
            checks; pure apart from the injected random source.
"""
