"""
Services: the thin layer between the check store and the pure core.

Modules
-------
dashboard : load_dashboard(): fetch window, aggregate, recommend.
seeding   : reseed_checks() / seed_demo_project(): synthetic data writes.
"""
