"""Project-specific framework utilities.

Typed studio settings and the file formats used to store fieldsets and
blueprints. Concrete fieldtypes live in `blueprint_studio.impl`; the
registries and transforms themselves come from `fieldkit`.
"""
