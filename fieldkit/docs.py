"""`fieldkit` invariants and boundaries.

1) `fieldkit` must not import `blueprint_studio.*`.
2) Every transform takes its fieldtype and fieldset registries as explicit
   keyword arguments; there are no module-level registries.
3) `preprocess` assigns `_id` by position; `process` discards `_id`.
4) `fieldkit` does not define concrete fieldtypes, file formats or where
   fieldsets are stored. Applications build registries and pass them in.
"""
