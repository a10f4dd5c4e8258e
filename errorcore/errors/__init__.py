"""
Error taxonomy, structured exceptions, validation bundles and the translator.

Import from the submodules directly, or use the lazy exports of the
top-level `errorcore` package.
"""
