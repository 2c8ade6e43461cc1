# create_image/cli/commands/__init__.py
# CLI subcommands (each module registers itself on the root app)
