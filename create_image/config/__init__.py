# create_image/config/__init__.py
# Configuration layer: provider configs, global config & env credential registry
