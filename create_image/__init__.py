# create_image/__init__.py
# create-image: AI image generation w/ provider fallback & template management

__version__ = "0.1.0"
