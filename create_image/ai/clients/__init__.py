# create_image/ai/clients/__init__.py
# Direct image API clients

from .gemini_image_client import GeminiImageClient, build_payload, extract_image_data

__all__ = ["GeminiImageClient", "build_payload", "extract_image_data"]
