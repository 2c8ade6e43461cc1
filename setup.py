from setuptools import setup, find_packages

setup(
    name="create-image",
    version="0.1.0",
    description="Generate images through AI providers w/ automatic fallback & style templates",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "typer",
        "rich",
        "python-dotenv",
        "httpx",
        "Pillow",
        "PyYAML",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-socket",
        ],
    },
    entry_points={
        "console_scripts": [
            "create-image=create_image.cli.app:app",
        ],
    },
    python_requires=">=3.11",
)
