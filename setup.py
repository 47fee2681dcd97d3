"""Setup module for Door Security."""
from pathlib import Path
from setuptools import setup, find_packages

PROJECT_DIR = Path(__file__).parent.resolve()

README_FILE = PROJECT_DIR / "README.md"
LONG_DESCRIPTION = README_FILE.read_text(encoding="utf-8")

REQUIRES = [
    "homeassistant>=2025.1.0",
    "voluptuous>=0.13.1",
    "aiohttp>=3.9.0",
]

TEST_REQUIRES = [
    "pytest>=8.0.0",
    "pytest-asyncio>=0.23.0",
    "pytest-homeassistant-custom-component>=0.13.200",
]

setup(
    name="door_security",
    version="1.0.0",
    description="Home Assistant integration for door intrusion detection",
    long_description=LONG_DESCRIPTION,
    long_description_content_type="text/markdown",
    author="Your Name",
    author_email="your.email@example.com",
    url="https://github.com/yourusername/ha-door-security",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.12",
    install_requires=REQUIRES,
    extras_require={"test": TEST_REQUIRES},
    include_package_data=True,
    package_data={"custom_components.door_security": ["*.json", "*.yaml", "translations/*.json"]},
    zip_safe=False,
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Developers",
        "Natural Language :: English",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: Home Automation",
    ],
)
