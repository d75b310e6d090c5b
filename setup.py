"""Setup configuration for the Spamgate comment client."""

from setuptools import setup, find_packages

setup(
    name="spamgate",
    version="0.0.1",
    description="A comment client that gates broadcasts behind an on-device spam classifier",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.11",
    install_requires=[
        "PyYAML",
        "prompt_toolkit",
        "python-dotenv",
        "requests",
        "torch",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    entry_points={
        "console_scripts": [
            "spamgate=spamgate.main:main",
        ],
    },
)
