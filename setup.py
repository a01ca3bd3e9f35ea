from pathlib import Path
from setuptools import find_packages, setup

HERE = Path(__file__).parent


def _version() -> str:
    for line in (HERE / "src" / "atref" / "__init__.py").read_text(encoding="utf-8").splitlines():
        if line.startswith("__version__"):
            return line.split("=", 1)[1].strip().strip("'\"")
    raise RuntimeError("__version__ not found in src/atref/__init__.py")


setup(
    name="atref",
    version=_version(),
    description="Validator and transclusion compiler for @path/to/file references",
    author="GAHEOS",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_packages(where="src", include=["atref", "atref.*"]),
    install_requires=[
        "networkx>=2.6",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": [
            "atref=atref.cli:main",
        ],
    },
)
